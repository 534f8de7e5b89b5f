"""DisplayRenderer 单元测试"""

import numpy as np
import pytest

from display.renderer import DANGER_COLOR, SAFE_COLOR, DisplayRenderer, format_value
from models.data_models import BoundingBox, OverlaySnapshot


# --------------- helpers ---------------

def _make_frame(w=640, h=480):
    """创建黑色测试帧。"""
    return np.zeros((h, w, 3), dtype=np.uint8)


def _snapshot(danger=False, age=28, gender="female"):
    return OverlaySnapshot(
        age=age, gender=gender,
        bounding_box=BoundingBox(x=200.0, y=150.0, width=200.0, height=180.0),
        danger=danger, ear=0.31,
    )


def _pixel(frame, x, y):
    return tuple(int(c) for c in frame[y, x])


# --------------- format_value tests ---------------

class TestFormatValue:
    def test_two_decimal_places(self):
        assert format_value(0.123456) == "0.12"

    def test_zero(self):
        assert format_value(0.0) == "0.00"

    def test_integer_value(self):
        assert format_value(1.0) == "1.00"


# --------------- render tests ---------------

@pytest.fixture
def renderer():
    return DisplayRenderer()


class TestRender:
    def test_returns_same_shape(self, renderer):
        frame = _make_frame()
        out = renderer.render(frame, _snapshot(), danger=False)
        assert out.shape == frame.shape
        assert out.dtype == frame.dtype

    def test_does_not_modify_input(self, renderer):
        frame = _make_frame()
        renderer.render(frame, _snapshot(), danger=True)
        assert not frame.any()

    def test_no_face_no_danger_leaves_frame_blank(self, renderer):
        out = renderer.render(_make_frame(), None, danger=False)
        assert not out.any()

    def test_safe_box_is_green(self, renderer):
        out = renderer.render(_make_frame(), _snapshot(danger=False), danger=False)
        # 框左边中点
        assert _pixel(out, 200, 240) == SAFE_COLOR

    def test_danger_box_is_red(self, renderer):
        out = renderer.render(_make_frame(), _snapshot(danger=True), danger=True)
        assert _pixel(out, 200, 240) == DANGER_COLOR

    def test_danger_border_without_face(self, renderer):
        """人脸暂时丢失时仍显示危险边框"""
        out = renderer.render(_make_frame(), None, danger=True)
        assert _pixel(out, 0, 240) == DANGER_COLOR

    def test_safe_frame_has_no_danger_border(self, renderer):
        out = renderer.render(_make_frame(), _snapshot(), danger=False)
        assert _pixel(out, 0, 240) != DANGER_COLOR

    def test_unknown_age_gender(self, renderer):
        out = renderer.render(_make_frame(), _snapshot(age=None, gender=None), danger=False)
        assert out.any()

    def test_small_frame(self, renderer):
        out = renderer.render(_make_frame(160, 120), _snapshot(danger=True), danger=True)
        assert out.shape == (120, 160, 3)
