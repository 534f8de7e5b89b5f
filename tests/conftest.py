import sys
import os

# Add project root to sys.path so tests can import from all modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hypothesis import settings

from models.data_models import Point2D

# CI profile: more examples for thorough testing
settings.register_profile("ci", max_examples=200)
# Dev profile: fewer examples for faster iteration
settings.register_profile("dev", max_examples=100)
# Default to dev profile
settings.load_profile("dev")


def _eye_points(x0, cy, ear, width=30.0):
    """6 个眼睛轮廓点，上下点间距为 ear * width，EAR 恰好等于 ear"""
    half = ear * width / 2.0
    return [
        Point2D(x0, cy),
        Point2D(x0 + width / 3, cy - half),
        Point2D(x0 + 2 * width / 3, cy - half),
        Point2D(x0 + width, cy),
        Point2D(x0 + 2 * width / 3, cy + half),
        Point2D(x0 + width / 3, cy + half),
    ]


def build_landmarks(left_ear=0.3, right_ear=None, scale=1.0):
    """生成 68 点关键点，左右眼 EAR 为指定值，其余点落在人脸区域内"""
    if right_ear is None:
        right_ear = left_ear
    points = [Point2D(100.0 + i, 200.0 + (i % 7) * 5) for i in range(68)]
    points[36:42] = _eye_points(110.0, 150.0, left_ear)
    points[42:48] = _eye_points(170.0, 150.0, right_ear)
    return [Point2D(p.x * scale, p.y * scale) for p in points]


class FakeAudio:
    """记录 play 调用次数；is_playing 由测试控制"""

    def __init__(self):
        self.play_count = 0
        self.playing = False

    def play(self):
        self.play_count += 1
        self.playing = True

    def is_playing(self):
        return self.playing
