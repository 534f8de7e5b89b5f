"""Tests for main.py DetectionSystem - wiring, arming and shutdown."""

import json
from unittest.mock import MagicMock, patch

import pytest

from main import DetectionSystem

PATCH_TARGET = "detectors.face_detector.mp.solutions.face_mesh.FaceMesh"


@pytest.fixture
def mock_mesh():
    with patch(PATCH_TARGET) as mock_mesh_cls:
        yield mock_mesh_cls


class TestDetectionSystemInit:
    """Test DetectionSystem initialization."""

    def test_default_init(self, mock_mesh):
        system = DetectionSystem()
        assert system.loop.interval == pytest.approx(0.1)
        assert system.loop.eye_analyzer.ear_threshold == 0.27
        assert system.session.alerts.consec_frames == 1
        assert system.loop.source is system.camera.source
        assert system.loop.detector is system.face_detector

    def test_not_armed_by_default(self, mock_mesh):
        system = DetectionSystem()
        assert system.session.alerts.armed is False

    def test_armed_flag(self, mock_mesh):
        system = DetectionSystem(armed=True)
        assert system.session.alerts.armed is True

    def test_init_with_config(self, mock_mesh, tmp_path):
        cfg = {
            "ear_threshold": 0.26,
            "detection_cadence_ms": 250,
            "consec_frames": 4,
            "detector_options": {"score_threshold": 0.8},
            "alert_sound": "custom.wav",
        }
        cfg_file = tmp_path / "test_config.json"
        cfg_file.write_text(json.dumps(cfg), encoding="utf-8")

        system = DetectionSystem(config_path=str(cfg_file))
        assert system.loop.eye_analyzer.ear_threshold == 0.26
        assert system.loop.interval == pytest.approx(0.25)
        assert system.session.alerts.consec_frames == 4
        assert system.face_detector.score_threshold == 0.8
        assert system.audio.sound_path == "custom.wav"


class TestDetectionSystemRun:
    def test_camera_failure_exits(self, mock_mesh, capsys):
        system = DetectionSystem()
        system.camera.open = MagicMock(return_value=False)
        with pytest.raises(SystemExit):
            system.run()
        assert "无法打开摄像头" in capsys.readouterr().out


class TestDetectionSystemStop:
    """Test DetectionSystem.stop method."""

    @patch("main.cv2.destroyAllWindows")
    def test_stop_without_camera(self, mock_destroy, mock_mesh):
        """stop() should not raise even if camera was never opened."""
        system = DetectionSystem()
        with patch.object(system.audio, "close") as mock_close:
            system.stop()
        mock_close.assert_called_once()
        assert system.session.active is False
        mock_mesh.return_value.close.assert_called_once()
