"""闭眼报警系统入口文件"""

import argparse
import logging
import sys

import cv2

from alerts.alert_state_machine import AlertStateMachine
from alerts.audio import AudioAlert
from camera.frame_source import CameraCapture
from detectors.face_detector import FaceDetector
from display.renderer import DisplayRenderer
from monitor.config import load_config
from monitor.detection_loop import DetectionLoop
from monitor.session import MonitoringSession

WINDOW_NAME = "Eye Closure Monitor"


class DetectionSystem:
    """闭眼报警系统主程序：摄像头采集和画面显示在主线程，检测循环在后台线程。"""

    def __init__(self, config_path=None, armed=False):
        self.config = load_config(config_path)

        self.camera = CameraCapture(self.config.camera_index)
        self.face_detector = FaceDetector(
            max_num_faces=self.config.max_num_faces,
            detector_options=self.config.detector_options,
        )
        self.audio = AudioAlert(self.config.alert_sound)
        self.session = MonitoringSession(
            AlertStateMachine(self.audio, consec_frames=self.config.consec_frames)
        )
        self.loop = DetectionLoop(
            self.camera.source,
            self.face_detector,
            self.session,
            interval_ms=self.config.detection_cadence_ms,
            ear_threshold=self.config.ear_threshold,
            detector_timeout_ms=self.config.detector_timeout_ms,
        )
        self.renderer = DisplayRenderer()

        if armed:
            self.session.start()

    def run(self):
        """打开摄像头并启动检测循环。"""
        if not self.camera.open():
            print("无法打开摄像头")
            sys.exit(1)

        self.loop.start()
        try:
            self._main_loop()
        finally:
            self.stop()

    def _main_loop(self):
        """采集和显示主循环：按 s 开始报警，按 q 退出。"""
        while True:
            frame = self.camera.grab()
            if frame is None:
                continue

            rendered = self.renderer.render(
                frame, self.session.snapshot(), self.session.danger,
            )
            if not self.session.alerts.armed:
                cv2.putText(
                    rendered, "PRESS S TO START ALERTS", (10, rendered.shape[0] - 15),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2,
                )

            cv2.imshow(WINDOW_NAME, rendered)

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            if key == ord("s") and not self.session.alerts.armed:
                self.session.start()

    def stop(self):
        """停止检测循环，释放摄像头、窗口、检测器和音频资源。"""
        self.loop.stop()
        self.camera.release()
        cv2.destroyAllWindows()
        self.face_detector.close()
        self.audio.close()


def main():
    parser = argparse.ArgumentParser(description="闭眼报警系统")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON 参数配置文件路径",
    )
    parser.add_argument(
        "--armed",
        action="store_true",
        help="启动后立即允许播放报警音（默认需按 s 确认）",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    system = DetectionSystem(config_path=args.config, armed=args.armed)
    system.run()


if __name__ == "__main__":
    main()
