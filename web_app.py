"""Flask Web 前端 - 闭眼报警系统"""

import datetime
import logging
import threading
import time

import cv2
from flask import Flask, Response, jsonify, request

from alerts.alert_state_machine import AlertStateMachine
from alerts.audio import AudioAlert
from camera.frame_source import CameraCapture
from detectors.face_detector import FaceDetector
from display.renderer import DisplayRenderer
from monitor.config import MonitorConfig
from monitor.detection_loop import DetectionLoop
from monitor.session import MonitoringSession

app = Flask(__name__)


class WebDetectionSystem:
    """Web 版检测系统，支持 MJPEG 视频流推送和实时数据 API。"""

    MAX_LOG_ENTRIES = 200

    def __init__(self, config=None):
        self.config = config if config is not None else MonitorConfig()
        self._running = False
        self._lock = threading.Lock()
        self._latest_frame = None
        self._logs = []
        self._log_lock = threading.Lock()
        self._prev_state = {"danger": False, "face_detected": False}
        self._capture_thread = None

        self.camera = None
        self.face_detector = None
        self.audio = AudioAlert(self.config.alert_sound)
        self.session = None
        self.loop = None
        self.renderer = DisplayRenderer()

    def _new_session(self):
        """每次开始监测创建新的会话和检测循环。"""
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

    def start(self):
        """启动摄像头、采集线程和检测循环。"""
        if self._running:
            return True
        self.camera = CameraCapture(self.config.camera_index)
        if not self.camera.open():
            self._add_log("danger", "无法打开摄像头")
            return False
        if self.face_detector is None:
            self.face_detector = FaceDetector(
                max_num_faces=self.config.max_num_faces,
                detector_options=self.config.detector_options,
            )

        self._new_session()
        # 用户点击开始即视为授权播放报警音
        self.session.start()
        self._running = True
        self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._capture_thread.start()
        self.loop.start()
        self._add_log("info", "系统启动，摄像头已开启")
        return True

    def stop(self):
        """停止检测。"""
        if not self._running:
            return
        self._running = False
        self.loop.stop()
        if self._capture_thread is not None:
            self._capture_thread.join(timeout=1.0)
            self._capture_thread = None
        self.camera.release()
        with self._lock:
            self._latest_frame = None
        self._prev_state = {"danger": False, "face_detected": False}
        self._add_log("info", "系统已停止")

    def _capture_loop(self):
        """后台采集循环：读取摄像头帧，叠加最新检测结果并编码为 JPEG。"""
        while self._running:
            frame = self.camera.grab()
            if frame is None:
                time.sleep(0.01)
                continue

            rendered = self.renderer.render(
                frame, self.session.snapshot(), self.session.danger,
            )
            _, jpeg = cv2.imencode(".jpg", rendered, [cv2.IMWRITE_JPEG_QUALITY, 80])
            with self._lock:
                self._latest_frame = jpeg.tobytes()

            self._check_state_changes(self.get_data())

    def _add_log(self, level, message):
        """添加一条系统日志。level: info / warning / danger"""
        entry = {
            "time": datetime.datetime.now().strftime("%H:%M:%S"),
            "level": level,
            "message": message,
        }
        with self._log_lock:
            self._logs.append(entry)
            if len(self._logs) > self.MAX_LOG_ENTRIES:
                self._logs = self._logs[-self.MAX_LOG_ENTRIES:]

    def _check_state_changes(self, data):
        """检测状态变化并记录日志。"""
        prev = self._prev_state

        if data.get("face_detected") and not prev.get("face_detected"):
            self._add_log("info", "检测到人脸")
        elif not data.get("face_detected") and prev.get("face_detected"):
            self._add_log("warning", "人脸丢失")

        if data.get("danger") and not prev.get("danger"):
            self._add_log("danger", f"⚠️ 闭眼报警！(EAR={data.get('ear', 0):.2f})")
        elif not data.get("danger") and prev.get("danger"):
            self._add_log("info", "睁眼恢复")

        self._prev_state = {
            "danger": data.get("danger", False),
            "face_detected": data.get("face_detected", False),
        }

    def get_logs(self, since=0):
        """获取日志，since 为起始索引。"""
        with self._log_lock:
            return self._logs[since:], len(self._logs)

    def get_frame(self):
        with self._lock:
            return self._latest_frame

    def get_data(self):
        """当前叠加层快照和危险标志。"""
        if self.session is None:
            return {"running": False, "danger": False, "face_detected": False}

        snapshot = self.session.snapshot()
        data = {
            "running": self._running,
            "danger": self.session.danger,
            "audio_playing": self.session.alerts.state.audio_playing,
            "face_detected": snapshot is not None,
        }
        if snapshot is not None:
            box = snapshot.bounding_box
            data.update({
                "age": snapshot.age,
                "gender": snapshot.gender,
                "ear": round(snapshot.ear, 4),
                "box": {"x": box.x, "y": box.y, "width": box.width, "height": box.height},
            })
        return data

    def update_config(self, data):
        """动态更新阈值配置，周期和检测器参数在下次启动时生效。"""
        self.config.update(data)
        if self.session is not None:
            # 与检测周期共用会话锁，已停止的会话不再修改
            self.session.commit(self._apply_thresholds)
        self._add_log("info", f"配置已更新: EAR 阈值 {self.config.ear_threshold}")

    def _apply_thresholds(self):
        self.loop.eye_analyzer.ear_threshold = self.config.ear_threshold
        self.loop.eye_analyzer.reset()
        self.session.alerts.consec_frames = max(1, self.config.consec_frames)


# 全局检测系统实例
system = WebDetectionSystem()


# ---- Flask 路由 ----

@app.route("/api/start", methods=["POST"])
def api_start():
    ok = system.start()
    return jsonify({"success": ok, "message": "摄像头启动成功" if ok else "无法打开摄像头"})


@app.route("/api/stop", methods=["POST"])
def api_stop():
    system.stop()
    return jsonify({"success": True, "message": "检测已停止"})


@app.route("/api/data")
def api_data():
    return jsonify(system.get_data())


@app.route("/api/config", methods=["POST"])
def api_config():
    data = request.get_json(force=True)
    system.update_config(data)
    return jsonify({"success": True, "message": "配置已更新"})


@app.route("/api/logs")
def api_logs():
    since = request.args.get("since", 0, type=int)
    logs, total = system.get_logs(since)
    return jsonify({"logs": logs, "total": total})


@app.route("/video_feed")
def video_feed():
    def generate():
        while True:
            frame = system.get_frame()
            if frame is not None:
                yield (b"--frame\r\nContent-Type: image/jpeg\r\n\r\n" + frame + b"\r\n")
            else:
                time.sleep(0.03)
    return Response(generate(), mimetype="multipart/x-mixed-replace; boundary=frame")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(host="0.0.0.0", port=5000, debug=False, threaded=True)
