"""检测循环驱动：按固定节奏取帧、检测、计算 EAR、分类并更新会话状态"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import List, Optional, Protocol

import numpy as np

from classifiers.ear_classifier import DEFAULT_EAR_THRESHOLD
from detectors.eye_analyzer import EyeAnalyzer
from models.data_models import DetectionResult, EyeResult, OverlaySnapshot
from models.errors import DetectorUnavailable, MonitorError
from monitor.session import MonitoringSession

logger = logging.getLogger(__name__)


class VideoSource(Protocol):
    @property
    def ready(self) -> bool: ...

    def read(self) -> Optional[np.ndarray]: ...


class Detector(Protocol):
    def detect(self, frame: np.ndarray) -> List[DetectionResult]: ...


class DetectionLoop:
    """
    单线程固定节奏的检测循环。

    周期按 t0 + n * interval 排程；某个周期超时只会推迟下一个周期，周期之间
    不会重叠也不会乱序。任何单周期错误都只记录日志，不会中断循环。
    """

    def __init__(
        self,
        source: VideoSource,
        detector: Detector,
        session: MonitoringSession,
        interval_ms: int = 100,
        ear_threshold: float = DEFAULT_EAR_THRESHOLD,
        detector_timeout_ms: Optional[int] = None,
    ):
        self.source = source
        self.detector = detector
        self.session = session
        self.interval = interval_ms / 1000.0
        self.eye_analyzer = EyeAnalyzer(ear_threshold=ear_threshold)
        self.detector_timeout = (
            detector_timeout_ms / 1000.0 if detector_timeout_ms else None
        )
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: Optional[Future] = None
        self._wake = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._face_present = False

    # ---- 单个周期 ----

    def run_cycle(self) -> Optional[EyeResult]:
        """
        执行一个检测周期。

        Returns:
            本周期的 EyeResult；跳过或出错时返回 None
        """
        if not self.session.active:
            return None

        # 视频源未就绪：整个周期跳过
        if not self.source.ready:
            return None
        frame = self.source.read()
        if frame is None:
            return None

        try:
            detections = self._detect(frame)
        except DetectorUnavailable as e:
            logger.warning("检测器不可用: %s", e)
            self.session.commit(lambda: self.session.overlay.publish(None))
            return None

        if not detections:
            # 人脸丢失时保留之前的 danger 状态
            self._note_face(False)
            self.session.commit(lambda: self.session.overlay.publish(None))
            return None

        first = detections[0]
        try:
            eye_result = self.eye_analyzer.analyze(first.landmarks)
        except MonitorError as e:
            logger.warning("跳过本帧: %s", e)
            return None

        self._note_face(True)

        def apply():
            state = self.session.alerts.update(eye_result.state)
            self.session.overlay.publish(OverlaySnapshot(
                age=round(first.age) if first.age is not None else None,
                gender=first.gender,
                bounding_box=first.bounding_box,
                danger=state.danger,
                ear=eye_result.ear,
            ))

        if not self.session.commit(apply):
            return None
        return eye_result

    def _detect(self, frame: np.ndarray) -> List[DetectionResult]:
        """调用外部检测器，异常或超时统一转换为 DetectorUnavailable"""
        if self.detector_timeout is None:
            try:
                return list(self.detector.detect(frame))
            except Exception as e:
                raise DetectorUnavailable(str(e)) from e

        # 同一时刻最多一个 detect() 在执行
        if self._pending is not None and not self._pending.done():
            raise DetectorUnavailable("上一次检测尚未返回")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="detector")
        future = self._executor.submit(self.detector.detect, frame)
        self._pending = future
        try:
            return list(future.result(timeout=self.detector_timeout))
        except FutureTimeout as e:
            # 卡住的调用结果作废
            raise DetectorUnavailable(
                f"检测超时 ({self.detector_timeout * 1000:.0f} ms)"
            ) from e
        except Exception as e:
            raise DetectorUnavailable(str(e)) from e

    def _note_face(self, present: bool):
        if present and not self._face_present:
            logger.info("检测到人脸")
        elif not present and self._face_present:
            logger.warning("人脸丢失")
        self._face_present = present

    # ---- 定时运行 ----

    def start(self):
        """在后台线程中按固定节奏运行检测循环"""
        if self._thread is not None and self._thread.is_alive():
            return
        if not self.session.active:
            # 已取消的会话不能复用，需要新建会话和检测循环
            logger.warning("会话已取消，检测循环未启动")
            return
        self._wake.clear()
        self._thread = threading.Thread(target=self._run, name="detection-loop", daemon=True)
        self._thread.start()
        logger.info("检测循环已启动，周期 %.0f ms", self.interval * 1000)

    def _run(self):
        next_tick = time.monotonic()
        while self.session.active:
            try:
                self.run_cycle()
            except Exception:
                logger.exception("检测周期异常")

            next_tick += self.interval
            delay = next_tick - time.monotonic()
            if delay < 0:
                # 周期超时，从当前时间重新排程
                next_tick = time.monotonic()
                delay = 0.0
            if self._wake.wait(delay):
                break

    def stop(self, timeout: float = 1.0):
        """取消会话并停止循环；返回后不会再有状态写入"""
        self.session.cancel()
        self._wake.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("检测线程仍在等待检测器返回，其结果将被丢弃")
            self._thread = None
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        self._pending = None
        self.eye_analyzer.reset()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
