"""视频源模块：摄像头采集与最新帧缓存"""

import logging
import threading
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class LatestFrameSource:
    """缓存采集线程推送的最新一帧，供检测循环按固定节奏读取"""

    def __init__(self):
        self._lock = threading.Lock()
        self._frame: Optional[np.ndarray] = None

    @property
    def ready(self) -> bool:
        """是否已有可用帧"""
        with self._lock:
            return self._frame is not None

    def push(self, frame: Optional[np.ndarray]) -> None:
        with self._lock:
            self._frame = frame

    def read(self) -> Optional[np.ndarray]:
        with self._lock:
            return self._frame

    def clear(self) -> None:
        self.push(None)


class CameraCapture:
    """打开 OpenCV 摄像头，把读取到的帧推送到 LatestFrameSource"""

    def __init__(self, camera_index: int = 0, source: Optional[LatestFrameSource] = None):
        self.camera_index = camera_index
        self.source = source if source is not None else LatestFrameSource()
        self._cap = None

    def open(self) -> bool:
        """打开摄像头，失败时返回 False"""
        self._cap = cv2.VideoCapture(self.camera_index)
        if not self._cap.isOpened():
            logger.error("无法打开摄像头 %d", self.camera_index)
            self._cap = None
            return False
        logger.info("摄像头 %d 已开启", self.camera_index)
        return True

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def grab(self) -> Optional[np.ndarray]:
        """读取一帧并推送；读取失败返回 None，不覆盖已缓存的帧"""
        if not self.is_open:
            return None
        ret, frame = self._cap.read()
        if not ret:
            return None
        self.source.push(frame)
        return frame

    def release(self) -> None:
        """释放摄像头，清空缓存帧"""
        if self._cap is not None and self._cap.isOpened():
            self._cap.release()
        self._cap = None
        self.source.clear()
