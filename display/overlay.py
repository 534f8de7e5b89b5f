"""叠加层数据发布模块"""

import threading
from typing import Optional

from models.data_models import OverlaySnapshot


class OverlayPublisher:
    """保存最新一帧的叠加层数据，后写覆盖先写，不保留历史"""

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot: Optional[OverlaySnapshot] = None

    def publish(self, snapshot: Optional[OverlaySnapshot]) -> None:
        """替换当前快照；None 表示当前未检测到人脸"""
        with self._lock:
            self._snapshot = snapshot

    def latest(self) -> Optional[OverlaySnapshot]:
        with self._lock:
            return self._snapshot
