"""监测会话：持有单个会话的报警状态、叠加层数据和取消标志"""

import logging
import threading
from typing import Callable, Optional

from alerts.alert_state_machine import AlertStateMachine
from display.overlay import OverlayPublisher
from models.data_models import OverlaySnapshot

logger = logging.getLogger(__name__)


class MonitoringSession:
    """
    每个监测会话一个实例，由调用方创建并传给检测循环。

    所有状态修改都经过 commit()，它与 cancel() 共用一把锁：cancel() 返回后
    任何仍在进行中的检测周期都无法再写入状态。
    """

    def __init__(self, alerts: AlertStateMachine, overlay: Optional[OverlayPublisher] = None):
        self.alerts = alerts
        self.overlay = overlay if overlay is not None else OverlayPublisher()
        self._lock = threading.Lock()
        self._cancelled = threading.Event()

    def start(self):
        """操作员确认开始监测，允许播放报警音"""
        self.alerts.arm()
        logger.info("监测会话已开始")

    def cancel(self):
        """结束会话，之后的 commit() 全部被丢弃"""
        with self._lock:
            self._cancelled.set()
        logger.info("监测会话已结束")

    @property
    def active(self) -> bool:
        return not self._cancelled.is_set()

    def commit(self, mutation: Callable[[], None]) -> bool:
        """
        在会话仍有效时执行状态修改。

        Returns:
            是否实际执行
        """
        with self._lock:
            if self._cancelled.is_set():
                return False
            mutation()
            return True

    @property
    def danger(self) -> bool:
        return self.alerts.state.danger

    def snapshot(self) -> Optional[OverlaySnapshot]:
        return self.overlay.latest()
