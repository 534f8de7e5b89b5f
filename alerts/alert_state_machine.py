"""报警状态机：把逐帧眼睛状态转换为危险标志并驱动报警音"""

import logging

from models.data_models import AlertState, EyeState

logger = logging.getLogger(__name__)


class AlertStateMachine:
    """
    SAFE / DANGER 两状态机，初始为 SAFE。

    每帧按眼睛状态电平触发：闭眼即 DANGER，睁眼即 SAFE。consec_frames 大于 1
    时需连续闭眼达到该帧数才进入 DANGER（默认 1 帧，即无防抖）。

    DANGER 期间仅在已 arm 且音频未在播放时调用 play()，保证同一时刻最多
    一个报警音。回到 SAFE 时不主动停止音频。
    """

    def __init__(self, audio, consec_frames: int = 1):
        self.audio = audio
        self.consec_frames = max(1, consec_frames)
        self.armed = False
        self.state = AlertState()
        self._closed_frames = 0

    def arm(self):
        """操作员确认开始后才允许播放报警音"""
        self.armed = True

    def update(self, eye_state: EyeState) -> AlertState:
        """
        根据本帧眼睛状态更新危险标志，必要时播放报警音。

        Returns:
            更新后的 AlertState
        """
        if eye_state is EyeState.CLOSED:
            self._closed_frames += 1
        else:
            self._closed_frames = 0

        danger = self._closed_frames >= self.consec_frames
        if danger != self.state.danger:
            if danger:
                logger.warning("进入 DANGER：检测到闭眼")
            else:
                logger.info("恢复 SAFE：睁眼")
        self.state.danger = danger

        playing = self.audio.is_playing()
        if danger and self.armed and not playing:
            try:
                self.audio.play()
                playing = True
                logger.info("播放报警音")
            except Exception as e:
                # 音频设备不可用时危险标志照常生效
                logger.warning("报警音播放失败: %s", e)
                playing = False
        self.state.audio_playing = playing

        return self.state

    def reset(self):
        """回到 SAFE，不影响正在播放的音频"""
        self._closed_frames = 0
        self.state.danger = False
