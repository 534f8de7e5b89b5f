"""报警音频模块，基于 pygame.mixer"""

import logging
from typing import Optional

import pygame

logger = logging.getLogger(__name__)


class AudioAlert:
    """播放报警提示音，记录当前播放通道以便查询是否仍在播放"""

    def __init__(self, sound_path: str):
        self.sound_path = sound_path
        self._sound: Optional[pygame.mixer.Sound] = None
        self._channel: Optional[pygame.mixer.Channel] = None

    def _load(self) -> pygame.mixer.Sound:
        """首次播放时初始化 mixer 并加载音频文件"""
        if self._sound is None:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            self._sound = pygame.mixer.Sound(self.sound_path)
            logger.info("报警音频已加载: %s", self.sound_path)
        return self._sound

    def play(self) -> None:
        """播放一次报警音"""
        self._channel = self._load().play()

    def is_playing(self) -> bool:
        """报警音是否仍在播放"""
        return self._channel is not None and bool(self._channel.get_busy())

    def close(self) -> None:
        """停止播放并释放 mixer"""
        if self._channel is not None:
            self._channel.stop()
            self._channel = None
        if pygame.mixer.get_init():
            pygame.mixer.quit()
        self._sound = None
