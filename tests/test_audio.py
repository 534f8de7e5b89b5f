"""AudioAlert 单元测试（pygame.mixer 被模拟）"""

from unittest.mock import MagicMock, patch

import pytest

from alerts.audio import AudioAlert


@pytest.fixture
def mock_pygame():
    with patch("alerts.audio.pygame") as pg:
        pg.mixer.get_init.return_value = None
        yield pg


class TestAudioAlert:
    def test_not_playing_before_first_play(self, mock_pygame):
        audio = AudioAlert("assets/beep.wav")
        assert audio.is_playing() is False
        mock_pygame.mixer.init.assert_not_called()

    def test_play_initializes_mixer_and_loads_sound(self, mock_pygame):
        audio = AudioAlert("assets/beep.wav")
        audio.play()
        mock_pygame.mixer.init.assert_called_once()
        mock_pygame.mixer.Sound.assert_called_once_with("assets/beep.wav")
        mock_pygame.mixer.Sound.return_value.play.assert_called_once()

    def test_sound_loaded_once(self, mock_pygame):
        audio = AudioAlert("assets/beep.wav")
        audio.play()
        audio.play()
        assert mock_pygame.mixer.Sound.call_count == 1

    def test_mixer_already_initialized(self, mock_pygame):
        mock_pygame.mixer.get_init.return_value = (22050, -16, 2)
        AudioAlert("assets/beep.wav").play()
        mock_pygame.mixer.init.assert_not_called()

    def test_is_playing_follows_channel(self, mock_pygame):
        channel = MagicMock()
        mock_pygame.mixer.Sound.return_value.play.return_value = channel
        audio = AudioAlert("assets/beep.wav")
        audio.play()

        channel.get_busy.return_value = True
        assert audio.is_playing() is True
        channel.get_busy.return_value = False
        assert audio.is_playing() is False

    def test_no_free_channel(self, mock_pygame):
        mock_pygame.mixer.Sound.return_value.play.return_value = None
        audio = AudioAlert("assets/beep.wav")
        audio.play()
        assert audio.is_playing() is False

    def test_close_stops_channel(self, mock_pygame):
        channel = MagicMock()
        mock_pygame.mixer.Sound.return_value.play.return_value = channel
        audio = AudioAlert("assets/beep.wav")
        audio.play()
        mock_pygame.mixer.get_init.return_value = (22050, -16, 2)
        audio.close()

        channel.stop.assert_called_once()
        mock_pygame.mixer.quit.assert_called_once()
        assert audio.is_playing() is False
