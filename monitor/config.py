"""监测参数配置：JSON 配置文件覆盖默认值"""

import json
import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

# 默认参数
DEFAULTS = {
    "ear_threshold": 0.27,
    "detection_cadence_ms": 100,
    "detector_options": {"input_size": 416, "score_threshold": 0.5},
    "consec_frames": 1,
    "detector_timeout_ms": None,
    "alert_sound": "assets/beep.wav",
    "camera_index": 0,
    "max_num_faces": 1,
}


@dataclass
class MonitorConfig:
    """监测会话参数"""
    ear_threshold: float = DEFAULTS["ear_threshold"]
    detection_cadence_ms: int = DEFAULTS["detection_cadence_ms"]
    detector_options: dict = field(default_factory=lambda: dict(DEFAULTS["detector_options"]))
    consec_frames: int = DEFAULTS["consec_frames"]
    detector_timeout_ms: Optional[int] = DEFAULTS["detector_timeout_ms"]
    alert_sound: str = DEFAULTS["alert_sound"]
    camera_index: int = DEFAULTS["camera_index"]
    max_num_faces: int = DEFAULTS["max_num_faces"]

    @classmethod
    def from_dict(cls, data: dict) -> "MonitorConfig":
        """用字典中的值覆盖默认值，None 和未知字段忽略"""
        config = cls()
        config.update(data)
        return config

    def update(self, data: dict) -> None:
        for key in DEFAULTS:
            value = data.get(key)
            if value is None:
                continue
            if key == "detector_options":
                # 按键合并，允许只覆盖其中一项
                self.detector_options.update(
                    {k: v for k, v in value.items() if v is not None}
                )
            else:
                setattr(self, key, value)


def load_config(config_path: Optional[str] = None) -> MonitorConfig:
    """从 JSON 配置文件加载参数，缺失字段使用默认值。"""
    if config_path is None:
        return MonitorConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("配置文件不存在 %s，使用默认参数", config_path)
        return MonitorConfig()
    except json.JSONDecodeError:
        logger.warning("配置文件格式错误 %s，使用默认参数", config_path)
        return MonitorConfig()

    return MonitorConfig.from_dict(data)
