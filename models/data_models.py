"""核心数据模型定义"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class Point2D:
    """单个人脸关键点（帧像素坐标）"""
    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    """人脸包围盒"""
    x: float
    y: float
    width: float
    height: float


class EyeState(Enum):
    """眼睛状态"""
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class DetectionResult:
    """单张人脸的检测结果，landmarks 为 68 点关键点"""
    landmarks: List[Point2D]
    bounding_box: BoundingBox
    age: Optional[int] = None
    gender: Optional[str] = None


@dataclass
class EyeResult:
    """眼睛分析结果"""
    ear: float
    state: EyeState
    frame_count: int = 0


@dataclass
class AlertState:
    """报警状态，每个监测会话一份"""
    danger: bool = False
    audio_playing: bool = False


@dataclass(frozen=True)
class OverlaySnapshot:
    """供渲染读取的最新一帧结果"""
    age: Optional[int]
    gender: Optional[str]
    bounding_box: BoundingBox
    danger: bool
    ear: float = field(default=0.0)
