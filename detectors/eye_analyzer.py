"""眼睛状态分析模块，负责从 68 点关键点计算 EAR 值并判断闭眼状态"""

from typing import Sequence

from classifiers.ear_classifier import DEFAULT_EAR_THRESHOLD, classify
from detectors.geometry import distance
from models.data_models import EyeResult, EyeState
from models.errors import DegenerateGeometry, InvalidLandmarkSet

LANDMARK_COUNT = 68

# 68 点标注中的眼睛轮廓索引，顺序为 p1..p6
LEFT_EYE_INDICES = [36, 37, 38, 39, 40, 41]
RIGHT_EYE_INDICES = [42, 43, 44, 45, 46, 47]


def calculate_eye_ear(eye_points: Sequence) -> float:
    """
    计算单只眼睛的 EAR 值。

    公式: EAR = (|p2-p6| + |p3-p5|) / (2 * |p1-p4|)

    Args:
        eye_points: 6 个眼睛轮廓关键点

    Returns:
        EAR 值

    Raises:
        DegenerateGeometry: 水平距离 |p1-p4| 为零
    """
    p1, p2, p3, p4, p5, p6 = eye_points

    vertical_1 = distance(p2, p6)
    vertical_2 = distance(p3, p5)
    horizontal = distance(p1, p4)

    if horizontal == 0.0:
        raise DegenerateGeometry("眼睛水平跨度为零")

    return (vertical_1 + vertical_2) / (2.0 * horizontal)


def compute_ear(landmarks: Sequence) -> float:
    """
    计算双眼平均 EAR 值。

    Args:
        landmarks: 68 个人脸关键点

    Raises:
        InvalidLandmarkSet: 关键点数量不是 68
        DegenerateGeometry: 任一只眼睛水平跨度为零
    """
    if len(landmarks) != LANDMARK_COUNT:
        raise InvalidLandmarkSet(len(landmarks))

    left_ear = calculate_eye_ear([landmarks[i] for i in LEFT_EYE_INDICES])
    right_ear = calculate_eye_ear([landmarks[i] for i in RIGHT_EYE_INDICES])
    return (left_ear + right_ear) / 2.0


class EyeAnalyzer:
    """计算 EAR 值并分类，维护连续闭眼帧计数器"""

    def __init__(self, ear_threshold: float = DEFAULT_EAR_THRESHOLD):
        """初始化阈值和帧计数器"""
        self.ear_threshold = ear_threshold
        self._frame_counter = 0

    def analyze(self, landmarks: Sequence) -> EyeResult:
        """
        分析双眼状态。

        EAR 计算失败时抛出异常，帧计数器保持不变。

        Returns:
            EyeResult(ear, state, frame_count)
        """
        ear = compute_ear(landmarks)
        state = classify(ear, self.ear_threshold)

        if state is EyeState.CLOSED:
            self._frame_counter += 1
        else:
            self._frame_counter = 0

        return EyeResult(ear=ear, state=state, frame_count=self._frame_counter)

    def reset(self):
        """重置帧计数器"""
        self._frame_counter = 0
