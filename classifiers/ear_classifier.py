"""EAR 阈值分类模块"""

from models.data_models import EyeState

DEFAULT_EAR_THRESHOLD = 0.27


def classify(ear: float, threshold: float = DEFAULT_EAR_THRESHOLD) -> EyeState:
    """
    按阈值将 EAR 值分为睁眼/闭眼。

    Args:
        ear: 双眼平均 EAR 值
        threshold: 闭眼阈值，值越低对半闭眼越不敏感

    Returns:
        ear < threshold 时为 EyeState.CLOSED，否则为 EyeState.OPEN
    """
    if ear < threshold:
        return EyeState.CLOSED
    return EyeState.OPEN
