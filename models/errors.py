"""监测引擎异常类型"""


class MonitorError(Exception):
    """单个检测周期内可恢复的错误基类"""


class InvalidLandmarkSet(MonitorError):
    """关键点数量不是 68"""

    def __init__(self, count: int):
        super().__init__(f"关键点数量错误: 需要 68 个，实际 {count} 个")
        self.count = count


class DegenerateGeometry(MonitorError):
    """眼睛水平跨度为零，无法计算 EAR"""


class DetectorUnavailable(MonitorError):
    """外部检测器调用失败或超时"""
