"""几何工具函数"""

import math


def distance(p1, p2) -> float:
    """两点间欧氏距离，点可以是 Point2D 或 (x, y) 元组。"""
    return math.dist(_xy(p1), _xy(p2))


def _xy(p):
    if hasattr(p, "x"):
        return (p.x, p.y)
    return (p[0], p[1])
