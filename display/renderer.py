"""界面渲染模块 - 在视频帧上绘制人脸框、年龄性别面板和报警提示。"""

from typing import Optional

import cv2
import numpy as np

from models.data_models import OverlaySnapshot

# BGR 颜色
DANGER_COLOR = (0, 0, 255)
SAFE_COLOR = (0, 255, 0)
PANEL_COLOR = (255, 255, 0)


def format_value(v: float) -> str:
    """格式化浮点数为两位小数字符串。"""
    return f"{v:.2f}"


class DisplayRenderer:
    """读取最新的叠加层快照和危险标志，绘制到视频帧上。"""

    def __init__(self, line_width: int = 3):
        self.line_width = line_width

    def render(
        self,
        frame: np.ndarray,
        snapshot: Optional[OverlaySnapshot],
        danger: bool,
    ) -> np.ndarray:
        """渲染检测结果到视频帧，返回渲染后的帧图像。"""
        output = frame.copy()

        if snapshot is not None:
            self._draw_box(output, snapshot)
            self._draw_panels(output, snapshot)

        # 报警提示只看危险标志，人脸暂时丢失时仍保持
        if danger:
            self._draw_danger_warning(output)
        elif snapshot is not None:
            self._draw_safe_badge(output)

        return output

    def _draw_box(self, frame: np.ndarray, snapshot: OverlaySnapshot) -> None:
        """绘制人脸框，颜色随危险状态变化。"""
        box = snapshot.bounding_box
        color = DANGER_COLOR if snapshot.danger else SAFE_COLOR
        top_left = (int(box.x), int(box.y))
        bottom_right = (int(box.x + box.width), int(box.y + box.height))
        cv2.rectangle(frame, top_left, bottom_right, color, self.line_width)

    @staticmethod
    def _draw_panels(frame: np.ndarray, snapshot: OverlaySnapshot) -> None:
        """在左上角绘制年龄、性别和 EAR。"""
        lines = []
        if snapshot.age is not None:
            lines.append(f"AGE: {snapshot.age}")
        if snapshot.gender is not None:
            lines.append(f"GENDER: {snapshot.gender.upper()}")
        lines.append(f"EAR: {format_value(snapshot.ear)}")

        y = 30
        for text in lines:
            cv2.putText(
                frame, text, (10, y),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, PANEL_COLOR, 2,
            )
            y += 30

    @staticmethod
    def _draw_danger_warning(frame: np.ndarray) -> None:
        """红色边框 + 画面中央红色警告文字。"""
        h, w = frame.shape[:2]
        cv2.rectangle(frame, (0, 0), (w - 1, h - 1), DANGER_COLOR, 8)

        warning = "WAKE UP! EYES CLOSED!"
        font_scale = 1.2
        thickness = 3
        (text_w, text_h), _ = cv2.getTextSize(
            warning, cv2.FONT_HERSHEY_SIMPLEX, font_scale, thickness
        )
        x = max(0, (w - text_w) // 2)
        y = (h + text_h) // 2
        cv2.putText(
            frame, warning, (x, y),
            cv2.FONT_HERSHEY_SIMPLEX, font_scale, DANGER_COLOR, thickness,
        )

    @staticmethod
    def _draw_safe_badge(frame: np.ndarray) -> None:
        """右下角绿色 DRIVER SAFE 标识。"""
        h, w = frame.shape[:2]
        text = "DRIVER SAFE"
        (text_w, _), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.7, 2)
        cv2.putText(
            frame, text, (max(0, w - text_w - 15), h - 15),
            cv2.FONT_HERSHEY_SIMPLEX, 0.7, SAFE_COLOR, 2,
        )
