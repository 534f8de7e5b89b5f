"""人脸关键点检测模块，基于 MediaPipe FaceMesh，输出 68 点关键点"""

from typing import List, Optional

import cv2
import mediapipe as mp
import numpy as np

from models.data_models import BoundingBox, DetectionResult, Point2D

# FaceMesh 468 点 -> 68 点标注的对应索引
MESH_TO_68_INDICES = [
    # 下颌轮廓 0-16
    127, 234, 93, 132, 58, 136, 150, 176, 152, 400, 379, 365, 288, 361, 323, 454, 356,
    # 眉毛 17-26
    70, 63, 105, 66, 107, 336, 296, 334, 293, 300,
    # 鼻子 27-35
    168, 197, 5, 4, 75, 97, 2, 326, 305,
    # 左眼 36-41
    33, 160, 158, 133, 153, 144,
    # 右眼 42-47
    362, 385, 387, 263, 373, 380,
    # 外唇 48-59
    61, 39, 37, 0, 267, 269, 291, 405, 314, 17, 84, 181,
    # 内唇 60-67
    78, 82, 13, 312, 308, 317, 14, 87,
]

DEFAULT_DETECTOR_OPTIONS = {
    "input_size": 416,
    "score_threshold": 0.5,
}


class FaceDetector:
    """使用 MediaPipe FaceMesh 检测人脸关键点"""

    def __init__(
        self,
        max_num_faces: int = 1,
        detector_options: Optional[dict] = None,
    ):
        """初始化 MediaPipe FaceMesh"""
        options = dict(DEFAULT_DETECTOR_OPTIONS)
        if detector_options:
            options.update(detector_options)
        self.input_size = options["input_size"]
        self.score_threshold = options["score_threshold"]

        self._face_mesh = mp.solutions.face_mesh.FaceMesh(
            max_num_faces=max_num_faces,
            min_detection_confidence=self.score_threshold,
            min_tracking_confidence=0.5,
            refine_landmarks=False,
        )

    def detect(self, frame: np.ndarray) -> List[DetectionResult]:
        """
        检测单帧图像中的人脸。

        Args:
            frame: BGR 格式的 OpenCV 图像帧

        Returns:
            DetectionResult 列表；未检测到人脸时为空列表。
            FaceMesh 不估计年龄性别，age/gender 为 None
        """
        h, w = frame.shape[:2]

        # 缩放到模型输入尺寸，输出为归一化坐标，不影响像素换算
        model_input = self._resize_for_model(frame)

        # BGR -> RGB
        rgb_frame = cv2.cvtColor(model_input, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False

        results = self._face_mesh.process(rgb_frame)

        if not results.multi_face_landmarks:
            return []

        detections = []
        for face in results.multi_face_landmarks:
            mesh = face.landmark
            landmarks = [
                Point2D(mesh[i].x * w, mesh[i].y * h) for i in MESH_TO_68_INDICES
            ]
            detections.append(DetectionResult(
                landmarks=landmarks,
                bounding_box=bounding_box_of(landmarks),
            ))
        return detections

    def _resize_for_model(self, frame: np.ndarray) -> np.ndarray:
        h, w = frame.shape[:2]
        longest = max(h, w)
        if not self.input_size or longest <= self.input_size:
            return frame
        scale = self.input_size / longest
        return cv2.resize(frame, (int(w * scale), int(h * scale)))

    def close(self):
        """释放 MediaPipe 资源"""
        self._face_mesh.close()


def bounding_box_of(points: List[Point2D]) -> BoundingBox:
    """关键点的最小外接矩形。"""
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return BoundingBox(
        x=min(xs),
        y=min(ys),
        width=max(xs) - min(xs),
        height=max(ys) - min(ys),
    )
