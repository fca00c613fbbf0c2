"""
OpenCV webcam capture adapter.
CAMERA_INDEX env var (default 0) selects the webcam device.
"""
import cv2
import numpy as np

from knn_rps import settings
from knn_rps.adapters.camera.base import CameraAdapter


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None, image_size: int | None = None):
        self.status = status_store
        self._index = index if index is not None else settings.CAMERA_INDEX
        self._size = image_size or settings.IMAGE_SIZE
        self._cap = None
        self._playing = False

    def _open(self):
        if self._cap is None or not self._cap.isOpened():
            self._cap = cv2.VideoCapture(self._index)
            if not self._cap.isOpened():
                self.status.log(f"cv2_camera: failed to open device {self._index}")

    def start(self):
        self._open()
        self._playing = self._cap is not None and self._cap.isOpened()
        self.status.log(f"cv2_camera: device {self._index} playing={self._playing}")

    def stop(self):
        self._playing = False
        self.release()
        self.status.log("cv2_camera: paused")

    @property
    def is_playing(self) -> bool:
        return self._playing

    def read_frame(self) -> np.ndarray | None:
        if not self._playing or self._cap is None:
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            return None
        return self._square(frame)

    def _square(self, frame: np.ndarray) -> np.ndarray:
        # Centre square crop, then resize to the extractor's input size
        h, w = frame.shape[:2]
        side = min(h, w)
        y0, x0 = (h - side) // 2, (w - side) // 2
        crop = frame[y0:y0 + side, x0:x0 + side]
        return cv2.resize(crop, (self._size, self._size), interpolation=cv2.INTER_AREA)

    def release(self):
        if self._cap and self._cap.isOpened():
            self._cap.release()
        self._cap = None


def encode_jpeg(frame: np.ndarray, quality: int = 85) -> bytes | None:
    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        return None
    return bytes(buf)
