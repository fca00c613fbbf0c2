"""Mock camera: serves a settable frame (or random noise) for tests and offline runs."""
import numpy as np

from knn_rps import settings
from knn_rps.adapters.camera.base import CameraAdapter


class MockCamera(CameraAdapter):
    def __init__(self, status_store, frame: np.ndarray | None = None, seed: int = 0):
        self.status = status_store
        self.frame = frame
        self.fail = False          # simulate a dropped frame
        self._playing = False
        self._rng = np.random.default_rng(seed)

    def set_frame(self, frame: np.ndarray | None):
        self.frame = frame

    def start(self):
        self._playing = True
        self.status.log("mock_camera: playing")

    def stop(self):
        self._playing = False
        self.status.log("mock_camera: paused")

    @property
    def is_playing(self) -> bool:
        return self._playing

    def read_frame(self) -> np.ndarray | None:
        if not self._playing or self.fail:
            return None
        if self.frame is not None:
            return self.frame.copy()
        size = settings.IMAGE_SIZE
        return self._rng.integers(0, 256, size=(size, size, 3), dtype=np.uint8)
