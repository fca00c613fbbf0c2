from abc import ABC, abstractmethod

import numpy as np


class CameraAdapter(ABC):
    @abstractmethod
    def start(self):
        """Begin playback. is_playing turns True once frames flow."""
        ...

    @abstractmethod
    def stop(self):
        ...

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        ...

    @abstractmethod
    def read_frame(self) -> np.ndarray | None:
        """Return one BGR frame, or None when no usable frame is available."""
        ...
