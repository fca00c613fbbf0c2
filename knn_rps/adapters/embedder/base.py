import numpy as np

from knn_rps.orchestrator.errors import NotReady


class EmbedderAdapter:
    """Maps one BGR frame to a fixed-length embedding vector."""

    name = "embedder"

    def __init__(self, status_store):
        self.status = status_store
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def load(self):
        """Load weights / lookup tables. Blocks until the embedder is usable."""
        self._ready = True

    def embed(self, frame_bgr: np.ndarray) -> np.ndarray:
        if not self._ready:
            raise NotReady(f"{self.name}: not loaded")
        return self._embed(frame_bgr)

    def _embed(self, frame_bgr: np.ndarray) -> np.ndarray:
        raise NotImplementedError
