"""
HSV histogram embedder.

Pipeline:
  1. Centre crop (drops most of the background around the hand)
  2. HSV H+S 2-D histogram, min-max normalised
  3. Flatten to a H_BINS * S_BINS vector

No model download, ~1ms per frame. Good enough to separate hand shapes held
against a steady background, and deterministic, so tests can rely on it.
"""
import cv2
import numpy as np

from knn_rps.adapters.embedder.base import EmbedderAdapter

H_BINS, S_BINS = 36, 32
HIST_SIZE = [H_BINS, S_BINS]
HIST_RANGES = [0, 180, 0, 256]
CHANNELS = [0, 1]
EMBED_DIM = H_BINS * S_BINS


def _center_crop(img, ratio=0.7):
    h, w = img.shape[:2]
    ch, cw = max(1, int(h * ratio)), max(1, int(w * ratio))
    y0, x0 = (h - ch) // 2, (w - cw) // 2
    return img[y0:y0+ch, x0:x0+cw]


def _compute_hist(bgr_img):
    hsv = cv2.cvtColor(bgr_img, cv2.COLOR_BGR2HSV)
    hist = cv2.calcHist([hsv], CHANNELS, None, HIST_SIZE, HIST_RANGES)
    cv2.normalize(hist, hist, 0, 1, cv2.NORM_MINMAX)
    return hist


class HistogramEmbedder(EmbedderAdapter):
    name = "histogram"

    def __init__(self, status_store, crop_ratio: float = 0.7):
        super().__init__(status_store)
        self.crop_ratio = crop_ratio

    def load(self):
        super().load()
        self.status.log(f"histogram: ready dim={EMBED_DIM}")

    def _embed(self, frame_bgr: np.ndarray) -> np.ndarray:
        region = _center_crop(frame_bgr, ratio=self.crop_ratio)
        return _compute_hist(region).astype(np.float32).ravel()
