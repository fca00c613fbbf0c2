"""MobileNet feature extractor.

Pipeline:
    1. BGR -> RGB, resize to IMAGE_SIZE x IMAGE_SIZE
    2. Scale to [0, 1] and normalise with the ImageNet mean/std of the weights
    3. Run torchvision MobileNetV2 (ImageNet weights) under inference_mode
    4. Return the 1000-d pre-softmax output as the embedding

The pre-softmax logits are what the k-NN classifier compares; the network
itself is never fine-tuned.  Weights are downloaded by torchvision on first
load() and cached under ~/.cache/torch.
"""

from __future__ import annotations

import time

import cv2
import numpy as np
import torch
from torchvision.models import MobileNet_V2_Weights, mobilenet_v2

from knn_rps import settings
from knn_rps.adapters.embedder.base import EmbedderAdapter

_MEAN = np.array([0.485, 0.456, 0.406], dtype=np.float32)
_STD = np.array([0.229, 0.224, 0.225], dtype=np.float32)


class MobileNetEmbedder(EmbedderAdapter):
    name = "mobilenet"

    def __init__(self, status_store, image_size: int | None = None, device: str = "cpu"):
        super().__init__(status_store)
        self.image_size = image_size or settings.IMAGE_SIZE
        self.device = torch.device(device)
        self._model: torch.nn.Module | None = None

    def load(self):
        if self._ready:
            return  # already loaded
        t0 = time.time()
        self.status.log("mobilenet: loading ImageNet weights...")
        model = mobilenet_v2(weights=MobileNet_V2_Weights.DEFAULT)
        model.eval()
        self._model = model.to(self.device)
        self._ready = True
        dt = int((time.time() - t0) * 1000)
        self.status.log(f"mobilenet: ready dt={dt}ms")

    def _preprocess(self, frame_bgr: np.ndarray) -> torch.Tensor:
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        rgb = cv2.resize(rgb, (self.image_size, self.image_size), interpolation=cv2.INTER_LINEAR)
        img = (rgb.astype(np.float32) / 255.0 - _MEAN) / _STD
        # HWC -> NCHW
        tensor = torch.from_numpy(np.ascontiguousarray(img.transpose(2, 0, 1)))
        return tensor.unsqueeze(0).to(self.device)

    def _embed(self, frame_bgr: np.ndarray) -> np.ndarray:
        batch = self._preprocess(frame_bgr)
        try:
            with torch.inference_mode():
                logits = self._model(batch)
            # Detach into numpy so no tensor outlives the cycle
            return logits[0].cpu().numpy().copy()
        finally:
            del batch
