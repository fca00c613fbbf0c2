"""
Pytest configuration and shared fixtures for knn-rps tests.

Everything runs offline: MockCamera frames, the HSV histogram embedder and a
ManualScheduler that only advances when a test calls tick().
"""

import os

os.environ.setdefault("CLASS_NAMES", "rock,paper,scissors")
os.environ.setdefault("TOPK", "10")

import numpy as np
import pytest

from knn_rps.adapters.camera.mock_camera import MockCamera
from knn_rps.adapters.embedder.histogram_embedder import HistogramEmbedder
from knn_rps.adapters.knn.classifier import KnnClassifier
from knn_rps.orchestrator.scheduler import ManualScheduler
from knn_rps.orchestrator.state_machine import Orchestrator
from knn_rps.services.status_store import StatusStore

LABELS = ["rock", "paper", "scissors"]

# Solid BGR colours land in distinct hue bins, so their embeddings are orthogonal.
COLOURS = {
    "red": (0, 0, 255),
    "green": (0, 255, 0),
    "blue": (255, 0, 0),
}


def solid_frame(colour: str, size: int = 64) -> np.ndarray:
    frame = np.zeros((size, size, 3), dtype=np.uint8)
    frame[:, :] = COLOURS[colour]
    return frame


class FixedChoice:
    """Stands in for random.Random: always draws the same computer move."""

    def __init__(self, move: str):
        self.move = move
        self.calls = 0

    def choice(self, seq):
        self.calls += 1
        assert self.move in seq
        return self.move


class CountingEmbedder(HistogramEmbedder):
    def __init__(self, status_store):
        super().__init__(status_store)
        self.calls = 0

    def _embed(self, frame_bgr):
        self.calls += 1
        return super()._embed(frame_bgr)


class SpyClassifier(KnnClassifier):
    """Records the total example count every time predict_class is called."""

    def __init__(self, labels, status_store=None):
        super().__init__(labels, status_store)
        self.predict_totals = []

    def predict_class(self, vector, k):
        self.predict_totals.append(self.num_examples)
        return super().predict_class(vector, k)


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def camera(status):
    return MockCamera(status, frame=solid_frame("red"))


@pytest.fixture
def embedder(status):
    return CountingEmbedder(status)


@pytest.fixture
def classifier(status):
    return SpyClassifier(LABELS, status_store=status)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def rng():
    return FixedChoice("scissors")


@pytest.fixture
def orch(camera, embedder, classifier, status, scheduler, rng):
    return Orchestrator(
        camera=camera,
        embedder=embedder,
        classifier=classifier,
        status_store=status,
        scheduler=scheduler,
        rng=rng,
        k=10,
    )


@pytest.fixture
def make_frame():
    return solid_frame
