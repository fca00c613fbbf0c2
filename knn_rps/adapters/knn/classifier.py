"""
Online k-NN classifier over embedding vectors.

Examples are appended as they arrive; the scikit-learn index is rebuilt
lazily on the next predict after any change.  Similarity is cosine, the
prediction is a majority vote among the k nearest stored examples:

  k_eff          = min(k, number of examples)
  confidence[L]  = votes for L / k_eff
  label          = most votes, ties go to the label listed first
"""
from typing import Sequence

import numpy as np
from sklearn.neighbors import NearestNeighbors

from knn_rps.orchestrator.contracts import PredictionResult
from knn_rps.orchestrator.errors import NoExamples


class KnnClassifier:
    def __init__(self, labels: Sequence[str], status_store=None):
        self.labels = list(labels)
        self.status = status_store
        self._vectors: dict[str, list[np.ndarray]] = {label: [] for label in self.labels}
        self._index: NearestNeighbors | None = None
        self._index_labels: np.ndarray | None = None
        self._dirty = True

    # ── Examples ────────────────────────────────────────────────────────────

    def add_example(self, vector: np.ndarray, label: str):
        if label not in self._vectors:
            raise ValueError(f"unknown label '{label}'")
        self._vectors[label].append(np.asarray(vector, dtype=np.float32).ravel().copy())
        self._dirty = True

    def count_by_class(self) -> dict[str, int]:
        return {label: len(vs) for label, vs in self._vectors.items()}

    @property
    def num_examples(self) -> int:
        return sum(len(vs) for vs in self._vectors.values())

    @property
    def num_classes(self) -> int:
        """Number of labels holding at least one example."""
        return sum(1 for vs in self._vectors.values() if vs)

    def clear_class(self, label: str):
        if label not in self._vectors:
            raise ValueError(f"unknown label '{label}'")
        self._vectors[label] = []
        self._dirty = True
        self._log(f"knn: cleared '{label}'")

    def clear_all(self):
        for label in self.labels:
            self._vectors[label] = []
        self._dirty = True
        self._log("knn: cleared all classes")

    # ── Prediction ──────────────────────────────────────────────────────────

    def predict_class(self, vector: np.ndarray, k: int) -> PredictionResult:
        if k < 1:
            raise ValueError("k must be a positive integer")
        n = self.num_examples
        if n == 0:
            raise NoExamples("no examples added to the classifier")
        if self._dirty:
            self._rebuild()

        k_eff = min(k, n)
        query = np.asarray(vector, dtype=np.float32).reshape(1, -1)
        _, idx = self._index.kneighbors(query, n_neighbors=k_eff)
        neighbours = self._index_labels[idx[0]]

        votes = {label: 0 for label in self.labels}
        for label in neighbours:
            votes[str(label)] += 1
        best = max(self.labels, key=lambda label: (votes[label], -self.labels.index(label)))
        confidences = {label: votes[label] / k_eff for label in self.labels}
        return PredictionResult(label=best, confidences=confidences)

    def _rebuild(self):
        vectors, owners = [], []
        for label in self.labels:
            vectors.extend(self._vectors[label])
            owners.extend([label] * len(self._vectors[label]))
        self._index = NearestNeighbors(metric="cosine", algorithm="brute")
        self._index.fit(np.stack(vectors, axis=0))
        self._index_labels = np.array(owners)
        self._dirty = False

    def _log(self, msg: str):
        if self.status is not None:
            self.status.log(msg)
