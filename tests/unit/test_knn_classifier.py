"""Unit tests for the online k-NN classifier."""

import numpy as np
import pytest

from knn_rps.adapters.knn.classifier import KnnClassifier
from knn_rps.orchestrator.errors import NoExamples

LABELS = ["rock", "paper", "scissors"]


def onehot(i: int, dim: int = 8) -> np.ndarray:
    v = np.zeros(dim, dtype=np.float32)
    v[i] = 1.0
    return v


@pytest.fixture
def knn():
    return KnnClassifier(LABELS)


def test_empty_counts(knn):
    assert knn.count_by_class() == {"rock": 0, "paper": 0, "scissors": 0}
    assert knn.num_examples == 0
    assert knn.num_classes == 0


def test_count_by_class_idempotent(knn):
    knn.add_example(onehot(0), "rock")
    assert knn.count_by_class() == knn.count_by_class()


def test_add_example_monotonic(knn):
    knn.add_example(onehot(0), "paper")
    before = knn.count_by_class()
    knn.add_example(onehot(1), "rock")
    after = knn.count_by_class()
    assert after["rock"] == before["rock"] + 1
    assert after["paper"] == before["paper"]
    assert after["scissors"] == before["scissors"]
    assert knn.num_classes == 2


def test_add_example_unknown_label(knn):
    with pytest.raises(ValueError):
        knn.add_example(onehot(0), "lizard")


def test_predict_without_examples(knn):
    with pytest.raises(NoExamples) as exc:
        knn.predict_class(onehot(0), 10)
    assert exc.value.code == "NO_EXAMPLES"


def test_predict_rejects_non_positive_k(knn):
    knn.add_example(onehot(0), "rock")
    with pytest.raises(ValueError):
        knn.predict_class(onehot(0), 0)


def test_predict_single_example(knn):
    knn.add_example(onehot(0), "rock")
    res = knn.predict_class(onehot(3), 10)
    assert res.label == "rock"
    # k is clipped to the number of examples
    assert res.confidences == {"rock": 1.0, "paper": 0.0, "scissors": 0.0}


def test_predict_majority_vote(knn):
    for _ in range(3):
        knn.add_example(onehot(0), "rock")
    for _ in range(3):
        knn.add_example(onehot(1), "paper")
    knn.add_example(onehot(2), "scissors")

    res = knn.predict_class(onehot(1), 3)
    assert res.label == "paper"
    assert res.confidences["paper"] == pytest.approx(1.0)

    res = knn.predict_class(onehot(0) + 0.1 * onehot(2), 4)
    assert res.label == "rock"
    assert res.confidences["rock"] == pytest.approx(0.75)
    assert res.confidences["scissors"] == pytest.approx(0.25)
    assert sum(res.confidences.values()) == pytest.approx(1.0)


def test_tie_goes_to_first_label(knn):
    knn.add_example(onehot(0), "scissors")
    knn.add_example(onehot(0), "paper")
    res = knn.predict_class(onehot(0), 2)
    assert res.confidences["paper"] == res.confidences["scissors"] == 0.5
    assert res.label == "paper"


def test_index_refreshes_after_add(knn):
    knn.add_example(onehot(0), "rock")
    assert knn.predict_class(onehot(1), 1).label == "rock"
    knn.add_example(onehot(1), "paper")
    assert knn.predict_class(onehot(1), 1).label == "paper"


def test_clear_class(knn):
    knn.add_example(onehot(0), "rock")
    knn.add_example(onehot(1), "paper")
    knn.clear_class("rock")
    assert knn.count_by_class() == {"rock": 0, "paper": 1, "scissors": 0}
    assert knn.predict_class(onehot(0), 10).label == "paper"


def test_clear_all(knn):
    knn.add_example(onehot(0), "rock")
    knn.clear_all()
    assert knn.num_examples == 0
    with pytest.raises(NoExamples):
        knn.predict_class(onehot(0), 10)
