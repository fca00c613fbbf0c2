from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from knn_rps import settings

CLASS_NAMES: List[str] = list(settings.CLASS_NAMES)


class Outcome(str, Enum):
    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"


@dataclass(frozen=True)
class BeginTrain:
    label: str


@dataclass(frozen=True)
class EndTrain:
    pass


@dataclass(frozen=True)
class ClearExamples:
    label: Optional[str] = None   # None clears every class


@dataclass
class PredictionResult:
    label: str                              # e.g. "rock"
    confidences: Dict[str, float]           # label -> votes / k, every label present


@dataclass
class ClassStatus:
    label: str
    count: int
    confidence: Optional[float] = None
    highlighted: bool = False

    @property
    def text(self) -> str:
        if self.count <= 0:
            return " No examples added"
        conf = self.confidence if self.confidence is not None else 0.0
        return f" {self.count} examples - {conf * 100}%"


@dataclass
class LoopSnapshot:
    counts: Dict[str, int] = field(default_factory=dict)
    prediction: Optional[PredictionResult] = None
    rows: List[ClassStatus] = field(default_factory=list)

    @property
    def total_examples(self) -> int:
        return sum(self.counts.values())


@dataclass
class RoundResult:
    player: str
    computer: str
    outcome: Outcome
    message: str
