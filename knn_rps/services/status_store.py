from dataclasses import dataclass, field
from typing import Optional, List
from knn_rps.orchestrator.contracts import LoopSnapshot, RoundResult

@dataclass
class StatusStore:
    playing: bool = False
    training: Optional[str] = None
    snapshot: LoopSnapshot = field(default_factory=LoopSnapshot)
    last_predicted: Optional[str] = None    # read by the round resolver
    last_round: Optional[RoundResult] = None
    last_error: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    def publish(self, snapshot: LoopSnapshot):
        # Whole-object replacement so readers on other threads see one cycle.
        self.snapshot = snapshot
        if snapshot.prediction is not None:
            self.last_predicted = snapshot.prediction.label

    def reset_prediction(self):
        self.last_predicted = None

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]
