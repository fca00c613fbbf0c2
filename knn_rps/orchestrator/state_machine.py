import random
import time

from knn_rps.orchestrator.capture_loop import CaptureLoop
from knn_rps.orchestrator.contracts import BeginTrain, ClearExamples, EndTrain, RoundResult
from knn_rps.orchestrator.errors import InvalidState, NotReady
from knn_rps.orchestrator.rounds import play_round


class Orchestrator:
    """Owns the game: capture loop lifecycle, training input and rounds.

    Capture:  Idle (camera paused) <-> Active (camera playing), via start/stop
    Training: None -> Label(l) -> None, via begin_train/end_train
    """

    def __init__(self, camera, embedder, classifier, status_store, scheduler,
                 rng: random.Random | None = None, k: int | None = None):
        self.camera = camera
        self.embedder = embedder
        self.classifier = classifier
        self.status = status_store
        self.labels = list(classifier.labels)
        self.rng = rng or random.Random()
        self.loop = CaptureLoop(camera, embedder, classifier, status_store, scheduler, k=k)

    def boot(self, autostart: bool = True):
        """Load the extractor, then start capturing. Capture never starts before load finishes."""
        t0 = time.time()
        self.status.log(f"boot: loading {self.embedder.name}")
        self.embedder.load()
        dt = int((time.time() - t0) * 1000)
        self.status.log(f"boot: {self.embedder.name} ready dt={dt}ms")
        if autostart:
            self.start()

    def start(self):
        if not self.embedder.ready:
            raise NotReady(f"{self.embedder.name} not loaded")
        self.loop.start()

    def stop(self):
        self.loop.stop()

    # ── Training input ──────────────────────────────────────────────────────

    def begin_train(self, label: str):
        if label not in self.labels:
            raise ValueError(f"unknown label '{label}'")
        self.loop.submit(BeginTrain(label))

    def end_train(self):
        self.loop.submit(EndTrain())

    def clear(self, label: str | None = None):
        if label is not None and label not in self.labels:
            raise ValueError(f"unknown label '{label}'")
        self.loop.submit(ClearExamples(label))

    # ── Rounds ──────────────────────────────────────────────────────────────

    def play_round(self) -> RoundResult:
        player = self.status.last_predicted
        try:
            result = play_round(player, self.rng, self.labels)
        except InvalidState:
            self.status.log("round: rejected, no prediction yet (classify first)")
            raise
        self.status.last_round = result
        self.status.log(
            f"round: player={result.player} computer={result.computer} -> {result.outcome.value}"
        )
        return result
