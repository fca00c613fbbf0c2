"""
Capture loop: one cycle per scheduler tick.

Cycle:
  1. apply queued events (BeginTrain / EndTrain / ClearExamples)
  2. camera not playing      -> no-op
  3. no frame                -> NoFrame, contained in tick(), retried next tick
  4. embed the frame, only if training or the classifier holds examples
  5. training                -> add_example(embedding, label)
  6. any examples            -> predict_class(embedding, k)
  7. publish counts + highlighted prediction to the status store
  8. drop the embedding before returning, on every path

Training happens-before prediction within a cycle.  Only this loop writes the
example set; HTTP handlers queue events instead of touching it.  A cycle and
any event application off the loop thread hold the same lock.
"""
import queue
import threading

from knn_rps import settings
from knn_rps.orchestrator.contracts import (
    BeginTrain, ClassStatus, ClearExamples, EndTrain, LoopSnapshot,
)
from knn_rps.orchestrator import errors
from knn_rps.orchestrator.errors import NoFrame, NotReady


class CaptureLoop:
    def __init__(self, camera, embedder, classifier, status_store, scheduler, k: int | None = None):
        self.camera = camera
        self.embedder = embedder
        self.classifier = classifier
        self.status = status_store
        self.scheduler = scheduler
        self.k = k or settings.TOPK
        self.training: str | None = None
        self.last_frame = None
        self.cycles = 0
        self._events: queue.SimpleQueue = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._task = None
        self._frame_ok = True
        self._predicting = False

    # ── Lifecycle ───────────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self):
        if not self.embedder.ready:
            raise NotReady("feature extractor not loaded; start after boot")
        if self._task is not None:
            self.stop()
        self.camera.start()
        self.status.playing = self.camera.is_playing
        self._task = self.scheduler.call_repeatedly(self.tick)
        self.status.log(f"capture_loop: started k={self.k}")

    def stop(self):
        task = self._task
        if task is not None:
            task.cancel()
        self._task = None
        self.camera.stop()
        self.status.playing = False
        self.status.log("capture_loop: stopped")
        # Nobody ticks now: apply anything still queued on the caller's thread.
        with self._lock:
            self._drain_events()

    # ── Events ──────────────────────────────────────────────────────────────

    def submit(self, event):
        self._events.put(event)
        if not self.running:
            with self._lock:
                self._drain_events()

    def _drain_events(self):
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return
            self._apply(event)

    def _apply(self, event):
        if isinstance(event, BeginTrain):
            self.training = event.label
            self.status.log(f"capture_loop: train begin '{event.label}'")
        elif isinstance(event, EndTrain):
            if self.training is not None:
                self.status.log(f"capture_loop: train end '{self.training}'")
            self.training = None
        elif isinstance(event, ClearExamples):
            if event.label is None:
                self.classifier.clear_all()
            else:
                self.classifier.clear_class(event.label)
            predicted = self.status.last_predicted
            if predicted is None or self.classifier.count_by_class().get(predicted, 0) == 0:
                self.status.reset_prediction()
            self._publish(None, keep_rows=True)
        self.status.training = self.training

    # ── Cycle ───────────────────────────────────────────────────────────────

    def tick(self):
        with self._lock:
            try:
                self._cycle()
            except NoFrame:
                if self._frame_ok:
                    self.status.log("capture_loop: no frame, retrying next tick")
                self._frame_ok = False
            except Exception as e:
                code = getattr(e, "code", errors.ERR_UNKNOWN)
                self.status.last_error = f"{type(e).__name__}: {e}"
                self.status.log(f"capture_loop: cycle error [{code}] {type(e).__name__}: {e}")

    def _cycle(self):
        self._drain_events()
        self.cycles += 1
        self.status.playing = self.camera.is_playing
        if not self.camera.is_playing:
            return

        frame = self.camera.read_frame()
        if frame is None:
            raise NoFrame("camera returned no frame")
        if not self._frame_ok:
            self.status.log("capture_loop: frames flowing again")
        self._frame_ok = True
        self.last_frame = frame

        training = self.training
        if training is None and self.classifier.num_examples == 0:
            return

        embedding = None
        try:
            embedding = self.embedder.embed(frame)
            if training is not None:
                self.classifier.add_example(embedding, training)

            prediction = None
            if sum(self.classifier.count_by_class().values()) > 0:
                prediction = self.classifier.predict_class(embedding, self.k)
                if not self._predicting:
                    self.status.log(f"capture_loop: first prediction '{prediction.label}'")
                    self._predicting = True
            self._publish(prediction)
        finally:
            del embedding

    def _publish(self, prediction, keep_rows: bool = False):
        counts = self.classifier.count_by_class()
        previous = {}
        if keep_rows:
            previous = {r.label: r for r in self.status.snapshot.rows}
        rows = []
        for label in self.classifier.labels:
            count = counts.get(label, 0)
            row = ClassStatus(label=label, count=count)
            if prediction is not None:
                row.confidence = prediction.confidences.get(label)
                row.highlighted = prediction.label == label
            elif count > 0 and label in previous:
                # Rows of untouched labels keep their last reading until the next cycle.
                row.confidence = previous[label].confidence
                row.highlighted = previous[label].highlighted and self.status.last_predicted == label
            rows.append(row)
        if prediction is None and self.status.last_predicted is None:
            self._predicting = False
        self.status.publish(LoopSnapshot(counts=counts, prediction=prediction, rows=rows))
