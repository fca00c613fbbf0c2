import random
import threading
from fastapi import FastAPI, Response
from knn_rps import settings
from knn_rps.services.models import (
    ClassStatusOut, RoundOut, StatusResponse, OkResponse, RoundResponse, HealthResponse,
)
from knn_rps.services.status_store import StatusStore
from knn_rps.orchestrator import errors
from knn_rps.orchestrator.contracts import CLASS_NAMES, ClassStatus, RoundResult
from knn_rps.orchestrator.scheduler import ThreadScheduler
from knn_rps.orchestrator.state_machine import Orchestrator
from knn_rps.adapters.camera.cv2_camera import encode_jpeg
from knn_rps.adapters.knn.classifier import KnnClassifier


def build_orchestrator(status: StatusStore | None = None) -> Orchestrator:
    """Wire adapters from settings (CAMERA_ADAPTER, EMBEDDER, ...)."""
    status = status or StatusStore()

    # Camera adapter: cv2 | mock  (default: cv2)
    if settings.CAMERA_ADAPTER == "mock":
        from knn_rps.adapters.camera.mock_camera import MockCamera
        camera = MockCamera(status)
    else:
        from knn_rps.adapters.camera.cv2_camera import CV2Camera
        camera = CV2Camera(status)
    status.log(f"camera adapter: {type(camera).__name__}")

    # Embedder: mobilenet | histogram  (default: mobilenet)
    if settings.EMBEDDER == "histogram":
        from knn_rps.adapters.embedder.histogram_embedder import HistogramEmbedder
        embedder = HistogramEmbedder(status)
    else:
        from knn_rps.adapters.embedder.mobilenet_embedder import MobileNetEmbedder
        embedder = MobileNetEmbedder(status)
    status.log(f"embedder: {type(embedder).__name__}")

    classifier = KnnClassifier(CLASS_NAMES, status_store=status)
    rng = random.Random(settings.ROUND_SEED)
    return Orchestrator(
        camera=camera,
        embedder=embedder,
        classifier=classifier,
        status_store=status,
        scheduler=ThreadScheduler(settings.CAPTURE_FPS),
        rng=rng,
        k=settings.TOPK,
    )


def _round_out(rr: RoundResult | None) -> RoundOut | None:
    if rr is None:
        return None
    return RoundOut(player=rr.player, computer=rr.computer, outcome=rr.outcome.value, message=rr.message)


def create_app(orch: Orchestrator, boot_on_startup: bool = True) -> FastAPI:
    app = FastAPI(title="knn-rps")
    status = orch.status
    app.state.orchestrator = orch

    @app.on_event("startup")
    def _startup():
        if not boot_on_startup:
            return

        def _boot():
            try:
                orch.boot()
            except Exception as e:
                status.last_error = f"{type(e).__name__}: {e}"
                status.log(f"boot: error {type(e).__name__}: {e}")

        # Weights may need downloading; API answers NOT_READY meanwhile
        threading.Thread(target=_boot, name="boot", daemon=True).start()

    @app.on_event("shutdown")
    def _shutdown():
        if orch.loop.running:
            orch.stop()

    @app.get("/status", response_model=StatusResponse)
    def get_status():
        snap = status.snapshot
        # Before the first published cycle, show the bare counts
        rows = snap.rows or [
            ClassStatus(label=label, count=count)
            for label, count in orch.classifier.count_by_class().items()
        ]
        rows_out = [
            ClassStatusOut(label=r.label, count=r.count, confidence=r.confidence,
                           highlighted=r.highlighted, text=r.text)
            for r in rows
        ]
        return StatusResponse(
            playing=status.playing,
            training=status.training,
            total_examples=sum(r.count for r in rows_out),
            predicted=snap.prediction.label if snap.prediction else None,
            classes=rows_out,
            last_round=_round_out(status.last_round),
            last_error=status.last_error,
            logs=status.logs,
        )

    @app.post("/train/end", response_model=OkResponse)
    def train_end():
        orch.end_train()
        return OkResponse(ok=True)

    @app.post("/train/{label}/begin", response_model=OkResponse)
    def train_begin(label: str):
        try:
            orch.begin_train(label)
        except ValueError as e:
            status.log(f"TRAIN rejected: {e}")
            return OkResponse(ok=False, error_code=errors.ERR_UNKNOWN_LABEL, error=str(e))
        return OkResponse(ok=True)

    @app.post("/play_round", response_model=RoundResponse)
    def play_round():
        try:
            rr = orch.play_round()
        except errors.InvalidState:
            return RoundResponse(ok=False, error_code=errors.ERR_INVALID_STATE, message="classify first")
        except ValueError as e:
            status.log(f"PLAY_ROUND error: {e}")
            return RoundResponse(ok=False, error_code=errors.ERR_UNKNOWN, message=str(e))
        return RoundResponse(ok=True, round=_round_out(rr), message=rr.message)

    @app.post("/capture/start", response_model=OkResponse)
    def capture_start():
        try:
            orch.start()
        except errors.NotReady as e:
            status.log(f"CAPTURE_START rejected: {e}")
            return OkResponse(ok=False, error_code=e.code, error=str(e))
        return OkResponse(ok=True)

    @app.post("/capture/stop", response_model=OkResponse)
    def capture_stop():
        orch.stop()
        return OkResponse(ok=True)

    @app.delete("/examples", response_model=OkResponse)
    def clear_all():
        orch.clear()
        return OkResponse(ok=True)

    @app.delete("/examples/{label}", response_model=OkResponse)
    def clear_label(label: str):
        try:
            orch.clear(label)
        except ValueError as e:
            return OkResponse(ok=False, error_code=errors.ERR_UNKNOWN_LABEL, error=str(e))
        return OkResponse(ok=True)

    @app.get("/frame.jpg")
    def latest_frame():
        frame = orch.loop.last_frame
        data = encode_jpeg(frame) if frame is not None else None
        if data is None:
            return Response(status_code=503)
        return Response(content=data, media_type="image/jpeg",
                        headers={"Cache-Control": "no-store"})

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(
            api=True,
            camera_adapter=type(orch.camera).__name__,
            embedder=orch.embedder.name,
            embedder_ready=orch.embedder.ready,
            capture_running=orch.loop.running,
            labels=orch.labels,
            k=orch.loop.k,
        )

    return app
