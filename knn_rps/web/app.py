from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path

from knn_rps.services.api import build_orchestrator, create_app

root = Path(__file__).resolve().parent

orch = build_orchestrator()
app = create_app(orch)

# "/" must be registered before the static mount
@app.get("/", response_class=HTMLResponse)
def index():
    return (root / "templates" / "index.html").read_text(encoding="utf-8")

# serve static files
app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")
