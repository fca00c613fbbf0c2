"""
Run the web demo.

Usage:
    python -m knn_rps.scripts.serve
    CAMERA_ADAPTER=mock EMBEDDER=histogram python -m knn_rps.scripts.serve   # no webcam / no torch weights
"""

import uvicorn

from knn_rps import settings


def main():
    print(f"knn-rps starting on http://localhost:{settings.PORT}")
    uvicorn.run("knn_rps.web.app:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
