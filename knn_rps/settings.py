import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=os.getenv("KNN_RPS_ENV", ".env"), override=False)

CLASS_NAMES = [c.strip() for c in os.getenv("CLASS_NAMES", "rock,paper,scissors").split(",") if c.strip()]
TOPK = int(os.getenv("TOPK", "10"))
# Webcam image size fed to the extractor
IMAGE_SIZE = int(os.getenv("IMAGE_SIZE", "227"))
CAPTURE_FPS = float(os.getenv("CAPTURE_FPS", "30"))

CAMERA_ADAPTER = os.getenv("CAMERA_ADAPTER", "cv2").lower()
CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))
EMBEDDER = os.getenv("EMBEDDER", "mobilenet").lower()

# Leave ROUND_SEED unset for a fresh computer move sequence every run.
_seed = os.getenv("ROUND_SEED", "").strip()
ROUND_SEED = int(_seed) if _seed else None

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
