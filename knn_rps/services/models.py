from pydantic import BaseModel
from typing import Literal, Optional

class ClassStatusOut(BaseModel):
    label: str
    count: int
    confidence: Optional[float] = None
    highlighted: bool = False
    text: str                      # info line shown next to the Train button

class RoundOut(BaseModel):
    player: str
    computer: str
    outcome: Literal["win", "lose", "draw"]
    message: str

class StatusResponse(BaseModel):
    playing: bool
    training: Optional[str] = None
    total_examples: int
    predicted: Optional[str] = None
    classes: list[ClassStatusOut]
    last_round: Optional[RoundOut] = None
    last_error: Optional[str] = None
    logs: list[str]

class OkResponse(BaseModel):
    ok: bool
    error_code: Optional[str] = None
    error: Optional[str] = None

class RoundResponse(BaseModel):
    ok: bool
    round: Optional[RoundOut] = None
    error_code: Optional[str] = None
    message: Optional[str] = None  # "classify first" when no prediction exists yet

class HealthResponse(BaseModel):
    api: bool
    camera_adapter: str
    embedder: str
    embedder_ready: bool
    capture_running: bool
    labels: list[str]
    k: int
