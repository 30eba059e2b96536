# Boundary Regression Learning Loop - HTTP API
# Exposes a training session over HTTP so a browser, notebook or another
# service can step the model and fetch the points to draw.
#
# WHAT THE API PROVIDES:
# 1. Session creation with validated settings (domain size, learning rate, stride, seed)
# 2. An explicit /step endpoint: the caller decides the cadence, the server never trains on its own
# 3. Pause/resume, mirroring the pause key of a desktop visualizer
# 4. Read-only endpoints for the model state, the ground truth and the predicted line
# 5. Logging for monitoring system behavior

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
import logging
import math
import threading
from typing import List, Optional

from boundary_session import BoundarySession
from prediction_sampler import ModelDivergedError
from visualizer_config import MAX_EPOCHS_PER_STEP, ConfigurationError, load_settings

# ============================================================================
# SECTION 1: LOGGING SETUP (Production Monitoring)
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================================================
# SECTION 2: DATA MODELS (API Request/Response Schemas)
# ============================================================================

class SessionRequest(BaseModel):
    """Schema for starting a new session. Omitted fields use the defaults."""
    width: Optional[int] = None
    height: Optional[int] = None
    learning_rate: Optional[float] = None
    stride: Optional[int] = None
    seed: Optional[int] = None

class StepRequest(BaseModel):
    """Schema for advancing training"""
    epochs: int = Field(default=1, ge=1, le=MAX_EPOCHS_PER_STEP)

class StateResponse(BaseModel):
    """Schema for the current model state"""
    epoch: int
    weight: float
    bias: float
    loss: Optional[float]  # None once the error has overflowed to inf or nan
    paused: bool
    boundary_point_count: int

class PointsResponse(BaseModel):
    """Schema for a sequence of pixel points"""
    epoch: int
    width: int
    height: int
    points: List[List[int]]  # [[x, y], ...]

# ============================================================================
# SECTION 3: SESSION STORAGE (In-Memory)
# ============================================================================
# Purpose: Hold the one session this process serves
# Why the lock: sync endpoints run on a thread pool, and two /step calls must
# never train the same model at the same time

_session: Optional[BoundarySession] = None
_session_lock = threading.Lock()


def get_session() -> BoundarySession:
    """
    Return the active session, creating a default one on first use.

    Must be called with _session_lock held.
    """
    global _session
    if _session is None:
        _session = BoundarySession(load_settings())
    return _session


def replace_session(settings) -> BoundarySession:
    """Swap in a fresh session built from validated settings. Lock must be held."""
    global _session
    _session = BoundarySession(settings)
    return _session


def state_response(session: BoundarySession) -> StateResponse:
    snapshot = session.snapshot()
    return StateResponse(
        epoch=snapshot.epoch,
        weight=snapshot.weight,
        bias=snapshot.bias,
        loss=snapshot.loss if math.isfinite(snapshot.loss) else None,
        paused=session.paused,
        boundary_point_count=len(session.boundary_points),
    )


def points_response(session: BoundarySession, points) -> PointsResponse:
    return PointsResponse(
        epoch=session.state.epoch,
        width=session.settings.width,
        height=session.settings.height,
        points=[[point.x, point.y] for point in points],
    )

# ============================================================================
# SECTION 4: FASTAPI APPLICATION (API Layer)
# ============================================================================

app = FastAPI(
    title="Boundary Regression Learning Loop API",
    description="Step a single linear unit toward a noisy synthetic boundary",
    version="1.0.0"
)

@app.get("/")
def root():
    """
    Health check endpoint - verify the API is running.

    EXAMPLE RESPONSE:
        {
            "status": "online",
            "service": "Boundary Regression Learning Loop",
            "version": "1.0.0"
        }
    """
    return {
        "status": "online",
        "service": "Boundary Regression Learning Loop",
        "version": "1.0.0"
    }

@app.post("/session", response_model=StateResponse)
def create_session(request: SessionRequest):
    """
    Start over with a new boundary and an untrained model.

    HOW IT WORKS:
    1. Validates the settings (any size, rate or stride <= 0, or a negative
       seed, is rejected)
    2. Generates a new boundary (repeatable when a seed is given)
    3. Resets the model to weight 0, bias 0, epoch 0

    EXAMPLE REQUEST:
        POST /session
        {"width": 500, "height": 300, "seed": 42}

    Raises:
        HTTPException:
            - 400 if a setting is invalid
            - 500 for anything unexpected
    """
    try:
        settings = load_settings(**request.model_dump())
        with _session_lock:
            session = replace_session(settings)
            return state_response(session)
    except HTTPException:
        raise
    except ConfigurationError as e:
        logger.warning(f"Rejected session settings: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating session: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.post("/step", response_model=StateResponse)
def step(request: StepRequest):
    """
    Train for one or more epochs and return the new state.

    WHAT IT DOES:
    This is the "tick". Each epoch applies the update rule to every training
    sample once. While the session is paused the call returns the unchanged
    state.

    EXAMPLE REQUEST:
        POST /step
        {"epochs": 10}

    EXAMPLE RESPONSE:
        {
            "epoch": 10,
            "weight": 0.0213,
            "bias": 0.3127,
            "loss": 0.0304,
            "paused": false,
            "boundary_point_count": 66
        }

    Raises:
        HTTPException:
            - 409 if the model diverged (learning rate too large). Epochs
              finished before the failing one are kept; start a new session
              with a smaller learning rate to go on.
            - 422 if epochs is outside 1..MAX_EPOCHS_PER_STEP
            - 500 for anything unexpected
    """
    try:
        with _session_lock:
            session = get_session()
            session.run(request.epochs)
            response = state_response(session)
        logger.info(f"Stepped to epoch {response.epoch} (loss {response.loss})")
        return response
    except HTTPException:
        raise
    except ModelDivergedError as e:
        logger.error(f"Training diverged: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Error stepping session: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.post("/pause", response_model=StateResponse)
def toggle_pause():
    """Pause a running session or resume a paused one."""
    try:
        with _session_lock:
            session = get_session()
            session.toggle_pause()
            return state_response(session)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error toggling pause: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.get("/state", response_model=StateResponse)
def get_state():
    """Current epoch, weight, bias and loss. loss is null once it has overflowed."""
    try:
        with _session_lock:
            return state_response(get_session())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error reading state: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.get("/points/boundary", response_model=PointsResponse)
def get_boundary_points():
    """The ground-truth boundary. Stays the same for the life of the session."""
    try:
        with _session_lock:
            session = get_session()
            return points_response(session, session.boundary_points)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error reading boundary points: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.get("/points/predicted", response_model=PointsResponse)
def get_predicted_points():
    """
    The model's line sampled every `stride` pixels.

    Note:
        y values are not clamped: early in training some points lie outside
        0..height. Clip them when drawing.
    """
    try:
        with _session_lock:
            session = get_session()
            return points_response(session, session.snapshot().predicted_points)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error reading predicted points: {e}")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================================
# SECTION 5: HOW TO RUN THIS
# ============================================================================
"""
INSTALLATION:
1. pip install -e ".[serve]"

RUNNING THE SERVER:
uvicorn boundary_api:app --reload

EXAMPLE USAGE:

# Start a repeatable session
curl -X POST http://localhost:8000/session \
  -H "Content-Type: application/json" \
  -d '{"width": 500, "height": 300, "seed": 42}'

# Train 50 epochs
curl -X POST http://localhost:8000/step \
  -H "Content-Type: application/json" \
  -d '{"epochs": 50}'

# Fetch what to draw
curl http://localhost:8000/points/boundary
curl http://localhost:8000/points/predicted

# Pause / resume
curl -X POST http://localhost:8000/pause
"""
