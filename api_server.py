"""
HTTP API for Biome Sports Analysis.
Accepts pose sequences from a capture client and returns metrics, score and flaws.
"""
import uuid
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
import uvicorn
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from pydantic import BaseModel, Field, field_validator

from biome_sports_analysis.biomechanics_standards import ACTION_STANDARDS
from biome_sports_analysis.config import LANDMARK_COUNT, settings
from biome_sports_analysis.exceptions import ConfigurationError
from biome_sports_analysis.logging_config import get_logger
from biome_sports_analysis.tools import analyze_performance, supported_selectors

# Initialize logger
logger = get_logger(__name__)


# ============================================
# REQUEST VALIDATION MODELS
# ============================================

class KeypointModel(BaseModel):
    """One landmark in normalized image coordinates."""
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = Field(None, ge=0.0, le=1.0)


class FrameModel(BaseModel):
    """One video frame: 0 (nothing detected) or 33 landmarks."""
    index: Optional[int] = None
    timestamp: float = 0.0
    keypoints: List[KeypointModel] = Field(default_factory=list)
    mean_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)

    @field_validator("keypoints")
    @classmethod
    def check_keypoint_count(cls, value: List[KeypointModel]) -> List[KeypointModel]:
        if len(value) not in (0, LANDMARK_COUNT):
            raise ValueError(f"expected 0 or {LANDMARK_COUNT} keypoints, got {len(value)}")
        return value


class KeyframesModel(BaseModel):
    """Keyframe indices marked by the caller; unset ones are detected."""
    start: Optional[int] = None
    peak: Optional[int] = None
    contact: Optional[int] = None
    end: Optional[int] = None


class AnalyzeRequest(BaseModel):
    sport: str
    action: str
    fps: Optional[float] = Field(None, gt=0)
    frames: List[FrameModel]
    keyframes: Optional[KeyframesModel] = None
    session_id: Optional[str] = None

    @field_validator("frames")
    @classmethod
    def check_frame_count(cls, value: List[FrameModel]) -> List[FrameModel]:
        if len(value) > settings.max_frames_per_request:
            raise ValueError(
                f"too many frames: {len(value)} (max {settings.max_frames_per_request})"
            )
        return value


# ============================================
# STARTUP CONFIGURATION
# ============================================

# Validate configuration on startup
try:
    settings.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.critical(f"Configuration validation failed: {e}")
    raise ConfigurationError(str(e)) from e

app = FastAPI(
    title="Biome Sports Analysis API",
    description="Pose-based sports technique analysis API",
    version="1.0.0"
)

# Initialize rate limiter to prevent abuse
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Production: only CORS_ORIGINS. Development: CORS_ORIGINS plus local dev ports
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Authorization"],
)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "biome-sports-analysis-api",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "sports": "/api/sports",
            "analyze": "/api/analyze",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint with configuration verification"""
    checks = {}
    overall_healthy = True

    # Check configuration
    try:
        settings.validate()
        checks["configuration"] = "valid"
    except ValueError as e:
        checks["configuration"] = f"error: {str(e)}"
        overall_healthy = False
        logger.error(f"Health check - configuration invalid: {e}")

    # Check benchmark tables loaded
    expected = sum(len(actions) for actions in supported_selectors().values())
    checks["benchmarks"] = f"{len(ACTION_STANDARDS)}/{expected} loaded"
    if len(ACTION_STANDARDS) != expected:
        overall_healthy = False
        logger.error(f"Health check - benchmark tables incomplete: {checks['benchmarks']}")

    status_code = 200 if overall_healthy else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "healthy" if overall_healthy else "unhealthy",
            "service": "biome-sports-analysis-api",
            "checks": checks
        }
    )


@app.get("/api/sports")
async def list_sports():
    """Supported sports, their actions and the metrics each action reports."""
    sports: Dict[str, Dict[str, List[str]]] = {}
    for (sport, action), standards in ACTION_STANDARDS.items():
        sports.setdefault(sport.value, {})[action.value] = [key.value for key in standards.benchmarks]
    return {"sports": sports}


@app.post("/api/analyze")
@limiter.limit(settings.analyze_rate_limit)
async def analyze_endpoint(request: Request, body: AnalyzeRequest):
    """
    Analyze one recorded motion.

    Runs validation, smoothing, keyframe detection, metric calculation,
    scoring and flaw detection on the submitted pose frames.

    Returns:
        The analysis result (status "success"); 422 for unsupported
        selectors, malformed frames or inadequate input.
    """
    session_id = body.session_id or str(uuid.uuid4())
    logger.info(
        f"Analysis request received - sport: {body.sport}, action: {body.action}, "
        f"frames: {len(body.frames)}, session_id: {session_id}"
    )

    result = await run_in_threadpool(
        analyze_performance,
        [frame.model_dump(exclude_none=True) for frame in body.frames],
        body.sport,
        body.action,
        fps=body.fps,
        keyframes=body.keyframes.model_dump() if body.keyframes else None,
        session_id=session_id,
    )

    status = result.get("status")
    if status == "unsupported":
        raise HTTPException(
            status_code=422,
            detail={"error": result["message"], "step": "selector", "supported": result["supported"]}
        )
    if status == "invalid_input":
        raise HTTPException(
            status_code=422,
            detail={"error": result["message"], "step": "validation", "issues": result["issues"]}
        )
    if status == "error":
        if result.get("error_type") in ("InvalidFrameError", "ValidationError"):
            raise HTTPException(
                status_code=422,
                detail={"error": result["message"], "step": "parse"}
            )
        raise HTTPException(
            status_code=500,
            detail={"error": result["message"], "step": "analysis"}
        )

    return {"session_id": session_id, **result}


if __name__ == "__main__":
    # Configure server using centralized settings
    logger.info(f"Starting Biome Sports Analysis API server on {settings.host}:{settings.port}")
    logger.info(f"Debug mode: {settings.debug}")

    uvicorn.run(
        "api_server:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level
    )
