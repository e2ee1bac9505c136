"""
Configuration loader for Biome Sports Analysis.
Loads environment variables and exposes typed accessors.

Centralized configuration for the analysis pipeline and the API server.
"""
import os
from dataclasses import dataclass
from typing import List

try:
  # Optional: load from .env if present during local dev
  from dotenv import load_dotenv  # type: ignore
  load_dotenv()
except Exception:
  # dotenv is optional; ignore if not installed yet
  pass


@dataclass(frozen=True)
class Settings:
  """Application settings loaded from environment variables."""

  # Server Configuration
  port: int = int(os.getenv("PORT", "8080"))
  host: str = os.getenv("HOST", "0.0.0.0")

  # Application Settings
  debug: bool = os.getenv("DEBUG", "true").lower() == "true"
  log_level: str = os.getenv("LOG_LEVEL", "info")

  # Frame validation
  min_frames: int = int(os.getenv("MIN_FRAMES", "10"))
  min_confidence: float = float(os.getenv("MIN_CONFIDENCE", "0.3"))

  # Smoothing
  smoothing_window: int = int(os.getenv("SMOOTHING_WINDOW", "5"))
  smoothing_min_visibility: float = float(os.getenv("SMOOTHING_MIN_VISIBILITY", "0.3"))
  preserve_edges: bool = os.getenv("PRESERVE_EDGES", "true").lower() == "true"

  # Keyframe detection
  keyframe_min_frames: int = int(os.getenv("KEYFRAME_MIN_FRAMES", "15"))
  velocity_threshold: float = float(os.getenv("VELOCITY_THRESHOLD", "0.02"))
  keyframe_min_visibility: float = float(os.getenv("KEYFRAME_MIN_VISIBILITY", "0.5"))
  default_fps: float = float(os.getenv("DEFAULT_FPS", "30"))

  # Scoring
  grade_curve_factor: float = float(os.getenv("GRADE_CURVE_FACTOR", "0.15"))

  # Request limits
  max_frames_per_request: int = int(os.getenv("MAX_FRAMES_PER_REQUEST", "3600"))
  analyze_rate_limit: str = os.getenv("ANALYZE_RATE_LIMIT", "30/minute")

  # CORS Configuration
  cors_origins: str = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:8081"
  )

  def validate(self) -> None:
    """Validate configuration values."""
    if self.min_frames < 1:
      raise ValueError("MIN_FRAMES must be at least 1")

    if not 0.0 <= self.min_confidence <= 1.0:
      raise ValueError("MIN_CONFIDENCE must be within [0, 1]")

    if self.smoothing_window < 1:
      raise ValueError("SMOOTHING_WINDOW must be at least 1")

    if self.default_fps <= 0:
      raise ValueError("DEFAULT_FPS must be positive")

    if not 0.0 <= self.grade_curve_factor < 1.0:
      raise ValueError("GRADE_CURVE_FACTOR must be within [0, 1)")

  @property
  def is_production(self) -> bool:
    """Check if running in production mode."""
    return not self.debug

  @property
  def cors_origin_list(self) -> List[str]:
    """CORS origins as a list."""
    return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

  @property
  def allowed_origins(self) -> List[str]:
    """Origins the API accepts; development also allows the local dev ports."""
    configured = self.cors_origin_list
    if self.is_production:
      return configured
    return configured + [origin for origin in LOCAL_DEV_ORIGINS if origin not in configured]


settings = Settings()


# ============================================
# CONSTANTS
# ============================================

# Development mode - common local frontend ports
LOCAL_DEV_ORIGINS = [
  "http://localhost:3000",
  "http://localhost:3001",
  "http://localhost:8080",
  "http://localhost:8081",
  "http://127.0.0.1:3000",
  "http://127.0.0.1:8080",
]

# MediaPipe pose topology
LANDMARK_COUNT = 33

# Output precision
ANGLE_DECIMALS = 1
HEIGHT_DECIMALS = 3

# Fallback used when hip landmarks are missing at the start of a clip
DEFAULT_HIP_Y = 0.5
