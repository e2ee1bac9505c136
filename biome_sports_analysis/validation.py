"""
Frame validation for pose sequences.

Checks that a keypoint sequence has enough frames, landmark coverage and
confidence to be worth analyzing. Validation never raises; callers decide
whether a failed result halts the pipeline.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from biome_sports_analysis.config import settings
from biome_sports_analysis.logging_config import get_logger
from biome_sports_analysis.models import Frame

logger = get_logger(__name__)

# Fraction of frames that must carry landmarks
MIN_LANDMARK_RATIO = 0.5


@dataclass(frozen=True)
class ValidationConfig:
  min_frames: int = 10
  min_confidence: float = 0.3

  @classmethod
  def from_settings(cls) -> "ValidationConfig":
    return cls(min_frames=settings.min_frames, min_confidence=settings.min_confidence)


@dataclass(frozen=True)
class ValidationResult:
  is_valid: bool
  issues: List[str] = field(default_factory=list)

  def to_dict(self) -> Dict[str, Any]:
    return {"is_valid": self.is_valid, "issues": list(self.issues)}


def validate_frames(
  frames: Sequence[Frame],
  config: ValidationConfig = ValidationConfig(),
) -> ValidationResult:
  """
  Check a frame sequence before analysis.

  Args:
    frames: Pose frames in capture order.
    config: Minimum frame count and mean confidence.

  Returns:
    ValidationResult with human-readable issues; valid only when there are none.
  """
  issues: List[str] = []

  if not frames:
    issues.append("No frames provided")
    return ValidationResult(is_valid=False, issues=issues)

  if len(frames) < config.min_frames:
    issues.append(f"Insufficient frames: {len(frames)} < {config.min_frames} required")

  with_landmarks = sum(1 for f in frames if f.has_landmarks)
  if with_landmarks == 0:
    issues.append("No frames contain landmarks")
    return ValidationResult(is_valid=False, issues=issues)

  landmark_ratio = with_landmarks / len(frames)
  if landmark_ratio < MIN_LANDMARK_RATIO:
    issues.append(f"Low landmark detection rate: {landmark_ratio * 100:.1f}%")

  avg_confidence = sum(f.mean_confidence for f in frames) / len(frames)
  if avg_confidence < config.min_confidence:
    issues.append(f"Low average confidence: {avg_confidence * 100:.1f}%")

  if issues:
    logger.warning(f"Frame validation failed: {issues}")
  else:
    logger.debug(
      f"Frame validation passed - frames: {len(frames)}, "
      f"with landmarks: {with_landmarks}, avg confidence: {avg_confidence:.3f}"
    )

  return ValidationResult(is_valid=not issues, issues=issues)


def estimate_fps(frames: Sequence[Frame], default: float = 30.0) -> float:
  """Derive frames-per-second from timestamp deltas, in seconds."""
  if len(frames) < 2:
    return default

  deltas = [
    b.timestamp - a.timestamp
    for a, b in zip(frames, frames[1:])
    if 0 < b.timestamp - a.timestamp < 1
  ]
  if not deltas:
    return default

  return round(1.0 / (sum(deltas) / len(deltas)), 2)
