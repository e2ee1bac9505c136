"""
Keyframe detection from smoothed landmark trajectories.

Locates the start of the motion, the apex of vertical displacement, the
release/contact instant and the end of the motion. Image Y grows downward,
so a higher body position corresponds to a smaller Y value.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np  # type: ignore

from biome_sports_analysis.config import DEFAULT_HIP_Y, settings
from biome_sports_analysis.logging_config import get_logger
from biome_sports_analysis.models import Frame, KeyframeSet, LandmarkIndex, Side
from biome_sports_analysis.smoothing import calculate_velocity, moving_average

logger = get_logger(__name__)

# Frames needed before end detection is attempted
END_MIN_FRAMES = 10
# Settling window length used by end detection
SETTLE_FRAMES = 5


@dataclass(frozen=True)
class KeyframeConfig:
  min_frames: int = 15
  velocity_threshold: float = 0.02
  min_visibility: float = 0.5
  fps: float = 30.0
  contact_search: Tuple[float, float] = (0.30, 0.85)
  max_contact_peak_gap: int = 15

  @classmethod
  def from_settings(cls, fps: Optional[float] = None, max_contact_peak_gap: int = 15) -> "KeyframeConfig":
    return cls(
      min_frames=settings.keyframe_min_frames,
      velocity_threshold=settings.velocity_threshold,
      min_visibility=settings.keyframe_min_visibility,
      fps=fps or settings.default_fps,
      max_contact_peak_gap=max_contact_peak_gap,
    )


@dataclass(frozen=True)
class Detection:
  frame: Optional[int]
  confidence: float
  method: str


@dataclass(frozen=True)
class KeyframeResult:
  keyframes: KeyframeSet
  confidence: Dict[str, float] = field(default_factory=dict)
  methods: Dict[str, str] = field(default_factory=dict)
  warnings: List[str] = field(default_factory=list)

  def to_dict(self) -> Dict[str, Any]:
    return {
      **self.keyframes.to_dict(),
      "confidence": {k: round(v, 4) for k, v in self.confidence.items()},
      "methods": dict(self.methods),
      "warnings": list(self.warnings),
    }


# ============================================
# TRAJECTORY EXTRACTION
# ============================================

def _fill_gaps(values: List[Optional[float]], default: float) -> List[float]:
  """Carry the previous value into gaps; leading gaps take the first valid value."""
  first = next((v for v in values if v is not None), default)
  filled: List[float] = []
  for v in values:
    if v is None:
      v = filled[-1] if filled else first
    filled.append(v)
  return filled


def hip_center_y(frames: Sequence[Frame], min_visibility: float = 0.0) -> Tuple[List[float], int]:
  """
  Mean hip Y per frame.

  Returns:
    (series, valid_count): frames with a missing, non-finite or
    low-visibility hip reuse the previous value.
  """
  raw: List[Optional[float]] = []
  for frame in frames:
    left = frame.keypoint(LandmarkIndex.LEFT_HIP)
    right = frame.keypoint(LandmarkIndex.RIGHT_HIP)
    if (
      left is not None and right is not None
      and left.effective_visibility >= min_visibility
      and right.effective_visibility >= min_visibility
      and math.isfinite(left.y) and math.isfinite(right.y)
    ):
      raw.append((left.y + right.y) / 2)
    else:
      raw.append(None)
  valid = sum(1 for v in raw if v is not None)
  return _fill_gaps(raw, DEFAULT_HIP_Y), valid


def landmark_y(frames: Sequence[Frame], index: int, min_visibility: float = 0.0) -> Tuple[List[float], int]:
  raw: List[Optional[float]] = []
  for frame in frames:
    kp = frame.keypoint(index)
    usable = kp is not None and kp.effective_visibility >= min_visibility and math.isfinite(kp.y)
    raw.append(kp.y if usable else None)
  valid = sum(1 for v in raw if v is not None)
  return _fill_gaps(raw, DEFAULT_HIP_Y), valid


def dominant_side(frames: Sequence[Frame], min_visibility: float = 0.5) -> Side:
  """The side whose wrist reaches the highest point in the clip (right on ties)."""
  best = {}
  for side, index in ((Side.LEFT, LandmarkIndex.LEFT_WRIST), (Side.RIGHT, LandmarkIndex.RIGHT_WRIST)):
    ys = [
      kp.y for kp in (f.keypoint(index) for f in frames)
      if kp is not None and kp.effective_visibility >= min_visibility and math.isfinite(kp.y)
    ]
    best[side] = min(ys) if ys else None

  if best[Side.LEFT] is not None and (best[Side.RIGHT] is None or best[Side.LEFT] < best[Side.RIGHT]):
    return Side.LEFT
  return Side.RIGHT


# ============================================
# DETECTORS
# ============================================

def detect_peak(frames: Sequence[Frame], config: KeyframeConfig = KeyframeConfig()) -> Detection:
  """Frame of highest hip position (global minimum of hip-center Y)."""
  if len(frames) < config.min_frames:
    logger.warning("Insufficient frames for peak detection")
    return Detection(None, 0.0, "insufficient-frames")

  hip_y, valid = hip_center_y(frames, config.min_visibility)
  if valid == 0:
    logger.warning("No valid hip landmarks found")
    return Detection(None, 0.0, "no-hips")

  smoothed = np.asarray(moving_average(hip_y, 3, preserve_edges=False))
  peak = int(np.nanargmin(smoothed))
  min_y = float(smoothed[peak])
  avg_y = float(np.nanmean(smoothed))

  distinctiveness = (avg_y - min_y) / avg_y if avg_y > 0 else 0.0
  confidence = min(1.0, max(0.0, distinctiveness * 2)) * (valid / len(frames))

  logger.debug(f"Peak detected at frame {peak} - min_y: {min_y:.4f}, avg_y: {avg_y:.4f}, confidence: {confidence:.3f}")
  return Detection(peak, confidence, "hip-minimum")


def detect_contact(
  frames: Sequence[Frame],
  config: KeyframeConfig = KeyframeConfig(),
  side: Optional[Side] = None,
) -> Detection:
  """
  Release/contact frame from the dominant wrist's vertical velocity.

  Looks for the wrist switching from rising to falling in the middle of
  the clip; falls back to the highest wrist position in the same window.
  """
  n = len(frames)
  if n < config.min_frames:
    logger.warning("Insufficient frames for contact detection")
    return Detection(None, 0.0, "insufficient-frames")

  side = side or dominant_side(frames, config.min_visibility)
  wrist_index = LandmarkIndex.LEFT_WRIST if side == Side.LEFT else LandmarkIndex.RIGHT_WRIST
  wrist_y, _ = landmark_y(frames, wrist_index)
  smoothed = moving_average(wrist_y, 3, preserve_edges=False)
  velocity = calculate_velocity(smoothed, config.fps, 3)
  if not velocity:
    return Detection(None, 0.0, "no-velocity")

  search_start = int(n * config.contact_search[0])
  search_end = int(n * config.contact_search[1])
  avg_y = sum(smoothed) / n

  contact: Optional[int] = None
  best_score = float("-inf")
  for i in range(search_start, search_end - 1):
    prev_v = velocity[i - 1] if i >= 1 else 0.0
    next_v = velocity[i + 1] if i + 1 < n else 0.0
    # rising (negative) then falling (positive)
    if prev_v < 0 < next_v:
      height_score = (avg_y - smoothed[i]) / avg_y if avg_y > 0 else 0.0
      score = height_score + 5 * abs(next_v - prev_v)
      if score > best_score:
        best_score = score
        contact = i

  method = "velocity-crossing"
  if contact is None:
    method = "wrist-peak"
    window = smoothed[search_start:search_end]
    if window:
      contact = search_start + int(np.nanargmin(window))

  visible = sum(
    1 for f in frames
    if f.keypoint(wrist_index) is not None
    and f.keypoint(wrist_index).effective_visibility >= config.min_visibility
  )
  validity = visible / n
  if contact is None:
    confidence = 0.0
  else:
    confidence = min(1.0, validity * (0.8 + best_score * 0.2 if best_score > 0 else 0.5))

  logger.debug(f"Contact detected at frame {contact} via {method} ({side.value} wrist), confidence: {confidence:.3f}")
  return Detection(contact, confidence, method)


def detect_start(frames: Sequence[Frame], config: KeyframeConfig = KeyframeConfig()) -> Detection:
  """First frame in the first half where hip velocity departs from its recent average."""
  n = len(frames)
  if n < config.min_frames:
    logger.warning("Insufficient frames for start detection")
    return Detection(None, 0.0, "insufficient-frames")

  hip_y, _ = hip_center_y(frames, config.min_visibility)
  velocity = calculate_velocity(moving_average(hip_y, 3, preserve_edges=False), config.fps, 3)
  if not velocity:
    return Detection(None, 0.0, "no-velocity")

  search_end = n // 2
  for i in range(2, search_end):
    recent = (velocity[i - 2] + velocity[i - 1]) / 2
    if abs(velocity[i] - recent) > config.velocity_threshold:
      return Detection(i, 0.7, "velocity-change")

  avg_speed = sum(abs(v) for v in velocity[:search_end]) / max(search_end, 1)
  for i in range(search_end):
    if abs(velocity[i]) > avg_speed * 1.5:
      start = max(0, i - 2)
      return Detection(start, 0.7 if start > 0 else 0.3, "above-average-speed")

  logger.debug("No clear start detected, using first frame")
  return Detection(0, 0.3, "first-frame")


def detect_end(
  frames: Sequence[Frame],
  peak: Optional[int],
  config: KeyframeConfig = KeyframeConfig(),
) -> Detection:
  """First frame after the peak where hip motion has settled."""
  n = len(frames)
  if n < END_MIN_FRAMES:
    return Detection(None, 0.0, "insufficient-frames")

  hip_y, _ = hip_center_y(frames, config.min_visibility)
  velocity = calculate_velocity(moving_average(hip_y, 3, preserve_edges=False), config.fps, 3)

  search_start = peak if peak is not None else n // 2
  for i in range(search_start + SETTLE_FRAMES, n - 2):
    recent = velocity[max(search_start, i - SETTLE_FRAMES):i + 1]
    if sum(abs(v) for v in recent) / len(recent) < config.velocity_threshold:
      return Detection(i, 0.7, "settled")

  return Detection(n - 1, 0.4, "last-frame")


def validate_keyframes(keyframes: KeyframeSet, max_contact_peak_gap: int = 15) -> List[str]:
  """Ordering checks; violations are warnings, never errors."""
  warnings: List[str] = []
  start, peak, contact, end = keyframes.start, keyframes.peak, keyframes.contact, keyframes.end

  if start is not None and peak is not None and start > peak:
    warnings.append("Start frame detected after peak")
  if peak is not None and end is not None and peak > end:
    warnings.append("Peak detected after end frame")
  if contact is not None and peak is not None and abs(contact - peak) > max_contact_peak_gap:
    warnings.append(
      f"Contact frame {abs(contact - peak)} frames from peak (more than {max_contact_peak_gap})"
    )
  return warnings


def detect_keyframes(
  frames: Sequence[Frame],
  config: KeyframeConfig = KeyframeConfig(),
  side: Optional[Side] = None,
) -> KeyframeResult:
  """
  Run every detector and the ordering checks.

  Args:
    frames: Smoothed frames.
    config: Detection thresholds and frame rate.
    side: Dominant hand for contact detection; detected when omitted.

  Returns:
    KeyframeResult with indices, per-keyframe confidence and method, and warnings.
  """
  logger.debug(f"Starting keyframe detection - frames: {len(frames)}, fps: {config.fps}")

  peak = detect_peak(frames, config)
  contact = detect_contact(frames, config, side)
  start = detect_start(frames, config)
  end = detect_end(frames, peak.frame, config)

  keyframes = KeyframeSet(start=start.frame, peak=peak.frame, contact=contact.frame, end=end.frame)
  warnings = validate_keyframes(keyframes, config.max_contact_peak_gap)

  logger.info(f"Keyframes detected: {keyframes.to_dict()}")
  return KeyframeResult(
    keyframes=keyframes,
    confidence={
      "start": start.confidence,
      "peak": peak.confidence,
      "contact": contact.confidence,
      "end": end.confidence,
    },
    methods={
      "start": start.method,
      "peak": peak.method,
      "contact": contact.method,
      "end": end.method,
    },
    warnings=warnings,
  )
