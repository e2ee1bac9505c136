"""
Geometric primitives shared by every metric calculator.

All helpers return None instead of raising when a landmark is missing,
below the visibility floor, or the geometry is degenerate.
"""
import math
from typing import NamedTuple, Optional, Sequence

import numpy as np  # type: ignore

from biome_sports_analysis.config import ANGLE_DECIMALS
from biome_sports_analysis.models import Frame, LandmarkIndex, Side

# Vectors shorter than this are treated as zero-length
EPSILON = 1e-9


class Limb(NamedTuple):
  shoulder: int
  elbow: int
  wrist: int
  hip: int
  knee: int
  ankle: int


LEFT = Limb(
  LandmarkIndex.LEFT_SHOULDER, LandmarkIndex.LEFT_ELBOW, LandmarkIndex.LEFT_WRIST,
  LandmarkIndex.LEFT_HIP, LandmarkIndex.LEFT_KNEE, LandmarkIndex.LEFT_ANKLE,
)
RIGHT = Limb(
  LandmarkIndex.RIGHT_SHOULDER, LandmarkIndex.RIGHT_ELBOW, LandmarkIndex.RIGHT_WRIST,
  LandmarkIndex.RIGHT_HIP, LandmarkIndex.RIGHT_KNEE, LandmarkIndex.RIGHT_ANKLE,
)


def limb(side: Side) -> Limb:
  return LEFT if side == Side.LEFT else RIGHT


def clamp(value: float, low: float, high: float) -> float:
  return max(low, min(high, value))


def clamp01(value: float) -> float:
  return clamp(value, 0.0, 1.0)


def rounded(value: Optional[float], decimals: int = ANGLE_DECIMALS) -> Optional[float]:
  if value is None or not math.isfinite(value):
    return None
  return round(float(value), decimals)


def frame_at(frames: Sequence[Frame], index: Optional[int]) -> Optional[Frame]:
  if index is None or not 0 <= index < len(frames):
    return None
  return frames[index]


def point(frame: Optional[Frame], index: int, min_visibility: float = 0.5) -> Optional[np.ndarray]:
  """(x, y) of a landmark, or None when missing or not visible enough."""
  if frame is None:
    return None
  kp = frame.keypoint(index)
  if kp is None or kp.effective_visibility < min_visibility:
    return None
  if not (math.isfinite(kp.x) and math.isfinite(kp.y)):
    return None
  return np.array([kp.x, kp.y], dtype=float)


def midpoint(frame: Optional[Frame], left: int, right: int, min_visibility: float = 0.5) -> Optional[np.ndarray]:
  """Mean of a left/right landmark pair, or whichever one is visible."""
  a = point(frame, left, min_visibility)
  b = point(frame, right, min_visibility)
  if a is not None and b is not None:
    return (a + b) / 2
  return a if a is not None else b


def angle_between(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> Optional[float]:
  """Angle at b formed by a-b-c in degrees."""
  v1 = a - b
  v2 = c - b
  n1 = float(np.linalg.norm(v1))
  n2 = float(np.linalg.norm(v2))
  if n1 < EPSILON or n2 < EPSILON:
    return None
  cosang = float(np.clip(np.dot(v1, v2) / (n1 * n2), -1.0, 1.0))
  return float(np.degrees(np.arccos(cosang)))


def joint_angle(frame: Optional[Frame], a: int, b: int, c: int, min_visibility: float = 0.5) -> Optional[float]:
  pa = point(frame, a, min_visibility)
  pb = point(frame, b, min_visibility)
  pc = point(frame, c, min_visibility)
  if pa is None or pb is None or pc is None:
    return None
  return angle_between(pa, pb, pc)


def distance(a: Optional[np.ndarray], b: Optional[np.ndarray]) -> Optional[float]:
  if a is None or b is None:
    return None
  return float(np.linalg.norm(a - b))


def normalized_height(point_y: float, ankle_y: float, shoulder_y: float, min_body_height: float = 0.05) -> Optional[float]:
  """
  Height of a point above the ankles relative to ankle-to-shoulder height, in %.

  100 means level with the shoulders. None when the body height is too
  small to normalize against.
  """
  body_height = ankle_y - shoulder_y
  if body_height < min_body_height:
    return None
  return (ankle_y - point_y) / body_height * 100


def hitting_side(frame: Optional[Frame], min_visibility: float = 0.5, default: Side = Side.RIGHT) -> Side:
  """Side of the higher wrist (smaller Y) at a frame."""
  left = point(frame, LandmarkIndex.LEFT_WRIST, min_visibility)
  right = point(frame, LandmarkIndex.RIGHT_WRIST, min_visibility)
  if left is not None and right is not None:
    return Side.LEFT if left[1] < right[1] else Side.RIGHT
  if left is not None:
    return Side.LEFT
  if right is not None:
    return Side.RIGHT
  return default
