"""
Whole-body measurements reused across sports.

Each helper reads a handful of landmarks around one or more keyframes and
returns a rounded value, or None when the required landmarks are not
available.
"""
import math
from typing import List, Optional, Sequence

import numpy as np  # type: ignore

from biome_sports_analysis.config import HEIGHT_DECIMALS
from biome_sports_analysis.models import Frame, LandmarkIndex, Side
from biome_sports_analysis.metrics.geometry import (
  clamp,
  clamp01,
  frame_at,
  joint_angle,
  limb,
  midpoint,
  normalized_height,
  point,
  rounded,
)


def hip_center(frame: Optional[Frame], min_visibility: float) -> Optional[np.ndarray]:
  left = point(frame, LandmarkIndex.LEFT_HIP, min_visibility)
  right = point(frame, LandmarkIndex.RIGHT_HIP, min_visibility)
  if left is None or right is None:
    return None
  return (left + right) / 2


def shoulder_center(frame: Optional[Frame], min_visibility: float) -> Optional[np.ndarray]:
  left = point(frame, LandmarkIndex.LEFT_SHOULDER, min_visibility)
  right = point(frame, LandmarkIndex.RIGHT_SHOULDER, min_visibility)
  if left is None or right is None:
    return None
  return (left + right) / 2


def shoulder_width(frame: Optional[Frame], min_visibility: float) -> Optional[float]:
  left = point(frame, LandmarkIndex.LEFT_SHOULDER, min_visibility)
  right = point(frame, LandmarkIndex.RIGHT_SHOULDER, min_visibility)
  if left is None or right is None:
    return None
  return abs(float(left[0] - right[0]))


def stability_index(
  frames: Sequence[Frame],
  start: Optional[int],
  contact: Optional[int],
  min_visibility: float,
  drift_scale: float = 0.8,
  min_body_width: float = 0.05,
  default_body_width: float = 0.2,
) -> Optional[float]:
  """
  Lateral hip steadiness between the start of the motion and contact.

  Hip-center horizontal drift is expressed in shoulder widths; no drift
  scores 100, a drift of `drift_scale` body widths scores 0.
  """
  if start is None or contact is None or start >= contact:
    return None
  first = frame_at(frames, start)
  last = frame_at(frames, contact)
  hip_start = hip_center(first, min_visibility)
  hip_contact = hip_center(last, min_visibility)
  if hip_start is None or hip_contact is None:
    return None

  body_width = shoulder_width(first, min_visibility)
  body_width = max(body_width if body_width is not None else default_body_width, min_body_width)
  drift = abs(float(hip_contact[0] - hip_start[0])) / body_width
  return float(round(clamp01(1 - drift / drift_scale) * 100))


def jump_height(
  frames: Sequence[Frame],
  baseline: Optional[int],
  peak: Optional[int],
  min_visibility: float,
) -> Optional[float]:
  """Rise of the hip center from the baseline frame to the peak frame (normalized units)."""
  base = hip_center(frame_at(frames, baseline), min_visibility)
  top = hip_center(frame_at(frames, peak), min_visibility)
  if base is None or top is None:
    return None
  return rounded(max(0.0, float(base[1] - top[1])), HEIGHT_DECIMALS)


def _mean_y(frame: Optional[Frame], left: int, right: int, min_visibility: float) -> Optional[float]:
  center = midpoint(frame, left, right, min_visibility)
  return None if center is None else float(center[1])


def contact_height(
  frame: Optional[Frame],
  point_y: Optional[float],
  min_visibility: float,
  min_body_height: float = 0.05,
  max_height: float = 130.0,
) -> Optional[float]:
  """Height of `point_y` above the ankles, in % of ankle-to-shoulder height."""
  if point_y is None:
    return None
  ankle_y = _mean_y(frame, LandmarkIndex.LEFT_ANKLE, LandmarkIndex.RIGHT_ANKLE, min_visibility)
  shoulder_y = _mean_y(frame, LandmarkIndex.LEFT_SHOULDER, LandmarkIndex.RIGHT_SHOULDER, min_visibility)
  if ankle_y is None or shoulder_y is None:
    return None
  height = normalized_height(point_y, ankle_y, shoulder_y, min_body_height)
  if height is None:
    return None
  return rounded(clamp(height, 0.0, max_height))


def trunk_rotation(frame: Optional[Frame], min_visibility: float) -> Optional[float]:
  """Angle between the shoulder line and the hip line, in degrees."""
  ls = point(frame, LandmarkIndex.LEFT_SHOULDER, min_visibility)
  rs = point(frame, LandmarkIndex.RIGHT_SHOULDER, min_visibility)
  lh = point(frame, LandmarkIndex.LEFT_HIP, min_visibility)
  rh = point(frame, LandmarkIndex.RIGHT_HIP, min_visibility)
  if ls is None or rs is None or lh is None or rh is None:
    return None

  shoulder_line = math.atan2(rs[1] - ls[1], rs[0] - ls[0])
  hip_line = math.atan2(rh[1] - lh[1], rh[0] - lh[0])
  diff = abs(math.degrees(shoulder_line - hip_line)) % 360
  if diff > 180:
    diff = 360 - diff
  return rounded(diff)


def body_alignment(
  frame: Optional[Frame],
  min_visibility: float,
  min_torso: float = 0.01,
  zero_lean: float = 45.0,
) -> Optional[float]:
  """Torso uprightness score: 100 for a vertical torso, 0 at `zero_lean` degrees."""
  shoulders = shoulder_center(frame, min_visibility)
  hips = hip_center(frame, min_visibility)
  if shoulders is None or hips is None:
    return None
  dy = float(hips[1] - shoulders[1])
  if abs(dy) < min_torso:
    return None
  lean = abs(math.degrees(math.atan2(float(shoulders[0] - hips[0]), dy)))
  return float(round(max(0.0, 100 - lean * 100 / zero_lean)))


def wrist_path_speed(
  frames: Sequence[Frame],
  side: Side,
  contact: Optional[int],
  lookback: int,
  fps: float,
  min_visibility: float,
  min_steps: int = 3,
  shoulder_widths_per_second: float = 10.0,
  min_shoulder_width: float = 0.05,
) -> Optional[float]:
  """
  Score for how fast the hitting wrist travels into contact.

  The wrist path length over the `lookback` frames before contact is
  divided by elapsed time and compared with a body-scaled reference speed.
  """
  if contact is None or fps <= 0 or frame_at(frames, contact) is None:
    return None
  wrist = limb(side).wrist
  positions = [point(frame_at(frames, i), wrist, min_visibility) for i in range(max(0, contact - lookback), contact + 1)]

  path = 0.0
  steps = 0
  for a, b in zip(positions, positions[1:]):
    if a is not None and b is not None:
      path += float(np.linalg.norm(b - a))
      steps += 1
  if steps < min_steps:
    return None

  speed = path / (steps / fps)
  width = shoulder_width(frame_at(frames, contact), min_visibility)
  reference = max(width if width is not None else min_shoulder_width, min_shoulder_width) * shoulder_widths_per_second
  return float(round(min(100.0, speed / reference * 100)))


def max_elbow_angle(
  frames: Sequence[Frame],
  side: Side,
  first: int,
  last: int,
  min_visibility: float,
) -> Optional[float]:
  arm = limb(side)
  angles: List[float] = []
  for i in range(max(0, first), min(len(frames) - 1, last) + 1):
    angle = joint_angle(frames[i], arm.shoulder, arm.elbow, arm.wrist, min_visibility)
    if angle is not None:
      angles.append(angle)
  return max(angles) if angles else None


def follow_through(
  frames: Sequence[Frame],
  side: Side,
  contact: Optional[int],
  lookahead: int,
  min_visibility: float,
  min_angle: float,
  full_angle: float,
) -> Optional[float]:
  """Arm extension after contact: max elbow angle mapped from `min_angle`..`full_angle` to 0..100."""
  if contact is None:
    return None
  peak_angle = max_elbow_angle(frames, side, contact, contact + lookahead, min_visibility)
  if peak_angle is None:
    return None
  return float(round(clamp((peak_angle - min_angle) / (full_angle - min_angle) * 100, 0.0, 100.0)))


def hand_symmetry(
  frame: Optional[Frame],
  min_visibility: float,
  penalty: float = 200.0,
  min_shoulder_width: float = 0.05,
) -> Optional[float]:
  """100 when both wrists are level; loses `penalty` points per shoulder width of height gap."""
  left = point(frame, LandmarkIndex.LEFT_WRIST, min_visibility)
  right = point(frame, LandmarkIndex.RIGHT_WRIST, min_visibility)
  if left is None or right is None:
    return None
  width = shoulder_width(frame, min_visibility)
  width = max(width if width is not None else min_shoulder_width, min_shoulder_width)
  gap = abs(float(left[1] - right[1])) / width
  return float(round(max(0.0, 100 - gap * penalty)))


def highest_wrist_frame(
  frames: Sequence[Frame],
  first: int,
  last: int,
  min_visibility: float,
  use_mean: bool = False,
) -> Optional[int]:
  """
  Frame in [first, last] where the hands are highest.

  Uses the higher of the two wrists, or their mean height with `use_mean`.
  """
  best: Optional[int] = None
  best_y = math.inf
  for i in range(max(0, first), min(len(frames) - 1, last) + 1):
    left = point(frames[i], LandmarkIndex.LEFT_WRIST, min_visibility)
    right = point(frames[i], LandmarkIndex.RIGHT_WRIST, min_visibility)
    ys = [float(p[1]) for p in (left, right) if p is not None]
    if not ys or (use_mean and len(ys) < 2):
      continue
    y = sum(ys) / len(ys) if use_mean else min(ys)
    if y < best_y:
      best_y = y
      best = i
  return best


def highest_hip_frame(frames: Sequence[Frame], min_visibility: float) -> Optional[int]:
  """Frame where the hip center is highest in the image (minimum Y)."""
  best: Optional[int] = None
  best_y = math.inf
  for i, frame in enumerate(frames):
    center = hip_center(frame, min_visibility)
    if center is not None and center[1] < best_y:
      best_y = float(center[1])
      best = i
  return best
