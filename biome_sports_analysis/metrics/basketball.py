"""
Basketball metric calculators.

Jump shot and free throw measure the shooting arm at release; layup tracks
the hip trajectory into the take-off; dribbling averages posture over a
sample of frames. The shooting arm is the one whose wrist is higher at
release (right when it cannot be told).
"""
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np  # type: ignore

from biome_sports_analysis.biomechanics_standards import BASKETBALL, SPORT_STANDARDS
from biome_sports_analysis.models import Frame, KeyframeSet, LandmarkIndex, MetricKey, MetricTable, Side, Sport
from biome_sports_analysis.metrics.body import (
  contact_height,
  follow_through,
  hip_center,
  jump_height,
  shoulder_center,
  shoulder_width,
  stability_index,
)
from biome_sports_analysis.metrics.geometry import (
  EPSILON,
  clamp,
  frame_at,
  hitting_side,
  joint_angle,
  limb,
  midpoint,
  point,
  rounded,
)

VISIBILITY = SPORT_STANDARDS[Sport.BASKETBALL].VISIBILITY_FLOOR

# Keyframes each metric depends on
REQUIRES: Dict[MetricKey, Tuple[str, ...]] = {
  MetricKey.RELEASE_ANGLE: ("contact",),
  MetricKey.ELBOW_ANGLE_AT_RELEASE: ("contact",),
  MetricKey.KNEE_ANGLE_AT_PEAK: ("peak",),
  MetricKey.JUMP_HEIGHT_NORMALIZED: ("start", "peak"),
  MetricKey.STABILITY_INDEX: ("start", "contact"),
  MetricKey.FOLLOW_THROUGH_SCORE: ("contact",),
  MetricKey.RELEASE_TIMING_MS: ("contact", "peak"),
  MetricKey.RHYTHM_CONSISTENCY: ("contact",),
  MetricKey.APPROACH_SPEED: ("start",),
  MetricKey.TAKEOFF_ANGLE: ("start", "peak"),
  MetricKey.PEAK_HEIGHT: ("start", "peak"),
  MetricKey.FINISH_HAND_POSITION: ("contact",),
}


def release_angle(frame: Optional[Frame], side: Side) -> Optional[float]:
  """Elevation of the forearm (elbow to wrist) above horizontal, 0-90 degrees."""
  arm = limb(side)
  elbow = point(frame, arm.elbow, VISIBILITY)
  wrist = point(frame, arm.wrist, VISIBILITY)
  if elbow is None or wrist is None:
    return None
  dx = float(wrist[0] - elbow[0])
  dy = float(wrist[1] - elbow[1])
  if abs(dx) < EPSILON and abs(dy) < EPSILON:
    return None
  # image Y grows downward, so a rising forearm has negative dy
  angle = abs(math.degrees(math.atan2(-dy, abs(dx))))
  return rounded(clamp(angle, 0.0, 90.0))


def _elbow_angle(frame: Optional[Frame], side: Side) -> Optional[float]:
  arm = limb(side)
  return rounded(joint_angle(frame, arm.shoulder, arm.elbow, arm.wrist, VISIBILITY))


def _knee_angle(frame: Optional[Frame], side: Side) -> Optional[float]:
  leg = limb(side)
  return rounded(joint_angle(frame, leg.hip, leg.knee, leg.ankle, VISIBILITY))


def _stability(frames: Sequence[Frame], start: Optional[int], contact: Optional[int]) -> Optional[float]:
  return stability_index(
    frames, start, contact, VISIBILITY,
    drift_scale=BASKETBALL.STABILITY_DRIFT_SCALE,
    min_body_width=BASKETBALL.MIN_BODY_WIDTH,
    default_body_width=BASKETBALL.DEFAULT_BODY_WIDTH,
  )


def _follow_through(frames: Sequence[Frame], side: Side, contact: Optional[int]) -> Optional[float]:
  return follow_through(
    frames, side, contact, BASKETBALL.FOLLOW_THROUGH_FRAMES, VISIBILITY,
    BASKETBALL.FOLLOW_THROUGH_MIN_ANGLE, BASKETBALL.FOLLOW_THROUGH_FULL_ANGLE,
  )


def jump_shot(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  release = keyframes.contact
  release_frame = frame_at(frames, release)
  side = hitting_side(release_frame, VISIBILITY)

  timing = None
  if release is not None and keyframes.peak is not None and fps > 0:
    timing = float(round((release - keyframes.peak) / fps * 1000))

  return {
    MetricKey.RELEASE_ANGLE.value: release_angle(release_frame, side),
    MetricKey.ELBOW_ANGLE_AT_RELEASE.value: _elbow_angle(release_frame, side),
    MetricKey.KNEE_ANGLE_AT_PEAK.value: _knee_angle(frame_at(frames, keyframes.peak), side),
    MetricKey.JUMP_HEIGHT_NORMALIZED.value: jump_height(frames, keyframes.start, keyframes.peak, VISIBILITY),
    MetricKey.STABILITY_INDEX.value: _stability(frames, keyframes.start, release),
    MetricKey.FOLLOW_THROUGH_SCORE.value: _follow_through(frames, side, release),
    MetricKey.RELEASE_TIMING_MS.value: timing,
  }


def rhythm_consistency(
  frames: Sequence[Frame],
  side: Side,
  start: int,
  release: int,
) -> Optional[float]:
  """Steadiness of the shooting hand's height during the set-up (100 = no wobble)."""
  wrist = limb(side).wrist
  ys: List[float] = []
  for i in range(max(0, start), min(len(frames) - 1, release) + 1):
    p = point(frames[i], wrist, VISIBILITY)
    if p is not None:
      ys.append(float(p[1]))
  if len(ys) < BASKETBALL.RHYTHM_MIN_SAMPLES:
    return None
  variance = float(np.var(ys))
  return float(round(max(0.0, 100 - variance / BASKETBALL.RHYTHM_VARIANCE_SCALE * 100)))


def free_throw(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  release = keyframes.contact if keyframes.contact is not None else keyframes.peak
  release_frame = frame_at(frames, release)
  side = hitting_side(release_frame, VISIBILITY)

  push_index = release if release is not None else len(frames) // 2
  start = keyframes.start if keyframes.start is not None else 0
  rhythm = rhythm_consistency(frames, side, start, release) if release is not None else None

  return {
    MetricKey.RELEASE_ANGLE.value: release_angle(release_frame, side),
    MetricKey.ELBOW_ANGLE_AT_RELEASE.value: _elbow_angle(release_frame, side),
    MetricKey.KNEE_ANGLE_PUSH.value: _knee_angle(frame_at(frames, push_index), side),
    MetricKey.STABILITY_INDEX.value: _stability(frames, keyframes.start, release),
    MetricKey.FOLLOW_THROUGH_SCORE.value: _follow_through(frames, side, release),
    MetricKey.RHYTHM_CONSISTENCY.value: rhythm,
  }


def _approach_speed(frames: Sequence[Frame], start: Optional[int], fps: float) -> Optional[float]:
  """Horizontal hip speed over the frames leading into take-off, scored 0-100."""
  if start is None or fps <= 0:
    return None
  origin = max(0, start - BASKETBALL.APPROACH_FRAMES)
  if origin == start:
    return None
  before = hip_center(frame_at(frames, origin), VISIBILITY)
  after = hip_center(frame_at(frames, start), VISIBILITY)
  if before is None or after is None:
    return None

  speed = abs(float(after[0] - before[0])) / ((start - origin) / fps)
  width = shoulder_width(frame_at(frames, start), VISIBILITY)
  width = width if width is not None else BASKETBALL.LAYUP_DEFAULT_BODY_WIDTH
  reference = max(width, BASKETBALL.MIN_BODY_WIDTH) * BASKETBALL.APPROACH_BODY_WIDTHS
  return float(round(min(100.0, speed / reference * 100)))


def _takeoff_angle(frames: Sequence[Frame], start: Optional[int], peak: Optional[int]) -> Optional[float]:
  """Angle of the hip path from take-off to peak above horizontal."""
  before = hip_center(frame_at(frames, start), VISIBILITY)
  after = hip_center(frame_at(frames, peak), VISIBILITY)
  if before is None or after is None:
    return None
  rise = float(before[1] - after[1])
  if rise <= BASKETBALL.MIN_TAKEOFF_RISE:
    return None
  return rounded(math.degrees(math.atan2(rise, abs(float(after[0] - before[0])))))


def layup(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  finish = keyframes.contact if keyframes.contact is not None else keyframes.peak
  finish_frame = frame_at(frames, finish)
  side = hitting_side(finish_frame, VISIBILITY)
  wrist = point(finish_frame, limb(side).wrist, VISIBILITY)

  return {
    MetricKey.APPROACH_SPEED.value: _approach_speed(frames, keyframes.start, fps),
    MetricKey.TAKEOFF_ANGLE.value: _takeoff_angle(frames, keyframes.start, keyframes.peak),
    MetricKey.PEAK_HEIGHT.value: jump_height(frames, keyframes.start, keyframes.peak, VISIBILITY),
    MetricKey.STABILITY_INDEX.value: _stability(frames, keyframes.start, finish),
    MetricKey.FINISH_HAND_POSITION.value: contact_height(
      finish_frame,
      None if wrist is None else float(wrist[1]),
      VISIBILITY,
      BASKETBALL.MIN_BODY_HEIGHT,
      BASKETBALL.MAX_HAND_HEIGHT,
    ),
  }


def dribbling(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  """Posture while dribbling, averaged over an even sample of the clip."""
  step = max(1, len(frames) // BASKETBALL.DRIBBLE_SAMPLES)
  samples = list(frames[::step])
  table: MetricTable = {
    MetricKey.KNEE_BEND_SCORE.value: None,
    MetricKey.STANCE_WIDTH.value: None,
    MetricKey.BALANCE_SCORE.value: None,
    MetricKey.TRUNK_LEAN.value: None,
  }
  if len(samples) < BASKETBALL.DRIBBLE_MIN_SAMPLES:
    return table

  drop_ratios: List[float] = []
  stance: List[float] = []
  hip_xs: List[float] = []
  leans: List[float] = []
  for frame in samples:
    shoulders = shoulder_center(frame, VISIBILITY)
    hips = hip_center(frame, VISIBILITY)
    ankles = midpoint(frame, LandmarkIndex.LEFT_ANKLE, LandmarkIndex.RIGHT_ANKLE, VISIBILITY)

    if hips is not None:
      hip_xs.append(float(hips[0]))

    if shoulders is not None and hips is not None:
      leans.append(abs(math.degrees(math.atan2(
        float(shoulders[0] - hips[0]), float(hips[1] - shoulders[1])
      ))))

    if shoulders is not None and hips is not None and ankles is not None:
      body_height = float(ankles[1] - shoulders[1])
      if body_height > BASKETBALL.KNEE_BEND_MIN_BODY_HEIGHT:
        drop_ratios.append(float(hips[1] - shoulders[1]) / body_height)

    width = shoulder_width(frame, VISIBILITY)
    left_ankle = point(frame, LandmarkIndex.LEFT_ANKLE, VISIBILITY)
    right_ankle = point(frame, LandmarkIndex.RIGHT_ANKLE, VISIBILITY)
    if width is not None and width > BASKETBALL.MIN_SHOULDER_WIDTH and left_ankle is not None and right_ankle is not None:
      stance.append(abs(float(left_ankle[0] - right_ankle[0])) / width * 100)

  if drop_ratios:
    ratio = sum(drop_ratios) / len(drop_ratios)
    span = BASKETBALL.KNEE_BEND_DEEP_RATIO - BASKETBALL.KNEE_BEND_UPRIGHT_RATIO
    table[MetricKey.KNEE_BEND_SCORE.value] = float(round(
      clamp((ratio - BASKETBALL.KNEE_BEND_UPRIGHT_RATIO) / span * 100, 0.0, 100.0)
    ))
  if stance:
    table[MetricKey.STANCE_WIDTH.value] = rounded(sum(stance) / len(stance))
  if len(hip_xs) > 2:
    sway = float(np.std(hip_xs))
    table[MetricKey.BALANCE_SCORE.value] = float(round(
      clamp(1 - sway / BASKETBALL.BALANCE_SWAY_SCALE, 0.0, 1.0) * 100
    ))
  if leans:
    table[MetricKey.TRUNK_LEAN.value] = rounded(sum(leans) / len(leans))
  return table
