"""
Shared measurements for overhead striking actions (volleyball, badminton).
"""
from dataclasses import dataclass
from typing import Optional, Sequence

from biome_sports_analysis.biomechanics_standards import OVERHEAD
from biome_sports_analysis.models import Frame, KeyframeSet, LandmarkIndex, Side
from biome_sports_analysis.metrics.body import (
  body_alignment,
  contact_height,
  follow_through,
  highest_wrist_frame,
  hand_symmetry,
  jump_height,
  stability_index,
  wrist_path_speed,
)
from biome_sports_analysis.metrics.geometry import frame_at, hitting_side, joint_angle, limb, midpoint, point, rounded


@dataclass(frozen=True)
class Strike:
  """The contact instant of an overhead action and the arm that hits."""
  frames: Sequence[Frame]
  keyframes: KeyframeSet
  contact: Optional[int]
  side: Side
  min_visibility: float

  @property
  def frame(self) -> Optional[Frame]:
    return frame_at(self.frames, self.contact)


def locate_strike(
  frames: Sequence[Frame],
  keyframes: KeyframeSet,
  min_visibility: float,
  use_mean: bool = False,
) -> Strike:
  """Marked contact, else the frame where the hands are highest between start and end."""
  contact = keyframes.contact
  if contact is None and frames:
    first = keyframes.start if keyframes.start is not None else 0
    last = keyframes.end if keyframes.end is not None else len(frames) - 1
    contact = highest_wrist_frame(frames, first, last, min_visibility, use_mean=use_mean)
  side = hitting_side(frame_at(frames, contact), min_visibility)
  return Strike(frames, keyframes, contact, side, min_visibility)


def elbow_at_contact(strike: Strike) -> Optional[float]:
  arm = limb(strike.side)
  return rounded(joint_angle(strike.frame, arm.shoulder, arm.elbow, arm.wrist, strike.min_visibility))


def mean_elbow_angle(frame: Optional[Frame], min_visibility: float) -> Optional[float]:
  """Mean of both elbow angles; whichever is measurable when only one is."""
  angles = [
    joint_angle(frame, arm.shoulder, arm.elbow, arm.wrist, min_visibility)
    for arm in (limb(Side.LEFT), limb(Side.RIGHT))
  ]
  angles = [a for a in angles if a is not None]
  return rounded(sum(angles) / len(angles)) if angles else None


def hitting_hand_height(strike: Strike) -> Optional[float]:
  wrist = point(strike.frame, limb(strike.side).wrist, strike.min_visibility)
  return contact_height(
    strike.frame,
    None if wrist is None else float(wrist[1]),
    strike.min_visibility,
    OVERHEAD.MIN_BODY_HEIGHT,
    OVERHEAD.MAX_CONTACT_HEIGHT,
  )


def both_hands_height(frame: Optional[Frame], min_visibility: float) -> Optional[float]:
  wrists = midpoint(frame, LandmarkIndex.LEFT_WRIST, LandmarkIndex.RIGHT_WRIST, min_visibility)
  return contact_height(
    frame,
    None if wrists is None else float(wrists[1]),
    min_visibility,
    OVERHEAD.MIN_BODY_HEIGHT,
    OVERHEAD.MAX_CONTACT_HEIGHT,
  )


def alignment(frame: Optional[Frame], min_visibility: float) -> Optional[float]:
  return body_alignment(frame, min_visibility, OVERHEAD.MIN_ALIGNMENT_TORSO, OVERHEAD.ALIGNMENT_ZERO_LEAN)


def symmetry(frame: Optional[Frame], min_visibility: float) -> Optional[float]:
  return hand_symmetry(frame, min_visibility, OVERHEAD.SYMMETRY_PENALTY, OVERHEAD.MIN_SHOULDER_WIDTH)


def swing_speed(strike: Strike, fps: float, lookback: int = OVERHEAD.SWING_LOOKBACK_FRAMES) -> Optional[float]:
  return wrist_path_speed(
    strike.frames, strike.side, strike.contact, lookback, fps, strike.min_visibility,
    OVERHEAD.SWING_MIN_STEPS, OVERHEAD.SWING_SHOULDER_WIDTHS, OVERHEAD.MIN_SHOULDER_WIDTH,
  )


def finish(strike: Strike, lookahead: int = OVERHEAD.FOLLOW_THROUGH_FRAMES) -> Optional[float]:
  return follow_through(
    strike.frames, strike.side, strike.contact, lookahead, strike.min_visibility,
    OVERHEAD.FOLLOW_THROUGH_MIN_ANGLE, OVERHEAD.FOLLOW_THROUGH_FULL_ANGLE,
  )


def steadiness(strike: Strike) -> Optional[float]:
  """Hip drift from the start of the motion to contact."""
  start = strike.keyframes.start if strike.keyframes.start is not None else 0
  return stability_index(strike.frames, start, strike.contact, strike.min_visibility)


def rise(frames: Sequence[Frame], keyframes: KeyframeSet, min_visibility: float, peak: Optional[int] = None) -> Optional[float]:
  """Hip rise from the start of the motion (or the first frame) to the peak."""
  baseline = keyframes.start if keyframes.start is not None else 0
  return jump_height(frames, baseline, peak if peak is not None else keyframes.peak, min_visibility)
