"""
Badminton metric calculators.
"""
from typing import Dict, Sequence, Tuple

from biome_sports_analysis.biomechanics_standards import OVERHEAD, SPORT_STANDARDS
from biome_sports_analysis.models import Frame, KeyframeSet, MetricKey, MetricTable, Sport
from biome_sports_analysis.metrics import overhead
from biome_sports_analysis.metrics.body import trunk_rotation

VISIBILITY = SPORT_STANDARDS[Sport.BADMINTON].VISIBILITY_FLOOR

REQUIRES: Dict[MetricKey, Tuple[str, ...]] = {
  MetricKey.JUMP_HEIGHT: ("peak",),
  MetricKey.WRIST_SPEED: ("contact",),
  MetricKey.FOLLOW_THROUGH: ("contact",),
}


def smash(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  strike = overhead.locate_strike(frames, keyframes, VISIBILITY)
  return {
    MetricKey.ELBOW_AT_CONTACT.value: overhead.elbow_at_contact(strike),
    MetricKey.CONTACT_HEIGHT.value: overhead.hitting_hand_height(strike),
    MetricKey.TRUNK_ROTATION.value: trunk_rotation(strike.frame, VISIBILITY),
    MetricKey.WRIST_SPEED.value: overhead.swing_speed(strike, fps),
    MetricKey.JUMP_HEIGHT.value: overhead.rise(frames, keyframes, VISIBILITY),
    MetricKey.FOLLOW_THROUGH.value: overhead.finish(strike),
    MetricKey.BODY_ALIGNMENT.value: overhead.alignment(strike.frame, VISIBILITY),
  }


def clear(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  strike = overhead.locate_strike(frames, keyframes, VISIBILITY)
  return {
    MetricKey.ELBOW_AT_CONTACT.value: overhead.elbow_at_contact(strike),
    MetricKey.CONTACT_HEIGHT.value: overhead.hitting_hand_height(strike),
    MetricKey.TRUNK_ROTATION.value: trunk_rotation(strike.frame, VISIBILITY),
    MetricKey.FOLLOW_THROUGH.value: overhead.finish(strike),
    MetricKey.BODY_ALIGNMENT.value: overhead.alignment(strike.frame, VISIBILITY),
    MetricKey.WRIST_SPEED.value: overhead.swing_speed(strike, fps),
  }


def drop_shot(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  """Drop shots are judged on a softer, lower contact: elbow_angle is the hitting elbow."""
  strike = overhead.locate_strike(frames, keyframes, VISIBILITY)
  return {
    MetricKey.CONTACT_HEIGHT.value: overhead.hitting_hand_height(strike),
    MetricKey.ELBOW_ANGLE.value: overhead.elbow_at_contact(strike),
    MetricKey.TRUNK_ROTATION.value: trunk_rotation(strike.frame, VISIBILITY),
    MetricKey.BODY_ALIGNMENT.value: overhead.alignment(strike.frame, VISIBILITY),
    MetricKey.STABILITY.value: overhead.steadiness(strike),
  }


def serve(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  strike = overhead.locate_strike(frames, keyframes, VISIBILITY)
  return {
    MetricKey.STABILITY.value: overhead.steadiness(strike),
    MetricKey.ELBOW_AT_CONTACT.value: overhead.elbow_at_contact(strike),
    MetricKey.FOLLOW_THROUGH.value: overhead.finish(strike, OVERHEAD.SERVE_FOLLOW_THROUGH_FRAMES),
    MetricKey.BODY_ALIGNMENT.value: overhead.alignment(strike.frame, VISIBILITY),
  }
