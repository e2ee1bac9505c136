"""
Volleyball metric calculators.

Spike and serve are measured around the hitting arm at contact; block and
set use both arms at the moment the hands are highest.
"""
from typing import Dict, Sequence, Tuple

from biome_sports_analysis.biomechanics_standards import OVERHEAD, SPORT_STANDARDS
from biome_sports_analysis.models import Frame, KeyframeSet, MetricKey, MetricTable, Sport
from biome_sports_analysis.metrics import overhead
from biome_sports_analysis.metrics.body import highest_hip_frame, trunk_rotation
from biome_sports_analysis.metrics.geometry import frame_at

VISIBILITY = SPORT_STANDARDS[Sport.VOLLEYBALL].VISIBILITY_FLOOR

# Keyframes each metric depends on; contact falls back to the highest hands
REQUIRES: Dict[MetricKey, Tuple[str, ...]] = {
  MetricKey.JUMP_HEIGHT: ("peak",),
  MetricKey.ARM_SWING_SCORE: ("contact",),
  MetricKey.FOLLOW_THROUGH: ("contact",),
}


def spike(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  strike = overhead.locate_strike(frames, keyframes, VISIBILITY)
  return {
    MetricKey.ELBOW_AT_CONTACT.value: overhead.elbow_at_contact(strike),
    MetricKey.CONTACT_HEIGHT.value: overhead.hitting_hand_height(strike),
    MetricKey.ARM_SWING_SCORE.value: overhead.swing_speed(strike, fps),
    MetricKey.JUMP_HEIGHT.value: overhead.rise(frames, keyframes, VISIBILITY),
    MetricKey.TRUNK_ROTATION.value: trunk_rotation(strike.frame, VISIBILITY),
    MetricKey.BODY_ALIGNMENT.value: overhead.alignment(strike.frame, VISIBILITY),
    MetricKey.STABILITY.value: overhead.steadiness(strike),
  }


def serve(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  strike = overhead.locate_strike(frames, keyframes, VISIBILITY)
  return {
    MetricKey.ELBOW_AT_CONTACT.value: overhead.elbow_at_contact(strike),
    MetricKey.CONTACT_HEIGHT.value: overhead.hitting_hand_height(strike),
    MetricKey.TRUNK_ROTATION.value: trunk_rotation(strike.frame, VISIBILITY),
    MetricKey.FOLLOW_THROUGH.value: overhead.finish(strike, OVERHEAD.SERVE_FOLLOW_THROUGH_FRAMES),
    MetricKey.STABILITY.value: overhead.steadiness(strike),
    MetricKey.ARM_SWING_SCORE.value: overhead.swing_speed(strike, fps, OVERHEAD.SERVE_SWING_LOOKBACK_FRAMES),
  }


def block(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  """Measured at the top of the jump (highest hip when no peak is marked)."""
  peak = keyframes.peak if keyframes.peak is not None else highest_hip_frame(frames, VISIBILITY)
  frame = frame_at(frames, peak)
  return {
    MetricKey.JUMP_HEIGHT.value: overhead.rise(frames, keyframes, VISIBILITY, peak),
    MetricKey.ARM_EXTENSION.value: overhead.mean_elbow_angle(frame, VISIBILITY),
    MetricKey.HAND_HEIGHT.value: overhead.both_hands_height(frame, VISIBILITY),
    MetricKey.HAND_SYMMETRY.value: overhead.symmetry(frame, VISIBILITY),
    MetricKey.BODY_ALIGNMENT.value: overhead.alignment(frame, VISIBILITY),
  }


def set_(frames: Sequence[Frame], keyframes: KeyframeSet, fps: float) -> MetricTable:
  """Measured at contact, or where both hands are highest on average."""
  strike = overhead.locate_strike(frames, keyframes, VISIBILITY, use_mean=True)
  frame = strike.frame
  return {
    MetricKey.HAND_SYMMETRY.value: overhead.symmetry(frame, VISIBILITY),
    MetricKey.ELBOW_ANGLE.value: overhead.mean_elbow_angle(frame, VISIBILITY),
    MetricKey.CONTACT_HEIGHT.value: overhead.both_hands_height(frame, VISIBILITY),
    MetricKey.BODY_ALIGNMENT.value: overhead.alignment(frame, VISIBILITY),
    MetricKey.STABILITY.value: overhead.steadiness(strike),
  }
