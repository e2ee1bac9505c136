"""
Badminton flaw rules.
"""
from typing import Tuple

from biome_sports_analysis.flaws import overhead
from biome_sports_analysis.flaws.rules import FlawRule
from biome_sports_analysis.models import BodyPart, Condition, FlawCategory, MetricKey, Severity

LT = Condition.LESS_THAN

_ELBOW_TITLE = "Arm Not Fully Extended at Contact"
_ELBOW_CORRECTION = (
  "Extend your racket arm fully at the moment of contact. Think of \"reaching\" past the shuttle, "
  "not hitting at it."
)
_CONTACT_CORRECTION = "Time your footwork so you arrive underneath the shuttle. Reach at your maximum extension point."
_ROTATION_TITLE = "Insufficient Hip & Shoulder Rotation"
_ROTATION_CORRECTION = (
  "Load your hips by turning your non-dominant side toward the shuttle first, then uncoil hips "
  "before your arm swings."
)
_FOLLOW_CORRECTION = (
  "Let your arm swing fully across your body after contact. The follow-through protects your "
  "shoulder and adds pace."
)
_ALIGNMENT_CORRECTION = "Stay tall through your strokes. A slight forward lean is fine, but keep your core engaged."
_ALIGNMENT_INJURY = "Extreme lean puts strain on the lower back and hamstrings in fast-movement contexts."
_STABILITY_CORRECTION = (
  "Ground yourself with a wide, stable stance before each stroke. Return to a balanced ready "
  "position after each shot."
)
_STABILITY_INJURY = "Significant body sway during racket-sport strokes increases knee and ankle strain risk."


def _follow_through(prefix: str) -> FlawRule:
  return overhead.poor_follow_through(prefix, 45, 35, _FOLLOW_CORRECTION, high_margin=20)


def _alignment(prefix: str) -> Tuple[FlawRule, ...]:
  return overhead.poor_alignment(prefix, "65-100", _ALIGNMENT_CORRECTION, _ALIGNMENT_INJURY)


def _stability(prefix: str) -> Tuple[FlawRule, ...]:
  return overhead.low_stability(prefix, _STABILITY_CORRECTION, _STABILITY_INJURY)


SMASH_RULES: Tuple[FlawRule, ...] = (
  overhead.low_elbow("badminton_smash", title=_ELBOW_TITLE, correction=_ELBOW_CORRECTION),
  overhead.low_contact_height("badminton_smash", 80, "90-125% of body height", 18, _CONTACT_CORRECTION),
  overhead.low_trunk_rotation("badminton_smash", 15, _ROTATION_TITLE, _ROTATION_CORRECTION),
  FlawRule(
    id="badminton_smash_low_wrist_speed",
    metric=MetricKey.WRIST_SPEED,
    condition=LT,
    threshold=40,
    title="Slow Wrist Snap",
    description="Wrist speed score is {value:.0f}/100. A faster wrist snap is the key to a sharp smash.",
    correction=(
      "Keep your wrist cocked back until just before contact, then snap it forward explosively. "
      "Practice shadow strokes focusing on a late, fast wrist action."
    ),
    ideal_range="60-100",
    category=FlawCategory.POWER,
    body_parts=(BodyPart.WRIST,),
    escalations=((20, Severity.HIGH),),
    scale=30,
    keyframe="contact",
  ),
  _follow_through("badminton_smash"),
) + _alignment("badminton_smash")


CLEAR_RULES: Tuple[FlawRule, ...] = (
  overhead.low_elbow("badminton_clear", threshold=135, ideal_range="150-177°", title=_ELBOW_TITLE, correction=_ELBOW_CORRECTION),
  overhead.low_contact_height("badminton_clear", 75, "82-118% of body height", 18, _CONTACT_CORRECTION),
  overhead.low_trunk_rotation("badminton_clear", 12, _ROTATION_TITLE, _ROTATION_CORRECTION),
  _follow_through("badminton_clear"),
) + _alignment("badminton_clear")


DROP_SHOT_RULES: Tuple[FlawRule, ...] = (
  overhead.low_contact_height("badminton_drop_shot", 55, "65-98% of body height", 18, _CONTACT_CORRECTION),
  FlawRule(
    id="badminton_drop_shot_elbow_too_bent",
    metric=MetricKey.ELBOW_ANGLE,
    condition=LT,
    threshold=100,
    title="Elbow Too Bent for Drop Shot",
    description="Elbow angle is only {value:.1f}°. This limits racket reach and shot disguise.",
    correction=(
      "Your arm should be comfortably extended, not straight but not cramped. Think of guiding the "
      "shuttle over the net."
    ),
    ideal_range="118-162°",
    body_parts=(BodyPart.ELBOW,),
    scale=30,
    keyframe="contact",
  ),
  overhead.low_trunk_rotation("badminton_drop_shot", 8, _ROTATION_TITLE, _ROTATION_CORRECTION),
) + _alignment("badminton_drop_shot") + _stability("badminton_drop_shot")


SERVE_RULES: Tuple[FlawRule, ...] = _stability("badminton_serve") + (
  FlawRule(
    id="badminton_serve_elbow_too_bent",
    metric=MetricKey.ELBOW_AT_CONTACT,
    condition=LT,
    threshold=95,
    title="Elbow Too Bent at Serve",
    description="Elbow angle at serve contact is {value:.1f}°. This cramps the swing and reduces consistency.",
    correction=(
      "Relax your arm into a comfortable semi-extended position. Let the shuttle drop to a "
      "consistent toss height before striking."
    ),
    ideal_range="120-165°",
    body_parts=(BodyPart.ELBOW,),
    scale=40,
    keyframe="contact",
  ),
  _follow_through("badminton_serve"),
) + _alignment("badminton_serve")
