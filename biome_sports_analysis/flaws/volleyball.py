"""
Volleyball flaw rules.
"""
from typing import Tuple

from biome_sports_analysis.flaws import overhead
from biome_sports_analysis.flaws.rules import FlawRule
from biome_sports_analysis.models import BodyPart, Condition, FlawCategory, MetricKey, Severity

LT = Condition.LESS_THAN
GT = Condition.GREATER_THAN

_CONTACT_CORRECTION = (
  "Jump earlier and reach at your maximum height. Time your approach so you contact the ball "
  "at the peak of your jump."
)
_ROTATION_CORRECTION = "Load your hips during your approach step, then uncoil as your arm swings. Think \"hips first, then arm.\""
_ALIGNMENT_CORRECTION = (
  "Keep your torso upright as you approach. Lean forward slightly into the ball but avoid "
  "collapsing at the waist."
)
_ALIGNMENT_INJURY = "Extreme trunk lean while jumping and landing loads the lower back."
_STABILITY_CORRECTION = (
  "Plant your feet firmly just before contact. Keep your hips square and drive power upward, "
  "not sideways."
)
_STABILITY_INJURY = "Drifting sideways during take-off and landing increases knee and ankle sprain risk."


def _alignment(prefix: str) -> Tuple[FlawRule, ...]:
  return overhead.poor_alignment(prefix, "70-100", _ALIGNMENT_CORRECTION, _ALIGNMENT_INJURY)


def _stability(prefix: str) -> Tuple[FlawRule, ...]:
  return overhead.low_stability(prefix, _STABILITY_CORRECTION, _STABILITY_INJURY)


SPIKE_RULES: Tuple[FlawRule, ...] = (
  overhead.low_elbow("volleyball_spike"),
  overhead.low_contact_height("volleyball_spike", 78, "85-115% of body height", 18, _CONTACT_CORRECTION),
  FlawRule(
    id="volleyball_spike_slow_arm_swing",
    metric=MetricKey.ARM_SWING_SCORE,
    condition=LT,
    threshold=45,
    title="Slow Arm Swing",
    description="Arm swing score is {value:.0f}/100.",
    correction="Accelerate your elbow pull-back before swinging through. Keep a relaxed wrist until contact, then snap.",
    ideal_range="65-100",
    category=FlawCategory.POWER,
    body_parts=(BodyPart.SHOULDER, BodyPart.ELBOW, BodyPart.WRIST),
    escalations=((20, Severity.HIGH),),
    scale=30,
    keyframe="contact",
  ),
  FlawRule(
    id="volleyball_spike_low_jump",
    metric=MetricKey.JUMP_HEIGHT,
    condition=LT,
    threshold=0.04,
    title="Low Spike Jump Height",
    description="Hip rise is {value:.3f} of frame height.",
    correction="Use a full 3- or 4-step approach to build momentum. Plant hard on your last step and explode upward.",
    ideal_range="7-20% of body height",
    severity=Severity.LOW,
    category=FlawCategory.POWER,
    body_parts=(BodyPart.KNEE, BodyPart.ANKLE),
    scale=0.07,
    reference=0.07,
    keyframe="peak",
  ),
  overhead.low_trunk_rotation("volleyball_spike", 15, "Insufficient Hip Rotation", _ROTATION_CORRECTION),
) + _alignment("volleyball_spike") + _stability("volleyball_spike")


SERVE_RULES: Tuple[FlawRule, ...] = (
  overhead.low_elbow("volleyball_serve", threshold=135, ideal_range="155-175°"),
  overhead.low_contact_height("volleyball_serve", 72, "78-110% of body height", 12, _CONTACT_CORRECTION),
  overhead.low_trunk_rotation("volleyball_serve", 12, "Insufficient Hip Rotation", _ROTATION_CORRECTION),
  overhead.poor_follow_through(
    "volleyball_serve", 50, 40,
    "Let your arm continue across your body after contact. The follow-through should naturally pull "
    "you into a balanced ready position.",
  ),
) + _stability("volleyball_serve")


BLOCK_RULES: Tuple[FlawRule, ...] = (
  FlawRule(
    id="volleyball_block_low_jump",
    metric=MetricKey.JUMP_HEIGHT,
    condition=LT,
    threshold=0.03,
    title="Low Block Jump Height",
    description="Hip rise is {value:.3f} of frame height.",
    correction=(
      "Bend knees lower into a ready squat before the block. Use a two-foot explosive jump timed "
      "with the attacker's arm swing."
    ),
    ideal_range="5-18% of body height",
    category=FlawCategory.POWER,
    body_parts=(BodyPart.KNEE, BodyPart.ANKLE),
    scale=0.05,
    reference=0.05,
    keyframe="peak",
  ),
  FlawRule(
    id="volleyball_block_low_arm_extension",
    metric=MetricKey.ARM_EXTENSION,
    condition=LT,
    threshold=140,
    title="Arms Not Fully Extended",
    description="Average elbow angle is {value:.1f}° at the top of the block.",
    correction="Push your arms straight up over the net, pressing actively over rather than just reaching up.",
    ideal_range="155-177°",
    body_parts=(BodyPart.ELBOW, BodyPart.SHOULDER),
    escalations=((25, Severity.HIGH),),
    scale=30,
    keyframe="peak",
  ),
  FlawRule(
    id="volleyball_block_low_hand_height",
    metric=MetricKey.HAND_HEIGHT,
    condition=LT,
    threshold=78,
    title="Block Too Low",
    description="Hands are at {value:.0f}% of body height.",
    correction="Reach over the net as high as possible. Focus on a quick, snapping block motion to get maximum penetration.",
    ideal_range="85-115% of body height",
    body_parts=(BodyPart.WRIST, BodyPart.ELBOW, BodyPart.SHOULDER),
    scale=20,
    keyframe="peak",
  ),
  FlawRule(
    id="volleyball_block_asymmetric_hands",
    metric=MetricKey.HAND_SYMMETRY,
    condition=LT,
    threshold=60,
    title="Uneven Hand Position",
    description="Hand symmetry is {value:.0f}/100.",
    correction="Keep both hands at equal height with spread fingers. Think of forming a wall, not reaching with one hand.",
    ideal_range="80-100",
    body_parts=(BodyPart.WRIST, BodyPart.ELBOW),
    scale=30,
    keyframe="peak",
  ),
) + _alignment("volleyball_block")


SET_RULES: Tuple[FlawRule, ...] = (
  FlawRule(
    id="volleyball_set_asymmetric_hands",
    metric=MetricKey.HAND_SYMMETRY,
    condition=LT,
    threshold=55,
    title="Asymmetric Hand Contact",
    description="Hand symmetry is {value:.0f}/100. One hand meets the ball before the other.",
    correction="Form a triangle with your thumbs and index fingers before contact. Both hands must touch the ball simultaneously.",
    ideal_range="80-100",
    body_parts=(BodyPart.WRIST, BodyPart.ELBOW),
    escalations=((20, Severity.HIGH),),
    scale=30,
    keyframe="contact",
  ),
  FlawRule(
    id="volleyball_set_elbow_too_bent",
    metric=MetricKey.ELBOW_ANGLE,
    condition=LT,
    threshold=70,
    title="Arms Too Bent",
    description="Average elbow angle is {value:.1f}° at contact.",
    correction="Keep your elbows out and forward, about shoulder width. Avoid pulling them into your body.",
    ideal_range="90-135°",
    body_parts=(BodyPart.ELBOW, BodyPart.SHOULDER),
    scale=25,
    exclusive_group="elbow",
    keyframe="contact",
  ),
  FlawRule(
    id="volleyball_set_elbow_too_straight",
    metric=MetricKey.ELBOW_ANGLE,
    condition=GT,
    threshold=155,
    title="Arms Too Straight for Setting",
    description="Average elbow angle is {value:.1f}° at contact.",
    correction="Relax into a comfortable bend (like holding a ball above your head) to maintain touch and control.",
    ideal_range="90-135°",
    severity=Severity.LOW,
    body_parts=(BodyPart.ELBOW,),
    scale=20,
    exclusive_group="elbow",
    keyframe="contact",
  ),
) + _alignment("volleyball_set") + _stability("volleyball_set")
