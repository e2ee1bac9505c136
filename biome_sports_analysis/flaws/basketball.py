"""
Basketball flaw rules.
"""
from typing import Tuple

from biome_sports_analysis.flaws.rules import FlawRule
from biome_sports_analysis.models import BodyPart, Condition, FlawCategory, MetricKey, Severity

LT = Condition.LESS_THAN
GT = Condition.GREATER_THAN


def _shooting_rules(prefix: str, release: str) -> Tuple[FlawRule, ...]:
  """Arm and balance checks shared by jump shots and free throws."""
  return (
    FlawRule(
      id=f"{prefix}_low_release_angle",
      metric=MetricKey.RELEASE_ANGLE,
      condition=LT,
      threshold=42,
      title="Low Release Angle",
      description="Release angle is {value:.1f}°. A flat shot has a smaller target window at the rim.",
      correction=(
        "Focus on pushing the ball upward, not forward. Imagine shooting over a tall defender. "
        "Your guide hand should release cleanly without pushing sideways."
      ),
      ideal_range="50-55°",
      category=FlawCategory.FORM,
      body_parts=(BodyPart.WRIST, BodyPart.ELBOW),
      scale=15,
      exclusive_group="release_angle",
      keyframe=release,
    ),
    FlawRule(
      id=f"{prefix}_high_release_angle",
      metric=MetricKey.RELEASE_ANGLE,
      condition=GT,
      threshold=65,
      title="Excessive Release Angle",
      description="Release angle is {value:.1f}°. A very steep arc costs distance control.",
      correction="Your arc is too high. Focus on a more direct path to the basket while maintaining smooth follow-through.",
      ideal_range="50-55°",
      severity=Severity.LOW,
      body_parts=(BodyPart.WRIST, BodyPart.ELBOW),
      scale=15,
      exclusive_group="release_angle",
      keyframe=release,
    ),
    FlawRule(
      id=f"{prefix}_elbow_hyperextension",
      metric=MetricKey.ELBOW_ANGLE_AT_RELEASE,
      condition=GT,
      threshold=175,
      title="Elbow Hyperextension",
      description="Elbow angle at release is {value:.1f}°. The shooting arm is locking out.",
      correction=(
        "Maintain a slight bend in your elbow at release. This allows for proper follow-through "
        "and reduces joint stress. Think \"extend, don't lock.\""
      ),
      ideal_range="150-170°",
      category=FlawCategory.INJURY_RISK,
      injury_risk=True,
      injury_details=(
        "Repeated hyperextension of the elbow during shooting can lead to elbow strain, tendinitis "
        "and long-term joint damage."
      ),
      body_parts=(BodyPart.ELBOW,),
      escalations=((2.5, Severity.HIGH),),
      scale=5,
      exclusive_group="elbow",
      keyframe=release,
    ),
    FlawRule(
      id=f"{prefix}_elbow_underextension",
      metric=MetricKey.ELBOW_ANGLE_AT_RELEASE,
      condition=LT,
      threshold=130,
      title="Under-Extended Elbow",
      description="Elbow angle at release is only {value:.1f}°. The ball is being pushed rather than shot.",
      correction=(
        "Extend your shooting arm more fully toward the basket. The power should come from your legs, "
        "allowing your arm to extend naturally."
      ),
      ideal_range="150-170°",
      severity=Severity.HIGH,
      body_parts=(BodyPart.ELBOW, BodyPart.SHOULDER),
      scale=20,
      exclusive_group="elbow",
      keyframe=release,
    ),
    FlawRule(
      id=f"{prefix}_severe_instability",
      metric=MetricKey.STABILITY_INDEX,
      condition=LT,
      threshold=60,
      title="Severe Balance Issues",
      description="Stability index is {value:.0f}/100. The hips drift sideways during the shot.",
      correction=(
        "Focus on shooting straight up and down. Your feet should land close to where they took off. "
        "Practice with your feet shoulder-width apart."
      ),
      ideal_range="85-100",
      severity=Severity.HIGH,
      category=FlawCategory.BALANCE,
      injury_risk=True,
      injury_details=(
        "Landing off-balance after a jump shot puts excessive stress on your ankles and knees, "
        "increasing the risk of sprains and ligament injuries."
      ),
      body_parts=(BodyPart.ANKLE, BodyPart.KNEE, BodyPart.HIP),
      scale=30,
      exclusive_group="stability",
      keyframe="start",
    ),
    FlawRule(
      id=f"{prefix}_moderate_instability",
      metric=MetricKey.STABILITY_INDEX,
      condition=LT,
      threshold=75,
      title="Balance Needs Improvement",
      description="Stability index is {value:.0f}/100.",
      correction="Work on core strength and footwork. Square your shoulders to the basket before shooting.",
      ideal_range="85-100",
      category=FlawCategory.BALANCE,
      body_parts=(BodyPart.ANKLE, BodyPart.HIP),
      scale=20,
      exclusive_group="stability",
      keyframe="start",
    ),
    FlawRule(
      id=f"{prefix}_poor_followthrough",
      metric=MetricKey.FOLLOW_THROUGH_SCORE,
      condition=LT,
      threshold=40,
      title="Incomplete Follow-Through",
      description="Follow-through score is {value:.0f}/100. The arm stops extending right after release.",
      correction=(
        "Hold your follow-through until the ball reaches the basket. Your wrist should be relaxed "
        "and pointing down (the \"gooseneck\" position)."
      ),
      ideal_range="70-100",
      body_parts=(BodyPart.WRIST, BodyPart.ELBOW),
      scale=50,
      reference=50,
      keyframe=release,
    ),
  )


JUMP_SHOT_RULES: Tuple[FlawRule, ...] = _shooting_rules("basketball_jumpshot", "contact") + (
  FlawRule(
    id="basketball_jumpshot_knee_underextension_severe",
    metric=MetricKey.KNEE_ANGLE_AT_PEAK,
    condition=LT,
    threshold=110,
    title="Poor Knee Extension",
    description="Knee angle at the top of the jump is {value:.1f}°.",
    correction=(
      "Drive through your legs more explosively. Your legs should be nearly straight at the peak "
      "of your jump so your arms don't have to work as hard."
    ),
    ideal_range="160-180°",
    severity=Severity.HIGH,
    category=FlawCategory.POWER,
    body_parts=(BodyPart.KNEE, BodyPart.HIP),
    scale=30,
    exclusive_group="knee",
    keyframe="peak",
  ),
  FlawRule(
    id="basketball_jumpshot_knee_underextension_moderate",
    metric=MetricKey.KNEE_ANGLE_AT_PEAK,
    condition=LT,
    threshold=140,
    title="Incomplete Leg Drive",
    description="Knee angle at the top of the jump is {value:.1f}°.",
    correction="Focus on pushing through the floor and extending your legs fully. The jump should feel explosive, not rushed.",
    ideal_range="160-180°",
    category=FlawCategory.POWER,
    body_parts=(BodyPart.KNEE,),
    scale=30,
    exclusive_group="knee",
    keyframe="peak",
  ),
  FlawRule(
    id="basketball_jumpshot_minimal_jump",
    metric=MetricKey.JUMP_HEIGHT_NORMALIZED,
    condition=LT,
    threshold=0.03,
    title="Minimal Jump Height",
    description="Hip rise is {value:.3f} of frame height.",
    correction="Focus on getting more elevation on your shot. Use your legs to jump up, not forward.",
    ideal_range="8-15% of body height",
    severity=Severity.LOW,
    category=FlawCategory.POWER,
    body_parts=(BodyPart.KNEE, BodyPart.ANKLE),
    scale=0.05,
    reference=0.05,
    exclusive_group="jump",
    keyframe="peak",
  ),
  FlawRule(
    id="basketball_jumpshot_low_jump",
    metric=MetricKey.JUMP_HEIGHT_NORMALIZED,
    condition=LT,
    threshold=0.05,
    title="Low Jump Height",
    description="Hip rise is {value:.3f} of frame height.",
    correction="Work on your vertical leap and timing. The jump should be part of your natural shooting rhythm.",
    ideal_range="8-15% of body height",
    severity=Severity.LOW,
    category=FlawCategory.POWER,
    body_parts=(BodyPart.KNEE, BodyPart.ANKLE),
    scale=0.08,
    reference=0.08,
    exclusive_group="jump",
    keyframe="peak",
  ),
  FlawRule(
    id="basketball_jumpshot_late_release",
    metric=MetricKey.RELEASE_TIMING_MS,
    condition=GT,
    threshold=80,
    title="Late Release",
    description="Ball released {value:.0f} ms after the top of the jump.",
    correction="Release the ball at or slightly before the peak of your jump to use your upward momentum.",
    ideal_range="-50 ms to 0 ms (at or before peak)",
    category=FlawCategory.TIMING,
    body_parts=(BodyPart.WRIST, BodyPart.ELBOW),
    scale=100,
    reference=50,
    exclusive_group="timing",
    keyframe="contact",
  ),
  FlawRule(
    id="basketball_jumpshot_early_release",
    metric=MetricKey.RELEASE_TIMING_MS,
    condition=LT,
    threshold=-120,
    title="Very Early Release",
    description="Ball released {value:.0f} ms before the top of the jump.",
    correction="Take your time on the shot. Let your jump develop before releasing.",
    ideal_range="-50 ms to 0 ms (at or before peak)",
    severity=Severity.LOW,
    category=FlawCategory.TIMING,
    body_parts=(BodyPart.WRIST, BodyPart.ELBOW),
    scale=80,
    exclusive_group="timing",
    keyframe="contact",
  ),
)


FREE_THROW_RULES: Tuple[FlawRule, ...] = _shooting_rules("basketball_free_throw", "contact") + (
  FlawRule(
    id="basketball_free_throw_weak_leg_push",
    metric=MetricKey.KNEE_ANGLE_PUSH,
    condition=LT,
    threshold=120,
    title="Legs Not Used",
    description="Knee angle at release is {value:.1f}°. The shot is coming from the arms alone.",
    correction="Dip slightly and rise through your legs as the ball comes up. The legs set the distance, the arm sets the direction.",
    ideal_range="150-180°",
    severity=Severity.LOW,
    category=FlawCategory.POWER,
    body_parts=(BodyPart.KNEE,),
    scale=30,
    keyframe="contact",
  ),
  FlawRule(
    id="basketball_free_throw_inconsistent_rhythm",
    metric=MetricKey.RHYTHM_CONSISTENCY,
    condition=LT,
    threshold=50,
    title="Inconsistent Set-Up Rhythm",
    description="Rhythm consistency is {value:.0f}/100. The shooting hand wobbles on the way up.",
    correction="Use the same routine every time: same dribbles, same dip, one smooth motion into the release.",
    ideal_range="72-100",
    category=FlawCategory.TIMING,
    body_parts=(BodyPart.WRIST,),
    scale=40,
    keyframe="start",
  ),
)


LAYUP_RULES: Tuple[FlawRule, ...] = (
  FlawRule(
    id="basketball_layup_takeoff_angle",
    metric=MetricKey.TAKEOFF_ANGLE,
    condition=Condition.OUTSIDE,
    threshold=(40, 85),
    title="Take-Off Angle Off",
    description="Take-off angle is {value:.1f}°.",
    correction=(
      "Convert your approach speed into height: plant the inside foot, drive the opposite knee up "
      "and jump toward the rim rather than straight up or flat."
    ),
    ideal_range="55-80°",
    category=FlawCategory.FORM,
    body_parts=(BodyPart.HIP, BodyPart.KNEE),
    scale=20,
    keyframe="start",
  ),
  FlawRule(
    id="basketball_layup_slow_approach",
    metric=MetricKey.APPROACH_SPEED,
    condition=LT,
    threshold=30,
    title="Slow Approach",
    description="Approach speed score is {value:.0f}/100.",
    correction="Attack the basket with your last two steps. Speed into the gather makes the take-off easier.",
    ideal_range="55-100",
    severity=Severity.LOW,
    category=FlawCategory.POWER,
    body_parts=(BodyPart.FULL_BODY,),
    scale=30,
    keyframe="start",
  ),
  FlawRule(
    id="basketball_layup_low_finish",
    metric=MetricKey.FINISH_HAND_POSITION,
    condition=LT,
    threshold=60,
    title="Low Finishing Hand",
    description="Finishing hand is at {value:.0f}% of body height.",
    correction="Reach high with the finishing hand and lay the ball off the glass at the top of your jump.",
    ideal_range="78-110% of body height",
    category=FlawCategory.FORM,
    body_parts=(BodyPart.WRIST, BodyPart.ELBOW, BodyPart.SHOULDER),
    scale=25,
    keyframe="contact",
  ),
  FlawRule(
    id="basketball_layup_severe_instability",
    metric=MetricKey.STABILITY_INDEX,
    condition=LT,
    threshold=40,
    title="Off-Balance Finish",
    description="Stability index is {value:.0f}/100.",
    correction="Control your momentum on the gather step so you finish going up, not sideways.",
    ideal_range="68-100",
    severity=Severity.HIGH,
    category=FlawCategory.BALANCE,
    injury_risk=True,
    injury_details="Drifting sideways through a layup leads to awkward landings that strain the ankles and knees.",
    body_parts=(BodyPart.ANKLE, BodyPart.KNEE, BodyPart.HIP),
    scale=30,
    exclusive_group="stability",
    keyframe="start",
  ),
  FlawRule(
    id="basketball_layup_moderate_instability",
    metric=MetricKey.STABILITY_INDEX,
    condition=LT,
    threshold=60,
    title="Balance Needs Improvement",
    description="Stability index is {value:.0f}/100.",
    correction="Gather with both hands and keep your chest facing the rim through the take-off.",
    ideal_range="68-100",
    category=FlawCategory.BALANCE,
    body_parts=(BodyPart.ANKLE, BodyPart.HIP),
    scale=20,
    exclusive_group="stability",
    keyframe="start",
  ),
)


DRIBBLING_RULES: Tuple[FlawRule, ...] = (
  FlawRule(
    id="straight_knee_dribble",
    metric=MetricKey.KNEE_BEND_SCORE,
    condition=LT,
    threshold=35,
    title="Standing Too Upright",
    description="Knee bend score is {value:.0f}/100. A tall stance makes the ball easier to take.",
    correction=(
      "Bend your knees to lower your centre of gravity. Imagine sitting back into a quarter-squat. "
      "This improves explosiveness and balance and makes you harder to defend."
    ),
    ideal_range="50-100 (low, bent-knee stance)",
    body_parts=(BodyPart.KNEE, BodyPart.HIP),
    escalations=((20, Severity.HIGH),),
    scale=20,
  ),
  FlawRule(
    id="narrow_stance_dribble",
    metric=MetricKey.STANCE_WIDTH,
    condition=LT,
    threshold=70,
    title="Stance Too Narrow",
    description="Feet are {value:.0f}% of shoulder width apart.",
    correction=(
      "Widen your stance to at least shoulder width. Plant your feet firmly with toes slightly out "
      "to create a solid base for ball-handling."
    ),
    ideal_range="85-125% of shoulder width",
    category=FlawCategory.BALANCE,
    body_parts=(BodyPart.ANKLE, BodyPart.KNEE, BodyPart.HIP),
    scale=20,
  ),
  FlawRule(
    id="wide_stance_dribble",
    metric=MetricKey.STANCE_WIDTH,
    condition=GT,
    threshold=220,
    title="Stance Extremely Wide",
    description="Feet are {value:.0f}% of shoulder width apart.",
    correction="Bring your feet in slightly so you can push off quickly in either direction.",
    ideal_range="70-180% of shoulder width",
    severity=Severity.LOW,
    category=FlawCategory.BALANCE,
    body_parts=(BodyPart.ANKLE, BodyPart.KNEE),
    scale=40,
  ),
  FlawRule(
    id="poor_balance_dribble",
    metric=MetricKey.BALANCE_SCORE,
    condition=LT,
    threshold=55,
    title="Inconsistent Body Balance",
    description="Balance score is {value:.0f}/100. The hips sway from side to side while dribbling.",
    correction="Keep your weight centred over the balls of your feet and let the ball move, not your hips.",
    ideal_range="70-100 (minimal sway)",
    category=FlawCategory.BALANCE,
    body_parts=(BodyPart.HIP, BodyPart.TORSO, BodyPart.FULL_BODY),
    escalations=((20, Severity.HIGH),),
    scale=25,
  ),
  FlawRule(
    id="excessive_lean_dribble",
    metric=MetricKey.TRUNK_LEAN,
    condition=GT,
    threshold=35,
    title="Leaning Too Far Forward",
    description="Trunk lean is {value:.1f}°.",
    correction="Keep your chest up and eyes forward. Bend at the knees, not the waist.",
    ideal_range="5-25°",
    severity=Severity.LOW,
    category=FlawCategory.FORM,
    body_parts=(BodyPart.TORSO,),
    scale=15,
  ),
)
