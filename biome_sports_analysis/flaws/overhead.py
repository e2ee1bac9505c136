"""
Rule builders shared by the overhead striking sports (volleyball, badminton).
"""
from typing import Tuple

from biome_sports_analysis.flaws.rules import FlawRule
from biome_sports_analysis.models import BodyPart, Condition, FlawCategory, MetricKey, Severity

LT = Condition.LESS_THAN


def low_elbow(
  prefix: str,
  threshold: float = 140,
  ideal_range: str = "155-177°",
  title: str = "Arm Not Fully Extended",
  correction: str = "Fully extend your hitting arm at contact. Think of reaching up and through the ball at the highest point.",
) -> FlawRule:
  return FlawRule(
    id=f"{prefix}_low_elbow_extension",
    metric=MetricKey.ELBOW_AT_CONTACT,
    condition=LT,
    threshold=threshold,
    title=title,
    description="Elbow angle at contact is {value:.1f}°. A straighter arm produces more power and reach.",
    correction=correction,
    ideal_range=ideal_range,
    body_parts=(BodyPart.ELBOW, BodyPart.SHOULDER),
    # below 115° is always high priority
    escalations=((threshold - 115, Severity.HIGH),),
    scale=25,
    keyframe="contact",
  )


def low_contact_height(
  prefix: str,
  threshold: float,
  ideal_range: str,
  high_margin: float,
  correction: str,
) -> FlawRule:
  return FlawRule(
    id=f"{prefix}_low_contact_height",
    metric=MetricKey.CONTACT_HEIGHT,
    condition=LT,
    threshold=threshold,
    title="Low Contact Point",
    description="Contact height is {value:.0f}% of body height.",
    correction=correction,
    ideal_range=ideal_range,
    body_parts=(BodyPart.SHOULDER, BodyPart.ELBOW, BodyPart.WRIST),
    escalations=((high_margin, Severity.HIGH),),
    scale=20,
    keyframe="contact",
  )


def low_trunk_rotation(prefix: str, threshold: float, title: str, correction: str) -> FlawRule:
  return FlawRule(
    id=f"{prefix}_low_trunk_rotation",
    metric=MetricKey.TRUNK_ROTATION,
    condition=LT,
    threshold=threshold,
    title=title,
    description="Trunk rotation is only {value:.1f}°. Hip-shoulder separation is the main power source.",
    correction=correction,
    ideal_range="25-60°",
    category=FlawCategory.POWER,
    body_parts=(BodyPart.HIP, BodyPart.TORSO, BodyPart.SHOULDER),
    scale=15,
    keyframe="contact",
  )


def poor_alignment(prefix: str, ideal_range: str, correction: str, injury_details: str) -> Tuple[FlawRule, ...]:
  """Severe lean (< 35) is an injury risk; moderate lean (< 55) is not."""
  common = dict(
    metric=MetricKey.BODY_ALIGNMENT,
    condition=LT,
    title="Poor Body Posture",
    description="Body alignment score is {value:.0f}/100. Excessive trunk lean reduces power and control.",
    correction=correction,
    ideal_range=ideal_range,
    category=FlawCategory.BALANCE,
    body_parts=(BodyPart.TORSO, BodyPart.HIP),
    scale=30,
    reference=55,
    exclusive_group="alignment",
    keyframe="contact",
  )
  return (
    FlawRule(
      id=f"{prefix}_poor_body_alignment",
      threshold=35,
      severity=Severity.HIGH,
      injury_risk=True,
      injury_details=injury_details,
      **common,
    ),
    FlawRule(id=f"{prefix}_poor_body_alignment", threshold=55, **common),
  )


def low_stability(prefix: str, correction: str, injury_details: str) -> Tuple[FlawRule, ...]:
  """Severe sway (< 40) is an injury risk; moderate sway (< 60) is not."""
  common = dict(
    metric=MetricKey.STABILITY,
    condition=LT,
    title="Unstable Base",
    description="Stability score is {value:.0f}/100. Lateral sway bleeds power from the stroke.",
    correction=correction,
    ideal_range="75-100",
    category=FlawCategory.BALANCE,
    body_parts=(BodyPart.HIP, BodyPart.ANKLE, BodyPart.KNEE),
    scale=30,
    reference=60,
    exclusive_group="stability",
    keyframe="start",
  )
  return (
    FlawRule(
      id=f"{prefix}_low_stability",
      threshold=40,
      severity=Severity.HIGH,
      injury_risk=True,
      injury_details=injury_details,
      **common,
    ),
    FlawRule(id=f"{prefix}_low_stability", threshold=60, **common),
  )


def poor_follow_through(
  prefix: str,
  threshold: float,
  scale: float,
  correction: str,
  high_margin: float = 0.0,
) -> FlawRule:
  return FlawRule(
    id=f"{prefix}_poor_follow_through",
    metric=MetricKey.FOLLOW_THROUGH,
    condition=LT,
    threshold=threshold,
    title="Incomplete Follow-Through",
    description="Follow-through score is {value:.0f}/100. Stopping the swing early reduces power and consistency.",
    correction=correction,
    ideal_range="65-100",
    body_parts=(BodyPart.WRIST, BodyPart.ELBOW, BodyPart.SHOULDER),
    escalations=((high_margin, Severity.HIGH),) if high_margin else (),
    scale=scale,
    keyframe="contact",
  )
