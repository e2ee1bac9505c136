"""
Threshold rule engine for technique flaws.

A rule reads one metric and fires when the value is below, above or outside
a threshold. Severity grows with how far the threshold is violated, and the
confidence grows with the distance from a reference point.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from biome_sports_analysis.models import (
  BodyPart,
  Condition,
  FlawCategory,
  KeyframeSet,
  MetricKey,
  RiskLevel,
  Severity,
  metric_value,
)

Threshold = Union[float, Tuple[float, float]]


@dataclass(frozen=True)
class FlawRule:
  """
  One threshold check on one metric.

  Attributes:
    id: Stable identifier of the emitted flaw.
    metric: Metric the rule reads.
    condition: less_than, greater_than or outside.
    threshold: Single bound, or (low, high) for `outside`.
    severity: Base severity when the rule fires.
    escalations: (violation, severity) pairs; the last pair whose violation
      is strictly exceeded sets the severity.
    scale: Distance from `reference` that gives full confidence.
    reference: Point confidence is measured from (defaults to the violated bound).
    exclusive_group: Among rules sharing a group, only the first that fires is kept.
    keyframe: Keyframe the flaw is anchored to.
  """
  id: str
  metric: MetricKey
  condition: Condition
  threshold: Threshold
  title: str
  description: str
  correction: str
  ideal_range: str
  severity: Severity = Severity.MEDIUM
  category: FlawCategory = FlawCategory.FORM
  injury_risk: bool = False
  injury_details: Optional[str] = None
  body_parts: Tuple[BodyPart, ...] = ()
  escalations: Tuple[Tuple[float, Severity], ...] = ()
  scale: float = 1.0
  reference: Optional[float] = None
  exclusive_group: Optional[str] = None
  keyframe: Optional[str] = None

  def bound(self, value: float) -> Optional[float]:
    """The bound `value` violates, or None when the rule does not fire."""
    if self.condition == Condition.LESS_THAN:
      return self.threshold if value < self.threshold else None
    if self.condition == Condition.GREATER_THAN:
      return self.threshold if value > self.threshold else None
    low, high = self.threshold
    if value < low:
      return low
    if value > high:
      return high
    return None

  def severity_for(self, violation: float) -> Severity:
    severity = self.severity
    for magnitude, escalated in self.escalations:
      if violation > magnitude:
        severity = escalated
    return severity

  def confidence_for(self, value: float, bound: float) -> float:
    reference = self.reference if self.reference is not None else bound
    if self.scale <= 0:
      return 1.0
    return max(0.0, min(1.0, abs(value - reference) / self.scale))


@dataclass(frozen=True)
class Flaw:
  id: str
  title: str
  description: str
  severity: Severity
  category: FlawCategory
  injury_risk: bool
  affected_body_parts: Tuple[BodyPart, ...]
  actual_value: float
  threshold: Threshold
  ideal_range: str
  correction: str
  confidence: float
  injury_details: Optional[str] = None
  key_frame: Optional[int] = None

  def to_dict(self) -> Dict[str, Any]:
    result: Dict[str, Any] = {
      "id": self.id,
      "title": self.title,
      "description": self.description,
      "severity": self.severity.value,
      "category": self.category.value,
      "injury_risk": self.injury_risk,
      "affected_body_parts": [p.value for p in self.affected_body_parts],
      "actual_value": self.actual_value,
      "threshold": list(self.threshold) if isinstance(self.threshold, tuple) else self.threshold,
      "ideal_range": self.ideal_range,
      "correction": self.correction,
      "confidence": round(self.confidence, 4),
      "key_frame": self.key_frame,
    }
    if self.injury_details:
      result["injury_details"] = self.injury_details
    return result


@dataclass(frozen=True)
class FlawReport:
  flaws: List[Flaw] = field(default_factory=list)
  rules_evaluated: int = 0
  overall_injury_risk: RiskLevel = RiskLevel.NONE
  summary: str = ""

  def to_dict(self) -> Dict[str, Any]:
    return {
      "flaws": [f.to_dict() for f in self.flaws],
      "rules_evaluated": self.rules_evaluated,
      "overall_injury_risk": self.overall_injury_risk.value,
      "summary": self.summary,
    }


def evaluate_rule(
  rule: FlawRule,
  metrics: Mapping[str, Optional[float]],
  keyframes: Optional[KeyframeSet] = None,
) -> Optional[Flaw]:
  """Apply one rule; None when the metric is missing or within bounds."""
  value = metric_value(metrics, rule.metric)
  if value is None:
    return None
  bound = rule.bound(value)
  if bound is None:
    return None

  key_frame = getattr(keyframes, rule.keyframe) if keyframes is not None and rule.keyframe else None
  return Flaw(
    id=rule.id,
    title=rule.title,
    description=rule.description.format(value=value),
    severity=rule.severity_for(abs(value - bound)),
    category=rule.category,
    injury_risk=rule.injury_risk,
    injury_details=rule.injury_details if rule.injury_risk else None,
    affected_body_parts=rule.body_parts,
    actual_value=value,
    threshold=rule.threshold,
    ideal_range=rule.ideal_range,
    correction=rule.correction,
    confidence=rule.confidence_for(value, bound),
    key_frame=key_frame,
  )


def count_checks(rules: Sequence[FlawRule]) -> int:
  """Number of independent checks; an exclusive group counts once."""
  return len({rule.exclusive_group or rule.id for rule in rules})


def sort_flaws(flaws: List[Flaw]) -> List[Flaw]:
  """Injury risks first, then high, medium, low; ties keep rule order."""
  return sorted(flaws, key=lambda f: (not f.injury_risk, f.severity.rank))


def aggregate_risk(flaws: Sequence[Flaw]) -> RiskLevel:
  injury = [f for f in flaws if f.injury_risk]
  if any(f.severity == Severity.HIGH for f in injury):
    return RiskLevel.HIGH
  if len(injury) >= 2:
    return RiskLevel.MODERATE
  if len(injury) == 1:
    return RiskLevel.LOW
  return RiskLevel.NONE


def summarize(flaws: Sequence[Flaw]) -> str:
  if not flaws:
    return "Great job! No significant technique issues detected."
  injury = sum(1 for f in flaws if f.injury_risk)
  high = sum(1 for f in flaws if f.severity == Severity.HIGH)
  if injury:
    return (
      f"Detected {len(flaws)} issue(s), including {injury} potential injury risk(s). "
      f"Address these for safety."
    )
  if high:
    return f"Detected {len(flaws)} issue(s), including {high} high-priority item(s) to work on."
  return f"Detected {len(flaws)} minor issue(s) to improve your technique."


def run_rules(
  rules: Sequence[FlawRule],
  metrics: Mapping[str, Optional[float]],
  keyframes: Optional[KeyframeSet] = None,
) -> FlawReport:
  """Evaluate a rule table against a metric table and build the report."""
  flaws: List[Flaw] = []
  fired_groups = set()
  for rule in rules:
    if rule.exclusive_group and rule.exclusive_group in fired_groups:
      continue
    flaw = evaluate_rule(rule, metrics, keyframes)
    if flaw is None:
      continue
    if rule.exclusive_group:
      fired_groups.add(rule.exclusive_group)
    flaws.append(flaw)

  flaws = sort_flaws(flaws)
  return FlawReport(
    flaws=flaws,
    rules_evaluated=count_checks(rules),
    overall_injury_risk=aggregate_risk(flaws),
    summary=summarize(flaws),
  )
