"""
Scoring engine.

Turns a metric table into per-metric 0-100 sub-scores against the
benchmark table of the action, then into a weighted, curved overall score
with a coverage-based confidence.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from biome_sports_analysis.biomechanics_standards import (
  DEFAULT_GRADE_CURVE,
  LETTER_GRADES,
  MIN_SCORE,
  PERFECT_SCORE,
  PERFORMANCE_LEVELS,
  ActionStandards,
  Benchmark,
)
from biome_sports_analysis.logging_config import get_logger
from biome_sports_analysis.models import Preference, metric_value

logger = get_logger(__name__)

# Largest deduction for overshooting the ideal window in the preferred direction
PREFERRED_DIRECTION_PENALTY = 20.0


@dataclass(frozen=True)
class MetricScore:
  raw_value: Optional[float]
  normalized_score: Optional[float]
  included: bool
  exclude_reason: Optional[str] = None

  def to_dict(self) -> Dict[str, Any]:
    result: Dict[str, Any] = {
      "raw_value": self.raw_value,
      "normalized_score": self.normalized_score,
      "included": self.included,
    }
    if self.exclude_reason:
      result["exclude_reason"] = self.exclude_reason
    return result


@dataclass(frozen=True)
class ScoreBreakdown:
  overall: int
  raw_overall: int
  confidence: float
  metrics_included: int
  metrics_total: int
  breakdown: Dict[str, int] = field(default_factory=dict)
  details: Dict[str, MetricScore] = field(default_factory=dict)

  @property
  def letter_grade(self) -> str:
    return letter_grade(self.overall)

  @property
  def performance_level(self) -> str:
    return performance_level(self.overall)

  def to_dict(self) -> Dict[str, Any]:
    return {
      "overall": self.overall,
      "raw_overall": self.raw_overall,
      "confidence": round(self.confidence, 4),
      "metrics_included": self.metrics_included,
      "metrics_total": self.metrics_total,
      "letter_grade": self.letter_grade,
      "performance_level": self.performance_level,
      "breakdown": dict(self.breakdown),
      "details": {k: v.to_dict() for k, v in self.details.items()},
      "weakest_metrics": weakest_metrics(self.breakdown),
      "strongest_metrics": strongest_metrics(self.breakdown),
    }


# ============================================
# SUB-SCORES
# ============================================

def clamp_score(score: float) -> float:
  if score is None or not math.isfinite(score):
    return MIN_SCORE
  return max(MIN_SCORE, min(PERFECT_SCORE, score))


def score_with_ideal_window(value: float, benchmark: Benchmark) -> float:
  """
  100 inside the ideal window, 0 outside the acceptable window, linear in between.
  """
  if value is None or not math.isfinite(value):
    return MIN_SCORE
  b = benchmark
  if b.ideal_min <= value <= b.ideal_max:
    return PERFECT_SCORE

  if value < b.ideal_min:
    if value < b.acceptable_min:
      return MIN_SCORE
    span = b.ideal_min - b.acceptable_min
    return clamp_score((1 - (b.ideal_min - value) / span) * 100) if span > 0 else MIN_SCORE

  if value > b.acceptable_max:
    return MIN_SCORE
  span = b.acceptable_max - b.ideal_max
  return clamp_score((1 - (value - b.ideal_max) / span) * 100) if span > 0 else MIN_SCORE


def score_with_preference(value: float, benchmark: Benchmark) -> float:
  """
  Window score with a milder penalty in the preferred direction.

  For HIGHER (LOWER) preference, a value above the ideal maximum (below the
  ideal minimum) but still acceptable loses at most 20 points instead of
  falling along the full interpolation.
  """
  if value is None or not math.isfinite(value):
    return MIN_SCORE
  b = benchmark
  base = score_with_ideal_window(value, b)
  if base == PERFECT_SCORE or b.preference == Preference.CENTER:
    return base

  if b.preference == Preference.HIGHER and b.ideal_max < value <= b.acceptable_max:
    ratio = (value - b.ideal_max) / (b.acceptable_max - b.ideal_max)
    return clamp_score(PERFECT_SCORE - ratio * PREFERRED_DIRECTION_PENALTY)
  if b.preference == Preference.LOWER and b.acceptable_min <= value < b.ideal_min:
    ratio = (b.ideal_min - value) / (b.ideal_min - b.acceptable_min)
    return clamp_score(PERFECT_SCORE - ratio * PREFERRED_DIRECTION_PENALTY)
  return base


# ============================================
# AGGREGATION
# ============================================

def redistribute_weights(present: List[str], weights: Mapping[str, float]) -> Dict[str, float]:
  """Rescale the weights of present metrics so they sum to 1."""
  available = {k: w for k, w in weights.items() if k in present and w > 0}
  total = sum(available.values())
  if total <= 0:
    return {}
  return {k: w / total for k, w in available.items()}


def calculate_weighted_score(scores: Mapping[str, float], weights: Mapping[str, float]) -> int:
  weighted_sum = 0.0
  total_weight = 0.0
  for key, score in scores.items():
    weight = weights.get(key)
    if weight is not None and weight > 0 and math.isfinite(score):
      weighted_sum += score * weight
      total_weight += weight
  if total_weight == 0:
    return 0
  return int(clamp_score(round(weighted_sum / total_weight)))


def scoring_confidence(included: int, total: int, min_required: int) -> float:
  """0.5 at the minimum metric count, rising linearly to 1.0 at full coverage."""
  if total == 0 or included < min_required:
    return 0.0
  if total <= min_required:
    return 1.0
  coverage = max(0.0, min(1.0, (included - min_required) / (total - min_required)))
  return min(1.0, 0.5 + 0.5 * coverage)


def apply_grade_curve(score: float, curve_factor: float = DEFAULT_GRADE_CURVE) -> int:
  """100 * (score / 100) ** (1 - k); keeps 0 and 100 fixed and preserves order."""
  score = clamp_score(score)
  if curve_factor <= 0:
    return int(round(score))
  return int(clamp_score(round(PERFECT_SCORE * (score / PERFECT_SCORE) ** (1 - curve_factor))))


def letter_grade(score: float) -> str:
  for threshold, grade in LETTER_GRADES:
    if score >= threshold:
      return grade
  return "F"


def performance_level(score: float) -> str:
  for threshold, level in PERFORMANCE_LEVELS:
    if score >= threshold:
      return level
  return "Developing"


def weakest_metrics(breakdown: Mapping[str, float], count: int = 3) -> List[str]:
  return [k for k, _ in sorted(breakdown.items(), key=lambda item: item[1])[:count]]


def strongest_metrics(breakdown: Mapping[str, float], count: int = 3) -> List[str]:
  return [k for k, _ in sorted(breakdown.items(), key=lambda item: item[1], reverse=True)[:count]]


def score_metrics(
  metrics: Mapping[str, Optional[float]],
  standards: ActionStandards,
  curve_factor: float = DEFAULT_GRADE_CURVE,
) -> ScoreBreakdown:
  """
  Score a metric table against the benchmark table of its action.

  Missing metrics are excluded and their weight is shared among the
  present ones. With fewer than `min_required_metrics` present the overall
  score and confidence are both 0.

  Args:
    metrics: Metric name -> raw value (None when unavailable).
    standards: Benchmark table of the action.
    curve_factor: Grade curve strength; 0 disables the curve.

  Returns:
    ScoreBreakdown with overall/curved score, per-metric details and confidence.
  """
  details: Dict[str, MetricScore] = {}
  breakdown: Dict[str, int] = {}

  for key, benchmark in standards.benchmarks.items():
    name = key.value
    raw = metric_value(metrics, name)
    if raw is None:
      details[name] = MetricScore(None, None, False, "Metric not available or invalid")
      continue
    sub_score = score_with_preference(raw, benchmark)
    details[name] = MetricScore(raw, round(sub_score, 2), True)
    breakdown[name] = int(round(sub_score))

  included = len(breakdown)
  total = len(standards.benchmarks)
  if included < standards.min_required_metrics:
    logger.warning(
      f"Insufficient metrics for {standards.sport.value}/{standards.action.value}: "
      f"{included}/{standards.min_required_metrics} required"
    )
    return ScoreBreakdown(
      overall=0,
      raw_overall=0,
      confidence=0.0,
      metrics_included=included,
      metrics_total=total,
      breakdown=breakdown,
      details=details,
    )

  weights = redistribute_weights(list(breakdown), {k.value: w for k, w in standards.weights.items()})
  raw_overall = calculate_weighted_score(breakdown, weights)
  overall = apply_grade_curve(raw_overall, curve_factor)
  confidence = scoring_confidence(included, total, standards.min_required_metrics)

  logger.info(f"Score calculated - overall: {overall} (raw {raw_overall}), metrics: {included}/{total}, confidence: {confidence:.2f}")
  return ScoreBreakdown(
    overall=overall,
    raw_overall=raw_overall,
    confidence=confidence,
    metrics_included=included,
    metrics_total=total,
    breakdown=breakdown,
    details=details,
  )
