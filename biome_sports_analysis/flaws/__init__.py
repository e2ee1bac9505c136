"""
Flaw detection: per-(sport, action) rule tables evaluated against a metric table.
"""
from typing import Mapping, Optional, Sequence, Tuple, Union

from biome_sports_analysis.flaws import badminton, basketball, volleyball
from biome_sports_analysis.flaws.rules import Flaw, FlawReport, FlawRule, aggregate_risk, evaluate_rule, run_rules
from biome_sports_analysis.logging_config import get_logger
from biome_sports_analysis.models import Action, KeyframeSet, Sport

logger = get_logger(__name__)

RULES: Mapping[Tuple[Sport, Action], Tuple[FlawRule, ...]] = {
  (Sport.BASKETBALL, Action.JUMP_SHOT): basketball.JUMP_SHOT_RULES,
  (Sport.BASKETBALL, Action.FREE_THROW): basketball.FREE_THROW_RULES,
  (Sport.BASKETBALL, Action.LAYUP): basketball.LAYUP_RULES,
  (Sport.BASKETBALL, Action.DRIBBLING): basketball.DRIBBLING_RULES,
  (Sport.VOLLEYBALL, Action.SPIKE): volleyball.SPIKE_RULES,
  (Sport.VOLLEYBALL, Action.SERVE): volleyball.SERVE_RULES,
  (Sport.VOLLEYBALL, Action.BLOCK): volleyball.BLOCK_RULES,
  (Sport.VOLLEYBALL, Action.SET): volleyball.SET_RULES,
  (Sport.BADMINTON, Action.SMASH): badminton.SMASH_RULES,
  (Sport.BADMINTON, Action.CLEAR): badminton.CLEAR_RULES,
  (Sport.BADMINTON, Action.DROP_SHOT): badminton.DROP_SHOT_RULES,
  (Sport.BADMINTON, Action.SERVE): badminton.SERVE_RULES,
}


def get_rules(sport: Union[str, Sport], action: Union[str, Action]) -> Sequence[FlawRule]:
  """Rule table for a selector; empty when the pair has none."""
  try:
    key = (Sport(getattr(sport, "value", sport)), Action(getattr(action, "value", action)))
  except ValueError:
    return ()
  return RULES.get(key, ())


def detect_flaws(
  sport: Union[str, Sport],
  action: Union[str, Action],
  metrics: Mapping[str, Optional[float]],
  keyframes: Optional[KeyframeSet] = None,
) -> FlawReport:
  """
  Evaluate the rule table of a (sport, action) pair.

  Unsupported pairs yield an empty report with zero rules evaluated.
  """
  rules = get_rules(sport, action)
  if not rules:
    label = f"{getattr(sport, 'value', sport)} {getattr(action, 'value', action)}"
    logger.warning(f"No flaw rules for {label}")
    return FlawReport(summary=f"Flaw detection for {label} is not supported.")

  report = run_rules(rules, metrics, keyframes)
  logger.info(
    f"Flaw detection complete - flaws: {len(report.flaws)}, rules: {report.rules_evaluated}, "
    f"injury risk: {report.overall_injury_risk.value}"
  )
  return report


__all__ = [
  "Flaw",
  "FlawReport",
  "FlawRule",
  "RULES",
  "aggregate_risk",
  "detect_flaws",
  "evaluate_rule",
  "get_rules",
]
