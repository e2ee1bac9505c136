"""
Metric calculators, one per (sport, action).

Every calculator takes the smoothed frames, the keyframe set and the frame
rate and returns a table holding every metric name of its action; values
that cannot be computed are None.
"""
from typing import Callable, Mapping, Sequence, Tuple

from biome_sports_analysis.exceptions import UnsupportedSelectorError
from biome_sports_analysis.logging_config import get_logger
from biome_sports_analysis.models import Action, Frame, KeyframeSet, MetricKey, MetricTable, Sport
from biome_sports_analysis.metrics import badminton, basketball, volleyball

logger = get_logger(__name__)

Calculator = Callable[[Sequence[Frame], KeyframeSet, float], MetricTable]

CALCULATORS: Mapping[Tuple[Sport, Action], Calculator] = {
  (Sport.BASKETBALL, Action.JUMP_SHOT): basketball.jump_shot,
  (Sport.BASKETBALL, Action.FREE_THROW): basketball.free_throw,
  (Sport.BASKETBALL, Action.LAYUP): basketball.layup,
  (Sport.BASKETBALL, Action.DRIBBLING): basketball.dribbling,
  (Sport.VOLLEYBALL, Action.SPIKE): volleyball.spike,
  (Sport.VOLLEYBALL, Action.SERVE): volleyball.serve,
  (Sport.VOLLEYBALL, Action.BLOCK): volleyball.block,
  (Sport.VOLLEYBALL, Action.SET): volleyball.set_,
  (Sport.BADMINTON, Action.SMASH): badminton.smash,
  (Sport.BADMINTON, Action.CLEAR): badminton.clear,
  (Sport.BADMINTON, Action.DROP_SHOT): badminton.drop_shot,
  (Sport.BADMINTON, Action.SERVE): badminton.serve,
}

_REQUIRES: Mapping[Sport, Mapping[MetricKey, Tuple[str, ...]]] = {
  Sport.BASKETBALL: basketball.REQUIRES,
  Sport.VOLLEYBALL: volleyball.REQUIRES,
  Sport.BADMINTON: badminton.REQUIRES,
}


def calculate_metrics(
  sport: Sport,
  action: Action,
  frames: Sequence[Frame],
  keyframes: KeyframeSet,
  fps: float,
) -> MetricTable:
  """
  Compute the metric table for one clip.

  Raises:
    UnsupportedSelectorError: no calculator for the (sport, action) pair.
  """
  calculator = get_calculator(sport, action)
  metrics = calculator(frames, keyframes, fps)
  logger.debug(
    f"Metrics for {sport.value}/{action.value}: "
    f"{sum(v is not None for v in metrics.values())}/{len(metrics)} computed"
  )
  return metrics


def get_calculator(sport: Sport, action: Action) -> Calculator:
  try:
    return CALCULATORS[(sport, action)]
  except KeyError:
    raise UnsupportedSelectorError(
      f"No metric calculator for {getattr(sport, 'value', sport)}/{getattr(action, 'value', action)}"
    )


def missing_reason(sport: Sport, metric: str, keyframes: KeyframeSet) -> str:
  """Best explanation for why a metric came back as None."""
  try:
    key = MetricKey(metric)
  except ValueError:
    return "unknown metric"
  required = _REQUIRES.get(sport, {}).get(key, ())
  absent = [name for name in required if getattr(keyframes, name) is None]
  if absent:
    return f"missing keyframe: {', '.join(absent)}"
  return "landmarks not visible or geometry degenerate"


__all__ = ["CALCULATORS", "Calculator", "calculate_metrics", "get_calculator", "missing_reason"]
