"""
Performance analysis tool for Biome Sports Analysis.

Runs the full pipeline on a pose sequence for one (sport, action):
validate -> smooth -> detect keyframes -> compute metrics -> score ->
detect flaws. Every outcome is returned as a plain dict so callers never
have to handle pipeline exceptions.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from biome_sports_analysis.biomechanics_standards import SPORT_STANDARDS, get_action_standards
from biome_sports_analysis.config import settings
from biome_sports_analysis.exceptions import (
  AnalysisError,
  BiomeError,
  FrameValidationError,
  UnsupportedSelectorError,
)
from biome_sports_analysis.flaws import detect_flaws
from biome_sports_analysis.keyframes import KeyframeConfig, detect_keyframes, validate_keyframes
from biome_sports_analysis.logging_config import AnalysisTrace, get_logger
from biome_sports_analysis.metrics import calculate_metrics, missing_reason
from biome_sports_analysis.models import (
  SUPPORTED_ACTIONS,
  Action,
  Frame,
  KeyframeSet,
  Sport,
  coerce_frames,
  parse_selector,
)
from biome_sports_analysis.scoring import score_metrics
from biome_sports_analysis.smoothing import SmoothingConfig, smooth_frames
from biome_sports_analysis.validation import ValidationConfig, estimate_fps, validate_frames

logger = get_logger(__name__)

KEYFRAME_NAMES = ("start", "peak", "contact", "end")


@dataclass(frozen=True)
class AnalysisConfig:
  """Per-stage settings for one analysis run."""
  validation: ValidationConfig = ValidationConfig()
  smoothing: SmoothingConfig = SmoothingConfig()
  keyframes: KeyframeConfig = KeyframeConfig()
  grade_curve_factor: float = 0.15
  default_fps: float = 30.0

  @classmethod
  def from_settings(cls) -> "AnalysisConfig":
    return cls(
      validation=ValidationConfig.from_settings(),
      smoothing=SmoothingConfig.from_settings(),
      keyframes=KeyframeConfig.from_settings(),
      grade_curve_factor=settings.grade_curve_factor,
      default_fps=settings.default_fps,
    )


def supported_selectors() -> Dict[str, List[str]]:
  """Sport -> analyzable actions."""
  return {sport.value: [a.value for a in actions] for sport, actions in SUPPORTED_ACTIONS.items()}


def _resolve_fps(fps: Optional[float], frames: Sequence[Frame], default: float) -> float:
  if fps is None:
    return estimate_fps(frames, default)
  try:
    rate = float(fps)
  except (TypeError, ValueError):
    raise FrameValidationError([f"Invalid fps: {fps!r}"])
  if not rate > 0:
    raise FrameValidationError([f"fps must be positive, got {rate}"])
  return rate


def _marked_keyframes(keyframes: Union[KeyframeSet, Mapping[str, Any], None]) -> KeyframeSet:
  if isinstance(keyframes, KeyframeSet):
    return keyframes
  return KeyframeSet.from_dict(keyframes)


def _clip_keyframes(keyframes: KeyframeSet, frame_count: int, trace: AnalysisTrace) -> KeyframeSet:
  """Drop marked indices that fall outside the clip."""
  values = {}
  for name in KEYFRAME_NAMES:
    index = getattr(keyframes, name)
    if index is not None and not 0 <= index < frame_count:
      trace.warn(f"Keyframe '{name}' index {index} is outside the clip (0-{frame_count - 1}); ignored")
      index = None
    values[name] = index
  return KeyframeSet(**values)


def analyze_performance(
  frames: Sequence[Union[Frame, Mapping[str, Any]]],
  sport: Union[str, Sport],
  action: Union[str, Action],
  fps: Optional[float] = None,
  keyframes: Union[KeyframeSet, Mapping[str, Any], None] = None,
  config: Optional[AnalysisConfig] = None,
  session_id: Optional[str] = None,
) -> dict:
  """
  Analyze one recorded motion.

  Args:
    frames: Pose frames as `Frame` objects or plain dicts with 0 or 33 keypoints.
    sport: Sport name (basketball, volleyball, badminton).
    action: Action name valid for the sport.
    fps: Capture frame rate; estimated from timestamps when omitted.
    keyframes: Caller-marked keyframe indices; each one set overrides detection.
    config: Stage settings; defaults come from the environment.
    session_id: Correlation id carried into log records.

  Returns:
    dict: {
      status: "success",
      sport, action, fps, frame_count,
      keyframes: {start, peak, contact, end, confidence, methods, warnings},
      metrics: {metric_name: value | None, ...},
      score: {overall, raw_overall, confidence, breakdown, details, ...},
      flaws: {flaws: [...], rules_evaluated, overall_injury_risk, summary},
      diagnostics: {timings_ms, skipped_metrics, warnings},
    }
    or {status: "unsupported" | "invalid_input" | "error", ...} otherwise.
  """
  logger.info(f"Starting performance analysis - sport: {sport}, action: {action}, frames: {len(frames)}")

  try:
    sport_enum, action_enum = parse_selector(sport, action)
  except UnsupportedSelectorError as ue:
    logger.warning(f"Unsupported selector: {ue}")
    return {
      "status": "unsupported",
      "sport": str(getattr(sport, "value", sport)),
      "action": str(getattr(action, "value", action)),
      "message": str(ue),
      "supported": supported_selectors(),
    }

  config = config or AnalysisConfig.from_settings()
  trace = AnalysisTrace(logger, session_id=session_id, sport=sport_enum.value, action=action_enum.value)

  try:
    with trace.stage("parse"):
      parsed = coerce_frames(frames)
      marked = _marked_keyframes(keyframes)

    with trace.stage("validate"):
      validation = validate_frames(parsed, config.validation)
    if not validation.is_valid:
      raise FrameValidationError(validation.issues)
    rate = _resolve_fps(fps, parsed, config.default_fps)

    with trace.stage("smooth"):
      smoothed = smooth_frames(parsed, config.smoothing)

    with trace.stage("keyframes"):
      gap = SPORT_STANDARDS[sport_enum].MAX_CONTACT_PEAK_GAP
      detection = detect_keyframes(smoothed, replace(config.keyframes, fps=rate, max_contact_peak_gap=gap))
      marked = _clip_keyframes(marked, len(smoothed), trace)
      merged = detection.keyframes.merged(marked)
      keyframe_warnings = validate_keyframes(merged, gap)
      for warning in keyframe_warnings:
        trace.warn(warning)

      methods = dict(detection.methods)
      confidence = dict(detection.confidence)
      for name in KEYFRAME_NAMES:
        if getattr(marked, name) is not None:
          methods[name] = "marked"
          confidence[name] = 1.0

    with trace.stage("metrics"):
      metrics = calculate_metrics(sport_enum, action_enum, smoothed, merged, rate)
      for name, value in metrics.items():
        if value is None:
          trace.skip_metric(name, missing_reason(sport_enum, name, merged))

    with trace.stage("scoring"):
      standards = get_action_standards(sport_enum, action_enum)
      if standards is None:
        raise AnalysisError(f"No benchmark table for {sport_enum.value}/{action_enum.value}")
      score = score_metrics(metrics, standards, config.grade_curve_factor)

    with trace.stage("flaws"):
      report = detect_flaws(sport_enum, action_enum, metrics, merged)

    trace.finish()
    logger.info(
      f"Performance analysis complete - {sport_enum.value}/{action_enum.value}, "
      f"score: {score.overall}, flaws: {len(report.flaws)}, injury risk: {report.overall_injury_risk.value}"
    )

    return {
      "status": "success",
      "sport": sport_enum.value,
      "action": action_enum.value,
      "fps": rate,
      "frame_count": len(smoothed),
      "keyframes": {
        **merged.to_dict(),
        "confidence": {k: round(v, 4) for k, v in confidence.items()},
        "methods": methods,
        "warnings": keyframe_warnings,
      },
      "metrics": dict(metrics),
      "score": score.to_dict(),
      "flaws": report.to_dict(),
      "diagnostics": trace.to_dict(),
    }

  except FrameValidationError as fe:
    logger.warning(f"Input rejected: {fe.issues}")
    return {
      "status": "invalid_input",
      "sport": sport_enum.value,
      "action": action_enum.value,
      "issues": list(fe.issues),
      "message": str(fe),
    }

  except BiomeError as be:
    logger.error(f"Analysis error: {be}")
    return {
      "status": "error",
      "error_type": type(be).__name__,
      "message": str(be),
    }

  except Exception as e:
    logger.critical(f"Unexpected error during performance analysis: {e}", exc_info=True)
    return {
      "status": "error",
      "error_type": type(e).__name__,
      "message": f"Analysis failed: {str(e)}",
    }
