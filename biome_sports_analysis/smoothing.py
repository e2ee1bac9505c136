"""
Landmark trajectory smoothing.

Applies a centered moving average to each coordinate channel of every
landmark slot independently, and derives velocity/acceleration series for
keyframe detection.
"""
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np  # type: ignore

from biome_sports_analysis.config import LANDMARK_COUNT, settings
from biome_sports_analysis.logging_config import get_logger
from biome_sports_analysis.models import Frame, Keypoint

logger = get_logger(__name__)


@dataclass(frozen=True)
class SmoothingConfig:
  window: int = 5
  preserve_edges: bool = True
  min_visibility: float = 0.3
  smooth_visibility: bool = False
  strict: bool = False  # treat x/y outside [0, 1] as invalid samples

  @classmethod
  def from_settings(cls) -> "SmoothingConfig":
    return cls(
      window=settings.smoothing_window,
      preserve_edges=settings.preserve_edges,
      min_visibility=settings.smoothing_min_visibility,
    )


def _odd_window(window: int) -> int:
  return window + 1 if window % 2 == 0 else window


def _window_mean(values: np.ndarray, valid: np.ndarray, window: int) -> np.ndarray:
  """
  Centered mean over axis 0 using only `valid` samples.

  The window is truncated at the array boundaries. Positions whose window
  holds no valid sample keep their original value.
  """
  half = window // 2
  pad = [(half, half)] + [(0, 0)] * (values.ndim - 1)
  masked = np.pad(np.where(valid, values, 0.0), pad)
  counts = np.pad(valid.astype(float), pad)

  zero = np.zeros((1,) + values.shape[1:])
  sum_cs = np.concatenate([zero, np.cumsum(masked, axis=0)])
  count_cs = np.concatenate([zero, np.cumsum(counts, axis=0)])
  sums = sum_cs[window:] - sum_cs[:-window]
  totals = np.rint(count_cs[window:] - count_cs[:-window])

  with np.errstate(invalid="ignore", divide="ignore"):
    means = sums / totals
  return np.where(totals > 0, means, values)


def _smooth_axis(values: np.ndarray, valid: np.ndarray, window: int, preserve_edges: bool) -> np.ndarray:
  n = values.shape[0]
  if n <= 1 or window <= 1:
    return values.copy()

  window = _odd_window(window)
  half = window // 2
  smoothed = _window_mean(values, valid, window)
  if preserve_edges and half > 0:
    smoothed[:half] = values[:half]
    smoothed[n - half:] = values[n - half:]
  return smoothed


def moving_average(
  values: Sequence[float],
  window: int = 5,
  preserve_edges: bool = True,
  strict: bool = False,
) -> List[float]:
  """
  Centered sliding-window mean of a 1-D series.

  Args:
    values: Input series.
    window: Window width; even widths are rounded up to the next odd width.
    preserve_edges: Copy the first and last `window // 2` samples unchanged
      instead of averaging over a truncated window.
    strict: Also exclude values outside [0, 1] from the average.

  Returns:
    Smoothed series with the same length as the input.
  """
  series = np.asarray(values, dtype=float)
  valid = ~np.isnan(series)
  if strict:
    valid &= (series >= 0.0) & (series <= 1.0)
  return _smooth_axis(series, valid, window, preserve_edges).tolist()


def weighted_moving_average(values: Sequence[float], window: int = 5) -> List[float]:
  """Triangular-weighted centered average (truncated at the boundaries)."""
  series = np.asarray(values, dtype=float)
  n = len(series)
  if n <= 1 or window <= 1:
    return series.tolist()

  half = _odd_window(window) // 2
  weights = np.array([half + 1 - abs(k) for k in range(-half, half + 1)], dtype=float)
  smoothed = series.copy()
  for i in range(n):
    lo, hi = max(0, i - half), min(n, i + half + 1)
    chunk = series[lo:hi]
    w = weights[lo - i + half:hi - i + half]
    ok = ~np.isnan(chunk)
    if ok.any():
      smoothed[i] = float(np.dot(chunk[ok], w[ok]) / w[ok].sum())
  return smoothed.tolist()


def smooth_frames(frames: Sequence[Frame], config: SmoothingConfig = SmoothingConfig()) -> List[Frame]:
  """
  Smooth x, y and z of all 33 landmark slots over time.

  Frames without landmarks and landmarks below `min_visibility` do not
  contribute to any window. Visibility is carried through unchanged unless
  `smooth_visibility` is set. The input frames are not modified.

  Returns:
    New frames, same length and order as the input.
  """
  frames = list(frames)
  if len(frames) < config.window or not any(f.has_landmarks for f in frames):
    logger.debug(
      f"Smoothing skipped - frames: {len(frames)}, window: {config.window}"
    )
    return list(frames)

  n = len(frames)
  coords = np.full((n, LANDMARK_COUNT, 3), np.nan)
  visibility = np.full((n, LANDMARK_COUNT), np.nan)
  for i, frame in enumerate(frames):
    if not frame.has_landmarks:
      continue
    coords[i] = [[kp.x, kp.y, kp.z] for kp in frame.keypoints]
    visibility[i] = [kp.effective_visibility for kp in frame.keypoints]

  valid = ~np.isnan(coords)
  valid &= (np.nan_to_num(visibility, nan=0.0) >= config.min_visibility)[:, :, None]
  if config.strict:
    xy = coords[:, :, :2]
    valid[:, :, :2] &= (xy >= 0.0) & (xy <= 1.0)

  smoothed = _smooth_axis(coords, valid, config.window, config.preserve_edges)
  if config.smooth_visibility:
    smoothed_vis = _smooth_axis(visibility, ~np.isnan(visibility), config.window, config.preserve_edges)
  else:
    smoothed_vis = None

  result: List[Frame] = []
  for i, frame in enumerate(frames):
    if not frame.has_landmarks:
      result.append(frame)
      continue
    keypoints = tuple(
      Keypoint(
        x=float(smoothed[i, j, 0]),
        y=float(smoothed[i, j, 1]),
        z=float(smoothed[i, j, 2]),
        visibility=float(smoothed_vis[i, j]) if smoothed_vis is not None else kp.visibility,
      )
      for j, kp in enumerate(frame.keypoints)
    )
    result.append(Frame(
      index=frame.index,
      timestamp=frame.timestamp,
      keypoints=keypoints,
      mean_confidence=frame.mean_confidence,
    ))

  logger.debug(f"Smoothed {n} frames with window {_odd_window(config.window)}")
  return result


def calculate_velocity(
  positions: Sequence[float],
  fps: float,
  smoothing_window: int = 3,
) -> List[float]:
  """
  Velocity of a position series in units per second.

  Central difference in the interior and one-sided differences at the two
  boundaries, followed by a light moving average so single-frame jitter
  does not show up as spurious zero crossings.
  """
  series = np.asarray(positions, dtype=float)
  if len(series) < 2:
    return []
  if fps <= 0:
    return [0.0] * len(series)

  velocity = np.gradient(series, 1.0 / fps)
  return moving_average(velocity, smoothing_window, preserve_edges=False)


def calculate_acceleration(velocities: Sequence[float], fps: float) -> List[float]:
  """Acceleration from a velocity series (same difference scheme, unsmoothed)."""
  series = np.asarray(velocities, dtype=float)
  if len(series) < 2:
    return []
  if fps <= 0:
    return [0.0] * len(series)
  return np.gradient(series, 1.0 / fps).tolist()
