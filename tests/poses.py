"""Synthetic MediaPipe poses for tests.

Builds 33-landmark frames with exactly known joint angles: a vertical
torso, a shooting arm posed by its elbow angle and forearm elevation, and
legs posed by their knee angle. Image Y grows downward.
"""

import math
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from biome_sports_analysis.models import Frame, Keypoint, LandmarkIndex, Side

LANDMARKS = 33
UPPER_ARM = 0.15
FOREARM = 0.13
THIGH = 0.2
SHIN = 0.2

Point = Tuple[float, float]


def raised_arm(shoulder: Point, elbow_angle: float, release_angle: float, mirror: bool = False) -> Tuple[Point, Point]:
    """Elbow and wrist of an arm whose forearm points up and outward at `release_angle`."""
    sign = -1.0 if mirror else 1.0
    total = math.radians(release_angle + elbow_angle)
    elbow = (shoulder[0] - sign * UPPER_ARM * math.cos(total), shoulder[1] + UPPER_ARM * math.sin(total))
    wrist = (
        elbow[0] + sign * FOREARM * math.cos(math.radians(release_angle)),
        elbow[1] - FOREARM * math.sin(math.radians(release_angle)),
    )
    return elbow, wrist


def leg(hip: Point, knee_angle: float, mirror: bool = False) -> Tuple[Point, Point]:
    """Knee straight below the hip; the shin bends outward by 180 - knee_angle."""
    sign = -1.0 if mirror else 1.0
    knee = (hip[0], hip[1] + THIGH)
    a = math.radians(knee_angle)
    ankle = (knee[0] + sign * SHIN * math.sin(a), knee[1] - SHIN * math.cos(a))
    return knee, ankle


def make_pose(
    index: int = 0,
    hip_x: float = 0.5,
    hip_y: float = 0.6,
    knee_angle: float = 170.0,
    elbow_angle: float = 165.0,
    release_angle: float = 55.0,
    shooting_side: Side = Side.RIGHT,
    both_arms_up: bool = False,
    visibility: float = 0.95,
    hidden: Iterable[int] = (),
    fps: float = 30.0,
) -> Frame:
    """One frame with a fully specified body geometry."""
    hx, hy = hip_x, hip_y
    pts: Dict[int, Point] = {
        LandmarkIndex.LEFT_SHOULDER: (hx - 0.05, hy - 0.25),
        LandmarkIndex.RIGHT_SHOULDER: (hx + 0.05, hy - 0.25),
        LandmarkIndex.LEFT_HIP: (hx - 0.04, hy),
        LandmarkIndex.RIGHT_HIP: (hx + 0.04, hy),
    }

    right_up = shooting_side == Side.RIGHT or both_arms_up
    left_up = shooting_side == Side.LEFT or both_arms_up
    for side, up, shoulder_idx, elbow_idx, wrist_idx in (
        (Side.RIGHT, right_up, LandmarkIndex.RIGHT_SHOULDER, LandmarkIndex.RIGHT_ELBOW, LandmarkIndex.RIGHT_WRIST),
        (Side.LEFT, left_up, LandmarkIndex.LEFT_SHOULDER, LandmarkIndex.LEFT_ELBOW, LandmarkIndex.LEFT_WRIST),
    ):
        shoulder = pts[shoulder_idx]
        if up:
            elbow, wrist = raised_arm(shoulder, elbow_angle, release_angle, mirror=side == Side.LEFT)
        else:
            # hanging beside the hip
            offset = 0.01 if side == Side.RIGHT else -0.01
            elbow = (shoulder[0] + offset, hy - 0.10)
            wrist = (shoulder[0] + offset, hy + 0.02)
        pts[elbow_idx] = elbow
        pts[wrist_idx] = wrist

    for mirror, hip_idx, knee_idx, ankle_idx in (
        (False, LandmarkIndex.RIGHT_HIP, LandmarkIndex.RIGHT_KNEE, LandmarkIndex.RIGHT_ANKLE),
        (True, LandmarkIndex.LEFT_HIP, LandmarkIndex.LEFT_KNEE, LandmarkIndex.LEFT_ANKLE),
    ):
        knee, ankle = leg(pts[hip_idx], knee_angle, mirror=mirror)
        pts[knee_idx] = knee
        pts[ankle_idx] = ankle

    head = (hx, hy - 0.35)
    hidden = set(int(h) for h in hidden)
    keypoints = []
    for slot in range(LANDMARKS):
        x, y = pts.get(slot, head)
        keypoints.append(Keypoint(x=x, y=y, z=0.0, visibility=0.0 if slot in hidden else visibility))

    return Frame(
        index=index,
        timestamp=index / fps,
        keypoints=tuple(keypoints),
        mean_confidence=visibility,
    )


def jump_clip(n: int = 40, peak: int = 20, rise: float = 0.1, hip_x_step: float = 0.0, **pose) -> List[Frame]:
    """
    Stand, jump and land: the hip rises by `rise` on a half sine wave
    from `peak - 10` to `peak + 10` and is highest at `peak`.
    """
    frames = []
    for i in range(n):
        hy = 0.6
        if peak - 10 <= i <= peak + 10:
            hy = 0.6 - rise * math.sin(math.pi * (i - peak + 10) / 20)
        frames.append(make_pose(index=i, hip_y=hy, hip_x=0.3 + hip_x_step * i if hip_x_step else 0.5, **pose))
    return frames


def standing_clip(n: int = 40, **pose) -> List[Frame]:
    return [make_pose(index=i, **pose) for i in range(n)]


def with_keypoint(frame: Frame, slot: int, x: Optional[float] = None, y: Optional[float] = None,
                  visibility: Optional[float] = None) -> Frame:
    """Copy of `frame` with one landmark moved or re-weighted."""
    kp = frame.keypoints[slot]
    changed = replace(
        kp,
        x=kp.x if x is None else x,
        y=kp.y if y is None else y,
        visibility=kp.visibility if visibility is None else visibility,
    )
    points = list(frame.keypoints)
    points[slot] = changed
    return replace(frame, keypoints=tuple(points))


def as_payload(frames: Iterable[Frame]) -> List[dict]:
    """Frames in their plain-map wire form."""
    return [f.to_dict() for f in frames]


def nan_pose(frame: Frame, visibility: float = 0.9) -> Frame:
    """Copy of `frame` whose landmarks are all NaN but reported as visible."""
    points = tuple(Keypoint(x=math.nan, y=math.nan, z=math.nan, visibility=visibility) for _ in frame.keypoints)
    return replace(frame, keypoints=points)


def occlude_hips(frame: Frame, y: float, visibility: float = 0.1) -> Frame:
    """Move both hips to `y` and mark them as barely visible."""
    frame = with_keypoint(frame, LandmarkIndex.LEFT_HIP, y=y, visibility=visibility)
    return with_keypoint(frame, LandmarkIndex.RIGHT_HIP, y=y, visibility=visibility)
