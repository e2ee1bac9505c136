"""
Core data model for pose-based performance analysis.

Frames arrive from an external pose model as 33 MediaPipe landmarks per
video frame, normalized to [0, 1] with Y growing downward. Every type here
is immutable; each pipeline stage builds new values instead of editing
its input.
"""
import math
from dataclasses import dataclass, fields
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from biome_sports_analysis.config import LANDMARK_COUNT
from biome_sports_analysis.exceptions import InvalidFrameError, UnsupportedSelectorError


# ============================================
# ENUMERATIONS
# ============================================

class LandmarkIndex(IntEnum):
    """MediaPipe pose landmark slots used by the analysis."""
    NOSE = 0
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class Sport(str, Enum):
    """Sports with a metric, benchmark and rule table."""
    BASKETBALL = "basketball"
    VOLLEYBALL = "volleyball"
    BADMINTON = "badminton"


class Action(str, Enum):
    """Analyzable actions across all sports."""
    JUMP_SHOT = "jump_shot"
    FREE_THROW = "free_throw"
    LAYUP = "layup"
    DRIBBLING = "dribbling"
    SPIKE = "spike"
    SERVE = "serve"
    BLOCK = "block"
    SET = "set"
    SMASH = "smash"
    CLEAR = "clear"
    DROP_SHOT = "drop_shot"


class MetricKey(str, Enum):
    """Names of every metric a calculator can produce."""
    # Basketball
    RELEASE_ANGLE = "release_angle"
    ELBOW_ANGLE_AT_RELEASE = "elbow_angle_at_release"
    KNEE_ANGLE_AT_PEAK = "knee_angle_at_peak"
    JUMP_HEIGHT_NORMALIZED = "jump_height_normalized"
    STABILITY_INDEX = "stability_index"
    FOLLOW_THROUGH_SCORE = "follow_through_score"
    RELEASE_TIMING_MS = "release_timing_ms"
    KNEE_ANGLE_PUSH = "knee_angle_push"
    RHYTHM_CONSISTENCY = "rhythm_consistency"
    APPROACH_SPEED = "approach_speed"
    TAKEOFF_ANGLE = "takeoff_angle"
    PEAK_HEIGHT = "peak_height"
    FINISH_HAND_POSITION = "finish_hand_position"
    KNEE_BEND_SCORE = "knee_bend_score"
    STANCE_WIDTH = "stance_width"
    BALANCE_SCORE = "balance_score"
    TRUNK_LEAN = "trunk_lean"
    # Overhead striking (volleyball, badminton)
    ELBOW_AT_CONTACT = "elbow_at_contact"
    CONTACT_HEIGHT = "contact_height"
    ARM_SWING_SCORE = "arm_swing_score"
    JUMP_HEIGHT = "jump_height"
    TRUNK_ROTATION = "trunk_rotation"
    BODY_ALIGNMENT = "body_alignment"
    STABILITY = "stability"
    FOLLOW_THROUGH = "follow_through"
    ARM_EXTENSION = "arm_extension"
    HAND_HEIGHT = "hand_height"
    HAND_SYMMETRY = "hand_symmetry"
    ELBOW_ANGLE = "elbow_angle"
    WRIST_SPEED = "wrist_speed"


class Preference(str, Enum):
    """Which side of the ideal window is penalized more gently."""
    CENTER = "center"
    HIGHER = "higher"
    LOWER = "lower"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Sort rank, most severe first."""
        return {"high": 0, "medium": 1, "low": 2}[self.value]


class FlawCategory(str, Enum):
    FORM = "form"
    POWER = "power"
    BALANCE = "balance"
    TIMING = "timing"
    INJURY_RISK = "injury_risk"


class BodyPart(str, Enum):
    WRIST = "wrist"
    ELBOW = "elbow"
    SHOULDER = "shoulder"
    HIP = "hip"
    KNEE = "knee"
    ANKLE = "ankle"
    TORSO = "torso"
    FULL_BODY = "full_body"


class Condition(str, Enum):
    LESS_THAN = "less_than"
    GREATER_THAN = "greater_than"
    OUTSIDE = "outside"


class RiskLevel(str, Enum):
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


SUPPORTED_ACTIONS: Mapping[Sport, Tuple[Action, ...]] = {
    Sport.BASKETBALL: (Action.JUMP_SHOT, Action.FREE_THROW, Action.LAYUP, Action.DRIBBLING),
    Sport.VOLLEYBALL: (Action.SPIKE, Action.SERVE, Action.BLOCK, Action.SET),
    Sport.BADMINTON: (Action.SMASH, Action.CLEAR, Action.DROP_SHOT, Action.SERVE),
}


def is_supported(sport: Sport, action: Action) -> bool:
    return action in SUPPORTED_ACTIONS.get(sport, ())


def parse_selector(
    sport: Union[str, Sport],
    action: Union[str, Action],
) -> Tuple[Sport, Action]:
    """
    Resolve a (sport, action) pair into enum members.

    Raises:
        UnsupportedSelectorError: unknown sport, unknown action, or an
            action the sport does not define.
    """
    try:
        sport_enum = Sport(str(getattr(sport, "value", sport)).strip().lower())
    except ValueError:
        raise UnsupportedSelectorError(f"Unsupported sport: '{sport}'")
    try:
        action_enum = Action(str(getattr(action, "value", action)).strip().lower())
    except ValueError:
        raise UnsupportedSelectorError(f"Unsupported action: '{action}'")
    if not is_supported(sport_enum, action_enum):
        raise UnsupportedSelectorError(
            f"Action '{action_enum.value}' is not supported for {sport_enum.value}"
        )
    return sport_enum, action_enum


# ============================================
# FRAMES
# ============================================

@dataclass(frozen=True)
class Keypoint:
    """One tracked body point in normalized image coordinates."""
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None

    @property
    def effective_visibility(self) -> float:
        """Visibility, treating an absent value as fully visible."""
        return 1.0 if self.visibility is None else float(self.visibility)

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "z": self.z, "visibility": self.visibility}

    @classmethod
    def from_value(cls, value: Any) -> "Keypoint":
        if isinstance(value, Keypoint):
            return value
        try:
            if isinstance(value, Mapping):
                visibility = value.get("visibility")
                return cls(
                    x=float(value["x"]),
                    y=float(value["y"]),
                    z=float(value.get("z", 0.0) or 0.0),
                    visibility=None if visibility is None else float(visibility),
                )
            coords = [float(v) for v in value]
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidFrameError(f"Invalid keypoint {value!r}: {e}")
        if len(coords) < 2:
            raise InvalidFrameError(f"Keypoint needs at least x and y: {value!r}")
        return cls(
            x=coords[0],
            y=coords[1],
            z=coords[2] if len(coords) > 2 else 0.0,
            visibility=coords[3] if len(coords) > 3 else None,
        )


@dataclass(frozen=True)
class Frame:
    """All landmarks sampled at one video instant."""
    index: int
    timestamp: float
    keypoints: Tuple[Keypoint, ...] = ()
    mean_confidence: float = 0.0

    @property
    def has_landmarks(self) -> bool:
        return len(self.keypoints) > 0

    def keypoint(self, index: int) -> Optional[Keypoint]:
        if 0 <= index < len(self.keypoints):
            return self.keypoints[index]
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "timestamp": self.timestamp,
            "keypoints": [kp.to_dict() for kp in self.keypoints],
            "mean_confidence": self.mean_confidence,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], position: int = 0) -> "Frame":
        """
        Build a frame from its plain-map representation.

        Accepts `keypoints` or `landmarks` for the point list, `index` or
        `frame` for the frame number, and `mean_confidence` or `confidence`
        for the per-frame confidence. Missing confidence is derived from
        the keypoint visibilities.
        """
        if not isinstance(data, Mapping):
            raise InvalidFrameError(f"Frame {position} must be an object, got {type(data).__name__}")

        raw_points = data.get("keypoints", data.get("landmarks")) or []
        if not isinstance(raw_points, (list, tuple)):
            raise InvalidFrameError(f"Frame {position} keypoints must be a list")
        if len(raw_points) not in (0, LANDMARK_COUNT):
            raise InvalidFrameError(
                f"Frame {position} has {len(raw_points)} keypoints, expected 0 or {LANDMARK_COUNT}"
            )
        keypoints = tuple(Keypoint.from_value(p) for p in raw_points)

        confidence = data.get("mean_confidence", data.get("confidence"))
        try:
            if confidence is None:
                confidence = (
                    sum(kp.effective_visibility for kp in keypoints) / len(keypoints)
                    if keypoints else 0.0
                )
            index = int(data.get("index", data.get("frame", position)))
            timestamp = float(data.get("timestamp", 0.0))
            confidence = float(confidence)
        except (TypeError, ValueError) as e:
            raise InvalidFrameError(f"Frame {position} has invalid fields: {e}")

        if math.isnan(confidence):
            confidence = 0.0
        return cls(index=index, timestamp=timestamp, keypoints=keypoints, mean_confidence=confidence)


def coerce_frames(frames: Sequence[Union[Frame, Mapping[str, Any]]]) -> Tuple[Frame, ...]:
    """Accept frames either as `Frame` objects or as plain maps."""
    return tuple(
        f if isinstance(f, Frame) else Frame.from_dict(f, position=i)
        for i, f in enumerate(frames)
    )


# ============================================
# KEYFRAMES
# ============================================

@dataclass(frozen=True)
class KeyframeSet:
    """Semantically significant frame indices of one motion."""
    start: Optional[int] = None
    peak: Optional[int] = None
    contact: Optional[int] = None
    end: Optional[int] = None

    def merged(self, override: Optional["KeyframeSet"]) -> "KeyframeSet":
        """Replace detected indices with any index set on `override`."""
        if override is None:
            return self
        values = {}
        for f in fields(self):
            marked = getattr(override, f.name)
            values[f.name] = marked if marked is not None else getattr(self, f.name)
        return KeyframeSet(**values)

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {
            "start": self.start,
            "peak": self.peak,
            "contact": self.contact,
            "end": self.end,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "KeyframeSet":
        if not data:
            return cls()

        def _index(*names: str) -> Optional[int]:
            for name in names:
                value = data.get(name)
                if value is not None:
                    try:
                        return int(value)
                    except (TypeError, ValueError):
                        raise InvalidFrameError(f"Keyframe '{name}' must be an integer, got {value!r}")
            return None

        return cls(
            start=_index("start"),
            peak=_index("peak", "peak_jump"),
            contact=_index("contact", "release"),
            end=_index("end"),
        )


MetricTable = Dict[str, Optional[float]]


def metric_value(metrics: Mapping[str, Optional[float]], key: Union[str, MetricKey]) -> Optional[float]:
    """Look up a metric, mapping NaN/inf and non-numbers to None."""
    value = metrics.get(getattr(key, "value", key))
    if value is None or isinstance(value, bool):
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None
