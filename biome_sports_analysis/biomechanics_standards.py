"""
Biomechanics Standards, Benchmarks and Thresholds for Sports Analysis.

Defines the per-sport calculation constants and the benchmark tables used
to turn raw metrics into 0-100 sub-scores. Centralizes all "magic numbers"
for easy tuning. Tables are built once at import time and exposed through
read-only mappings indexed by (Sport, Action).
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from biome_sports_analysis.models import Action, MetricKey, Preference, Sport


@dataclass(frozen=True)
class Benchmark:
    """Ideal and acceptable range for one metric."""
    ideal_min: float
    ideal_max: float
    acceptable_min: float
    acceptable_max: float
    preference: Preference = Preference.CENTER
    weight: float = 0.0  # 0 = scored and counted, but not part of the overall


@dataclass(frozen=True)
class ActionStandards:
    """Benchmark table for one (sport, action) pair."""
    sport: Sport
    action: Action
    benchmarks: Mapping[MetricKey, Benchmark]
    min_required_metrics: int

    @property
    def weights(self) -> Mapping[MetricKey, float]:
        return {key: b.weight for key, b in self.benchmarks.items() if b.weight > 0}


@dataclass(frozen=True)
class SportStandards:
    """Sport-wide detection constants."""
    VISIBILITY_FLOOR: float  # landmarks below this visibility are ignored
    MAX_CONTACT_PEAK_GAP: int  # frames between contact and jump peak before warning


@dataclass(frozen=True)
class BasketballStandards:
    """Constants for basketball metric extraction."""

    # Stability: hip drift relative to shoulder width
    STABILITY_DRIFT_SCALE: float = 0.8  # drift of 0.8 body widths = 0 stability
    MIN_BODY_WIDTH: float = 0.05
    DEFAULT_BODY_WIDTH: float = 0.2  # used when shoulders are not visible

    # Follow-through: max elbow angle after release
    FOLLOW_THROUGH_FRAMES: int = 15
    FOLLOW_THROUGH_MIN_ANGLE: float = 120.0  # maps to 0
    FOLLOW_THROUGH_FULL_ANGLE: float = 170.0  # maps to 100

    # Free throw rhythm: wrist height variance during the set-up
    RHYTHM_MIN_SAMPLES: int = 4
    RHYTHM_VARIANCE_SCALE: float = 0.002  # variance that scores 0

    # Layup
    APPROACH_FRAMES: int = 8
    APPROACH_BODY_WIDTHS: float = 8.0  # body widths per second that scores 100
    LAYUP_DEFAULT_BODY_WIDTH: float = 0.15
    MIN_TAKEOFF_RISE: float = 0.001
    MIN_BODY_HEIGHT: float = 0.05
    MAX_HAND_HEIGHT: float = 130.0

    # Dribbling
    DRIBBLE_SAMPLES: int = 20
    DRIBBLE_MIN_SAMPLES: int = 3
    KNEE_BEND_MIN_BODY_HEIGHT: float = 0.15
    KNEE_BEND_UPRIGHT_RATIO: float = 0.45  # hip drop ratio scoring 0
    KNEE_BEND_DEEP_RATIO: float = 0.78  # hip drop ratio scoring 100
    MIN_SHOULDER_WIDTH: float = 0.03
    BALANCE_SWAY_SCALE: float = 0.12  # hip x standard deviation scoring 0


@dataclass(frozen=True)
class OverheadStandards:
    """Constants shared by overhead striking actions (volleyball, badminton)."""

    MIN_BODY_HEIGHT: float = 0.05
    MAX_CONTACT_HEIGHT: float = 130.0
    MIN_ALIGNMENT_TORSO: float = 0.01  # vertical torso span below this = no reading
    ALIGNMENT_ZERO_LEAN: float = 45.0  # degrees of lean scoring 0

    # Arm swing / wrist speed
    SWING_LOOKBACK_FRAMES: int = 12
    SERVE_SWING_LOOKBACK_FRAMES: int = 10
    SWING_MIN_STEPS: int = 3
    SWING_SHOULDER_WIDTHS: float = 10.0  # shoulder widths per second that scores 100
    MIN_SHOULDER_WIDTH: float = 0.05

    # Follow-through
    FOLLOW_THROUGH_FRAMES: int = 12
    SERVE_FOLLOW_THROUGH_FRAMES: int = 15
    FOLLOW_THROUGH_MIN_ANGLE: float = 120.0
    FOLLOW_THROUGH_FULL_ANGLE: float = 172.0

    # Hand symmetry: wrist height gap per shoulder width
    SYMMETRY_PENALTY: float = 200.0


# Singleton instances
BASKETBALL = BasketballStandards()
OVERHEAD = OverheadStandards()

SPORT_STANDARDS: Mapping[Sport, SportStandards] = MappingProxyType({
    Sport.BASKETBALL: SportStandards(VISIBILITY_FLOOR=0.5, MAX_CONTACT_PEAK_GAP=15),
    Sport.VOLLEYBALL: SportStandards(VISIBILITY_FLOOR=0.45, MAX_CONTACT_PEAK_GAP=15),
    Sport.BADMINTON: SportStandards(VISIBILITY_FLOOR=0.45, MAX_CONTACT_PEAK_GAP=20),
})


# ============================================
# BENCHMARK TABLES
# ============================================

H = Preference.HIGHER
C = Preference.CENTER

BenchmarkRow = Tuple[MetricKey, float, float, float, float, Preference, float]


def _table(
    sport: Sport,
    action: Action,
    min_required: int,
    rows: Tuple[BenchmarkRow, ...],
) -> ActionStandards:
    benchmarks = {
        key: Benchmark(ideal_min, ideal_max, acc_min, acc_max, pref, weight)
        for key, ideal_min, ideal_max, acc_min, acc_max, pref, weight in rows
    }
    return ActionStandards(
        sport=sport,
        action=action,
        benchmarks=MappingProxyType(benchmarks),
        min_required_metrics=min_required,
    )


_TABLES = (
    # ---------------- Basketball ----------------
    _table(Sport.BASKETBALL, Action.JUMP_SHOT, 3, (
        (MetricKey.RELEASE_ANGLE, 42, 67, 0, 90, H, 0.25),
        (MetricKey.ELBOW_ANGLE_AT_RELEASE, 152, 174, 115, 180, H, 0.18),
        (MetricKey.KNEE_ANGLE_AT_PEAK, 162, 180, 125, 180, H, 0.12),
        (MetricKey.JUMP_HEIGHT_NORMALIZED, 0.05, 0.18, 0.005, 0.35, H, 0.10),
        (MetricKey.STABILITY_INDEX, 72, 100, 38, 100, H, 0.20),
        (MetricKey.FOLLOW_THROUGH_SCORE, 65, 100, 28, 100, H, 0.15),
        (MetricKey.RELEASE_TIMING_MS, -120, 60, -350, 250, C, 0.0),
    )),
    _table(Sport.BASKETBALL, Action.FREE_THROW, 2, (
        (MetricKey.RELEASE_ANGLE, 42, 67, 0, 90, H, 0.28),
        (MetricKey.ELBOW_ANGLE_AT_RELEASE, 152, 174, 115, 180, H, 0.20),
        (MetricKey.KNEE_ANGLE_PUSH, 150, 180, 110, 180, H, 0.08),
        (MetricKey.STABILITY_INDEX, 88, 100, 65, 100, H, 0.22),
        (MetricKey.FOLLOW_THROUGH_SCORE, 65, 100, 28, 100, H, 0.15),
        (MetricKey.RHYTHM_CONSISTENCY, 72, 100, 40, 100, H, 0.07),
    )),
    _table(Sport.BASKETBALL, Action.LAYUP, 2, (
        (MetricKey.APPROACH_SPEED, 55, 100, 20, 100, H, 0.20),
        (MetricKey.TAKEOFF_ANGLE, 55, 80, 35, 88, C, 0.22),
        (MetricKey.PEAK_HEIGHT, 0.05, 0.18, 0.01, 0.30, H, 0.15),
        (MetricKey.STABILITY_INDEX, 68, 100, 35, 100, H, 0.22),
        (MetricKey.FINISH_HAND_POSITION, 78, 110, 55, 125, H, 0.21),
    )),
    _table(Sport.BASKETBALL, Action.DRIBBLING, 1, (
        (MetricKey.KNEE_BEND_SCORE, 50, 100, 25, 100, H, 0.35),
        (MetricKey.STANCE_WIDTH, 70, 180, 45, 230, C, 0.20),
        (MetricKey.BALANCE_SCORE, 55, 100, 30, 100, H, 0.30),
        (MetricKey.TRUNK_LEAN, 5, 25, 0, 40, C, 0.15),
    )),
    # ---------------- Volleyball ----------------
    _table(Sport.VOLLEYBALL, Action.SPIKE, 2, (
        (MetricKey.ELBOW_AT_CONTACT, 155, 177, 130, 180, H, 0.22),
        (MetricKey.CONTACT_HEIGHT, 85, 115, 65, 130, H, 0.22),
        (MetricKey.ARM_SWING_SCORE, 65, 100, 30, 100, H, 0.18),
        (MetricKey.JUMP_HEIGHT, 0.07, 0.22, 0.01, 0.35, H, 0.16),
        (MetricKey.TRUNK_ROTATION, 20, 65, 5, 90, C, 0.10),
        (MetricKey.BODY_ALIGNMENT, 68, 100, 35, 100, H, 0.07),
        (MetricKey.STABILITY, 70, 100, 35, 100, H, 0.05),
    )),
    _table(Sport.VOLLEYBALL, Action.SERVE, 2, (
        (MetricKey.ELBOW_AT_CONTACT, 155, 177, 125, 180, H, 0.25),
        (MetricKey.CONTACT_HEIGHT, 78, 110, 60, 125, H, 0.20),
        (MetricKey.TRUNK_ROTATION, 18, 55, 5, 80, C, 0.15),
        (MetricKey.FOLLOW_THROUGH, 70, 100, 35, 100, H, 0.18),
        (MetricKey.STABILITY, 78, 100, 45, 100, H, 0.12),
        (MetricKey.ARM_SWING_SCORE, 55, 100, 20, 100, H, 0.10),
    )),
    _table(Sport.VOLLEYBALL, Action.BLOCK, 2, (
        (MetricKey.JUMP_HEIGHT, 0.05, 0.20, 0.01, 0.32, H, 0.25),
        (MetricKey.ARM_EXTENSION, 155, 177, 120, 180, H, 0.28),
        (MetricKey.HAND_HEIGHT, 85, 115, 65, 130, H, 0.22),
        (MetricKey.HAND_SYMMETRY, 75, 100, 40, 100, H, 0.15),
        (MetricKey.BODY_ALIGNMENT, 65, 100, 30, 100, H, 0.10),
    )),
    _table(Sport.VOLLEYBALL, Action.SET, 2, (
        (MetricKey.HAND_SYMMETRY, 72, 100, 40, 100, H, 0.30),
        (MetricKey.ELBOW_ANGLE, 88, 138, 60, 165, C, 0.25),
        (MetricKey.CONTACT_HEIGHT, 80, 110, 55, 125, H, 0.20),
        (MetricKey.BODY_ALIGNMENT, 70, 100, 35, 100, H, 0.15),
        (MetricKey.STABILITY, 72, 100, 40, 100, H, 0.10),
    )),
    # ---------------- Badminton ----------------
    _table(Sport.BADMINTON, Action.SMASH, 2, (
        (MetricKey.ELBOW_AT_CONTACT, 155, 177, 125, 180, H, 0.22),
        (MetricKey.CONTACT_HEIGHT, 90, 125, 65, 135, H, 0.20),
        (MetricKey.TRUNK_ROTATION, 22, 65, 5, 90, C, 0.15),
        (MetricKey.WRIST_SPEED, 60, 100, 20, 100, H, 0.18),
        (MetricKey.JUMP_HEIGHT, 0.04, 0.20, 0.0, 0.35, H, 0.10),
        (MetricKey.FOLLOW_THROUGH, 65, 100, 25, 100, H, 0.10),
        (MetricKey.BODY_ALIGNMENT, 62, 100, 30, 100, H, 0.05),
    )),
    _table(Sport.BADMINTON, Action.CLEAR, 2, (
        (MetricKey.ELBOW_AT_CONTACT, 150, 177, 120, 180, H, 0.25),
        (MetricKey.CONTACT_HEIGHT, 82, 118, 60, 132, H, 0.22),
        (MetricKey.TRUNK_ROTATION, 18, 60, 5, 85, C, 0.15),
        (MetricKey.FOLLOW_THROUGH, 70, 100, 30, 100, H, 0.18),
        (MetricKey.BODY_ALIGNMENT, 60, 100, 28, 100, H, 0.10),
        (MetricKey.WRIST_SPEED, 50, 100, 15, 100, H, 0.10),
    )),
    _table(Sport.BADMINTON, Action.DROP_SHOT, 2, (
        (MetricKey.CONTACT_HEIGHT, 65, 98, 45, 118, C, 0.25),
        (MetricKey.ELBOW_ANGLE, 118, 162, 85, 178, C, 0.28),
        (MetricKey.TRUNK_ROTATION, 10, 45, 2, 70, C, 0.18),
        (MetricKey.BODY_ALIGNMENT, 65, 100, 35, 100, H, 0.15),
        (MetricKey.STABILITY, 70, 100, 38, 100, H, 0.14),
    )),
    _table(Sport.BADMINTON, Action.SERVE, 2, (
        (MetricKey.STABILITY, 82, 100, 50, 100, H, 0.30),
        (MetricKey.ELBOW_AT_CONTACT, 120, 165, 85, 178, C, 0.25),
        (MetricKey.FOLLOW_THROUGH, 60, 100, 25, 100, H, 0.25),
        (MetricKey.BODY_ALIGNMENT, 70, 100, 38, 100, H, 0.20),
    )),
)

ACTION_STANDARDS: Mapping[Tuple[Sport, Action], ActionStandards] = MappingProxyType({
    (table.sport, table.action): table for table in _TABLES
})


def get_action_standards(sport: Sport, action: Action) -> Optional[ActionStandards]:
    """Benchmark table for a selector, or None when the pair is unsupported."""
    return ACTION_STANDARDS.get((sport, action))


# ============================================
# GRADING CONSTANTS
# ============================================

PERFECT_SCORE = 100.0
MIN_SCORE = 0.0
DEFAULT_GRADE_CURVE = 0.15

LETTER_GRADES = (
    (97, "A+"), (93, "A"), (90, "A-"),
    (87, "B+"), (83, "B"), (80, "B-"),
    (77, "C+"), (73, "C"), (70, "C-"),
    (67, "D+"), (63, "D"), (60, "D-"),
)

PERFORMANCE_LEVELS = (
    (90, "Excellent"),
    (80, "Good"),
    (70, "Average"),
    (60, "Below Average"),
    (50, "Needs Improvement"),
)
