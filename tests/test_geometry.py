"""Tests for the geometric primitives and whole-body measurements."""

import math

import numpy as np
import pytest

from biome_sports_analysis.metrics.body import (
    body_alignment,
    contact_height,
    hand_symmetry,
    highest_hip_frame,
    highest_wrist_frame,
    jump_height,
    stability_index,
    trunk_rotation,
)
from biome_sports_analysis.metrics.geometry import (
    RIGHT,
    angle_between,
    clamp01,
    hitting_side,
    joint_angle,
    normalized_height,
    point,
    rounded,
)
from biome_sports_analysis.models import LandmarkIndex, Side

from poses import jump_clip, make_pose, with_keypoint


class TestPrimitives:
    def test_right_angle(self):
        a, b, c = np.array([1.0, 0.0]), np.array([0.0, 0.0]), np.array([0.0, 1.0])
        assert angle_between(a, b, c) == pytest.approx(90.0)

    def test_straight_line_is_180(self):
        a, b, c = np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([2.0, 0.0])
        assert angle_between(a, b, c) == pytest.approx(180.0)

    def test_zero_length_vector_is_degenerate(self):
        """Coincident points have no defined angle."""
        p = np.array([0.5, 0.5])
        assert angle_between(p, p, np.array([1.0, 1.0])) is None

    def test_rounded_rejects_non_finite(self):
        assert rounded(None) is None
        assert rounded(math.inf) is None
        assert rounded(math.nan) is None
        assert rounded(12.345) == 12.3

    def test_clamp01(self):
        assert clamp01(-0.5) == 0.0
        assert clamp01(0.25) == 0.25
        assert clamp01(3.0) == 1.0

    def test_normalized_height(self):
        """A point 0.7 above the ankles with a 0.5 body height sits at 140%."""
        assert normalized_height(0.2, 0.9, 0.4) == pytest.approx(140.0)

    def test_normalized_height_needs_a_body(self):
        assert normalized_height(0.2, 0.5, 0.48) is None


class TestPoseGeometry:
    def test_synthetic_elbow_and_knee_angles(self):
        frame = make_pose(elbow_angle=165, knee_angle=170)
        assert joint_angle(frame, RIGHT.shoulder, RIGHT.elbow, RIGHT.wrist) == pytest.approx(165.0, abs=1e-6)
        assert joint_angle(frame, RIGHT.hip, RIGHT.knee, RIGHT.ankle) == pytest.approx(170.0, abs=1e-6)

    def test_point_respects_visibility_floor(self):
        frame = make_pose(visibility=0.4)
        assert point(frame, LandmarkIndex.RIGHT_WRIST, 0.5) is None
        assert point(frame, LandmarkIndex.RIGHT_WRIST, 0.3) is not None

    def test_missing_frame_yields_none(self):
        assert point(None, LandmarkIndex.NOSE) is None
        assert joint_angle(None, 11, 13, 15) is None

    def test_hitting_side_is_higher_wrist(self):
        assert hitting_side(make_pose(shooting_side=Side.RIGHT)) == Side.RIGHT
        assert hitting_side(make_pose(shooting_side=Side.LEFT)) == Side.LEFT

    def test_hitting_side_with_one_visible_wrist(self):
        frame = make_pose(shooting_side=Side.RIGHT, hidden=(LandmarkIndex.RIGHT_WRIST,))
        assert hitting_side(frame) == Side.LEFT

    def test_hitting_side_defaults_to_right(self):
        frame = make_pose(hidden=(LandmarkIndex.RIGHT_WRIST, LandmarkIndex.LEFT_WRIST))
        assert hitting_side(frame) == Side.RIGHT


class TestBodyMeasurements:
    def test_upright_torso(self):
        frame = make_pose()
        assert body_alignment(frame, 0.5) == 100.0
        assert trunk_rotation(frame, 0.5) == 0.0

    def test_leaning_torso_loses_alignment(self):
        frame = make_pose()
        # shift both shoulders sideways by the torso height: a 45 degree lean
        for slot in (LandmarkIndex.LEFT_SHOULDER, LandmarkIndex.RIGHT_SHOULDER):
            frame = with_keypoint(frame, slot, x=frame.keypoints[slot].x + 0.25)
        assert body_alignment(frame, 0.5) == 0.0

    def test_stability_without_drift(self):
        frames = jump_clip()
        assert stability_index(frames, 10, 21, 0.5) == 100.0

    def test_stability_with_sideways_drift(self):
        """Drifting 0.4 shoulder widths with a 0.8 scale halves the score."""
        frames = jump_clip(hip_x_step=0.004)
        assert stability_index(frames, 10, 20, 0.5) == 50.0

    def test_stability_needs_ordered_keyframes(self):
        frames = jump_clip()
        assert stability_index(frames, 21, 10, 0.5) is None
        assert stability_index(frames, None, 10, 0.5) is None

    def test_jump_height_is_hip_rise(self):
        frames = jump_clip(rise=0.1)
        assert jump_height(frames, 10, 20, 0.5) == pytest.approx(0.1)

    def test_jump_height_never_negative(self):
        frames = jump_clip(rise=0.1)
        assert jump_height(frames, 20, 10, 0.5) == 0.0

    def test_contact_height_is_clamped(self):
        frame = make_pose()
        assert contact_height(frame, 0.0, 0.5) == 130.0
        assert contact_height(frame, None, 0.5) is None

    def test_hand_symmetry(self):
        assert hand_symmetry(make_pose(both_arms_up=True), 0.5) == 100.0
        assert hand_symmetry(make_pose(), 0.5) == 0.0

    def test_highest_frames(self):
        frames = jump_clip()
        assert highest_hip_frame(frames, 0.5) == 20
        assert highest_wrist_frame(frames, 0, len(frames) - 1, 0.5) == 20
        assert highest_wrist_frame(frames, 0, 5, 0.5) == 0
