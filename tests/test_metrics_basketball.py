"""Tests for the basketball metric calculators."""

import pytest

from biome_sports_analysis.metrics import basketball
from biome_sports_analysis.models import KeyframeSet, Side

from poses import jump_clip, make_pose, standing_clip


class TestReleaseAngle:
    @pytest.mark.parametrize("angle", [30.0, 55.0, 80.0])
    def test_forearm_elevation(self, angle):
        frame = make_pose(release_angle=angle)
        assert basketball.release_angle(frame, Side.RIGHT) == pytest.approx(angle, abs=0.05)

    def test_left_handed_shooter(self):
        frame = make_pose(shooting_side=Side.LEFT, release_angle=48.0)
        assert basketball.release_angle(frame, Side.LEFT) == pytest.approx(48.0, abs=0.05)

    def test_invisible_arm(self):
        assert basketball.release_angle(make_pose(visibility=0.2), Side.RIGHT) is None


class TestJumpShot:
    def test_all_metrics(self, jump_frames, jump_keyframes):
        metrics = basketball.jump_shot(jump_frames, jump_keyframes, 30.0)
        assert metrics["release_angle"] == pytest.approx(55.0, abs=0.05)
        assert metrics["elbow_angle_at_release"] == pytest.approx(165.0, abs=0.05)
        assert metrics["knee_angle_at_peak"] == pytest.approx(170.0, abs=0.05)
        assert metrics["jump_height_normalized"] == pytest.approx(0.1)
        assert metrics["stability_index"] == 100.0
        # elbow holds 165 after release: (165 - 120) / (170 - 120)
        assert metrics["follow_through_score"] == 90.0
        assert metrics["release_timing_ms"] == 33.0

    def test_release_before_peak_is_negative_timing(self, jump_frames):
        metrics = basketball.jump_shot(jump_frames, KeyframeSet(start=10, peak=20, contact=17), 30.0)
        assert metrics["release_timing_ms"] == -100.0

    def test_missing_contact(self, jump_frames):
        metrics = basketball.jump_shot(jump_frames, KeyframeSet(start=10, peak=20), 30.0)
        assert metrics["release_angle"] is None
        assert metrics["elbow_angle_at_release"] is None
        assert metrics["release_timing_ms"] is None
        assert metrics["knee_angle_at_peak"] == pytest.approx(170.0, abs=0.05)

    def test_deep_knee_bend(self):
        frames = jump_clip(knee_angle=120.0)
        metrics = basketball.jump_shot(frames, KeyframeSet(start=10, peak=20, contact=21), 30.0)
        assert metrics["knee_angle_at_peak"] == pytest.approx(120.0, abs=0.05)


class TestFreeThrow:
    def test_steady_set_up(self, standing_frames):
        metrics = basketball.free_throw(standing_frames, KeyframeSet(start=5, contact=20), 30.0)
        assert metrics["release_angle"] == pytest.approx(55.0, abs=0.05)
        assert metrics["knee_angle_push"] == pytest.approx(170.0, abs=0.05)
        assert metrics["stability_index"] == 100.0
        assert metrics["rhythm_consistency"] == 100.0

    def test_release_falls_back_to_peak(self, jump_frames):
        metrics = basketball.free_throw(jump_frames, KeyframeSet(start=10, peak=20), 30.0)
        assert metrics["release_angle"] == pytest.approx(55.0, abs=0.05)
        assert metrics["rhythm_consistency"] is not None

    def test_no_release_at_all(self, standing_frames):
        metrics = basketball.free_throw(standing_frames, KeyframeSet(), 30.0)
        assert metrics["release_angle"] is None
        assert metrics["rhythm_consistency"] is None
        # the push is read at mid-clip
        assert metrics["knee_angle_push"] == pytest.approx(170.0, abs=0.05)

    def test_rhythm_needs_four_samples(self, standing_frames):
        assert basketball.rhythm_consistency(standing_frames, Side.RIGHT, 0, 2) is None
        assert basketball.rhythm_consistency(standing_frames, Side.RIGHT, 0, 3) == 100.0


class TestLayup:
    def test_vertical_take_off(self, jump_frames, jump_keyframes):
        metrics = basketball.layup(jump_frames, jump_keyframes, 30.0)
        assert metrics["takeoff_angle"] == pytest.approx(90.0)
        assert metrics["approach_speed"] == 0.0
        assert metrics["peak_height"] == pytest.approx(0.1)
        assert metrics["stability_index"] == 100.0
        assert metrics["finish_hand_position"] == 130.0

    def test_running_approach(self, jump_keyframes):
        """0.004 per frame at 30 fps is 0.12/s, 15% of eight shoulder widths per second."""
        frames = jump_clip(hip_x_step=0.004)
        metrics = basketball.layup(frames, jump_keyframes, 30.0)
        assert metrics["approach_speed"] == 15.0
        assert metrics["takeoff_angle"] == pytest.approx(68.2, abs=0.05)

    def test_no_rise_means_no_take_off(self, standing_frames):
        metrics = basketball.layup(standing_frames, KeyframeSet(start=10, peak=20), 30.0)
        assert metrics["takeoff_angle"] is None
        assert metrics["peak_height"] == 0.0


class TestDribbling:
    def test_upright_stance(self, standing_frames):
        metrics = basketball.dribbling(standing_frames, KeyframeSet(), 30.0)
        assert metrics["knee_bend_score"] == 0.0
        assert metrics["stance_width"] == pytest.approx(149.5, abs=0.1)
        assert metrics["balance_score"] == 100.0
        assert metrics["trunk_lean"] == 0.0

    def test_too_few_samples(self):
        metrics = basketball.dribbling(standing_clip(2), KeyframeSet(), 30.0)
        assert set(metrics) == {"knee_bend_score", "stance_width", "balance_score", "trunk_lean"}
        assert all(value is None for value in metrics.values())
