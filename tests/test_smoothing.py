"""Tests for trajectory smoothing and the derivative helpers."""

import math

import pytest

from biome_sports_analysis.models import Frame, LandmarkIndex
from biome_sports_analysis.smoothing import (
    SmoothingConfig,
    calculate_acceleration,
    calculate_velocity,
    moving_average,
    smooth_frames,
    weighted_moving_average,
)

from poses import jump_clip, standing_clip, with_keypoint


class TestMovingAverage:
    def test_length_is_preserved(self):
        values = [0.1 * i for i in range(11)]
        assert len(moving_average(values, 5)) == len(values)

    def test_constant_series_is_a_fixed_point(self):
        values = [0.42] * 9
        assert moving_average(values, 5) == pytest.approx(values)

    def test_edges_are_copied(self):
        values = [0.0, 1.0, 0.0, 1.0, 0.0, 1.0, 0.0]
        smoothed = moving_average(values, 5, preserve_edges=True)
        assert smoothed[:2] == values[:2]
        assert smoothed[-2:] == values[-2:]
        assert smoothed[2] == pytest.approx(0.4)
        assert smoothed[3] == pytest.approx(0.6)

    def test_truncated_edges(self):
        smoothed = moving_average([0.0, 3.0, 6.0], 3, preserve_edges=False)
        assert smoothed == pytest.approx([1.5, 3.0, 4.5])

    def test_even_window_rounds_up(self):
        values = [0.0, 1.0, 4.0, 9.0, 16.0, 25.0, 36.0]
        assert moving_average(values, 4) == pytest.approx(moving_average(values, 5))

    def test_window_of_one_is_identity(self):
        values = [0.3, 0.1, 0.7]
        assert moving_average(values, 1) == values

    def test_gaps_do_not_contribute(self):
        smoothed = moving_average([1.0, math.nan, 3.0], 3, preserve_edges=False)
        assert smoothed[1] == pytest.approx(2.0)
        assert smoothed[0] == pytest.approx(1.0)

    def test_strict_mode_drops_out_of_range(self):
        smoothed = moving_average([0.5, 5.0, 0.5], 3, preserve_edges=False, strict=True)
        assert smoothed[1] == pytest.approx(0.5)

    def test_weighted_average_constant(self):
        assert weighted_moving_average([0.2] * 7, 5) == pytest.approx([0.2] * 7)

    def test_weighted_average_favours_center(self):
        smoothed = weighted_moving_average([0.0, 0.0, 1.0, 0.0, 0.0], 3)
        # weights 1, 2, 1
        assert smoothed[2] == pytest.approx(0.5)
        assert smoothed[1] == pytest.approx(0.25)


class TestSmoothFrames:
    def test_same_length_and_order(self):
        frames = jump_clip()
        smoothed = smooth_frames(frames, SmoothingConfig(window=5))
        assert len(smoothed) == len(frames)
        assert [f.index for f in smoothed] == [f.index for f in frames]

    def test_input_is_untouched(self):
        frames = jump_clip()
        before = [f.to_dict() for f in frames]
        smooth_frames(frames, SmoothingConfig(window=5))
        assert [f.to_dict() for f in frames] == before

    def test_static_pose_is_unchanged(self):
        frames = standing_clip(12)
        smoothed = smooth_frames(frames, SmoothingConfig(window=5))
        for raw, out in zip(frames, smoothed):
            for a, b in zip(raw.keypoints, out.keypoints):
                assert b.x == pytest.approx(a.x)
                assert b.y == pytest.approx(a.y)

    def test_frames_without_landmarks_pass_through(self):
        frames = standing_clip(9)
        frames[4] = Frame(index=4, timestamp=4 / 30)
        smoothed = smooth_frames(frames, SmoothingConfig(window=5))
        assert smoothed[4] is frames[4]
        assert smoothed[5].keypoints[0].x == pytest.approx(frames[5].keypoints[0].x)

    def test_low_visibility_landmark_is_ignored(self):
        """A jittery landmark below the floor does not pull its neighbours."""
        frames = standing_clip(9)
        wrist = LandmarkIndex.RIGHT_WRIST
        original_x = frames[4].keypoints[wrist].x
        frames[4] = with_keypoint(frames[4], wrist, x=original_x + 0.3, visibility=0.1)

        smoothed = smooth_frames(frames, SmoothingConfig(window=5, min_visibility=0.3))
        assert smoothed[4].keypoints[wrist].x == pytest.approx(original_x)
        assert smoothed[3].keypoints[wrist].x == pytest.approx(original_x)
        # visibility is carried through
        assert smoothed[4].keypoints[wrist].visibility == 0.1

    def test_short_clip_returned_as_is(self):
        frames = standing_clip(3)
        smoothed = smooth_frames(frames, SmoothingConfig(window=5))
        assert smoothed == frames


class TestDerivatives:
    def test_linear_motion_has_constant_velocity(self):
        positions = [0.01 * i for i in range(10)]
        velocity = calculate_velocity(positions, fps=30.0)
        assert len(velocity) == len(positions)
        assert velocity == pytest.approx([0.3] * 10)

    def test_degenerate_inputs(self):
        assert calculate_velocity([0.5], fps=30.0) == []
        assert calculate_velocity([0.1, 0.2, 0.3], fps=0) == [0.0, 0.0, 0.0]

    def test_constant_velocity_has_no_acceleration(self):
        acceleration = calculate_acceleration([0.3] * 6, fps=30.0)
        assert acceleration == pytest.approx([0.0] * 6)
