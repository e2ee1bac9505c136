"""Tests for the volleyball and badminton calculators and metric dispatch."""

import pytest

from biome_sports_analysis.biomechanics_standards import ACTION_STANDARDS
from biome_sports_analysis.exceptions import UnsupportedSelectorError
from biome_sports_analysis.metrics import CALCULATORS, calculate_metrics, get_calculator, missing_reason
from biome_sports_analysis.metrics import badminton, overhead, volleyball
from biome_sports_analysis.models import Action, KeyframeSet, Side, Sport

from poses import jump_clip


class TestStrike:
    def test_marked_contact_is_used(self, jump_frames):
        strike = overhead.locate_strike(jump_frames, KeyframeSet(contact=25), 0.45)
        assert strike.contact == 25
        assert strike.side == Side.RIGHT

    def test_contact_falls_back_to_highest_hands(self, jump_frames):
        strike = overhead.locate_strike(jump_frames, KeyframeSet(), 0.45)
        assert strike.contact == 20

    def test_left_handed_hitter(self):
        frames = jump_clip(shooting_side=Side.LEFT)
        strike = overhead.locate_strike(frames, KeyframeSet(), 0.45)
        assert strike.side == Side.LEFT
        assert overhead.elbow_at_contact(strike) == pytest.approx(165.0, abs=0.05)


class TestVolleyball:
    def test_spike(self, jump_frames, jump_keyframes):
        metrics = volleyball.spike(jump_frames, jump_keyframes, 30.0)
        assert metrics["elbow_at_contact"] == pytest.approx(165.0, abs=0.05)
        assert metrics["contact_height"] == 130.0
        assert metrics["jump_height"] == pytest.approx(0.1)
        assert metrics["trunk_rotation"] == 0.0
        assert metrics["body_alignment"] == 100.0
        assert metrics["stability"] == 100.0
        assert 0.0 < metrics["arm_swing_score"] <= 100.0

    def test_serve_without_keyframes(self, standing_frames):
        metrics = volleyball.serve(standing_frames, KeyframeSet(), 30.0)
        assert metrics["elbow_at_contact"] == pytest.approx(165.0, abs=0.05)
        # elbow holds 165 after contact: (165 - 120) / (172 - 120)
        assert metrics["follow_through"] == 87.0

    def test_block_at_top_of_jump(self):
        frames = jump_clip(both_arms_up=True)
        metrics = volleyball.block(frames, KeyframeSet(), 30.0)
        assert metrics["jump_height"] == pytest.approx(0.1)
        assert metrics["arm_extension"] == pytest.approx(165.0, abs=0.05)
        assert metrics["hand_height"] == 130.0
        assert metrics["hand_symmetry"] == 100.0
        assert metrics["body_alignment"] == 100.0

    def test_block_with_one_hand(self, jump_frames):
        metrics = volleyball.block(jump_frames, KeyframeSet(), 30.0)
        assert metrics["hand_symmetry"] == 0.0

    def test_set(self):
        frames = jump_clip(both_arms_up=True)
        metrics = volleyball.set_(frames, KeyframeSet(), 30.0)
        assert metrics["hand_symmetry"] == 100.0
        assert metrics["elbow_angle"] == pytest.approx(165.0, abs=0.05)
        assert metrics["contact_height"] == 130.0
        assert metrics["stability"] == 100.0


class TestBadminton:
    def test_smash(self, jump_frames, jump_keyframes):
        metrics = badminton.smash(jump_frames, jump_keyframes, 30.0)
        assert metrics["elbow_at_contact"] == pytest.approx(165.0, abs=0.05)
        assert metrics["contact_height"] == 130.0
        assert metrics["follow_through"] == 87.0
        assert metrics["jump_height"] == pytest.approx(0.1)
        assert metrics["wrist_speed"] is not None

    def test_drop_shot_reads_hitting_elbow(self, jump_frames, jump_keyframes):
        metrics = badminton.drop_shot(jump_frames, jump_keyframes, 30.0)
        assert metrics["elbow_angle"] == pytest.approx(165.0, abs=0.05)
        assert "elbow_at_contact" not in metrics

    def test_serve(self, standing_frames):
        metrics = badminton.serve(standing_frames, KeyframeSet(start=5, contact=20), 30.0)
        assert metrics["stability"] == 100.0
        assert metrics["follow_through"] == 87.0
        assert metrics["body_alignment"] == 100.0


class TestDispatch:
    @pytest.mark.parametrize("selector", sorted(CALCULATORS, key=lambda k: (k[0].value, k[1].value)))
    def test_tables_cover_every_benchmark(self, selector, jump_frames, jump_keyframes):
        """Every calculator reports exactly the metrics its benchmark table scores."""
        sport, action = selector
        metrics = calculate_metrics(sport, action, jump_frames, jump_keyframes, 30.0)
        expected = {key.value for key in ACTION_STANDARDS[selector].benchmarks}
        assert set(metrics) == expected

    def test_unknown_pair(self):
        with pytest.raises(UnsupportedSelectorError):
            get_calculator(Sport.BASKETBALL, Action.SMASH)

    def test_missing_reason(self):
        assert missing_reason(Sport.BASKETBALL, "release_angle", KeyframeSet()) == "missing keyframe: contact"
        assert missing_reason(Sport.BASKETBALL, "jump_height_normalized", KeyframeSet(peak=3)) == "missing keyframe: start"
        assert missing_reason(
            Sport.BASKETBALL, "release_angle", KeyframeSet(contact=3)
        ) == "landmarks not visible or geometry degenerate"
        assert missing_reason(Sport.VOLLEYBALL, "not_a_metric", KeyframeSet()) == "unknown metric"
