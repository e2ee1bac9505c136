"""Tests for frame validation and frame-rate estimation."""

from biome_sports_analysis.models import Frame
from biome_sports_analysis.validation import ValidationConfig, estimate_fps, validate_frames

from poses import make_pose, standing_clip


class TestValidateFrames:
    def test_good_clip_passes(self):
        result = validate_frames(standing_clip(20), ValidationConfig())
        assert result.is_valid
        assert result.issues == []

    def test_empty_sequence(self):
        result = validate_frames([], ValidationConfig())
        assert not result.is_valid
        assert result.issues == ["No frames provided"]

    def test_too_few_frames(self):
        result = validate_frames(standing_clip(5), ValidationConfig(min_frames=10))
        assert not result.is_valid
        assert "Insufficient frames: 5 < 10 required" in result.issues

    def test_no_landmarks_anywhere(self):
        frames = [Frame(index=i, timestamp=i / 30) for i in range(12)]
        result = validate_frames(frames, ValidationConfig())
        assert not result.is_valid
        assert "No frames contain landmarks" in result.issues

    def test_sparse_detection(self):
        """Fewer than half the frames carrying landmarks is reported."""
        frames = [make_pose(index=i) for i in range(4)] + [Frame(index=i, timestamp=i / 30) for i in range(4, 12)]
        result = validate_frames(frames, ValidationConfig(min_confidence=0.0))
        assert not result.is_valid
        assert any(issue.startswith("Low landmark detection rate") for issue in result.issues)

    def test_low_confidence(self):
        result = validate_frames(standing_clip(12, visibility=0.1), ValidationConfig(min_confidence=0.3))
        assert not result.is_valid
        assert any(issue.startswith("Low average confidence") for issue in result.issues)

    def test_issues_accumulate(self):
        """Every failed check is reported, not only the first."""
        result = validate_frames(standing_clip(3, visibility=0.1), ValidationConfig(min_frames=10, min_confidence=0.3))
        assert len(result.issues) == 2

    def test_to_dict(self):
        result = validate_frames([], ValidationConfig())
        assert result.to_dict() == {"is_valid": False, "issues": ["No frames provided"]}


class TestEstimateFps:
    def test_from_timestamps(self):
        assert estimate_fps(standing_clip(10, fps=30.0)) == 30.0
        assert estimate_fps(standing_clip(10, fps=60.0)) == 60.0

    def test_single_frame_uses_default(self):
        assert estimate_fps(standing_clip(1), default=25.0) == 25.0

    def test_missing_timestamps_use_default(self):
        frames = [Frame(index=i, timestamp=0.0) for i in range(5)]
        assert estimate_fps(frames, default=24.0) == 24.0
