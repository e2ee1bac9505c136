"""Shared fixtures for the analysis test suite."""

import pytest

from biome_sports_analysis.models import KeyframeSet

from poses import jump_clip, standing_clip


@pytest.fixture
def jump_frames():
    """40-frame jump shot at 30 fps: take-off at 10, apex at 20, landing at 30."""
    return jump_clip()


@pytest.fixture
def jump_keyframes():
    return KeyframeSet(start=10, peak=20, contact=21, end=30)


@pytest.fixture
def standing_frames():
    return standing_clip()
