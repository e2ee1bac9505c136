"""Tests for the settings object."""

import pytest

from biome_sports_analysis.config import LOCAL_DEV_ORIGINS, Settings


class TestAllowedOrigins:
    def test_production_uses_configured_origins_only(self):
        settings = Settings(debug=False, cors_origins="https://app.example.com, https://admin.example.com")
        assert settings.is_production
        assert settings.allowed_origins == ["https://app.example.com", "https://admin.example.com"]

    def test_development_adds_local_ports(self):
        settings = Settings(debug=True, cors_origins="https://app.example.com,http://localhost:3000")
        origins = settings.allowed_origins
        assert not settings.is_production
        assert origins[:2] == ["https://app.example.com", "http://localhost:3000"]
        assert set(LOCAL_DEV_ORIGINS) <= set(origins)
        assert len(origins) == len(set(origins))


class TestValidate:
    def test_defaults_are_valid(self):
        Settings().validate()

    @pytest.mark.parametrize("overrides", [
        {"min_frames": 0},
        {"min_confidence": 1.5},
        {"default_fps": 0},
        {"grade_curve_factor": 1.0},
    ])
    def test_rejects_inconsistent_values(self, overrides):
        with pytest.raises(ValueError):
            Settings(**overrides).validate()
