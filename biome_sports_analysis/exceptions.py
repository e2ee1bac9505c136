"""
Custom exceptions for Biome Sports Analysis.

Provides specific exception types for better error handling and logging.
"""
from typing import List, Optional


class BiomeError(Exception):
    """Base exception for all Biome application errors."""
    pass


class ValidationError(BiomeError):
    """Input validation failed."""
    pass


class InvalidFrameError(ValidationError):
    """A frame could not be parsed into keypoints."""
    pass


class FrameValidationError(ValidationError):
    """Frame sequence is not adequate for analysis."""

    def __init__(self, issues: List[str], message: Optional[str] = None):
        self.issues = list(issues)
        super().__init__(message or "; ".join(self.issues))


class UnsupportedSelectorError(BiomeError):
    """Requested sport/action combination is not supported."""
    pass


class AnalysisError(BiomeError):
    """Performance analysis failed."""
    pass


class ConfigurationError(BiomeError):
    """Application configuration error."""
    pass
