"""Biome Sports Analysis: pose-based technique analysis for basketball, volleyball and badminton."""

__version__ = "1.0.0"
