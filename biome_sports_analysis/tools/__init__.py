"""Tools package for Biome Sports Analysis.

Each module exposes a plain function that returns a JSON-ready dict.
"""

from .analyze_performance import AnalysisConfig, analyze_performance, supported_selectors

__all__ = [
  "analyze_performance",
  "AnalysisConfig",
  "supported_selectors",
]
