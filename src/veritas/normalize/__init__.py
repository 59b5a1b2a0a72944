# src/veritas/normalize/__init__.py

"""
Normalization layer for Veritas.
Canonical records shared by extraction and scoring.
"""

from .schema import AnalysisData, AnalysisResult, Dimension, ScoreModifier, Severity, SiteType

__all__ = [
    "AnalysisData",
    "AnalysisResult",
    "Dimension",
    "ScoreModifier",
    "Severity",
    "SiteType",
]
