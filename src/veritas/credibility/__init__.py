# src/veritas/credibility/__init__.py

"""
Credibility scoring for Veritas.
Keyword lexicons and the five-dimension scoring engine.
"""

from .lexicons import DEFAULT_LEXICONS, Lexicons
from .scorer import CredibilityScorer, ScoringConfig, calculate_score

__all__ = [
    "DEFAULT_LEXICONS",
    "Lexicons",
    "CredibilityScorer",
    "ScoringConfig",
    "calculate_score",
]
