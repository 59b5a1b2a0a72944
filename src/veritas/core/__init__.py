# src/veritas/core/__init__.py

"""
Core orchestration for Veritas.
Manages configuration and end-to-end analysis.
"""

from .config import load_config, VeritasConfig
from .pipeline import CredibilityPipeline

__all__ = [
    "load_config",
    "VeritasConfig",
    "CredibilityPipeline",
]
