# src/veritas/__init__.py

"""
Veritas: content credibility scoring engine.
Turns raw page markup or pasted text into an explainable credibility score.
"""

__version__ = "0.1.0"
__author__ = "Veritas Development Team"

# No direct exports from root; subpackages are accessed explicitly
# e.g., from veritas.core import CredibilityPipeline
