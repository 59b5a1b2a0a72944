# src/veritas/ingest/__init__.py

"""
Markup ingestion for Veritas.
Heuristic signal extraction from fetched HTML.
"""

from .markup import MarkupExtractor, find_byline_author

__all__ = [
    "MarkupExtractor",
    "find_byline_author",
]
