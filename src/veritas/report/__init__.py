# src/veritas/report/__init__.py

"""
Reporting boundary for Veritas.
Builds the signal map consumed by external summarizers.
"""

from .summary import build_summary_payload, summary_payload_json

__all__ = [
    "build_summary_payload",
    "summary_payload_json",
]
