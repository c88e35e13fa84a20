"""
Analyzer module.

Contains conflict detection and exhaustiveness checking.
"""

from __future__ import annotations

from . import exhaustiveness
from .conflicts import ConflictDetector, collect_existing_members

__all__ = [
    "ConflictDetector",
    "collect_existing_members",
    "exhaustiveness",
]
