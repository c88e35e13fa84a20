"""
Code generation backends.

Contains the generation unit catalog and the template-based synthesizer.
"""

from __future__ import annotations

from .base import CodeBackend
from .python_backend import PythonBackend
from .units import UNITS, GenerationUnit, PlannedUnit

__all__ = [
    "CodeBackend",
    "PythonBackend",
    "GenerationUnit",
    "PlannedUnit",
    "UNITS",
]
