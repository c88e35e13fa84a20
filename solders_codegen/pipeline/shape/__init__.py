"""
Shape module.

Contains the shape node definitions and the introspector for annotated classes.
"""

from __future__ import annotations

from .introspector import ShapeIntrospector
from .nodes import (
    FieldDef,
    RecordShape,
    Shape,
    ShapeKind,
    TypeDeclaration,
    VariantDef,
    VariantShape,
)

__all__ = [
    "ShapeKind",
    "FieldDef",
    "VariantDef",
    "RecordShape",
    "VariantShape",
    "Shape",
    "TypeDeclaration",
    "ShapeIntrospector",
]
