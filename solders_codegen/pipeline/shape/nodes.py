"""
Shape node definitions.

A type declaration is normalized into one of two shapes: a record (named
fields) or a variant (enum members). Every generation unit consumes the
shape through its ``kind``, so templates never look at raw syntax.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ShapeKind(str, Enum):
    """Kind of shape."""

    RECORD = "record"  # Class with annotated fields
    VARIANT = "variant"  # Enum with members


@dataclass(frozen=True)
class FieldDef:
    """A named field of a record."""

    name: str
    type_expr: str  # Annotation source, usable as a runtime expression
    has_default: bool = False


@dataclass(frozen=True)
class VariantDef:
    """A member of a variant type."""

    name: str
    payload: str | None = None  # Source text of the member value


@dataclass(frozen=True)
class RecordShape:
    """Record shape: ordered named fields."""

    fields: tuple[FieldDef, ...] = ()

    kind = ShapeKind.RECORD

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldDef | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class VariantShape:
    """Variant shape: ordered enum members."""

    variants: tuple[VariantDef, ...] = ()

    kind = ShapeKind.VARIANT

    @property
    def variant_names(self) -> list[str]:
        return [v.name for v in self.variants]


Shape = RecordShape | VariantShape


@dataclass(frozen=True)
class TypeDeclaration:
    """An annotated class, normalized for one generation pass.

    Attributes:
        name: Class name
        shape: Record or variant shape
        existing_members: Names already defined in the class body
        layout: struct format of the binary layout, if the class declares one
        lineno: First line of the class statement (decorators excluded)
    """

    name: str
    shape: Shape
    existing_members: frozenset[str] = field(default_factory=frozenset)
    layout: str | None = None
    lineno: int | None = None

    @property
    def is_record(self) -> bool:
        return self.shape.kind == ShapeKind.RECORD

    @property
    def is_variant(self) -> bool:
        return self.shape.kind == ShapeKind.VARIANT
