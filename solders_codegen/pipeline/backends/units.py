"""
Generation unit definitions.

A unit is one synthesizable group of methods. Units are emitted in the
order of UNITS, whatever order the capabilities were requested in, so the
output is deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..shape.nodes import ShapeKind

BOTH = frozenset({ShapeKind.RECORD, ShapeKind.VARIANT})
RECORD = frozenset({ShapeKind.RECORD})
VARIANT = frozenset({ShapeKind.VARIANT})

ORDERING_METHODS = ("__lt__", "__le__", "__gt__", "__ge__")


@dataclass(frozen=True)
class GenerationUnit:
    """A synthesizable group of methods.

    Attributes:
        name: Unique unit name
        methods: Member names the unit defines (used for conflict lookup)
        template: Template file stem under templates/python
        shapes: Shapes the unit applies to
        optional: Whether a hand-written member silently replaces the unit
        needs_layout: Whether the unit requires a binary layout
    """

    name: str
    methods: tuple[str, ...]
    template: str
    shapes: frozenset[ShapeKind] = BOTH
    optional: bool = False
    needs_layout: bool = False

    def applies_to(self, kind: ShapeKind) -> bool:
        return kind in self.shapes


@dataclass(frozen=True)
class PlannedUnit:
    """A unit selected for a declaration, with the capability that asked for it."""

    unit: GenerationUnit
    capability: str


_UNITS = [
    GenerationUnit("equality", ("__eq__",), "equality"),
    GenerationUnit("hash", ("__hash__",), "hash"),
    GenerationUnit("ordering", ORDERING_METHODS, "ordering"),
    GenerationUnit("ordering_unsupported", ORDERING_METHODS, "ordering_unsupported"),
    GenerationUnit("string", ("__repr__", "__str__"), "string"),
    GenerationUnit("json_encode", ("to_json_value", "to_json"), "json_encode"),
    GenerationUnit("json_decode", ("from_json_value", "from_json"), "json_decode"),
    GenerationUnit("bytes", ("__bytes__",), "bytes", needs_layout=True),
    GenerationUnit("from_bytes", ("from_bytes",), "from_bytes", optional=True, needs_layout=True),
    GenerationUnit("reduce", ("__reduce__",), "reduce", shapes=RECORD),
    GenerationUnit("rpc_id", ("id",), "rpc_id", shapes=RECORD),
    GenerationUnit("rpc_context", ("context",), "rpc_context", shapes=RECORD),
    GenerationUnit("rpc_value", ("value",), "rpc_value", shapes=RECORD),
    GenerationUnit("to_external", ("to_external",), "to_external", shapes=VARIANT),
    GenerationUnit("from_external", ("from_external",), "from_external", shapes=VARIANT),
]

UNITS: dict[str, GenerationUnit] = {unit.name: unit for unit in _UNITS}
