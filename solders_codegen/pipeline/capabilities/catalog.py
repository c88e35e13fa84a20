"""
The fixed catalog of capabilities.

Each capability names the generation units it enables, the shapes it can
be applied to, and the options it accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ...utils import RENAME_RULES
from ..shape.nodes import ShapeKind


class OptionKind(str, Enum):
    """How an option token is interpreted."""

    STRING = "string"  # str literal
    BOOLEAN = "boolean"  # bool literal
    REFERENCE = "reference"  # name or dotted name, kept as source text
    STRING_MAP = "string_map"  # dict literal of str -> str
    STRING_LIST = "string_list"  # list or tuple literal of str


@dataclass(frozen=True)
class OptionSpec:
    """An accepted option of a capability."""

    name: str
    kind: OptionKind = OptionKind.STRING
    required: bool = False
    positional: bool = False  # May be given as a positional argument
    choices: tuple[str, ...] = ()


@dataclass(frozen=True)
class CapabilitySpec:
    """A capability of the catalog."""

    name: str
    units: tuple[str, ...]
    shapes: frozenset[ShapeKind] = frozenset({ShapeKind.RECORD, ShapeKind.VARIANT})
    options: tuple[OptionSpec, ...] = field(default_factory=tuple)
    description: str = ""

    def option(self, name: str) -> OptionSpec | None:
        for spec in self.options:
            if spec.name == name:
                return spec
        return None

    @property
    def positional_options(self) -> list[OptionSpec]:
        return [spec for spec in self.options if spec.positional]


RECORD_ONLY = frozenset({ShapeKind.RECORD})
VARIANT_ONLY = frozenset({ShapeKind.VARIANT})

COMMON_UNITS = (
    "equality",
    "hash",
    "ordering",
    "string",
    "json_encode",
    "json_decode",
    "bytes",
    "from_bytes",
    "reduce",
)

COMMON_OPTIONS = (
    OptionSpec("layout"),
    OptionSpec("binary", OptionKind.BOOLEAN),
)

_CAPABILITIES = [
    CapabilitySpec(
        name="common_methods",
        units=COMMON_UNITS,
        options=COMMON_OPTIONS,
        description="Equality, hash, ordering, str/repr, JSON and binary encoding.",
    ),
    CapabilitySpec(
        name="common_methods_rpc_resp",
        units=COMMON_UNITS + ("rpc_context", "rpc_value"),
        shapes=RECORD_ONLY,
        options=COMMON_OPTIONS + (OptionSpec("context_field"), OptionSpec("value_field")),
        description="common_methods plus context and value accessors of an RPC response.",
    ),
    CapabilitySpec(
        name="common_methods_rpc_resp_no_context",
        units=COMMON_UNITS + ("rpc_value",),
        shapes=RECORD_ONLY,
        options=COMMON_OPTIONS + (OptionSpec("value_field"),),
        description="common_methods plus the value accessor of an RPC response without context.",
    ),
    CapabilitySpec(
        name="rpc_id_getter",
        units=("rpc_id",),
        shapes=RECORD_ONLY,
        options=(OptionSpec("id_field"), OptionSpec("id_type")),
        description="id accessor of a JSON-RPC request or response.",
    ),
    CapabilitySpec(
        name="enum_original_mapping",
        units=("to_external", "from_external"),
        shapes=VARIANT_ONLY,
        options=(
            OptionSpec("external", OptionKind.REFERENCE, required=True, positional=True),
            OptionSpec("variants", OptionKind.STRING_MAP),
            OptionSpec("rename", choices=tuple(RENAME_RULES)),
            OptionSpec("external_variants", OptionKind.STRING_LIST),
        ),
        description="Conversions to and from an external enum with congruent variants.",
    ),
    CapabilitySpec(
        name="pyhash",
        units=("hash",),
        description="__hash__ only.",
    ),
    CapabilitySpec(
        name="richcmp_full",
        units=("equality", "ordering"),
        description="Equality and total ordering.",
    ),
    CapabilitySpec(
        name="richcmp_eq_only",
        units=("equality", "ordering_unsupported"),
        description="Equality; ordering operators raise TypeError.",
    ),
]

CAPABILITIES: dict[str, CapabilitySpec] = {spec.name: spec for spec in _CAPABILITIES}
