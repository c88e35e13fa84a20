"""
Python code generation backend.

Renders generation units to Python methods using Jinja2 templates. The
template context is resolved from the declaration, the capability options
and the configuration defaults; every unit-specific requirement (binary
layout, RPC fields, mapping table) is checked here, before any text is
produced.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Sequence
from typing import Any

from ...utils import is_identifier, rename_variant
from ..analyzer import exhaustiveness
from ..capabilities.nodes import CapabilitySet
from ..errors import MalformedOption, MissingRequiredField
from ..shape.nodes import RecordShape, TypeDeclaration, VariantShape
from .base import CodeBackend
from .units import PlannedUnit

logger = logging.getLogger(__name__)

# JSON keys used for the wrapped fields of RPC responses
RPC_CONTEXT_KEY = "context"
RPC_VALUE_KEY = "value"


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    def render(
        self,
        declaration: TypeDeclaration,
        capabilities: CapabilitySet,
        units: Sequence[PlannedUnit],
        known_enums: dict[str, list[str]] | None = None,
    ) -> str:
        """Render the planned units of a declaration as unindented Python methods."""
        context = self._prepare_context(declaration, capabilities, units, known_enums or {})

        chunks = []
        for planned in units:
            template = self.get_template(planned.unit)
            chunks.append(template.render(**context).strip("\n"))
        return "\n\n".join(chunks) + "\n"

    def _prepare_context(
        self,
        declaration: TypeDeclaration,
        capabilities: CapabilitySet,
        units: Sequence[PlannedUnit],
        known_enums: dict[str, list[str]],
    ) -> dict[str, Any]:
        """
        Prepare the template context for a declaration.

        Args:
            declaration: The declaration
            capabilities: Parsed capabilities
            units: The units to render
            known_enums: Variant names of enums declared in the same module

        Returns:
            Dictionary of template variables
        """
        unit_names = {planned.unit.name for planned in units}
        shape = declaration.shape

        context: dict[str, Any] = {
            "type_name": declaration.name,
            "shape": shape.kind.value,
            "runtime": self.config.runtime_module,
            "fields": [],
            "variant_names": [],
            "layout": None,
            "layout_length": None,
            "id_path": None,
            "id_type": None,
            "context_field": None,
            "context_type": None,
            "value_field": None,
            "value_type": None,
            "external": None,
            "table": [],
            "keep_hash": False,
        }

        json_keys: dict[str, str] = {}
        if isinstance(shape, RecordShape):
            if "rpc_context" in unit_names:
                context["context_field"], context["context_type"] = self._resolve_rpc_field(
                    declaration, capabilities, "context_field", self.config.rpc_context_field, "rpc_context", units
                )
                json_keys[context["context_field"]] = RPC_CONTEXT_KEY
            if "rpc_value" in unit_names:
                context["value_field"], context["value_type"] = self._resolve_rpc_field(
                    declaration, capabilities, "value_field", self.config.rpc_value_field, "rpc_value", units
                )
                json_keys[context["value_field"]] = RPC_VALUE_KEY
            if "rpc_id" in unit_names:
                context["id_path"], context["id_type"] = self._resolve_rpc_id(declaration, capabilities)

            context["fields"] = [
                {
                    "name": f.name,
                    "type_expr": f.type_expr,
                    "json_key": json_keys.get(f.name, f.name),
                    "has_default": f.has_default,
                }
                for f in shape.fields
            ]
        elif isinstance(shape, VariantShape):
            context["variant_names"] = shape.variant_names
            # A class body defining __eq__ alone leaves its members unhashable
            context["keep_hash"] = (
                "equality" in unit_names and "hash" not in unit_names and "__hash__" not in declaration.existing_members
            )
            if "to_external" in unit_names or "from_external" in unit_names:
                context["external"], context["table"] = self._resolve_mapping(declaration, capabilities, known_enums)

        if unit_names & {"bytes", "from_bytes", "reduce"}:
            layout = capabilities.lookup("layout") or declaration.layout
            if layout is not None and unit_names & {"bytes", "from_bytes"}:
                context["layout_length"] = self._validate_layout(declaration, layout, units)
                context["layout"] = layout

        return context

    def _capability_for(self, units: Sequence[PlannedUnit], unit_name: str) -> str | None:
        for planned in units:
            if planned.unit.name == unit_name:
                return planned.capability
        return None

    def _resolve_rpc_field(
        self,
        declaration: TypeDeclaration,
        capabilities: CapabilitySet,
        option: str,
        default: str,
        unit_name: str,
        units: Sequence[PlannedUnit],
    ) -> tuple[str, str]:
        """Locate a wrapped field of an RPC response; returns (field name, field type)."""
        name = capabilities.lookup(option) or default
        field = declaration.shape.get_field(name)
        if field is None:
            fields = ", ".join(declaration.shape.field_names) or "none"
            raise MissingRequiredField(
                f"no field '{name}' to wrap (fields: {fields}); set the '{option}' option",
                capability=self._capability_for(units, unit_name),
            )
        return field.name, field.type_expr

    def _resolve_rpc_id(self, declaration: TypeDeclaration, capabilities: CapabilitySet) -> tuple[str, str]:
        """Locate the JSON-RPC id; returns (attribute path, return annotation)."""
        options = capabilities["rpc_id_getter"]
        path = options.get("id_field") or self.config.rpc_id_field
        segments = path.split(".")
        if not all(is_identifier(segment) for segment in segments):
            raise MalformedOption(f"id_field must be a dotted attribute path, got {path!r}", capability="rpc_id_getter")

        field = declaration.shape.get_field(segments[0])
        if field is None:
            fields = ", ".join(declaration.shape.field_names) or "none"
            raise MissingRequiredField(
                f"no field '{segments[0]}' to read the id from (fields: {fields}); set the 'id_field' option",
                capability="rpc_id_getter",
            )
        if len(segments) > 1:
            # Only the first segment can be checked; the rest belongs to the field's own type
            logger.debug("%s: id path %s is only checked up to '%s'", declaration.name, path, segments[0])

        id_type = options.get("id_type")
        if id_type is None:
            id_type = field.type_expr if len(segments) == 1 else self.config.rpc_id_type
        return path, id_type

    def _resolve_mapping(
        self,
        declaration: TypeDeclaration,
        capabilities: CapabilitySet,
        known_enums: dict[str, list[str]],
    ) -> tuple[str, list[tuple[str, str]]]:
        """Build and check the variant mapping table; returns (external enum, table)."""
        options = capabilities["enum_original_mapping"]
        external = options.get("external")
        local_variants = declaration.shape.variant_names

        if options.get("variants") is not None:
            table = list(options.get("variants").items())
        elif options.get("rename") is not None:
            rule = options.get("rename")
            table = [(name, rename_variant(name, rule)) for name in local_variants]
        else:
            table = [(name, name) for name in local_variants]

        invalid = [ext for _, ext in table if not is_identifier(ext)]
        if invalid:
            raise MalformedOption(
                f"external variant names must be identifiers: {', '.join(map(repr, invalid))}",
                capability="enum_original_mapping",
            )

        external_variants = options.get("external_variants")
        if external_variants is None:
            external_variants = known_enums.get(external)

        exhaustiveness.check(local_variants, table, external_variants)

        # Emit in declaration order whatever order the table was written in
        position = {name: i for i, name in enumerate(local_variants)}
        return external, sorted(table, key=lambda pair: position[pair[0]])

    def _validate_layout(self, declaration: TypeDeclaration, layout: str, units: Sequence[PlannedUnit]) -> int:
        """Check a struct layout against the shape; returns its size in bytes."""
        capability = self._capability_for(units, "bytes") or self._capability_for(units, "from_bytes")
        try:
            size = struct.calcsize(layout)
            items = struct.unpack(layout, bytes(size))
        except struct.error as e:
            raise MalformedOption(f"invalid binary layout {layout!r}: {e}", capability=capability) from e

        if isinstance(declaration.shape, RecordShape):
            expected = len(declaration.shape.fields)
            if len(items) != expected:
                raise MalformedOption(
                    f"binary layout {layout!r} has {len(items)} item(s) but the record has {expected} field(s)",
                    capability=capability,
                )
        elif len(items) != 1 or not isinstance(items[0], int):
            raise MalformedOption(
                f"binary layout {layout!r} of a variant type must hold exactly one integer",
                capability=capability,
            )
        return size
