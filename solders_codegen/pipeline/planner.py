"""
Unit planning.

Maps a parsed capability set onto the generation units to emit for one
declaration. Units are deduplicated (common_methods and richcmp_full both
ask for equality) and returned in the fixed emission order of UNITS.
"""

from __future__ import annotations

import logging

from .backends.units import UNITS, PlannedUnit
from .capabilities.catalog import CAPABILITIES, CapabilitySpec
from .capabilities.nodes import CapabilitySet
from .config import CodeGeneratorConfig
from .errors import MissingRequiredField, UnsupportedShapeKind
from .shape.nodes import TypeDeclaration

logger = logging.getLogger(__name__)


class UnitPlanner:
    """Selects generation units for a declaration."""

    def __init__(self, config: CodeGeneratorConfig | None = None, catalog: dict[str, CapabilitySpec] | None = None):
        self.config = config or CodeGeneratorConfig()
        self.catalog = catalog if catalog is not None else CAPABILITIES

    def plan(self, declaration: TypeDeclaration, capabilities: CapabilitySet) -> list[PlannedUnit]:
        """
        Plan the units of a declaration.

        Args:
            declaration: The introspected declaration
            capabilities: Its parsed capabilities

        Returns:
            Planned units in emission order

        Raises:
            UnsupportedShapeKind: If a capability does not apply to the declaration's shape
            MissingRequiredField: If binary encoding is requested without a layout
        """
        kind = declaration.shape.kind
        requested: dict[str, str] = {}
        for name in capabilities:
            spec = self.catalog[name]
            if kind not in spec.shapes:
                accepted = " or ".join(sorted(s.value for s in spec.shapes))
                raise UnsupportedShapeKind(
                    f"capability applies to {accepted} types, got a {kind.value} type",
                    capability=name,
                )
            for unit_name in spec.units:
                requested.setdefault(unit_name, name)

        layout = capabilities.lookup("layout") or declaration.layout
        binary = capabilities.lookup("binary", False)

        planned = []
        for unit in UNITS.values():
            capability = requested.get(unit.name)
            if capability is None or not unit.applies_to(kind):
                continue
            if unit.needs_layout and layout is None:
                if binary:
                    raise MissingRequiredField(
                        f"binary encoding needs a struct layout; declare {self.config.layout_attribute} or pass layout=",
                        capability=capability,
                    )
                logger.debug("%s: no binary layout, skipping unit %s", declaration.name, unit.name)
                continue
            planned.append(PlannedUnit(unit=unit, capability=capability))
        return planned
