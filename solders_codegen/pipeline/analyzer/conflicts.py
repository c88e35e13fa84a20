"""
Conflict detection between generated units and hand-written members.

Generation is treated as set subtraction: the members already defined in
the class body are collected first, then every planned unit is checked
against them. Only optional units are dropped on collision; any other
collision is a duplicate definition.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from ..errors import ConflictingCapabilities, DuplicateDefinition

if TYPE_CHECKING:
    from ..backends.units import PlannedUnit

logger = logging.getLogger(__name__)

# Methods added by @dataclass(order=True)
DATACLASS_ORDERING = ("__lt__", "__le__", "__gt__", "__ge__")


def collect_existing_members(node: ast.ClassDef) -> set[str]:
    """
    Collect every name bound directly in a class body.

    Methods, properties, nested classes, class attributes, annotated fields
    and enum members all count: a generated method may not shadow any of them.

    Args:
        node: The class statement

    Returns:
        Set of member names
    """
    members: set[str] = set()
    for item in node.body:
        if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            members.add(item.name)
        elif isinstance(item, ast.Assign):
            for target in item.targets:
                members.update(bound_names(target))
        elif isinstance(item, ast.AnnAssign) and isinstance(item.target, ast.Name):
            members.add(item.target.id)
    if any(_is_ordered_dataclass(d) for d in node.decorator_list):
        # dataclass(order=True) refuses to run on a class that defines them
        members.update(DATACLASS_ORDERING)
    return members


def _is_ordered_dataclass(decorator: ast.expr) -> bool:
    if not isinstance(decorator, ast.Call):
        return False
    func = decorator.func
    name = func.attr if isinstance(func, ast.Attribute) else getattr(func, "id", None)
    if name != "dataclass":
        return False
    return any(
        kw.arg == "order" and isinstance(kw.value, ast.Constant) and kw.value.value is True
        for kw in decorator.keywords
    )


def bound_names(target: ast.expr) -> Iterable[str]:
    if isinstance(target, ast.Name):
        yield target.id
    elif isinstance(target, (ast.Tuple, ast.List)):
        for element in target.elts:
            yield from bound_names(element)


class ConflictDetector:
    """Filters planned units against the existing member surface."""

    def filter(self, units: Sequence[PlannedUnit], existing_members: Iterable[str]) -> list[PlannedUnit]:
        """
        Drop or reject units that collide with existing members.

        Args:
            units: Planned units, in emission order
            existing_members: Names already defined on the class

        Returns:
            The units to emit

        Raises:
            ConflictingCapabilities: If two units define the same method
            DuplicateDefinition: If a mandatory unit collides with an existing member
        """
        self._check_overlaps(units)

        existing = set(existing_members)
        surviving = []
        for planned in units:
            clash = sorted(set(planned.unit.methods) & existing)
            if not clash:
                surviving.append(planned)
                continue
            if planned.unit.optional:
                logger.debug("Skipping unit %s: %s already defined", planned.unit.name, ", ".join(clash))
                continue
            raise DuplicateDefinition(
                f"{', '.join(clash)} is already defined; remove it or drop the capability",
                members=clash,
                capability=planned.capability,
            )
        return surviving

    def _check_overlaps(self, units: Sequence[PlannedUnit]) -> None:
        """Ensure no two distinct units define the same method."""
        owners: dict[str, PlannedUnit] = {}
        for planned in units:
            for method in planned.unit.methods:
                other = owners.get(method)
                if other is not None and other.unit.name != planned.unit.name:
                    raise ConflictingCapabilities(
                        f"{method} would be generated by both '{other.capability}' and '{planned.capability}'",
                        capability=planned.capability,
                    )
                owners[method] = planned
