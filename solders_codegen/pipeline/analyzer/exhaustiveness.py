"""
Exhaustiveness checking for variant mapping tables.

A mapping between two enums is total only if the table covers every
variant on both sides exactly once. Gaps are collected and reported in a
single error so the table can be fixed in one pass.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence

from ..errors import MalformedOption, MissingVariants

logger = logging.getLogger(__name__)

CAPABILITY = "enum_original_mapping"


def find_missing_variants(expected: Sequence[str], column: Iterable[str]) -> list[str]:
    """Return the expected names absent from a table column, in expected order."""
    present = set(column)
    return [name for name in expected if name not in present]


def _duplicates(column: Sequence[str]) -> list[str]:
    counts = Counter(column)
    return [name for name in counts if counts[name] > 1]


def check(
    local_variants: Sequence[str],
    table: Sequence[tuple[str, str]],
    external_variants: Sequence[str] | None = None,
) -> None:
    """
    Verify that a mapping table is a bijection between two variant sets.

    Args:
        local_variants: Variants of the annotated enum, in declaration order
        table: (local, external) pairs
        external_variants: Variants of the external enum, or None when unknown

    Raises:
        MissingVariants: If either side has variants the table does not cover
        MalformedOption: If the table repeats a name or names an unknown variant
    """
    local_column = [local for local, _ in table]
    external_column = [external for _, external in table]

    duplicates = _duplicates(local_column)
    if duplicates:
        raise MalformedOption(f"mapping table repeats variants: {', '.join(duplicates)}", capability=CAPABILITY)

    missing = find_missing_variants(local_variants, local_column)
    if missing:
        raise MissingVariants(missing, side="local", capability=CAPABILITY)

    known = set(local_variants)
    unknown = [name for name in local_column if name not in known]
    if unknown:
        raise MalformedOption(f"mapping table names undeclared variants: {', '.join(unknown)}", capability=CAPABILITY)

    duplicates = _duplicates(external_column)
    if duplicates:
        raise MalformedOption(
            f"mapping table maps several variants to: {', '.join(duplicates)}",
            capability=CAPABILITY,
        )

    if external_variants is None:
        logger.debug("External variant set unknown; skipping the external half of the exhaustiveness check")
        return

    missing = find_missing_variants(external_variants, external_column)
    if missing:
        raise MissingVariants(missing, side="external", capability=CAPABILITY)

    known = set(external_variants)
    unknown = [name for name in external_column if name not in known]
    if unknown:
        raise MalformedOption(
            f"mapping table names variants the external enum does not declare: {', '.join(unknown)}",
            capability=CAPABILITY,
        )
