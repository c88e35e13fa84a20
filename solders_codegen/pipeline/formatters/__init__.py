"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

from .base import Formatter, FormatterError
from .black_formatter import BlackFormatter
from .ruff_formatter import RuffFormatter

FORMATTERS: dict[str, type[Formatter]] = {
    "ruff": RuffFormatter,
    "black": BlackFormatter,
}


def get_formatter(backend: str) -> Formatter:
    """Create the formatter for a backend name ("ruff" or "black")."""
    try:
        return FORMATTERS[backend]()
    except KeyError:
        raise ValueError(f"Unknown formatter {backend!r}; expected one of {', '.join(FORMATTERS)}") from None


__all__ = [
    "Formatter",
    "FormatterError",
    "RuffFormatter",
    "BlackFormatter",
    "FORMATTERS",
    "get_formatter",
]
