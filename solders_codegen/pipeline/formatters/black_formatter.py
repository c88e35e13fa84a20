"""
Black formatter for Python code.
"""

from __future__ import annotations

from ..config import FormatterConfig
from .base import Formatter, FormatterError


class BlackFormatter(Formatter):
    """Formatter using black as a library."""

    name = "black"

    def __init__(self):
        self._black = None
        self._available = None

    def is_available(self) -> bool:
        """Check if black is installed."""
        if self._available is None:
            try:
                import black

                self._black = black
                self._available = True
            except ImportError:
                self._available = False
        return self._available

    def build_mode(self, config: FormatterConfig):
        """Translate the configuration into a black.Mode."""
        black = self._black

        target_versions = set()
        if config.target_version:
            version = getattr(black.TargetVersion, config.target_version.upper(), None)
            if version is None:
                # Newer than this black release knows about
                version = max(black.TargetVersion, key=lambda v: v.value)
            target_versions.add(version)

        return black.Mode(
            target_versions=target_versions,
            line_length=config.line_length,
            string_normalization=config.string_normalization,
            magic_trailing_comma=config.magic_trailing_comma,
        )

    def _format(self, code: str, config: FormatterConfig) -> str:
        try:
            return self._black.format_str(code, mode=self.build_mode(config))
        except self._black.InvalidInput as e:
            raise FormatterError(str(e)) from e
