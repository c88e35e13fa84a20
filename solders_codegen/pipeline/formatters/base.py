"""
Base class for code formatters.

Formatting is a best-effort post-processing step: generated code is valid
before it reaches a formatter, so a missing or failing tool leaves the
output unformatted instead of aborting generation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..config import FormatterConfig

logger = logging.getLogger(__name__)


class FormatterError(Exception):
    """Raised by a formatter backend that could not format its input."""


class Formatter(ABC):
    """Abstract base class for code formatters."""

    # Tool name used in log messages
    name: str = ""

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format the given code.

        Args:
            code: The source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or the input unchanged if the tool is missing or fails
        """
        if not self.is_available():
            logger.warning("%s is not available; output left unformatted", self.name)
            return code
        try:
            return self._format(code, config)
        except FormatterError as e:
            logger.warning("%s could not format the output: %s", self.name, e)
            return code

    @abstractmethod
    def _format(self, code: str, config: FormatterConfig) -> str:
        """Run the tool; raise FormatterError on failure."""

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the formatter is available (dependencies installed).

        Returns:
            True if the formatter can be used
        """
