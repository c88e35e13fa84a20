"""
Base class for code generation backends.

Defines the interface that language-specific backends implement: render the
planned generation units of one declaration into method source text.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import jinja2

from ..capabilities.nodes import CapabilitySet
from ..config import CodeGeneratorConfig
from ..shape.nodes import TypeDeclaration
from .units import GenerationUnit, PlannedUnit


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            undefined=jinja2.StrictUndefined,
        )
        # Add custom filters
        self.jinja_env.filters["pyrepr"] = self._pyrepr
        self.jinja_env.filters["pytuple"] = self._pytuple
        self.jinja_env.filters["attr_list"] = self._attr_list
        self.jinja_env.filters["attr_tuple"] = self._attr_tuple

    def get_template(self, unit: GenerationUnit) -> jinja2.Template:
        return self.jinja_env.get_template(f"{unit.template}.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def render(
        self,
        declaration: TypeDeclaration,
        capabilities: CapabilitySet,
        units: Sequence[PlannedUnit],
        known_enums: dict[str, list[str]] | None = None,
    ) -> str:
        """
        Render the methods of the planned units.

        Args:
            declaration: The introspected declaration
            capabilities: The parsed capability set
            units: Units that survived conflict filtering, in emission order
            known_enums: Variant names of enums declared in the same module

        Returns:
            Method source text, unindented
        """

    @staticmethod
    def _pyrepr(value: Any) -> str:
        """Render a string as a double-quoted literal."""
        if isinstance(value, str):
            return json.dumps(value)
        return repr(value)

    @classmethod
    def _pytuple(cls, values: Sequence[str]) -> str:
        items = [cls._pyrepr(v) for v in values]
        if len(items) == 1:
            return f"({items[0]},)"
        return "(" + ", ".join(items) + ")"

    @staticmethod
    def _attr_list(fields: Sequence[dict[str, Any]], owner: str) -> str:
        return ", ".join(f"{owner}.{f['name']}" for f in fields)

    @classmethod
    def _attr_tuple(cls, fields: Sequence[dict[str, Any]], owner: str) -> str:
        if len(fields) == 1:
            return f"({owner}.{fields[0]['name']},)"
        return f"({cls._attr_list(fields, owner)})"
