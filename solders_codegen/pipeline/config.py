"""
Configuration for the code generator pipeline.

Holds the documented defaults used when a capability request does not spell
out an option, plus formatter and output handling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate code before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters."""

    # Whether formatting is enabled
    enabled: bool = False

    # Which formatter to run: "ruff" or "black"
    backend: str = "ruff"

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"

    # Whether to use string normalization (convert single quotes to double)
    string_normalization: bool = True

    # Whether to honor magic trailing commas
    magic_trailing_comma: bool = True


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Classes whose markers are left untouched
    ignore_classes: list[str] = field(default_factory=list)

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Module the generated methods import their helpers from
    runtime_module: str = "solders_codegen.runtime"

    # Module holding the marker decorators
    macros_module: str = "solders_codegen.macros"

    # Class attribute holding the struct format of the binary layout
    layout_attribute: str = "LAYOUT"

    # Dotted path of the JSON-RPC id, relative to self
    rpc_id_field: str = "base.id"

    # Return annotation of the id accessor when the path is nested
    rpc_id_type: str = "int"

    # Fields wrapped by RPC response types
    rpc_context_field: str = "_context"
    rpc_value_field: str = "_value"

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "ignore_classes": self.ignore_classes,
            "add_generation_comment": self.add_generation_comment,
            "runtime_module": self.runtime_module,
            "macros_module": self.macros_module,
            "layout_attribute": self.layout_attribute,
            "rpc_id_field": self.rpc_id_field,
            "rpc_id_type": self.rpc_id_type,
            "rpc_context_field": self.rpc_context_field,
            "rpc_value_field": self.rpc_value_field,
            "formatter": {
                "enabled": self.formatter.enabled,
                "backend": self.formatter.backend,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
                "string_normalization": self.formatter.string_normalization,
                "magic_trailing_comma": self.formatter.magic_trailing_comma,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
