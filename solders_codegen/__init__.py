"""Solders Codegen

Build-time generation of the standard methods of protocol wrapper types:
equality, hashing, ordering, string conversion, JSON and binary encoding,
enum variant mappings and RPC accessors, requested with marker decorators.
"""

__version__ = "1.0.0"

from .pipeline import (  # noqa: E402
    AtomicWriter,
    CodeGeneratorConfig,
    FormatterConfig,
    GenerationError,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    generate_file,
)

__all__ = [
    "PipelineGenerator",
    "generate_file",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "GenerationError",
    "AtomicWriter",
]
