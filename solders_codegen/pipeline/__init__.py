"""
Pipeline - annotation-driven method generator.

This module provides a multi-phase architecture for generating the
standard methods of annotated record and variant types:

1. Phase 1 (Shape): Introspect the annotated class into a record or variant shape
2. Phase 2 (Capabilities): Parse the marker decorators into a capability set
3. Phase 3 (Planner, Analyzer): Select units, filter conflicts, check mapping tables
4. Phase 4 (Backend): Render each unit from its Jinja2 template
5. Phase 5 (Assembler): Splice the methods into the original source text
6. Phase 6 (Formatter, Output): Optional formatting and atomic write
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .errors import (
    ConflictingCapabilities,
    DuplicateDefinition,
    GenerationError,
    MalformedOption,
    MissingRequiredField,
    MissingVariants,
    OutputError,
    UnknownCapability,
    UnsupportedShapeKind,
)
from .generator import PipelineGenerator, generate_file
from .output import AtomicWriter

__all__ = [
    "PipelineGenerator",
    "generate_file",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "GenerationError",
    "UnsupportedShapeKind",
    "UnknownCapability",
    "MalformedOption",
    "ConflictingCapabilities",
    "MissingRequiredField",
    "MissingVariants",
    "DuplicateDefinition",
    "OutputError",
]
