"""
Build-time errors raised by the generation pipeline.

Every error aborts generation for the declaration being processed. The
message identifies the declaration, the capability and, where relevant,
the missing items, so that the annotated source can be fixed without
looking at the engine.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for all generation failures.

    Attributes:
        reason: Human readable description of the failure
        declaration: Name of the offending type declaration, if known
        capability: Name of the capability being processed, if any
        filename: Source file the declaration comes from
        lineno: Line of the declaration in the source file
    """

    def __init__(
        self,
        reason: str,
        declaration: str | None = None,
        capability: str | None = None,
        filename: str | None = None,
        lineno: int | None = None,
    ):
        self.reason = reason
        self.declaration = declaration
        self.capability = capability
        self.filename = filename
        self.lineno = lineno
        super().__init__(reason)

    def locate(self, declaration: str | None = None, filename: str | None = None, lineno: int | None = None) -> GenerationError:
        """Fill in location details that were unknown where the error was raised."""
        if self.declaration is None:
            self.declaration = declaration
        if self.filename is None:
            self.filename = filename
        if self.lineno is None:
            self.lineno = lineno
        return self

    def __str__(self) -> str:
        parts = []
        if self.filename is not None:
            parts.append(f"{self.filename}:{self.lineno}: " if self.lineno is not None else f"{self.filename}: ")
        if self.declaration is not None:
            parts.append(f"{self.declaration}: ")
        if self.capability is not None:
            parts.append(f"[{self.capability}] ")
        parts.append(self.reason)
        return "".join(parts)


class UnsupportedShapeKind(GenerationError):
    """The annotated item is neither a record nor a variant type."""


class UnknownCapability(GenerationError):
    """A marker names a capability that is not in the catalog."""


class MalformedOption(GenerationError):
    """A capability option is missing, unknown or has an invalid value."""


class ConflictingCapabilities(MalformedOption):
    """Two requested capabilities would define the same method differently."""


class MissingRequiredField(GenerationError):
    """A unit needs a field or attribute that the declaration does not have."""


class DuplicateDefinition(GenerationError):
    """A mandatory unit would redefine a member already present on the class."""

    def __init__(self, reason: str, members: list[str] | None = None, **kwargs):
        super().__init__(reason, **kwargs)
        self.members = list(members or [])


class MissingVariants(GenerationError):
    """A variant mapping table does not cover every variant.

    Attributes:
        missing: Every missing variant name, in declaration order
        side: "local" for the annotated enum, "external" for the mapped enum
    """

    def __init__(self, missing: list[str], side: str = "local", **kwargs):
        self.missing = list(missing)
        self.side = side
        owner = "the annotated enum" if side == "local" else "the external enum"
        reason = f"mapping table is missing variants of {owner}: {', '.join(self.missing)}"
        super().__init__(reason, **kwargs)


class OutputError(GenerationError):
    """The generated output is invalid or cannot be written."""
