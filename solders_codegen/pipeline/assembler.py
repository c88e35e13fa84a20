"""
Source assembly.

Splices generated methods into the original module text. Only three kinds
of edit are made: marker decorator lines are removed, a one-line class body
is moved onto its own line, and the generated methods are inserted after
the last statement of the class body. Every other line is kept verbatim.
"""

from __future__ import annotations

import ast
import io
from collections.abc import Sequence
from dataclasses import dataclass, field

INDENT = "    "


@dataclass
class ClassEdit:
    """Edits to apply to one annotated class.

    Attributes:
        node: The class statement in the original source
        markers: Marker decorator expressions to remove
        methods: Generated methods, unindented (may be empty)
    """

    node: ast.ClassDef
    markers: list[ast.expr] = field(default_factory=list)
    methods: str = ""


@dataclass
class _LineEdit:
    # Replaces lines[start:end] (0-based); start == end is an insertion
    start: int
    end: int
    rank: int
    lines: list[str]


class SourceAssembler:
    """Applies class edits to a module's source text."""

    def __init__(self, source: str):
        self.source = source
        # Split on the same line breaks as the tokenizer
        self.lines = io.StringIO(source, newline="").readlines()

    def assemble(self, edits: Sequence[ClassEdit]) -> str:
        """
        Apply class edits.

        Args:
            edits: One edit per annotated class, nested classes included

        Returns:
            The edited source text
        """
        line_edits: list[_LineEdit] = []
        for edit in edits:
            line_edits.extend(self._line_edits(edit))
        if not line_edits:
            return self.source

        # Bottom-up, so earlier line numbers stay valid. For insertions at the
        # same line the enclosing class goes first, leaving nested methods above it.
        line_edits.sort(key=lambda e: (-e.start, -e.end, e.rank))

        lines = list(self.lines)
        if lines and not lines[-1].endswith(("\n", "\r")):
            lines[-1] += "\n"
        for line_edit in line_edits:
            lines[line_edit.start : line_edit.end] = line_edit.lines
        return "".join(lines)

    def _line_edits(self, edit: ClassEdit) -> list[_LineEdit]:
        node = edit.node
        rank = node.lineno
        result = []

        for marker in edit.markers:
            result.append(_LineEdit(marker.lineno - 1, marker.end_lineno, rank, []))

        if not edit.methods.strip():
            return result

        first = node.body[0]
        header_line = self.lines[first.lineno - 1]
        inline_body = _split_at(header_line, first.col_offset)[0].strip() != ""

        if inline_body:
            # class Foo: pass -> header and body on separate lines
            class_indent = _leading_whitespace(self.lines[node.lineno - 1])
            body_indent = class_indent + INDENT
            header, body = _split_at(header_line, first.col_offset)
            result.append(
                _LineEdit(first.lineno - 1, first.lineno, rank, [header.rstrip() + "\n", body_indent + body.lstrip()])
            )
        else:
            body_indent = _leading_whitespace(header_line)

        methods = _indent(edit.methods, body_indent)
        result.append(_LineEdit(node.end_lineno, node.end_lineno, rank, ["\n", *methods]))
        return result


def _split_at(line: str, col_offset: int) -> tuple[str, str]:
    """Split a line at an ast column offset (counted in UTF-8 bytes)."""
    encoded = line.encode("utf-8")
    return encoded[:col_offset].decode("utf-8"), encoded[col_offset:].decode("utf-8")


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _indent(text: str, prefix: str) -> list[str]:
    return [prefix + line + "\n" if line.strip() else "\n" for line in text.rstrip("\n").split("\n")]
