"""
Shape introspection.

Phase 1 of the pipeline: classify an annotated statement as a record or a
variant type and extract its fields or members in declaration order,
without interpreting any capability.
"""

from __future__ import annotations

import ast

from ..analyzer.conflicts import bound_names, collect_existing_members
from ..errors import MalformedOption, UnsupportedShapeKind
from .nodes import FieldDef, RecordShape, TypeDeclaration, VariantDef, VariantShape


class ShapeIntrospector:
    """Builds a TypeDeclaration from a class statement."""

    # Bases that make a class a variant type
    ENUM_BASES = {"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag", "ReprEnum"}

    # Bases whose instances cannot carry generated methods
    UNSUPPORTED_BASES = {"TypedDict", "NamedTuple", "Protocol"}

    # Annotations that do not declare instance fields
    NON_FIELD_ANNOTATIONS = {"ClassVar", "InitVar"}

    def __init__(self, layout_attribute: str = "LAYOUT"):
        self.layout_attribute = layout_attribute

    def introspect(self, node: ast.stmt) -> TypeDeclaration:
        """
        Introspect an annotated statement.

        Args:
            node: The statement carrying the capability markers

        Returns:
            TypeDeclaration with a record or variant shape

        Raises:
            UnsupportedShapeKind: If the statement is not a record or variant class
        """
        if not isinstance(node, ast.ClassDef):
            name = getattr(node, "name", type(node).__name__)
            kind = "function" if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) else "statement"
            raise UnsupportedShapeKind(
                f"only classes can be annotated, got {kind} '{name}'",
                declaration=name,
                lineno=getattr(node, "lineno", None),
            )

        base_names = [self._base_name(base) for base in node.bases]
        unsupported = [name for name in base_names if name in self.UNSUPPORTED_BASES]
        if unsupported:
            raise UnsupportedShapeKind(
                f"classes deriving {unsupported[0]} are neither records nor variants",
                declaration=node.name,
                lineno=node.lineno,
            )

        if self.is_enum(node):
            shape = VariantShape(variants=tuple(self._extract_variants(node)))
            layout = None
        else:
            shape = RecordShape(fields=tuple(self._extract_fields(node)))
            layout = self._extract_layout(node)

        return TypeDeclaration(
            name=node.name,
            shape=shape,
            existing_members=frozenset(collect_existing_members(node)),
            layout=layout,
            lineno=node.lineno,
        )

    def is_enum(self, node: ast.ClassDef) -> bool:
        """Check whether a class statement declares a variant type."""
        return any(self._base_name(base) in self.ENUM_BASES for base in node.bases)

    def enum_variants(self, node: ast.ClassDef) -> list[str]:
        """Variant names of an enum class statement, in declaration order."""
        return [variant.name for variant in self._extract_variants(node)]

    def _base_name(self, expr: ast.expr) -> str:
        """Get the last component of a base class expression (e.g. enum.Enum -> Enum)."""
        if isinstance(expr, ast.Name):
            return expr.id
        if isinstance(expr, ast.Attribute):
            return expr.attr
        if isinstance(expr, ast.Subscript):
            # Generic[T], Protocol[T]
            return self._base_name(expr.value)
        return ""

    def _extract_fields(self, node: ast.ClassDef) -> list[FieldDef]:
        """Extract annotated instance fields in declaration order."""
        fields = []
        for item in node.body:
            if not isinstance(item, ast.AnnAssign) or not isinstance(item.target, ast.Name):
                continue
            if item.target.id == self.layout_attribute:
                continue
            if self._base_name(self._unwrap_annotation(item.annotation)) in self.NON_FIELD_ANNOTATIONS:
                continue
            fields.append(
                FieldDef(
                    name=item.target.id,
                    type_expr=self._type_expression(item.annotation),
                    has_default=item.value is not None,
                )
            )
        return fields

    def _extract_variants(self, node: ast.ClassDef) -> list[VariantDef]:
        """Extract enum members (NAME = value or unpacked A, B = 1, 2 assignments) in declaration order."""
        variants = []
        for item in node.body:
            if not isinstance(item, ast.Assign) or len(item.targets) != 1:
                continue
            target = item.targets[0]
            if isinstance(target, ast.Name):
                pairs = [(target.id, item.value)]
            elif isinstance(target, ast.Tuple):
                pairs = self._unpacked_members(target, item.value)
            else:
                continue
            variants.extend(
                VariantDef(name=name, payload=ast.unparse(value))
                for name, value in pairs
                if not self._is_reserved_enum_name(name)
            )
        return variants

    def _unpacked_members(self, target: ast.Tuple, value: ast.expr) -> list[tuple[str, ast.expr]]:
        """Pair the names of `A, B = 1, 2` with their values; the whole value is kept when it cannot be split."""
        names = list(bound_names(target))
        flat = all(isinstance(e, ast.Name) for e in target.elts)
        if flat and isinstance(value, ast.Tuple) and len(value.elts) == len(names):
            return list(zip(names, value.elts))
        return [(name, value) for name in names]

    def _extract_layout(self, node: ast.ClassDef) -> str | None:
        """Find the binary layout class attribute, if declared."""
        for item in node.body:
            if isinstance(item, ast.Assign):
                targets = item.targets
            elif isinstance(item, ast.AnnAssign) and item.value is not None:
                targets = [item.target]
            else:
                continue
            if not any(isinstance(t, ast.Name) and t.id == self.layout_attribute for t in targets):
                continue
            if isinstance(item.value, ast.Constant) and isinstance(item.value.value, str):
                return item.value.value
            raise MalformedOption(
                f"{self.layout_attribute} must be a string literal with a struct format",
                declaration=node.name,
                lineno=item.lineno,
            )
        return None

    def _unwrap_annotation(self, annotation: ast.expr) -> ast.expr:
        """Strip a string forward reference so the annotation can be inspected."""
        if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
            try:
                return ast.parse(annotation.value, mode="eval").body
            except SyntaxError:
                return annotation
        return annotation

    def _type_expression(self, annotation: ast.expr) -> str:
        """Render an annotation as a runtime expression."""
        return ast.unparse(self._unwrap_annotation(annotation))

    @staticmethod
    def _is_reserved_enum_name(name: str) -> bool:
        """Dunder and sunder names (e.g. _ignore_) are never enum members."""
        if name.startswith("__") and name.endswith("__"):
            return True
        return len(name) > 2 and name.startswith("_") and name.endswith("_")
