"""
Capability request parser.

Phase 2 of the pipeline: turn the raw marker tokens of a declaration into
a CapabilitySet, validating every option against the catalog. Pure: no
side effects and no knowledge of the declaration's shape.
"""

from __future__ import annotations

import ast
from collections.abc import Sequence
from typing import Any

from ..errors import MalformedOption, UnknownCapability
from .catalog import CAPABILITIES, CapabilitySpec, OptionKind, OptionSpec
from .nodes import CapabilityOptions, CapabilitySet, RawCapability


class CapabilityParser:
    """Parses marker arguments into a CapabilitySet."""

    def __init__(self, catalog: dict[str, CapabilitySpec] | None = None):
        self.catalog = catalog if catalog is not None else CAPABILITIES

    def parse(self, raw_args: Sequence[RawCapability]) -> CapabilitySet:
        """
        Parse capability requests.

        Args:
            raw_args: Requests in decorator order

        Returns:
            CapabilitySet keyed by capability name, in request order

        Raises:
            UnknownCapability: If a request names a capability outside the catalog
            MalformedOption: If an option is missing, unknown or invalid
        """
        capabilities: dict[str, CapabilityOptions] = {}
        for raw in raw_args:
            spec = self.catalog.get(raw.name)
            if spec is None:
                known = ", ".join(sorted(self.catalog))
                raise UnknownCapability(f"unknown capability '{raw.name}' (known: {known})", lineno=raw.lineno)
            if raw.name in capabilities:
                raise MalformedOption("capability requested more than once", capability=raw.name, lineno=raw.lineno)
            try:
                capabilities[raw.name] = CapabilityOptions(name=raw.name, values=self._parse_options(spec, raw))
            except MalformedOption as e:
                e.capability = e.capability or raw.name
                e.lineno = e.lineno or raw.lineno
                raise
        return CapabilitySet(capabilities=capabilities)

    def _parse_options(self, spec: CapabilitySpec, raw: RawCapability) -> dict[str, Any]:
        """Bind positional and keyword tokens to the capability's options."""
        tokens: dict[str, str] = {}

        positional = spec.positional_options
        if len(raw.args) > len(positional):
            raise MalformedOption(f"takes {len(positional)} positional argument(s) but {len(raw.args)} were given")
        for option, token in zip(positional, raw.args):
            tokens[option.name] = token

        for key, token in raw.kwargs:
            if spec.option(key) is None:
                accepted = ", ".join(o.name for o in spec.options) or "none"
                raise MalformedOption(f"unknown option '{key}' (accepted: {accepted})")
            if key in tokens:
                raise MalformedOption(f"option '{key}' given more than once")
            tokens[key] = token

        values: dict[str, Any] = {}
        for option in spec.options:
            if option.name in tokens:
                values[option.name] = self._coerce(option, tokens[option.name])
            elif option.required:
                raise MalformedOption(f"missing required option '{option.name}'")

        if "variants" in values and "rename" in values:
            raise MalformedOption("'variants' and 'rename' cannot be combined")

        return values

    def _coerce(self, option: OptionSpec, token: str) -> Any:
        """Interpret one option token according to its kind."""
        if option.kind == OptionKind.REFERENCE:
            return self._coerce_reference(option, token)

        try:
            value = ast.literal_eval(token)
        except (ValueError, SyntaxError, TypeError) as e:
            raise MalformedOption(f"option '{option.name}' must be a literal, got {token}") from e

        if option.kind == OptionKind.STRING:
            if not isinstance(value, str):
                raise MalformedOption(f"option '{option.name}' must be a string, got {token}")
            if option.choices and value not in option.choices:
                raise MalformedOption(f"option '{option.name}' must be one of {', '.join(option.choices)}, got {token}")
        elif option.kind == OptionKind.BOOLEAN:
            if not isinstance(value, bool):
                raise MalformedOption(f"option '{option.name}' must be True or False, got {token}")
        elif option.kind == OptionKind.STRING_MAP:
            # literal_eval keeps only the last of repeated keys, so count them in the token itself
            self._reject_repeated_keys(option, token)
            if not isinstance(value, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
                raise MalformedOption(f"option '{option.name}' must map strings to strings, got {token}")
        elif option.kind == OptionKind.STRING_LIST:
            if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
                raise MalformedOption(f"option '{option.name}' must be a list of strings, got {token}")
            value = list(value)
        return value

    def _coerce_reference(self, option: OptionSpec, token: str) -> str:
        """Keep a type reference as source text; a string literal names the type too."""
        try:
            expr = ast.parse(token, mode="eval").body
        except SyntaxError as e:
            raise MalformedOption(f"option '{option.name}' must name a type, got {token}") from e
        if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
            try:
                expr = ast.parse(expr.value, mode="eval").body
            except SyntaxError as e:
                raise MalformedOption(f"option '{option.name}' must name a type, got {token}") from e
        if not self._is_dotted_name(expr):
            raise MalformedOption(f"option '{option.name}' must name a type, got {token}")
        return ast.unparse(expr)

    def _is_dotted_name(self, expr: ast.expr) -> bool:
        if isinstance(expr, ast.Name):
            return True
        return isinstance(expr, ast.Attribute) and self._is_dotted_name(expr.value)

    def _reject_repeated_keys(self, option: OptionSpec, token: str) -> None:
        try:
            expr = ast.parse(token, mode="eval").body
        except SyntaxError:
            return
        if not isinstance(expr, ast.Dict):
            return
        keys = [k.value for k in expr.keys if isinstance(k, ast.Constant)]
        repeated = sorted({k for k in keys if keys.count(k) > 1}, key=str)
        if repeated:
            raise MalformedOption(f"option '{option.name}' repeats keys: {', '.join(map(str, repeated))}")
