"""
Capability request nodes.

A RawCapability is what a marker decorator says, as source text tokens.
The parser turns a sequence of them into a CapabilitySet of typed options.
"""

from __future__ import annotations

import ast
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import ConflictingCapabilities, MalformedOption


@dataclass(frozen=True)
class RawCapability:
    """A capability request as written on the declaration.

    Attributes:
        name: Capability name
        args: Positional argument tokens (source text)
        kwargs: (option name, value token) pairs, in source order
        lineno: Line of the marker decorator
    """

    name: str
    args: tuple[str, ...] = ()
    kwargs: tuple[tuple[str, str], ...] = ()
    lineno: int | None = None

    @staticmethod
    def from_call(name: str, call: ast.Call | None, lineno: int | None = None) -> RawCapability:
        """Build a request from a marker decorator, called (``@m(x)``) or bare (``@m``)."""
        if call is None:
            return RawCapability(name=name, lineno=lineno)

        args = []
        for arg in call.args:
            if isinstance(arg, ast.Starred):
                raise MalformedOption("star arguments are not supported in capability options", capability=name, lineno=lineno)
            args.append(ast.unparse(arg))

        kwargs = []
        for keyword in call.keywords:
            if keyword.arg is None:
                raise MalformedOption("** arguments are not supported in capability options", capability=name, lineno=lineno)
            kwargs.append((keyword.arg, ast.unparse(keyword.value)))

        return RawCapability(name=name, args=tuple(args), kwargs=tuple(kwargs), lineno=lineno)

    @staticmethod
    def from_text(text: str) -> RawCapability:
        """
        Build a request from text such as ``"rpc_id_getter(id_field='base.id')"``.

        Raises:
            MalformedOption: If the text is not a name or a call on a name
        """
        try:
            expr = ast.parse(text.strip(), mode="eval").body
        except SyntaxError as e:
            raise MalformedOption(f"cannot parse capability request {text!r}: {e.msg}") from e

        if isinstance(expr, ast.Name):
            return RawCapability.from_call(expr.id, None)
        if isinstance(expr, ast.Call) and isinstance(expr.func, ast.Name):
            return RawCapability.from_call(expr.func.id, expr)
        raise MalformedOption(f"capability request must be a name or a call, got {text!r}")


@dataclass(frozen=True)
class CapabilityOptions:
    """Parsed options of one capability."""

    name: str
    values: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


@dataclass
class CapabilitySet(Mapping[str, CapabilityOptions]):
    """Ordered mapping from capability name to its options."""

    capabilities: dict[str, CapabilityOptions] = field(default_factory=dict)

    def __getitem__(self, name: str) -> CapabilityOptions:
        return self.capabilities[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.capabilities)

    def __len__(self) -> int:
        return len(self.capabilities)

    def lookup(self, key: str, default: Any = None) -> Any:
        """
        Find an option value across all requested capabilities.

        Raises:
            ConflictingCapabilities: If two capabilities set the option to different values
        """
        found: tuple[str, Any] | None = None
        for options in self.capabilities.values():
            if key not in options.values:
                continue
            value = options.values[key]
            if found is not None and found[1] != value:
                raise ConflictingCapabilities(
                    f"option '{key}' is set to {found[1]!r} by '{found[0]}' and to {value!r}",
                    capability=options.name,
                )
            found = (options.name, value)
        return default if found is None else found[1]
