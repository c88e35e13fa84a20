"""
Marker decorators that request generated methods.

The generator recognizes these markers in source code and replaces them
with the generated methods. At runtime they are identity decorators, so
annotated modules stay importable before generation::

    from solders_codegen import macros

    @macros.common_methods(layout="<32s")
    @dataclass
    class Pubkey:
        raw: bytes
"""

from __future__ import annotations

from typing import Any


class _Marker:
    """A capability marker usable bare (``@marker``) or called (``@marker(...)``)."""

    def __init__(self, name: str, takes_positional: bool = False):
        self.__name__ = name
        self._takes_positional = takes_positional

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if not self._takes_positional and len(args) == 1 and not kwargs and isinstance(args[0], type):
            return args[0]
        return _identity

    def __repr__(self) -> str:
        return f"<capability marker {self.__name__}>"


def _identity(cls: type) -> type:
    return cls


common_methods = _Marker("common_methods")
common_methods_rpc_resp = _Marker("common_methods_rpc_resp")
common_methods_rpc_resp_no_context = _Marker("common_methods_rpc_resp_no_context")
rpc_id_getter = _Marker("rpc_id_getter")
enum_original_mapping = _Marker("enum_original_mapping", takes_positional=True)
pyhash = _Marker("pyhash")
richcmp_full = _Marker("richcmp_full")
richcmp_eq_only = _Marker("richcmp_eq_only")

__all__ = [
    "common_methods",
    "common_methods_rpc_resp",
    "common_methods_rpc_resp_no_context",
    "rpc_id_getter",
    "enum_original_mapping",
    "pyhash",
    "richcmp_full",
    "richcmp_eq_only",
]
