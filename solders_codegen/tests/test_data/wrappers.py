"""Annotated wrapper types used by the generator tests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import solders_codegen.macros as m
from solders_codegen.macros import rpc_id_getter


class RpcCommitment(Enum):
    processed = 0
    confirmed = 1
    finalized = 2


@m.common_methods
@m.enum_original_mapping(RpcCommitment, rename="lower")
class Commitment(Enum):
    Processed = 0
    Confirmed = 1
    Finalized = 2


@m.common_methods
@dataclass(frozen=True)
class Pubkey:
    LAYOUT = "<32s"

    raw: bytes


@m.common_methods
@dataclass(frozen=True)
class RpcResponseContext:
    slot: int
    api_version: str | None = None


@m.common_methods_rpc_resp
@dataclass(frozen=True)
class GetBalanceResp:
    _context: RpcResponseContext
    _value: int


@m.common_methods(layout="<QQ")
@dataclass(frozen=True)
class EpochSlot:
    epoch: int
    slot: int


@m.common_methods
@dataclass(frozen=True)
class RequestBase:
    id: int
    method: str


@rpc_id_getter
@m.common_methods
@dataclass(frozen=True)
class GetSlot:
    base: RequestBase
    commitment: Commitment | None = None


@m.common_methods(layout="<I")
@dataclass(frozen=True)
class Version:
    number: int

    @classmethod
    def from_bytes(cls, data: bytes) -> Version:
        return cls(int.from_bytes(data[:4], "little"))


@m.richcmp_eq_only
@m.pyhash
@dataclass(eq=False)
class Signature:
    raw: bytes
