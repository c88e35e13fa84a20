"""
Functional tests: generate test_data/wrappers.py, import the result and
exercise the generated methods.
"""

from __future__ import annotations

import importlib.util
import json
import pickle
import sys
from pathlib import Path

import pytest

from solders_codegen.pipeline import CodeGeneratorConfig, generate_file
from solders_codegen.runtime import DecodeError

WRAPPERS = Path(__file__).parent / "test_data" / "wrappers.py"


@pytest.fixture
def wrappers(tmp_path, monkeypatch):
    output = tmp_path / "generated_wrappers.py"
    generate_file(WRAPPERS, output, CodeGeneratorConfig())

    spec = importlib.util.spec_from_file_location("generated_wrappers", output)
    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, "generated_wrappers", module)
    spec.loader.exec_module(module)
    return module


class TestCommitmentScenario:
    """Enum mapping between Commitment and RpcCommitment."""

    def test_to_external(self, wrappers):
        assert wrappers.Commitment.Confirmed.to_external() is wrappers.RpcCommitment.confirmed

    def test_from_external(self, wrappers):
        assert wrappers.Commitment.from_external(wrappers.RpcCommitment.confirmed) is wrappers.Commitment.Confirmed

    def test_round_trip_every_variant(self, wrappers):
        for variant in wrappers.Commitment:
            assert wrappers.Commitment.from_external(variant.to_external()) is variant

    def test_enum_string_and_json(self, wrappers):
        assert str(wrappers.Commitment.Finalized) == "Finalized"
        assert repr(wrappers.Commitment.Finalized) == "Commitment.Finalized"
        assert wrappers.Commitment.Processed.to_json() == '"Processed"'
        assert wrappers.Commitment.from_json('"Finalized"') is wrappers.Commitment.Finalized

    def test_enum_unknown_tag(self, wrappers):
        with pytest.raises(DecodeError, match="unknown variant tag 'finalized'"):
            wrappers.Commitment.from_json('"finalized"')

    def test_enum_ordering_follows_declaration(self, wrappers):
        assert wrappers.Commitment.Processed < wrappers.Commitment.Confirmed < wrappers.Commitment.Finalized
        assert sorted(wrappers.Commitment, reverse=True)[0] is wrappers.Commitment.Finalized


class TestRecordMethods:
    def test_equality_is_reflexive(self, wrappers):
        key = wrappers.Pubkey(bytes(range(32)))
        assert key == key
        assert hash(key) == hash(key)

    def test_equal_values_hash_equal(self, wrappers):
        a = wrappers.EpochSlot(epoch=1, slot=2)
        b = wrappers.EpochSlot(epoch=1, slot=2)
        assert a == b
        assert hash(a) == hash(b)
        assert a != wrappers.EpochSlot(epoch=1, slot=3)

    def test_different_types_are_not_equal(self, wrappers):
        assert wrappers.EpochSlot(epoch=1, slot=2) != (1, 2)

    def test_ordering_is_lexicographic(self, wrappers):
        assert wrappers.EpochSlot(1, 9) < wrappers.EpochSlot(2, 0)
        assert wrappers.EpochSlot(1, 2) <= wrappers.EpochSlot(1, 2)
        assert wrappers.EpochSlot(2, 0) > wrappers.EpochSlot(1, 9)

    def test_ordering_with_missing_optional_field(self, wrappers):
        Ctx = wrappers.RpcResponseContext
        assert Ctx(1, None) < Ctx(1, "1.18")
        assert Ctx(1, "1.18") > Ctx(1, None)
        assert Ctx(1, None) <= Ctx(1, None)
        assert Ctx(2, None) > Ctx(1, "1.18")
        assert sorted([Ctx(1, "1.18"), Ctx(1, None), Ctx(0, "2.0")]) == [Ctx(0, "2.0"), Ctx(1, None), Ctx(1, "1.18")]

    def test_ordering_against_other_type(self, wrappers):
        with pytest.raises(TypeError):
            wrappers.EpochSlot(1, 2) < 3

    def test_string_forms(self, wrappers):
        ctx = wrappers.RpcResponseContext(slot=5, api_version="1.18")
        assert repr(ctx) == "RpcResponseContext(slot=5, api_version='1.18')"
        assert str(ctx) == "RpcResponseContext(slot=5, api_version=1.18)"

    def test_json_round_trip(self, wrappers):
        request = wrappers.GetSlot(
            base=wrappers.RequestBase(id=3, method="getSlot"),
            commitment=wrappers.Commitment.Finalized,
        )
        raw = request.to_json()
        assert json.loads(raw) == {"base": {"id": 3, "method": "getSlot"}, "commitment": "Finalized"}
        assert wrappers.GetSlot.from_json(raw) == request

    def test_json_optional_field_defaults(self, wrappers):
        request = wrappers.GetSlot.from_json('{"base": {"id": 1, "method": "getSlot"}}')
        assert request.commitment is None
        ctx = wrappers.RpcResponseContext.from_json('{"slot": 7, "extra": true}')
        assert ctx == wrappers.RpcResponseContext(slot=7)

    def test_json_bytes_field(self, wrappers):
        key = wrappers.Pubkey(bytes([1] * 32))
        assert json.loads(key.to_json()) == {"raw": [1] * 32}
        assert wrappers.Pubkey.from_json(key.to_json()) == key

    def test_json_missing_field(self, wrappers):
        with pytest.raises(DecodeError, match="missing required field 'slot'"):
            wrappers.EpochSlot.from_json('{"epoch": 1}')

    def test_json_type_mismatch(self, wrappers):
        with pytest.raises(DecodeError, match="EpochSlot.slot: expected an integer"):
            wrappers.EpochSlot.from_json('{"epoch": 1, "slot": "2"}')

    def test_invalid_json(self, wrappers):
        with pytest.raises(DecodeError, match="invalid JSON"):
            wrappers.EpochSlot.from_json("{")


class TestBinary:
    def test_bytes_round_trip(self, wrappers):
        value = wrappers.EpochSlot(epoch=4, slot=100)
        data = bytes(value)
        assert len(data) == 16
        assert wrappers.EpochSlot.from_bytes(data) == value

    def test_from_bytes_wrong_length(self, wrappers):
        with pytest.raises(DecodeError, match="expected 32 bytes, got 3"):
            wrappers.Pubkey.from_bytes(b"abc")

    def test_hand_written_from_bytes_is_kept(self, wrappers):
        version = wrappers.Version(7)
        # The generated __bytes__ and the hand-written from_bytes coexist
        assert bytes(version) == b"\x07\x00\x00\x00"
        assert wrappers.Version.from_bytes(b"\x07\x00\x00\x00\xff") == version
        assert version == wrappers.Version(7)
        assert hash(version) == hash(wrappers.Version(7))
        assert wrappers.Version.from_json(version.to_json()) == version

    def test_pickle_through_bytes(self, wrappers):
        value = wrappers.EpochSlot(epoch=1, slot=2)
        assert pickle.loads(pickle.dumps(value)) == value

    def test_pickle_through_json(self, wrappers):
        ctx = wrappers.RpcResponseContext(slot=5, api_version="1.18")
        assert pickle.loads(pickle.dumps(ctx)) == ctx


class TestRpcAccessors:
    def test_context_and_value(self, wrappers):
        ctx = wrappers.RpcResponseContext(slot=10)
        resp = wrappers.GetBalanceResp(_context=ctx, _value=500)
        assert resp.context == ctx
        assert resp.value == 500

    def test_response_json_keys(self, wrappers):
        raw = '{"context": {"slot": 10}, "value": 500}'
        resp = wrappers.GetBalanceResp.from_json(raw)
        assert resp.value == 500
        assert json.loads(resp.to_json()) == {"context": {"slot": 10, "api_version": None}, "value": 500}

    def test_id_getter(self, wrappers):
        request = wrappers.GetSlot(base=wrappers.RequestBase(id=42, method="getSlot"))
        assert request.id == 42


class TestComparisonOnly:
    def test_eq_only(self, wrappers):
        assert wrappers.Signature(b"\x01") == wrappers.Signature(b"\x01")
        assert hash(wrappers.Signature(b"\x01")) == hash(wrappers.Signature(b"\x01"))

    def test_ordering_raises(self, wrappers):
        with pytest.raises(TypeError, match="only supports == and !="):
            wrappers.Signature(b"\x01") < wrappers.Signature(b"\x02")


def test_output_keeps_source_text(tmp_path):
    output = tmp_path / "out.py"
    code = generate_file(WRAPPERS, output, CodeGeneratorConfig(add_generation_comment=False))

    assert output.read_text(encoding="utf-8") == code
    assert "@m.common_methods" not in code
    assert "@rpc_id_getter" not in code
    assert '"""Annotated wrapper types used by the generator tests."""' in code
    assert "    @classmethod\n    def from_bytes(cls, data: bytes) -> Version:\n" in code
    assert code.count("def from_bytes") == 3
