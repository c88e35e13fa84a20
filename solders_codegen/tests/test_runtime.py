from enum import Enum
from typing import Any, Literal, Optional, Union

import pytest

from solders_codegen import runtime
from solders_codegen.runtime import DecodeError


class Color(Enum):
    RED = 1
    GREEN = 2


class Wrapped:
    def __init__(self, raw):
        self.raw = raw

    def to_json_value(self):
        return {"raw": self.raw}

    @classmethod
    def from_json_value(cls, value):
        return cls(value["raw"])


class TestEncode:
    def test_primitives_pass_through(self):
        assert runtime.encode_json_value(None) is None
        assert runtime.encode_json_value(True) is True
        assert runtime.encode_json_value(1.5) == 1.5
        assert runtime.encode_json_value("x") == "x"

    def test_containers(self):
        value = {"a": (1, 2), 3: [b"\x01"]}
        assert runtime.encode_json_value(value) == {"a": [1, 2], "3": [[1]]}

    def test_enum_and_nested_types(self):
        assert runtime.encode_json_value(Color.GREEN) == "GREEN"
        assert runtime.encode_json_value([Wrapped(7)]) == [{"raw": 7}]

    def test_unencodable_value(self):
        with pytest.raises(TypeError, match="object has no JSON representation"):
            runtime.encode_json_value(object())

    def test_dumps_keeps_key_order(self):
        assert runtime.dumps({"b": 1, "a": [1, None]}) == '{"b":1,"a":[1,null]}'


class TestDecode:
    @pytest.mark.parametrize(
        "raw, tp, expected",
        [
            (3, int, 3),
            (3, float, 3.0),
            ("s", str, "s"),
            (False, bool, False),
            ([0, 255], bytes, b"\x00\xff"),
            (None, Optional[int], None),
            (4, Optional[int], 4),
            ("a", Union[int, str], "a"),
            ("a", int | str, "a"),
            ([1, 2], list[int], [1, 2]),
            ([1, "a"], tuple[int, str], (1, "a")),
            ([1, 2, 3], tuple[int, ...], (1, 2, 3)),
            ({"k": 1}, dict[str, int], {"k": 1}),
            ([1, 1], set[int], {1}),
            ("memcmp", Literal["memcmp", "dataSize"], "memcmp"),
            ("GREEN", Color, Color.GREEN),
            ({"raw": 1}, Wrapped, None),
            ({"x": [1]}, Any, {"x": [1]}),
        ],
    )
    def test_values(self, raw, tp, expected):
        value = runtime.decode_json_value(raw, tp, "T.f")
        if tp is Wrapped:
            assert value.raw == 1
        else:
            assert value == expected

    @pytest.mark.parametrize(
        "raw, tp, message",
        [
            (True, int, "T.f: expected an integer, got a boolean"),
            ("1", int, "T.f: expected an integer, got a string"),
            (1, bool, "T.f: expected a boolean, got a number"),
            (1, str, "T.f: expected a string, got a number"),
            ([256], bytes, "T.f: expected a list of bytes"),
            (1, type(None), "T.f: expected null, got a number"),
            ({}, list[int], "T.f: expected an array, got an object"),
            ([1, "x"], list[int], r"T.f\[1\]: expected an integer"),
            ([1], tuple[int, int], "T.f: expected 2 items, got 1"),
            ({"k": "v"}, dict[str, int], "T.f.k: expected an integer"),
            (1, Literal[True], "T.f: expected one of"),
            ("BLUE", Color, "T.f: unknown Color variant 'BLUE'"),
            ([], Union[int, str], "T.f: no union member matches an array"),
        ],
    )
    def test_errors(self, raw, tp, message):
        with pytest.raises(DecodeError, match=message):
            runtime.decode_json_value(raw, tp, "T.f")

    def test_literal_does_not_confuse_bool_and_int(self):
        with pytest.raises(DecodeError):
            runtime.decode_json_value(True, Literal[1], "T.f")

    def test_decode_error_is_a_value_error(self):
        assert issubclass(DecodeError, ValueError)


class TestObjectHelpers:
    def test_loads_invalid_json(self):
        with pytest.raises(DecodeError, match="Thing: invalid JSON"):
            runtime.loads("{", "Thing")

    def test_expect_object(self):
        assert runtime.expect_object({"a": 1}, "Thing") == {"a": 1}
        with pytest.raises(DecodeError, match="Thing: expected an object, got an array"):
            runtime.expect_object([], "Thing")

    def test_decode_field(self):
        assert runtime.decode_field({"slot": 5, "extra": 1}, "slot", int, "Ctx") == 5
        with pytest.raises(DecodeError, match="Ctx: missing required field 'slot'"):
            runtime.decode_field({}, "slot", int, "Ctx")

    def test_decode_variant(self):
        names = ("RED", "GREEN")
        assert runtime.decode_variant(Color, "RED", names, "Color") is Color.RED
        with pytest.raises(DecodeError, match="Color: unknown variant tag 1"):
            runtime.decode_variant(Color, 1, names, "Color")


class TestBinaryHelpers:
    def test_pack_and_unpack(self):
        data = runtime.pack_layout("<QI", 1, 2)
        assert data == b"\x01" + b"\x00" * 7 + b"\x02\x00\x00\x00"
        assert runtime.unpack_layout(data, "<QI", "Pair") == (1, 2)

    def test_unpack_wrong_length(self):
        with pytest.raises(DecodeError, match="Pair: expected 12 bytes, got 3"):
            runtime.unpack_layout(b"abc", "<QI", "Pair")

    def test_pack_out_of_range(self):
        with pytest.raises(ValueError, match="cannot encode"):
            runtime.pack_layout("<B", 300)

    def test_variant_at(self):
        assert runtime.variant_at(Color, ("RED", "GREEN"), 1, "Color") is Color.GREEN
        with pytest.raises(DecodeError, match="Color: unknown variant index 2"):
            runtime.variant_at(Color, ("RED", "GREEN"), 2, "Color")
