"""
Tests for positional string coercion
"""
import pytest

from seam_jsonrpc.errors import CoercionError, ErrorKind, UnknownTypeError
from seam_jsonrpc.rpc.coercion import TYPE_TAGS, coerce, coerce_all
from seam_jsonrpc.rpc.description import ParameterDescription


class TestBit:
    """bit -> bool"""

    @pytest.mark.parametrize("text", ["true", "TRUE", "True", " yes ", "1", "on"])
    def test_truthy(self, text):
        assert coerce(text, "bit") is True

    @pytest.mark.parametrize("text", ["false", "0", "no", "", "maybe"])
    def test_falsy(self, text):
        assert coerce(text, "bit") is False


class TestNum:
    """num -> int, falling back to float"""

    def test_integer(self):
        value = coerce("42", "num")
        assert value == 42
        assert isinstance(value, int)

    def test_negative_integer(self):
        assert coerce("-7", "num") == -7

    def test_float_fallback(self):
        value = coerce("2.5", "num")
        assert value == 2.5
        assert isinstance(value, float)

    def test_exponent(self):
        assert coerce("1e3", "num") == 1000.0

    @pytest.mark.parametrize("text", ["abc", "", "1.2.3", "12abc", "1_000", "1_0.5"])
    def test_malformed(self, text):
        with pytest.raises(CoercionError) as exc_info:
            coerce(text, "num")
        assert exc_info.value.kind is ErrorKind.COERCION
        assert isinstance(exc_info.value, ValueError)

    @pytest.mark.parametrize("text", ["nan", "NaN", "inf", "-inf", "Infinity", "1e999"])
    def test_non_finite_rejected(self, text):
        with pytest.raises(CoercionError):
            coerce(text, "num")

    def test_surrounding_whitespace_allowed(self):
        assert coerce(" 5 ", "num") == 5
        assert coerce(" 0.5\n", "num") == 0.5


class TestOtherTags:
    """str, arr, obj, any, nil"""

    def test_str_is_identity(self):
        assert coerce(" hello ", "str") == " hello "

    def test_arr(self):
        assert coerce("[1, 2, 3]", "arr") == [1, 2, 3]

    def test_obj(self):
        assert coerce('{"a": {"b": null}}', "obj") == {"a": {"b": None}}

    def test_any_scalar(self):
        assert coerce("3.5", "any") == 3.5
        assert coerce('"text"', "any") == "text"

    def test_malformed_json(self):
        with pytest.raises(CoercionError):
            coerce("[1, 2", "arr")

    def test_nil_ignores_input(self):
        assert coerce("anything", "nil") is None

    def test_unknown_tag(self):
        with pytest.raises(UnknownTypeError, match="Bad type: int") as exc_info:
            coerce("1", "int")
        assert exc_info.value.type_tag == "int"
        assert exc_info.value.kind is ErrorKind.UNKNOWN_TYPE

    def test_every_tag_is_supported(self):
        for tag in TYPE_TAGS:
            coerce("1", tag)


def test_coerce_all_uses_declared_types_in_order():
    params = [ParameterDescription("flag", "bit"), ParameterDescription("n", "num"),
              ParameterDescription("s", "str")]
    assert coerce_all(["true", "3", "x"], params) == [True, 3, "x"]
