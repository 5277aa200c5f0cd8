"""
Test suite for emerge — value kinds, validation, equality and reads.

    §1  Value kinds
    §2  Key / path validation
    §3  Identity (is_)
    §4  Structural equality (equal, equal_by)
    §5  Reading (get, get_in, scan, has, has_in)
    §6  Configuration
"""

import sys
import os
from collections import OrderedDict
from enum import Enum

import pytest

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from emerge import config
from emerge.equality import equal, equal_by, is_
from emerge.errors import BoundsError, EmergeError, NotCallableError, ValidationError
from emerge.read import get, get_in, has, has_in, scan
from emerge.values import (
    Kind, kind_of, is_key, is_path, is_primitive, is_symbol, to_key, to_dict, to_list,
    validate_bounds, validate_key, validate_path,
)


NAN = float("nan")


class Color(Enum):
    RED = 1


# ═══════════════════════════════════════════════════════════════════
#  §1  VALUE KINDS
# ═══════════════════════════════════════════════════════════════════

class TestKinds:

    @pytest.mark.parametrize("value,kind", [
        (None, Kind.PRIMITIVE),
        (True, Kind.PRIMITIVE),
        (0, Kind.PRIMITIVE),
        (1.5, Kind.PRIMITIVE),
        (NAN, Kind.PRIMITIVE),
        ("one", Kind.PRIMITIVE),
        (b"one", Kind.PRIMITIVE),
        ([], Kind.LIST),
        ([1, [2]], Kind.LIST),
        ({}, Kind.DICT),
        ({"one": 1}, Kind.DICT),
        (OrderedDict(one=1), Kind.OPAQUE),
        ((1, 2), Kind.OPAQUE),
        ({1, 2}, Kind.OPAQUE),
        (len, Kind.OPAQUE),
        (object(), Kind.OPAQUE),
        (Color.RED, Kind.OPAQUE),
    ])
    def test_kind_of(self, value, kind):
        assert kind_of(value) is kind

    def test_list_lookalike_dict_is_a_dict(self):
        """Kind comes from the runtime type, never from content shape."""
        assert kind_of({"0": "x", "length": 1}) is Kind.DICT

    @pytest.mark.parametrize("value", [None, False, 0, 1.5, 1j, "", b""])
    def test_is_primitive(self, value):
        assert is_primitive(value)

    @pytest.mark.parametrize("value", [[], {}, (), object(), OrderedDict()])
    def test_is_not_primitive(self, value):
        assert not is_primitive(value)

    def test_to_dict(self):
        src = {"one": 1}
        assert to_dict(src) is src
        assert to_dict(None) == {}
        assert to_dict([1]) == {}
        assert to_dict(OrderedDict(one=1)) == {}

    def test_to_list(self):
        src = [1]
        assert to_list(src) is src
        assert to_list(None) == []
        with pytest.raises(ValidationError):
            to_list({})
        with pytest.raises(ValidationError):
            to_list("not list")


# ═══════════════════════════════════════════════════════════════════
#  §2  KEY / PATH VALIDATION
# ═══════════════════════════════════════════════════════════════════

class TestValidation:

    @pytest.mark.parametrize("key", ["", "one", 0, -1, 1.5, 123.456])
    def test_valid_keys(self, key):
        assert is_key(key)
        validate_key(key)

    @pytest.mark.parametrize("key", [
        NAN, float("inf"), float("-inf"), True, False, None, {}, [],
    ])
    def test_invalid_keys(self, key):
        assert not is_key(key)
        with pytest.raises(ValidationError, match="satisfy is_key"):
            validate_key(key)

    @pytest.mark.parametrize("key", [object(), Color.RED, ("one",), frozenset(), len])
    def test_symbol_keys_rejected(self, key):
        assert is_symbol(key)
        with pytest.raises(ValidationError, match="unexpected symbol key"):
            validate_key(key)

    def test_validation_error_carries_value(self):
        with pytest.raises(ValidationError) as info:
            validate_key(True)
        assert info.value.value is True
        assert info.value.test == "is_key"
        assert isinstance(info.value, ValueError)
        assert isinstance(info.value, EmergeError)

    @pytest.mark.parametrize("path", [[], ["one"], ["one", 0, 1.5], ("one", 2)])
    def test_valid_paths(self, path):
        assert is_path(path)
        validate_path(path)

    @pytest.mark.parametrize("path", [
        None, "one", {}, 0, ["one", {}], [float("inf")], [True], [None], [[]],
    ])
    def test_invalid_paths(self, path):
        assert not is_path(path)
        with pytest.raises(ValidationError):
            validate_path(path)

    def test_symbol_in_path(self):
        with pytest.raises(ValidationError, match="unexpected symbol key"):
            validate_path(["one", object()])

    @pytest.mark.parametrize("key,expected", [
        ("one", "one"),
        (0, "0"),
        (-1, "-1"),
        (1.0, "1"),
        (-0.0, "0"),
        (123.456, "123.456"),
    ])
    def test_to_key(self, key, expected):
        assert to_key(key) == expected


class TestBounds:

    @pytest.mark.parametrize("lst,index", [([], 0), (["one"], 0), (["one"], 1), (["one"], 1.0)])
    def test_in_bounds(self, lst, index):
        assert validate_bounds(lst, index) == int(index)

    def test_out_of_bounds(self):
        with pytest.raises(BoundsError) as info:
            validate_bounds(["one"], 2)
        assert info.value.index == 2
        assert info.value.length == 1
        assert "index 2 out of bounds for length 1" in str(info.value)
        assert isinstance(info.value, IndexError)

    @pytest.mark.parametrize("index", [-1, 0.1, "0", None, True, NAN])
    def test_invalid_index(self, index):
        with pytest.raises(ValidationError, match="satisfy is_natural"):
            validate_bounds([], index)


# ═══════════════════════════════════════════════════════════════════
#  §3  IDENTITY
# ═══════════════════════════════════════════════════════════════════

class TestIdentity:

    @pytest.mark.parametrize("one,other", [
        (None, None),
        (1, 1),
        (1, 1.0),
        (0.0, -0.0),
        (NAN, float("nan")),
        ("one", "".join(["o", "ne"])),
        (b"one", b"one"),
        (True, True),
    ])
    def test_same(self, one, other):
        assert is_(one, other)
        assert is_(other, one)

    @pytest.mark.parametrize("one,other", [
        (None, 0),
        (True, 1),
        (False, 0),
        (1, "1"),
        ("one", b"one"),
        (NAN, 0),
        ([], []),
        ({}, {}),
        ([1], [1]),
        (object(), object()),
    ])
    def test_different(self, one, other):
        assert not is_(one, other)
        assert not is_(other, one)

    def test_same_reference(self):
        value = {"one": [1]}
        assert is_(value, value)


# ═══════════════════════════════════════════════════════════════════
#  §4  STRUCTURAL EQUALITY
# ═══════════════════════════════════════════════════════════════════

class TestEquality:

    @pytest.mark.parametrize("one,other", [
        ([], []),
        ({}, {}),
        ([1, [2, [3]]], [1, [2, [3]]]),
        ({"one": {"two": [NAN]}}, {"one": {"two": [float("nan")]}}),
        ({"one": 1, "two": 2}, {"two": 2, "one": 1}),
        ({"one": None}, {"one": None}),
        (NAN, NAN),
    ])
    def test_equal(self, one, other):
        assert equal(one, other)
        assert equal(other, one)

    @pytest.mark.parametrize("one,other", [
        ({}, []),
        ([1], [1, 2]),
        ({"one": 1}, {"two": 1}),
        ({"one": 1}, {"one": 1, "two": 2}),
        ({"one": None}, {}),
        ([{"one": 1}], [{"one": 2}]),
        (OrderedDict(one=1), OrderedDict(one=1)),
        (tuple([1, 2]), tuple([1, 2])),
        ({"one": tuple([1])}, {"one": tuple([1])}),
    ])
    def test_not_equal(self, one, other):
        assert not equal(one, other)
        assert not equal(other, one)

    def test_opaque_by_identity(self):
        shared = object()
        assert equal({"one": [shared]}, {"one": [shared]})

    def test_reflexive_symmetric_transitive(self):
        a = {"one": [1, {"two": NAN}], "three": "x"}
        b = {"one": [1, {"two": NAN}], "three": "x"}
        c = {"three": "x", "one": [1.0, {"two": float("nan")}]}
        assert equal(a, a)
        assert equal(a, b) and equal(b, a)
        assert equal(a, b) and equal(b, c) and equal(a, c)

    def test_equal_by_is_shallow_with_is(self):
        inner = [1]
        assert equal_by([inner, 2], [inner, 2.0], is_)
        assert not equal_by([[1], 2], [[1], 2], is_)

    def test_equal_by_custom_compare(self):
        def close(a, b):
            return abs(a - b) < 0.1
        assert equal_by([1.0, 2.0], [1.05, 1.95], close)
        assert equal_by({"x": 1.0}, {"x": 1.01}, close)
        assert not equal_by([1.0], [1.5], close)

    def test_keys_checked_before_values(self):
        """A key mismatch is detected without comparing any values."""
        calls = []

        def record(a, b):
            calls.append((a, b))
            return True

        assert not equal_by({"one": 1, "two": 2}, {"one": 1, "three": 2}, record)
        assert calls == []

    def test_rejects_non_callable(self):
        with pytest.raises(NotCallableError):
            equal_by(1, 1, "not a function")
        with pytest.raises(TypeError):
            equal_by([], [], None)


# ═══════════════════════════════════════════════════════════════════
#  §5  READING
# ═══════════════════════════════════════════════════════════════════

TREE = {
    "one": "one",
    "two": {"three": {"four": [4, 5]}},
}


class TestGet:

    def test_get_scenario(self):
        assert get({"one": 1}, "one") == 1
        assert get(None, "one") is None

    @pytest.mark.parametrize("value,key,expected", [
        ({"one": 1}, "two", None),
        ([10, 20], 1, 20),
        ([10, 20], 1.0, 20),
        ([10, 20], 2, None),
        ([10, 20], -1, None),
        ([10, 20], "1", None),
        ((10, 20), 0, 10),
        ({"0": "x"}, 0, "x"),
        ({"1": "x"}, 1.0, "x"),
        ("one", 0, None),
        (42, "real", None),
        ({"one": 1}, ["unhashable"], None),
    ])
    def test_get(self, value, key, expected):
        assert get(value, key) == expected

    def test_get_symbol_key(self):
        sym = object()
        assert get({"one": 1}, sym) is None
        assert get({sym: 1}, sym) == 1

    def test_get_in(self):
        assert get_in(TREE, []) is TREE
        assert get_in(TREE, ["two"]) is TREE["two"]
        assert get_in(TREE, ("two", "three", "four")) is TREE["two"]["three"]["four"]
        assert get_in(TREE, ["two", "three", "four", 1]) == 5
        assert get_in(None, ["one"]) is None
        assert get_in(TREE, ["missing", "deeper"]) is None
        assert get_in(TREE, [object(), "two"]) is None

    @pytest.mark.parametrize("path", [None, "one", {}, 1])
    def test_get_in_rejects_non_paths(self, path):
        with pytest.raises(ValidationError):
            get_in(TREE, path)

    def test_scan(self):
        assert scan(TREE) is TREE
        assert scan(None, "one") is None
        assert scan(TREE, "two") is TREE["two"]
        assert scan(TREE, "two", "three", "four") is TREE["two"]["three"]["four"]
        assert scan(TREE, "one", "length") is None


class TestHas:

    @pytest.mark.parametrize("value,key,expected", [
        ({"one": None}, "one", True),
        ({"one": 1}, "two", False),
        ({"0": 1}, 0, True),
        ([None], 0, True),
        ([1], 1, False),
        ([1], -1, False),
        (None, "one", False),
        ("one", 0, False),
    ])
    def test_has(self, value, key, expected):
        assert has(value, key) is expected

    def test_has_in(self):
        assert has_in(TREE, [])
        assert has_in(TREE, ["two", "three", "four", 0])
        assert not has_in(TREE, ["two", "three", "four", 2])
        assert not has_in(TREE, ["one", "two"])
        assert not has_in(None, ["one"])


# ═══════════════════════════════════════════════════════════════════
#  §6  CONFIGURATION
# ═══════════════════════════════════════════════════════════════════

class TestConfig:

    def test_defaults(self):
        settings = config.Settings()
        if "EMERGE_LIST_KEY_POLICY" not in os.environ:
            assert settings.LIST_KEY_POLICY == "dict"
            assert not settings.strict_list_keys

    def test_strict_policy(self):
        settings = config.Settings()
        settings.LIST_KEY_POLICY = "error"
        assert settings.strict_list_keys

    def test_unknown_policy(self):
        settings = config.Settings()
        settings.LIST_KEY_POLICY = "bogus"
        with pytest.raises(ValueError, match="EMERGE_LIST_KEY_POLICY"):
            settings.strict_list_keys

    @pytest.mark.parametrize("raw,expected", [
        ("1", True), ("true", True), ("Yes", True), ("on", True),
        ("0", False), ("false", False), ("", False),
    ])
    def test_env_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("EMERGE_TEST_FLAG", raw)
        assert config._env_flag("EMERGE_TEST_FLAG", not expected) is expected

    def test_env_flag_default(self, monkeypatch):
        monkeypatch.delenv("EMERGE_TEST_FLAG", raising=False)
        assert config._env_flag("EMERGE_TEST_FLAG", True) is True
