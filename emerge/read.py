"""
emerge.read — Safe traversal.

Reads never raise on a missing key, a wrong container type or an odd
key: they degrade to None for the rest of the walk.  Only a malformed
path argument (not a list or tuple) is an error.
"""

from collections.abc import Mapping
from typing import Any, Sequence

from .values import is_finite, is_integer, is_key_sequence, to_key, validate


def get(value: Any, key: Any) -> Any:
    """
    Value under `key`, or None.

        get({"one": 1}, "one")  → 1
        get(None, "one")        → None
        get([10, 20], 1)        → 20
        get([10, 20], -1)       → None   (no wrap-around)
        get({"0": "x"}, 0)      → "x"    (numeric keys match their string form)
    """
    if value is None:
        return None

    if isinstance(value, Mapping):
        try:
            if key in value:
                return value[key]
        except TypeError:
            # Unhashable key
            return None
        if is_finite(key) and not isinstance(key, str):
            return value.get(to_key(key))
        return None

    if isinstance(value, (list, tuple)):
        if is_integer(key) and 0 <= key < len(value):
            return value[int(key)]
        return None

    return None


def get_in(value: Any, path: Sequence) -> Any:
    """Walk `path` from `value` with `get`."""
    validate(path, is_key_sequence)
    for key in path:
        value = get(value, key)
    return value


def scan(value: Any, *keys: Any) -> Any:
    """Like get_in, with the keys as arguments: scan(tree, "a", 0, "b")."""
    for key in keys:
        value = get(value, key)
    return value


def has(value: Any, key: Any) -> bool:
    """
    True when `value` holds `key`: an own key of a mapping (numeric keys
    matched by their string form), or an in-bounds index of a list.
    """
    if isinstance(value, Mapping):
        try:
            if key in value:
                return True
        except TypeError:
            return False
        return is_finite(key) and to_key(key) in value

    if isinstance(value, (list, tuple)):
        return is_integer(key) and 0 <= key < len(value)

    return False


def has_in(value: Any, path: Sequence) -> bool:
    """True when every key along `path` exists."""
    validate(path, is_key_sequence)
    for key in path:
        if not has(value, key):
            return False
        value = get(value, key)
    return True
