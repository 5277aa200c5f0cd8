"""
emerge.values — Value kinds and the key/path validator.

VALUE KINDS
═══════════

Every Python value falls into exactly one of four kinds:

    PRIMITIVE   None, bool, int, float, complex, str, bytes
    LIST        any list
    DICT        an object whose type is exactly dict ("plain" dict)
    OPAQUE      everything else: functions, class instances, tuples,
                sets, dates, dict subclasses, ...

Kind is decided by runtime type, never by content shape.  A dict that
happens to look like a list ({"0": "x", "length": 1}) is still a DICT.

Opaque values are atomic: the update engine copies them by reference
and compares them by identity, never traversing or cloning them.


KEYS AND PATHS
══════════════

A key is a str or a finite number (bool, NaN and ±inf are rejected).
Numeric keys written into a dict are coerced to their string form:

    0 → "0"      1.0 → "1"      123.456 → "123.456"

A path is a list or tuple of keys.

Hashable opaque values (sentinels, enum members, tuples) work as dict
keys in Python but do not survive serialization.  We call them symbol
keys: reads tolerate them, writes reject them.
"""

import math
from collections.abc import Hashable
from enum import Enum, auto
from typing import Any

from .errors import BoundsError, ValidationError


# ═══════════════════════════════════════════════════════════════════
#  VALUE KINDS
# ═══════════════════════════════════════════════════════════════════

class Kind(Enum):
    """The four kinds of value the engine distinguishes."""
    PRIMITIVE = auto()
    LIST = auto()
    DICT = auto()
    OPAQUE = auto()


PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)


def kind_of(value: Any) -> Kind:
    """Classify a value into one of the four kinds."""
    if isinstance(value, PRIMITIVE_TYPES):
        return Kind.PRIMITIVE
    if isinstance(value, list):
        return Kind.LIST
    if type(value) is dict:
        return Kind.DICT
    return Kind.OPAQUE


def is_primitive(value: Any) -> bool:
    return isinstance(value, PRIMITIVE_TYPES)


def is_list(value: Any) -> bool:
    return isinstance(value, list)


def is_dict(value: Any) -> bool:
    # Subclasses of dict are class instances, hence opaque.
    return type(value) is dict


def is_number(value: Any) -> bool:
    # bool is a subclass of int, and is not a number here.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def is_finite(value: Any) -> bool:
    return is_number(value) and math.isfinite(value)


def is_integer(value: Any) -> bool:
    if isinstance(value, int):
        return not isinstance(value, bool)
    return isinstance(value, float) and value.is_integer()


def is_natural(value: Any) -> bool:
    return is_integer(value) and value >= 0


def is_key(value: Any) -> bool:
    """True for a str or a finite number."""
    return isinstance(value, str) or is_finite(value)


def is_symbol(value: Any) -> bool:
    """True for a hashable opaque value, i.e. something only usable as a key by identity."""
    return kind_of(value) is Kind.OPAQUE and isinstance(value, Hashable)


def is_key_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_path(value: Any) -> bool:
    return is_key_sequence(value) and all(is_key(key) for key in value)


# ═══════════════════════════════════════════════════════════════════
#  COERCION
# ═══════════════════════════════════════════════════════════════════

def to_key(key: Any) -> str:
    """String form of a valid key, as stored in a dict."""
    if isinstance(key, str):
        return key
    if isinstance(key, float) and key.is_integer():
        return str(int(key))
    return str(key)


def to_dict(value: Any) -> dict:
    """The value itself if it is a plain dict, else a fresh empty dict."""
    return value if is_dict(value) else {}


def to_list(value: Any) -> list:
    """None becomes an empty list; any other non-list is rejected."""
    if value is None:
        return []
    validate(value, is_list)
    return value


# ═══════════════════════════════════════════════════════════════════
#  VALIDATION
# ═══════════════════════════════════════════════════════════════════

def validate(value: Any, test) -> None:
    """Raise ValidationError unless `test(value)` holds."""
    if not test(value):
        raise ValidationError(
            f"expected {value!r} to satisfy {test.__name__}",
            value=value, test=test.__name__,
        )


def validate_key(key: Any) -> None:
    if is_symbol(key):
        raise ValidationError(
            f"unexpected symbol key {key!r}: only strings and finite numbers "
            f"are accepted as keys in writes",
            value=key, test="is_key",
        )
    validate(key, is_key)


def validate_path(path: Any) -> None:
    validate(path, is_key_sequence)
    for key in path:
        validate_key(key)


def validate_bounds(lst: list, index: Any) -> int:
    """
    Check that `index` may be written or inserted into `lst`.

    Valid indexes run from 0 to len(lst) inclusive; len(lst) appends.
    Returns the index as an int.
    """
    validate(index, is_natural)
    index = int(index)
    if index > len(lst):
        raise BoundsError(index, len(lst))
    return index
