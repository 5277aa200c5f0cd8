"""
emerge.equality — Identity and structural equality.

Two levels of sameness:

    is_(a, b)       "nothing to do": same object, or equal primitives.
                    NaN is self-equal here, so trees holding NaN do not
                    look changed forever.
    equal(a, b)     deep structural equality over lists and plain dicts.

The update engine uses is_ to decide whether a freshly built candidate
can be thrown away in favour of the original reference.
"""

from typing import Any, Callable

from .errors import NotCallableError
from .values import Kind, is_nan, is_number, kind_of


def is_(one: Any, other: Any) -> bool:
    """
    Identity with value semantics for primitives.

    Numbers compare by value (so 1 and 1.0 match, as do 0.0 and -0.0),
    but a bool only matches a bool.  Strings and bytes compare by value
    against their own type.  Everything else compares by identity.
    Two NaNs are the same.
    """
    if one is other:
        return True
    if is_number(one) and is_number(other):
        return one == other or (is_nan(one) and is_nan(other))
    if type(one) is type(other) and isinstance(one, (str, bytes, complex)):
        return one == other
    # bool and None are singletons, already handled by identity.
    return False


def equal_by(one: Any, other: Any, compare: Callable[[Any, Any], bool]) -> bool:
    """
    Structural equality, one level deep, delegating to `compare`.

    Lists match when they have the same length and `compare` holds at
    every index.  Dicts match when they have the same key set (checked
    for every key before any value is compared) and `compare` holds at
    every key.  Mismatched kinds, and opaque values that are not
    identical, never match.
    """
    if not callable(compare):
        raise NotCallableError(compare)

    if is_(one, other):
        return True

    kind = kind_of(one)
    if kind is not kind_of(other):
        return False

    if kind is Kind.LIST:
        if len(one) != len(other):
            return False
        for a, b in zip(one, other):
            if not compare(a, b):
                return False
        return True

    if kind is Kind.DICT:
        if len(one) != len(other):
            return False
        # Breadth-first: a key added or removed fails before any recursion.
        for key in one:
            if key not in other:
                return False
        for key, value in one.items():
            if not compare(value, other[key]):
                return False
        return True

    return False


def equal(one: Any, other: Any) -> bool:
    """Deep structural equality."""
    return equal_by(one, other, equal)
