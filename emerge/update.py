"""
emerge.update — Reference-preserving structural updates.

Every function here is pure: (prev, ...) → next, where next may share
any part of prev.  Whenever a result would be deeply equal to an input,
the input's own reference is returned, so callers can detect "nothing
changed" with a plain `is` check.

GLOSSARY
════════

    put     replace the value at a key or path, keeping old references
            wherever the new value is equal to the old one
    patch   combine dicts one level deep: next's keys win, prev's other
            keys are kept
    merge   patch applied at every depth
    assoc   set a key with a reference check only; used to re-thread a
            value back up a path after a single put at the bottom

NIL POLICY
══════════

None is absence for dicts.  Writing None under a dict key removes the
key; writing None under an absent key changes nothing.  Keys of prev
that are not written are never touched.  In lists, None is an ordinary
element.

The same rule decides whether a dict changed: {"one": None} and {} hold
the same entries, so an update that only drops None values returns prev.

A value with nothing under it in prev is adopted as given, None entries
and all: put({}, "x", {"a": None}) keeps {"a": None}.  Only where prev
already holds a dict are next's None entries dropped while combining.

Dict keys are written in the form `get` finds them under: a numeric key
that prev already holds as a number stays a number, otherwise it is
stored as its string form.

LIST KEYS
═════════

A list accepts natural integer indexes up to and including its length
(the length appends); beyond that is a BoundsError.  Any other key
(negative, fractional, string) discards the list and replaces it with a
dict keyed by that key.  This is a compatibility behaviour that callers
tend to find surprising: it is logged, and EMERGE_LIST_KEY_POLICY=error
turns it into a ValidationError.

PERFORMANCE
═══════════

put_any and the patch helpers build a candidate and compare it with
prev before deciding which to return.  put_in does a single deep put at
the bottom of the path, then assoc's the result back up, checking only
references on the way.
"""

import logging
from typing import Any, Callable, Sequence

from .config import settings
from .equality import equal_by, is_
from .errors import NotCallableError, ValidationError
from .read import get, get_in, has_in
from .values import (
    Kind, is_dict, is_finite, is_integer, is_list, is_natural, kind_of,
    to_dict, to_key, to_list, validate, validate_bounds, validate_key,
    validate_path,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PUT
# ═══════════════════════════════════════════════════════════════════

def put(prev: Any, key: Any, value: Any) -> Any:
    """
    Replace the value under `key`, preserving as much of `prev` as possible.

        put({"one": 1}, "two", 2)          → {"one": 1, "two": 2}
        put({"one": 1, "two": 2}, "two", None) → {"one": 1}
        put(["one"], 1, "two")             → ["one", "two"]

    A `prev` that is neither a list nor a dict is treated as {}.
    """
    validate_key(key)
    return _assoc(prev, key, put_any(get(prev, key), value))


def put_in(prev: Any, path: Sequence, value: Any) -> Any:
    """
    Replace the value at `path`, creating missing dicts along the way.

        put_in(None, ["one", "two"], 2)    → {"one": {"two": 2}}
        put_in(["one", "two"], [2], "three") → ["one", "two", "three"]

    With an empty path the whole tree is put.
    """
    validate_path(path)
    return _assoc_in(prev, path, put_any(get_in(prev, path), value))


def put_by(prev: Any, key: Any, fun: Callable, *args: Any, **kwargs: Any) -> Any:
    """put(prev, key, fun(get(prev, key), *args, **kwargs))"""
    _validate_callable(fun)
    return put(prev, key, fun(get(prev, key), *args, **kwargs))


def put_in_by(prev: Any, path: Sequence, fun: Callable, *args: Any, **kwargs: Any) -> Any:
    """put_in(prev, path, fun(get_in(prev, path), *args, **kwargs))"""
    _validate_callable(fun)
    return put_in(prev, path, fun(get_in(prev, path), *args, **kwargs))


def put_any(prev: Any, next: Any) -> Any:
    """
    The central combinator: `next`, but sharing every part of `prev`
    that is equal to the corresponding part of `next`.

    Lists take next's length; dicts take next's keys.  Anything that is
    not a pair of lists or a pair of dicts is replaced wholesale.
    """
    if is_(prev, next):
        return prev

    kind = kind_of(prev)
    if kind is not kind_of(next):
        return next
    if kind is Kind.LIST:
        return _list_replace_by(prev, next, put_any)
    if kind is Kind.DICT:
        return _dict_replace_by(prev, next, put_any)
    return next


# ═══════════════════════════════════════════════════════════════════
#  PATCH / MERGE
# ═══════════════════════════════════════════════════════════════════

def patch(prev: Any = None, *nexts: Any) -> dict:
    """
    Combine dicts one level deep; the last one wins per key.

        patch({"one": 1}, {"two": 2})      → {"one": 1, "two": 2}
        patch({"one": {"two": 2}}, {"one": {"three": 3}})
                                           → {"one": {"three": 3}}

    Non-dict arguments count as {}, so the result is always a dict.
    """
    if not nexts:
        return _patch_two(prev, None)
    out = prev
    for next in nexts:
        out = _patch_two(out, next)
    return out


def merge(prev: Any = None, *nexts: Any) -> dict:
    """
    Combine dicts at every depth.

        merge({"one": {"two": 2}}, {"one": {"three": 3}})
                                           → {"one": {"two": 2, "three": 3}}

    Non-dict arguments count as {}, so the result is always a dict.
    """
    if not nexts:
        return _merge_two(prev, None)
    out = prev
    for next in nexts:
        out = _merge_two(out, next)
    return out


def patch_in(prev: Any, path: Sequence, *nexts: Any) -> Any:
    """Patch the dict found at `path` with `nexts`."""
    validate_path(path)
    return _assoc_in(prev, path, patch(get_in(prev, path), *nexts))


def merge_in(prev: Any, path: Sequence, *nexts: Any) -> Any:
    """Merge `nexts` into the dict found at `path`."""
    validate_path(path)
    return _assoc_in(prev, path, merge(get_in(prev, path), *nexts))


def _patch_two(prev: Any, next: Any) -> dict:
    prev = to_dict(prev)
    next = to_dict(next)
    if is_(prev, next):
        return prev
    return _patch_dict_by(prev, next, put_any)


def _merge_two(prev: Any, next: Any) -> dict:
    prev = to_dict(prev)
    next = to_dict(next)
    if is_(prev, next):
        return prev
    return _patch_dict_by(prev, next, _merge_or_put)


def _merge_or_put(prev: Any, next: Any) -> Any:
    if is_dict(next):
        return _merge_two(prev, next)
    return put_any(prev, next)


# ═══════════════════════════════════════════════════════════════════
#  INSERT / REMOVE
# ═══════════════════════════════════════════════════════════════════

def insert(lst: Any, index: Any, value: Any) -> list:
    """
    A copy of `lst` with `value` inserted before `index`.

    0 <= index <= len(lst); len(lst) appends.  None counts as [].
    """
    lst = to_list(lst)
    index = validate_bounds(lst, index)
    out = list(lst)
    out.insert(index, value)
    return out


def remove(value: Any, key: Any) -> Any:
    """
    Remove `key` from a dict, or the element at index `key` from a list.

    Out-of-range list indexes and absent dict keys return `value` itself.
    A `value` that is neither a list nor a dict is treated as {}.
    """
    if is_list(value):
        validate(key, is_integer)
        return _list_remove(value, key)
    validate_key(key)
    return _dict_remove(to_dict(value), key)


def remove_in(value: Any, path: Sequence) -> Any:
    """
    Remove whatever is at `path`.

    An empty path removes everything and returns None.  A path that
    does not exist returns `value` itself without rebuilding anything.
    """
    validate_path(path)
    if not path:
        return None

    if not is_list(value):
        value = to_dict(value)
    if not has_in(value, path):
        return value

    prefix = path[:-1]
    return _assoc_in(value, prefix, remove(get_in(value, prefix), path[-1]))


# ═══════════════════════════════════════════════════════════════════
#  ASSOC (internal)
# ═══════════════════════════════════════════════════════════════════

def _assoc(prev: Any, key: Any, value: Any) -> Any:
    if is_list(prev):
        return _list_put(prev, key, value)
    return _dict_put(to_dict(prev), key, value)


def _assoc_in(prev: Any, path: Sequence, value: Any) -> Any:
    if not path:
        return value
    return _assoc_in_at(prev, path, value, 0)


def _assoc_in_at(prev: Any, path: Sequence, value: Any, index: int) -> Any:
    key = path[index]
    if index < len(path) - 1:
        child = get(prev, key)
        if kind_of(child) not in (Kind.LIST, Kind.DICT):
            logger.debug("creating missing container at %r", list(path[:index + 1]))
        value = _assoc_in_at(child, path, value, index + 1)
    return _assoc(prev, key, value)


def _list_put(lst: list, key: Any, value: Any) -> Any:
    if not is_natural(key):
        return _discard_list(lst, key, value)

    index = validate_bounds(lst, key)
    if index < len(lst) and is_(lst[index], value):
        return lst
    out = list(lst)
    if index == len(lst):
        out.append(value)
    else:
        out[index] = value
    return out


def _discard_list(lst: list, key: Any, value: Any) -> dict:
    if settings.strict_list_keys:
        raise ValidationError(
            f"expected {key!r} to be a list index for a list of length {len(lst)}",
            value=key, test="is_natural",
        )
    if settings.LOG_LIST_DISCARD:
        logger.warning(
            "list of length %d addressed by non-index key %r; replacing it with a dict",
            len(lst), key,
        )
    return _dict_put({}, key, value)


def _dict_put(dct: dict, key: Any, value: Any) -> dict:
    key = _stored_key(dct, key, to_key(key))
    if is_(dct.get(key), value):
        return dct
    out = dict(dct)
    if value is None:
        del out[key]
    else:
        out[key] = value
    return out


def _list_remove(lst: list, index: Any) -> list:
    if is_natural(index) and index < len(lst):
        out = list(lst)
        del out[int(index)]
        return out
    return lst


def _dict_remove(dct: dict, key: Any) -> dict:
    key = _stored_key(dct, key, to_key(key))
    if key not in dct:
        return dct
    return {k: v for k, v in dct.items() if k != key}


# ═══════════════════════════════════════════════════════════════════
#  REPLACE / PATCH HELPERS (internal)
# ═══════════════════════════════════════════════════════════════════

def _list_replace_by(prev: list, next: list, fun: Callable) -> list:
    out = [
        fun(prev[i] if i < len(prev) else None, item)
        for i, item in enumerate(next)
    ]
    return prev if equal_by(prev, out, is_) else out


def _dict_replace_by(prev: dict, next: dict, fun: Callable) -> dict:
    out = {}
    for key, item in next.items():
        key = _stored_key(prev, key, key)
        value = fun(prev.get(key), item)
        if value is not None:
            out[key] = value
    return prev if _same_entries(prev, out) else out


def _patch_dict_by(prev: dict, next: dict, fun: Callable) -> dict:
    out = dict(prev)
    for key, item in next.items():
        key = _stored_key(prev, key, to_key(key) if is_finite(key) else key)
        value = fun(prev.get(key), item)
        if value is None:
            out.pop(key, None)
        else:
            out[key] = value
    return prev if _same_entries(prev, out) else out


def _stored_key(dct: dict, key: Any, default: Any) -> Any:
    # The form `get` would find `key` under: the key itself, then its
    # string form for numbers.
    if key in dct:
        return key
    if is_finite(key) and to_key(key) in dct:
        return to_key(key)
    return default


def _same_entries(prev: dict, out: dict) -> bool:
    # None values count as absent on both sides
    count = 0
    for key, value in out.items():
        if value is None:
            continue
        if not is_(prev.get(key), value):
            return False
        count += 1
    return count == sum(1 for value in prev.values() if value is not None)


def _validate_callable(fun: Any) -> None:
    if not callable(fun):
        raise NotCallableError(fun)
