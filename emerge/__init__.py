"""
emerge
======

Reference-preserving updates for immutable trees of primitives, lists
and plain dicts.

    src = {"one": {"two": 2}, "list": [1, 2]}

    put(src, "list", [1, 2])            is src   → True   (nothing changed)
    out = merge(src, {"three": 3})
    out["one"]                          is src["one"]  → True
    put_in(src, ["one", "two"], 20)     → {"one": {"two": 20}, "list": [1, 2]}

Updates never mutate their inputs.  A result shares every sub-tree of
the input that did not change, and IS the input when nothing changed at
all, so consumers can skip recomputation with an identity check.

    • Equality:  is_, equal, equal_by
    • Reading:   get, get_in, scan, has, has_in
    • Updating:  put, put_in, put_by, put_in_by,
                 patch, merge, patch_in, merge_in,
                 insert, remove, remove_in
"""

from emerge.config import Settings, settings
from emerge.equality import equal, equal_by, is_
from emerge.errors import (
    BoundsError,
    EmergeError,
    NotCallableError,
    ValidationError,
)
from emerge.read import get, get_in, has, has_in, scan
from emerge.update import (
    insert,
    merge,
    merge_in,
    patch,
    patch_in,
    put,
    put_by,
    put_in,
    put_in_by,
    remove,
    remove_in,
)
from emerge.values import Kind, kind_of

__version__ = "0.1.0"
__all__ = [
    "is_", "equal", "equal_by",
    "get", "get_in", "scan", "has", "has_in",
    "put", "put_in", "put_by", "put_in_by",
    "patch", "merge", "patch_in", "merge_in",
    "insert", "remove", "remove_in",
    "Kind", "kind_of",
    "EmergeError", "ValidationError", "BoundsError", "NotCallableError",
    "Settings", "settings",
]
