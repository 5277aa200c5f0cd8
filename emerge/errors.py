"""
emerge.errors — Exception taxonomy.

Every error raised by emerge signals a programmer mistake (a bad key, a
bad path, an index out of range, a missing callable).  They are raised
synchronously and never caught internally.  Reading a missing key is
NOT an error: reads degrade to None.

    EmergeError
    ├── ValidationError   (also a ValueError)
    ├── BoundsError       (also an IndexError)
    └── NotCallableError  (also a TypeError)
"""

from typing import Any, Optional


class EmergeError(Exception):
    """Base class for all emerge errors."""


class ValidationError(EmergeError, ValueError):
    """
    A key, path, index or operand failed validation.

    Attributes:
        value:  The offending value
        test:   Name of the check it failed, if any
    """

    def __init__(self, message: str, value: Any = None, test: Optional[str] = None):
        super().__init__(message)
        self.value = value
        self.test = test


class BoundsError(EmergeError, IndexError):
    """A list write or insert addressed an index outside [0, length]."""

    def __init__(self, index: int, length: int):
        super().__init__(f"index {index} out of bounds for length {length}")
        self.index = index
        self.length = length


class NotCallableError(EmergeError, TypeError):
    """A function argument (comparator, transform) is not callable."""

    def __init__(self, value: Any):
        super().__init__(f"expected {value!r} to be callable")
        self.value = value
