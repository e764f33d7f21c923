"""
Explicit outcome values for tag operations.

Registry, hierarchy and taggable operations never raise on rejected input.
They log a warning and hand back a TagResult whose ``error`` holds the
exception instance, so callers and tests can inspect what went wrong.
"""

import logging
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from tag_system.core.exceptions import TagSystemError

T = TypeVar("T")


@dataclass
class TagResult(Generic[T]):
    """Outcome of an operation: a value on success, an error otherwise."""

    value: Optional[T] = None
    error: Optional[TagSystemError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return the value, raising the recorded error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: Optional[T] = None) -> "TagResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TagSystemError) -> "TagResult[T]":
        return cls(error=error)


def reject(logger: logging.Logger, error: TagSystemError) -> TagResult:
    """Log a rejected operation at WARNING and wrap the error in a result."""
    logger.warning(str(error))
    return TagResult.failure(error)
