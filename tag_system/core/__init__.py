"""
Core infrastructure module.

Contains:
    - Observers: Synchronous observer lists
    - TagResult: Explicit operation outcomes
    - Exceptions: Tag system exception types
"""

from tag_system.core.events import Observers
from tag_system.core.results import TagResult
from tag_system.core.exceptions import (
    TagSystemError,
    NullArgumentError,
    NotFoundError,
    TagRegistryError,
    InvalidNameError,
    DuplicateNameError,
    TagInUseError,
    TagHierarchyError,
    AlreadyChildError,
    TagCycleError,
    TaggableError,
    AlreadyAssignedError,
    TagStoreError,
)

__all__ = [
    "Observers",
    "TagResult",
    "TagSystemError",
    "NullArgumentError",
    "NotFoundError",
    "TagRegistryError",
    "InvalidNameError",
    "DuplicateNameError",
    "TagInUseError",
    "TagHierarchyError",
    "AlreadyChildError",
    "TagCycleError",
    "TaggableError",
    "AlreadyAssignedError",
    "TagStoreError",
]
