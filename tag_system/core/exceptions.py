"""
Tag System Exception Hierarchy

Provides specific exception types for the tag system. Domain operations
report these as values inside a TagResult rather than raising them;
only the storage layer raises.

Exception Hierarchy:
    TagSystemError (base)
    ├── NullArgumentError
    ├── NotFoundError
    ├── TagRegistryError
    │   ├── InvalidNameError
    │   ├── DuplicateNameError
    │   └── TagInUseError
    ├── TagHierarchyError
    │   ├── AlreadyChildError
    │   └── TagCycleError
    ├── TaggableError
    │   └── AlreadyAssignedError
    └── TagStoreError
"""

from typing import Optional, Dict, Any, List


class TagSystemError(Exception):
    """
    Base exception for all tag system errors.

    Provides consistent error structure with message and optional details.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


class NullArgumentError(TagSystemError):
    """Raised when a required reference (tag, registry, ...) is missing."""

    def __init__(self, argument: str, operation: Optional[str] = None, **kwargs):
        message = f"Required argument '{argument}' is missing"
        details = {"operation": operation, **kwargs}
        details = {k: v for k, v in details.items() if v is not None}
        super().__init__(message, details)
        self.argument = argument
        self.operation = operation


class NotFoundError(TagSystemError):
    """Raised when an operation targets a tag that is not where it should be."""

    def __init__(
        self,
        tag_name: Optional[str] = None,
        tag_id: Optional[str] = None,
        container: str = "registry",
        **kwargs
    ):
        if tag_name:
            message = f"Tag '{tag_name}' not found in {container}"
        elif tag_id:
            message = f"Tag with ID {tag_id} not found in {container}"
        else:
            message = f"Tag not found in {container}"

        super().__init__(message, kwargs)
        self.tag_name = tag_name
        self.tag_id = tag_id
        self.container = container


# =============================================================================
# Registry Errors
# =============================================================================

class TagRegistryError(TagSystemError):
    """Base exception for registry-related errors."""
    pass


class InvalidNameError(TagRegistryError):
    """Raised when a tag name is empty or whitespace only."""

    def __init__(self, name: Optional[str] = None, **kwargs):
        super().__init__("Tag name cannot be empty", kwargs)
        self.name = name
        if name is not None:
            self.details["name"] = repr(name)


class DuplicateNameError(TagRegistryError):
    """Raised when a tag name is already taken in the registry."""

    def __init__(self, name: str, existing_id: Optional[str] = None, **kwargs):
        message = f"Tag name '{name}' already exists"
        super().__init__(message, kwargs)
        self.name = name
        self.existing_id = existing_id
        if existing_id:
            self.details["existing_id"] = existing_id


class TagInUseError(TagRegistryError):
    """
    Raised when removal without cascade would leave dangling references.

    Carries the entities and hierarchy links still pointing at the tag.
    """

    def __init__(
        self,
        tag_name: str,
        entity_ids: Optional[List[str]] = None,
        linked: bool = False,
        **kwargs
    ):
        message = f"Tag '{tag_name}' is still referenced"
        super().__init__(message, kwargs)
        self.tag_name = tag_name
        self.entity_ids = entity_ids or []
        self.linked = linked
        if self.entity_ids:
            self.details["entity_ids"] = self.entity_ids
        if linked:
            self.details["hierarchy_links"] = True


# =============================================================================
# Hierarchy Errors
# =============================================================================

class TagHierarchyError(TagSystemError):
    """Base exception for tag hierarchy errors."""
    pass


class AlreadyChildError(TagHierarchyError):
    """Raised when a tag is already a direct child of the given parent."""

    def __init__(self, parent_tag: str, child_tag: str, **kwargs):
        message = f"Tag '{child_tag}' is already a child of '{parent_tag}'"
        super().__init__(message, kwargs)
        self.parent_tag = parent_tag
        self.child_tag = child_tag


class TagCycleError(TagHierarchyError):
    """
    Raised when an operation would create a cycle in the tag hierarchy.

    A tag may never be its own transitive ancestor.
    """

    def __init__(
        self,
        parent_tag: str,
        child_tag: str,
        cycle_path: Optional[List[str]] = None,
        **kwargs
    ):
        message = f"Adding '{parent_tag}' as parent of '{child_tag}' would create a cycle"
        super().__init__(message, kwargs)
        self.parent_tag = parent_tag
        self.child_tag = child_tag
        self.cycle_path = cycle_path
        if cycle_path:
            self.details["cycle_path"] = " -> ".join(cycle_path)


# =============================================================================
# Taggable Errors
# =============================================================================

class TaggableError(TagSystemError):
    """Base exception for entity tag assignment errors."""
    pass


class AlreadyAssignedError(TaggableError):
    """Raised when a tag is already assigned to the entity."""

    def __init__(self, tag_name: str, entity_id: str, **kwargs):
        message = f"Tag '{tag_name}' is already assigned to '{entity_id}'"
        super().__init__(message, kwargs)
        self.tag_name = tag_name
        self.entity_id = entity_id


# =============================================================================
# Storage Errors
# =============================================================================

class TagStoreError(TagSystemError):
    """Raised when loading or persisting tag data fails."""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ):
        details = {"table": table, "operation": operation, **kwargs}
        details = {k: v for k, v in details.items() if v is not None}
        super().__init__(message, details)
        self.table = table
        self.operation = operation
        self.original_error = original_error
        if original_error:
            self.details["original_error"] = str(original_error)
