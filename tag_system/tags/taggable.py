"""
Entity tag assignment.

A Taggable links one opaque entity ID to an ordered set of tags drawn
from a TagRegistry. Assignment is validated against the registry at the
time of the call only.
"""

from typing import Iterable, List, Optional, Tuple

from tag_system.core.exceptions import (
    AlreadyAssignedError,
    NotFoundError,
    NullArgumentError,
)
from tag_system.core.results import TagResult, reject
from tag_system.tags.registry import TagRegistry
from tag_system.tags.tag import Tag
from tag_system.utils.logging_config import get_logger

logger = get_logger("taggable")


def available_tags(
    registry_tags: Iterable[Tag],
    assigned: Iterable[Tag],
    query: str = "",
) -> List[Tag]:
    """
    Tags that could still be assigned, filtered by name.

    Args:
        registry_tags: Snapshot of the registry, in display order
        assigned: Tags currently assigned to the entity
        query: Case-insensitive substring to look for in tag names

    Returns:
        Unassigned tags whose name contains ``query``, in registry order
    """
    assigned_ids = {t.tag_id for t in assigned}
    needle = (query or "").lower()
    return [
        tag for tag in registry_tags
        if tag.tag_id not in assigned_ids and needle in tag.name.lower()
    ]


class Taggable:
    """
    The set of tags attached to one entity.

    Usage:
        player = Taggable("player-1", registry)
        player.add_tag(enemy)
        player.has_tag(enemy)  # True
    """

    def __init__(self, entity_id: str, registry: Optional[TagRegistry] = None):
        self.entity_id = entity_id
        self.registry = registry
        self._tags: List[Tag] = []

    @property
    def tags(self) -> Tuple[Tag, ...]:
        """Assigned tags in assignment order."""
        return tuple(self._tags)

    @property
    def tag_ids(self) -> List[str]:
        return [t.tag_id for t in self._tags]

    def has_tag(self, tag: Optional[Tag]) -> bool:
        return tag is not None and any(t is tag for t in self._tags)

    def add_tag(self, tag: Optional[Tag]) -> TagResult[Tag]:
        """
        Assign a tag to the entity.

        Returns:
            TagResult holding the tag, or the rejection reason
            (NullArgumentError, NotFoundError, AlreadyAssignedError)
        """
        if tag is None:
            return reject(logger, NullArgumentError("tag", operation="add_tag"))

        if self.registry is None:
            return reject(logger, NullArgumentError(
                "registry", operation="add_tag", entity_id=self.entity_id
            ))

        if not self.registry.contains(tag):
            return reject(logger, NotFoundError(tag_name=tag.name, tag_id=tag.tag_id))

        if self.has_tag(tag):
            return reject(logger, AlreadyAssignedError(tag.name, self.entity_id))

        self._tags.append(tag)
        logger.debug(f"Assigned tag {tag.name} to {self.entity_id}")
        return TagResult.success(tag)

    def add_tags(self, tags: Iterable[Tag]) -> List[TagResult[Tag]]:
        """Assign several tags, one result per tag."""
        return [self.add_tag(tag) for tag in list(tags)]

    def remove_tag(self, tag: Optional[Tag]) -> TagResult[Tag]:
        """
        Unassign a tag from the entity.

        Returns:
            TagResult holding the tag, or NullArgumentError / NotFoundError
        """
        if tag is None:
            return reject(logger, NullArgumentError("tag", operation="remove_tag"))

        if not self.has_tag(tag):
            return reject(logger, NotFoundError(
                tag_name=tag.name, container=f"entity '{self.entity_id}'"
            ))

        self._tags = [t for t in self._tags if t is not tag]
        logger.debug(f"Removed tag {tag.name} from {self.entity_id}")
        return TagResult.success(tag)

    def clear_tags(self) -> List[Tag]:
        """Unassign everything. Returns the tags that were assigned."""
        removed, self._tags = self._tags, []
        if removed:
            logger.debug(f"Cleared {len(removed)} tags from {self.entity_id}")
        return removed

    def restore(self, tags: Iterable[Tag]) -> None:
        """Set assignments from storage without registry validation."""
        self._tags = []
        for tag in tags:
            if not self.has_tag(tag):
                self._tags.append(tag)

    def available_tags(self, query: str = "") -> List[Tag]:
        """Registry tags not assigned here whose names contain ``query``."""
        if self.registry is None:
            return []
        return available_tags(self.registry.tags, self._tags, query)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"Taggable({self.entity_id!r}, tags={[t.name for t in self._tags]})"
