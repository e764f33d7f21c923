"""
Tag Hierarchy

Parent/child relationships between registered tags:
- each tag has at most one parent and an ordered list of children
- links are stored on the tags as IDs and resolved through the registry
- cycle prevention on add_child (configurable)
- ancestor / descendant queries

Usage:
    from tag_system.tags import TagHierarchy, TagRegistry, Tag

    registry = TagRegistry()
    enemy, boss = Tag("Enemy"), Tag("Boss")
    registry.register(enemy)
    registry.register(boss)

    hierarchy = TagHierarchy(registry)
    hierarchy.add_child(enemy, boss)

    hierarchy.descendants_of(enemy)  # [boss]
    hierarchy.ancestors_of(boss)     # [enemy]
"""

from typing import List, Optional, Set

from tag_system.config import HierarchyConfig
from tag_system.core.exceptions import (
    AlreadyChildError,
    NotFoundError,
    NullArgumentError,
    TagCycleError,
)
from tag_system.core.results import TagResult, reject
from tag_system.tags.registry import TagRegistry
from tag_system.tags.tag import Tag
from tag_system.utils.logging_config import get_logger

logger = get_logger("hierarchy")


class TagHierarchy:
    """
    Manages the parent/child graph over the tags of one registry.

    With ``enforce_acyclic`` off the hierarchy accepts cycles; traversals
    still terminate because every query tracks visited tags.

    Attributes:
        registry: Registry used to resolve tag IDs
        config: Cycle and re-parenting policy
    """

    def __init__(self, registry: TagRegistry, config: Optional[HierarchyConfig] = None):
        self.registry = registry
        self.config = config or HierarchyConfig()

    # -------------------------------------------------------------------------
    # Link Operations
    # -------------------------------------------------------------------------

    def add_child(self, parent: Optional[Tag], child: Optional[Tag]) -> TagResult[Tag]:
        """
        Make ``child`` a child of ``parent``.

        Args:
            parent: Parent tag (must be registered)
            child: Child tag (must be registered)

        Returns:
            TagResult holding the child, or the rejection reason
            (NullArgumentError, NotFoundError, AlreadyChildError, TagCycleError)
        """
        if parent is None:
            return reject(logger, NullArgumentError("parent", operation="add_child"))
        if child is None:
            return reject(logger, NullArgumentError("child", operation="add_child"))

        for tag in (parent, child):
            if not self.registry.contains(tag):
                return reject(logger, NotFoundError(tag_name=tag.name, tag_id=tag.tag_id))

        if child.tag_id in parent.child_ids:
            return reject(logger, AlreadyChildError(parent.name, child.name))

        if self.config.enforce_acyclic:
            if parent is child:
                return reject(logger, TagCycleError(parent.name, child.name, [parent.name]))

            if self._would_create_cycle(parent, child):
                path = self._find_path(child, parent)
                return reject(logger, TagCycleError(parent.name, child.name, path))

        previous = self.registry.get(child.parent_id)
        if (
            self.config.prune_previous_parent
            and previous is not None
            and previous is not parent
            and child.tag_id in previous.child_ids
        ):
            previous.child_ids.remove(child.tag_id)
            previous.touch()
            logger.debug(f"Pruned {child.name} from previous parent {previous.name}")

        parent.child_ids.append(child.tag_id)
        parent.touch()
        child.parent_id = parent.tag_id
        child.touch()

        logger.debug(f"Added child: {parent.name} -> {child.name}")
        return TagResult.success(child)

    def remove_child(self, parent: Optional[Tag], child: Optional[Tag]) -> TagResult[Tag]:
        """
        Unlink ``child`` from ``parent``.

        Returns:
            TagResult holding the child, or NotFoundError if not linked
        """
        if parent is None:
            return reject(logger, NullArgumentError("parent", operation="remove_child"))
        if child is None:
            return reject(logger, NullArgumentError("child", operation="remove_child"))

        if child.tag_id not in parent.child_ids:
            return reject(logger, NotFoundError(
                tag_name=child.name, container=f"children of '{parent.name}'"
            ))

        parent.child_ids.remove(child.tag_id)
        parent.touch()
        if child.parent_id == parent.tag_id:
            child.parent_id = None
            child.touch()

        logger.debug(f"Removed child: {parent.name} -> {child.name}")
        return TagResult.success(child)

    def detach(self, tag: Tag) -> None:
        """
        Cut every link to and from ``tag``.

        The tag leaves its parent's children (and any other child list
        that still mentions it) and its own children become roots.
        """
        for other in self.registry.tags:
            if tag.tag_id in other.child_ids:
                other.child_ids = [cid for cid in other.child_ids if cid != tag.tag_id]
                other.touch()

        for child_id in tag.child_ids:
            child = self.registry.get(child_id)
            if child is not None and child.parent_id == tag.tag_id:
                child.parent_id = None
                child.touch()

        tag.parent_id = None
        tag.child_ids = []
        tag.touch()
        logger.debug(f"Detached tag from hierarchy: {tag.name}")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def parent_of(self, tag: Tag) -> Optional[Tag]:
        """Get the parent of a tag, or None for roots."""
        return self.registry.get(tag.parent_id)

    def children_of(self, tag: Tag) -> List[Tag]:
        """Get direct children in insertion order, skipping unresolvable IDs."""
        children = []
        for child_id in tag.child_ids:
            child = self.registry.get(child_id)
            if child is not None:
                children.append(child)
        return children

    def descendants_of(self, tag: Optional[Tag]) -> List[Tag]:
        """
        Get all descendants (children, grandchildren, etc.) of a tag.

        Depth-first, pre-order. Each tag appears at most once and the
        starting tag is never included, even when a cycle leads back to it.

        Args:
            tag: Tag to get descendants for

        Returns:
            List of descendant tags
        """
        if tag is None:
            logger.warning("descendants_of called without a tag")
            return []

        descendants: List[Tag] = []
        visited: Set[str] = {tag.tag_id}
        stack = list(reversed(self.children_of(tag)))

        while stack:
            current = stack.pop()
            if current.tag_id in visited:
                continue
            visited.add(current.tag_id)
            descendants.append(current)
            stack.extend(reversed(self.children_of(current)))

        return descendants

    def ancestors_of(self, tag: Tag) -> List[Tag]:
        """
        Get all ancestors (parent, grandparent, etc.) of a tag.

        Returns:
            List of ancestor tags (closest first)
        """
        ancestors: List[Tag] = []
        visited: Set[str] = {tag.tag_id}
        current = self.parent_of(tag)

        while current is not None and current.tag_id not in visited:
            visited.add(current.tag_id)
            ancestors.append(current)
            current = self.parent_of(current)

        return ancestors

    def is_descendant(self, tag: Tag, ancestor: Tag) -> bool:
        """Check whether ``tag`` is reachable from ``ancestor`` via child links."""
        return any(d is tag for d in self.descendants_of(ancestor))

    def roots(self) -> List[Tag]:
        """Get all registered tags without a resolvable parent."""
        return [t for t in self.registry.tags if self.parent_of(t) is None]

    def _would_create_cycle(self, parent: Tag, child: Tag) -> bool:
        """Check if adding parent -> child would create a cycle."""
        # If parent is already below child, linking them closes a loop
        return any(d is parent for d in self.descendants_of(child))

    def _find_path(self, from_tag: Tag, to_tag: Tag) -> List[str]:
        """Find a child-link path between two tags, as names (DFS)."""
        stack = [(from_tag, [from_tag.name])]
        visited: Set[str] = set()

        while stack:
            current, path = stack.pop()
            if current is to_tag:
                return path
            if current.tag_id in visited:
                continue
            visited.add(current.tag_id)
            for child in self.children_of(current):
                stack.append((child, path + [child.name]))

        return []
