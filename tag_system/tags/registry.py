"""
Tag Registry

The authoritative collection of tags. Owns:
- tags keyed by their surrogate ID, in registration order
- a name -> Tag index kept in sync on every mutation
- "tag added" / "tag removed" observer lists

Usage:
    registry = TagRegistry()
    registry.on_tag_added.subscribe(lambda tag: print(f"added {tag.name}"))

    enemy = Tag("Enemy")
    registry.register(enemy)
    registry.lookup_by_name("Enemy").value  # -> enemy
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from tag_system.core.events import Observers
from tag_system.core.exceptions import (
    DuplicateNameError,
    InvalidNameError,
    NotFoundError,
    NullArgumentError,
)
from tag_system.core.results import TagResult, reject
from tag_system.tags.tag import Tag, is_valid_name
from tag_system.utils.logging_config import get_logger

logger = get_logger("registry")


class TagRegistry:
    """
    Sole source of truth for which tags exist and what they are called.

    Names are unique and matched case-sensitively. The registry never
    cascades removals into hierarchy links or entity assignments; that
    is the owner's job (see TagLibrary.remove_tag).

    Thread Safety:
        Not thread-safe. Intended for a single editing flow.
    """

    def __init__(self, tags: Optional[Iterable[Tag]] = None):
        self._tags: Dict[str, Tag] = {}
        self._by_name: Dict[str, Tag] = {}

        self.on_tag_added: Observers[Tag] = Observers("tag_added")
        self.on_tag_removed: Observers[Tag] = Observers("tag_removed")

        if tags is not None:
            self.load(tags)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def tags(self) -> Tuple[Tag, ...]:
        """All registered tags in registration order."""
        return tuple(self._tags.values())

    @property
    def by_name(self) -> Dict[str, Tag]:
        """A copy of the name index."""
        return dict(self._by_name)

    def get(self, tag_id: Optional[str]) -> Optional[Tag]:
        """Get a registered tag by ID, or None."""
        if tag_id is None:
            return None
        return self._tags.get(tag_id)

    def contains(self, tag: Optional[Tag]) -> bool:
        """Membership by identity."""
        return tag is not None and self._tags.get(tag.tag_id) is tag

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, Tag) and self.contains(tag)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self._tags)

    def lookup_by_name(self, name: str) -> TagResult[Tag]:
        """
        Find a tag by exact, case-sensitive name.

        Returns:
            TagResult holding the tag, or NotFoundError / InvalidNameError
        """
        if not name:
            return reject(logger, InvalidNameError(name, operation="lookup_by_name"))

        tag = self._by_name.get(name)
        if tag is None:
            return TagResult.failure(NotFoundError(tag_name=name))
        return TagResult.success(tag)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def register(self, tag: Optional[Tag]) -> TagResult[Tag]:
        """
        Add a tag to the registry and notify on_tag_added subscribers.

        Returns:
            TagResult holding the tag, or the rejection reason
            (NullArgumentError, InvalidNameError, DuplicateNameError)
        """
        if tag is None:
            return reject(logger, NullArgumentError("tag", operation="register"))

        if not is_valid_name(tag.name):
            return reject(logger, InvalidNameError(tag.name, operation="register"))

        existing = self._by_name.get(tag.name)
        if existing is not None or tag.tag_id in self._tags:
            existing = existing or self._tags[tag.tag_id]
            return reject(logger, DuplicateNameError(tag.name, existing_id=existing.tag_id))

        self._tags[tag.tag_id] = tag
        self._by_name[tag.name] = tag
        logger.debug(f"Registered tag: {tag.name} (ID: {tag.tag_id})")

        self.on_tag_added.notify(tag)
        return TagResult.success(tag)

    def unregister(self, tag: Optional[Tag]) -> TagResult[Tag]:
        """
        Remove a tag from the registry and notify on_tag_removed subscribers.

        Hierarchy links and entity assignments are left untouched.
        """
        if tag is None:
            return reject(logger, NullArgumentError("tag", operation="unregister"))

        if not self.contains(tag):
            return reject(logger, NotFoundError(tag_name=tag.name, tag_id=tag.tag_id))

        del self._tags[tag.tag_id]
        if self._by_name.get(tag.name) is tag:
            del self._by_name[tag.name]
        logger.debug(f"Unregistered tag: {tag.name} (ID: {tag.tag_id})")

        self.on_tag_removed.notify(tag)
        return TagResult.success(tag)

    def rename(self, tag: Optional[Tag], new_name: str) -> TagResult[Tag]:
        """
        Rename a registered tag, keeping the name index in sync.

        Renaming a tag to its current name succeeds without changes.
        """
        if tag is None:
            return reject(logger, NullArgumentError("tag", operation="rename"))

        if not self.contains(tag):
            return reject(logger, NotFoundError(tag_name=tag.name, tag_id=tag.tag_id))

        if not is_valid_name(new_name):
            return reject(logger, InvalidNameError(new_name, operation="rename"))

        if new_name == tag.name:
            return TagResult.success(tag)

        existing = self._by_name.get(new_name)
        if existing is not None:
            return reject(logger, DuplicateNameError(new_name, existing_id=existing.tag_id))

        old_name = tag.name
        del self._by_name[old_name]
        tag.name = new_name
        tag.touch()
        self._by_name[new_name] = tag

        logger.debug(f"Renamed tag: {old_name} -> {new_name} (ID: {tag.tag_id})")
        return TagResult.success(tag)

    # -------------------------------------------------------------------------
    # Bulk load
    # -------------------------------------------------------------------------

    def load(self, tags: Iterable[Tag]) -> List[Tag]:
        """
        Replace the registry contents with a loaded set of tags.

        Tags with empty names, duplicate IDs or colliding names are
        dropped (first seen wins). No notifications are sent.

        Returns:
            The tags that were rejected
        """
        self._tags = {}
        rejected: List[Tag] = []
        seen_names = set()

        for tag in tags:
            if tag is None:
                continue
            if (
                not is_valid_name(tag.name)
                or tag.name in seen_names
                or tag.tag_id in self._tags
            ):
                rejected.append(tag)
                continue
            seen_names.add(tag.name)
            self._tags[tag.tag_id] = tag

        self.rebuild_index()

        for tag in rejected:
            logger.warning(f"Skipped tag on load: {tag.name!r} (ID: {tag.tag_id})")
        logger.info(f"Loaded {len(self._tags)} tags ({len(rejected)} rejected)")
        return rejected

    def rebuild_index(self) -> None:
        """
        Reconstruct the name index from the registered tags.

        Entries with empty names or names already indexed are skipped,
        first seen wins.
        """
        self._by_name = {}
        for tag in self._tags.values():
            if not is_valid_name(tag.name):
                continue
            if tag.name in self._by_name:
                logger.warning(f"Name collision while indexing: {tag.name!r}")
                continue
            self._by_name[tag.name] = tag

    def __repr__(self) -> str:
        return f"TagRegistry(tags={len(self._tags)})"
