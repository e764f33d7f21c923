"""
Tag Library

The owning application object. Wires together:
- a TagRegistry (which tags exist)
- a TagHierarchy (how they nest)
- the Taggable associations of every entity
- an optional TagStore for explicit load() / save()

Removal through the library cascades into hierarchy links and entity
assignments, so no reference to a removed tag survives.

Usage:
    from tag_system import TagLibrary, TagStore, get_connection

    library = TagLibrary(store=TagStore(get_connection("data/tags.duckdb")))
    library.load()

    enemy = library.create_tag("Enemy").unwrap()
    boss = library.create_tag("Boss", parent=enemy).unwrap()
    library.taggable("goblin-king").add_tag(boss)

    library.entities_with(enemy, include_descendants=True)  # ["goblin-king"]
    library.save()
"""

import uuid
from pathlib import Path
from typing import Dict, List, Optional

from tag_system.config import TagSystemConfig, get_config
from tag_system.core.exceptions import NullArgumentError, NotFoundError, TagInUseError
from tag_system.core.results import TagResult, reject
from tag_system.db.connection import get_connection
from tag_system.db.tag_store import TagStore
from tag_system.tags.hierarchy import TagHierarchy
from tag_system.tags.registry import TagRegistry
from tag_system.tags.tag import Tag
from tag_system.tags.taggable import Taggable
from tag_system.utils.logging_config import get_logger, setup_logging

logger = get_logger("library")


class TagLibrary:
    """
    Owner of a tag registry, its hierarchy and all entity assignments.

    Attributes:
        config: System configuration
        registry: The authoritative tag registry
        hierarchy: Parent/child links over the registry
        store: Optional persistence backend
    """

    def __init__(
        self,
        config: Optional[TagSystemConfig] = None,
        store: Optional[TagStore] = None,
    ):
        self.config = config or TagSystemConfig()
        self.store = store
        self.registry = TagRegistry()
        self.hierarchy = TagHierarchy(self.registry, self.config.hierarchy)
        self._taggables: Dict[str, Taggable] = {}

    @classmethod
    def from_config(cls, config: Optional[TagSystemConfig] = None) -> "TagLibrary":
        """
        Build a library from configuration: set up logging, open the
        DuckDB store at ``config.storage.db_path`` and load it.
        """
        config = config or get_config()
        setup_logging(
            level=config.logging.level,
            log_dir=Path(config.logging.log_dir),
            console=config.logging.console,
            file=config.logging.file,
        )

        library = cls(config=config, store=TagStore(get_connection(config.storage.db_path)))
        library.load()
        return library

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """
        Replace in-memory state with the contents of the store.

        Assignments that reference unknown tags are dropped.
        """
        if self.store is None:
            logger.warning("No store configured - nothing to load")
            return

        tags = self.store.load_tags()
        self.registry.load(tags)

        self._taggables = {}
        for entity_id, tag_ids in self.store.load_assignments().items():
            resolved = []
            for tag_id in tag_ids:
                tag = self.registry.get(tag_id)
                if tag is None:
                    logger.warning(f"Dropping unknown tag {tag_id} assigned to {entity_id}")
                    continue
                resolved.append(tag)
            self.taggable(entity_id).restore(resolved)

        logger.info(
            f"Loaded {len(self.registry)} tags and {len(self._taggables)} tagged entities"
        )

    def save(self) -> None:
        """Write the full in-memory state to the store. Entities without tags are skipped."""
        if self.store is None:
            logger.warning("No store configured - nothing to save")
            return

        self.store.save_snapshot(
            self.registry.tags,
            {eid: t.tag_ids for eid, t in self._taggables.items() if len(t)},
        )

    def close(self) -> None:
        if self.store is not None:
            self.store.close()

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def create_tag(
        self,
        name: Optional[str] = None,
        parent: Optional[Tag] = None,
        description: Optional[str] = None,
    ) -> TagResult[Tag]:
        """
        Create, register and optionally nest a new tag.

        Without a name the tag is called ``<new_tag_prefix>_<uuid>``.
        The parent is checked before anything is registered, so a
        failure leaves the registry unchanged.
        """
        if parent is not None and not self.registry.contains(parent):
            return reject(logger, NotFoundError(tag_name=parent.name, tag_id=parent.tag_id))

        if name is None:
            name = f"{self.config.naming.new_tag_prefix}_{uuid.uuid4()}"

        tag = Tag(name=name, description=description)
        result = self.registry.register(tag)
        if not result.ok or parent is None:
            return result

        linked = self.hierarchy.add_child(parent, tag)
        if not linked.ok:
            self.registry.unregister(tag)
        return linked

    def rename_tag(self, tag: Optional[Tag], new_name: str) -> TagResult[Tag]:
        return self.registry.rename(tag, new_name)

    def find(self, name: str) -> Optional[Tag]:
        """Look up a tag by exact name, None if absent."""
        return self.registry.lookup_by_name(name).value

    def remove_tag(self, tag: Optional[Tag], cascade: bool = True) -> TagResult[Tag]:
        """
        Remove a tag from the library.

        Args:
            tag: Tag to remove
            cascade: Detach hierarchy links and unassign the tag from every
                entity first. If False and references remain, removal is
                blocked with TagInUseError.
        """
        if tag is None:
            return reject(logger, NullArgumentError("tag", operation="remove_tag"))

        if not self.registry.contains(tag):
            return reject(logger, NotFoundError(tag_name=tag.name, tag_id=tag.tag_id))

        holders = [t for t in self._taggables.values() if t.has_tag(tag)]
        linked = (
            tag.parent_id is not None
            or bool(tag.child_ids)
            or any(tag.tag_id in other.child_ids for other in self.registry.tags)
        )

        if not cascade and (holders or linked):
            return reject(logger, TagInUseError(
                tag.name, entity_ids=[t.entity_id for t in holders], linked=linked
            ))

        for taggable in holders:
            taggable.remove_tag(tag)
        if linked:
            self.hierarchy.detach(tag)

        return self.registry.unregister(tag)

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def taggable(self, entity_id: str) -> Taggable:
        """Get the association for an entity, creating it on first use."""
        taggable = self._taggables.get(entity_id)
        if taggable is None:
            taggable = Taggable(entity_id, self.registry)
            self._taggables[entity_id] = taggable
        return taggable

    def drop_taggable(self, entity_id: str) -> bool:
        """Forget an entity and its assignments."""
        return self._taggables.pop(entity_id, None) is not None

    @property
    def taggables(self) -> List[Taggable]:
        return list(self._taggables.values())

    def entities_with(self, tag: Tag, include_descendants: bool = False) -> List[str]:
        """
        Entity IDs carrying ``tag``.

        With include_descendants, an entity tagged "Boss" also counts
        for its ancestor "Enemy".
        """
        wanted = {tag.tag_id}
        if include_descendants:
            wanted.update(d.tag_id for d in self.hierarchy.descendants_of(tag))

        return [
            entity_id for entity_id, taggable in self._taggables.items()
            if any(t.tag_id in wanted for t in taggable.tags)
        ]

    def tag_report(self) -> Dict[str, List[str]]:
        """
        Entity ID -> names of assigned tags.

        Entities without tags are left out, matching what save() persists.
        """
        return {
            entity_id: [t.name for t in taggable.tags]
            for entity_id, taggable in self._taggables.items()
            if len(taggable)
        }

    def __repr__(self) -> str:
        return f"TagLibrary(tags={len(self.registry)}, entities={len(self._taggables)})"
