"""
Unit tests for TagLibrary.

Tests tag creation, cascade removal, entity queries and
load/save through an in-memory store.
"""

import pytest
from unittest.mock import MagicMock

from tag_system.config import HierarchyConfig, NamingConfig, StorageConfig, TagSystemConfig
from tag_system.core.exceptions import (
    DuplicateNameError,
    NotFoundError,
    NullArgumentError,
    TagCycleError,
    TagInUseError,
)
from tag_system.library import TagLibrary
from tag_system.tags import Tag


@pytest.fixture
def game(library):
    """Library with Enemy > Boss, Enemy > Minion and Friendly, plus two entities."""
    enemy = library.create_tag("Enemy").unwrap()
    boss = library.create_tag("Boss", parent=enemy).unwrap()
    minion = library.create_tag("Minion", parent=enemy).unwrap()
    friendly = library.create_tag("Friendly").unwrap()

    library.taggable("goblin-king").add_tags([boss, friendly])
    library.taggable("grunt").add_tag(minion)
    return library


class TestCreateTag:
    """Test TagLibrary.create_tag."""

    def test_create_named_tag(self, library):
        """Test the tag is registered under its name."""
        result = library.create_tag("Enemy", description="Hostile")

        assert result.ok
        assert library.find("Enemy") is result.value
        assert result.value.description == "Hostile"

    def test_create_default_name(self):
        """Test unnamed tags get a unique prefixed name."""
        library = TagLibrary(TagSystemConfig(naming=NamingConfig(new_tag_prefix="Tag")))

        first = library.create_tag().unwrap()
        second = library.create_tag().unwrap()

        assert first.name.startswith("Tag_")
        assert first.name != second.name

    def test_create_with_parent(self, library):
        """Test the new tag is nested under its parent."""
        enemy = library.create_tag("Enemy").unwrap()
        boss = library.create_tag("Boss", parent=enemy).unwrap()

        assert library.hierarchy.descendants_of(enemy) == [boss]

    def test_create_duplicate(self, library):
        """Test duplicate names are reported."""
        library.create_tag("Enemy")

        result = library.create_tag("Enemy")

        assert isinstance(result.error, DuplicateNameError)
        assert len(library.registry) == 1

    def test_create_with_unregistered_parent(self, library):
        """Test an unknown parent fails without registering the tag."""
        on_added = MagicMock()
        library.registry.on_tag_added.subscribe(on_added)

        result = library.create_tag("Boss", parent=Tag("Ghost"))

        assert isinstance(result.error, NotFoundError)
        assert library.find("Boss") is None
        assert len(library.registry) == 0
        on_added.assert_not_called()

    def test_retry_after_failed_parent(self, library):
        """Test the same name can be created once a valid parent is given."""
        library.create_tag("Boss", parent=Tag("Ghost"))
        enemy = library.create_tag("Enemy").unwrap()

        result = library.create_tag("Boss", parent=enemy)

        assert result.ok
        assert result.value.parent_id == enemy.tag_id

    def test_rename_tag(self, game):
        """Test rename goes through the registry index."""
        boss = game.find("Boss")

        assert game.rename_tag(boss, "Overlord").ok
        assert game.find("Overlord") is boss
        assert game.tag_report()["goblin-king"] == ["Overlord", "Friendly"]


class TestRemoveTag:
    """Test cascade and blocked removal."""

    def test_cascade_removes_references(self, game):
        """Test removal unassigns the tag and cuts its links."""
        enemy, boss, minion = game.find("Enemy"), game.find("Boss"), game.find("Minion")

        result = game.remove_tag(enemy)

        assert result.ok
        assert game.find("Enemy") is None
        assert boss.parent_id is None
        assert minion.parent_id is None
        assert game.hierarchy.roots() == [boss, minion, game.find("Friendly")]

    def test_cascade_unassigns(self, game):
        """Test entities lose the removed tag."""
        boss = game.find("Boss")

        game.remove_tag(boss)

        assert not game.taggable("goblin-king").has_tag(boss)
        assert game.find("Enemy").child_ids == [game.find("Minion").tag_id]

    def test_blocked_when_in_use(self, game):
        """Test removal without cascade is refused while referenced."""
        boss = game.find("Boss")

        result = game.remove_tag(boss, cascade=False)

        assert isinstance(result.error, TagInUseError)
        assert result.error.entity_ids == ["goblin-king"]
        assert result.error.linked
        assert game.find("Boss") is boss

    def test_unreferenced_removed_without_cascade(self, library):
        """Test an unused tag can be removed without cascade."""
        lonely = library.create_tag("Lonely").unwrap()

        assert library.remove_tag(lonely, cascade=False).ok
        assert len(library.registry) == 0

    def test_remove_unknown(self, library):
        """Test removing an unregistered tag reports NotFoundError."""
        assert isinstance(library.remove_tag(Tag("Ghost")).error, NotFoundError)

    def test_remove_none(self, library):
        """Test removing None reports a missing argument."""
        assert isinstance(library.remove_tag(None).error, NullArgumentError)

    def test_remove_notifies(self, game):
        """Test registry subscribers hear about cascade removals."""
        removed = []
        game.registry.on_tag_removed.subscribe(removed.append)
        boss = game.find("Boss")

        game.remove_tag(boss)

        assert removed == [boss]


class TestEntities:
    """Test entity associations and queries."""

    def test_taggable_is_reused(self, library):
        """Test the same association is returned per entity."""
        assert library.taggable("goblin") is library.taggable("goblin")
        assert library.taggable("goblin").registry is library.registry

    def test_drop_taggable(self, game):
        """Test forgetting an entity."""
        assert game.drop_taggable("grunt")
        assert not game.drop_taggable("grunt")
        assert "grunt" not in game.tag_report()

    def test_entities_with(self, game):
        """Test direct tag queries."""
        assert game.entities_with(game.find("Boss")) == ["goblin-king"]
        assert game.entities_with(game.find("Enemy")) == []

    def test_entities_with_descendants(self, game):
        """Test ancestors match entities tagged with their descendants."""
        enemy = game.find("Enemy")
        assert game.entities_with(enemy, include_descendants=True) == ["goblin-king", "grunt"]

    def test_tag_report(self, game):
        """Test the report lists every entity with its tag names."""
        assert game.tag_report() == {
            "goblin-king": ["Boss", "Friendly"],
            "grunt": ["Minion"],
        }


class TestPersistence:
    """Test load/save through the store."""

    def test_save_and_load(self, game, store):
        """Test a fresh library restores tags, links and assignments."""
        game.save()

        restored = TagLibrary(store=store)
        restored.load()

        enemy = restored.find("Enemy")
        assert [t.name for t in restored.hierarchy.descendants_of(enemy)] == ["Boss", "Minion"]
        assert restored.tag_report() == game.tag_report()
        assert restored.find("Boss").tag_id == game.find("Boss").tag_id

    def test_load_drops_unknown_assignments(self, store):
        """Test assignments to missing tags are skipped."""
        tag = Tag("Enemy")
        store.save_tag(tag)
        store.save_assignments("goblin", [tag.tag_id, "missing"])

        library = TagLibrary(store=store)
        library.load()

        assert library.tag_report() == {"goblin": ["Enemy"]}

    def test_load_replaces_memory(self, game, store):
        """Test load discards unsaved in-memory changes."""
        game.save()
        game.create_tag("Unsaved")
        game.taggable("newcomer")

        game.load()

        assert game.find("Unsaved") is None
        assert "newcomer" not in game.tag_report()

    def test_untagged_entities_skipped(self, game, store):
        """Test entities without tags are neither reported nor persisted."""
        game.taggable("bare")
        assert "bare" not in game.tag_report()

        game.save()

        assert "bare" not in store.load_assignments()
        restored = TagLibrary(store=store)
        restored.load()
        assert restored.tag_report() == game.tag_report()

    def test_without_store(self):
        """Test load/save are no-ops without a store."""
        library = TagLibrary()
        library.create_tag("Enemy")

        library.save()
        library.load()

        assert library.find("Enemy") is not None

    def test_from_config(self, tmp_path):
        """Test building a library from configuration opens the store."""
        config = TagSystemConfig(storage=StorageConfig(db_path=str(tmp_path / "db" / "tags.duckdb")))
        config.logging.console = False

        library = TagLibrary.from_config(config)
        library.create_tag("Enemy")
        library.save()
        library.close()

        reopened = TagLibrary.from_config(config)
        try:
            assert reopened.find("Enemy") is not None
        finally:
            reopened.close()


class TestHierarchyPolicy:
    """Test that the library passes hierarchy config through."""

    def test_strict_by_default(self, game):
        """Test cycles are rejected with default config."""
        result = game.hierarchy.add_child(game.find("Boss"), game.find("Enemy"))
        assert isinstance(result.error, TagCycleError)

    def test_permissive_config(self):
        """Test cycles are accepted when enforcement is disabled."""
        library = TagLibrary(TagSystemConfig(hierarchy=HierarchyConfig(enforce_acyclic=False)))
        a = library.create_tag("A").unwrap()
        b = library.create_tag("B", parent=a).unwrap()

        assert library.hierarchy.add_child(b, a).ok
        assert library.hierarchy.descendants_of(a) == [b]
