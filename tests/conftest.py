"""
Shared pytest fixtures for tag system tests.

Provides registries, sample tags, in-memory DuckDB stores and
reusable libraries for unit tests.
"""

import pytest
from typing import Dict
from unittest.mock import MagicMock

from tag_system.config import HierarchyConfig, TagSystemConfig
from tag_system.db import TagStore, get_connection
from tag_system.library import TagLibrary
from tag_system.tags import Tag, TagHierarchy, TagRegistry, Taggable


# =============================================================================
# Registry Fixtures
# =============================================================================

@pytest.fixture
def registry() -> TagRegistry:
    """Create an empty TagRegistry."""
    return TagRegistry()


@pytest.fixture
def sample_tags() -> Dict[str, Tag]:
    """Create unregistered tags keyed by name."""
    return {name: Tag(name) for name in ("Enemy", "Boss", "Minion", "Friendly", "Npc")}


@pytest.fixture
def populated_registry(registry, sample_tags) -> TagRegistry:
    """Create a registry holding every sample tag."""
    for tag in sample_tags.values():
        registry.register(tag)
    return registry


@pytest.fixture
def on_added(registry) -> MagicMock:
    """Mock callback subscribed to tag_added."""
    callback = MagicMock()
    registry.on_tag_added.subscribe(callback)
    return callback


@pytest.fixture
def on_removed(registry) -> MagicMock:
    """Mock callback subscribed to tag_removed."""
    callback = MagicMock()
    registry.on_tag_removed.subscribe(callback)
    return callback


# =============================================================================
# Hierarchy Fixtures
# =============================================================================

@pytest.fixture
def hierarchy(populated_registry) -> TagHierarchy:
    """Create a strict hierarchy (cycles rejected, old parents pruned)."""
    return TagHierarchy(populated_registry)


@pytest.fixture
def permissive_hierarchy(populated_registry) -> TagHierarchy:
    """Create a hierarchy that accepts cycles and keeps stale child entries."""
    return TagHierarchy(
        populated_registry,
        HierarchyConfig(enforce_acyclic=False, prune_previous_parent=False),
    )


# =============================================================================
# Taggable Fixtures
# =============================================================================

@pytest.fixture
def taggable(populated_registry) -> Taggable:
    """Create an association bound to the populated registry."""
    return Taggable("goblin-king", populated_registry)


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def in_memory_conn():
    """Create an in-memory DuckDB connection with schema."""
    conn = get_connection(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def store(in_memory_conn) -> TagStore:
    """Create a TagStore on the in-memory connection."""
    return TagStore(in_memory_conn)


@pytest.fixture
def library(store) -> TagLibrary:
    """Create a TagLibrary backed by the in-memory store."""
    return TagLibrary(config=TagSystemConfig(), store=store)
