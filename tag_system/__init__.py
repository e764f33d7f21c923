"""
Tag System

Named, hierarchical tags and their assignment to entities.

Modules:
    core/       - Observer lists, result values, exceptions
    tags/       - Tag record, registry, hierarchy, entity associations
    db/         - DuckDB persistence (TagStore)
    library     - TagLibrary: owning application with load/save and cascade
    config      - Dataclass configuration loaded from JSON
"""

from tag_system.tags import Tag, TagRegistry, TagHierarchy, Taggable, available_tags
from tag_system.core import Observers, TagResult
from tag_system.db import TagStore, get_connection
from tag_system.library import TagLibrary

__version__ = "0.1.0"

__all__ = [
    "Tag",
    "TagRegistry",
    "TagHierarchy",
    "Taggable",
    "available_tags",
    "Observers",
    "TagResult",
    "TagStore",
    "get_connection",
    "TagLibrary",
]
