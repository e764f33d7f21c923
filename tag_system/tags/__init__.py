"""
Tag model and in-memory operations.

Contains:
    - Tag: Tag record
    - TagRegistry: Name-unique tag collection with notifications
    - TagHierarchy: Parent/child links and descendant queries
    - Taggable: Entity-to-tags association
    - available_tags: Filtered view of assignable tags
"""

from tag_system.tags.tag import Tag, new_tag_id, is_valid_name
from tag_system.tags.registry import TagRegistry
from tag_system.tags.hierarchy import TagHierarchy
from tag_system.tags.taggable import Taggable, available_tags

__all__ = [
    "Tag",
    "new_tag_id",
    "is_valid_name",
    "TagRegistry",
    "TagHierarchy",
    "Taggable",
    "available_tags",
]
