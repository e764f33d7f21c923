"""
Tag record.

Tags are identified by a surrogate ``tag_id`` so that renaming never
breaks references. Parent and child links are stored as identifiers and
resolved through a TagRegistry.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


def new_tag_id() -> str:
    """Generate a new surrogate tag identifier."""
    return uuid.uuid4().hex


def is_valid_name(name: Optional[str]) -> bool:
    """A tag name must be a non-empty string that is not only whitespace."""
    return isinstance(name, str) and bool(name.strip())


@dataclass(eq=False)
class Tag:
    """
    A named, optionally hierarchical label.

    Compares and hashes by identity: two Tag objects with the same
    fields are still different tags.
    """

    name: str
    tag_id: str = field(default_factory=new_tag_id)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    child_ids: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def touch(self) -> None:
        self.updated_at = datetime.now()

    def __repr__(self) -> str:
        return f"Tag({self.name!r}, tag_id={self.tag_id!r})"
