"""
Tag store: DuckDB persistence for tags, hierarchy links and assignments.

The store is invoked by the registry's owner (TagLibrary), never by the
registry itself.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Sequence

import duckdb

from tag_system.core.exceptions import TagStoreError
from tag_system.tags.tag import Tag
from tag_system.utils.logging_config import get_logger

logger = get_logger("tag_store")


class TagStore:
    """
    Load and persist tag records on a DuckDB connection.

    Usage:
        store = TagStore(get_connection(":memory:"))
        store.save_tag(Tag("Enemy"))
        tags = store.load_tags()

    Raises:
        TagStoreError: On any database failure
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        self.conn = conn

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def load_tags(self) -> List[Tag]:
        """Load all tags in stored order, with parent and child links."""
        try:
            rows = self.conn.execute("""
                SELECT tag_id, name, description, parent_id, created_at, updated_at
                FROM TagNode
                ORDER BY sort_order, name
            """).fetchall()

            edge_rows = self.conn.execute("""
                SELECT parent_id, child_id
                FROM TagEdge
                ORDER BY parent_id, sort_order
            """).fetchall()
        except duckdb.Error as e:
            raise TagStoreError(
                "Failed to load tags", table="TagNode", operation="load", original_error=e
            ) from e

        children: Dict[str, List[str]] = {}
        for parent_id, child_id in edge_rows:
            children.setdefault(parent_id, []).append(child_id)

        tags = [
            Tag(
                tag_id=r[0],
                name=r[1],
                description=r[2],
                parent_id=r[3],
                child_ids=children.get(r[0], []),
                created_at=r[4],
                updated_at=r[5],
            )
            for r in rows
        ]

        logger.debug(f"Loaded {len(tags)} tags and {len(edge_rows)} edges")
        return tags

    def save_tag(self, tag: Tag) -> None:
        """Insert or update one tag and replace its child links."""
        try:
            row = self.conn.execute(
                "SELECT sort_order FROM TagNode WHERE tag_id = ?", [tag.tag_id]
            ).fetchone()
            if row:
                sort_order = row[0]
            else:
                sort_order = self.conn.execute(
                    "SELECT COALESCE(MAX(sort_order), -1) + 1 FROM TagNode"
                ).fetchone()[0]

            self._write_tag(tag, sort_order)
        except duckdb.Error as e:
            raise TagStoreError(
                f"Failed to save tag '{tag.name}'",
                table="TagNode", operation="save", original_error=e
            ) from e

        logger.debug(f"Saved tag: {tag.name} (ID: {tag.tag_id})")

    def delete_tag(self, tag_id: str) -> bool:
        """
        Delete a tag, its edges and its assignments.

        Returns:
            True if deleted, False if the tag was not stored
        """
        try:
            exists = self.conn.execute(
                "SELECT 1 FROM TagNode WHERE tag_id = ?", [tag_id]
            ).fetchone()
            if not exists:
                return False

            self.conn.execute(
                "DELETE FROM TagEdge WHERE parent_id = ? OR child_id = ?", [tag_id, tag_id]
            )
            self.conn.execute("DELETE FROM TagAssignment WHERE tag_id = ?", [tag_id])
            self.conn.execute("DELETE FROM TagNode WHERE tag_id = ?", [tag_id])
        except duckdb.Error as e:
            raise TagStoreError(
                f"Failed to delete tag {tag_id}",
                table="TagNode", operation="delete", original_error=e
            ) from e

        logger.debug(f"Deleted tag ID: {tag_id}")
        return True

    # -------------------------------------------------------------------------
    # Assignments
    # -------------------------------------------------------------------------

    def load_assignments(self) -> Dict[str, List[str]]:
        """Load entity ID -> assigned tag IDs, in assignment order."""
        try:
            rows = self.conn.execute("""
                SELECT entity_id, tag_id
                FROM TagAssignment
                ORDER BY entity_id, sort_order
            """).fetchall()
        except duckdb.Error as e:
            raise TagStoreError(
                "Failed to load assignments",
                table="TagAssignment", operation="load", original_error=e
            ) from e

        assignments: Dict[str, List[str]] = {}
        for entity_id, tag_id in rows:
            assignments.setdefault(entity_id, []).append(tag_id)
        return assignments

    def save_assignments(self, entity_id: str, tag_ids: Sequence[str]) -> None:
        """Replace the stored assignments of one entity."""
        try:
            self._write_assignments(entity_id, tag_ids)
        except duckdb.Error as e:
            raise TagStoreError(
                f"Failed to save assignments for '{entity_id}'",
                table="TagAssignment", operation="save", original_error=e
            ) from e

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def save_snapshot(
        self,
        tags: Iterable[Tag],
        assignments: Mapping[str, Sequence[str]],
    ) -> None:
        """
        Replace all stored data in a single transaction.

        On failure the transaction is rolled back and the previous
        contents stay intact.
        """
        tags = list(tags)
        try:
            self.conn.begin()
            self.conn.execute("DELETE FROM TagAssignment")
            self.conn.execute("DELETE FROM TagEdge")
            self.conn.execute("DELETE FROM TagNode")

            for sort_order, tag in enumerate(tags):
                self._write_tag(tag, sort_order)
            for entity_id, tag_ids in assignments.items():
                self._write_assignments(entity_id, tag_ids)

            self.conn.commit()
        except duckdb.Error as e:
            logger.error(f"Snapshot save failed, rolling back: {e}", exc_info=True)
            self.conn.rollback()
            raise TagStoreError(
                "Failed to save snapshot", operation="save_snapshot", original_error=e
            ) from e

        logger.info(f"Saved snapshot: {len(tags)} tags, {len(assignments)} entities")

    def close(self) -> None:
        self.conn.close()

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _write_tag(self, tag: Tag, sort_order: int) -> None:
        self.conn.execute("DELETE FROM TagNode WHERE tag_id = ?", [tag.tag_id])
        self.conn.execute(
            """
            INSERT INTO TagNode (
                tag_id, name, description, parent_id, sort_order, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                tag.tag_id, tag.name, tag.description, tag.parent_id,
                sort_order, tag.created_at, tag.updated_at or datetime.now(),
            ]
        )

        self.conn.execute("DELETE FROM TagEdge WHERE parent_id = ?", [tag.tag_id])
        for i, child_id in enumerate(dict.fromkeys(tag.child_ids)):
            self.conn.execute(
                "INSERT INTO TagEdge (parent_id, child_id, sort_order) VALUES (?, ?, ?)",
                [tag.tag_id, child_id, i]
            )

    def _write_assignments(self, entity_id: str, tag_ids: Sequence[str]) -> None:
        self.conn.execute("DELETE FROM TagAssignment WHERE entity_id = ?", [entity_id])
        for i, tag_id in enumerate(dict.fromkeys(tag_ids)):
            self.conn.execute(
                "INSERT INTO TagAssignment (entity_id, tag_id, sort_order) VALUES (?, ?, ?)",
                [entity_id, tag_id, i]
            )
