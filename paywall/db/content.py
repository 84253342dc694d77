"""Database operations for the content catalog."""

import logging
from typing import Optional

from psycopg import sql

from paywall.models.content import Content, ContentCreate, ContentUpdate
from .connection import get_db_cursor, degrade_when_unavailable

logger = logging.getLogger(__name__)

CONTENT_COLUMNS = """
    id, title, description, url, thumbnail_url, type, is_public,
    created_at, updated_at
"""


@degrade_when_unavailable([])
def get_all_content() -> list[Content]:
    """Get every catalog item, newest first."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"SELECT {CONTENT_COLUMNS} FROM content ORDER BY created_at DESC, id DESC"
        )
        rows = cursor.fetchall()
        return [_row_to_content(row) for row in rows]


@degrade_when_unavailable([])
def get_public_content() -> list[Content]:
    """Get catalog items flagged public, newest first."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            SELECT {CONTENT_COLUMNS}
            FROM content
            WHERE is_public
            ORDER BY created_at DESC, id DESC
            """
        )
        rows = cursor.fetchall()
        return [_row_to_content(row) for row in rows]


@degrade_when_unavailable(None)
def get_content_by_id(content_id: int) -> Optional[Content]:
    """Get a single catalog item."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"SELECT {CONTENT_COLUMNS} FROM content WHERE id = %s",
            (content_id,),
        )
        row = cursor.fetchone()
        return _row_to_content(row) if row else None


def create_content(new_content: ContentCreate) -> Content:
    """Insert a catalog item and return it as stored."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            INSERT INTO content (title, description, url, thumbnail_url, type, is_public)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {CONTENT_COLUMNS}
            """,
            (
                new_content.title,
                new_content.description,
                new_content.url,
                new_content.thumbnail_url,
                new_content.type,
                new_content.is_public,
            ),
        )
        row = cursor.fetchone()
        created = _row_to_content(row)
        logger.info(f"Created content id={created.id} ({created.type})")
        return created


def update_content(content_id: int, changes: ContentUpdate) -> Optional[Content]:
    """Apply a partial update to a catalog item.

    Only fields explicitly set to a non-null value on `changes` are written.

    Returns:
        The updated Content, or None if no item has that ID.
    """
    values = changes.model_dump(exclude_unset=True, exclude_none=True)
    if not values:
        return get_content_by_id(content_id)

    assignments = sql.SQL(", ").join(
        sql.SQL("{} = %s").format(sql.Identifier(column)) for column in values
    )
    query = sql.SQL(
        "UPDATE content SET {assignments} WHERE id = %s RETURNING {columns}"
    ).format(assignments=assignments, columns=sql.SQL(CONTENT_COLUMNS))

    with get_db_cursor() as cursor:
        cursor.execute(query, (*values.values(), content_id))
        row = cursor.fetchone()
        if row is None:
            return None
        logger.info(f"Updated content id={content_id}: {sorted(values)}")
        return _row_to_content(row)


def delete_content(content_id: int) -> bool:
    """Delete a catalog item.

    Returns:
        True if an item was deleted, False if no item has that ID.
    """
    with get_db_cursor() as cursor:
        cursor.execute("DELETE FROM content WHERE id = %s", (content_id,))
        deleted = cursor.rowcount > 0
    if deleted:
        logger.info(f"Deleted content id={content_id}")
    return deleted


def _row_to_content(row) -> Content:
    """Convert a database row to a Content object."""
    (
        id,
        title,
        description,
        url,
        thumbnail_url,
        type,
        is_public,
        created_at,
        updated_at,
    ) = row
    return Content(
        id=id,
        title=title,
        description=description,
        url=url,
        thumbnail_url=thumbnail_url,
        type=type,
        is_public=is_public,
        created_at=created_at,
        updated_at=updated_at,
    )
