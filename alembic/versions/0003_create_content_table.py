"""Create content table

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-19 09:10:00.000000

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0003"
down_revision: Union[str, Sequence[str], None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE IF NOT EXISTS content (
            id SERIAL PRIMARY KEY,
            title VARCHAR(255) NOT NULL,
            description TEXT,
            url VARCHAR(512) NOT NULL,
            thumbnail_url VARCHAR(512),
            type VARCHAR(20) NOT NULL DEFAULT 'video'
                CHECK (type IN ('video', 'document', 'image', 'other')),
            is_public BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );

        DROP TRIGGER IF EXISTS content_updated_at_trigger ON content;
        CREATE TRIGGER content_updated_at_trigger
            BEFORE UPDATE ON content
            FOR EACH ROW
            EXECUTE FUNCTION set_updated_at();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("""
        DROP TRIGGER IF EXISTS content_updated_at_trigger ON content;
        DROP TABLE IF EXISTS content;
    """)
