"""Create subscriptions table

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 09:05:00.000000

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE IF NOT EXISTS subscriptions (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id),
            plan_type VARCHAR(64) NOT NULL,
            status VARCHAR(20) NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'active', 'expired', 'cancelled')),
            payment_id VARCHAR(255) UNIQUE,
            pix_code TEXT,
            pix_qr_code TEXT,
            amount INTEGER NOT NULL CHECK (amount >= 0),
            expires_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );

        -- Access checks always read a user's newest subscription
        CREATE INDEX IF NOT EXISTS idx_subscriptions_user_created
            ON subscriptions(user_id, created_at DESC);

        DROP TRIGGER IF EXISTS subscriptions_updated_at_trigger ON subscriptions;
        CREATE TRIGGER subscriptions_updated_at_trigger
            BEFORE UPDATE ON subscriptions
            FOR EACH ROW
            EXECUTE FUNCTION set_updated_at();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("""
        DROP TRIGGER IF EXISTS subscriptions_updated_at_trigger ON subscriptions;
        DROP INDEX IF EXISTS idx_subscriptions_user_created;
        DROP TABLE IF EXISTS subscriptions;
    """)
