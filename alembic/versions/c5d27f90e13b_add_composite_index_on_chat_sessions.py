"""add composite index on chat_sessions (user_id, updated_at)

Revision ID: c5d27f90e13b
Revises: 8b0e4d61c2a7
Create Date: 2026-10-12

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c5d27f90e13b"
down_revision: str | Sequence[str] | None = "8b0e4d61c2a7"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Index used by the per-user session list."""
    op.create_index(
        "ix_chat_sessions_user_id_updated_at",
        "chat_sessions",
        ["user_id", "updated_at"],
    )


def downgrade() -> None:
    """Drop the composite index."""
    op.drop_index("ix_chat_sessions_user_id_updated_at", table_name="chat_sessions")
