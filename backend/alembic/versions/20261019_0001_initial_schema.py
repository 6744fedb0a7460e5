"""initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "auth",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_auth_created_at", "auth", ["created_at"], unique=False)

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(["id"], ["auth.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_profiles_username", "user_profiles", ["username"], unique=True)

    op.create_table(
        "lunch_places",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("owner_id", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_lunch_places_name", "lunch_places", ["name"], unique=True)
    op.create_index("ix_lunch_places_created_at", "lunch_places", ["created_at"], unique=False)

    op.create_table(
        "lunch_proposals",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("place_id", sa.String(length=32), nullable=False),
        sa.Column("channel", sa.String(length=255), nullable=True),
        sa.Column("owner_id", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["place_id"], ["lunch_places.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_lunch_proposals_place_id", "lunch_proposals", ["place_id"], unique=False)
    op.create_index("ix_lunch_proposals_created_at", "lunch_proposals", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_lunch_proposals_created_at", table_name="lunch_proposals")
    op.drop_index("ix_lunch_proposals_place_id", table_name="lunch_proposals")
    op.drop_table("lunch_proposals")
    op.drop_index("ix_lunch_places_created_at", table_name="lunch_places")
    op.drop_index("ix_lunch_places_name", table_name="lunch_places")
    op.drop_table("lunch_places")
    op.drop_index("ix_user_profiles_username", table_name="user_profiles")
    op.drop_table("user_profiles")
    op.drop_index("ix_auth_created_at", table_name="auth")
    op.drop_table("auth")
