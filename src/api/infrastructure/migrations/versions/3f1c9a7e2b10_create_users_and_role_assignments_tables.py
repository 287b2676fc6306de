"""create users and role assignments tables

Users are provisioned just-in-time from identity provider claims. Each user
holds at most one role assignment; the table is keyed by user_id so a
second row for the same user cannot exist.

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-12 09:41:07.512803

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7e2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=False)

    op.create_table(
        "role_assignments",
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("assigned_by", sa.String(length=255), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_role_assignments_user_id",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("user_id"),
        sa.CheckConstraint(
            "role IN ('student', 'staff', 'admin')",
            name="ck_role_assignments_role",
        ),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("role_assignments")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
