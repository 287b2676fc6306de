"""create reservations table

Reservations move through pending -> approved/rejected -> completed.
Status transitions are compare-and-set updates keyed on (id, status).

Revision ID: 8b27d4c05e6f
Revises: 3f1c9a7e2b10
Create Date: 2026-10-12 10:02:55.180344

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "8b27d4c05e6f"
down_revision: Union[str, Sequence[str], None] = "3f1c9a7e2b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "reservations",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("student_id", sa.String(length=255), nullable=False),
        sa.Column("equipment_name", sa.String(length=255), nullable=False),
        sa.Column("equipment_category", sa.String(length=100), nullable=False),
        sa.Column("reservation_date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.String(length=50), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["users.id"],
            name="fk_reservations_student_id",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'completed')",
            name="ck_reservations_status",
        ),
    )
    op.create_index(
        "idx_reservations_student_created",
        "reservations",
        ["student_id", "created_at"],
    )
    op.create_index(
        op.f("ix_reservations_created_at"), "reservations", ["created_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_reservations_created_at"), table_name="reservations")
    op.drop_index("idx_reservations_student_created", table_name="reservations")
    op.drop_table("reservations")
