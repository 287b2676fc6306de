"""SQLAlchemy ORM model for the role_assignments table."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class RoleAssignmentModel(Base):
    """ORM model for role_assignments table.

    Keyed by user_id: a user can never hold two rows.
    """

    __tablename__ = "role_assignments"
    __table_args__ = (
        CheckConstraint(
            "role IN ('student', 'staff', 'admin')",
            name="ck_role_assignments_role",
        ),
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    assigned_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<RoleAssignmentModel(user_id={self.user_id}, role={self.role})>"
