"""SQLAlchemy ORM model for the reservations table."""

from datetime import date

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin
from infrastructure.settings import NOTES_COLUMN_LENGTH, TIME_SLOT_COLUMN_LENGTH


class ReservationModel(Base, TimestampMixin):
    """ORM model for reservations table.

    Equipment name and category are copied from the catalog at submission
    so that later catalog edits do not rewrite history.
    """

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'completed')",
            name="ck_reservations_status",
        ),
        Index("idx_reservations_student_created", "student_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    student_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    equipment_name: Mapped[str] = mapped_column(String(255), nullable=False)
    equipment_category: Mapped[str] = mapped_column(String(100), nullable=False)
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False)
    time_slot: Mapped[str] = mapped_column(
        String(TIME_SLOT_COLUMN_LENGTH), nullable=False
    )
    notes: Mapped[str | None] = mapped_column(
        String(NOTES_COLUMN_LENGTH), nullable=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ReservationModel(id={self.id}, status={self.status})>"
