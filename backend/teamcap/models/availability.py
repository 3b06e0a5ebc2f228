"""Weekly availability and daily attendance models."""
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamcap.database import Base


class WeeklyAvailability(Base):
    """Availability of one member in one week of an iteration."""

    __tablename__ = "weekly_availability"
    __table_args__ = (
        UniqueConstraint("iteration_id", "week_index", "member_id", name="uq_weekly_availability_cell"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    iteration_id: Mapped[int] = mapped_column(
        ForeignKey("capacity_iterations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    week_index: Mapped[int] = mapped_column(Integer, nullable=False)
    member_id: Mapped[int] = mapped_column(
        ForeignKey("capacity_members.id", ondelete="CASCADE"),
        nullable=False,
    )
    availability_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=100)
    days_present: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    days_total: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    days: Mapped[list["DailyAttendance"]] = relationship(
        "DailyAttendance",
        back_populates="availability",
        cascade="all, delete-orphan",
        order_by="DailyAttendance.day",
    )


class DailyAttendance(Base):
    """Present/absent mark for one working day behind a weekly availability row."""

    __tablename__ = "daily_attendance"
    __table_args__ = (UniqueConstraint("availability_id", "day", name="uq_daily_attendance_day"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    availability_id: Mapped[int] = mapped_column(
        ForeignKey("weekly_availability.id", ondelete="CASCADE"),
        nullable=False,
    )
    day: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(1), nullable=False)  # P | A

    availability: Mapped["WeeklyAvailability"] = relationship("WeeklyAvailability", back_populates="days")
