"""Capacity iteration model."""
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamcap.database import Base


class CapacityIteration(Base):
    """Time-boxed iteration (sprint) with its committed work."""

    __tablename__ = "capacity_iterations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    team_id: Mapped[int | None] = mapped_column(ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Derived from start/end on every write; stored for querying only
    working_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    committed_points: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    weeks_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    members: Mapped[list["CapacityMember"]] = relationship(
        "CapacityMember",
        back_populates="iteration",
        cascade="all, delete-orphan",
    )
