"""Iteration-level capacity member model."""
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamcap.database import Base


class CapacityMember(Base):
    """One person's leave and availability within one iteration."""

    __tablename__ = "capacity_members"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    iteration_id: Mapped[int] = mapped_column(
        ForeignKey("capacity_iterations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    stakeholder_id: Mapped[int | None] = mapped_column(
        ForeignKey("stakeholders.id", ondelete="SET NULL"),
        nullable=True,
    )
    team_id: Mapped[int | None] = mapped_column(ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    member_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False, default="Team Member")
    work_mode: Mapped[str] = mapped_column(String(20), nullable=False, default="office")  # office | wfh | hybrid
    leaves: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=0)
    availability_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=100)
    effective_capacity_days: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False, default=0)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    iteration: Mapped["CapacityIteration"] = relationship("CapacityIteration", back_populates="members")
