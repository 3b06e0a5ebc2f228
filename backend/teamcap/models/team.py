"""Team template models."""
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamcap.database import Base


class Team(Base):
    """Named, reusable snapshot of an iteration's composition."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    project_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Provenance only; the template never reads back from this iteration
    source_iteration_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    definitions: Mapped[list["TeamDefinition"]] = relationship(
        "TeamDefinition",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="TeamDefinition.id",
    )


class TeamDefinition(Base):
    """Per-person defaults captured by value when the team was saved."""

    __tablename__ = "team_definitions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    # Live reference for display; numeric defaults below are copies
    stakeholder_id: Mapped[int | None] = mapped_column(
        ForeignKey("stakeholders.id", ondelete="SET NULL"),
        nullable=True,
    )
    member_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False, default="Team Member")
    default_availability_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=100)
    default_leaves: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=0)

    team: Mapped["Team"] = relationship("Team", back_populates="definitions")
