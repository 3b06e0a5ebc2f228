"""Persistence collaborators for the capacity engine.

Each store reads and writes plain schema records over an AsyncSession.
Writes are flushed, never committed: the request-scoped session owns the
transaction, so a team and its definitions land together or not at all.
"""
from collections.abc import Iterable, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teamcap.engine.calendar import working_days_between
from teamcap.models.availability import DailyAttendance as DailyAttendanceRow
from teamcap.models.availability import WeeklyAvailability as WeeklyAvailabilityRow
from teamcap.models.iteration import CapacityIteration
from teamcap.models.member import CapacityMember as CapacityMemberRow
from teamcap.models.stakeholder import Stakeholder
from teamcap.models.team import Team as TeamRow
from teamcap.models.team import TeamDefinition as TeamDefinitionRow
from teamcap.schemas.availability import DailyAttendanceDay, WeeklyAvailability
from teamcap.schemas.capacity import CapacityMember
from teamcap.schemas.iteration import Iteration, IterationCreate, IterationUpdate
from teamcap.schemas.team import Team, TeamDefinition, TeamSnapshot
from teamcap.utils.logger import get_logger

logger = get_logger(__name__)

_MEMBER_FIELDS = (
    "iteration_id",
    "stakeholder_id",
    "team_id",
    "member_name",
    "role",
    "work_mode",
    "leaves",
    "availability_percent",
    "effective_capacity_days",
)

# Explicit nulls on these reset them; other nulls mean "unchanged"
_CLEARABLE_ITERATION_FIELDS = {"weeks_count", "team_id"}


class IterationStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, iteration_id: int) -> Iteration | None:
        row = await self.db.get(CapacityIteration, iteration_id)
        return Iteration.model_validate(row) if row else None

    async def list_by_project(self, project_id: int) -> list[Iteration]:
        result = await self.db.execute(
            select(CapacityIteration)
            .where(CapacityIteration.project_id == project_id)
            .order_by(CapacityIteration.start_date.desc())
        )
        return [Iteration.model_validate(r) for r in result.scalars().all()]

    async def list_all(self) -> list[Iteration]:
        result = await self.db.execute(select(CapacityIteration))
        return [Iteration.model_validate(r) for r in result.scalars().all()]

    async def create(self, project_id: int, data: IterationCreate) -> Iteration:
        row = CapacityIteration(
            project_id=project_id,
            team_id=data.team_id,
            name=data.name.strip(),
            start_date=data.start_date,
            end_date=data.end_date,
            working_days=working_days_between(data.start_date, data.end_date),
            committed_points=data.committed_points,
            weeks_count=data.weeks_count,
        )
        self.db.add(row)
        await self.db.flush()
        logger.info("Created iteration %s (%d working days) for project %s", row.id, row.working_days, project_id)
        return Iteration.model_validate(row)

    async def update(self, iteration_id: int, data: IterationUpdate) -> Iteration | None:
        """Apply edits; working_days is re-derived whenever either date is written."""
        row = await self.db.get(CapacityIteration, iteration_id)
        if not row:
            return None
        updates = data.model_dump(exclude_unset=True)
        for k, v in updates.items():
            if v is not None or k in _CLEARABLE_ITERATION_FIELDS:
                setattr(row, k, v)
        row.working_days = working_days_between(row.start_date, row.end_date)
        await self.db.flush()
        return Iteration.model_validate(row)

    async def delete(self, iteration_id: int) -> bool:
        """Remove an iteration with its members and matrix. Teams captured from it are kept."""
        row = await self.db.get(CapacityIteration, iteration_id)
        if not row:
            return False
        cells = select(WeeklyAvailabilityRow.id).where(WeeklyAvailabilityRow.iteration_id == iteration_id)
        await self.db.execute(delete(DailyAttendanceRow).where(DailyAttendanceRow.availability_id.in_(cells)))
        await self.db.execute(delete(WeeklyAvailabilityRow).where(WeeklyAvailabilityRow.iteration_id == iteration_id))
        await self.db.execute(delete(CapacityMemberRow).where(CapacityMemberRow.iteration_id == iteration_id))
        await self.db.delete(row)
        await self.db.flush()
        logger.info("Deleted iteration %s", iteration_id)
        return True


class MemberStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, member_id: int) -> CapacityMember | None:
        row = await self.db.get(CapacityMemberRow, member_id)
        return CapacityMember.model_validate(row) if row else None

    async def list_by_iteration(self, iteration_id: int) -> list[CapacityMember]:
        result = await self.db.execute(
            select(CapacityMemberRow)
            .where(CapacityMemberRow.iteration_id == iteration_id)
            .order_by(CapacityMemberRow.member_name, CapacityMemberRow.id)
        )
        return [CapacityMember.model_validate(r) for r in result.scalars().all()]

    async def list_by_iterations(self, iteration_ids: Sequence[int]) -> list[CapacityMember]:
        if not iteration_ids:
            return []
        result = await self.db.execute(
            select(CapacityMemberRow).where(CapacityMemberRow.iteration_id.in_(iteration_ids))
        )
        return [CapacityMember.model_validate(r) for r in result.scalars().all()]

    async def list_all(self) -> list[CapacityMember]:
        result = await self.db.execute(select(CapacityMemberRow))
        return [CapacityMember.model_validate(r) for r in result.scalars().all()]

    async def upsert(self, member: CapacityMember) -> CapacityMember:
        """Insert when the record has no id, otherwise overwrite the stored row (last write wins)."""
        if member.id is None:
            row = CapacityMemberRow(**{f: getattr(member, f) for f in _MEMBER_FIELDS})
            self.db.add(row)
        else:
            row = await self.db.get(CapacityMemberRow, member.id)
            if not row:
                raise LookupError(f"Capacity member {member.id} not found")
            for f in _MEMBER_FIELDS:
                setattr(row, f, getattr(member, f))
        await self.db.flush()
        return CapacityMember.model_validate(row)

    async def add_many(self, members: Iterable[CapacityMember]) -> list[CapacityMember]:
        rows = [CapacityMemberRow(**{f: getattr(m, f) for f in _MEMBER_FIELDS}) for m in members]
        self.db.add_all(rows)
        await self.db.flush()
        return [CapacityMember.model_validate(r) for r in rows]

    async def delete(self, member_id: int) -> bool:
        row = await self.db.get(CapacityMemberRow, member_id)
        if not row:
            return False
        cells = select(WeeklyAvailabilityRow.id).where(WeeklyAvailabilityRow.member_id == member_id)
        await self.db.execute(delete(DailyAttendanceRow).where(DailyAttendanceRow.availability_id.in_(cells)))
        await self.db.execute(delete(WeeklyAvailabilityRow).where(WeeklyAvailabilityRow.member_id == member_id))
        await self.db.delete(row)
        await self.db.flush()
        return True


class WeeklyAvailabilityStore:
    """Matrix rows keyed by (week_index, member_id) within an iteration."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_by_iteration(self, iteration_id: int) -> list[WeeklyAvailability]:
        result = await self.db.execute(
            select(WeeklyAvailabilityRow)
            .where(WeeklyAvailabilityRow.iteration_id == iteration_id)
            .order_by(WeeklyAvailabilityRow.week_index, WeeklyAvailabilityRow.member_id)
        )
        return [WeeklyAvailability.model_validate(r) for r in result.scalars().all()]

    async def _rows_by_key(self, iteration_id: int) -> dict[tuple[int, int], WeeklyAvailabilityRow]:
        result = await self.db.execute(
            select(WeeklyAvailabilityRow).where(WeeklyAvailabilityRow.iteration_id == iteration_id)
        )
        return {(r.week_index, r.member_id): r for r in result.scalars().all()}

    async def save_rows(self, iteration_id: int, rows: Sequence[WeeklyAvailability]) -> list[WeeklyAvailability]:
        existing = await self._rows_by_key(iteration_id)
        saved = []
        for r in rows:
            row = existing.get((r.week_index, r.member_id))
            if row is None:
                row = WeeklyAvailabilityRow(iteration_id=iteration_id, week_index=r.week_index, member_id=r.member_id)
                self.db.add(row)
                existing[(r.week_index, r.member_id)] = row
            row.availability_percent = r.availability_percent
            row.days_present = r.days_present
            row.days_total = r.days_total
            saved.append(row)
        await self.db.flush()
        logger.info("Saved %d availability rows for iteration %s", len(saved), iteration_id)
        return [WeeklyAvailability.model_validate(r) for r in saved]

    async def get_daily(self, iteration_id: int, week_index: int, member_id: int) -> list[DailyAttendanceDay]:
        result = await self.db.execute(
            select(DailyAttendanceRow)
            .join(WeeklyAvailabilityRow, DailyAttendanceRow.availability_id == WeeklyAvailabilityRow.id)
            .where(
                WeeklyAvailabilityRow.iteration_id == iteration_id,
                WeeklyAvailabilityRow.week_index == week_index,
                WeeklyAvailabilityRow.member_id == member_id,
            )
            .order_by(DailyAttendanceRow.day)
        )
        return [DailyAttendanceDay(day=r.day, status=r.status) for r in result.scalars().all()]

    async def save_daily(
        self,
        iteration_id: int,
        row: WeeklyAvailability,
        days: Sequence[DailyAttendanceDay],
    ) -> WeeklyAvailability:
        """Save the weekly row and replace its day marks."""
        saved = (await self.save_rows(iteration_id, [row]))[0]
        await self.db.execute(delete(DailyAttendanceRow).where(DailyAttendanceRow.availability_id == saved.id))
        self.db.add_all(DailyAttendanceRow(availability_id=saved.id, day=d.day, status=d.status) for d in days)
        await self.db.flush()
        return saved


class TeamStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _add_definitions(self, team_id: int, definitions: Sequence[TeamDefinition]) -> list[TeamDefinitionRow]:
        rows = [
            TeamDefinitionRow(
                team_id=team_id,
                stakeholder_id=d.stakeholder_id,
                member_name=d.member_name,
                role=d.role,
                default_availability_percent=d.default_availability_percent,
                default_leaves=d.default_leaves,
            )
            for d in definitions
        ]
        self.db.add_all(rows)
        await self.db.flush()
        return rows

    async def create(self, snapshot: TeamSnapshot) -> TeamSnapshot:
        team_row = TeamRow(
            project_id=snapshot.team.project_id,
            name=snapshot.team.name,
            description=snapshot.team.description,
            source_iteration_id=snapshot.team.source_iteration_id,
        )
        self.db.add(team_row)
        await self.db.flush()
        def_rows = await self._add_definitions(team_row.id, snapshot.definitions)
        logger.info("Stored team %s with %d definitions", team_row.id, len(def_rows))
        return TeamSnapshot(
            team=Team.model_validate(team_row),
            definitions=[TeamDefinition.model_validate(r) for r in def_rows],
        )

    async def replace(self, snapshot: TeamSnapshot) -> TeamSnapshot | None:
        """Overwrite name, description and the whole definition set of an existing team."""
        team_row = await self.db.get(TeamRow, snapshot.team.id)
        if not team_row:
            return None
        team_row.name = snapshot.team.name
        team_row.description = snapshot.team.description
        await self.db.execute(delete(TeamDefinitionRow).where(TeamDefinitionRow.team_id == team_row.id))
        def_rows = await self._add_definitions(team_row.id, snapshot.definitions)
        logger.info("Re-saved team %s with %d definitions", team_row.id, len(def_rows))
        return TeamSnapshot(
            team=Team.model_validate(team_row),
            definitions=[TeamDefinition.model_validate(r) for r in def_rows],
        )

    async def delete(self, team_id: int) -> bool:
        """Drop a team and its definitions; members and iterations built from it only lose the link."""
        team_row = await self.db.get(TeamRow, team_id)
        if not team_row:
            return False
        await self.db.execute(
            update(CapacityMemberRow).where(CapacityMemberRow.team_id == team_id).values(team_id=None)
        )
        await self.db.execute(
            update(CapacityIteration).where(CapacityIteration.team_id == team_id).values(team_id=None)
        )
        await self.db.execute(delete(TeamDefinitionRow).where(TeamDefinitionRow.team_id == team_id))
        await self.db.delete(team_row)
        await self.db.flush()
        logger.info("Deleted team %s", team_id)
        return True

    async def get(self, team_id: int) -> Team | None:
        row = await self.db.get(TeamRow, team_id)
        return Team.model_validate(row) if row else None

    async def list_by_project(self, project_id: int) -> list[Team]:
        result = await self.db.execute(
            select(TeamRow).where(TeamRow.project_id == project_id).order_by(TeamRow.id.desc())
        )
        return [Team.model_validate(r) for r in result.scalars().all()]

    async def get_definitions(self, team_id: int) -> list[TeamDefinition]:
        result = await self.db.execute(
            select(TeamDefinitionRow).where(TeamDefinitionRow.team_id == team_id).order_by(TeamDefinitionRow.id)
        )
        return [TeamDefinition.model_validate(r) for r in result.scalars().all()]

    async def names(self, team_ids: Iterable[int]) -> dict[int, str]:
        ids = {i for i in team_ids if i is not None}
        if not ids:
            return {}
        result = await self.db.execute(select(TeamRow.id, TeamRow.name).where(TeamRow.id.in_(ids)))
        return {team_id: name for team_id, name in result.all()}


class StakeholderDirectory:
    """Resolves person ids to display names; never consulted for capacity math."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def display_names(self, stakeholder_ids: Iterable[int | None]) -> dict[int, str]:
        ids = {i for i in stakeholder_ids if i is not None}
        if not ids:
            return {}
        result = await self.db.execute(select(Stakeholder.id, Stakeholder.name).where(Stakeholder.id.in_(ids)))
        return {stakeholder_id: name for stakeholder_id, name in result.all()}

    async def add(self, name: str, project_id: int | None = None, department: str | None = None) -> int:
        row = Stakeholder(name=name, project_id=project_id, department=department)
        self.db.add(row)
        await self.db.flush()
        return row.id
