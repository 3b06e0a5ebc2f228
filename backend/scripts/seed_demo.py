"""Seed a demo project: two iterations, a few members, a saved team and some weekly availability."""
import asyncio
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from teamcap.database import async_session_maker, init_db
from teamcap.engine.capacity import upsert_member
from teamcap.engine.templates import TeamTemplateManager
from teamcap.engine.weekly import WeeklyAvailabilityMatrix
from teamcap.models.iteration import CapacityIteration
from teamcap.schemas.capacity import CapacityMemberCreate
from teamcap.schemas.iteration import IterationCreate
from teamcap.services.stores import (
    IterationStore,
    MemberStore,
    StakeholderDirectory,
    TeamStore,
    WeeklyAvailabilityStore,
)

DEMO_PROJECT_ID = 1

PEOPLE = [
    ("Asha Rao", "Developer", Decimal(1), Decimal(100)),
    ("Ben Ortiz", "Developer", Decimal(0), Decimal(80)),
    ("Chen Wei", "QA Engineer", Decimal(2), Decimal(100)),
    ("Dana Kim", "Scrum Master", Decimal(0), Decimal(50)),
]


async def seed():
    await init_db()
    async with async_session_maker() as db:
        existing = await db.execute(select(CapacityIteration).where(CapacityIteration.project_id == DEMO_PROJECT_ID))
        if existing.scalars().first():
            print("Demo project already seeded")
            return

        iterations = IterationStore(db)
        first = await iterations.create(
            DEMO_PROJECT_ID,
            IterationCreate(
                name="Iteration 1",
                start_date=date(2024, 3, 4),
                end_date=date(2024, 3, 15),
                committed_points=Decimal(30),
            ),
        )
        second = await iterations.create(
            DEMO_PROJECT_ID,
            IterationCreate(name="Iteration 2", start_date=date(2024, 3, 18), end_date=date(2024, 3, 29)),
        )

        directory = StakeholderDirectory(db)
        members = MemberStore(db)
        saved = []
        for name, role, leaves, percent in PEOPLE:
            stakeholder_id = await directory.add(name, project_id=DEMO_PROJECT_ID)
            data = CapacityMemberCreate(
                member_name=name,
                role=role,
                stakeholder_id=stakeholder_id,
                leaves=leaves,
                availability_percent=percent,
            )
            saved.append(await members.upsert(upsert_member(first, data)))

        matrix = WeeklyAvailabilityMatrix()
        weeks = matrix.generate_weeks(first)
        await WeeklyAvailabilityStore(db).save_rows(first.id, matrix.default_grid(weeks, [m.id for m in saved]))

        manager = TeamTemplateManager()
        snapshot = await TeamStore(db).create(
            manager.save_team_from_iteration(first.id, saved, "Core Team", project_id=DEMO_PROJECT_ID)
        )
        await members.add_many(manager.apply_team_to_iteration(snapshot.team, snapshot.definitions, second))
        await db.commit()
    print(f"Seeded project {DEMO_PROJECT_ID}: iterations {first.id} and {second.id}, team {snapshot.team.id}")


if __name__ == "__main__":
    asyncio.run(seed())
