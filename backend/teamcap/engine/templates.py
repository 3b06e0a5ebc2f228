"""Team templates: snapshot an iteration's members, re-materialize them on another iteration."""
from collections.abc import Sequence

from teamcap.engine.capacity import effective_capacity
from teamcap.engine.errors import CapacityValidationError, EmptyTeamError
from teamcap.schemas.capacity import CapacityMember
from teamcap.schemas.iteration import Iteration
from teamcap.schemas.team import Team, TeamDefinition, TeamSnapshot
from teamcap.utils.logger import get_logger

logger = get_logger(__name__)


class TeamTemplateManager:
    """Teams are value snapshots: nothing links a definition back to its source member."""

    def save_team_from_iteration(
        self,
        iteration_id: int | None,
        members: Sequence[CapacityMember],
        name: str,
        description: str | None = None,
        project_id: int | None = None,
    ) -> TeamSnapshot:
        if not members:
            raise CapacityValidationError("Add members to this iteration before saving it as a team")
        if not name or not name.strip():
            raise CapacityValidationError("Team name is required")

        team = Team(
            project_id=project_id,
            name=name.strip(),
            description=(description or "").strip() or None,
            source_iteration_id=iteration_id,
        )
        # Copy the numbers, never the member objects, so later edits to the
        # source iteration cannot reach the template.
        definitions = [
            TeamDefinition(
                stakeholder_id=m.stakeholder_id,
                member_name=m.member_name,
                role=m.role,
                default_availability_percent=m.availability_percent,
                default_leaves=m.leaves,
            )
            for m in members
        ]
        logger.info(
            "Captured team %r from iteration %s with %d definitions",
            team.name,
            iteration_id,
            len(definitions),
        )
        return TeamSnapshot(team=team, definitions=definitions)

    def resave_team(
        self,
        team: Team,
        name: str,
        definitions: Sequence[TeamDefinition],
        description: str | None = None,
    ) -> TeamSnapshot:
        """Replacement snapshot for an existing team. The old definitions are discarded whole."""
        if not name or not name.strip():
            raise CapacityValidationError("Team name is required")
        if not definitions:
            raise CapacityValidationError("A team needs at least one member definition")

        updated = team.model_copy(
            update={"name": name.strip(), "description": (description or "").strip() or None}
        )
        copies = [d.model_copy(update={"id": None, "team_id": team.id}) for d in definitions]
        logger.info("Re-saved team %s as %r with %d definitions", team.id, updated.name, len(copies))
        return TeamSnapshot(team=updated, definitions=copies)

    def apply_team_to_iteration(
        self,
        team: Team,
        definitions: Sequence[TeamDefinition],
        target_iteration: Iteration,
        display_names: dict[int, str] | None = None,
    ) -> list[CapacityMember]:
        """One new member per definition, sized on the target iteration's working days.

        Existing members of the target are left alone; applying twice yields duplicates.
        """
        if not definitions:
            raise EmptyTeamError(f"Team {team.name!r} has no members defined")

        display_names = display_names or {}
        members = []
        for d in definitions:
            name = display_names.get(d.stakeholder_id, d.member_name) if d.stakeholder_id else d.member_name
            members.append(
                CapacityMember(
                    iteration_id=target_iteration.id,
                    stakeholder_id=d.stakeholder_id,
                    team_id=team.id,
                    member_name=name,
                    role=d.role,
                    leaves=d.default_leaves,
                    availability_percent=d.default_availability_percent,
                    effective_capacity_days=effective_capacity(
                        target_iteration.working_days,
                        d.default_leaves,
                        d.default_availability_percent,
                    ),
                )
            )
        logger.info(
            "Applied team %r to iteration %s (%d working days): %d members",
            team.name,
            target_iteration.id,
            target_iteration.working_days,
            len(members),
        )
        return members
