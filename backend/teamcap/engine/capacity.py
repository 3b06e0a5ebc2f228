"""Effective capacity model. Decimal only; results are never clamped."""
from collections.abc import Iterable
from decimal import Decimal

from teamcap.config import Settings, get_settings
from teamcap.schemas.capacity import CapacityMember, CapacityMemberCreate, CapacityMemberUpdate
from teamcap.schemas.iteration import Iteration
from teamcap.utils.logger import get_logger

logger = get_logger(__name__)

_HUNDRED = Decimal(100)

# An explicit null unlinks the member from its directory entry
_CLEARABLE_MEMBER_FIELDS = {"stakeholder_id"}

Number = Decimal | int | float | str


def to_decimal(value: Number) -> Decimal:
    """Exact Decimal for a numeric input; floats go through str() to avoid binary noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def effective_capacity(working_days: Number, leaves: Number, availability_percent: Number) -> Decimal:
    """Effective days = (working_days - leaves) * (availability_percent / 100).

    No validation: leaves above working_days give a negative result so the
    impossible plan stays visible to whoever renders it.
    """
    present_days = to_decimal(working_days) - to_decimal(leaves)
    return present_days * (to_decimal(availability_percent) / _HUNDRED)


def upsert_member(
    iteration: Iteration,
    data: CapacityMemberCreate | CapacityMemberUpdate,
    existing: CapacityMember | None = None,
    settings: Settings | None = None,
) -> CapacityMember:
    """New member (or patched copy of ``existing``) with capacity recomputed in the same write."""
    settings = settings or get_settings()
    updates = {
        k: v
        for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in _CLEARABLE_MEMBER_FIELDS
    }
    if existing is None:
        base = CapacityMember(
            iteration_id=iteration.id,
            work_mode=settings.default_work_mode,
            availability_percent=to_decimal(settings.default_availability_percent),
        )
    else:
        base = existing
    member = base.model_copy(update=updates)
    member.iteration_id = iteration.id
    member.effective_capacity_days = effective_capacity(
        iteration.working_days,
        member.leaves,
        member.availability_percent,
    )
    logger.debug(
        "Member %s on iteration %s: %s effective days",
        member.member_name,
        iteration.id,
        member.effective_capacity_days,
    )
    return member


def recompute_members(iteration: Iteration, members: Iterable[CapacityMember]) -> list[CapacityMember]:
    """Bulk recompute after the iteration's working days changed. Inputs are not mutated."""
    refreshed = []
    for m in members:
        capacity = effective_capacity(iteration.working_days, m.leaves, m.availability_percent)
        refreshed.append(m.model_copy(update={"effective_capacity_days": capacity}))
    return refreshed


def copy_members_to_iteration(
    members: Iterable[CapacityMember],
    target: Iteration,
) -> list[CapacityMember]:
    """Fresh member rows for ``target`` carrying leave/availability, recomputed on its calendar."""
    copies = []
    for m in members:
        copies.append(
            m.model_copy(
                update={
                    "id": None,
                    "iteration_id": target.id,
                    "effective_capacity_days": effective_capacity(
                        target.working_days, m.leaves, m.availability_percent
                    ),
                }
            )
        )
    logger.info("Copied %d members onto iteration %s", len(copies), target.id)
    return copies
