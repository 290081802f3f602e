"""ZoneIds — projection of open assignments onto the User.zone_ids cache."""

from collections.abc import Iterable

from knockwise.domain.entities.assignment import AgentZoneAssignment


def collect_zone_ids(assignments: Iterable[AgentZoneAssignment]) -> list[int]:
    """Zone ids of the open assignments, deduplicated in first-seen order."""
    seen: dict[int, None] = {}
    for assignment in assignments:
        if assignment.is_open():
            seen.setdefault(assignment.zone_id, None)
    return list(seen)


def pick_primary_zone(current: int | None, remaining: list[int]) -> int | None:
    """Keep *current* if still bound, else the most recently bound zone, else None."""
    if current is not None and current in remaining:
        return current
    return remaining[-1] if remaining else None
