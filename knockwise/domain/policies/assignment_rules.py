"""AssignmentRules — target exclusivity and immediate-vs-scheduled decision."""

from __future__ import annotations

from datetime import datetime

from knockwise.domain.errors import ValidationError


def ensure_single_target(agent_id: int | None, team_id: int | None) -> None:
    """Exactly one of agent/team must be set on any assignment.

    Raises:
        ValidationError: if both or neither are given.
    """
    if agent_id is None and team_id is None:
        raise ValidationError("Either agent_id or team_id must be provided")
    if agent_id is not None and team_id is not None:
        raise ValidationError("Provide agent_id or team_id, not both")


def should_schedule(effective_from: datetime | None, now: datetime) -> bool:
    """A binding starting strictly after *now* becomes a ScheduledAssignment."""
    return effective_from is not None and effective_from > now
