"""StatusDerivation — pure predicates deciding ACTIVE/INACTIVE for agents and teams.

These functions only look at the data handed to them; the repositories are
responsible for fetching the right records (see StatusDeriver use case).
"""

from __future__ import annotations

from collections.abc import Iterable

from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.entities.user import User
from knockwise.domain.value_objects.enums import ActivityStatus


def binds_agent(assignment: AgentZoneAssignment | ScheduledAssignment, agent: User) -> bool:
    """True if the record targets the agent directly or one of its teams."""
    if assignment.agent_id is not None and assignment.agent_id == agent.id:
        return True
    return assignment.team_id is not None and assignment.team_id in agent.team_ids


def agent_status(
    agent: User | None,
    open_assignments: Iterable[AgentZoneAssignment],
    pending_scheduled: Iterable[ScheduledAssignment],
) -> ActivityStatus:
    """OR of the assignment signals for one agent.

    ACTIVE if any of:
      1. cached zone_ids is non-empty,
      2. cached primary_zone_id is set,
      3. an open assignment binds the agent (directly or via a team),
      4. a PENDING scheduled assignment binds the agent (directly or via a team).

    Missing users and non-agents are always INACTIVE.
    """
    if agent is None or not agent.is_agent():
        return ActivityStatus.INACTIVE

    if agent.zone_ids or agent.primary_zone_id is not None:
        return ActivityStatus.ACTIVE

    if any(a.is_open() and binds_agent(a, agent) for a in open_assignments):
        return ActivityStatus.ACTIVE

    if any(s.is_pending() and binds_agent(s, agent) for s in pending_scheduled):
        return ActivityStatus.ACTIVE

    return ActivityStatus.INACTIVE


def team_status(team_id: int, open_assignments: Iterable[AgentZoneAssignment]) -> ActivityStatus:
    """ACTIVE iff an open assignment targets the team."""
    if any(a.is_open() and a.team_id == team_id for a in open_assignments):
        return ActivityStatus.ACTIVE
    return ActivityStatus.INACTIVE
