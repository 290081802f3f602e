"""Tests for ZoneIds policy."""

from datetime import UTC, datetime

from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.policies.zone_ids import collect_zone_ids, pick_primary_zone

NOW = datetime(2025, 6, 2, 9, 0, tzinfo=UTC)


def _a(zone_id: int, **fields) -> AgentZoneAssignment:
    fields.setdefault("agent_id", 1)
    return AgentZoneAssignment(id=None, zone_id=zone_id, effective_from=NOW, assigned_by=0, **fields)


def test_collect_deduplicates_in_first_seen_order():
    assert collect_zone_ids([_a(3), _a(1), _a(3), _a(2)]) == [3, 1, 2]


def test_collect_skips_closed():
    assert collect_zone_ids([_a(3, effective_to=NOW), _a(1)]) == [1]


def test_collect_empty():
    assert collect_zone_ids([]) == []


def test_primary_kept_while_still_bound():
    assert pick_primary_zone(2, [1, 2, 3]) == 2


def test_primary_falls_back_to_latest_zone():
    assert pick_primary_zone(9, [1, 2, 3]) == 3


def test_primary_cleared_when_nothing_bound():
    assert pick_primary_zone(9, []) is None
    assert pick_primary_zone(None, []) is None
