"""Zone entity — a polygon territory that agents canvass."""

from dataclasses import dataclass

from knockwise.domain.value_objects.enums import ZoneStatus
from knockwise.domain.value_objects.geo_polygon import GeoPolygon


@dataclass
class Zone:
    id: int | None
    name: str
    created_by: int
    boundary: GeoPolygon | None = None
    status: ZoneStatus = ZoneStatus.DRAFT
    assigned_agent_id: int | None = None
    team_id: int | None = None
