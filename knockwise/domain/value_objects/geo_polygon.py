"""GeoPolygon value object — immutable zone boundary (single outer ring)."""

from __future__ import annotations

from dataclasses import dataclass

from knockwise.domain.errors import ValidationError

Position = tuple[float, float]  # (longitude, latitude), GeoJSON order


@dataclass(frozen=True)
class GeoPolygon:
    ring: tuple[Position, ...]

    def __post_init__(self) -> None:
        if len(self.ring) < 4:
            raise ValidationError("A polygon ring needs at least 4 positions")
        if self.ring[0] != self.ring[-1]:
            raise ValidationError("A polygon ring must be closed (first == last)")
        for lon, lat in self.ring:
            if not (-180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0):
                raise ValidationError(f"Position out of range: ({lon}, {lat})")

    @classmethod
    def from_geojson(cls, data: dict) -> GeoPolygon:
        """Build from a GeoJSON ``Polygon`` object; holes are ignored."""
        if data.get("type") != "Polygon":
            raise ValidationError("Boundary must be a GeoJSON Polygon")
        coordinates = data.get("coordinates") or []
        if not coordinates:
            raise ValidationError("Polygon has no coordinates")
        return cls(ring=tuple((float(p[0]), float(p[1])) for p in coordinates[0]))

    def to_geojson(self) -> dict:
        return {
            "type": "Polygon",
            "coordinates": [[[lon, lat] for lon, lat in self.ring]],
        }
