"""Canonical geometry model.

A ``Polygon`` is a single ring of ``(longitude, latitude)`` vertices.
That axis order is fixed for the whole package; the only places that
swap axes are the two adapter boundaries:

- ``Polygon.from_latlon`` (drawing input, map clicks arrive as lat/lon)
- ``Polygon.to_latlon`` (map display, the host draws in lat/lon)

KML text is already lon/lat and needs no swap.

``GeometrySource`` is the tagged union of a drawn polygon or an imported
KML file.  At most one is active in a session; replacing it is the only
way to change the selected area.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from functools import cached_property

from climate_eye.core.exceptions import ValidationError

# Minimum distinct user-supplied points for a drawn polygon
MIN_DISTINCT_POINTS = 3

# Minimum ring entries for a closed polygon (3 distinct + closing = 4)
MIN_RING_ENTRIES = 4


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A single query point derived from a polygon.

    Attributes:
        latitude: WGS 84 latitude in degrees.
        longitude: WGS 84 longitude in degrees.
    """

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Polygon:
    """An immutable polygon ring in ``(lon, lat)`` order.

    The ring is *expected* to be closed with at least four entries.  Rings
    imported from a bad KML file are passed through as-is, so consumers
    must tolerate short or open rings (see ``is_closed``).

    Attributes:
        ring: Ordered ``(lon, lat)`` vertex pairs.
    """

    ring: tuple[tuple[float, float], ...] = ()

    @classmethod
    def from_lonlat(cls, coords: Iterable[tuple[float, float]]) -> Polygon:
        """Build a polygon from ``(lon, lat)`` pairs without closing it."""
        return cls(ring=tuple((float(lon), float(lat)) for lon, lat in coords))

    @classmethod
    def from_latlon(cls, points: Iterable[tuple[float, float]]) -> Polygon:
        """Build a closed polygon from ``(lat, lon)`` map points.

        Swaps every point to ``(lon, lat)`` and appends the first point
        as the last one.

        Raises:
            ValidationError: If fewer than 3 distinct points are given.
        """
        swapped = [(float(lon), float(lat)) for lat, lon in points]
        if len(set(swapped)) < MIN_DISTINCT_POINTS:
            msg = (
                f"A polygon needs at least {MIN_DISTINCT_POINTS} distinct points, "
                f"got {len(set(swapped))}"
            )
            raise ValidationError(msg, stage="geometry", code="POLYGON_TOO_FEW_POINTS")
        return cls(ring=(*swapped, swapped[0]))

    def to_latlon(self) -> list[tuple[float, float]]:
        """Return the ring as ``(lat, lon)`` pairs for the map host."""
        return [(lat, lon) for lon, lat in self.ring]

    @property
    def vertex_count(self) -> int:
        """Number of ring entries, including the closing point."""
        return len(self.ring)

    @property
    def is_closed(self) -> bool:
        """Whether the ring has at least four entries and ends where it starts."""
        return len(self.ring) >= MIN_RING_ENTRIES and self.ring[0] == self.ring[-1]

    def distinct_vertices(self) -> list[tuple[float, float]]:
        """Return vertices in ring order with repeats removed."""
        return list(dict.fromkeys(self.ring))

    def to_geojson(self) -> dict[str, object]:
        """Serialise to a GeoJSON ``Polygon`` geometry dict."""
        return {"type": "Polygon", "coordinates": [[list(c) for c in self.ring]]}

    @classmethod
    def from_geojson(cls, data: dict[str, object]) -> Polygon:
        """Deserialise from a GeoJSON ``Polygon`` geometry dict.

        Only the exterior ring is kept.

        Raises:
            TypeError: If the payload is not a GeoJSON Polygon.
        """
        if data.get("type") != "Polygon":
            msg = f"Expected GeoJSON type 'Polygon', got {data.get('type')!r}"
            raise TypeError(msg)
        rings = data.get("coordinates")
        if not isinstance(rings, list) or not rings or not isinstance(rings[0], list):
            msg = "GeoJSON Polygon must carry a non-empty list of rings"
            raise TypeError(msg)
        exterior = rings[0]
        for idx, c in enumerate(exterior):
            if not isinstance(c, list | tuple) or len(c) < 2:
                msg = f"Malformed GeoJSON position at index {idx}: {c!r}"
                raise TypeError(msg)
        return cls.from_lonlat((c[0], c[1]) for c in exterior)


# ---------------------------------------------------------------------------
# Geometry sources
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DrawnGeometry:
    """A polygon the user drew on the map."""

    polygon: Polygon

    def describe(self) -> str:
        """Label for the geometry info panel."""
        return "Area drawn on map"


@dataclass(frozen=True)
class ImportedGeometry:
    """A KML/KMZ upload whose polygon is parsed on first use.

    The parsed polygon is memoised per instance; a new upload is a new
    instance, so the cache never outlives the source it was built from.

    Attributes:
        filename: Original upload filename.
        content: Decoded KML text.
    """

    filename: str
    content: str

    @cached_property
    def polygon(self) -> Polygon | None:
        """The first ``<coordinates>`` ring in the file, or ``None``."""
        from climate_eye.geometry.kml import parse_kml

        return parse_kml(self.content, source_filename=self.filename)

    def describe(self) -> str:
        """Label for the geometry info panel."""
        return f"KML: {self.filename}"


GeometrySource = DrawnGeometry | ImportedGeometry
