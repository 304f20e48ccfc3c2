"""Polygon measurements for display.

Bounding box (used by the map host to fit its view to the selected
area) and geodesic area in hectares (shown next to the area label).
"""

from __future__ import annotations

from climate_eye.models.geometry import MIN_DISTINCT_POINTS, Polygon

# Square metres per hectare (explicit unit conversion)
SQ_METRES_PER_HECTARE = 10_000.0


class MeasureError(ValueError):
    """Raised when a polygon has no vertices to measure."""


def compute_bbox(polygon: Polygon) -> tuple[float, float, float, float]:
    """Compute the tight bounding box of the ring.

    Returns:
        ``(min_lon, min_lat, max_lon, max_lat)``

    Raises:
        MeasureError: If the polygon has no vertices.
    """
    if not polygon.ring:
        msg = "Empty coordinates: no bounding box for an empty polygon"
        raise MeasureError(msg)
    lons = [c[0] for c in polygon.ring]
    lats = [c[1] for c in polygon.ring]
    return (min(lons), min(lats), max(lons), max(lats))


def compute_geodesic_area_ha(polygon: Polygon) -> float:
    """Compute the geodesic area of the ring in hectares.

    Uses ``pyproj.Geod`` on the WGS 84 ellipsoid.  Winding order does
    not matter.  Rings with fewer than three distinct vertices have
    zero area.
    """
    if len(polygon.distinct_vertices()) < MIN_DISTINCT_POINTS:
        return 0.0

    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    lons = [c[0] for c in polygon.ring]
    lats = [c[1] for c in polygon.ring]
    area_m2, _perimeter = geod.polygon_area_perimeter(lons, lats)
    return abs(area_m2) / SQ_METRES_PER_HECTARE
