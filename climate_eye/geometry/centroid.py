"""Centroid calculation.

Reduces a polygon to one representative ``Coordinate`` for the
point-sampling weather and air-quality providers.

The centroid is the planar, area-weighted one (longitude as x, latitude
as y), computed by shapely.  No geodesic correction is applied; the
areas this tool targets are small enough for the planar approximation.

Degenerate rings (collinear vertices, repeated points, fewer than three
distinct vertices, or a 2-point "polygon" from a bad KML file) have no
meaningful area-weighted centroid.  For those the arithmetic mean of the
distinct vertices is returned instead.
"""

from __future__ import annotations

import logging

from climate_eye.models.geometry import MIN_DISTINCT_POINTS, Coordinate, Polygon

logger = logging.getLogger("climate_eye.geometry.centroid")

# Absolute planar area (deg²) below which a ring counts as degenerate
DEFAULT_AREA_EPSILON = 1e-12


def compute_centroid(
    polygon: Polygon,
    *,
    epsilon: float = DEFAULT_AREA_EPSILON,
) -> Coordinate | None:
    """Compute the representative point of *polygon*.

    Args:
        polygon: Ring in ``(lon, lat)`` order; need not be closed.
        epsilon: Area threshold for the degenerate-ring fallback.

    Returns:
        The centroid as a ``Coordinate``, or ``None`` only if the
        polygon has no vertices at all.
    """
    distinct = polygon.distinct_vertices()
    if not distinct:
        return None

    if len(distinct) >= MIN_DISTINCT_POINTS:
        from shapely.geometry import Polygon as ShapelyPolygon

        shape = ShapelyPolygon(polygon.ring)
        if abs(shape.area) >= epsilon:
            point = shape.centroid
            return Coordinate(latitude=point.y, longitude=point.x)

    logger.debug(
        "Degenerate ring (%d distinct vertices); using vertex mean",
        len(distinct),
    )
    return vertex_mean(distinct)


def vertex_mean(vertices: list[tuple[float, float]]) -> Coordinate | None:
    """Arithmetic mean of ``(lon, lat)`` vertices, or ``None`` if empty."""
    if not vertices:
        return None
    count = len(vertices)
    lon = sum(v[0] for v in vertices) / count
    lat = sum(v[1] for v in vertices) / count
    return Coordinate(latitude=lat, longitude=lon)
