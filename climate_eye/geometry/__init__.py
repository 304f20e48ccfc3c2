"""Geometry adapters and calculations.

- kml: KML text → ``Polygon``
- centroid: ``Polygon`` → query ``Coordinate``
- measure: bounding box and geodesic area for display
"""

from climate_eye.geometry.centroid import compute_centroid
from climate_eye.geometry.kml import parse_kml
from climate_eye.geometry.measure import compute_bbox, compute_geodesic_area_ha

__all__ = [
    "compute_bbox",
    "compute_centroid",
    "compute_geodesic_area_ha",
    "parse_kml",
]
