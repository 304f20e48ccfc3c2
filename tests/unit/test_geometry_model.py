"""Tests for the canonical geometry model.

Covers axis order at the two adapter boundaries, ring closing, the
distinct-point guard, GeoJSON conversion and geometry-source labels.
"""

from __future__ import annotations

import pytest

from climate_eye.core.exceptions import ValidationError
from climate_eye.models.geometry import DrawnGeometry, ImportedGeometry, Polygon


class TestPolygonFromLatLon:
    """Drawing input arrives as (lat, lon) and is stored as (lon, lat)."""

    def test_swaps_and_closes(self) -> None:
        polygon = Polygon.from_latlon([(20.0, 10.0), (20.0, 11.0), (21.0, 11.0)])
        assert polygon.ring == ((10.0, 20.0), (11.0, 20.0), (11.0, 21.0), (10.0, 20.0))
        assert polygon.is_closed
        assert polygon.vertex_count == 4

    def test_too_few_distinct_points(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Polygon.from_latlon([(1.0, 1.0), (1.0, 1.0), (2.0, 2.0)])
        assert exc_info.value.code == "POLYGON_TOO_FEW_POINTS"

    def test_round_trip_to_latlon(self) -> None:
        points = [(51.5, -0.1), (51.6, -0.1), (51.6, 0.0)]
        polygon = Polygon.from_latlon(points)
        assert polygon.to_latlon() == [*points, points[0]]


class TestPolygonShape:
    """Open and short rings from bad KML files pass through unchanged."""

    def test_open_ring_not_closed(self) -> None:
        polygon = Polygon.from_lonlat([(0, 0), (1, 0), (1, 1), (0, 1)])
        assert not polygon.is_closed

    def test_short_ring_not_closed(self) -> None:
        polygon = Polygon.from_lonlat([(0, 0), (1, 1), (0, 0)])
        assert not polygon.is_closed

    def test_distinct_vertices_keep_order(self) -> None:
        polygon = Polygon.from_lonlat([(0, 0), (1, 0), (1, 0), (1, 1), (0, 0)])
        assert polygon.distinct_vertices() == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]


class TestPolygonGeoJSON:
    """GeoJSON conversion uses (lon, lat) positions."""

    def test_to_geojson(self) -> None:
        polygon = Polygon.from_lonlat([(10, 20), (11, 20), (11, 21), (10, 20)])
        geojson = polygon.to_geojson()
        assert geojson["type"] == "Polygon"
        assert geojson["coordinates"] == [[[10.0, 20.0], [11.0, 20.0], [11.0, 21.0], [10.0, 20.0]]]

    def test_from_geojson_keeps_exterior_only(self) -> None:
        data = {
            "type": "Polygon",
            "coordinates": [
                [[0, 0, 5], [4, 0, 5], [4, 4, 5], [0, 0, 5]],
                [[1, 1], [2, 1], [2, 2], [1, 1]],
            ],
        }
        polygon = Polygon.from_geojson(data)
        assert polygon.ring == ((0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 0.0))

    def test_from_geojson_wrong_type(self) -> None:
        with pytest.raises(TypeError, match="Polygon"):
            Polygon.from_geojson({"type": "Point", "coordinates": [0, 0]})

    def test_from_geojson_bad_position(self) -> None:
        with pytest.raises(TypeError, match="index 1"):
            Polygon.from_geojson({"type": "Polygon", "coordinates": [[[0, 0], [1]]]})


class TestGeometrySources:
    """Geometry sources describe themselves for the info panel."""

    def test_drawn_label(self) -> None:
        polygon = Polygon.from_latlon([(0, 0), (0, 1), (1, 1)])
        assert DrawnGeometry(polygon).describe() == "Area drawn on map"

    def test_imported_label(self) -> None:
        source = ImportedGeometry(filename="orchard.kml", content="<kml/>")
        assert source.describe() == "KML: orchard.kml"

    def test_imported_polygon_parsed_lazily(self) -> None:
        content = "<kml><coordinates>10,20,0 11,20,0 11,21,0 10,20,0</coordinates></kml>"
        source = ImportedGeometry(filename="a.kml", content=content)
        assert source.polygon is not None
        assert source.polygon is source.polygon
        assert source.polygon.ring[0] == (10.0, 20.0)

    def test_imported_unreadable_polygon_is_none(self) -> None:
        source = ImportedGeometry(filename="a.kml", content="not xml")
        assert source.polygon is None
