"""Coordinate normalization for KML parsing.

Converts a KML ``<coordinates>`` text block into clean ``(lon, lat)``
tuples.  KML already stores longitude first, so no axis swap happens
here; altitude is discarded.
"""

from __future__ import annotations

import math

from climate_eye.geometry.kml._constants import MIN_TUPLE_COMPONENTS
from climate_eye.geometry.kml._validation import GeometryParseError


def parse_coordinates_text(text: str) -> list[tuple[float, float]]:
    """Parse ``lon,lat[,alt] lon,lat[,alt] ...`` into ``(lon, lat)`` tuples.

    Tokens are separated by runs of whitespace; components by commas.
    Unlike a lenient reader, one bad token fails the whole block, since a
    ring with silently dropped vertices describes a different area.

    Raises:
        GeometryParseError: If the text holds no tokens, or any token has
            fewer than two finite numeric components.
    """
    tokens = text.split()
    if not tokens:
        msg = "<coordinates> element is empty"
        raise GeometryParseError(msg)

    coords: list[tuple[float, float]] = []
    for idx, token in enumerate(tokens):
        parts = token.split(",")
        if len(parts) < MIN_TUPLE_COMPONENTS:
            msg = (
                f"Malformed coordinate at index {idx}: expected at least "
                f"{MIN_TUPLE_COMPONENTS} components, got {token!r}"
            )
            raise GeometryParseError(msg)
        try:
            lon = float(parts[0])
            lat = float(parts[1])
        except ValueError as exc:
            msg = f"Malformed coordinate at index {idx}: cannot convert {token!r} to numbers"
            raise GeometryParseError(msg) from exc
        if not (math.isfinite(lon) and math.isfinite(lat)):
            msg = f"Malformed coordinate at index {idx}: non-finite value in {token!r}"
            raise GeometryParseError(msg)
        coords.append((lon, lat))
    return coords
