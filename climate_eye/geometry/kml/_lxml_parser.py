"""lxml-based KML reader.

Locates the first ``<coordinates>`` element in document order and turns
it into a ``Polygon``.  There is no notion of multiple Placemarks or
polygons here: later ``<coordinates>`` blocks are ignored.
"""

from __future__ import annotations

import logging

from climate_eye.geometry.kml._constants import COORDINATES_LOCAL_NAME
from climate_eye.geometry.kml._normalization import parse_coordinates_text
from climate_eye.geometry.kml._validation import GeometryParseError, parse_xml
from climate_eye.models.geometry import Polygon

logger = logging.getLogger("climate_eye.geometry.kml")

_COORDINATES_XPATH = f"//*[local-name()='{COORDINATES_LOCAL_NAME}']"


def parse_with_lxml(content: str | bytes, source_filename: str = "") -> Polygon:
    """Parse KML text into a polygon from its first ``<coordinates>`` block.

    The ring is returned exactly as the file gives it: not re-closed and
    not checked for a minimum vertex count.

    Raises:
        GeometryParseError: If the content is not XML, has no
            ``<coordinates>`` element, or the coordinates are malformed.
    """
    root = parse_xml(content)
    matches = root.xpath(_COORDINATES_XPATH)
    if not matches:
        msg = "No <coordinates> element found"
        raise GeometryParseError(msg)

    if len(matches) > 1:
        logger.info(
            "KML %s holds %d <coordinates> blocks; using the first only",
            source_filename or "<upload>",
            len(matches),
        )

    coords = parse_coordinates_text("".join(matches[0].itertext()))
    return Polygon.from_lonlat(coords)
