"""KML import adapter.

Turns the text of an uploaded KML file into the canonical ``Polygon``.
KMZ archives must be unzipped to their inner KML text by the caller.

Pipeline stages:
- **_validation**: upload filename check, hardened XML parse
- **_normalization**: coordinate text → ``(lon, lat)`` tuples
- **_lxml_parser**: first ``<coordinates>`` block → ``Polygon``

Only the first ``<coordinates>`` block of a document is used, so
multi-Placemark files contribute their first ring.  This is a known
limitation of the import, not an error.

Parse failures never escape ``parse_kml``: they are logged and the
caller receives ``None`` ("no geometry").
"""

from __future__ import annotations

import logging

from climate_eye.geometry.kml._lxml_parser import parse_with_lxml
from climate_eye.geometry.kml._normalization import parse_coordinates_text
from climate_eye.geometry.kml._validation import (
    GeometryParseError,
    UnsupportedFileError,
    is_supported_upload,
    parse_xml,
    validate_upload_filename,
)
from climate_eye.models.geometry import Polygon

logger = logging.getLogger("climate_eye.geometry.kml")

__all__ = [
    "GeometryParseError",
    "UnsupportedFileError",
    "is_supported_upload",
    "parse_coordinates_text",
    "parse_kml",
    "parse_with_lxml",
    "parse_xml",
    "validate_upload_filename",
]


def parse_kml(content: str | bytes, *, source_filename: str = "") -> Polygon | None:
    """Parse KML text and return its first coordinate ring.

    Args:
        content: KML document text (``str`` or UTF-8/declared-encoding ``bytes``).
        source_filename: Upload name, used only for log context.

    Returns:
        The ring as a ``Polygon`` in ``(lon, lat)`` order, or ``None`` if
        the document is malformed or holds no usable ``<coordinates>``.
    """
    name = source_filename or "<upload>"
    try:
        polygon = parse_with_lxml(content, source_filename)
    except GeometryParseError as exc:
        logger.warning("No geometry from KML %s: %s", name, exc)
        return None

    logger.info(
        "Parsed KML geometry | source=%s | vertices=%d | closed=%s",
        name,
        polygon.vertex_count,
        polygon.is_closed,
    )
    return polygon
