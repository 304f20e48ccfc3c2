"""Validation helpers for KML import.

Responsibilities:
- Upload filename check (``.kml`` / ``.kmz`` only)
- Well-formed XML check with a hardened parser
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from climate_eye.core.constants import SUPPORTED_UPLOAD_EXTENSIONS
from climate_eye.core.exceptions import ValidationError

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("climate_eye.geometry.kml")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class GeometryParseError(ValidationError):
    """Raised when KML text yields no usable coordinate ring.

    Recovered inside ``parse_kml``: callers only ever see ``None``.
    """

    default_stage = "parse_kml"
    default_code = "GEOMETRY_PARSE_FAILED"


class UnsupportedFileError(ValidationError):
    """Raised when an upload does not have a KML/KMZ extension."""

    default_stage = "import"
    default_code = "UNSUPPORTED_FILE"


# ---------------------------------------------------------------------------
# Upload filename validation
# ---------------------------------------------------------------------------


def is_supported_upload(filename: str) -> bool:
    """Return ``True`` if *filename* ends in ``.kml`` or ``.kmz`` (any case)."""
    return filename.lower().endswith(SUPPORTED_UPLOAD_EXTENSIONS)


def validate_upload_filename(filename: str) -> None:
    """Reject uploads that are not KML/KMZ by extension.

    Raises:
        UnsupportedFileError: If the extension is not supported.
    """
    if not is_supported_upload(filename):
        msg = f"Please upload a KML or KMZ file (got {filename!r})"
        raise UnsupportedFileError(msg)


# ---------------------------------------------------------------------------
# XML well-formedness
# ---------------------------------------------------------------------------


def parse_xml(content: str | bytes) -> _Element:
    """Parse *content* as XML and return the root element.

    ``str`` input is re-encoded as UTF-8 and the parser is told so, which
    lets documents that still carry an ``encoding="..."`` declaration
    through.

    Raises:
        GeometryParseError: If the content is empty or not well-formed XML.
    """
    from lxml import etree  # type: ignore[attr-defined]

    if isinstance(content, str):
        raw = content.encode("utf-8")
        encoding: str | None = "utf-8"
    else:
        raw = content
        encoding = None

    if not raw.strip():
        msg = "KML content is empty"
        raise GeometryParseError(msg)

    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
        encoding=encoding,
    )
    try:
        root = etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML: {exc}"
        raise GeometryParseError(msg) from exc

    if root is None:
        msg = "KML content has no root element"
        raise GeometryParseError(msg)
    return root
