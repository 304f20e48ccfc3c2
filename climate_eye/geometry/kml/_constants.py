"""Shared constants for KML parsing."""

from __future__ import annotations

# Element holding a ring's "lon,lat[,alt] lon,lat[,alt] ..." text.
# Matched by local name so namespaced and bare documents both work.
COORDINATES_LOCAL_NAME = "coordinates"

# A coordinate tuple must carry at least lon and lat; altitude is dropped
MIN_TUPLE_COMPONENTS = 2
