"""Climate Eye area-selection and date-navigation engine.

Turns a hand-drawn or KML-imported polygon into a single query point and
steps day-by-day through weather and air-quality measurements for it
within a validated date range.
"""

__version__ = "0.1.0"
