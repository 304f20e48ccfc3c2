"""Temporal navigation.

- dates: calendar arithmetic and range validation
- session: the ``NavigationSession`` state aggregate
"""

from climate_eye.navigation.dates import DateRangeError
from climate_eye.navigation.session import NavigationSession, NoAreaSelectedError

__all__ = [
    "DateRangeError",
    "NavigationSession",
    "NoAreaSelectedError",
]
