"""Date range and view cursor models.

Both are immutable snapshots.  The navigation session replaces them
wholesale on every accepted edit, so a rejected edit can never leave a
half-applied state behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class DateRange:
    """Selected analysis period, inclusive at both ends.

    Invariant (enforced by the session, not here): ``start <= end <= today``.
    """

    start: date
    end: date

    def max_viewable(self, today: date) -> date:
        """Latest date that may be viewed: ``min(end, today)``."""
        return min(self.end, today)

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    @property
    def days(self) -> int:
        """Number of calendar days in the range (0 if inverted)."""
        return max((self.end - self.start).days + 1, 0)


@dataclass(frozen=True, slots=True)
class ViewCursor:
    """The date being displayed and whether analysis mode is on.

    Invariant while ``analysis_active``:
    ``start <= current_date <= min(end, today)``.
    """

    current_date: date | None = None
    analysis_active: bool = False
