"""Freehand polygon drawing state machine.

States::

    IDLE --start()--> ACTIVE --finish()/double_click()--> IDLE  (publishes a Polygon)
                      ACTIVE --cancel()/disable()/start()--> IDLE  (publishes nothing)

While ACTIVE each map click becomes a point marker, and once two or
more points exist the running sequence is shown as an open preview
line.  Every exit from ACTIVE removes all of those layers and restores
the cursor, whichever path is taken.

Clicks arrive as ``(lat, lon)``; the completed ring is converted to the
canonical ``(lon, lat)`` order by ``Polygon.from_latlon``.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from climate_eye.drawing.map_host import DEFAULT_CURSOR, DRAW_CURSOR
from climate_eye.models.geometry import MIN_DISTINCT_POINTS, Polygon

if TYPE_CHECKING:
    from collections.abc import Callable

    from climate_eye.drawing.map_host import MapHost

logger = logging.getLogger("climate_eye.drawing.machine")


class DrawState(enum.Enum):
    """Drawing machine state."""

    IDLE = "idle"
    ACTIVE = "active"


class DrawingMachine:
    """Turns a sequence of map clicks into a closed polygon.

    Args:
        host: Map host that renders markers and the preview line.
        on_complete: Called with the finished polygon, after the machine
            has already returned to IDLE.
        on_start: Called on every entry to ACTIVE, before the first
            click; the owner clears its current area here.
    """

    def __init__(
        self,
        host: MapHost,
        on_complete: Callable[[Polygon], None],
        on_start: Callable[[], None] | None = None,
    ) -> None:
        self._host = host
        self._on_complete = on_complete
        self._on_start = on_start
        self._state = DrawState.IDLE
        self._points: list[tuple[float, float]] = []
        self._markers: list[int] = []
        self._preview: int | None = None

    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is DrawState.ACTIVE

    @property
    def points(self) -> tuple[tuple[float, float], ...]:
        """Clicked points so far, as ``(lat, lon)``."""
        return tuple(self._points)

    @property
    def can_finish(self) -> bool:
        """Whether ``finish()`` would complete (enough distinct points)."""
        return self.is_active and len(set(self._points)) >= MIN_DISTINCT_POINTS

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Enter ACTIVE.  Re-entering while ACTIVE cancels the current drawing first."""
        if self.is_active:
            logger.info("Drawing restarted; discarding %d point(s)", len(self._points))
            self._teardown()
        self._state = DrawState.ACTIVE
        self._host.set_cursor(DRAW_CURSOR)
        if self._on_start is not None:
            self._on_start()
        logger.debug("Drawing started")

    def add_point(self, latitude: float, longitude: float) -> bool:
        """Record a map click.  Ignored (returns ``False``) unless ACTIVE."""
        if not self.is_active:
            return False

        self._points.append((latitude, longitude))
        self._markers.append(self._host.add_marker(latitude, longitude))

        if self._preview is not None:
            self._host.remove_layer(self._preview)
            self._preview = None
        if len(self._points) > 1:
            self._preview = self._host.add_preview_line(list(self._points))
        return True

    def finish(self) -> Polygon | None:
        """Complete the drawing.

        A no-op that stays ACTIVE (returns ``None``) when fewer than three
        distinct points have been clicked.  Otherwise closes the ring,
        returns to IDLE, and publishes the polygon via ``on_complete``.
        """
        if not self.can_finish:
            if self.is_active:
                logger.debug("Finish ignored: only %d point(s)", len(self._points))
            return None

        polygon = Polygon.from_latlon(self._points)
        self._teardown()
        logger.info("Drawing finished | vertices=%d", polygon.vertex_count)
        self._on_complete(polygon)
        return polygon

    def double_click(self) -> Polygon | None:
        """Finish gesture; same guard as ``finish()``."""
        return self.finish()

    def cancel(self) -> bool:
        """Discard the drawing without publishing.  Returns ``False`` if IDLE."""
        if not self.is_active:
            return False
        logger.info("Drawing cancelled; discarding %d point(s)", len(self._points))
        self._teardown()
        return True

    def disable(self) -> None:
        """Host turned drawing off (e.g. an upload replaced the area)."""
        self.cancel()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _teardown(self) -> None:
        """Remove every transient layer and return to IDLE."""
        for handle in self._markers:
            self._host.remove_layer(handle)
        if self._preview is not None:
            self._host.remove_layer(self._preview)
        self._markers = []
        self._preview = None
        self._points = []
        self._host.set_cursor(DEFAULT_CURSOR)
        self._state = DrawState.IDLE
