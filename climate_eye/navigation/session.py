"""Navigation session: the dashboard's single state aggregate.

``NavigationSession`` owns everything the analysis screen shows:

- the active ``GeometrySource`` (drawn polygon or imported KML),
- the ``DateRange`` and the ``ViewCursor`` (current date, analysis mode),
- the latest ``FetchResult`` and the loading state.

State changes only through the methods below, each of which either
applies completely or not at all.  Whenever the viewed date changes in
analysis mode, or analysis is (re-)entered, the session recomputes the
centroid and issues one joined weather + air-quality fetch.

Concurrency model
-----------------
Single-threaded and cooperative: methods are called from the host's
event loop and return immediately.  Fetches run as ``asyncio`` tasks;
the task is returned so the host (or a test) can await it.  There is no
cancellation: a newer fetch does not abort an older one.  By default the
*last fetch to complete* is displayed even if it was issued first; set
``DashboardConfig.drop_stale_results`` to discard completions of
superseded fetches instead.  Navigation is refused while any fetch is in
flight, which bounds overlap to a re-entry racing a navigation step.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from climate_eye.core.config import DashboardConfig
from climate_eye.core.constants import NO_AREA_MESSAGE, UNPARSEABLE_AREA_MESSAGE
from climate_eye.core.exceptions import ValidationError
from climate_eye.drawing.machine import DrawingMachine
from climate_eye.drawing.map_host import InMemoryMapHost
from climate_eye.geometry.centroid import compute_centroid
from climate_eye.geometry.kml import validate_upload_filename
from climate_eye.geometry.measure import compute_bbox, compute_geodesic_area_ha
from climate_eye.models.dates import DateRange, ViewCursor
from climate_eye.models.geometry import DrawnGeometry, ImportedGeometry
from climate_eye.models.handoff import AnalysisHandoff
from climate_eye.models.records import FetchResult
from climate_eye.navigation.dates import (
    can_go_next,
    can_go_previous,
    default_range,
    next_date,
    previous_date,
    validate_range,
)
from climate_eye.providers.base import FetchError

if TYPE_CHECKING:
    from collections.abc import Callable

    from climate_eye.drawing.map_host import MapHost
    from climate_eye.models.geometry import Coordinate, GeometrySource, Polygon
    from climate_eye.models.records import MonthlyWeather
    from climate_eye.providers.base import EnvironmentalDataProvider

logger = logging.getLogger("climate_eye.navigation.session")


class NoAreaSelectedError(ValidationError):
    """Raised when analysis is requested without a usable area."""

    default_stage = "analysis"
    default_code = "NO_AREA_SELECTED"


class NavigationSession:
    """Geometry selection, date range and day-by-day analysis state.

    Args:
        provider: Weather / air-quality data provider.
        config: Dashboard configuration; defaults if omitted.
        map_host: Rendering host; an ``InMemoryMapHost`` if omitted.
        today: Zero-argument callable returning the current date.  It is
            called at every validation, so a long-lived session sees the
            date roll over.
    """

    def __init__(
        self,
        provider: EnvironmentalDataProvider,
        *,
        config: DashboardConfig | None = None,
        map_host: MapHost | None = None,
        today: Callable[[], dt.date] | None = None,
    ) -> None:
        self._provider = provider
        self._config = config or DashboardConfig()
        self._today = today or dt.date.today
        self._host = map_host or InMemoryMapHost()
        self._drawing = DrawingMachine(
            self._host,
            on_complete=self._on_polygon_drawn,
            on_start=self._on_drawing_started,
        )

        self._source: GeometrySource | None = None
        self._range = default_range(self._today(), self._config.default_range_days)
        self._cursor = ViewCursor()
        self._result: FetchResult | None = None
        self._in_flight = 0
        self._sequence = 0
        self._tasks: set[asyncio.Task[FetchResult]] = set()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def date_range(self) -> DateRange:
        return self._range

    @property
    def cursor(self) -> ViewCursor:
        return self._cursor

    @property
    def current_date(self) -> dt.date | None:
        return self._cursor.current_date

    @property
    def analysis_active(self) -> bool:
        return self._cursor.analysis_active

    @property
    def geometry_source(self) -> GeometrySource | None:
        return self._source

    @property
    def drawing(self) -> DrawingMachine:
        """The drawing machine; feed it map clicks while it is active."""
        return self._drawing

    @property
    def map_host(self) -> MapHost:
        return self._host

    @property
    def result(self) -> FetchResult | None:
        """Latest displayed fetch outcome; ``None`` while loading."""
        return self._result

    @property
    def error(self) -> str | None:
        """Message for the error banner, if the displayed fetch failed."""
        return self._result.error if self._result is not None else None

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def is_viewing_today(self) -> bool:
        """Whether the viewed date is today (live data)."""
        return self._cursor.current_date == self._today()

    def area_label(self) -> str | None:
        """Geometry info text, e.g. ``"KML: fields.kml"``; ``None`` if no area."""
        return self._source.describe() if self._source is not None else None

    def area_hectares(self) -> float | None:
        """Geodesic area of the selected polygon, if one is available."""
        polygon = self._polygon()
        return compute_geodesic_area_ha(polygon) if polygon is not None else None

    # ------------------------------------------------------------------
    # Geometry selection
    # ------------------------------------------------------------------

    def begin_drawing(self) -> None:
        """Clear the current area and start drawing a new one."""
        self._drawing.start()

    def cancel_drawing(self) -> None:
        self._drawing.cancel()

    def import_file(self, filename: str, content: str) -> ImportedGeometry:
        """Make an uploaded KML/KMZ file the active area.

        The file is not parsed here; an unreadable file still becomes the
        active source and analysis will report it.

        Raises:
            UnsupportedFileError: If the filename is not ``.kml``/``.kmz``.
        """
        validate_upload_filename(filename)
        source = ImportedGeometry(filename=filename, content=content)
        self._drawing.disable()
        self._set_source(source)
        logger.info("Area imported | file=%s | parsed=%s", filename, source.polygon is not None)
        return source

    def clear_geometry(self) -> None:
        self._drawing.disable()
        self._set_source(None)

    # ------------------------------------------------------------------
    # Date range edits
    # ------------------------------------------------------------------

    def set_start(self, day: dt.date) -> bool:
        """Replace the range start.  Rejected (``False``) if after the end."""
        if day > self._range.end:
            logger.debug("Start %s rejected: after end %s", day, self._range.end)
            return False
        self._range = replace(self._range, start=day)
        return True

    def set_end(self, day: dt.date) -> bool:
        """Replace the range end.  Rejected if after today or before the start."""
        today = self._today()
        if day > today:
            logger.debug("End %s rejected: after today %s", day, today)
            return False
        if self._range.start > day:
            logger.debug("End %s rejected: before start %s", day, self._range.start)
            return False
        self._range = replace(self._range, end=day)
        return True

    # ------------------------------------------------------------------
    # Analysis mode
    # ------------------------------------------------------------------

    def enter_analysis(self) -> asyncio.Task[FetchResult]:
        """Switch to analysis, view the range end, and fetch its data.

        Must be called from within the running event loop.

        Raises:
            NoAreaSelectedError: If there is no area, the imported file
                yields no geometry, or no centroid can be computed.  The
                session is left unchanged.
        """
        loop = asyncio.get_running_loop()
        coordinate = self._require_coordinate()
        day = self._range.end
        self._cursor = ViewCursor(current_date=day, analysis_active=True)
        logger.info(
            "Analysis entered | range=%s..%s | point=(%.4f, %.4f)",
            self._range.start,
            self._range.end,
            coordinate.latitude,
            coordinate.longitude,
        )
        return self._issue_fetch(loop, coordinate, day)

    def exit_analysis(self) -> None:
        """Return to area selection, keeping the area and date range."""
        self._cursor = replace(self._cursor, analysis_active=False)

    def go_to_previous_date(self) -> asyncio.Task[FetchResult] | None:
        """Step one day back; ``None`` if refused or no fetch was issued."""
        current = self._cursor.current_date
        if current is None or self.loading:
            return None
        target = previous_date(current, self._range, self._today())
        if target is None:
            return None
        return self._move_to(target)

    def go_to_next_date(self) -> asyncio.Task[FetchResult] | None:
        """Step one day forward, or jump to ``min(end, today)`` if past it."""
        current = self._cursor.current_date
        if current is None or self.loading:
            return None
        target = next_date(current, self._range, self._today())
        if target is None:
            return None
        return self._move_to(target)

    def can_go_previous(self) -> bool:
        return not self.loading and can_go_previous(self._cursor.current_date, self._range)

    def can_go_next(self) -> bool:
        return not self.loading and can_go_next(
            self._cursor.current_date, self._range, self._today()
        )

    # ------------------------------------------------------------------
    # Page-navigation handoff
    # ------------------------------------------------------------------

    def export_handoff(self) -> AnalysisHandoff:
        """Snapshot the analysis view for a page navigation.

        Raises:
            NoAreaSelectedError: If there is no usable polygon.
        """
        polygon = self._polygon()
        if polygon is None:
            raise NoAreaSelectedError(NO_AREA_MESSAGE)
        return AnalysisHandoff(
            geometry=polygon.to_geojson(),
            start_date=self._range.start,
            end_date=self._range.end,
            current_date=self._cursor.current_date,
        )

    def restore(self, handoff: AnalysisHandoff | dict[str, Any]) -> asyncio.Task[FetchResult]:
        """Restore an analysis view carried across a page navigation.

        Validated like ``enter_analysis``; the carried current date is
        kept only if it lies within ``[start, min(end, today)]``, otherwise
        the view starts at the range end.  Nothing changes on failure.

        Raises:
            HandoffError: If the payload is malformed.
            DateRangeError: If the dates violate ``start <= end <= today``.
            NoAreaSelectedError: If the geometry yields no centroid.
        """
        loop = asyncio.get_running_loop()
        if not isinstance(handoff, AnalysisHandoff):
            handoff = AnalysisHandoff.parse(handoff)

        polygon = handoff.polygon()
        today = self._today()
        validate_range(handoff.start_date, handoff.end_date, today)
        coordinate = compute_centroid(polygon, epsilon=self._config.centroid_epsilon)
        if coordinate is None:
            raise NoAreaSelectedError(NO_AREA_MESSAGE)

        date_range = DateRange(start=handoff.start_date, end=handoff.end_date)
        day = handoff.current_date
        if day is None or day not in date_range or day > today:
            day = date_range.end

        self._drawing.disable()
        self._set_source(DrawnGeometry(polygon))
        self._range = date_range
        self._cursor = ViewCursor(current_date=day, analysis_active=True)
        logger.info("Analysis restored | range=%s..%s | date=%s", date_range.start, date_range.end, day)
        return self._issue_fetch(loop, coordinate, day)

    # ------------------------------------------------------------------
    # Monthly calendar support
    # ------------------------------------------------------------------

    async def monthly_weather(self, year: int | None = None, month: int | None = None) -> MonthlyWeather:
        """Fetch a month of weather at the area's centroid.

        Defaults to the month of the viewed date (or the range end).

        Raises:
            NoAreaSelectedError: If there is no usable area.
            FetchError: If the provider fails.
        """
        coordinate = self._require_coordinate()
        anchor = self._cursor.current_date or self._range.end
        return await self._provider.fetch_monthly_weather(
            coordinate.latitude,
            coordinate.longitude,
            year or anchor.year,
            month or anchor.month,
        )

    async def drain(self) -> None:
        """Wait for every in-flight fetch to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _on_drawing_started(self) -> None:
        self._set_source(None)

    def _on_polygon_drawn(self, polygon: Polygon) -> None:
        self._set_source(DrawnGeometry(polygon))

    def _set_source(self, source: GeometrySource | None) -> None:
        """Replace the active area and mirror it on the map."""
        self._source = source
        polygon = source.polygon if source is not None else None
        if polygon is None or not polygon.ring:
            self._host.clear_area()
            return
        self._host.show_area(polygon.to_latlon())
        self._host.fit_bounds(compute_bbox(polygon))

    def _polygon(self) -> Polygon | None:
        return self._source.polygon if self._source is not None else None

    def _require_coordinate(self) -> Coordinate:
        if self._source is None:
            raise NoAreaSelectedError(NO_AREA_MESSAGE)
        polygon = self._source.polygon
        if polygon is None:
            raise NoAreaSelectedError(UNPARSEABLE_AREA_MESSAGE)
        coordinate = compute_centroid(polygon, epsilon=self._config.centroid_epsilon)
        if coordinate is None:
            raise NoAreaSelectedError(UNPARSEABLE_AREA_MESSAGE)
        return coordinate

    def _move_to(self, day: dt.date) -> asyncio.Task[FetchResult] | None:
        self._cursor = replace(self._cursor, current_date=day)
        logger.debug("Viewing %s", day)
        if not self._cursor.analysis_active:
            return None
        polygon = self._polygon()
        coordinate = (
            compute_centroid(polygon, epsilon=self._config.centroid_epsilon)
            if polygon is not None
            else None
        )
        if coordinate is None:
            logger.warning("Date changed to %s but the area has no centroid; not fetching", day)
            return None
        return self._issue_fetch(asyncio.get_running_loop(), coordinate, day)

    def _issue_fetch(
        self,
        loop: asyncio.AbstractEventLoop,
        coordinate: Coordinate,
        day: dt.date,
    ) -> asyncio.Task[FetchResult]:
        self._sequence += 1
        token = self._sequence
        self._result = None
        self._in_flight += 1
        logger.info(
            "Fetch issued | seq=%d | date=%s | point=(%.4f, %.4f)",
            token,
            day,
            coordinate.latitude,
            coordinate.longitude,
        )
        task = loop.create_task(self._run_fetch(token, coordinate, day))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_fetch(self, token: int, coordinate: Coordinate, day: dt.date) -> FetchResult:
        try:
            weather, air_quality = await asyncio.gather(
                self._provider.fetch_weather(coordinate.latitude, coordinate.longitude, day),
                self._provider.fetch_air_quality(coordinate.latitude, coordinate.longitude, day),
            )
            result = FetchResult(
                coordinate=coordinate, date=day, weather=weather, air_quality=air_quality
            )
        except FetchError as exc:
            logger.warning("Fetch failed | seq=%d | date=%s | %s", token, day, exc)
            result = FetchResult(coordinate=coordinate, date=day, error=exc.message)
        except Exception as exc:
            logger.exception("Fetch crashed | seq=%d | date=%s", token, day)
            message = str(exc) or type(exc).__name__
            result = FetchResult(coordinate=coordinate, date=day, error=message)
        finally:
            self._in_flight -= 1

        if self._config.drop_stale_results and token != self._sequence:
            logger.warning(
                "Dropping stale fetch result | seq=%d | latest=%d | date=%s",
                token,
                self._sequence,
                day,
            )
            return result

        self._result = result
        logger.info("Fetch completed | seq=%d | date=%s | ok=%s", token, day, result.ok)
        return result
