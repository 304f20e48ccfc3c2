"""Map rendering host abstraction.

The drawing machine and the navigation session talk to the map only
through this interface, so they never know which rendering toolkit is
behind it.  Every point crossing this boundary is ``(lat, lon)``: the
map's own convention, not the package's canonical ``(lon, lat)``.

``InMemoryMapHost`` records live layers instead of drawing them.  It is
the headless default and lets tests assert that no marker or preview
line survives a state transition.
"""

from __future__ import annotations

import abc
import itertools
import logging
from dataclasses import dataclass, field

logger = logging.getLogger("climate_eye.drawing.map_host")

DRAW_CURSOR = "crosshair"
DEFAULT_CURSOR = ""


class MapHost(abc.ABC):
    """Abstract base class for map rendering hosts.

    Layer handles are opaque integers issued by the host; the caller
    hands them back to ``remove_layer``.
    """

    @abc.abstractmethod
    def add_marker(self, latitude: float, longitude: float) -> int:
        """Render a point marker and return its layer handle."""

    @abc.abstractmethod
    def add_preview_line(self, points: list[tuple[float, float]]) -> int:
        """Render an open dashed line through ``(lat, lon)`` points."""

    @abc.abstractmethod
    def remove_layer(self, handle: int) -> None:
        """Remove a layer previously returned by this host."""

    @abc.abstractmethod
    def set_cursor(self, cursor: str) -> None:
        """Set the map cursor (``""`` restores the default)."""

    @abc.abstractmethod
    def show_area(self, points: list[tuple[float, float]]) -> None:
        """Display the selected area as a filled polygon of ``(lat, lon)`` points."""

    @abc.abstractmethod
    def clear_area(self) -> None:
        """Remove the selected-area polygon, if any."""

    @abc.abstractmethod
    def fit_bounds(self, bbox: tuple[float, float, float, float]) -> None:
        """Zoom to ``(min_lon, min_lat, max_lon, max_lat)``."""


@dataclass
class Layer:
    """A recorded layer of the in-memory host."""

    kind: str
    points: list[tuple[float, float]] = field(default_factory=list)


class InMemoryMapHost(MapHost):
    """Map host that keeps its layers in a dict instead of drawing them."""

    def __init__(self) -> None:
        self.layers: dict[int, Layer] = {}
        self.cursor = DEFAULT_CURSOR
        self.area: list[tuple[float, float]] | None = None
        self.bounds: tuple[float, float, float, float] | None = None
        self._handles = itertools.count(1)

    def add_marker(self, latitude: float, longitude: float) -> int:
        return self._add(Layer("marker", [(latitude, longitude)]))

    def add_preview_line(self, points: list[tuple[float, float]]) -> int:
        return self._add(Layer("preview", list(points)))

    def remove_layer(self, handle: int) -> None:
        if self.layers.pop(handle, None) is None:
            logger.debug("remove_layer: unknown handle %d", handle)

    def set_cursor(self, cursor: str) -> None:
        self.cursor = cursor

    def show_area(self, points: list[tuple[float, float]]) -> None:
        self.area = list(points)

    def clear_area(self) -> None:
        self.area = None

    def fit_bounds(self, bbox: tuple[float, float, float, float]) -> None:
        self.bounds = bbox

    def layers_of(self, kind: str) -> list[Layer]:
        """Return live layers of one kind (``"marker"`` or ``"preview"``)."""
        return [layer for layer in self.layers.values() if layer.kind == kind]

    def _add(self, layer: Layer) -> int:
        handle = next(self._handles)
        self.layers[handle] = layer
        return handle
