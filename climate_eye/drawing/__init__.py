"""Interactive polygon drawing.

- map_host: rendering host interface and an in-memory implementation
- machine: click-sequence → polygon state machine
"""

from climate_eye.drawing.machine import DrawingMachine, DrawState
from climate_eye.drawing.map_host import InMemoryMapHost, MapHost

__all__ = [
    "DrawState",
    "DrawingMachine",
    "InMemoryMapHost",
    "MapHost",
]
