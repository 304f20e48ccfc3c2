"""Page-navigation transfer state.

When the user leaves the analysis view for a detail page and comes
back, the host carries ``{geometry, startDate, endDate, currentDate}``
across the navigation.  This model validates that payload; the session
then re-validates it against the date invariants exactly as if the user
had pressed "Analyse".
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from climate_eye.core.exceptions import ContractError
from climate_eye.models.geometry import Polygon


class HandoffError(ContractError):
    """Raised when a transfer payload is malformed."""

    default_stage = "handoff"
    default_code = "HANDOFF_INVALID"


class AnalysisHandoff(BaseModel):
    """Ephemeral analysis state carried across a page navigation.

    Attributes:
        geometry: GeoJSON ``Polygon`` geometry dict of the selected area.
        start_date: Range start.
        end_date: Range end.
        current_date: Date being viewed when the user navigated away.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    geometry: dict[str, Any]
    start_date: dt.date = Field(alias="startDate")
    end_date: dt.date = Field(alias="endDate")
    current_date: dt.date | None = Field(default=None, alias="currentDate")

    @field_validator("geometry")
    @classmethod
    def _require_polygon(cls, value: dict[str, Any]) -> dict[str, Any]:
        if value.get("type") != "Polygon":
            msg = f"geometry must be a GeoJSON Polygon, got type {value.get('type')!r}"
            raise ValueError(msg)
        return value

    @classmethod
    def parse(cls, payload: dict[str, Any]) -> AnalysisHandoff:
        """Validate a raw transfer payload.

        Raises:
            HandoffError: If required keys are missing or malformed.
        """
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            msg = f"Invalid analysis handoff payload: {exc.error_count()} error(s)"
            raise HandoffError(msg) from exc

    def polygon(self) -> Polygon:
        """Decode the carried geometry.

        Raises:
            HandoffError: If the GeoJSON coordinates are malformed.
        """
        try:
            return Polygon.from_geojson(self.geometry)
        except (TypeError, ValueError) as exc:
            msg = f"Invalid handoff geometry: {exc}"
            raise HandoffError(msg) from exc

    def to_payload(self) -> dict[str, Any]:
        """Serialise with the camelCase keys the host router expects."""
        return self.model_dump(mode="json", by_alias=True)
