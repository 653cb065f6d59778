"""Geographic coordinate model."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pyvehicles._constants import LATITUDE_MAX, LATITUDE_MIN, LONGITUDE_MAX, LONGITUDE_MIN
from pyvehicles.exceptions import MalformedCoordinateError


class Location(BaseModel):
    """A point on the Earth's surface.

    Parameters
    ----------
    latitude : float
        Latitude in degrees, ``-90`` to ``90``.
    longitude : float
        Longitude in degrees, ``-180`` to ``180``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        allow_inf_nan=False,
    )

    latitude: float = Field(ge=LATITUDE_MIN, le=LATITUDE_MAX)
    longitude: float = Field(ge=LONGITUDE_MIN, le=LONGITUDE_MAX)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("coordinate must be a number, not a bool")
        return value

    @classmethod
    def of(cls, latitude: Any, longitude: Any) -> Location:
        """Build a validated location.

        Raises :class:`MalformedCoordinateError` when either value is out of
        range, non-finite or not a number.
        """
        try:
            return cls(latitude=latitude, longitude=longitude)
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
            raise MalformedCoordinateError(
                f"invalid coordinate ({latitude!r}, {longitude!r}): bad {fields or 'value'}",
                latitude=latitude,
                longitude=longitude,
            ) from exc

    @property
    def lat_rad(self) -> float:
        return math.radians(self.latitude)

    @property
    def lng_rad(self) -> float:
        return math.radians(self.longitude)
