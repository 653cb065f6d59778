"""Vehicle models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pyvehicles.exceptions import InvalidVehicleIdError
from pyvehicles.models.location import Location

VehicleId = uuid.UUID


def parse_vehicle_id(value: Any) -> uuid.UUID:
    """Map an external vehicle identifier to a :class:`uuid.UUID`.

    Accepts ``UUID`` instances and any string form :class:`uuid.UUID`
    understands (canonical, 32-digit hex, ``urn:uuid:``, braces).
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        raise InvalidVehicleIdError(f"vehicle id must be a UUID or string, got {type(value).__name__}", value=value)
    try:
        return uuid.UUID(value.strip())
    except ValueError as exc:
        raise InvalidVehicleIdError(f"invalid vehicle id: {value!r}", value=value) from exc


class Vehicle(BaseModel):
    """Latest known state of a tracked vehicle.

    Instances are immutable. The store replaces a vehicle wholesale on every
    position report, so a reader always sees ``location`` and
    ``position_time`` from the same report.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    id: VehicleId
    """Registry-assigned identifier."""
    registration_time: datetime
    """When the vehicle was registered (or implicitly created)."""
    location: Location | None = None
    """Last reported position, ``None`` until the first report."""
    position_time: datetime | None = None
    """Time of the last position report."""

    @model_validator(mode="after")
    def _position_fields_paired(self) -> Vehicle:
        if (self.location is None) != (self.position_time is None):
            raise ValueError("location and position_time must be set together")
        return self

    @property
    def is_positioned(self) -> bool:
        return self.location is not None

    def with_position(self, location: Location, at: datetime) -> Vehicle:
        """Return a copy carrying a new position and its report time."""
        return self.model_copy(update={"location": location, "position_time": at})


class VehicleBeacon(BaseModel):
    """A proximity query: find vehicles around *vehicle* within *radius* metres."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    vehicle: Vehicle
    radius: float


class NearbyVehicle(BaseModel):
    """One entry of a nearby-vehicles result, as exposed to transports.

    ``model_dump(by_alias=True, mode="json")`` yields
    ``{"vehicle_id": "<uuid>", "latitude": ..., "longitude": ...}``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )

    id: VehicleId = Field(alias="vehicle_id")
    latitude: float
    longitude: float

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> uuid.UUID:
        return parse_vehicle_id(value)

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle) -> NearbyVehicle:
        if vehicle.location is None:
            raise ValueError(f"vehicle {vehicle.id} has no location")
        return cls(
            id=vehicle.id,
            latitude=vehicle.location.latitude,
            longitude=vehicle.location.longitude,
        )
