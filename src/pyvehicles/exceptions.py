"""Custom exception hierarchy for pyvehicles."""

from __future__ import annotations

from typing import Any


class VehiclesError(Exception):
    """Base exception for all pyvehicles errors."""


class VehiclesConfigError(VehiclesError):
    """Invalid or missing configuration."""


class InvalidVehicleIdError(VehiclesError):
    """An external vehicle identifier is not a valid UUID."""

    def __init__(self, message: str, *, value: Any = None) -> None:
        self.value = value
        super().__init__(message)


class InvalidQueryError(VehiclesError):
    """Proximity query reference vehicle is unknown or has no position.

    Raised synchronously to the caller and never retried; the reference
    vehicle must have reported at least one position before it can be
    used as the center of a query.
    """

    def __init__(self, message: str, *, vehicle_id: Any = None) -> None:
        self.vehicle_id = vehicle_id
        super().__init__(message)


class MalformedCoordinateError(VehiclesError):
    """Latitude/longitude outside the valid range, or not a finite number."""

    def __init__(
        self,
        message: str,
        *,
        latitude: Any = None,
        longitude: Any = None,
    ) -> None:
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(message)
