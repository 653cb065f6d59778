"""Data models for the vehicle registry."""

from pyvehicles.models.location import Location
from pyvehicles.models.vehicle import NearbyVehicle, Vehicle, VehicleBeacon, VehicleId, parse_vehicle_id

__all__ = [
    "Location",
    "NearbyVehicle",
    "Vehicle",
    "VehicleBeacon",
    "VehicleId",
    "parse_vehicle_id",
]
