"""pyvehicles - In-memory vehicle registry with proximity queries."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyvehicles")
except PackageNotFoundError:
    __version__ = "0+local"
from pyvehicles.config import RegistryConfig, parse_duration
from pyvehicles.exceptions import (
    InvalidQueryError,
    InvalidVehicleIdError,
    MalformedCoordinateError,
    VehiclesConfigError,
    VehiclesError,
)
from pyvehicles.geo import BoundingBox, great_circle_distance
from pyvehicles.models import Location, NearbyVehicle, Vehicle, VehicleBeacon, VehicleId, parse_vehicle_id
from pyvehicles.proximity import find_within
from pyvehicles.registry import VehicleRegistry
from pyvehicles.state.events import PositionOutcome, PositionUpdate
from pyvehicles.state.store import VehicleStore

__all__ = [
    "__version__",
    "BoundingBox",
    "InvalidQueryError",
    "InvalidVehicleIdError",
    "Location",
    "MalformedCoordinateError",
    "NearbyVehicle",
    "PositionOutcome",
    "PositionUpdate",
    "RegistryConfig",
    "Vehicle",
    "VehicleBeacon",
    "VehicleId",
    "VehicleRegistry",
    "VehicleStore",
    "VehiclesConfigError",
    "VehiclesError",
    "find_within",
    "great_circle_distance",
    "parse_duration",
]
