"""Vehicle registry: the operations exposed to transport collaborators."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from typing import Any

from pyvehicles.config import RegistryConfig
from pyvehicles.exceptions import InvalidQueryError
from pyvehicles.models.location import Location
from pyvehicles.models.vehicle import NearbyVehicle, Vehicle, VehicleBeacon, VehicleId, parse_vehicle_id
from pyvehicles.proximity import find_within
from pyvehicles.state.events import PositionUpdate
from pyvehicles.state.store import VehicleStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VehicleRegistry:
    """Thread-safe registry of vehicles and their latest positions.

    Usage::

        with VehicleRegistry(RegistryConfig.from_env()) as registry:
            vehicle_id = registry.register_vehicle()
            registry.report_position(vehicle_id, 52.37, 4.89)
            nearby = registry.query_nearby(vehicle_id, 2_000)
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        *,
        store: VehicleStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config or RegistryConfig()
        self._clock = clock
        self._store = store or VehicleStore(clock=clock, shard_count=self._config.shard_count)
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()
        self._closed = False

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def store(self) -> VehicleStore:
        return self._store

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> VehicleRegistry:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the query worker pool, if one was started."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
            self._closed = True
        if executor is not None:
            executor.shutdown(wait=True)

    def _query_executor(self, candidates: int) -> ThreadPoolExecutor | None:
        if not self._config.parallel_enabled or candidates <= self._config.parallel_threshold:
            return None
        with self._executor_lock:
            if self._closed:
                return None
            if self._executor is None:
                _logger.debug("Starting proximity worker pool max_workers=%s", self._config.max_workers)
                self._executor = ThreadPoolExecutor(
                    max_workers=self._config.max_workers,
                    thread_name_prefix="pyvehicles-query",
                )
            return self._executor

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def register_vehicle(self) -> VehicleId:
        """Register a new vehicle and return its identifier."""
        return self._store.register().id

    def report_position(self, vehicle_id: VehicleId | str, latitude: float, longitude: float) -> PositionUpdate:
        """Record the latest position of a vehicle.

        Reports for unknown identifiers create the vehicle implicitly and are
        logged at WARNING level.

        Raises
        ------
        MalformedCoordinateError
            If the coordinate is out of range or not finite.
        InvalidVehicleIdError
            If *vehicle_id* is not a valid UUID.
        """
        vid = parse_vehicle_id(vehicle_id)
        location = Location.of(latitude, longitude)
        update = self._store.report_position(vid, location)
        if update.created_implicitly:
            _logger.warning("Unknown vehicle: %s", vid)
        else:
            _logger.debug("Position vehicle=%s lat=%s lng=%s", vid, location.latitude, location.longitude)
        return update

    def get_vehicle(self, vehicle_id: VehicleId | str) -> Vehicle | None:
        return self._store.get(parse_vehicle_id(vehicle_id))

    def find_nearby(self, beacon: VehicleBeacon) -> list[Vehicle]:
        """Vehicles within ``beacon.radius`` metres of ``beacon.vehicle``."""
        snapshot = self._store.snapshot()
        now = self._clock()
        executor = self._query_executor(len(snapshot))
        try:
            result = find_within(
                beacon.vehicle,
                beacon.radius,
                snapshot,
                now,
                self._config.time_window,
                executor=executor,
                parallel_threshold=self._config.parallel_threshold,
            )
        except RuntimeError:
            # close() shut the pool down between acquiring it and submitting work.
            if executor is None:
                raise
            _logger.debug("Worker pool shut down during query; filtering inline")
            result = find_within(beacon.vehicle, beacon.radius, snapshot, now, self._config.time_window)
        _logger.debug(
            "Proximity query vehicle=%s radius=%s candidates=%d matches=%d",
            beacon.vehicle.id,
            beacon.radius,
            len(snapshot),
            len(result),
        )
        return result

    def query_nearby(self, vehicle_id: VehicleId | str, radius_meters: float) -> list[NearbyVehicle]:
        """Vehicles near *vehicle_id*, as ``(id, latitude, longitude)`` entries.

        Raises
        ------
        InvalidQueryError
            If the vehicle is unknown or has not reported a position yet.
        """
        vid = parse_vehicle_id(vehicle_id)
        center = self._store.get(vid)
        if center is None:
            raise InvalidQueryError(f"unknown vehicle: {vid}", vehicle_id=vid)
        if not center.is_positioned:
            raise InvalidQueryError(f"vehicle {vid} has no position", vehicle_id=vid)
        beacon = VehicleBeacon(vehicle=center, radius=radius_meters)
        return [NearbyVehicle.from_vehicle(vehicle) for vehicle in self.find_nearby(beacon)]
