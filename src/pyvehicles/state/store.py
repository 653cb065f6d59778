"""Thread-safe in-memory vehicle store.

This is the only component allowed to mutate vehicle state. Vehicles are
spread across independently locked shards so that writers for unrelated
vehicles do not contend on a single lock.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime

from pyvehicles._constants import DEFAULT_SHARD_COUNT
from pyvehicles.models.location import Location
from pyvehicles.models.vehicle import Vehicle, VehicleId
from pyvehicles.state.events import PositionOutcome, PositionUpdate

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class _Shard:
    lock: threading.Lock = field(default_factory=threading.Lock)
    vehicles: dict[VehicleId, Vehicle] = field(default_factory=dict)


class VehicleStore:
    """In-memory store holding the latest state of every vehicle.

    Stored :class:`Vehicle` objects are immutable and replaced whole under
    the owning shard's lock, so each per-vehicle read is atomic. A
    :meth:`snapshot` copies one shard at a time and gives no consistency
    guarantee across shards.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        shard_count: int = DEFAULT_SHARD_COUNT,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ) -> None:
        if shard_count < 1:
            raise ValueError(f"shard_count must be >= 1, got {shard_count}")
        self._clock = clock
        self._id_factory = id_factory
        self._shards: tuple[_Shard, ...] = tuple(_Shard() for _ in range(shard_count))

    def _shard(self, vehicle_id: VehicleId) -> _Shard:
        return self._shards[vehicle_id.int % len(self._shards)]

    def register(self) -> Vehicle:
        """Create a vehicle with a fresh identifier and no position."""
        while True:
            vehicle_id = self._id_factory()
            shard = self._shard(vehicle_id)
            with shard.lock:
                if vehicle_id in shard.vehicles:
                    continue
                vehicle = Vehicle(id=vehicle_id, registration_time=self._clock())
                shard.vehicles[vehicle_id] = vehicle
            _logger.debug("Registered vehicle id=%s", vehicle_id)
            return vehicle

    def report_position(self, vehicle_id: VehicleId, location: Location) -> PositionUpdate:
        """Record *location* as the vehicle's latest position.

        Unknown identifiers are accepted: the vehicle is created on the spot
        with the report time as its registration time, and the result's
        outcome is :attr:`PositionOutcome.CREATED_IMPLICITLY`.
        """
        shard = self._shard(vehicle_id)
        with shard.lock:
            reported_at = self._clock()
            previous = shard.vehicles.get(vehicle_id)
            if previous is None:
                vehicle = Vehicle(
                    id=vehicle_id,
                    registration_time=reported_at,
                    location=location,
                    position_time=reported_at,
                )
                outcome = PositionOutcome.CREATED_IMPLICITLY
            else:
                vehicle = previous.with_position(location, reported_at)
                outcome = PositionOutcome.UPDATED
            shard.vehicles[vehicle_id] = vehicle
        return PositionUpdate(outcome=outcome, vehicle=vehicle, previous=previous)

    def get(self, vehicle_id: VehicleId) -> Vehicle | None:
        shard = self._shard(vehicle_id)
        with shard.lock:
            return shard.vehicles.get(vehicle_id)

    def snapshot(self) -> list[Vehicle]:
        """Return the current vehicles, copying one shard at a time."""
        result: list[Vehicle] = []
        for shard in self._shards:
            with shard.lock:
                result.extend(shard.vehicles.values())
        return result

    def __iter__(self) -> Iterator[Vehicle]:
        return iter(self.snapshot())

    def __contains__(self, vehicle_id: object) -> bool:
        if not isinstance(vehicle_id, uuid.UUID):
            return False
        return self.get(vehicle_id) is not None

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.vehicles)
        return total
