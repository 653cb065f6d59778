from __future__ import annotations

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from pyvehicles.models.location import Location
from pyvehicles.state.events import PositionOutcome
from pyvehicles.state.store import VehicleStore

if TYPE_CHECKING:
    from conftest import FakeClock

_BASE = datetime(2026, 1, 1, tzinfo=UTC)


def test_register_creates_unpositioned_vehicle(clock: FakeClock) -> None:
    store = VehicleStore(clock=clock)

    vehicle = store.register()

    assert vehicle.location is None
    assert vehicle.position_time is None
    assert vehicle.registration_time == clock.now
    assert store.get(vehicle.id) == vehicle
    assert vehicle.id in store
    assert len(store) == 1


def test_register_retries_on_id_collision(clock: FakeClock) -> None:
    taken = uuid.UUID(int=7)
    fresh = uuid.UUID(int=8)
    ids = iter([taken, taken, fresh])
    store = VehicleStore(clock=clock, id_factory=lambda: next(ids))

    assert store.register().id == taken
    assert store.register().id == fresh


def test_report_position_updates_known_vehicle(clock: FakeClock) -> None:
    store = VehicleStore(clock=clock)
    registered = store.register()
    clock.advance(3)

    update = store.report_position(registered.id, Location.of(1.0, 2.0))

    assert update.outcome == PositionOutcome.UPDATED
    assert not update.created_implicitly
    assert update.previous == registered
    assert update.vehicle.location == Location.of(1.0, 2.0)
    assert update.vehicle.position_time == clock.now
    assert update.vehicle.registration_time == registered.registration_time
    # Stored vehicles are replaced, never mutated.
    assert registered.location is None


def test_report_position_for_unknown_id_creates_vehicle(clock: FakeClock) -> None:
    store = VehicleStore(clock=clock)
    vehicle_id = uuid.uuid4()

    update = store.report_position(vehicle_id, Location.of(10.0, 20.0))

    assert update.outcome == PositionOutcome.CREATED_IMPLICITLY
    assert update.created_implicitly
    assert update.previous is None
    stored = store.get(vehicle_id)
    assert stored is not None
    assert stored.registration_time == stored.position_time == clock.now
    assert stored.location == Location.of(10.0, 20.0)


def test_snapshot_contains_every_vehicle(clock: FakeClock) -> None:
    store = VehicleStore(clock=clock, shard_count=3)
    ids = {store.register().id for _ in range(50)}

    assert {vehicle.id for vehicle in store.snapshot()} == ids
    assert {vehicle.id for vehicle in store} == ids


def test_contains_ignores_non_uuid_keys() -> None:
    store = VehicleStore()
    assert "not-a-uuid" not in store


def test_shard_count_must_be_positive() -> None:
    with pytest.raises(ValueError):
        VehicleStore(shard_count=0)


def test_concurrent_registrations_are_unique() -> None:
    store = VehicleStore()

    with ThreadPoolExecutor(max_workers=16) as pool:
        vehicles = list(pool.map(lambda _: store.register(), range(2000)))

    assert len({vehicle.id for vehicle in vehicles}) == 2000
    assert len(store) == 2000


def test_concurrent_reports_are_atomic_per_vehicle() -> None:
    # Each writer thread reports latitude == its index, and the clock stamps
    # the report with the same index as seconds. A torn update would show a
    # latitude from one writer next to a timestamp from another.
    local = threading.local()

    def clock() -> datetime:
        return _BASE + timedelta(seconds=getattr(local, "index", 0))

    store = VehicleStore(clock=clock, shard_count=1)
    vehicle_id = store.register().id
    stop = threading.Event()
    torn: list[tuple[float, datetime]] = []

    def writer(index: int) -> None:
        local.index = index
        for _ in range(500):
            store.report_position(vehicle_id, Location.of(float(index), 0.0))

    def reader() -> None:
        while not stop.is_set():
            for vehicle in store.snapshot():
                if vehicle.location is None or vehicle.position_time is None:
                    continue
                expected = (vehicle.position_time - _BASE).total_seconds()
                if vehicle.location.latitude != expected:
                    torn.append((vehicle.location.latitude, vehicle.position_time))

    readers = [threading.Thread(target=reader) for _ in range(2)]
    writers = [threading.Thread(target=writer, args=(index,)) for index in range(1, 9)]
    for thread in readers + writers:
        thread.start()
    for thread in writers:
        thread.join()
    stop.set()
    for thread in readers:
        thread.join()

    assert torn == []
    final = store.get(vehicle_id)
    assert final is not None and final.location is not None
    assert 1.0 <= final.location.latitude <= 8.0
