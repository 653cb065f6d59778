"""Proximity engine.

Pure functions answering "which vehicles are within *radius* metres of a
center vehicle, with a position reported inside the staleness window?".
Nothing here mutates its inputs.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Iterable, Sequence
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import datetime, timedelta

from pyvehicles._constants import DEFAULT_CHUNK_SIZE, DEFAULT_PARALLEL_THRESHOLD, EARTH_RADIUS_M
from pyvehicles.exceptions import InvalidQueryError
from pyvehicles.geo import BoundingBox, central_angle
from pyvehicles.models.vehicle import Vehicle, VehicleId
from pyvehicles.state.policy import is_fresh

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProximityQuery:
    """Precomputed parameters of a single proximity query."""

    center_id: VehicleId
    center_lat: float
    center_lng: float
    radius: float
    now: datetime
    window: timedelta
    box: BoundingBox

    @classmethod
    def build(cls, center: Vehicle, radius: float, now: datetime, window: timedelta) -> ProximityQuery:
        if center.location is None:
            raise InvalidQueryError(f"vehicle {center.id} has no position", vehicle_id=center.id)
        return cls(
            center_id=center.id,
            center_lat=center.location.lat_rad,
            center_lng=center.location.lng_rad,
            radius=radius,
            now=now,
            window=window,
            box=BoundingBox.around(center.location, radius),
        )


def matches(candidate: Vehicle, query: ProximityQuery) -> bool:
    """Run the full filter pipeline for one candidate."""
    location = candidate.location
    if location is None or candidate.position_time is None:
        return False
    if candidate.id == query.center_id:
        return False
    if not is_fresh(candidate.position_time, query.now, query.window):
        return False
    lat = location.lat_rad
    lng = location.lng_rad
    # Cheap rejection before the trigonometry.
    if not query.box.contains_radians(lat, lng):
        return False
    distance = central_angle(query.center_lat, query.center_lng, lat, lng) * EARTH_RADIUS_M
    return distance < query.radius


def _filter_chunk(chunk: Sequence[Vehicle], query: ProximityQuery) -> list[Vehicle]:
    return [vehicle for vehicle in chunk if matches(vehicle, query)]


def _chunks(vehicles: Sequence[Vehicle], size: int) -> Iterable[Sequence[Vehicle]]:
    for start in range(0, len(vehicles), size):
        yield vehicles[start : start + size]


def find_within(
    center: Vehicle,
    radius: float,
    vehicles: Iterable[Vehicle],
    now: datetime,
    window: timedelta,
    *,
    executor: Executor | None = None,
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[Vehicle]:
    """Return the vehicles within *radius* metres of *center*.

    Parameters
    ----------
    center : Vehicle
        Reference vehicle. Must have a location; it is never part of the result.
    radius : float
        Search radius in metres. Non-positive radii match nothing.
    vehicles : iterable of Vehicle
        Candidates, typically a store snapshot.
    now : datetime
        Query time.
    window : timedelta
        Staleness window; positions reported at or before ``now - window``
        are ignored.
    executor : Executor, optional
        When given and there are more than *parallel_threshold* candidates,
        chunks of *chunk_size* candidates are filtered on the executor.

    Raises
    ------
    InvalidQueryError
        If *center* has no location.
    """
    if center.location is None:
        raise InvalidQueryError(f"vehicle {center.id} has no position", vehicle_id=center.id)
    if math.isnan(radius) or radius <= 0:
        return []
    query = ProximityQuery.build(center, radius, now, window)

    candidates = vehicles if isinstance(vehicles, Sequence) else list(vehicles)
    if executor is None or len(candidates) <= parallel_threshold:
        return _filter_chunk(candidates, query)

    _logger.debug("Fanning out proximity query over %d candidates", len(candidates))
    chunks = list(_chunks(candidates, max(1, chunk_size)))
    results = executor.map(_filter_chunk, chunks, itertools.repeat(query, len(chunks)))
    return list(itertools.chain.from_iterable(results))
