#!/usr/bin/env python3
"""Concurrent fleet simulation for pyvehicles.

Registers a fleet of vehicles scattered around a center point, then runs
reporter threads that keep moving them while query threads ask for nearby
vehicles. Prints per-operation throughput at the end.

Usage::

    python scripts/simulate_fleet.py --vehicles 5000 --seconds 3 -v
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import threading
import time
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyvehicles import InvalidQueryError, RegistryConfig, VehicleRegistry  # noqa: E402

_logger = logging.getLogger("simulate_fleet")
_counts_lock = threading.Lock()


def _jitter(rng: random.Random, center: float, spread: float, low: float, high: float) -> float:
    return max(low, min(high, center + rng.uniform(-spread, spread)))


def _reporter(
    registry: VehicleRegistry,
    vehicle_ids: list,
    args: argparse.Namespace,
    stop: threading.Event,
    counts: dict[str, int],
    seed: int,
) -> None:
    rng = random.Random(seed)
    done = 0
    while not stop.is_set():
        vehicle_id = rng.choice(vehicle_ids)
        lat = _jitter(rng, args.lat, args.spread, -90.0, 90.0)
        lng = _jitter(rng, args.lng, args.spread, -180.0, 180.0)
        registry.report_position(vehicle_id, lat, lng)
        done += 1
    with _counts_lock:
        counts["reports"] += done


def _querier(
    registry: VehicleRegistry,
    vehicle_ids: list,
    args: argparse.Namespace,
    stop: threading.Event,
    counts: dict[str, int],
    seed: int,
) -> None:
    rng = random.Random(seed)
    done = 0
    matched = 0
    while not stop.is_set():
        try:
            matched += len(registry.query_nearby(rng.choice(vehicle_ids), args.radius))
        except InvalidQueryError:
            _logger.debug("Query skipped: vehicle not positioned yet")
            continue
        done += 1
    with _counts_lock:
        counts["queries"] += done
        counts["matches"] += matched


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate concurrent vehicle reports and proximity queries.")
    parser.add_argument("--vehicles", type=int, default=1000, help="Fleet size")
    parser.add_argument("--reporters", type=int, default=4, help="Reporter threads")
    parser.add_argument("--queriers", type=int, default=2, help="Query threads")
    parser.add_argument("--seconds", type=float, default=2.0, help="Simulation length")
    parser.add_argument("--radius", type=float, default=2000.0, help="Query radius in metres")
    parser.add_argument("--lat", type=float, default=52.37, help="Fleet center latitude")
    parser.add_argument("--lng", type=float, default=4.89, help="Fleet center longitude")
    parser.add_argument("--spread", type=float, default=0.05, help="Fleet spread in degrees")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = RegistryConfig.from_env(time_window=max(args.seconds * 2, 5.0))
    counts = {"reports": 0, "queries": 0, "matches": 0}
    stop = threading.Event()

    with VehicleRegistry(config) as registry:
        vehicle_ids = [registry.register_vehicle() for _ in range(args.vehicles)]
        threads = [
            threading.Thread(target=_reporter, args=(registry, vehicle_ids, args, stop, counts, i))
            for i in range(args.reporters)
        ]
        threads += [
            threading.Thread(target=_querier, args=(registry, vehicle_ids, args, stop, counts, 1000 + i))
            for i in range(args.queriers)
        ]
        started = time.monotonic()
        for thread in threads:
            thread.start()
        time.sleep(args.seconds)
        stop.set()
        for thread in threads:
            thread.join()
        elapsed = time.monotonic() - started

    print(f"vehicles:  {args.vehicles}")
    print(f"reports:   {counts['reports']} ({counts['reports'] / elapsed:.0f}/s)")
    print(f"queries:   {counts['queries']} ({counts['queries'] / elapsed:.0f}/s)")
    if counts["queries"]:
        print(f"avg match: {counts['matches'] / counts['queries']:.1f}")


if __name__ == "__main__":
    main()
