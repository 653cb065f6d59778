"""Registry configuration for pyvehicles."""

from __future__ import annotations

import dataclasses
import os
import re
from datetime import timedelta
from typing import Any

from pyvehicles._constants import (
    DEFAULT_PARALLEL_THRESHOLD,
    DEFAULT_SHARD_COUNT,
    DEFAULT_TIME_WINDOW,
)
from pyvehicles.exceptions import VehiclesConfigError

_DURATION_RE = re.compile(r"^\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>ms|s|m|h|d)?\s*$", re.IGNORECASE)

_DURATION_UNITS: dict[str, str] = {
    "ms": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(value: str | float | int | timedelta) -> timedelta:
    """Parse a duration such as ``"5s"``, ``"750ms"`` or ``"2m"``.

    A bare number is interpreted as seconds.

    Raises :class:`VehiclesConfigError` for anything else.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        unit, amount = "s", float(value)
    else:
        match = _DURATION_RE.match(str(value))
        if match is None:
            raise VehiclesConfigError(f"invalid duration: {value!r}")
        unit, amount = (match.group("unit") or "s").lower(), float(match.group("value"))
    try:
        return timedelta(**{_DURATION_UNITS[unit]: amount})
    except (OverflowError, ValueError) as exc:
        raise VehiclesConfigError(f"duration out of range: {value!r}") from exc


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise VehiclesConfigError(f"{name} must be an integer, got {value!r}") from exc


def _env_optional_int(name: str, value: str) -> int | None:
    normalized = value.strip().lower()
    if normalized in {"", "none", "auto"}:
        return None
    return _env_int(name, value)


@dataclasses.dataclass(frozen=True)
class RegistryConfig:
    """Vehicle registry configuration.

    Parameters
    ----------
    time_window : timedelta
        Staleness window. Positions reported longer ago than this are
        invisible to proximity queries. Defaults to 5 seconds.
    shard_count : int
        Number of independently locked shards in the vehicle store.
    parallel_threshold : int
        Snapshot size above which a proximity query fans out over the
        worker pool instead of running inline.
    max_workers : int or None
        Worker pool size. ``None`` uses the executor default; ``1``
        disables the pool entirely.
    """

    time_window: timedelta = DEFAULT_TIME_WINDOW
    shard_count: int = DEFAULT_SHARD_COUNT
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD
    max_workers: int | None = None

    def __post_init__(self) -> None:
        # frozen: normalise via object.__setattr__
        object.__setattr__(self, "time_window", parse_duration(self.time_window))
        if self.time_window <= timedelta(0):
            raise VehiclesConfigError(f"time_window must be positive, got {self.time_window}")
        if self.shard_count < 1:
            raise VehiclesConfigError(f"shard_count must be >= 1, got {self.shard_count}")
        if self.parallel_threshold < 0:
            raise VehiclesConfigError(f"parallel_threshold must be >= 0, got {self.parallel_threshold}")
        if self.max_workers is not None and self.max_workers < 1:
            raise VehiclesConfigError(f"max_workers must be >= 1, got {self.max_workers}")

    @property
    def parallel_enabled(self) -> bool:
        return self.max_workers != 1

    @classmethod
    def from_env(cls, **overrides: Any) -> RegistryConfig:
        """Create configuration from environment variables.

        Reads ``VEHICLES_TIME_WINDOW``, ``VEHICLES_SHARD_COUNT``,
        ``VEHICLES_PARALLEL_THRESHOLD`` and ``VEHICLES_MAX_WORKERS``.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        RegistryConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        window_env = env.get("VEHICLES_TIME_WINDOW")
        if window_env is not None and "time_window" not in overrides:
            config_kwargs["time_window"] = parse_duration(window_env)

        shards_env = env.get("VEHICLES_SHARD_COUNT")
        if shards_env is not None and "shard_count" not in overrides:
            config_kwargs["shard_count"] = _env_int("VEHICLES_SHARD_COUNT", shards_env)

        threshold_env = env.get("VEHICLES_PARALLEL_THRESHOLD")
        if threshold_env is not None and "parallel_threshold" not in overrides:
            config_kwargs["parallel_threshold"] = _env_int("VEHICLES_PARALLEL_THRESHOLD", threshold_env)

        workers_env = env.get("VEHICLES_MAX_WORKERS")
        if workers_env is not None and "max_workers" not in overrides:
            config_kwargs["max_workers"] = _env_optional_int("VEHICLES_MAX_WORKERS", workers_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
