from __future__ import annotations

from datetime import timedelta

import pytest

from pyvehicles.config import RegistryConfig, parse_duration
from pyvehicles.exceptions import VehiclesConfigError


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("5s", timedelta(seconds=5)),
        ("5", timedelta(seconds=5)),
        ("750ms", timedelta(milliseconds=750)),
        ("2m", timedelta(minutes=2)),
        ("1.5h", timedelta(hours=1.5)),
        (" 1d ", timedelta(days=1)),
        ("10S", timedelta(seconds=10)),
        (3, timedelta(seconds=3)),
        (0.25, timedelta(milliseconds=250)),
        (timedelta(seconds=9), timedelta(seconds=9)),
    ],
)
def test_parse_duration(raw: object, expected: timedelta) -> None:
    assert parse_duration(raw) == expected  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "raw",
    ["", "five", "5 weeks", "-5s", "PT5S", "99999999999d", "99999999999999999999", float("nan"), float("inf"), 1e20],
)
def test_parse_duration_rejects_garbage(raw: object) -> None:
    with pytest.raises(VehiclesConfigError):
        parse_duration(raw)  # type: ignore[arg-type]


def test_from_env_rejects_oversized_window(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLES_TIME_WINDOW", "99999999999999999999")

    with pytest.raises(VehiclesConfigError):
        RegistryConfig.from_env()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(5, timedelta(seconds=5)), (0.5, timedelta(milliseconds=500)), ("2m", timedelta(minutes=2))],
)
def test_time_window_is_normalised(raw: object, expected: timedelta) -> None:
    assert RegistryConfig(time_window=raw).time_window == expected  # type: ignore[arg-type]


def test_time_window_rejects_unparseable_value() -> None:
    with pytest.raises(VehiclesConfigError):
        RegistryConfig(time_window="soon")  # type: ignore[arg-type]


def test_defaults() -> None:
    config = RegistryConfig()
    assert config.time_window == timedelta(seconds=5)
    assert config.shard_count == 16
    assert config.max_workers is None
    assert config.parallel_enabled


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLES_TIME_WINDOW", "30s")
    monkeypatch.setenv("VEHICLES_SHARD_COUNT", "4")
    monkeypatch.setenv("VEHICLES_PARALLEL_THRESHOLD", "100")
    monkeypatch.setenv("VEHICLES_MAX_WORKERS", "1")

    config = RegistryConfig.from_env()

    assert config.time_window == timedelta(seconds=30)
    assert config.shard_count == 4
    assert config.parallel_threshold == 100
    assert config.max_workers == 1
    assert not config.parallel_enabled


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLES_TIME_WINDOW", "30s")
    monkeypatch.setenv("VEHICLES_MAX_WORKERS", "auto")

    config = RegistryConfig.from_env(time_window="2s", shard_count=2)

    assert config.time_window == timedelta(seconds=2)
    assert config.shard_count == 2
    assert config.max_workers is None


def test_from_env_without_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("VEHICLES_TIME_WINDOW", "VEHICLES_SHARD_COUNT", "VEHICLES_PARALLEL_THRESHOLD", "VEHICLES_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)

    assert RegistryConfig.from_env() == RegistryConfig()


def test_from_env_rejects_non_integer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLES_SHARD_COUNT", "many")

    with pytest.raises(VehiclesConfigError):
        RegistryConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"time_window": timedelta(0)},
        {"time_window": timedelta(seconds=-1)},
        {"shard_count": 0},
        {"parallel_threshold": -1},
        {"max_workers": 0},
    ],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(VehiclesConfigError):
        RegistryConfig(**kwargs)
