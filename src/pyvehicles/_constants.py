"""Internal constants shared across the library."""

from datetime import timedelta

# Mean Earth radius in metres (spherical approximation).
EARTH_RADIUS_M = 6371e3

LATITUDE_MIN = -90.0
LATITUDE_MAX = 90.0
LONGITUDE_MIN = -180.0
LONGITUDE_MAX = 180.0

DEFAULT_TIME_WINDOW = timedelta(seconds=5)
DEFAULT_SHARD_COUNT = 16

# Below this many candidates a query is evaluated inline, without the worker pool.
DEFAULT_PARALLEL_THRESHOLD = 10_000
DEFAULT_CHUNK_SIZE = 2_048
