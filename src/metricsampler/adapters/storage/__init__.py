"""Sample cache adapters implementing core ports."""

from metricsampler.adapters.storage.bounded import BoundedSampleCache
from metricsampler.adapters.storage.in_memory import (
    InMemorySampleCache,
    epoch_seconds,
    get_default_cache,
)
from metricsampler.adapters.storage.sqlite import SQLiteSampleCache

__all__ = [
    "BoundedSampleCache",
    "InMemorySampleCache",
    "SQLiteSampleCache",
    "epoch_seconds",
    "get_default_cache",
]
