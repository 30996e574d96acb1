"""metricsampler: typed metric sets with rate and delta sampling.

Turns successive readings of monotonic counters into per-second rates or
deltas, keeping the previous reading of each counter in a sample cache.
"""

from metricsampler.adapters.storage import (
    BoundedSampleCache,
    InMemorySampleCache,
    SQLiteSampleCache,
    get_default_cache,
)
from metricsampler.core.errors import (
    CounterResetError,
    InvalidTypeError,
    MetricError,
    SamplesTooCloseError,
    SamplingError,
    UnknownSourceTypeError,
)
from metricsampler.core.metric_set import MetricSet
from metricsampler.core.models import CacheEntry, MetricValue, SourceType
from metricsampler.core.ports import AsyncSampleCachePort, SampleCachePort
from metricsampler.core.sampling import cache_key, coerce_numeric, sample, sample_async

__all__ = [
    # Models
    "CacheEntry",
    "MetricValue",
    "SourceType",
    # Metric set
    "MetricSet",
    # Sampling
    "cache_key",
    "coerce_numeric",
    "sample",
    "sample_async",
    # Ports
    "AsyncSampleCachePort",
    "SampleCachePort",
    # Cache adapters
    "BoundedSampleCache",
    "InMemorySampleCache",
    "SQLiteSampleCache",
    "get_default_cache",
    # Errors
    "CounterResetError",
    "InvalidTypeError",
    "MetricError",
    "SamplesTooCloseError",
    "SamplingError",
    "UnknownSourceTypeError",
]
