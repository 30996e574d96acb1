"""Rate and delta computation over successive counter readings."""

import logging
import math
from decimal import Decimal

from metricsampler.core.errors import (
    CounterResetError,
    InvalidTypeError,
    SamplesTooCloseError,
)
from metricsampler.core.models import CacheEntry, SourceType
from metricsampler.core.ports import AsyncSampleCachePort, SampleCachePort

logger = logging.getLogger(__name__)


def cache_key(name: str, entity_name: object = None, event_type: object = None) -> str:
    """Build the sampling key for a metric.

    Args:
        name: Metric name.
        entity_name: Owning entity, usually the set's ``entityName`` attribute.
        event_type: Record type, usually the set's ``event_type`` attribute.

    Returns:
        ``"<entity>_<event_type>_<name>"`` when both context values are
        strings, otherwise the bare metric name.
    """
    if isinstance(entity_name, str) and isinstance(event_type, str):
        return f"{entity_name}_{event_type}_{name}"
    return name


def coerce_numeric(name: str, value: object) -> float:
    """Convert a raw numeric reading to float.

    Integers, floats and Decimals are accepted, as are strings holding an
    integer or decimal literal. Booleans are not numbers here, and neither
    are NaN, infinities or values out of float range.

    Raises:
        InvalidTypeError: If value is not numeric.
    """
    message = f"Invalid (non-numeric) data type for metric {name}"
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise InvalidTypeError(name, message)
    try:
        parsed = float(value.strip() if isinstance(value, str) else value)
    except (OverflowError, ValueError):
        raise InvalidTypeError(name, message) from None
    if not math.isfinite(parsed):
        raise InvalidTypeError(name, message)
    return parsed


def _compute(
    name: str,
    key: str,
    value: float,
    previous: CacheEntry | None,
    timestamp: int,
    source_type: SourceType,
) -> float:
    log_extra = {"metric": name, "key": key}
    if previous is None:
        logger.debug("Baseline recorded for %s", key, extra=log_extra)
        return 0.0

    duration = timestamp - previous.timestamp
    if duration == 0:
        logger.debug("Samples too close for %s", key, extra=log_extra)
        raise SamplesTooCloseError(
            name, key, f"Samples for {key} are too close in time, skipping sampling"
        )

    difference = value - previous.value
    if difference < 0:
        logger.debug("Counter reset for %s", key, extra=log_extra)
        raise CounterResetError(
            name, key, f"Source for {key} was reset, skipping sampling"
        )

    if source_type == SourceType.DELTA:
        return difference
    return difference / duration


def sample(
    cache: SampleCachePort,
    name: str,
    key: str,
    value: float,
    source_type: SourceType,
) -> float:
    """Turn a counter reading into a RATE or DELTA value.

    The cache always advances to the new reading, including when the
    computation fails, so the next call compares against this reading.

    Args:
        cache: Cache holding the previous reading for key.
        name: Metric name, reported in errors.
        key: Sampling key (see cache_key()).
        value: New raw reading.
        source_type: SourceType.RATE or SourceType.DELTA.

    Returns:
        0.0 for the first reading of a key, the difference from the previous
        reading for DELTA, or the difference per clock unit for RATE.

    Raises:
        SamplesTooCloseError: No time elapsed since the previous reading.
        CounterResetError: The reading decreased.
    """
    previous = cache.get(key)
    timestamp = cache.set(key, value)
    return _compute(name, key, value, previous, timestamp, source_type)


async def sample_async(
    cache: AsyncSampleCachePort,
    name: str,
    key: str,
    value: float,
    source_type: SourceType,
) -> float:
    """Async variant of sample() for caches backed by non-blocking storage."""
    previous = await cache.get_async(key)
    timestamp = await cache.set_async(key, value)
    return _compute(name, key, value, previous, timestamp, source_type)
