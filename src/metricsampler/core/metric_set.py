"""MetricSet: one emittable record of named, typed metric values."""

import logging
from collections.abc import Iterable, Iterator, Mapping

from metricsampler.adapters.storage.in_memory import get_default_cache
from metricsampler.core.errors import (
    InvalidTypeError,
    MetricError,
    UnknownSourceTypeError,
)
from metricsampler.core.models import MetricValue, SourceType
from metricsampler.core.ports import AsyncSampleCachePort, SampleCachePort
from metricsampler.core.sampling import cache_key, coerce_numeric, sample, sample_async

logger = logging.getLogger(__name__)

EVENT_TYPE = "event_type"
ENTITY_NAME = "entityName"

_SAMPLED = (SourceType.RATE, SourceType.DELTA)


def _source_type(name: str, source_type: object) -> SourceType:
    if isinstance(source_type, SourceType):
        return source_type
    if isinstance(source_type, bool):
        raise UnknownSourceTypeError(name, f"Unknown source type for key {name}")
    try:
        return SourceType(source_type)
    except (ValueError, TypeError):
        raise UnknownSourceTypeError(
            name, f"Unknown source type for key {name}"
        ) from None


class MetricSet(Mapping[str, MetricValue]):
    """Ordered mapping from metric name to value for a single record.

    RATE and DELTA readings are never stored raw: they are replaced by the
    value sampled against the previous reading held in the sample cache.
    The set itself keeps no state between collection cycles.

    Example:
        ```python
        cache = InMemorySampleCache()
        ms = MetricSet("NetworkSample", entity_name="host1", cache=cache)
        ms.set_metric("net.bytesPerSecond", 1024, SourceType.RATE)
        ```
    """

    def __init__(
        self,
        event_type: str,
        *,
        entity_name: str | None = None,
        cache: SampleCachePort | None = None,
    ) -> None:
        """Create a set holding the event_type attribute.

        Args:
            event_type: Record type, stored as the ``event_type`` attribute.
            entity_name: Optional owning entity, stored as ``entityName``.
            cache: Sample cache for RATE and DELTA metrics. Defaults to the
                process-wide in-memory cache.
        """
        self._metrics: dict[str, MetricValue] = {}
        self._cache = cache if cache is not None else get_default_cache()
        self.set_metric(EVENT_TYPE, event_type, SourceType.ATTRIBUTE)
        if entity_name is not None:
            self.set_metric(ENTITY_NAME, entity_name, SourceType.ATTRIBUTE)

    @property
    def cache(self) -> SampleCachePort:
        return self._cache

    def __getitem__(self, name: str) -> MetricValue:
        return self._metrics[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._metrics)

    def __len__(self) -> int:
        return len(self._metrics)

    def __repr__(self) -> str:
        return f"MetricSet({self._metrics!r})"

    def cache_key(self, name: str) -> str:
        """Return the sampling key for name within this set."""
        return cache_key(
            name, self._metrics.get(ENTITY_NAME), self._metrics.get(EVENT_TYPE)
        )

    def _validate(
        self, name: str, value: object, source_type: object
    ) -> tuple[MetricValue, SourceType]:
        """Check value against source_type and return it in stored form."""
        kind = _source_type(name, source_type)
        if kind == SourceType.ATTRIBUTE:
            if not isinstance(value, str):
                raise InvalidTypeError(name, f"Invalid data type for attribute {name}")
            return value, kind
        return coerce_numeric(name, value), kind

    def set_metric(self, name: str, value: object, source_type: SourceType) -> None:
        """Add or overwrite a metric, sampling RATE and DELTA readings.

        On failure nothing is written for name. For RATE and DELTA the cache
        still advances to the new reading when sampling fails.

        Raises:
            InvalidTypeError: value does not match source_type.
            UnknownSourceTypeError: source_type is not a SourceType.
            SamplesTooCloseError: No time elapsed since the previous reading.
            CounterResetError: A RATE or DELTA reading decreased.
        """
        stored, kind = self._validate(name, value, source_type)
        if kind in _SAMPLED:
            stored = sample(self._cache, name, self.cache_key(name), stored, kind)
        self._metrics[name] = stored

    async def set_metric_async(
        self,
        name: str,
        value: object,
        source_type: SourceType,
        cache: AsyncSampleCachePort,
    ) -> None:
        """Like set_metric(), sampling against an async cache instead."""
        stored, kind = self._validate(name, value, source_type)
        if kind in _SAMPLED:
            stored = await sample_async(cache, name, self.cache_key(name), stored, kind)
        self._metrics[name] = stored

    def set_metrics(
        self, items: Iterable[tuple[str, object, SourceType]]
    ) -> list[MetricError]:
        """Submit several metrics, skipping the ones that fail.

        Returns:
            The errors for rejected metrics, in submission order.
        """
        errors: list[MetricError] = []
        for name, value, source_type in items:
            try:
                self.set_metric(name, value, source_type)
            except MetricError as e:
                logger.warning(
                    "Skipping metric %s: %s",
                    name,
                    e,
                    extra={"metric": name, "error": type(e).__name__},
                )
                errors.append(e)
        return errors

    def to_dict(self) -> dict[str, MetricValue]:
        """Return a plain copy of the metrics, in insertion order."""
        return dict(self._metrics)
