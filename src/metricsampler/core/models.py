"""Core domain models for metric sampling."""

from dataclasses import dataclass
from enum import IntEnum

MetricValue = float | str


class SourceType(IntEnum):
    """Semantic kind of a submitted metric value.

    GAUGE values are stored as-is. RATE and DELTA values are readings of an
    ever-growing counter and are replaced by the change since the previous
    reading (per second for RATE). ATTRIBUTE values are plain strings.
    """

    GAUGE = 0
    RATE = 1
    DELTA = 2
    ATTRIBUTE = 3


@dataclass(frozen=True)
class CacheEntry:
    """The last raw reading recorded for a sampling key.

    Attributes:
        value: Raw counter reading.
        timestamp: Clock value at which the reading was recorded.
    """

    value: float
    timestamp: int
