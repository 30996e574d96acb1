"""Errors raised when a metric cannot be stored in a MetricSet."""


class MetricError(Exception):
    """Base class for all metric submission failures.

    Attributes:
        name: Name of the metric that was rejected.
    """

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class InvalidTypeError(MetricError, TypeError):
    """Value type does not match what the source type requires."""


class UnknownSourceTypeError(MetricError, ValueError):
    """Source type is not one of GAUGE, RATE, DELTA or ATTRIBUTE."""


class SamplingError(MetricError):
    """A RATE or DELTA reading could not be turned into a sampled value.

    Attributes:
        key: Sampling key whose baseline was compared against.
    """

    def __init__(self, name: str, key: str, message: str) -> None:
        super().__init__(name, message)
        self.key = key


class SamplesTooCloseError(SamplingError):
    """Two readings for the same key were recorded at the same timestamp."""


class CounterResetError(SamplingError):
    """The reading is lower than the previous one for the same key."""
