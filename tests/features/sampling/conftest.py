"""BDD step definitions for sampling features."""

import json
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from metricsampler.adapters.storage.in_memory import InMemorySampleCache
from metricsampler.core import errors
from metricsampler.core.metric_set import MetricSet
from metricsampler.core.models import CacheEntry, SourceType
from tests.conftest import FakeClock


@dataclass
class SamplingScenarioContext:
    """State shared between the steps of one scenario."""

    clock: FakeClock = field(default_factory=FakeClock)
    cache: InMemorySampleCache | None = None
    event_type: str = ""
    entity_name: str | None = None
    metric_set: MetricSet | None = None
    error: errors.MetricError | None = None

    def new_set(self) -> MetricSet:
        assert self.cache is not None
        self.metric_set = MetricSet(
            self.event_type, entity_name=self.entity_name, cache=self.cache
        )
        return self.metric_set

    def submit(self, name: str, value: object, source_type: object) -> None:
        self.error = None
        try:
            metric_set = self.new_set()
            metric_set.set_metric(name, value, source_type)  # type: ignore[arg-type]
        except errors.MetricError as e:
            self.error = e


@pytest.fixture
def ctx() -> SamplingScenarioContext:
    """Fresh scenario context for each test."""
    return SamplingScenarioContext()


# === Background Steps ===


@given("an empty sample cache")
def given_empty_cache(ctx: SamplingScenarioContext) -> None:
    ctx.cache = InMemorySampleCache(clock=ctx.clock)


@given(
    parsers.parse('metric sets with event type "{event_type}" for entity "{entity}"')
)
def given_metric_set_context(
    ctx: SamplingScenarioContext, event_type: str, entity: str
) -> None:
    ctx.event_type = event_type
    ctx.entity_name = entity


# === Submission Steps ===


@when(
    parsers.parse('"{name}" is submitted as {kind} with value {value:g} at t={t:d}')
)
def when_submitted_at(
    ctx: SamplingScenarioContext, name: str, kind: str, value: float, t: int
) -> None:
    """Submit a reading in a new collection cycle at time t."""
    ctx.clock.now = t
    ctx.submit(name, value, SourceType[kind])


@when(parsers.parse('"{name}" is submitted as {kind} with raw value {value}'))
def when_submitted_raw(
    ctx: SamplingScenarioContext, name: str, kind: str, value: str
) -> None:
    """Submit a JSON-decoded value, so true/42/"text"/null keep their types."""
    ctx.submit(name, json.loads(value), SourceType[kind])


@when(
    parsers.parse(
        '"{name}" is submitted with source type {source_type:d} and value {value:g}'
    )
)
def when_submitted_unknown(
    ctx: SamplingScenarioContext, name: str, source_type: int, value: float
) -> None:
    ctx.submit(name, value, source_type)


# === Outcome Steps ===


@then(parsers.parse('the stored value of "{name}" is {value:g}'))
def then_stored_value(ctx: SamplingScenarioContext, name: str, value: float) -> None:
    assert ctx.error is None, f"unexpected error: {ctx.error}"
    assert ctx.metric_set is not None
    assert ctx.metric_set[name] == value


@then(parsers.parse("the submission fails with {error_name}"))
def then_submission_fails(ctx: SamplingScenarioContext, error_name: str) -> None:
    assert type(ctx.error) is getattr(errors, error_name)


@then(parsers.parse('"{name}" is not stored'))
def then_not_stored(ctx: SamplingScenarioContext, name: str) -> None:
    assert ctx.metric_set is not None
    assert name not in ctx.metric_set


@then(parsers.parse('the cached reading for "{key}" is {value:g} at t={t:d}'))
def then_cached_reading(
    ctx: SamplingScenarioContext, key: str, value: float, t: int
) -> None:
    assert ctx.cache is not None
    assert ctx.cache.get(key) == CacheEntry(value=value, timestamp=t)


@then("the sample cache is empty")
def then_cache_empty(ctx: SamplingScenarioContext) -> None:
    assert ctx.cache is not None
    assert len(ctx.cache) == 0
