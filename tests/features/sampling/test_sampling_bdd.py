"""BDD tests for counter sampling and metric validation.

Step definitions are in conftest.py.
"""

import pytest
from pytest_bdd import scenarios

scenarios("counter_sampling.feature")
scenarios("metric_validation.feature")

pytestmark = [pytest.mark.tier(1), pytest.mark.core]
