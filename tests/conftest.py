"""
Shared fixtures for the budget calculator tests.

The default inputs reproduce the calculator's opening scenario: 13 RMF regions
at 15 leads/week, Auckland at 100 leads/week, 5 franchise leads/month and 1
commercial lead/quarter.
"""

from dataclasses import replace

import pytest

from budget_calc.config import DEFAULT_CONSTANTS, BusinessConstants
from budget_calc.engine import compute
from budget_calc.models import CalculatorInputs


CPL_FIELDS = [
    "google_service_cpl",
    "meta_service_cpl",
    "google_franchise_cpl",
    "meta_franchise_cpl",
    "linkedin_commercial_cpl",
]

LEAD_RATE_FIELDS = [
    "service_leads_per_week_rmf",
    "auckland_service_leads_per_week",
    "franchise_leads_per_month",
    "commercial_leads_per_quarter",
]


@pytest.fixture
def constants() -> BusinessConstants:
    return DEFAULT_CONSTANTS


@pytest.fixture
def default_inputs() -> CalculatorInputs:
    """Opening scenario inputs."""
    return CalculatorInputs.defaults()


@pytest.fixture
def default_result(default_inputs):
    return compute(default_inputs)


@pytest.fixture
def zero_spend_inputs(default_inputs) -> CalculatorInputs:
    """No leads in any segment, CPLs at the allowed minimum."""
    overrides = {name: 0 for name in LEAD_RATE_FIELDS}
    overrides.update({name: DEFAULT_CONSTANTS.validation.cpl.min for name in CPL_FIELDS})
    return replace(default_inputs, **overrides)


@pytest.fixture
def make_inputs(default_inputs):
    """Factory: default inputs with selected fields overridden."""
    def _make(**overrides) -> CalculatorInputs:
        return replace(default_inputs, **overrides)
    return _make
