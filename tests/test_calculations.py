"""
Budget model tests.

Covers annualization, channel splits, budget aggregation, customer value,
the zero-denominator guards and the documented reference scenarios.
"""

from dataclasses import replace

import pytest

from budget_calc.config import BusinessConstants, TimePeriods
from budget_calc.engine import (
    allocate_budget,
    annualize_leads,
    compute,
    safe_divide,
    split_franchise_leads,
    split_service_leads,
)
from budget_calc.models import CalculationResult


# (cpl field, budget fields that must not decrease when it rises)
CPL_BUDGETS = [
    ("google_service_cpl", ["google_service_budget", "total_google_budget", "total_paid_ads"]),
    ("meta_service_cpl", ["meta_service_budget", "total_meta_budget", "total_paid_ads"]),
    ("google_franchise_cpl", ["google_franchise_budget", "total_google_budget", "total_paid_ads"]),
    ("meta_franchise_cpl", ["meta_franchise_budget", "total_meta_budget", "total_paid_ads"]),
    ("linkedin_commercial_cpl", ["commercial_budget", "total_paid_ads"]),
]

VARIED_INPUTS = [
    dict(rmf_region_count=1, service_leads_per_week_rmf=1, auckland_service_leads_per_week=1, google_service_split=0.5),
    dict(rmf_region_count=20, service_leads_per_week_rmf=50, auckland_service_leads_per_week=200, google_service_split=0.65),
    dict(rmf_region_count=7, service_leads_per_week_rmf=3.5, auckland_service_leads_per_week=17, google_service_split=0.95),
    dict(rmf_region_count=13, service_leads_per_week_rmf=15, auckland_service_leads_per_week=100, google_service_split=0.0),
]


# =============================================================================
# Guarded division
# =============================================================================


class TestSafeDivide:
    def test_regular_division(self):
        assert safe_divide(10, 4) == 2.5

    def test_zero_denominator_returns_zero(self):
        assert safe_divide(10, 0) == 0.0

    def test_zero_float_denominator_returns_zero(self):
        assert safe_divide(-3.5, 0.0) == 0.0

    def test_negative_values(self):
        assert safe_divide(-9, 3) == -3


# =============================================================================
# Scenario A: opening defaults
# =============================================================================


class TestDefaultScenario:
    def test_lead_metrics(self, default_result):
        leads = default_result.lead_metrics
        assert leads.rmf_service_leads_annual == 10140
        assert leads.auckland_service_leads_annual == 5200
        assert leads.total_service_leads == 15340
        assert leads.total_franchise_leads == 60
        assert leads.total_commercial_leads == 4
        assert leads.total_leads == 15404

    def test_channel_leads(self, default_result):
        channels = default_result.channel_leads
        assert channels.google_service_leads == pytest.approx(13039)
        assert channels.meta_service_leads == pytest.approx(2301)
        assert channels.google_franchise_leads == pytest.approx(42)
        assert channels.meta_franchise_leads == pytest.approx(18)

    def test_budget_allocation(self, default_result):
        budget = default_result.budget_allocation
        assert budget.google_service_budget == pytest.approx(130390)
        assert budget.meta_service_budget == pytest.approx(18408)
        assert budget.google_franchise_budget == pytest.approx(630)
        assert budget.meta_franchise_budget == pytest.approx(216)
        assert budget.commercial_budget == pytest.approx(200)
        assert budget.total_google_budget == pytest.approx(131020)
        assert budget.total_meta_budget == pytest.approx(18624)
        assert budget.total_paid_ads == pytest.approx(149844)

    def test_financial_metrics(self, default_result):
        fin = default_result.financial_metrics
        spend = 149844
        assert fin.customer_ltv == 2880
        assert fin.converted_customers == pytest.approx(3835)
        assert fin.total_revenue == pytest.approx(3835 * 2880)
        assert fin.roi == pytest.approx((3835 * 2880 - spend) / spend * 100)
        assert fin.cost_per_acquisition == pytest.approx(spend / 3835)
        assert fin.ltv_cac_ratio == pytest.approx(2880 / (spend / 3835))
        assert fin.average_cpl == pytest.approx(spend / 15404)

    def test_values_are_not_rounded(self, make_inputs):
        result = compute(make_inputs(service_lead_conversion_rate=0.33))
        # 15340 * 0.33 is not an integer
        assert result.financial_metrics.converted_customers == pytest.approx(5062.2)
        assert result.financial_metrics.converted_customers != round(result.financial_metrics.converted_customers)


# =============================================================================
# Invariants
# =============================================================================


class TestInvariants:
    def test_deterministic(self, default_inputs):
        first = compute(default_inputs)
        second = compute(default_inputs)
        assert first == second
        assert first.to_dict() == second.to_dict()

    @pytest.mark.parametrize("overrides", VARIED_INPUTS)
    def test_service_segments_are_additive(self, make_inputs, overrides):
        leads = compute(make_inputs(**overrides)).lead_metrics
        assert leads.total_service_leads == leads.rmf_service_leads_annual + leads.auckland_service_leads_annual

    @pytest.mark.parametrize("split", [0.0, 0.15, 0.5, 0.85, 0.999, 1.0])
    def test_service_split_conserves_leads(self, make_inputs, split):
        result = compute(make_inputs(google_service_split=split))
        channels = result.channel_leads
        assert channels.google_service_leads + channels.meta_service_leads == pytest.approx(
            result.lead_metrics.total_service_leads
        )

    @pytest.mark.parametrize("overrides", VARIED_INPUTS)
    def test_franchise_split_uses_fixed_ratio(self, make_inputs, overrides):
        result = compute(make_inputs(franchise_leads_per_month=11, **overrides))
        channels = result.channel_leads
        total = result.lead_metrics.total_franchise_leads
        assert channels.google_franchise_leads == pytest.approx(total * 0.7)
        assert channels.meta_franchise_leads == pytest.approx(total * 0.3)
        assert channels.google_franchise_leads + channels.meta_franchise_leads == pytest.approx(total)

    def test_franchise_split_ignores_service_split(self, make_inputs):
        low = compute(make_inputs(google_service_split=0.5)).channel_leads
        high = compute(make_inputs(google_service_split=1.0)).channel_leads
        assert low.google_franchise_leads == high.google_franchise_leads
        assert low.meta_franchise_leads == high.meta_franchise_leads

    @pytest.mark.parametrize("cpl_field,budget_fields", CPL_BUDGETS)
    def test_raising_cpl_never_lowers_budget(self, make_inputs, cpl_field, budget_fields):
        previous = None
        for cpl in [1, 1.5, 10, 42, 100, 200]:
            budget = compute(make_inputs(**{cpl_field: cpl})).budget_allocation
            if previous is not None:
                for name in budget_fields:
                    assert getattr(budget, name) >= getattr(previous, name)
            previous = budget

    def test_meta_has_no_commercial_spend(self, make_inputs):
        low = compute(make_inputs(linkedin_commercial_cpl=1)).budget_allocation
        high = compute(make_inputs(linkedin_commercial_cpl=200)).budget_allocation
        assert low.total_meta_budget == high.total_meta_budget
        assert low.total_google_budget == high.total_google_budget

    def test_only_service_leads_convert(self, make_inputs):
        few = compute(make_inputs(franchise_leads_per_month=1, commercial_leads_per_quarter=1))
        many = compute(make_inputs(franchise_leads_per_month=20, commercial_leads_per_quarter=10))
        assert few.financial_metrics.converted_customers == many.financial_metrics.converted_customers
        assert few.financial_metrics.total_revenue == many.financial_metrics.total_revenue


# =============================================================================
# Zero guards (Scenario B)
# =============================================================================


class TestZeroGuards:
    def test_zero_spend_gives_zero_ratios(self, zero_spend_inputs):
        result = compute(zero_spend_inputs)
        assert result.budget_allocation.total_paid_ads == 0
        assert result.financial_metrics.roi == 0
        assert result.financial_metrics.cost_per_acquisition == 0
        assert result.financial_metrics.ltv_cac_ratio == 0

    def test_zero_leads_blended_cpl_is_zero(self, zero_spend_inputs):
        result = compute(zero_spend_inputs)
        assert result.lead_metrics.total_leads == 0
        assert result.financial_metrics.average_cpl == 0

    def test_zero_conversion_gives_zero_cpa_and_ratio(self, make_inputs):
        result = compute(make_inputs(service_lead_conversion_rate=0))
        fin = result.financial_metrics
        assert fin.converted_customers == 0
        assert fin.cost_per_acquisition == 0
        assert fin.ltv_cac_ratio == 0
        assert fin.roi == pytest.approx(-100)

    def test_zero_cpl_spend_only_from_franchise_and_commercial(self, make_inputs):
        result = compute(make_inputs(google_service_cpl=0, meta_service_cpl=0))
        assert result.budget_allocation.google_service_budget == 0
        assert result.budget_allocation.meta_service_budget == 0
        assert result.budget_allocation.total_paid_ads == pytest.approx(630 + 216 + 200)

    def test_negative_inputs_do_not_raise(self, make_inputs):
        result = compute(make_inputs(service_leads_per_week_rmf=-5, google_service_split=1.5))
        assert isinstance(result, CalculationResult)


# =============================================================================
# Split extremes (Scenario C)
# =============================================================================


class TestSplitExtremes:
    def test_all_google(self, make_inputs):
        result = compute(make_inputs(google_service_split=1.0))
        assert result.channel_leads.meta_service_leads == 0
        assert result.budget_allocation.meta_service_budget == 0
        assert result.channel_leads.google_service_leads == result.lead_metrics.total_service_leads

    def test_all_meta(self, make_inputs):
        result = compute(make_inputs(google_service_split=0.0))
        assert result.channel_leads.google_service_leads == 0
        assert result.budget_allocation.google_service_budget == 0
        assert result.channel_leads.meta_service_leads == result.lead_metrics.total_service_leads


# =============================================================================
# Building blocks
# =============================================================================


class TestBuildingBlocks:
    def test_annualize_uses_constants_table(self, default_inputs):
        custom = BusinessConstants(time_periods=TimePeriods(weeks_per_year=50, months_per_year=10, quarters_per_year=2))
        leads = annualize_leads(default_inputs, custom)
        assert leads.rmf_service_leads_annual == 13 * 15 * 50
        assert leads.total_franchise_leads == 50
        assert leads.total_commercial_leads == 2

    def test_split_service_leads(self):
        google, meta = split_service_leads(1000, 0.8)
        assert google == pytest.approx(800)
        assert meta == pytest.approx(200)

    def test_split_franchise_leads(self, constants):
        google, meta = split_franchise_leads(100, constants)
        assert google == pytest.approx(70)
        assert meta == pytest.approx(30)

    def test_allocate_budget_totals(self, default_inputs, default_result):
        budget = allocate_budget(default_inputs, default_result.lead_metrics, default_result.channel_leads)
        assert budget == default_result.budget_allocation
        assert budget.total_paid_ads == pytest.approx(
            budget.total_google_budget + budget.total_meta_budget + budget.commercial_budget
        )

    def test_compute_default_constants_matches_explicit(self, default_inputs, constants):
        assert compute(default_inputs) == compute(default_inputs, constants)

    def test_result_round_trips_through_dict(self, default_result):
        assert CalculationResult.from_dict(default_result.to_dict()) == default_result

    def test_inputs_replace_keeps_other_fields(self, default_inputs):
        changed = replace(default_inputs, google_service_cpl=20)
        assert changed.meta_service_cpl == default_inputs.meta_service_cpl
