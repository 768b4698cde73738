"""
Key insights derived from a calculation result.

Channel mix, break-even conversion and the total marketing budget once
non-paid items (out-of-home, content production) are added.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_CONSTANTS, AdditionalBudget
from ..models import CalculationResult
from .calculations import safe_divide


@dataclass(frozen=True)
class BudgetInsights:
    """Headline insights shown under the results panels."""

    # Share of paid spend, percent (0-100)
    google_share_pct: float
    meta_share_pct: float
    linkedin_share_pct: float

    # Paid ads plus non-paid items
    additional_budget_total: float
    total_marketing_budget: float

    # Conversion rate (fraction) at which service revenue covers paid spend
    breakeven_conversion_rate: float

    # Total returned per $1 of spend (roi/100 + 1)
    return_per_dollar: float
    is_profitable: bool


def calculate_percentage(value: float, total: float) -> float:
    """
    Percentage of value in total (0-100), 0 when total is 0.
    """
    return safe_divide(value, total) * 100


def compute_insights(
    result: CalculationResult, additional_budget: Optional[AdditionalBudget] = None
) -> BudgetInsights:
    """
    Derive key insights from a calculation result.

    Args:
        result: Output of compute()
        additional_budget: Non-paid budget items (defaults from the constants table)

    Returns:
        BudgetInsights
    """
    additional_budget = additional_budget or DEFAULT_CONSTANTS.additional_budget
    budget = result.budget_allocation
    financials = result.financial_metrics

    spend = budget.total_paid_ads
    spend_per_service_lead = safe_divide(spend, result.lead_metrics.total_service_leads)

    return BudgetInsights(
        google_share_pct=calculate_percentage(budget.total_google_budget, spend),
        meta_share_pct=calculate_percentage(budget.total_meta_budget, spend),
        linkedin_share_pct=calculate_percentage(budget.commercial_budget, spend),
        additional_budget_total=additional_budget.total,
        total_marketing_budget=spend + additional_budget.total,
        breakeven_conversion_rate=safe_divide(spend_per_service_lead, financials.customer_ltv),
        return_per_dollar=financials.roi / 100 + 1,
        is_profitable=financials.roi > 0,
    )
