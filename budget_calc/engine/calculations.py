"""
Calculation engine for the marketing budget model.

Turns a flat set of lead targets, CPL assumptions and customer-value inputs
into annual lead volumes, channel budgets and ROI metrics. Everything here is
closed-form arithmetic with no I/O and no rounding; display rounding is left
to the formatting layer.
"""

from typing import Optional, Tuple

from ..config import DEFAULT_CONSTANTS, BusinessConstants
from ..models import (
    BudgetAllocation,
    CalculationResult,
    CalculatorInputs,
    ChannelLeads,
    FinancialMetrics,
    LeadMetrics,
)


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Divide, returning 0 when the denominator is 0.

    Keeps ratios finite under zero-spend or zero-lead scenarios.

    Args:
        numerator: Dividend
        denominator: Divisor

    Returns:
        numerator / denominator, or 0.0 if denominator is 0
    """
    if denominator == 0:
        return 0.0
    return numerator / denominator


def annualize_leads(inputs: CalculatorInputs, constants: BusinessConstants) -> LeadMetrics:
    """
    Convert every periodic lead target to an annual count.

    Args:
        inputs: Calculator inputs
        constants: Constants table (period multipliers)

    Returns:
        LeadMetrics with per-segment annual counts and their sum
    """
    periods = constants.time_periods

    rmf_annual = inputs.rmf_region_count * inputs.service_leads_per_week_rmf * periods.weeks_per_year
    auckland_annual = inputs.auckland_service_leads_per_week * periods.weeks_per_year
    total_service = rmf_annual + auckland_annual

    total_franchise = inputs.franchise_leads_per_month * periods.months_per_year
    total_commercial = inputs.commercial_leads_per_quarter * periods.quarters_per_year

    return LeadMetrics(
        rmf_service_leads_annual=rmf_annual,
        auckland_service_leads_annual=auckland_annual,
        total_service_leads=total_service,
        total_franchise_leads=total_franchise,
        total_commercial_leads=total_commercial,
        total_leads=total_service + total_franchise + total_commercial,
    )


def split_service_leads(total_service_leads: float, google_split: float) -> Tuple[float, float]:
    """
    Split service leads between Google and Meta by the user-controlled fraction.

    Returns:
        (google_leads, meta_leads)
    """
    google = total_service_leads * google_split
    meta = total_service_leads * (1 - google_split)
    return google, meta


def split_franchise_leads(total_franchise_leads: float, constants: BusinessConstants) -> Tuple[float, float]:
    """
    Split franchise leads using the fixed 70/30 channel ratios.

    Returns:
        (google_leads, meta_leads)
    """
    splits = constants.channel_splits
    return (
        total_franchise_leads * splits.google_franchise_ratio,
        total_franchise_leads * splits.meta_franchise_ratio,
    )


def allocate_budget(
    inputs: CalculatorInputs, leads: LeadMetrics, channels: ChannelLeads
) -> BudgetAllocation:
    """
    Price each channel bucket at its CPL and aggregate.

    Meta has no commercial spend; LinkedIn carries the whole commercial segment.
    """
    google_service = channels.google_service_leads * inputs.google_service_cpl
    meta_service = channels.meta_service_leads * inputs.meta_service_cpl
    google_franchise = channels.google_franchise_leads * inputs.google_franchise_cpl
    meta_franchise = channels.meta_franchise_leads * inputs.meta_franchise_cpl
    commercial = leads.total_commercial_leads * inputs.linkedin_commercial_cpl

    total_google = google_service + google_franchise
    total_meta = meta_service + meta_franchise

    return BudgetAllocation(
        google_service_budget=google_service,
        meta_service_budget=meta_service,
        google_franchise_budget=google_franchise,
        meta_franchise_budget=meta_franchise,
        commercial_budget=commercial,
        total_google_budget=total_google,
        total_meta_budget=total_meta,
        total_paid_ads=total_google + total_meta + commercial,
    )


def compute_financials(
    inputs: CalculatorInputs, leads: LeadMetrics, budget: BudgetAllocation
) -> FinancialMetrics:
    """
    Compute LTV, revenue and return metrics.

    Only service leads convert to paying customers; franchise and commercial
    funnels are excluded from revenue. LTV is a flat fee times a fixed
    retention period.

    ROI Calculation Method: (Revenue - Cost) / Cost x 100
    Example: 300% ROI means every $1 spent returns $4 total ($3 profit)
    """
    spend = budget.total_paid_ads

    customer_ltv = inputs.avg_monthly_service_fee * inputs.avg_customer_retention_months
    converted_customers = leads.total_service_leads * inputs.service_lead_conversion_rate
    total_revenue = converted_customers * customer_ltv

    roi = safe_divide(total_revenue - spend, spend) * 100
    cost_per_acquisition = safe_divide(spend, converted_customers)
    ltv_cac_ratio = safe_divide(customer_ltv, cost_per_acquisition)
    average_cpl = safe_divide(spend, leads.total_leads)

    return FinancialMetrics(
        customer_ltv=customer_ltv,
        converted_customers=converted_customers,
        total_revenue=total_revenue,
        roi=roi,
        cost_per_acquisition=cost_per_acquisition,
        ltv_cac_ratio=ltv_cac_ratio,
        average_cpl=average_cpl,
    )


def compute(
    inputs: CalculatorInputs, constants: Optional[BusinessConstants] = None
) -> CalculationResult:
    """
    Run the full budget model.

    Args:
        inputs: Pre-validated, finite calculator inputs
        constants: Constants table (defaults to DEFAULT_CONSTANTS)

    Returns:
        CalculationResult at full floating-point precision
    """
    constants = constants or DEFAULT_CONSTANTS

    leads = annualize_leads(inputs, constants)

    google_service, meta_service = split_service_leads(
        leads.total_service_leads, inputs.google_service_split
    )
    google_franchise, meta_franchise = split_franchise_leads(
        leads.total_franchise_leads, constants
    )
    channels = ChannelLeads(
        google_service_leads=google_service,
        meta_service_leads=meta_service,
        google_franchise_leads=google_franchise,
        meta_franchise_leads=meta_franchise,
    )

    budget = allocate_budget(inputs, leads, channels)
    financials = compute_financials(inputs, leads, budget)

    return CalculationResult(
        lead_metrics=leads,
        channel_leads=channels,
        budget_allocation=budget,
        financial_metrics=financials,
    )
