"""Tabular budget breakdown for display and CSV export."""

from __future__ import annotations

from typing import List

import pandas as pd

from .engine import BudgetInsights, calculate_percentage
from .models import CalculationResult

BREAKDOWN_COLUMNS = ["channel", "campaign", "leads", "budget", "share_of_spend"]


def budget_breakdown(result: CalculationResult) -> pd.DataFrame:
    """
    One row per channel/campaign with annual leads, budget and share of paid spend.

    Args:
        result: Output of compute()

    Returns:
        DataFrame with BREAKDOWN_COLUMNS; share_of_spend is in percent
    """
    leads = result.lead_metrics
    channels = result.channel_leads
    budget = result.budget_allocation

    rows = [
        ("Google", "Service", channels.google_service_leads, budget.google_service_budget),
        ("Google", "Franchise", channels.google_franchise_leads, budget.google_franchise_budget),
        ("Meta", "Service", channels.meta_service_leads, budget.meta_service_budget),
        ("Meta", "Franchise", channels.meta_franchise_leads, budget.meta_franchise_budget),
        ("LinkedIn", "Commercial", leads.total_commercial_leads, budget.commercial_budget),
    ]

    df = pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS[:4])
    df["share_of_spend"] = df["budget"].apply(
        lambda b: calculate_percentage(b, budget.total_paid_ads)
    )
    return df


def channel_totals(result: CalculationResult) -> pd.DataFrame:
    """Budget and leads aggregated per channel."""
    df = budget_breakdown(result)
    return df.groupby("channel", sort=False)[["leads", "budget", "share_of_spend"]].sum().reset_index()


def summary_frame(result: CalculationResult, insights: BudgetInsights) -> pd.DataFrame:
    """Headline metrics as metric/value rows."""
    leads = result.lead_metrics
    financials = result.financial_metrics
    rows: List[tuple] = [
        ("Total leads", leads.total_leads),
        ("Total service leads", leads.total_service_leads),
        ("Total paid ads", result.budget_allocation.total_paid_ads),
        ("Total marketing budget", insights.total_marketing_budget),
        ("Customer LTV", financials.customer_ltv),
        ("Converted customers", financials.converted_customers),
        ("Projected revenue", financials.total_revenue),
        ("ROI %", financials.roi),
        ("Cost per acquisition", financials.cost_per_acquisition),
        ("LTV:CAC", financials.ltv_cac_ratio),
        ("Average CPL", financials.average_cpl),
        ("Break-even conversion rate", insights.breakeven_conversion_rate),
    ]
    return pd.DataFrame(rows, columns=["metric", "value"])


def to_csv_bytes(frame: pd.DataFrame) -> bytes:
    """Encode a frame as UTF-8 CSV for download."""
    return frame.to_csv(index=False).encode("utf-8")
