"""Data models for the marketing budget calculator."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .config import DEFAULT_CONSTANTS, BusinessConstants


@dataclass(frozen=True)
class CalculatorInputs:
    """Flat input record for the calculation engine.

    Lead rates are per their native period (week, month, quarter). Conversion
    rate and Google service split are fractions in [0, 1].
    """
    rmf_region_count: float
    service_leads_per_week_rmf: float
    auckland_service_leads_per_week: float
    franchise_leads_per_month: float
    commercial_leads_per_quarter: float
    google_service_cpl: float
    meta_service_cpl: float
    google_franchise_cpl: float
    meta_franchise_cpl: float
    linkedin_commercial_cpl: float
    avg_monthly_service_fee: float
    avg_customer_retention_months: float
    service_lead_conversion_rate: float
    google_service_split: float

    @classmethod
    def defaults(cls, constants: Optional[BusinessConstants] = None) -> "CalculatorInputs":
        """Input record seeded from the constants table."""
        c = constants or DEFAULT_CONSTANTS
        return cls(
            rmf_region_count=c.regions.default_rmf_count,
            service_leads_per_week_rmf=c.default_leads.service_per_week_rmf,
            auckland_service_leads_per_week=c.default_leads.auckland_service_per_week,
            franchise_leads_per_month=c.default_leads.franchise_per_month,
            commercial_leads_per_quarter=c.default_leads.commercial_per_quarter,
            google_service_cpl=c.default_cpl.google_service,
            meta_service_cpl=c.default_cpl.meta_service,
            google_franchise_cpl=c.default_cpl.google_franchise,
            meta_franchise_cpl=c.default_cpl.meta_franchise,
            linkedin_commercial_cpl=c.default_cpl.linkedin_commercial,
            avg_monthly_service_fee=c.customer_metrics.default_monthly_fee,
            avg_customer_retention_months=c.customer_metrics.default_retention_months,
            service_lead_conversion_rate=c.customer_metrics.default_conversion_rate,
            google_service_split=c.customer_metrics.default_google_service_split,
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CalculatorInputs":
        return cls(**{key: float(value) for key, value in data.items()})


@dataclass(frozen=True)
class LeadMetrics:
    """Annualized lead counts per segment."""
    rmf_service_leads_annual: float
    auckland_service_leads_annual: float
    total_service_leads: float
    total_franchise_leads: float
    total_commercial_leads: float
    total_leads: float


@dataclass(frozen=True)
class ChannelLeads:
    """Leads routed to each paid channel."""
    google_service_leads: float
    meta_service_leads: float
    google_franchise_leads: float
    meta_franchise_leads: float


@dataclass(frozen=True)
class BudgetAllocation:
    """Spend per channel and campaign type, with totals."""
    google_service_budget: float
    meta_service_budget: float
    google_franchise_budget: float
    meta_franchise_budget: float
    commercial_budget: float
    total_google_budget: float
    total_meta_budget: float
    total_paid_ads: float


@dataclass(frozen=True)
class FinancialMetrics:
    """Revenue and return metrics.

    ``roi`` is in percent units (125.0 means 125%).
    """
    customer_ltv: float
    converted_customers: float
    total_revenue: float
    roi: float
    cost_per_acquisition: float
    ltv_cac_ratio: float
    average_cpl: float


@dataclass(frozen=True)
class CalculationResult:
    """Complete derived record."""
    lead_metrics: LeadMetrics
    channel_leads: ChannelLeads
    budget_allocation: BudgetAllocation
    financial_metrics: FinancialMetrics

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CalculationResult":
        """Create from dictionary."""
        return cls(
            lead_metrics=LeadMetrics(**data["lead_metrics"]),
            channel_leads=ChannelLeads(**data["channel_leads"]),
            budget_allocation=BudgetAllocation(**data["budget_allocation"]),
            financial_metrics=FinancialMetrics(**data["financial_metrics"]),
        )
