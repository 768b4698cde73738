"""Configuration management for the marketing budget calculator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

CONFIG_PATH_ENV_VAR = "BUDGET_CALC_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "settings.yaml"


@dataclass(frozen=True)
class Regions:
    """Regional structure - reflects the current organizational footprint."""
    default_rmf_count: int = 13
    min_rmf_count: int = 1
    max_rmf_count: int = 20


@dataclass(frozen=True)
class TimePeriods:
    """Period multipliers used to annualize lead targets."""
    weeks_per_year: int = 52
    months_per_year: int = 12
    quarters_per_year: int = 4


@dataclass(frozen=True)
class ChannelSplits:
    """Fixed franchise channel ratios. Not user adjustable."""
    google_franchise_ratio: float = 0.7
    meta_franchise_ratio: float = 0.3


@dataclass(frozen=True)
class DefaultCPL:
    """Default cost-per-lead benchmarks by platform and campaign type."""
    google_service: float = 10
    meta_service: float = 8
    google_franchise: float = 15
    meta_franchise: float = 12
    linkedin_commercial: float = 50


@dataclass(frozen=True)
class CustomerMetrics:
    """Customer lifecycle defaults used for LTV."""
    default_monthly_fee: float = 120
    default_retention_months: float = 24
    default_conversion_rate: float = 0.25  # 25%
    default_google_service_split: float = 0.85  # 85% Google, 15% Meta


@dataclass(frozen=True)
class DefaultLeads:
    """Default lead targets shown when the calculator opens."""
    service_per_week_rmf: float = 15
    auckland_service_per_week: float = 100
    franchise_per_month: float = 5
    commercial_per_quarter: float = 1


@dataclass(frozen=True)
class LeadBounds:
    min_per_week_rmf: float = 1
    max_per_week_rmf: float = 50
    min_per_week_auckland: float = 1
    max_per_week_auckland: float = 200
    min_franchise_monthly: float = 1
    max_franchise_monthly: float = 20
    min_commercial_quarterly: float = 1
    max_commercial_quarterly: float = 10


@dataclass(frozen=True)
class CPLBounds:
    min: float = 1
    max_service: float = 100
    max_commercial: float = 200
    step_precision: float = 0.5


@dataclass(frozen=True)
class LTVBounds:
    """Conversion rate and Google split bounds are in percent."""
    min_monthly_fee: float = 50
    max_monthly_fee: float = 500
    min_retention_months: float = 6
    max_retention_months: float = 60
    min_conversion_rate: float = 5
    max_conversion_rate: float = 50
    min_google_split: float = 50
    max_google_split: float = 100


@dataclass(frozen=True)
class ValidationBounds:
    """Input validation boundaries."""
    leads: LeadBounds = field(default_factory=LeadBounds)
    cpl: CPLBounds = field(default_factory=CPLBounds)
    ltv: LTVBounds = field(default_factory=LTVBounds)


@dataclass(frozen=True)
class AdditionalBudget:
    """Marketing budget allocations beyond paid media."""
    out_of_home: float = 30000
    content_production: float = 15000

    @property
    def total(self) -> float:
        return self.out_of_home + self.content_production


@dataclass(frozen=True)
class BusinessConstants:
    """Fixed business constants, defaults and bounds for the calculator."""
    regions: Regions = field(default_factory=Regions)
    time_periods: TimePeriods = field(default_factory=TimePeriods)
    channel_splits: ChannelSplits = field(default_factory=ChannelSplits)
    default_cpl: DefaultCPL = field(default_factory=DefaultCPL)
    customer_metrics: CustomerMetrics = field(default_factory=CustomerMetrics)
    default_leads: DefaultLeads = field(default_factory=DefaultLeads)
    validation: ValidationBounds = field(default_factory=ValidationBounds)
    additional_budget: AdditionalBudget = field(default_factory=AdditionalBudget)


DEFAULT_CONSTANTS = BusinessConstants()


UI_TEXT = {
    "HEADERS": {
        "MAIN_TITLE": "CrewCut Marketing Budget Calculator",
        "MAIN_SUBTITLE": "Model lead targets, CPL scenarios, and budget allocation for 2026",
        "LEAD_TARGETS": "Lead Targets",
        "CPL": "Cost Per Lead (CPL)",
        "LTV_STRATEGY": "LTV & Channel Strategy",
        "ANNUAL_VOLUME": "Annual Lead Volume",
        "BUDGET_ALLOCATION": "Budget Allocation",
        "ROI_PROJECTION": "ROI Projection",
        "ADDITIONAL_BUDGET": "Recommended Additional Budget",
        "KEY_INSIGHTS": "Key Insights",
        "BREAKDOWN": "Budget Breakdown",
    },
    "LABELS": {
        "RMF_REGIONS": "RMF Regions (excluding Auckland)",
        "SERVICE_LEADS_RMF": "Service Leads per Week (per RMF region)",
        "AUCKLAND_LEADS": "Auckland Service Leads per Week",
        "FRANCHISE_LEADS": "Qualified Franchise Leads per Month",
        "COMMERCIAL_LEADS": "Qualified Commercial Leads per Quarter",
        "GOOGLE_SERVICE_CPL": "Google Service CPL",
        "META_SERVICE_CPL": "Meta Service CPL",
        "GOOGLE_FRANCHISE_CPL": "Google Franchise CPL",
        "META_FRANCHISE_CPL": "Meta Franchise CPL",
        "LINKEDIN_CPL": "LinkedIn Commercial CPL",
        "AVG_MONTHLY_FEE": "Average Monthly Service Fee",
        "AVG_RETENTION": "Average Customer Retention (months)",
        "CONVERSION_RATE": "Service Lead → Customer Conversion Rate",
        "GOOGLE_SPLIT": "Service Leads: Google Split",
    },
}

ERROR_MESSAGES = {
    "INVALID_NUMBER": "Please enter a valid number",
    "OUT_OF_RANGE": "Value is outside acceptable range",
    "CALCULATION_ERROR": "Error in calculation. Please check inputs.",
}


@dataclass
class LocaleSettings:
    """Number and currency presentation."""
    region: str = "en-NZ"
    currency: str = "NZD"
    currency_symbol: str = "$"
    thousands_separator: str = ","
    decimal_separator: str = "."
    currency_decimals: int = 0


@dataclass
class AppSettings:
    """Streamlit page settings."""
    page_title: str = UI_TEXT["HEADERS"]["MAIN_TITLE"]
    subtitle: str = UI_TEXT["HEADERS"]["MAIN_SUBTITLE"]
    log_level: str = "INFO"


@dataclass
class AdditionalBudgetSettings:
    """Non-paid budget items, overridable per deployment."""
    out_of_home: float = DEFAULT_CONSTANTS.additional_budget.out_of_home
    content_production: float = DEFAULT_CONSTANTS.additional_budget.content_production

    def to_constants(self) -> AdditionalBudget:
        return AdditionalBudget(
            out_of_home=float(self.out_of_home),
            content_production=float(self.content_production),
        )


@dataclass
class Settings:
    """Application settings."""
    locale: LocaleSettings = field(default_factory=LocaleSettings)
    app: AppSettings = field(default_factory=AppSettings)
    additional_budget: AdditionalBudgetSettings = field(default_factory=AdditionalBudgetSettings)


def _section(cls, data: Any, name: str):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown keys in config section '{name}': {', '.join(sorted(unknown))}")
    return cls(**data)


def resolve_config_path(config_path: Optional[Path] = None) -> Path:
    """Pick the settings file: explicit path, then env var, then the repo default."""
    if config_path is not None:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from YAML configuration file."""
    config_path = resolve_config_path(config_path)

    if not config_path.exists():
        return Settings()

    with config_path.open() as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping at the top level")

    return Settings(
        locale=_section(LocaleSettings, data.get("locale"), "locale"),
        app=_section(AppSettings, data.get("app"), "app"),
        additional_budget=_section(AdditionalBudgetSettings, data.get("additional_budget"), "additional_budget"),
    )


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once for the app process."""
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Load environment variables (BUDGET_CALC_CONFIG may come from .env)
load_dotenv(Path(__file__).parent.parent / ".env")

# Global settings instance
settings = load_settings()
