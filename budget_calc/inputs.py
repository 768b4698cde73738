"""Input field definitions, parsing and clamping.

Raw form values are parsed and clamped here so the engine only ever sees
finite, in-bounds numbers. Conversion rate and Google split are entered as
percentages and stored as fractions.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config import DEFAULT_CONSTANTS, ERROR_MESSAGES, UI_TEXT, BusinessConstants
from .models import CalculatorInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputField:
    """A single numeric input as presented to the user."""
    key: str
    label: str
    default: float
    min_value: float
    max_value: float
    step: float = 1
    prefix: str = ""
    suffix: str = ""
    display_scale: float = 1  # 100 for fractions shown as percent

    @property
    def display_default(self) -> float:
        return round_to_decimals(self.default * self.display_scale, 6)


@dataclass(frozen=True)
class InputSection:
    header: str
    fields: Tuple[InputField, ...]


def safe_parse_float(value: Any, default: float = 0.0) -> float:
    """Parse a number, returning default for invalid or non-finite values."""
    if isinstance(value, bool):
        return default
    try:
        parsed = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    return parsed if math.isfinite(parsed) else default


def is_within_range(value: float, min_value: float, max_value: float) -> bool:
    return math.isfinite(value) and min_value <= value <= max_value


def clamp(value: float, min_value: float, max_value: float) -> float:
    return min(max(value, min_value), max_value)


def round_to_decimals(value: float, decimals: int = 2) -> float:
    multiplier = 10 ** decimals
    return round(value * multiplier) / multiplier


def build_sections(constants: Optional[BusinessConstants] = None) -> List[InputSection]:
    """Input sections in display order, seeded and bounded from the constants table."""
    c = constants or DEFAULT_CONSTANTS
    labels = UI_TEXT["LABELS"]
    headers = UI_TEXT["HEADERS"]
    leads = c.validation.leads
    cpl = c.validation.cpl
    ltv = c.validation.ltv

    lead_targets = InputSection(headers["LEAD_TARGETS"], (
        InputField("rmf_region_count", labels["RMF_REGIONS"],
                   c.regions.default_rmf_count, c.regions.min_rmf_count, c.regions.max_rmf_count),
        InputField("service_leads_per_week_rmf", labels["SERVICE_LEADS_RMF"],
                   c.default_leads.service_per_week_rmf, leads.min_per_week_rmf, leads.max_per_week_rmf),
        InputField("auckland_service_leads_per_week", labels["AUCKLAND_LEADS"],
                   c.default_leads.auckland_service_per_week, leads.min_per_week_auckland, leads.max_per_week_auckland),
        InputField("franchise_leads_per_month", labels["FRANCHISE_LEADS"],
                   c.default_leads.franchise_per_month, leads.min_franchise_monthly, leads.max_franchise_monthly),
        InputField("commercial_leads_per_quarter", labels["COMMERCIAL_LEADS"],
                   c.default_leads.commercial_per_quarter, leads.min_commercial_quarterly, leads.max_commercial_quarterly),
    ))

    cpl_section = InputSection(headers["CPL"], (
        InputField("google_service_cpl", labels["GOOGLE_SERVICE_CPL"],
                   c.default_cpl.google_service, cpl.min, cpl.max_service, cpl.step_precision, prefix="$"),
        InputField("meta_service_cpl", labels["META_SERVICE_CPL"],
                   c.default_cpl.meta_service, cpl.min, cpl.max_service, cpl.step_precision, prefix="$"),
        InputField("google_franchise_cpl", labels["GOOGLE_FRANCHISE_CPL"],
                   c.default_cpl.google_franchise, cpl.min, cpl.max_service, cpl.step_precision, prefix="$"),
        InputField("meta_franchise_cpl", labels["META_FRANCHISE_CPL"],
                   c.default_cpl.meta_franchise, cpl.min, cpl.max_service, cpl.step_precision, prefix="$"),
        InputField("linkedin_commercial_cpl", labels["LINKEDIN_CPL"],
                   c.default_cpl.linkedin_commercial, cpl.min, cpl.max_commercial, 1, prefix="$"),
    ))

    metrics = c.customer_metrics
    ltv_section = InputSection(headers["LTV_STRATEGY"], (
        InputField("avg_monthly_service_fee", labels["AVG_MONTHLY_FEE"],
                   metrics.default_monthly_fee, ltv.min_monthly_fee, ltv.max_monthly_fee, 10, prefix="$"),
        InputField("avg_customer_retention_months", labels["AVG_RETENTION"],
                   metrics.default_retention_months, ltv.min_retention_months, ltv.max_retention_months),
        InputField("service_lead_conversion_rate", labels["CONVERSION_RATE"],
                   metrics.default_conversion_rate, ltv.min_conversion_rate, ltv.max_conversion_rate, 1,
                   suffix="%", display_scale=100),
        InputField("google_service_split", labels["GOOGLE_SPLIT"],
                   metrics.default_google_service_split, ltv.min_google_split, ltv.max_google_split, 5,
                   suffix="%", display_scale=100),
    ))

    return [lead_targets, cpl_section, ltv_section]


INPUT_SECTIONS = build_sections()
INPUT_FIELDS: Dict[str, InputField] = {f.key: f for section in INPUT_SECTIONS for f in section.fields}


def normalize_field(input_field: InputField, raw: Any) -> float:
    """
    Turn a raw display value into an engine value.

    Unparseable input falls back to the field minimum; out-of-range input is
    clamped to the nearest bound. The result is divided by display_scale.
    """
    parsed = safe_parse_float(raw, default=math.nan)
    if math.isnan(parsed):
        logger.warning("Invalid value %r for %s, using minimum %s", raw, input_field.key, input_field.min_value)
        parsed = input_field.min_value

    clamped = clamp(parsed, input_field.min_value, input_field.max_value)
    if clamped != parsed:
        logger.warning("Clamped %s from %s to %s", input_field.key, parsed, clamped)

    return clamped / input_field.display_scale


def validation_message(input_field: InputField, raw: Any) -> Optional[str]:
    """Error message for a raw display value, or None if it is acceptable."""
    parsed = safe_parse_float(raw, default=math.nan)
    if math.isnan(parsed):
        return ERROR_MESSAGES["INVALID_NUMBER"]
    if not is_within_range(parsed, input_field.min_value, input_field.max_value):
        return ERROR_MESSAGES["OUT_OF_RANGE"]
    return None


def build_inputs(
    raw_values: Mapping[str, Any], fields: Optional[Mapping[str, InputField]] = None
) -> CalculatorInputs:
    """
    Build a validated CalculatorInputs from display values keyed by field key.

    Missing keys use the field default.
    """
    fields = fields or INPUT_FIELDS
    values = {}
    for key, input_field in fields.items():
        if key not in raw_values:
            values[key] = input_field.default
            continue
        values[key] = normalize_field(input_field, raw_values[key])
    return CalculatorInputs(**values)
