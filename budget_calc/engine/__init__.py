"""
Engine module for marketing budget calculations.

Provides the pure budget model and the insights derived from its result.
"""

from .calculations import (
    safe_divide,
    annualize_leads,
    split_service_leads,
    split_franchise_leads,
    allocate_budget,
    compute_financials,
    compute,
)
from .insights import (
    BudgetInsights,
    calculate_percentage,
    compute_insights,
)

__version__ = "1.0.0"

__all__ = [
    # calculations.py
    "safe_divide",
    "annualize_leads",
    "split_service_leads",
    "split_franchise_leads",
    "allocate_budget",
    "compute_financials",
    "compute",
    # insights.py
    "BudgetInsights",
    "calculate_percentage",
    "compute_insights",
]
