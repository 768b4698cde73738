"""Display formatting for currency, counts, percentages and ratios."""

from __future__ import annotations

import logging
import math
from typing import Optional

from .config import LocaleSettings, settings

logger = logging.getLogger(__name__)


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def _localize(formatted: str, locale: LocaleSettings) -> str:
    """Swap the default ',' and '.' separators for the locale's."""
    placeholder = "\x00"
    return (
        formatted.replace(",", placeholder)
        .replace(".", locale.decimal_separator)
        .replace(placeholder, locale.thousands_separator)
    )


def format_currency(amount: float, locale: Optional[LocaleSettings] = None, decimals: Optional[int] = None) -> str:
    """
    Format an amount as currency, e.g. 1234.56 -> "$1,235".

    Args:
        amount: Value in base currency units
        locale: Locale settings (defaults to the app settings)
        decimals: Decimal places (defaults to locale.currency_decimals)

    Returns:
        Formatted string; "<symbol>0" for non-finite values
    """
    locale = locale or settings.locale
    if not _is_finite(amount):
        return f"{locale.currency_symbol}0"

    if decimals is None:
        decimals = locale.currency_decimals

    try:
        body = _localize(format(abs(amount), f",.{decimals}f"), locale)
        sign = "-" if amount < 0 else ""
        return f"{sign}{locale.currency_symbol}{body}"
    except (ValueError, TypeError) as e:
        logger.error("Currency formatting error: %s", e)
        sign = "-" if amount < 0 else ""
        return f"{sign}{locale.currency_symbol}{_localize(f'{round(abs(amount)):,}', locale)}"


def format_number(value: float, locale: Optional[LocaleSettings] = None) -> str:
    """Format a count as a grouped integer, e.g. 15340.4 -> "15,340"."""
    if not _is_finite(value):
        return "0"

    locale = locale or settings.locale
    try:
        return _localize(f"{round(value):,}", locale)
    except (ValueError, TypeError) as e:
        logger.error("Number formatting error: %s", e)
        return str(round(value))


def format_percentage(value: float, decimals: int = 0) -> str:
    """Format a fraction as a percentage, e.g. 0.25 -> "25%"."""
    if not _is_finite(value):
        return "0%"
    return f"{value * 100:.{decimals}f}%"


def format_roi(roi: float, decimals: int = 0) -> str:
    """Format a value already in percent units, e.g. 125.4 -> "125%"."""
    if not _is_finite(roi):
        return "0%"
    return f"{roi:.{decimals}f}%"


def format_ratio(value: float, decimals: int = 2) -> str:
    """Format an X:1 ratio, e.g. 2.5 -> "2.50:1"."""
    if not _is_finite(value):
        return "0:1"
    return f"{value:.{decimals}f}:1"
