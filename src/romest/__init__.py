"""Rough-order-of-magnitude cost estimation for warehouse automation quotes."""

from .costs import project_cost_estimate
from .portfolio import build_dashboard, summarize_quote_totals
from .quotes import add_quote_total, calculate_quote_cost_details, normalize_quote
from .rates import DEFAULT_RATES, RateTable
from .validation import has_row_errors, validate_operational_data

__all__ = [
    "DEFAULT_RATES",
    "RateTable",
    "add_quote_total",
    "build_dashboard",
    "calculate_quote_cost_details",
    "has_row_errors",
    "normalize_quote",
    "project_cost_estimate",
    "summarize_quote_totals",
    "validate_operational_data",
]
