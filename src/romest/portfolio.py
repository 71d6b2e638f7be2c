"""
Operations over a portfolio of quotes: validation of quote metadata,
duplicate detection, sorting, filtering and totals.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .numeric import coerce_amount, to_number
from .quotes import STATUS_COMPLETE, STATUS_WORKING, add_quote_total
from .rates import RateTable

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$", re.ASCII)
_NATURAL_CHUNK = re.compile(r"(\d+)")

SORT_PROJECT_NUMBER_ASC = "projectNumberAsc"
SORT_TOTAL_DESC = "totalDesc"
SORT_QUOTE_DUE_ASC = "quoteDueAsc"
SORT_OPTIONS = (SORT_PROJECT_NUMBER_ASC, SORT_TOTAL_DESC, SORT_QUOTE_DUE_ASC)

STATUS_FILTER_ALL = "all"

TOTAL_FIELDS = ("inHouse", "buyout", "services", "total")
SEARCH_FIELDS = ("projectNumber", "projectName", "sales", "leadEngineer")


def format_currency(value: object) -> str:
    """Format a dollar amount like ``$1,234.50``; zero or missing reads ``$ -``."""

    number = to_number(value)
    if not math.isfinite(number) or number == 0:
        return "$ -"
    if number < 0:
        return f"-${abs(number):,.2f}"
    return f"${number:,.2f}"


def summarize_quote_totals(quotes: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    totals = {name: 0.0 for name in TOTAL_FIELDS}
    for quote in quotes or ():
        for name in TOTAL_FIELDS:
            totals[name] += coerce_amount(quote.get(name), 0.0)
    return totals


def _text(value: object) -> str:
    return str(value if value is not None else "").strip()


def _project_key(value: object) -> str:
    return _text(value).lower()


def is_project_number_in_use(
    quotes: Iterable[Mapping[str, Any]],
    project_number: object,
    exclude_id: Optional[object] = None,
) -> bool:
    """Return True when another quote already uses ``project_number``."""

    candidate = _project_key(project_number)
    if not candidate:
        return False
    for quote in quotes or ():
        if exclude_id is not None and quote.get("id") == exclude_id:
            continue
        if _project_key(quote.get("projectNumber")) == candidate:
            return True
    return False


def parse_date_string(value: object) -> Optional[date]:
    """Parse a strict ``MM/DD/YYYY`` string into a date, or None."""

    text = _text(value)
    match = _DATE_PATTERN.match(text)
    if not match:
        return None
    month, day, year = (int(part) for part in match.groups())
    try:
        # Out-of-range parts (02/30, 13/01) are rejected instead of rolled over.
        return date(year, month, day)
    except ValueError:
        return None


def is_valid_date_string(value: object) -> bool:
    """Blank dates are allowed; anything else must be a real ``MM/DD/YYYY`` date."""

    if not _text(value):
        return True
    return parse_date_string(value) is not None


_REQUIRED_QUOTE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("projectNumber", "Project # is required."),
    ("projectName", "Project name is required."),
    ("sales", "Sales is required."),
    ("leadEngineer", "Lead engineer is required."),
)

_DATE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("contractAward", "Contract award"),
    ("goLive", "Go live"),
    ("quoteDue", "Quote due"),
)


def validate_quote_fields(quote: Mapping[str, Any]) -> List[str]:
    """Return the problems with a quote's metadata, in display order."""

    errors: List[str] = []
    for name, message in _REQUIRED_QUOTE_FIELDS:
        if not _text(quote.get(name)):
            errors.append(message)

    for name, label in _DATE_FIELDS:
        if not is_valid_date_string(quote.get(name)):
            errors.append(f"{label} must be a valid date in MM/DD/YYYY format.")

    contract_award = parse_date_string(quote.get("contractAward"))
    go_live = parse_date_string(quote.get("goLive"))
    quote_due = parse_date_string(quote.get("quoteDue"))
    if contract_award and quote_due and quote_due > contract_award:
        errors.append("Quote due date must be on or before the contract award date.")
    if contract_award and go_live and contract_award > go_live:
        errors.append("Contract award date must be on or before the go live date.")
    return errors


def _natural_key(value: object) -> Tuple[Tuple[int, Any], ...]:
    text = _text(value).lower()
    parts: List[Tuple[int, Any]] = []
    for chunk in _NATURAL_CHUNK.split(text):
        if not chunk:
            continue
        parts.append((0, int(chunk)) if chunk.isdecimal() else (1, chunk))
    return tuple(parts)


def _quote_due_key(quote: Mapping[str, Any]) -> Tuple[int, date]:
    parsed = parse_date_string(quote.get("quoteDue"))
    if parsed is None:
        return (1, date.max)
    return (0, parsed)


def sort_quotes(quotes: Iterable[Mapping[str, Any]], sort_by: str) -> List[Mapping[str, Any]]:
    """Return a new, stably sorted list of quotes."""

    rows = list(quotes or ())
    if sort_by == SORT_PROJECT_NUMBER_ASC:
        return sorted(rows, key=lambda quote: _natural_key(quote.get("projectNumber")))
    if sort_by == SORT_TOTAL_DESC:
        return sorted(rows, key=lambda quote: coerce_amount(quote.get("total"), 0.0), reverse=True)
    if sort_by == SORT_QUOTE_DUE_ASC:
        return sorted(rows, key=_quote_due_key)
    raise ValueError(f"Unknown sort option {sort_by!r}; expected one of {', '.join(SORT_OPTIONS)}")


def filter_quotes(
    quotes: Iterable[Mapping[str, Any]],
    status: str = STATUS_FILTER_ALL,
    search: str = "",
) -> List[Mapping[str, Any]]:
    """Keep quotes matching ``status`` whose text fields contain ``search``."""

    wanted = (status or STATUS_FILTER_ALL).strip().lower()
    if wanted not in (STATUS_FILTER_ALL, STATUS_WORKING, STATUS_COMPLETE):
        logger.warning("Unknown status filter %r; showing all quotes", status)
        wanted = STATUS_FILTER_ALL
    term = (search or "").strip().lower()

    matches: List[Mapping[str, Any]] = []
    for quote in quotes or ():
        if wanted != STATUS_FILTER_ALL and quote.get("status") != wanted:
            continue
        if term and not any(term in str(quote.get(name) or "").lower() for name in SEARCH_FIELDS):
            continue
        matches.append(quote)
    return matches


def build_dashboard(
    quotes: Sequence[Mapping[str, Any]],
    module_data: object = None,
    *,
    sort_by: str = SORT_PROJECT_NUMBER_ASC,
    status: str = STATUS_FILTER_ALL,
    search: str = "",
    rates: Optional[RateTable] = None,
) -> Dict[str, Any]:
    """
    Assemble the dashboard view: totals for every quote, then the filtered,
    sorted rows and the sums over just those rows.
    """

    priced = [add_quote_total(quote, module_data, rates) for quote in quotes or ()]
    rows = sort_quotes(filter_quotes(priced, status=status, search=search), sort_by)
    logger.debug("Dashboard shows %d of %d quotes", len(rows), len(priced))
    return {"quotes": rows, "totals": summarize_quote_totals(rows)}
