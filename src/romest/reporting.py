from __future__ import annotations

from typing import Any, Iterable, Mapping

import pandas as pd

from .portfolio import format_currency
from .numeric import coerce_amount

QUOTE_COLUMNS = [
    "projectNumber",
    "projectName",
    "sales",
    "leadEngineer",
    "contractAward",
    "goLive",
    "quoteDue",
    "status",
]
AMOUNT_COLUMNS = ["inHouse", "buyout", "services", "total"]


def quotes_frame(quotes: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """One row per quote with the dashboard columns; amounts coerced to floats."""

    records = [
        {
            **{column: str(quote.get(column) or "") for column in QUOTE_COLUMNS},
            **{column: coerce_amount(quote.get(column), 0.0) for column in AMOUNT_COLUMNS},
        }
        for quote in quotes
    ]
    return pd.DataFrame.from_records(records, columns=QUOTE_COLUMNS + AMOUNT_COLUMNS)


def totals_by_status(quotes: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    frame = quotes_frame(quotes)
    if frame.empty:
        return pd.DataFrame(columns=AMOUNT_COLUMNS)
    return frame.groupby("status")[AMOUNT_COLUMNS].sum()


def make_portfolio_summary_text(quotes: Iterable[Mapping[str, Any]]) -> str:
    frame = quotes_frame(quotes)
    total = float(frame["total"].sum()) if not frame.empty else 0.0
    top = frame.sort_values("total", ascending=False, kind="stable").head(5)[
        ["projectNumber", "projectName", "status", "total"]
    ]
    top = top.assign(total=top["total"].map(format_currency))
    listing = top.to_string(index=False) if not top.empty else "(no quotes)"
    return (
        f"Portfolio total across {len(frame)} quote(s): {format_currency(total)}.\n"
        f"Largest quotes:\n{listing}\n"
    )
