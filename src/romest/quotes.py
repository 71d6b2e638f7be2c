"""
Quote records: normalisation and cost-bucket derivation.

A quote is a plain mapping. In ``manual`` pricing mode its three buckets
(``inHouse``, ``buyout``, ``services``) are taken as entered; in ``auto``
mode they are derived from the current module line items and the sourcing
chosen for each selected module.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .costs import module_cost
from .modules import COSTED_MODULE_IDS, HYBRID, IMPLEMENTATION, IN_HOUSE, default_sourcing
from .numeric import coerce_amount
from .rates import DEFAULT_RATES, RateTable

logger = logging.getLogger(__name__)

QUOTE_TEXT_FIELDS = (
    "projectNumber",
    "projectName",
    "sales",
    "leadEngineer",
    "contractAward",
    "goLive",
    "quoteDue",
)
BUCKET_FIELDS = ("inHouse", "buyout", "services")

STATUS_WORKING = "working"
STATUS_COMPLETE = "complete"
PRICING_MANUAL = "manual"
PRICING_AUTO = "auto"


@dataclass(frozen=True)
class QuoteBuckets:
    inHouse: float = 0.0
    buyout: float = 0.0
    services: float = 0.0

    @property
    def total(self) -> float:
        return self.inHouse + self.buyout + self.services


@dataclass(frozen=True)
class ModuleBreakdownRow:
    """Cost of one selected module split across the three buckets."""

    moduleId: str
    inHouse: float = 0.0
    buyout: float = 0.0
    services: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class QuoteCostDetails:
    buckets: QuoteBuckets
    moduleBreakdown: List[ModuleBreakdownRow] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "buckets": asdict(self.buckets),
            "moduleBreakdown": [asdict(row) for row in self.moduleBreakdown],
        }


def _require_mapping(value: object, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _split_module_cost(module_id: str, sourcing: object, cost: float, rates: RateTable) -> ModuleBreakdownRow:
    if module_id == IMPLEMENTATION:
        return ModuleBreakdownRow(moduleId=module_id, services=cost, total=cost)
    if sourcing == IN_HOUSE:
        return ModuleBreakdownRow(moduleId=module_id, inHouse=cost, total=cost)
    if sourcing == HYBRID:
        in_house = cost * rates.hybrid_in_house_share
        # Buyout takes the remainder so the two halves always add back to cost.
        return ModuleBreakdownRow(moduleId=module_id, inHouse=in_house, buyout=cost - in_house, total=cost)
    return ModuleBreakdownRow(moduleId=module_id, buyout=cost, total=cost)


def calculate_quote_cost_details(
    quote: Mapping[str, Any],
    module_data: object = None,
    rates: Optional[RateTable] = None,
) -> QuoteCostDetails:
    """
    Derive the in-house/buyout/services buckets of a quote.

    Manual quotes return their entered buckets (invalid values count as 0)
    and an empty breakdown. Auto quotes price every module whose entry in
    ``quote["modules"]`` has ``selected`` set: In-House to in-house, Hybrid
    split between in-house and buyout, anything else to buyout, and the
    implementation module to services. The services bucket itself always
    equals the implementation rollup, whether or not that module is selected.
    """

    quote = _require_mapping(quote, "quote")
    if quote.get("pricingMode") != PRICING_AUTO:
        buckets = QuoteBuckets(*(coerce_amount(quote.get(name), 0.0) for name in BUCKET_FIELDS))
        return QuoteCostDetails(buckets=buckets, moduleBreakdown=[])

    rates = rates or DEFAULT_RATES
    base_costs = {module_id: module_cost(module_data, module_id, rates) for module_id in COSTED_MODULE_IDS}

    in_house = 0.0
    buyout = 0.0
    breakdown: List[ModuleBreakdownRow] = []
    modules = quote.get("modules")
    if isinstance(modules, Mapping):
        for module_id, entry in modules.items():
            if not isinstance(entry, Mapping) or entry.get("selected") is not True:
                continue
            cost = base_costs.get(module_id, 0.0)
            row = _split_module_cost(module_id, entry.get("sourcing"), cost, rates)
            in_house += row.inHouse
            buyout += row.buyout
            breakdown.append(row)

    # TODO: confirm with product whether services should honour the
    # implementation module's selected flag like every other module.
    services = base_costs[IMPLEMENTATION]
    buckets = QuoteBuckets(inHouse=in_house, buyout=buyout, services=services)
    logger.debug("Auto-priced quote %s: %s", quote.get("id"), buckets)
    return QuoteCostDetails(buckets=buckets, moduleBreakdown=breakdown)


def calculate_quote_buckets(
    quote: Mapping[str, Any],
    module_data: object = None,
    rates: Optional[RateTable] = None,
) -> QuoteBuckets:
    return calculate_quote_cost_details(quote, module_data, rates).buckets


def add_quote_total(
    quote: Mapping[str, Any],
    module_data: object = None,
    rates: Optional[RateTable] = None,
) -> Dict[str, Any]:
    """Return a copy of ``quote`` with its derived buckets and ``total``."""

    buckets = calculate_quote_buckets(quote, module_data, rates)
    return {**quote, **asdict(buckets), "total": buckets.total}


def normalize_quote_status(value: object) -> str:
    """Map loosely entered status text onto ``working`` / ``complete``."""

    if str(value if value is not None else "").strip().lower() == STATUS_COMPLETE:
        return STATUS_COMPLETE
    return STATUS_WORKING


def _text(value: object) -> str:
    return str(value if value is not None else "").strip()


def _normalize_modules(modules: object) -> Dict[str, Dict[str, Any]]:
    if not isinstance(modules, Mapping):
        return {}
    normalized: Dict[str, Dict[str, Any]] = {}
    for module_id, entry in modules.items():
        if not isinstance(entry, Mapping):
            continue
        # Older records marked selection by presence alone.
        selected = entry.get("selected", True)
        normalized[str(module_id)] = {
            **entry,
            "id": str(module_id),
            "selected": selected is True,
            "sourcing": entry.get("sourcing") or default_sourcing(str(module_id)),
        }
    return normalized


def new_quote_id() -> str:
    return str(uuid.uuid4())


def normalize_quote(raw: object) -> Dict[str, Any]:
    """Coerce a loosely typed record into the canonical quote shape."""

    raw = _require_mapping(raw, "quote")
    quote: Dict[str, Any] = {"id": raw.get("id") or new_quote_id()}
    for name in QUOTE_TEXT_FIELDS:
        quote[name] = _text(raw.get(name))
    quote["status"] = STATUS_COMPLETE if raw.get("status") == STATUS_COMPLETE else STATUS_WORKING
    quote["pricingMode"] = PRICING_AUTO if raw.get("pricingMode") == PRICING_AUTO else PRICING_MANUAL
    for name in BUCKET_FIELDS:
        quote[name] = coerce_amount(raw.get(name), 0.0)
    quote["modules"] = _normalize_modules(raw.get("modules"))
    return quote


def create_empty_quote(**overrides: Any) -> Dict[str, Any]:
    quote: Dict[str, Any] = {
        "id": new_quote_id(),
        "projectNumber": "",
        "projectName": "",
        "sales": "",
        "leadEngineer": "",
        "contractAward": "",
        "goLive": "",
        "quoteDue": "",
        "status": STATUS_WORKING,
        "pricingMode": PRICING_MANUAL,
        "inHouse": 0.0,
        "buyout": 0.0,
        "services": 0.0,
        "modules": {},
    }
    quote.update(overrides)
    return quote


CURRENT_PROJECT_QUOTE_ID = "current-project"


def build_quote_from_project_state(state: Mapping[str, Any], rates: Optional[RateTable] = None) -> Dict[str, Any]:
    """
    Express the project being configured as an auto-priced quote.

    Project info supplies the descriptive fields; the project's module
    selections and line items supply the buckets.
    """

    state = _require_mapping(state, "project state")
    info = state.get("projectInfo") if isinstance(state.get("projectInfo"), Mapping) else {}
    quote = create_empty_quote(
        id=CURRENT_PROJECT_QUOTE_ID,
        projectNumber=_text(info.get("projectNumber")),
        projectName=_text(info.get("name")),
        sales=_text(info.get("sales")),
        leadEngineer=_text(info.get("lead")),
        contractAward=_text(info.get("contractAward")),
        goLive=_text(info.get("goLive")),
        quoteDue=_text(info.get("quoteDue")),
        status=normalize_quote_status(info.get("status")),
        pricingMode=PRICING_AUTO,
        modules=_normalize_modules(state.get("modules")),
    )
    buckets = calculate_quote_buckets(quote, state.get("moduleData"), rates)
    quote.update(asdict(buckets))
    return quote


def _sample(index: int, status: str, in_house: float, buyout: float, services: float) -> Dict[str, Any]:
    return create_empty_quote(
        id=f"sample-{index}",
        projectNumber=str(1000 + index),
        projectName=f"project {index}",
        sales=f"danny{index}",
        leadEngineer=f"chuck {index}",
        status=status,
        inHouse=in_house,
        buyout=buyout,
        services=services,
    )


SAMPLE_QUOTES: List[Dict[str, Any]] = [
    _sample(1, STATUS_WORKING, 10000, 30000, 10000),
    _sample(2, STATUS_COMPLETE, 25123, 13584, 9676.75),
    _sample(3, STATUS_WORKING, 0, 1550015, 186001.8),
    _sample(4, STATUS_COMPLETE, 2000, 1510, 877.5),
    _sample(5, STATUS_COMPLETE, 16258, 545115, 39296.11),
    _sample(6, STATUS_COMPLETE, 250000, 0, 62500),
    _sample(7, STATUS_WORKING, 0, 250000, 17500),
]
