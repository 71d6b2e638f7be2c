"""
Project state and the transitions applied to it.

Each transition takes the current state and returns a new one; the input is
never modified. ``apply_action`` routes ``{"type": ..., "payload": ...}``
intents to the matching transition.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, Mapping, Optional

from .modules import IMPLEMENTATION, IN_HOUSE, OPERATIONAL_DATA, default_sourcing
from .quotes import SAMPLE_QUOTES, normalize_quote, normalize_quote_status

logger = logging.getLogger(__name__)

State = Dict[str, Any]

_INITIAL_STATE: State = {
    "projectInfo": {
        "name": "Untitled Project",
        "projectNumber": "",
        "sales": "",
        "lead": "",
        "contractAward": "",
        "goLive": "",
        "quoteDue": "",
        "status": "working",
    },
    "modules": {
        OPERATIONAL_DATA: {"id": OPERATIONAL_DATA, "selected": True, "sourcing": IN_HOUSE},
        IMPLEMENTATION: {"id": IMPLEMENTATION, "selected": True, "sourcing": IN_HOUSE},
    },
    "moduleData": {
        "operational_data": {
            "throughput": {"peakUnitsPerHour": 5000, "averageUnitsPerHour": 3500, "dailyOrderVolume": 12000},
            "operatingHours": {"shiftsPerDay": 2, "hoursPerShift": 8, "daysPerWeek": 5},
            "inventory": {"totalSKUs": 15000, "activeSKUs": 4000, "storageVolume": "10000 pallets"},
        },
        "robotic_systems": {
            "robots": [{"id": 1, "type": "AMR", "quantity": 10, "vendor": "Fetch", "unitCost": 35000}],
        },
        "conveyance": {
            "segments": [{"id": 1, "type": "MDR", "length": 100, "width": 24, "zones": 10}],
        },
        "storage": {
            "zones": [{"id": 1, "type": "Selective Racking", "positions": 5000, "height": 30, "aisleWidth": 10}],
        },
        "controls": {
            "panels": [
                {"id": 1, "name": "Main PLC Panel", "panelType": "PLC Panel", "quantity": 1, "ioCount": 128, "unitCost": 28000},
            ],
        },
        "software": {
            "applications": [
                {
                    "id": 1,
                    "name": "Warehouse Control",
                    "category": "WCS",
                    "licenseType": "Annual Subscription",
                    "seats": 10,
                    "annualCost": 85000,
                },
            ],
        },
        "implementation": {
            "services": [{"id": 1, "phase": "Project Management", "resourceType": "PM", "hours": 120, "hourlyRate": 145}],
        },
    },
    "assumptions": [],
    "requirements": [],
    "requirementsDocument": None,
    "projectQuotes": SAMPLE_QUOTES,
}


def initial_state() -> State:
    """Return a fresh copy of the default project state."""

    return copy.deepcopy(_INITIAL_STATE)


def _as_dict(value: object) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def set_project_info(state: State, updates: Mapping[str, Any]) -> State:
    return {**state, "projectInfo": {**_as_dict(state.get("projectInfo")), **updates}}


def toggle_module(state: State, module_id: str, selected: bool, sourcing: Optional[str] = None) -> State:
    """Select or deselect a module; deselected modules keep their entry with ``selected: False``."""

    modules = _as_dict(state.get("modules"))
    current = _as_dict(modules.get(module_id))
    if selected:
        chosen = sourcing or current.get("sourcing") or default_sourcing(module_id)
        modules[module_id] = {**current, "id": module_id, "selected": True, "sourcing": chosen}
    else:
        modules[module_id] = {
            **current,
            "id": module_id,
            "selected": False,
            "sourcing": current.get("sourcing") or default_sourcing(module_id),
        }
    return {**state, "modules": modules}


def set_sourcing(state: State, module_id: str, sourcing: str) -> State:
    modules = _as_dict(state.get("modules"))
    modules[module_id] = {**_as_dict(modules.get(module_id)), "id": module_id, "sourcing": sourcing}
    modules[module_id].setdefault("selected", False)
    return {**state, "modules": modules}


def update_module_data(state: State, module_id: str, data: Mapping[str, Any]) -> State:
    """Merge ``data`` into the module's stored data."""

    module_data = _as_dict(state.get("moduleData"))
    module_data[module_id] = {**_as_dict(module_data.get(module_id)), **data}
    return {**state, "moduleData": module_data}


def set_module_data(state: State, module_id: str, data: Any) -> State:
    """Replace the module's stored data wholesale."""

    module_data = _as_dict(state.get("moduleData"))
    module_data[module_id] = data
    return {**state, "moduleData": module_data}


def _append(state: State, key: str, item: Any) -> State:
    return {**state, key: [*list(state.get(key) or []), item]}


def _has_id(item: object, item_id: Any) -> bool:
    return isinstance(item, Mapping) and item.get("id") == item_id


def _remove_by_id(state: State, key: str, item_id: Any) -> State:
    return {**state, key: [item for item in state.get(key) or [] if not _has_id(item, item_id)]}


def add_assumption(state: State, assumption: Mapping[str, Any]) -> State:
    return _append(state, "assumptions", dict(assumption))


def remove_assumption(state: State, assumption_id: Any) -> State:
    return _remove_by_id(state, "assumptions", assumption_id)


def add_requirement(state: State, requirement: Mapping[str, Any]) -> State:
    return _append(state, "requirements", dict(requirement))


def remove_requirement(state: State, requirement_id: Any) -> State:
    return _remove_by_id(state, "requirements", requirement_id)


def set_requirements_document(state: State, document: Any) -> State:
    return {**state, "requirementsDocument": document}


def add_project_quote(state: State, quote: Mapping[str, Any]) -> State:
    return _append(state, "projectQuotes", dict(quote))


def update_project_quote(state: State, quote_id: Any, updates: Mapping[str, Any]) -> State:
    quotes = [
        {**quote, **updates} if _has_id(quote, quote_id) else quote
        for quote in state.get("projectQuotes") or []
    ]
    return {**state, "projectQuotes": quotes}


def remove_project_quote(state: State, quote_id: Any) -> State:
    return _remove_by_id(state, "projectQuotes", quote_id)


def _map_quote(state: State, quote_id: Any, change: Callable[[Dict[str, Any]], Dict[str, Any]]) -> State:
    quotes = [change(dict(quote)) if _has_id(quote, quote_id) else quote for quote in state.get("projectQuotes") or []]
    return {**state, "projectQuotes": quotes}


def toggle_project_quote_module(
    state: State,
    quote_id: Any,
    module_id: str,
    selected: bool,
    sourcing: Optional[str] = None,
) -> State:
    def change(quote: Dict[str, Any]) -> Dict[str, Any]:
        return toggle_module(quote, module_id, selected, sourcing)

    return _map_quote(state, quote_id, change)


def set_project_quote_module_sourcing(state: State, quote_id: Any, module_id: str, sourcing: str) -> State:
    def change(quote: Dict[str, Any]) -> Dict[str, Any]:
        if module_id not in _as_dict(quote.get("modules")):
            return quote
        return set_sourcing(quote, module_id, sourcing)

    return _map_quote(state, quote_id, change)


def reset_project_state(state: Optional[State] = None) -> State:
    return initial_state()


def _payload(action: Mapping[str, Any]) -> Any:
    return action.get("payload")


_ACTIONS: Dict[str, Callable[[State, Any], State]] = {
    "SET_PROJECT_INFO": lambda state, p: set_project_info(state, p),
    "TOGGLE_MODULE": lambda state, p: toggle_module(
        state, p["moduleId"], bool(p.get("isSelected")), p.get("defaultSourcing")
    ),
    "SET_SOURCING": lambda state, p: set_sourcing(state, p["moduleId"], p["sourcing"]),
    "UPDATE_MODULE_DATA": lambda state, p: update_module_data(state, p["moduleId"], p["data"]),
    "SET_MODULE_DATA": lambda state, p: set_module_data(state, p["moduleId"], p["data"]),
    "ADD_ASSUMPTION": lambda state, p: add_assumption(state, p),
    "REMOVE_ASSUMPTION": lambda state, p: remove_assumption(state, p),
    "ADD_REQUIREMENT": lambda state, p: add_requirement(state, p),
    "REMOVE_REQUIREMENT": lambda state, p: remove_requirement(state, p),
    "SET_REQUIREMENTS_DOCUMENT": lambda state, p: set_requirements_document(state, p),
    "ADD_PROJECT_QUOTE": lambda state, p: add_project_quote(state, p),
    "UPDATE_PROJECT_QUOTE": lambda state, p: update_project_quote(state, p["id"], p["updates"]),
    "REMOVE_PROJECT_QUOTE": lambda state, p: remove_project_quote(state, p),
    "TOGGLE_PROJECT_QUOTE_MODULE": lambda state, p: toggle_project_quote_module(
        state, p["quoteId"], p["moduleId"], bool(p.get("isSelected")), p.get("defaultSourcing")
    ),
    "SET_PROJECT_QUOTE_MODULE_SOURCING": lambda state, p: set_project_quote_module_sourcing(
        state, p["quoteId"], p["moduleId"], p["sourcing"]
    ),
    "RESET_PROJECT_STATE": lambda state, p: reset_project_state(state),
}


def apply_action(state: State, action: Mapping[str, Any]) -> State:
    """Apply one intent; unknown intent types leave the state untouched."""

    handler = _ACTIONS.get(str(action.get("type")))
    if handler is None:
        logger.warning("Ignoring unknown action type %r", action.get("type"))
        return state
    return handler(state, _payload(action))


def _merge_entries(default: object, persisted: object) -> Dict[str, Any]:
    merged = _as_dict(default)
    for key, value in _as_dict(persisted).items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge_entries(merged[key], value)
        else:
            merged[key] = value
    return merged


def hydrate_project_state(default_state: State, persisted: object) -> State:
    """
    Overlay a previously saved (possibly partial) state on ``default_state``.

    Nested mappings are merged so fields missing from the saved copy keep
    their defaults; list fields are only taken when the saved value is a
    list.
    """

    if not isinstance(persisted, Mapping):
        return default_state

    hydrated: State = {**default_state, **persisted}
    for key in ("projectInfo", "modules", "moduleData"):
        hydrated[key] = _merge_entries(default_state.get(key), persisted.get(key))
    for key in ("assumptions", "requirements", "projectQuotes"):
        value = persisted.get(key)
        hydrated[key] = value if isinstance(value, list) else default_state.get(key, [])
    hydrated["requirementsDocument"] = persisted.get("requirementsDocument", default_state.get("requirementsDocument"))
    return hydrated


def normalize_project_info(info: object) -> Dict[str, Any]:
    defaults = _INITIAL_STATE["projectInfo"]
    if not isinstance(info, Mapping):
        return dict(defaults)
    normalized = {
        key: str(info.get(key) if info.get(key) is not None else default)
        for key, default in defaults.items()
    }
    normalized["status"] = normalize_quote_status(info.get("status"))
    return normalized


def normalize_loaded_state(state: Mapping[str, Any]) -> State:
    """Normalise project info and every saved quote, dropping records that are not mappings."""

    raw_quotes = state.get("projectQuotes")
    quotes = []
    for raw in raw_quotes if isinstance(raw_quotes, list) else []:
        if not isinstance(raw, Mapping):
            logger.warning("Dropping malformed saved quote of type %s", type(raw).__name__)
            continue
        quotes.append(normalize_quote(raw))

    return {
        **state,
        "projectInfo": normalize_project_info(state.get("projectInfo")),
        "modules": _as_dict(state.get("modules")) or copy.deepcopy(_INITIAL_STATE["modules"]),
        "moduleData": _as_dict(state.get("moduleData")) or copy.deepcopy(_INITIAL_STATE["moduleData"]),
        "assumptions": state.get("assumptions") if isinstance(state.get("assumptions"), list) else [],
        "requirements": state.get("requirements") if isinstance(state.get("requirements"), list) else [],
        "projectQuotes": quotes,
    }
