from __future__ import annotations

import copy

from romest import state as project_state
from romest.quotes import build_quote_from_project_state
from romest.state import (
    apply_action,
    hydrate_project_state,
    initial_state,
    normalize_loaded_state,
    toggle_module,
)


def test_initial_state_is_a_fresh_copy():
    first = initial_state()
    first["projectInfo"]["name"] = "Changed"
    first["projectQuotes"].clear()
    second = initial_state()
    assert second["projectInfo"]["name"] == "Untitled Project"
    assert len(second["projectQuotes"]) == 7


def test_transitions_do_not_mutate_input():
    before = initial_state()
    snapshot = copy.deepcopy(before)
    after = apply_action(before, {"type": "SET_PROJECT_INFO", "payload": {"name": "Pilot Site"}})
    after = apply_action(after, {"type": "TOGGLE_MODULE", "payload": {"moduleId": "storage", "isSelected": True}})
    after = apply_action(
        after,
        {"type": "UPDATE_MODULE_DATA", "payload": {"moduleId": "storage", "data": {"zones": []}}},
    )
    assert before == snapshot
    assert after["projectInfo"]["name"] == "Pilot Site"
    assert after["projectInfo"]["status"] == "working"


def test_toggle_module_uses_default_sourcing_and_keeps_deselected_entry():
    state = toggle_module(initial_state(), "robotic_systems", True)
    assert state["modules"]["robotic_systems"] == {"id": "robotic_systems", "selected": True, "sourcing": "Buyout"}
    state = toggle_module(state, "robotic_systems", False)
    assert state["modules"]["robotic_systems"]["selected"] is False
    assert state["modules"]["robotic_systems"]["sourcing"] == "Buyout"
    state = toggle_module(state, "controls", True, "Buyout")
    assert state["modules"]["controls"]["sourcing"] == "Buyout"


def test_set_sourcing_and_module_data():
    state = apply_action(initial_state(), {"type": "SET_SOURCING", "payload": {"moduleId": "implementation", "sourcing": "Hybrid"}})
    assert state["modules"]["implementation"] == {"id": "implementation", "selected": True, "sourcing": "Hybrid"}

    rows = [{"id": 1, "hours": 4, "hourlyRate": 90}]
    state = apply_action(state, {"type": "SET_MODULE_DATA", "payload": {"moduleId": "implementation", "data": {"services": rows}}})
    assert state["moduleData"]["implementation"] == {"services": rows}


def test_assumptions_and_requirements():
    state = apply_action(initial_state(), {"type": "ADD_ASSUMPTION", "payload": {"id": "a1", "text": "Two shifts"}})
    state = apply_action(state, {"type": "ADD_REQUIREMENT", "payload": {"id": "r1", "text": "1000 UPH"}})
    state = apply_action(state, {"type": "SET_REQUIREMENTS_DOCUMENT", "payload": {"name": "rfp.pdf"}})
    assert [item["id"] for item in state["assumptions"]] == ["a1"]
    assert state["requirementsDocument"] == {"name": "rfp.pdf"}
    state = apply_action(state, {"type": "REMOVE_ASSUMPTION", "payload": "a1"})
    state = apply_action(state, {"type": "REMOVE_REQUIREMENT", "payload": "r1"})
    assert state["assumptions"] == []
    assert state["requirements"] == []


def test_project_quote_lifecycle():
    state = {"projectQuotes": []}
    state = apply_action(state, {"type": "ADD_PROJECT_QUOTE", "payload": {"id": "q", "projectNumber": "1", "modules": {}}})
    state = apply_action(state, {"type": "UPDATE_PROJECT_QUOTE", "payload": {"id": "q", "updates": {"projectName": "New"}}})
    state = apply_action(
        state,
        {
            "type": "TOGGLE_PROJECT_QUOTE_MODULE",
            "payload": {"quoteId": "q", "moduleId": "storage", "isSelected": True, "defaultSourcing": "Hybrid"},
        },
    )
    assert state["projectQuotes"][0]["projectName"] == "New"
    assert state["projectQuotes"][0]["modules"]["storage"] == {"id": "storage", "selected": True, "sourcing": "Hybrid"}

    state = apply_action(
        state,
        {"type": "SET_PROJECT_QUOTE_MODULE_SOURCING", "payload": {"quoteId": "q", "moduleId": "storage", "sourcing": "Buyout"}},
    )
    unchanged = apply_action(
        state,
        {"type": "SET_PROJECT_QUOTE_MODULE_SOURCING", "payload": {"quoteId": "q", "moduleId": "software", "sourcing": "Buyout"}},
    )
    assert state["projectQuotes"][0]["modules"]["storage"]["sourcing"] == "Buyout"
    assert "software" not in unchanged["projectQuotes"][0]["modules"]

    state = apply_action(state, {"type": "REMOVE_PROJECT_QUOTE", "payload": "q"})
    assert state["projectQuotes"] == []


def test_unknown_action_leaves_state_untouched():
    state = initial_state()
    assert apply_action(state, {"type": "NOPE"}) is state


def test_reset_returns_default_state():
    state = apply_action(initial_state(), {"type": "SET_PROJECT_INFO", "payload": {"name": "X"}})
    assert apply_action(state, {"type": "RESET_PROJECT_STATE"}) == initial_state()


def test_hydrate_merges_persisted_values_with_defaults():
    hydrated = hydrate_project_state(
        initial_state(),
        {
            "projectInfo": {"name": "Pilot Site", "lead": "Alex"},
            "modules": {"robotic_systems": {"id": "robotic_systems", "selected": True, "sourcing": "Buyout"}},
            "requirements": [{"id": "r1", "text": "System must process 1000 UPH"}],
            "assumptions": "not a list",
        },
    )
    assert hydrated["projectInfo"]["name"] == "Pilot Site"
    assert hydrated["projectInfo"]["status"] == "working"
    assert hydrated["modules"]["operational_data"]["selected"] is True
    assert hydrated["modules"]["robotic_systems"]["sourcing"] == "Buyout"
    assert len(hydrated["requirements"]) == 1
    assert hydrated["assumptions"] == []


def test_hydrate_preserves_nested_module_defaults():
    hydrated = hydrate_project_state(
        initial_state(),
        {"moduleData": {"operational_data": {"throughput": {"peakUnitsPerHour": 6000}}}},
    )
    operational = hydrated["moduleData"]["operational_data"]
    assert operational["throughput"]["peakUnitsPerHour"] == 6000
    assert operational["throughput"]["averageUnitsPerHour"] == 3500
    assert operational["operatingHours"]["shiftsPerDay"] == 2
    assert operational["inventory"]["totalSKUs"] == 15000


def test_hydrate_ignores_non_mapping_payload():
    default = initial_state()
    assert hydrate_project_state(default, ["junk"]) is default


def test_normalize_loaded_state_cleans_quotes_and_info():
    loaded = normalize_loaded_state(
        {
            "projectInfo": {"name": 12, "status": "Complete"},
            "modules": None,
            "projectQuotes": [{"id": "q", "projectNumber": " 77 ", "inHouse": "5"}, "junk"],
        }
    )
    assert loaded["projectInfo"]["name"] == "12"
    assert loaded["projectInfo"]["status"] == "complete"
    assert loaded["modules"] == initial_state()["modules"]
    assert loaded["requirements"] == []
    assert len(loaded["projectQuotes"]) == 1
    assert loaded["projectQuotes"][0]["projectNumber"] == "77"
    assert loaded["projectQuotes"][0]["inHouse"] == 5


def test_module_level_reset_function():
    assert project_state.reset_project_state() == initial_state()


def test_loaded_project_status_carries_into_current_project_quote():
    loaded = normalize_loaded_state({**initial_state(), "projectInfo": {"name": "Hub", "status": " COMPLETE "}})
    assert build_quote_from_project_state(loaded)["status"] == "complete"

    other = normalize_loaded_state({**initial_state(), "projectInfo": {"status": "done"}})
    assert other["projectInfo"]["status"] == "working"
