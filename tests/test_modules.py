from romest.modules import COSTED_MODULE_IDS, MODULE_DEFINITIONS, default_sourcing, get_module, rows_key_for


def test_catalogue_order_and_required_modules():
    assert [definition.id for definition in MODULE_DEFINITIONS][:2] == ["operational_data", "robotic_systems"]
    assert {definition.id for definition in MODULE_DEFINITIONS if definition.required} == {
        "operational_data",
        "implementation",
    }


def test_default_sourcing_fallbacks():
    assert default_sourcing("robotic_systems") == "Buyout"
    assert default_sourcing("controls") == "In-House"
    assert default_sourcing("operational_data") == "In-House"
    assert default_sourcing("unknown") == "In-House"


def test_costed_modules_have_row_collections():
    assert [rows_key_for(module_id) for module_id in COSTED_MODULE_IDS] == [
        "robots",
        "segments",
        "zones",
        "panels",
        "applications",
        "services",
    ]
    assert get_module("software").sourcing_options == ("Buyout", "Custom Development", "Hybrid")
    assert get_module("nope") is None
    assert rows_key_for("operational_data") is None
