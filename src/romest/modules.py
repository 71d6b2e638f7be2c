"""
Catalogue of the selectable scope modules of a warehouse automation quote.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

OPERATIONAL_DATA = "operational_data"
ROBOTIC_SYSTEMS = "robotic_systems"
STORAGE = "storage"
CONVEYANCE = "conveyance"
CONTROLS = "controls"
SOFTWARE = "software"
IMPLEMENTATION = "implementation"

IN_HOUSE = "In-House"
BUYOUT = "Buyout"
HYBRID = "Hybrid"


@dataclass(frozen=True)
class ModuleDefinition:
    """Static description of one scope module."""

    id: str
    name: str
    description: str
    sourcing_options: Tuple[str, ...]
    accuracy: float
    required: bool = False
    default_sourcing: Optional[str] = None
    rows_key: Optional[str] = None


# Keep tuple structure to preserve order for display
MODULE_DEFINITIONS: Tuple[ModuleDefinition, ...] = (
    ModuleDefinition(
        id=OPERATIONAL_DATA,
        name="Operational Data & Requirements",
        description="Throughput requirements, order profiles, inventory characteristics, and operating hours.",
        sourcing_options=(IN_HOUSE,),
        accuracy=0.15,
        required=True,
    ),
    ModuleDefinition(
        id=ROBOTIC_SYSTEMS,
        name="Robotic Systems",
        description="AMRs, articulated arms, ASRS shuttles, and charging stations.",
        sourcing_options=(BUYOUT, IN_HOUSE),
        accuracy=0.25,
        default_sourcing=BUYOUT,
        rows_key="robots",
    ),
    ModuleDefinition(
        id=STORAGE,
        name="Storage Infrastructure",
        description="Racking systems, shelving, mezzanines, and structural supports.",
        sourcing_options=(BUYOUT, IN_HOUSE, HYBRID),
        accuracy=0.25,
        default_sourcing=BUYOUT,
        rows_key="zones",
    ),
    ModuleDefinition(
        id=CONVEYANCE,
        name="Conveyance Systems",
        description="Powered/gravity conveyors, sortation, and fast-moving material handling.",
        sourcing_options=(BUYOUT, IN_HOUSE, HYBRID),
        accuracy=0.25,
        default_sourcing=BUYOUT,
        rows_key="segments",
    ),
    ModuleDefinition(
        id=CONTROLS,
        name="Controls & Electrical",
        description="PLC hardware, control panels, HMIs, and associated electrical work.",
        sourcing_options=(IN_HOUSE, BUYOUT),
        accuracy=0.25,
        default_sourcing=IN_HOUSE,
        rows_key="panels",
    ),
    ModuleDefinition(
        id=SOFTWARE,
        name="Software Systems",
        description="WES, WCS, fleet management, and custom integration software.",
        sourcing_options=(BUYOUT, "Custom Development", HYBRID),
        accuracy=0.25,
        default_sourcing=BUYOUT,
        rows_key="applications",
    ),
    ModuleDefinition(
        id=IMPLEMENTATION,
        name="Implementation Services",
        description="Project management, installation, commissioning, and training.",
        sourcing_options=(IN_HOUSE, "Subcontractor", HYBRID),
        accuracy=0.30,
        required=True,
        default_sourcing=IN_HOUSE,
        rows_key="services",
    ),
)

MODULES_BY_ID: Dict[str, ModuleDefinition] = {definition.id: definition for definition in MODULE_DEFINITIONS}

# Modules that carry line items and therefore a cost rollup.
COSTED_MODULE_IDS: Tuple[str, ...] = (
    ROBOTIC_SYSTEMS,
    CONVEYANCE,
    STORAGE,
    CONTROLS,
    SOFTWARE,
    IMPLEMENTATION,
)


def get_module(module_id: str) -> Optional[ModuleDefinition]:
    return MODULES_BY_ID.get(module_id)


def default_sourcing(module_id: str) -> str:
    """Return the sourcing a module starts with when it is first selected."""

    definition = MODULES_BY_ID.get(module_id)
    if definition is None:
        return IN_HOUSE
    if definition.default_sourcing:
        return definition.default_sourcing
    if definition.sourcing_options:
        return definition.sourcing_options[0]
    return IN_HOUSE


def rows_key_for(module_id: str) -> Optional[str]:
    definition = MODULES_BY_ID.get(module_id)
    return definition.rows_key if definition else None
