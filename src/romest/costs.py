"""
Line-item cost functions and module rollups.

Every function here is total: a missing, negative or non-numeric field
contributes zero cost instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .modules import (
    CONTROLS,
    CONVEYANCE,
    COSTED_MODULE_IDS,
    IMPLEMENTATION,
    ROBOTIC_SYSTEMS,
    SOFTWARE,
    STORAGE,
    rows_key_for,
)
from .numeric import safe_amount
from .rates import RateTable, conveyance_cost_per_foot, storage_cost_per_position

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


def _field(row: object, name: str) -> object:
    if isinstance(row, Mapping):
        return row.get(name)
    return None


def robot_line_cost(row: Row) -> float:
    return safe_amount(_field(row, "quantity")) * safe_amount(_field(row, "unitCost"))


def conveyance_segment_cost(row: Row, rates: Optional[RateTable] = None) -> float:
    return safe_amount(_field(row, "length")) * conveyance_cost_per_foot(_field(row, "type"), rates)


def storage_zone_cost(row: Row, rates: Optional[RateTable] = None) -> float:
    return safe_amount(_field(row, "positions")) * storage_cost_per_position(_field(row, "type"), rates)


def control_panel_cost(row: Row) -> float:
    return safe_amount(_field(row, "quantity")) * safe_amount(_field(row, "unitCost"))


def software_application_annual_cost(row: Row) -> float:
    # Annual license cost is taken as-is; seats do not multiply it.
    return safe_amount(_field(row, "annualCost"))


def implementation_service_cost(row: Row) -> float:
    return safe_amount(_field(row, "hours")) * safe_amount(_field(row, "hourlyRate"))


def _iter_rows(rows: object) -> Iterable[object]:
    if rows is None or isinstance(rows, (str, bytes, Mapping)):
        return ()
    try:
        return list(rows)  # type: ignore[call-overload]
    except TypeError:
        logger.debug("Ignoring non-iterable row collection of type %s", type(rows).__name__)
        return ()


def _rollup(rows: object, line_cost: Callable[[Row], float]) -> float:
    return float(sum(line_cost(row) for row in _iter_rows(rows)))  # type: ignore[arg-type]


def robotics_hardware_cost(rows: object) -> float:
    return _rollup(rows, robot_line_cost)


def conveyance_hardware_cost(rows: object, rates: Optional[RateTable] = None) -> float:
    return _rollup(rows, lambda row: conveyance_segment_cost(row, rates))


def storage_infrastructure_cost(rows: object, rates: Optional[RateTable] = None) -> float:
    return _rollup(rows, lambda row: storage_zone_cost(row, rates))


def controls_electrical_cost(rows: object) -> float:
    return _rollup(rows, control_panel_cost)


def software_systems_cost(rows: object) -> float:
    return _rollup(rows, software_application_annual_cost)


def implementation_services_cost(rows: object) -> float:
    return _rollup(rows, implementation_service_cost)


def module_rows(module_data: object, module_id: str) -> List[object]:
    """
    Return the line items stored for ``module_id``.

    ``module_data[module_id]`` may be the row list itself or a mapping that
    holds the rows under the module's collection key (``robots``,
    ``segments``...). Anything else yields an empty list.
    """

    if not isinstance(module_data, Mapping):
        return []
    entry = module_data.get(module_id)
    if isinstance(entry, Mapping):
        key = rows_key_for(module_id)
        entry = entry.get(key) if key else None
    return list(_iter_rows(entry))


def module_cost(module_data: object, module_id: str, rates: Optional[RateTable] = None) -> float:
    """Return the base rollup cost of one module (0.0 for modules without line items)."""

    rows = module_rows(module_data, module_id)
    if module_id == ROBOTIC_SYSTEMS:
        return robotics_hardware_cost(rows)
    if module_id == CONVEYANCE:
        return conveyance_hardware_cost(rows, rates)
    if module_id == STORAGE:
        return storage_infrastructure_cost(rows, rates)
    if module_id == CONTROLS:
        return controls_electrical_cost(rows)
    if module_id == SOFTWARE:
        return software_systems_cost(rows)
    if module_id == IMPLEMENTATION:
        return implementation_services_cost(rows)
    return 0.0


@dataclass(frozen=True)
class ProjectCostEstimate:
    """Per-module subtotals and their sum."""

    breakdown: Dict[str, float] = field(default_factory=dict)
    total: float = 0.0

    def as_dict(self) -> Dict[str, object]:
        return {"breakdown": dict(self.breakdown), "total": self.total}


def project_cost_estimate(module_data: object, rates: Optional[RateTable] = None) -> ProjectCostEstimate:
    """Roll up all six costed modules; absent modules appear with 0.0."""

    breakdown = {module_id: module_cost(module_data, module_id, rates) for module_id in COSTED_MODULE_IDS}
    total = float(sum(breakdown.values()))
    logger.debug("Project cost estimate: total=%.2f breakdown=%s", total, breakdown)
    return ProjectCostEstimate(breakdown=breakdown, total=total)
