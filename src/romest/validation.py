"""
Field validation for module line items and operational data.

Row validators return a mapping from row key to ``{field: message}``; only
rows with at least one violation appear. The row key is the row's ``id``,
or its position when the row has no id or shares one with an earlier row.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Tuple

from .costs import module_rows
from .modules import CONTROLS, CONVEYANCE, IMPLEMENTATION, ROBOTIC_SYSTEMS, SOFTWARE, STORAGE
from .numeric import is_finite, is_whole, to_number

RowErrors = Dict[Hashable, Dict[str, str]]

AVERAGE_ABOVE_PEAK = "Average units/hour cannot be greater than peak units/hour."


def _text_missing(value: object) -> bool:
    return value is None or not str(value).strip()


def _whole_at_least_one(value: object) -> bool:
    number = to_number(value)
    return is_whole(number) and number >= 1


def _non_negative(value: object) -> bool:
    number = to_number(value)
    return is_finite(number) and number >= 0


def _positive(value: object) -> bool:
    number = to_number(value)
    return is_finite(number) and number > 0


def _required(value: object) -> bool:
    return not _text_missing(value)


# (field, check, message) in the order fields are reported.
Rule = Tuple[str, Callable[[object], bool], str]

ROBOT_RULES: Tuple[Rule, ...] = (
    ("vendor", _required, "Vendor is required."),
    ("quantity", _whole_at_least_one, "Quantity must be a whole number greater than 0."),
    ("unitCost", _non_negative, "Unit cost must be 0 or greater."),
)

CONVEYANCE_RULES: Tuple[Rule, ...] = (
    ("length", _whole_at_least_one, "Length must be a whole number greater than 0."),
    ("zones", _whole_at_least_one, "Zones must be a whole number greater than 0."),
)

STORAGE_RULES: Tuple[Rule, ...] = (
    ("positions", _whole_at_least_one, "Pallet positions must be a whole number greater than 0."),
    ("height", _positive, "Height must be greater than 0."),
    ("aisleWidth", _positive, "Aisle width must be greater than 0."),
)

CONTROL_PANEL_RULES: Tuple[Rule, ...] = (
    ("name", _required, "Panel name is required."),
    ("quantity", _whole_at_least_one, "Quantity must be a whole number greater than 0."),
    ("ioCount", _whole_at_least_one, "I/O count must be a whole number greater than 0."),
    ("unitCost", _non_negative, "Unit cost must be 0 or greater."),
)

SOFTWARE_RULES: Tuple[Rule, ...] = (
    ("name", _required, "Application name is required."),
    ("seats", _whole_at_least_one, "Seats must be a whole number greater than 0."),
    ("annualCost", _non_negative, "Annual cost must be 0 or greater."),
)

IMPLEMENTATION_RULES: Tuple[Rule, ...] = (
    ("hours", _positive, "Hours must be greater than 0."),
    ("hourlyRate", _non_negative, "Rate must be 0 or greater."),
)


def _row_key(row: Mapping[str, Any], index: int, seen: set) -> Hashable:
    row_id = row.get("id")
    if row_id is not None and isinstance(row_id, Hashable) and row_id not in seen:
        return row_id
    # Position may already be taken by an integer id.
    return index if index not in seen else ("row", index)


def _validate_rows(rows: Optional[Iterable[Any]], rules: Tuple[Rule, ...]) -> RowErrors:
    errors: RowErrors = {}
    seen: set = set()
    for index, row in enumerate(rows or ()):
        if not isinstance(row, Mapping):
            row = {}
        key = _row_key(row, index, seen)
        seen.add(key)
        row_errors = {name: message for name, check, message in rules if not check(row.get(name))}
        if row_errors:
            errors[key] = row_errors
    return errors


def validate_robot_fleet(rows: Optional[Iterable[Any]]) -> RowErrors:
    return _validate_rows(rows, ROBOT_RULES)


def validate_conveyance_segments(rows: Optional[Iterable[Any]]) -> RowErrors:
    return _validate_rows(rows, CONVEYANCE_RULES)


def validate_storage_zones(rows: Optional[Iterable[Any]]) -> RowErrors:
    return _validate_rows(rows, STORAGE_RULES)


def validate_control_panels(rows: Optional[Iterable[Any]]) -> RowErrors:
    return _validate_rows(rows, CONTROL_PANEL_RULES)


def validate_software_applications(rows: Optional[Iterable[Any]]) -> RowErrors:
    return _validate_rows(rows, SOFTWARE_RULES)


def validate_implementation_services(rows: Optional[Iterable[Any]]) -> RowErrors:
    return _validate_rows(rows, IMPLEMENTATION_RULES)


def has_row_errors(errors: object) -> bool:
    """Return True when at least one row carries a non-empty error mapping."""

    if isinstance(errors, Mapping):
        entries: Iterable[object] = errors.values()
    elif errors is None:
        entries = ()
    else:
        entries = errors  # type: ignore[assignment]
    return any(isinstance(entry, Mapping) and len(entry) > 0 for entry in entries)


def _operational_value(form: Mapping[str, Any], section: str, name: str) -> object:
    block = form.get(section)
    if isinstance(block, Mapping) and name in block:
        return block.get(name)
    return form.get(name)


def validate_operational_data(form_data: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Validate throughput and operating-hours inputs.

    Accepts the saved-state shape (``throughput`` / ``operatingHours``
    sections) or flat keys. Returns ``{}`` when everything is valid.
    """

    form = form_data if isinstance(form_data, Mapping) else {}
    peak = to_number(_operational_value(form, "throughput", "peakUnitsPerHour"))
    average = to_number(_operational_value(form, "throughput", "averageUnitsPerHour"))
    shifts = to_number(_operational_value(form, "operatingHours", "shiftsPerDay"))
    days = to_number(_operational_value(form, "operatingHours", "daysPerWeek"))

    errors: Dict[str, str] = {}
    if not (is_finite(peak) and peak > 0):
        errors["peakUnitsPerHour"] = "Peak units/hour must be greater than 0."
    if not (is_finite(average) and average > 0):
        errors["averageUnitsPerHour"] = "Average units/hour must be greater than 0."
    if is_finite(peak) and is_finite(average) and average > peak:
        errors["averageUnitsPerHour"] = AVERAGE_ABOVE_PEAK
    if not (is_whole(shifts) and 1 <= shifts <= 3):
        errors["shiftsPerDay"] = "Shifts/day must be between 1 and 3."
    if not (is_whole(days) and 1 <= days <= 7):
        errors["daysPerWeek"] = "Days/week must be between 1 and 7."
    return errors


ROW_VALIDATORS: Dict[str, Callable[[Optional[Iterable[Any]]], RowErrors]] = {
    ROBOTIC_SYSTEMS: validate_robot_fleet,
    CONVEYANCE: validate_conveyance_segments,
    STORAGE: validate_storage_zones,
    CONTROLS: validate_control_panels,
    SOFTWARE: validate_software_applications,
    IMPLEMENTATION: validate_implementation_services,
}


def collect_module_errors(module_data: object, module_ids: Optional[Iterable[str]] = None) -> Dict[str, RowErrors]:
    """
    Validate the line items of each module and keep only modules with errors.

    An empty result means the module data may be saved.
    """

    results: Dict[str, RowErrors] = {}
    for module_id in module_ids if module_ids is not None else ROW_VALIDATORS:
        validator = ROW_VALIDATORS.get(module_id)
        if validator is None:
            continue
        errors = validator(module_rows(module_data, module_id))
        if errors:
            results[module_id] = errors
    return results


__all__: List[str] = [
    "AVERAGE_ABOVE_PEAK",
    "ROW_VALIDATORS",
    "collect_module_errors",
    "has_row_errors",
    "validate_conveyance_segments",
    "validate_control_panels",
    "validate_implementation_services",
    "validate_operational_data",
    "validate_robot_fleet",
    "validate_software_applications",
    "validate_storage_zones",
]
