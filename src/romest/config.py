from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .numeric import to_number
from .rates import (
    CONVEYANCE_DEFAULT_PER_FT,
    CONVEYANCE_RATES_PER_FT,
    DEFAULT_RATES,
    HYBRID_IN_HOUSE_SHARE,
    STORAGE_DEFAULT_PER_POSITION,
    STORAGE_RATES_PER_POSITION,
    RateTable,
)

_BOOLEAN_TRUE = {"1", "true", "yes", "on"}

# env var -> conveyance segment type
_CONVEYANCE_ENV = {
    "ROM_RATE_MDR_PER_FT": "MDR",
    "ROM_RATE_GRAVITY_PER_FT": "Gravity",
}
# env var -> storage zone type
_STORAGE_ENV = {
    "ROM_RATE_SELECTIVE_RACKING_PER_POSITION": "Selective Racking",
    "ROM_RATE_PUSH_BACK_PER_POSITION": "Push Back",
}


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and CLI options."""

    rates: RateTable = field(default_factory=lambda: DEFAULT_RATES)
    state_file: Optional[Path] = None
    sort_by: str = "projectNumberAsc"
    status_filter: str = "all"
    search: str = ""
    verbose: bool = False


def _as_path(value: Optional[str]) -> Optional[Path]:
    text = (value or "").strip()
    return Path(text).expanduser().resolve() if text else None


def _env_amount(value: Optional[str]) -> Optional[float]:
    """Read a dollar figure like ``$1,200``; None when blank or not a finite number."""

    number = to_number((value or "").replace("$", "").replace(",", ""))
    return number if math.isfinite(number) else None


def _rate(value: Optional[str], default: float) -> float:
    parsed = _env_amount(value)
    if parsed is None or parsed < 0:
        return default
    return parsed


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _BOOLEAN_TRUE


def _cli_options(cli_args: object | None) -> Dict[str, Any]:
    # argparse.Namespace or any attribute bag; missing options read as None.
    return dict(vars(cli_args)) if hasattr(cli_args, "__dict__") else {}


def load_rates(env: Mapping[str, str]) -> RateTable:
    """Build a :class:`RateTable`, letting environment variables override the constants."""

    conveyance: Dict[str, float] = dict(CONVEYANCE_RATES_PER_FT)
    for key, segment_type in _CONVEYANCE_ENV.items():
        conveyance[segment_type] = _rate(env.get(key), conveyance[segment_type])
    storage: Dict[str, float] = dict(STORAGE_RATES_PER_POSITION)
    for key, zone_type in _STORAGE_ENV.items():
        storage[zone_type] = _rate(env.get(key), storage[zone_type])

    share = _env_amount(env.get("ROM_HYBRID_IN_HOUSE_SHARE"))
    if share is None:
        share = HYBRID_IN_HOUSE_SHARE
    share = min(1.0, max(0.0, share))

    return RateTable(
        conveyance_per_ft=conveyance,
        conveyance_default_per_ft=_rate(env.get("ROM_RATE_CONVEYANCE_DEFAULT_PER_FT"), CONVEYANCE_DEFAULT_PER_FT),
        storage_per_position=storage,
        storage_default_per_position=_rate(env.get("ROM_RATE_STORAGE_DEFAULT_PER_POSITION"), STORAGE_DEFAULT_PER_POSITION),
        hybrid_in_house_share=share,
    )


def load_config(env: Mapping[str, str], cli_args: object | None = None) -> Config:
    """Build a runtime :class:`Config` from environment variables and CLI options."""

    rates = load_rates(env)
    state_file = _as_path(env.get("ROM_STATE_FILE"))
    verbose = _env_flag(env.get("ROM_VERBOSE"))
    sort_by = "projectNumberAsc"
    status_filter = "all"
    search = ""

    options = _cli_options(cli_args)
    if options.get("state"):
        state_file = _as_path(str(options["state"])) or state_file
    if options.get("sort"):
        sort_by = str(options["sort"])
    if options.get("status"):
        status_filter = str(options["status"])
    if options.get("search"):
        search = str(options["search"])
    if options.get("verbose"):
        verbose = True

    return Config(
        rates=rates,
        state_file=state_file,
        sort_by=sort_by,
        status_filter=status_filter,
        search=search,
        verbose=verbose,
    )


def config_from_environ(cli_args: object | None = None) -> Config:
    return load_config(os.environ, cli_args)


__all__ = ["Config", "config_from_environ", "load_config", "load_rates"]
