import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from dotenv import load_dotenv

from .config import Config, config_from_environ
from .portfolio import SORT_OPTIONS, build_dashboard, format_currency
from .quotes import build_quote_from_project_state
from .reporting import make_portfolio_summary_text
from .state import hydrate_project_state, initial_state, normalize_loaded_state
from .validation import collect_module_errors, validate_operational_data

logger = logging.getLogger(__name__)


def load_state_file(path: Optional[Path]) -> Dict[str, Any]:
    """Read a saved project state; no path means the default state."""

    if path is None:
        return initial_state()
    payload = json.loads(path.read_text(encoding="utf-8"))
    return normalize_loaded_state(hydrate_project_state(initial_state(), payload))


def _report_input_problems(state: Dict[str, Any]) -> None:
    module_data = state.get("moduleData") or {}
    for field_name, message in validate_operational_data(module_data.get("operational_data")).items():
        logger.warning("Operational data %s: %s", field_name, message)
    for module_id, row_errors in collect_module_errors(module_data).items():
        for row_key, fields in row_errors.items():
            for field_name, message in fields.items():
                logger.warning("%s row %s %s: %s", module_id, row_key, field_name, message)


def run(config: Config) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        state = load_state_file(config.state_file)
    except (OSError, ValueError) as exc:
        logger.error("Could not load project state from %s: %s", config.state_file, exc)
        return 1

    _report_input_problems(state)
    module_data = state.get("moduleData")
    quotes = [*state.get("projectQuotes", []), build_quote_from_project_state(state, config.rates)]
    dashboard = build_dashboard(
        quotes,
        module_data,
        sort_by=config.sort_by,
        status=config.status_filter,
        search=config.search,
        rates=config.rates,
    )

    print(make_portfolio_summary_text(dashboard["quotes"]), end="")
    totals = dashboard["totals"]
    print(
        "In house: {0} | Buyout: {1} | Services: {2} | Total: {3}".format(
            *(format_currency(totals[name]) for name in ("inHouse", "buyout", "services", "total"))
        )
    )
    return 0


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarise a ROM quote portfolio from a saved project state")
    parser.add_argument("--state", help="Path to a saved project state JSON file")
    parser.add_argument("--sort", choices=SORT_OPTIONS, help="Dashboard sort order")
    parser.add_argument("--status", choices=("all", "working", "complete"), help="Only show quotes with this status")
    parser.add_argument("--search", help="Filter quotes by project number, name, sales or lead engineer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase logging verbosity")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    runtime_cfg = config_from_environ(args)
    log_level = logging.DEBUG if runtime_cfg.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")
    return run(runtime_cfg)


if __name__ == "__main__":
    sys.exit(main())
