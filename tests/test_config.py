from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

from romest.cli import parse_args
from romest.config import load_config, load_rates
from romest.rates import DEFAULT_RATES, conveyance_cost_per_foot, storage_cost_per_position


def test_defaults_match_constants():
    cfg = load_config({})
    assert cfg.rates == DEFAULT_RATES
    assert cfg.state_file is None
    assert cfg.sort_by == "projectNumberAsc"
    assert cfg.status_filter == "all"
    assert cfg.verbose is False


def test_env_overrides_rates():
    rates = load_rates(
        {
            "ROM_RATE_MDR_PER_FT": "375",
            "ROM_RATE_CONVEYANCE_DEFAULT_PER_FT": "$1,200",
            "ROM_RATE_PUSH_BACK_PER_POSITION": "150",
            "ROM_HYBRID_IN_HOUSE_SHARE": "0.4",
        }
    )
    assert conveyance_cost_per_foot("MDR", rates) == 375
    assert conveyance_cost_per_foot("Gravity", rates) == 100
    assert conveyance_cost_per_foot("Belt", rates) == 1200
    assert storage_cost_per_position("Push Back", rates) == 150
    assert storage_cost_per_position("Other", rates) == 40
    assert rates.hybrid_in_house_share == 0.4


def test_bad_env_values_fall_back_to_defaults():
    rates = load_rates(
        {
            "ROM_RATE_GRAVITY_PER_FT": "cheap",
            "ROM_RATE_SELECTIVE_RACKING_PER_POSITION": "-5",
            "ROM_HYBRID_IN_HOUSE_SHARE": "7",
        }
    )
    assert conveyance_cost_per_foot("Gravity", rates) == 100
    assert storage_cost_per_position("Selective Racking", rates) == 60
    assert rates.hybrid_in_house_share == 1.0


def test_cli_options_take_precedence(tmp_path: Path):
    env_state = tmp_path / "env.json"
    cli_state = tmp_path / "cli.json"
    cfg = load_config(
        {"ROM_STATE_FILE": str(env_state), "ROM_VERBOSE": "yes"},
        SimpleNamespace(state=str(cli_state), sort="totalDesc", status="complete", search="dallas", verbose=False),
    )
    assert cfg.state_file == cli_state.resolve()
    assert cfg.sort_by == "totalDesc"
    assert cfg.status_filter == "complete"
    assert cfg.search == "dallas"
    assert cfg.verbose is True


def test_env_state_file_used_without_cli(tmp_path: Path):
    cfg = load_config({"ROM_STATE_FILE": str(tmp_path / "state.json")})
    assert cfg.state_file == (tmp_path / "state.json").resolve()


def test_parsed_cli_args_and_blank_env_values(tmp_path: Path):
    args = parse_args(["--state", str(tmp_path / "saved.json"), "--sort", "quoteDueAsc"])
    cfg = load_config({"ROM_STATE_FILE": "   ", "ROM_VERBOSE": "", "ROM_HYBRID_IN_HOUSE_SHARE": "inf"}, args)
    assert cfg.state_file == (tmp_path / "saved.json").resolve()
    assert cfg.sort_by == "quoteDueAsc"
    assert cfg.status_filter == "all"
    assert cfg.verbose is False
    assert cfg.rates.hybrid_in_house_share == 0.5

    assert load_config({"ROM_STATE_FILE": "   "}).state_file is None
