# becker_irr/cli.py
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

# Only imports the thin runner; the solver stays behind scenario_runner
from .scenario_runner import run_dir  # run_dir(Path|str, Path, mode="irr", fmt="jsonl", save_annual=False)

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="becker_irr",
        description="Becker dual-rate IRR calculator",
    )
    p.add_argument(
        "--mode",
        default="irr",
        choices=["irr", "obt", "montecarlo"],
        help="Execution mode (default: irr).",
    )
    p.add_argument(
        "--config",
        required=False,
        default=None,
        help="Path to a scenario YAML/JSON file, or a directory of them.",
    )
    p.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for result files (default: csv).",
    )
    p.add_argument(
        "--save-annual",
        action="store_true",
        help="If set, write the per-period balance path alongside the summary.",
    )
    p.add_argument("--iterations", type=int, default=1000, help="Monte Carlo draws (default: 1000).")
    p.add_argument("--seed", type=int, default=None, help="Monte Carlo random seed.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug).")
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (unknown keys raise).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (defaults for guess/decimals).",
    )
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _run_montecarlo(cfg_path: Path, outputs_dir: Path, ns: argparse.Namespace) -> int:
    from .adapters import scenario_inputs
    from .monte_carlo import run_monte_carlo
    from .validate import _mode_from_env_or_flag, load_scenario_from_file, validate_scenario_dict

    params = load_scenario_from_file(cfg_path)
    validate_scenario_dict(params, mode=_mode_from_env_or_flag(None))
    earnings, _, irr_guess, decimals = scenario_inputs(params)
    df = run_monte_carlo(
        earnings,
        iterations=ns.iterations,
        seed=ns.seed,
        irr_guess=irr_guess,
        decimals=decimals,
    )
    out = outputs_dir / f"{cfg_path.stem}_montecarlo.{ns.fmt}"
    if ns.fmt == "jsonl":
        df.to_json(out, orient="records", lines=True)
    else:
        df.to_csv(out, index=False)
    logger.info("Monte Carlo: %d rows, success_rate=%.3f -> %s", len(df), df.attrs["success_rate"], out)
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = parse_args(argv)
    _configure_logging(ns.verbose)
    _apply_validation_mode(ns)

    if not ns.config:
        print("ERROR: --config is required", file=sys.stderr)
        return 2

    # Resolve paths
    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path = Path(ns.config).resolve()
    outputs_dir.mkdir(parents=True, exist_ok=True)

    try:
        if ns.mode == "montecarlo":
            return _run_montecarlo(cfg_path, outputs_dir, ns)
        res = run_dir(cfg_path, outputs_dir, mode=ns.mode, fmt=ns.fmt, save_annual=ns.save_annual)
    except SystemExit as e:
        # Validation problems surface as SystemExit(message)
        if e.code is not None and not isinstance(e.code, int):
            print(f"ERROR: {e.code}", file=sys.stderr)
        return int(e.code) if isinstance(e.code, int) else 2
    except Exception as e:
        # Fail noisily with non-zero; keep traceback for debugging
        logger.debug("run failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if ns.mode == "obt" and "obt" in res.summary:
        print(f"OBT: {res.summary['obt']}")
    elif "becker_irr" in res.summary:
        print(f"Becker IRR: {res.summary['becker_irr']}")
    else:
        print(f"Ran {res.summary.get('scenarios', 0)} scenarios ({res.summary.get('failed', 0)} failed).")
    return 0


__all__ = ["main", "parse_args"]
