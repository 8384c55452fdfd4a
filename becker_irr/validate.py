# becker_irr/validate.py
from __future__ import annotations
import os, sys, json
from numbers import Integral, Real
from pathlib import Path
from typing import Any, Dict, Iterable, List
import yaml

REQUIRED_STRICT = {"earnings", "irr_guess", "decimals"}
ALLOWED_KEYS = {"earnings", "disc_rate", "int_disc", "irr_guess", "decimals", "becker_rate", "solver", "name"}

def _mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"

def _is_number(v: Any) -> bool:
    return isinstance(v, Real) and not isinstance(v, bool)

def validate_scenario_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> None:
    """
    Shape checks only; rate/precision ranges are the solver's job.
      - relaxed: require {earnings}
      - strict : require {earnings, disc_rate|int_disc, irr_guess, decimals}
                 and reject unknown top-level keys
    """
    if not isinstance(data, dict):
        raise SystemExit("scenario must be a mapping")

    required = {"earnings"}
    if mode == "strict":
        required |= REQUIRED_STRICT

    missing = sorted(k for k in required if k not in data)
    if mode == "strict" and "disc_rate" not in data and "int_disc" not in data:
        missing.append("disc_rate")
    if missing:
        raise SystemExit(f"missing required keys: {missing}")

    if mode == "strict":
        unknown = sorted(k for k in data.keys() if k not in ALLOWED_KEYS)
        if unknown:
            raise SystemExit(f"unknown top-level keys (strict mode): {unknown}")

    # basic value checks (mode-agnostic)
    earnings = data.get("earnings")
    if not isinstance(earnings, list) or not all(_is_number(e) for e in earnings):
        raise SystemExit("earnings must be a list of numbers")

    for k in ("disc_rate", "int_disc", "irr_guess", "becker_rate"):
        if data.get(k) is not None and not _is_number(data[k]):
            raise SystemExit(f"{k} must be a number")

    dec = data.get("decimals")
    if dec is not None and (not isinstance(dec, Integral) or isinstance(dec, bool)):
        raise SystemExit("decimals must be an integer")

    solver = data.get("solver")
    if solver is not None and not isinstance(solver, dict):
        raise SystemExit("solver must be a mapping")

def load_scenario_from_file(path: Path) -> Dict[str, Any]:
    p = Path(path)
    if p.is_dir():
        # scenario_runner handles directories; keep this function file-only
        raise SystemExit(f"{p} is a directory (expected a file)")
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    return json.loads(text or "{}")

def _iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))

def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="becker_irr.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON scenario files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = _mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in _iter_input_files(target):
            if not f.is_file():
                continue
            any_seen = True
            try:
                data = load_scenario_from_file(f)
                validate_scenario_dict(data, mode=mode)
                print(f"OK: {f}")
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
            except (OSError, ValueError, yaml.YAMLError) as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0

if __name__ == "__main__":
    raise SystemExit(_main())
