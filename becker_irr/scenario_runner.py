# becker_irr/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime
import json, csv
import logging
import math

import yaml

from .validate import (
    _mode_from_env_or_flag,
    load_scenario_from_file,
    validate_scenario_dict,
)

logger = logging.getLogger(__name__)

SCENARIO_PATTERNS = ("*.yaml", "*.yml", "*.json")

@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None
    rows: List[Dict[str, Any]] = field(default_factory=list)

def _json_safe(row: Dict[str, Any]) -> Dict[str, Any]:
    # strict JSON has no inf/nan tokens; single-period rates are +/-inf
    return {k: (str(v) if isinstance(v, float) and not math.isfinite(v) else v) for k, v in row.items()}

def _dumps(row: Dict[str, Any], **kw: Any) -> str:
    return json.dumps(_json_safe(row), allow_nan=False, **kw)

def _write_jsonl(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(_dumps(row) + "\n")

def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        path.write_text("", encoding="utf-8")
        return
    cols: List[str] = []
    for r in rows:
        for k in r.keys():
            if k not in cols:
                cols.append(k)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=cols)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k, "") for k in cols})

def _write_rows(path: Path, rows: List[Dict[str, Any]], fmt: str) -> None:
    if fmt == "jsonl":
        _write_jsonl(path, rows)
    elif fmt == "csv":
        _write_csv(path, rows)
    else:
        raise SystemExit(f"unknown fmt: {fmt}")

def _scenario_files(d: Path) -> List[Path]:
    files = {f for pat in SCENARIO_PATTERNS for f in d.glob(pat) if f.is_file()}
    return sorted(files)

def validate_and_run(mode: str, params: Dict[str, Any], *, validation: str | None = None) -> Dict[str, Any]:
    validate_scenario_dict(params, mode=_mode_from_env_or_flag(validation))
    from .adapters import run_scenario
    return run_scenario(params, mode=mode)

def _run_one(cfg_path: Path, mode: str) -> Dict[str, Any]:
    params = load_scenario_from_file(cfg_path)
    summary = validate_and_run(mode, params)
    logger.info("%s: becker_irr=%s obt=%s", cfg_path.name, summary["becker_irr"], summary["obt"])
    return summary

def run_dir(
    config: str | Path,
    out_dir: str | Path,
    *,
    mode: str = "irr",
    fmt: str = "jsonl",
    save_annual: bool = False,
) -> RunResult:
    """
    Run one scenario file, or every scenario file in a directory.

    File: writes summary.json (plus per-period balances when save_annual).
    Directory: one row per file in scenarios.<fmt>; a file that fails to load,
    validate or solve becomes a row with an 'error' field instead of aborting
    the batch.
    """
    cfg_path = Path(config)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    if cfg_path.is_dir():
        rows: List[Dict[str, Any]] = []
        files = _scenario_files(cfg_path)
        if not files:
            raise ValueError(f"{cfg_path}: no scenario files found")
        for f in files:
            try:
                summary = _run_one(f, mode)
            except (ValueError, SystemExit, yaml.YAMLError) as e:
                # BeckerError is a ValueError; validation raises SystemExit(message)
                logger.warning("%s: %s", f.name, e)
                rows.append({"scenario": f.stem, "error": str(e)})
                continue
            summary.pop("annual", None)
            rows.append({"scenario": f.stem, **summary})

        results_path = out / f"scenarios.{fmt}"
        _write_rows(results_path, rows, fmt)
        failed = sum(1 for r in rows if "error" in r)
        if failed:
            logger.warning("%d/%d scenarios failed", failed, len(rows))
        summary = {"scenarios": len(rows), "failed": failed}
        summary_path = out / "summary.json"
        summary_path.write_text(_dumps(summary, indent=2), encoding="utf-8")
        return RunResult(summary=summary, summary_path=summary_path, results_path=results_path, rows=rows)

    summary = _run_one(cfg_path, mode)
    annual = summary.pop("annual", [])

    summary_path = out / "summary.json"
    summary_path.write_text(_dumps(summary, indent=2), encoding="utf-8")

    results_path: Optional[Path] = None
    if save_annual:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        results_path = out / f"{cfg_path.stem}_results_{stamp}.{fmt}"
        _write_rows(results_path, annual, fmt)

    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path, rows=annual)
