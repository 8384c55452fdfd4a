from __future__ import annotations
import sys
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from becker_irr.adapters import becker_irr  # noqa: E402
from becker_irr.errors import BeckerError  # noqa: E402

CASES = ROOT / "tests" / "golden" / "reference_cases.yaml"
REQUIRED = ("name", "earnings", "disc_rate", "irr_guess", "decimals")

def _header(text: str) -> str:
    lines = []
    for line in text.splitlines(keepends=True):
        if not line.startswith("#"):
            break
        lines.append(line)
    return "".join(lines)

def main() -> int:
    if not CASES.exists():
        print(f"[x] Missing reference cases: {CASES}", file=sys.stderr)
        return 2

    text = CASES.read_text(encoding="utf-8")
    cases = yaml.safe_load(text) or []
    filled = 0
    for case in cases:
        missing = [k for k in REQUIRED if k not in case]
        if missing:
            print(f"[x] case {case.get('name', '?')} missing keys {missing}", file=sys.stderr)
            return 3
        # hand-derived expectations are never overwritten
        if "expected" in case:
            print(f"[=] case {case['name']} already has expected={case['expected']}, skipped")
            continue
        try:
            case["expected"] = float(becker_irr(case["earnings"], case["disc_rate"], case["irr_guess"], case["decimals"]))
        except BeckerError as e:
            print(f"[x] case {case['name']} failed: {e}", file=sys.stderr)
            return 4
        case.setdefault("abs_tol", 1e-6)
        filled += 1

    if not filled:
        print(f"[ok] Nothing to refresh in {CASES}")
        return 0
    CASES.write_text(_header(text) + yaml.safe_dump(cases, sort_keys=False), encoding="utf-8")
    print(f"[ok] Filled {filled} of {len(cases)} cases in {CASES}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
