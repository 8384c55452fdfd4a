import re
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]  # repo root
CORE = ROOT / "becker_irr" / "finance" / "irr.py"

EXCLUDE_DIRS = {
    ".venv", "venv", ".git", ".pytest_cache", "build",
    "dist", "__pycache__", ".mypy_cache", ".tox", ".eggs"
}

CORE_DEFS = re.compile(r"\bdef\s+(accumulate|find_bounds|solve_irr|iter_balances)\s*\(")

def _skip(p: Path) -> bool:
    parts = set(p.parts)
    if "site-packages" in parts or "dist-packages" in parts:
        return True
    if any(d in parts for d in EXCLUDE_DIRS):
        return True
    return False

def test_only_core_module_defines_becker_math():
    hits = []
    for p in ROOT.rglob("*.py"):
        if _skip(p):
            continue
        if p == CORE:
            continue
        text = p.read_text(encoding="utf-8", errors="ignore")
        if CORE_DEFS.search(text):
            hits.append(str(p))
    assert not hits, f"Found Becker core defs outside finance/irr.py: {hits}"

def test_core_has_no_module_level_state():
    # every call builds its own IrrConfig; nothing global to mutate
    text = CORE.read_text(encoding="utf-8")
    assert not re.search(r"^\s*global\s", text, re.M)
    assert not re.search(r"^(?!__)[a-z_]+\s*=\s*(\[|\{|IrrConfig\()", text, re.M)
