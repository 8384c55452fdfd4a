# becker_irr/adapters.py
from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from becker_irr.config import solver_overrides_from_dict
from becker_irr.finance.irr import accumulate, iter_balances, solve_irr
from becker_irr.finance.metrics import classic_irr

DEFAULT_IRR_GUESS = 0.1
DEFAULT_DECIMALS = 6


# ------------------------------
# Small helpers (no policy here)
# ------------------------------
def _floats(earnings: Iterable[Any]) -> List[float]:
    return [float(x) for x in earnings]


def _disc_rate(p: Dict[str, Any]) -> float:
    # `int_disc` is the older name for the same input
    val = p.get("disc_rate")
    if val is None:
        val = p.get("int_disc")
    return float(val) if val is not None else 0.0


def _as_float(v: Any, default: float) -> float:
    return float(v) if v is not None else default


def scenario_inputs(p: Dict[str, Any]) -> Tuple[List[float], float, float, int]:
    """(earnings, disc_rate, irr_guess, decimals) with defaults for omitted keys."""
    dec = p.get("decimals")
    return (
        _floats(p.get("earnings") or []),
        _disc_rate(p),
        _as_float(p.get("irr_guess"), DEFAULT_IRR_GUESS),
        int(dec) if dec is not None else DEFAULT_DECIMALS,
    )


def _balance_rows(earnings: List[float], disc_rate: float, becker_rate: float) -> List[Dict[str, Any]]:
    return [
        {"period": t, "earning": e, "balance": b}
        for t, (e, b) in enumerate(zip(earnings, iter_balances(earnings, disc_rate, becker_rate)))
    ]


# ------------------------------
# Public boundary
# ------------------------------
def becker_obt(earnings: Iterable[Any], disc_rate: float, becker_irr: float) -> float:
    """Terminal Becker balance for a given rate pair. Empty input gives 0.0."""
    return accumulate(_floats(earnings), float(disc_rate), float(becker_irr))


def becker_irr(earnings: Iterable[Any], int_disc: float, irr_guess: float, decimals: int) -> float:
    """
    Becker IRR of `earnings` under discount rate `int_disc`.

    Raises a BeckerError subclass (a ValueError) on empty input, invalid
    rate/precision, or when bracketing or bisection runs out of iterations.
    """
    return solve_irr(_floats(earnings), float(int_disc), float(irr_guess), int(decimals))


def run_scenario(params: Dict[str, Any], *, mode: str = "irr") -> Dict[str, Any]:
    """
    High-level adapter for one scenario mapping:
      irr mode: solve for the Becker rate, evaluate OBT there.
      obt mode: evaluate OBT at params['becker_rate'].
    Adds the single-rate IRR for comparison and a per-period balance path.

    Returns:
      {
        'becker_irr': float, 'obt': float, 'classic_irr': float|None,
        'disc_rate': float, 'irr_guess': float, 'decimals': int, 'periods': int,
        'annual': [{'period': t, 'earning': float, 'balance': float}, ...],
      }
    """
    earnings, disc_rate, irr_guess, decimals = scenario_inputs(params)

    if mode == "obt":
        rate = _as_float(params.get("becker_rate"), irr_guess)
    elif mode == "irr":
        overrides = solver_overrides_from_dict(params)
        rate = solve_irr(earnings, disc_rate, irr_guess, decimals, **overrides)
    else:
        raise ValueError(f"unknown mode: {mode}")

    finite = math.isfinite(rate)
    obt: Optional[float] = accumulate(earnings, disc_rate, rate) if finite else None

    return {
        "becker_irr": rate,
        "obt": obt,
        "classic_irr": classic_irr(earnings),
        "disc_rate": disc_rate,
        "irr_guess": irr_guess,
        "decimals": decimals,
        "periods": len(earnings),
        "annual": _balance_rows(earnings, disc_rate, rate) if finite else [],
    }


__all__ = ["becker_obt", "becker_irr", "run_scenario", "scenario_inputs"]
