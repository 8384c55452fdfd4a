"""
Single-rate reference metrics.

Design:
- The Becker accumulator/solver live only in becker_irr.finance.irr (singleton).
- This module wraps numpy-financial for the classic IRR/NPV that reports put
  next to the Becker rate. It must not reimplement the Becker method.
"""
from __future__ import annotations

import math
from typing import Iterable, Optional

import numpy_financial as npf


def classic_npv(rate: float, cashflows: Iterable[float]) -> float:
    """NPV(r) = sum_t CF[t] / (1+r)^t, t starting at 0."""
    return float(npf.npv(float(rate), [float(x) for x in cashflows]))


def classic_irr(cashflows: Iterable[float]) -> Optional[float]:
    """
    Periodic single-rate IRR. Returns None when numpy-financial finds no real
    root (it reports nan), the series is all zero, or it is shorter than two
    periods.
    """
    cfs = [float(x) for x in cashflows]
    if len(cfs) < 2 or not any(cfs):
        return None
    val = float(npf.irr(cfs))
    if math.isnan(val):
        return None
    return val


__all__ = ["classic_npv", "classic_irr"]
