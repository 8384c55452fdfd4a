#!/usr/bin/env python3
"""
Monte Carlo sweep for the Becker IRR.
Draws discount rates and multiplicative earnings shocks around a base
earnings series, solves each draw, and collects Becker vs classic IRR.
"""
from typing import Optional, Dict, Sequence, Tuple
import warnings

import numpy as np
import pandas as pd

from .errors import BeckerError
from .finance.irr import accumulate, solve_irr
from .finance.metrics import classic_irr


def generate_mc_parameters(
    n_scenarios: int,
    periods: int,
    seed: Optional[int] = None,
    disc_rate_range: Tuple[float, float] = (0.0, 0.10),
    earnings_noise: float = 0.05,
) -> Dict[str, np.ndarray]:
    """
    Generate Monte Carlo parameter samples.

    Args:
        n_scenarios: Number of scenarios to generate
        periods: Length of the earnings series being shocked
        seed: Random seed for reproducibility
        disc_rate_range: Uniform bounds for the external discount rate
        earnings_noise: Std-dev of the multiplicative shock applied per period

    Returns:
        {'disc_rate': (n,), 'shock': (n, periods)}
    """
    rng = np.random.default_rng(seed)
    lo, hi = disc_rate_range
    return {
        "disc_rate": rng.uniform(lo, hi, n_scenarios),
        "shock": 1.0 + rng.normal(0.0, earnings_noise, (n_scenarios, periods)),
    }


def run_monte_carlo(
    earnings: Sequence[float],
    iterations: int = 1000,
    seed: Optional[int] = None,
    disc_rate_range: Tuple[float, float] = (0.0, 0.10),
    earnings_noise: float = 0.05,
    irr_guess: float = 0.1,
    decimals: int = 6,
) -> pd.DataFrame:
    """
    Run the sweep. Draws the solver cannot handle are skipped with a warning.

    Returns:
        DataFrame with one row per successful draw; summary statistics in
        df.attrs (mean/p10/p90 of becker_irr, success_rate).
    """
    base = np.asarray(earnings, dtype=float)
    scenarios = generate_mc_parameters(iterations, len(base), seed, disc_rate_range, earnings_noise)
    out_data = []

    failed_count = 0

    for i in range(iterations):
        disc = float(scenarios["disc_rate"][i])
        series = (base * scenarios["shock"][i]).tolist()
        try:
            rate = solve_irr(series, disc, irr_guess, decimals)
        except BeckerError as e:
            failed_count += 1
            warnings.warn(f"Scenario {i+1} failed: {e}")
            continue

        out_data.append({
            "iteration": i + 1,
            "disc_rate": disc,
            "becker_irr": rate,
            "classic_irr": classic_irr(series),
            "obt": accumulate(series, disc, rate),
        })

    if failed_count > 0:
        warnings.warn(f"Monte Carlo: {failed_count}/{iterations} scenarios failed")

    df = pd.DataFrame(
        out_data, columns=["iteration", "disc_rate", "becker_irr", "classic_irr", "obt"]
    )

    if len(df) > 0:
        df.attrs["mean_becker_irr"] = float(df["becker_irr"].mean())
        df.attrs["p10_becker_irr"] = float(df["becker_irr"].quantile(0.10))
        df.attrs["p90_becker_irr"] = float(df["becker_irr"].quantile(0.90))
    df.attrs["success_rate"] = len(df) / iterations if iterations else 0.0

    return df
