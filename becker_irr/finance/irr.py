# becker_irr/finance/irr.py
from __future__ import annotations

import math
from typing import Iterator, Sequence

from ..config import DEFAULT_INIT_INCREMENT, DEFAULT_MAX_ITERATIONS, IrrConfig
from ..errors import EmptyEarningsError, InvalidInputError, MaxIterationsReachedError


# ---------- OBT (terminal balance) ----------
def iter_balances(
    earnings: Sequence[float], disc_rate: float, becker_rate: float
) -> Iterator[float]:
    """
    Running balance after each period, period 0 included:
        OB_0 = E_0
        OB_t = OB_{t-1} * (1 + d) + E_t    if OB_{t-1} >= 0
        OB_t = OB_{t-1} * (1 + r) + E_t    otherwise
    with d the discount rate and r the Becker rate.
    """
    if len(earnings) == 0:
        return
    pos_factor = 1.0 + disc_rate
    neg_factor = 1.0 + becker_rate

    obt = float(earnings[0])
    yield obt
    for e in earnings[1:]:
        obt = obt * (neg_factor if obt < 0.0 else pos_factor) + float(e)
        yield obt


def accumulate(earnings: Sequence[float], disc_rate: float, becker_rate: float) -> float:
    """Terminal balance (OBT). Empty earnings give 0.0."""
    obt = 0.0
    for obt in iter_balances(earnings, disc_rate, becker_rate):
        pass
    return obt


# ---------- Bracketing ----------
def find_bounds(
    earnings: Sequence[float],
    disc_rate: float,
    initial_guess: float,
    config: IrrConfig,
) -> float:
    """
    Walk away from `initial_guess` until OBT changes sign and return the
    first rate on the other side. The step doubles whenever OBT moves further
    from zero. Returns the guess itself if it is already a root.
    """
    obt = accumulate(earnings, disc_rate, initial_guess)
    if abs(obt) < config.tolerance:
        return initial_guess

    rate = initial_guess
    step = config.init_increment

    if obt < 0.0:
        for _ in range(config.max_iterations):
            rate -= step
            new_obt = accumulate(earnings, disc_rate, rate)
            if new_obt >= 0.0:
                return rate
            if new_obt < obt:
                step *= 2.0
            obt = new_obt
    else:
        for _ in range(config.max_iterations):
            rate += step
            new_obt = accumulate(earnings, disc_rate, rate)
            if new_obt <= 0.0:
                return rate
            if new_obt > obt:
                step *= 2.0
            obt = new_obt

    raise MaxIterationsReachedError("Could not find initial bounds")


# ---------- Becker IRR ----------
def solve_irr(
    earnings: Sequence[float],
    disc_rate: float,
    irr_guess: float,
    decimals: int,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    init_increment: float = DEFAULT_INIT_INCREMENT,
) -> float:
    """
    Becker rate r such that accumulate(earnings, disc_rate, r) is zero to
    10^(-decimals). Bracket with find_bounds, then bisect.

    A single period has no finite rate: the result is 0.0, +inf or -inf by
    the sign of that one value.
    """
    if len(earnings) == 0:
        raise EmptyEarningsError()
    if disc_rate < -1.0 or decimals < 0:
        raise InvalidInputError("Invalid discount rate or decimals")

    if len(earnings) == 1:
        only = earnings[0]
        if only == 0.0:
            return 0.0
        return math.inf if only > 0.0 else -math.inf
    if all(e == 0.0 for e in earnings):
        return 0.0

    config = IrrConfig.for_decimals(
        decimals, max_iterations=max_iterations, init_increment=init_increment
    )

    bound = find_bounds(earnings, disc_rate, irr_guess, config)
    # irr_a is the side with negative OBT
    if accumulate(earnings, disc_rate, irr_guess) < 0.0:
        irr_a, irr_b = irr_guess, bound
    else:
        irr_a, irr_b = bound, irr_guess

    if abs(irr_a - irr_b) < config.tolerance:
        return (irr_a + irr_b) / 2.0

    for _ in range(config.max_iterations):
        irr_mid = (irr_a + irr_b) / 2.0
        if abs(irr_a - irr_b) <= config.tolerance:
            return irr_mid

        obt = accumulate(earnings, disc_rate, irr_mid)
        if abs(obt) < config.tolerance:
            return irr_mid

        if obt < 0.0:
            irr_a = irr_mid
        else:
            irr_b = irr_mid

    raise MaxIterationsReachedError("Binary search did not converge")


__all__ = ["iter_balances", "accumulate", "find_bounds", "solve_irr"]
