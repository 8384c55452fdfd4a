# becker_irr/errors.py
"""
Failure taxonomy for the Becker IRR solver.

All three kinds subclass ValueError so callers that only care about "bad
numbers in, no rate out" can catch one type; str(err) is the message shown to
the user.
"""
from __future__ import annotations

from typing import Optional


class BeckerError(ValueError):
    """Base class. `reason` distinguishes the failing check or phase."""

    prefix = "Becker IRR error"

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        super().__init__(self._message())

    def _message(self) -> str:
        return f"{self.prefix}: {self.reason}" if self.reason else self.prefix


class EmptyEarningsError(BeckerError):
    prefix = "Empty earnings sequence"

    def __init__(self):
        super().__init__(None)


class InvalidInputError(BeckerError):
    prefix = "Invalid input"


class MaxIterationsReachedError(BeckerError):
    prefix = "Max iterations reached"


__all__ = [
    "BeckerError",
    "EmptyEarningsError",
    "InvalidInputError",
    "MaxIterationsReachedError",
]
