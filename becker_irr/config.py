from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict
import io
import os

import yaml

from .errors import InvalidInputError

DEFAULT_MAX_ITERATIONS = 50
DEFAULT_INIT_INCREMENT = 0.05
DEFAULT_TOLERANCE = 1e-10

# Only these keys of a `solver:` section are honoured.
SOLVER_KEYS = ("max_iterations", "init_increment")

ENV_MAX_ITERATIONS = "BECKER_MAX_ITERATIONS"
ENV_INIT_INCREMENT = "BECKER_INIT_INCREMENT"


@dataclass(frozen=True)
class IrrConfig:
    """Per-call solver settings. Build a fresh one for every top-level call."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    init_increment: float = DEFAULT_INIT_INCREMENT
    tolerance: float = DEFAULT_TOLERANCE

    @classmethod
    def for_decimals(cls, decimals: int, **overrides: Any) -> "IrrConfig":
        """
        tolerance = 10^(-decimals); other fields from defaults unless overridden.
        """
        if decimals < 0:
            raise InvalidInputError("decimals must be >= 0")
        cfg = cls(tolerance=10.0 ** -int(decimals))
        return replace(cfg, **overrides) if overrides else cfg


def _coerce_solver(raw: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if raw.get("max_iterations") is not None:
        try:
            n = int(raw["max_iterations"])
        except (TypeError, ValueError):
            raise InvalidInputError("max_iterations must be an integer") from None
        if n <= 0:
            raise InvalidInputError("max_iterations must be > 0")
        out["max_iterations"] = n
    if raw.get("init_increment") is not None:
        try:
            step = float(raw["init_increment"])
        except (TypeError, ValueError):
            raise InvalidInputError("init_increment must be a number") from None
        if not step > 0.0:
            raise InvalidInputError("init_increment must be > 0")
        out["init_increment"] = step
    return out


def solver_overrides_from_dict(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pull solver overrides out of an already-loaded scenario mapping and apply
    BECKER_MAX_ITERATIONS / BECKER_INIT_INCREMENT on top.
    """
    section = cfg.get("solver") if isinstance(cfg, dict) else None
    raw: Dict[str, Any] = {}
    if isinstance(section, dict):
        raw = {k: section[k] for k in SOLVER_KEYS if k in section}

    if os.getenv(ENV_MAX_ITERATIONS):
        raw["max_iterations"] = os.environ[ENV_MAX_ITERATIONS]
    if os.getenv(ENV_INIT_INCREMENT):
        raw["init_increment"] = os.environ[ENV_INIT_INCREMENT]

    return _coerce_solver(raw)


def load_solver_overrides(source: str | os.PathLike | io.StringIO) -> Dict[str, Any]:
    """
    Load YAML from a path or text stream and return the solver overrides
    (keyword arguments for IrrConfig.for_decimals / solve_irr).
    """
    text: str
    if hasattr(source, "read"):
        text = str(source.read())
    else:
        with open(os.fspath(source), "r", encoding="utf-8") as f:
            text = f.read()

    cfg = yaml.safe_load(text) or {}
    if not isinstance(cfg, dict):
        cfg = {}
    return solver_overrides_from_dict(cfg)


__all__ = [
    "IrrConfig",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_INIT_INCREMENT",
    "DEFAULT_TOLERANCE",
    "load_solver_overrides",
    "solver_overrides_from_dict",
]
