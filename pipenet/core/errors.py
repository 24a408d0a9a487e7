# pipenet/core/errors.py
from __future__ import annotations

from typing import Optional


class PipenetError(ValueError):
    """Base class for modelling errors raised by the solver core."""


class InvalidInputError(PipenetError):
    """
    A physically meaningless input reached a correlation (e.g. Re <= 0).
    Usually points to a configuration/geometry problem upstream.
    """


class InfeasibleConfigurationError(PipenetError):
    """
    The network as configured has no forward-flow solution:
      - non-positive driving term (pressures/elevations), or
      - non-positive energy-balance denominator (loss coefficients/geometry).
    """
    def __init__(self, message: str, *, value: Optional[float] = None):
        self.value = value
        super().__init__(message)
