# pipenet/core/hydraulics/friction.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict
import math

import numpy as np

from pipenet.core.errors import InvalidInputError


@dataclass(frozen=True)
class FrictionResult:
    f_by_id: Dict[str, float]
    Re_by_id: Dict[str, float]
    V_by_id: Dict[str, float]
    rr_by_id: Dict[str, float]  # eps/D
    meta: Dict[str, object]


def churchill_f(Re: float, eps_m: float, D_m: float) -> float:
    """
    Darcy friction factor, Churchill (1977) form.

    Covers laminar, transition and turbulent flow in one continuous
    expression, approximating Colebrook without iterating:

      theta1 = (-2.457 * ln((7/Re)^0.9 + 0.27*eps/D))^16
      theta2 = (37530/Re)^16
      f = 8 * ((8/Re)^12 + 1/(theta1 + theta2)^1.5)^(1/12)

    Raises InvalidInputError if Re <= 0.
    """
    if not Re > 0:
        raise InvalidInputError(f"Invalid Reynolds number: Re must be > 0 (got {Re!r}).")

    theta1 = (-2.457 * math.log((7 / Re) ** 0.9 + 0.27 * (eps_m / D_m))) ** 16
    theta2 = (37530 / Re) ** 16
    return 8 * ((8 / Re) ** 12 + 1 / ((theta1 + theta2) ** 1.5)) ** (1 / 12)


# public name used by the solver
friction_factor = churchill_f


def churchill_f_vec(Re: np.ndarray, eps_m, D_m) -> np.ndarray:
    """Vectorized: Re (n,) -> f (n,). eps_m / D_m may be scalars or (n,)."""
    Re = np.asarray(Re, dtype=float)
    eps_m = np.asarray(eps_m, dtype=float)
    D_m = np.asarray(D_m, dtype=float)

    if np.any(~(Re > 0)):
        raise InvalidInputError("churchill_f_vec: Re must be > 0 for every entry.")

    theta1 = (-2.457 * np.log((7.0 / Re) ** 0.9 + 0.27 * (eps_m / D_m))) ** 16
    theta2 = (37530.0 / Re) ** 16
    return 8.0 * ((8.0 / Re) ** 12 + 1.0 / ((theta1 + theta2) ** 1.5)) ** (1.0 / 12.0)


def velocity_from_q(*, q_m3s: float, area_m2: float) -> float:
    return (q_m3s / area_m2) if area_m2 > 0 else float("nan")


def reynolds(*, V_m_s: float, D_m: float, nu_m2s: float) -> float:
    return (V_m_s * D_m / nu_m2s) if (D_m > 0 and nu_m2s > 0) else float("nan")


def rr_eps_over_D(*, eps_m: float, D_m: float) -> float:
    return (eps_m / D_m) if D_m > 0 else float("nan")
