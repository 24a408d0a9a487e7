# pipenet/core/solver/friction_apply.py
from __future__ import annotations

from typing import Dict, Sequence, Tuple

from pipenet.core.models.network import SerialNetwork

from pipenet.core.hydraulics.friction import (
    FrictionResult,
    friction_factor,
    reynolds,
    rr_eps_over_D,
)


def area_ratios(network: SerialNetwork) -> Tuple[float, ...]:
    """A1/Ai per segment (1.0 for the inlet). Vi = (A1/Ai) * V1 by continuity."""
    A1 = network.segments[0].area
    return tuple(A1 / s.area for s in network.segments)


def compute_friction_at_v1(
    network: SerialNetwork,
    *,
    v1_m_s: float,
    ratios: Sequence[float],
) -> FrictionResult:
    """
    Velocity, Re and Darcy f per segment for a given inlet velocity.

    ratios: A1/Ai for each segment in network order (precomputed by the caller).
    Raises InvalidInputError if any Re <= 0.
    """
    nu = network.fluid.nu

    f_by_id: Dict[str, float] = {}
    Re_by_id: Dict[str, float] = {}
    V_by_id: Dict[str, float] = {}
    rr_by_id: Dict[str, float] = {}

    for i, s in enumerate(network.segments):
        V = ratios[i] * v1_m_s
        Re = reynolds(V_m_s=V, D_m=s.diameter, nu_m2s=nu)

        V_by_id[s.uid] = V
        Re_by_id[s.uid] = Re
        rr_by_id[s.uid] = rr_eps_over_D(eps_m=s.roughness, D_m=s.diameter)
        f_by_id[s.uid] = friction_factor(Re, s.roughness, s.diameter)

    return FrictionResult(
        f_by_id=f_by_id,
        Re_by_id=Re_by_id,
        V_by_id=V_by_id,
        rr_by_id=rr_by_id,
        meta={
            "method": "Darcy f via Churchill (1977)",
            "v1_m_s": v1_m_s,
            "nu_m2s": nu,
        },
    )
