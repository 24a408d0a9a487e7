from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd

from pipenet.core.hydraulics.friction import churchill_f_vec
from pipenet.core.hydraulics.headloss import (
    MINOR_LOSS_SEGMENTS,
    HeadlossModel,
    SegmentHeadLoss,
    major_coeff_vec,
)
from pipenet.core.models.network import SerialNetwork
from pipenet.core.solver.velocity_solver import SolutionResult


M3S_TO_GPM = 15850.323141489  # US gal/min per m3/s


def m3s_to_l_min(q_m3s: float) -> float:
    return q_m3s * 1e3 * 60


def m3s_to_gpm(q_m3s: float) -> float:
    return q_m3s * M3S_TO_GPM


def _k_in_balance(network: SerialNetwork) -> List[float]:
    return [
        network.minor_losses.k_for(i) if i in MINOR_LOSS_SEGMENTS else 0.0
        for i in range(1, len(network.segments) + 1)
    ]


def segment_head_losses(result: SolutionResult, network: SerialNetwork) -> List[SegmentHeadLoss]:
    """
    Major/minor head loss per segment [m] at the solved velocities.
    Uses the friction factors reported in the result.
    """
    model = HeadlossModel(g_m_s2=network.fluid.g)
    return model.segment_losses(
        uids=[s.uid for s in network.segments],
        V_m_s=list(result.velocities),
        f=list(result.f),
        L_m=[s.length for s in network.segments],
        D_m=[s.diameter for s in network.segments],
        K=_k_in_balance(network),
    )


def segments_frame(result: SolutionResult, network: SerialNetwork) -> pd.DataFrame:
    """
    One row per segment:
      uid, name, D_m, L_m, eps_m, V_m_s, Re, f, K_minor, major_coeff, h_major_m, h_minor_m, h_total_m
    major_coeff is the V1^2 coefficient the segment contributes to the balance.
    """
    ratios = np.asarray(result.meta.get("area_ratios", [1.0] * len(network.segments)), dtype=float)
    D = np.array([s.diameter for s in network.segments], dtype=float)
    L = np.array([s.length for s in network.segments], dtype=float)

    coeff = major_coeff_vec(f=np.asarray(result.f), L_m=L, D_m=D, ar_sq=ratios ** 2)
    losses = segment_head_losses(result, network)

    return pd.DataFrame({
        "uid": [s.uid for s in network.segments],
        "name": [s.name for s in network.segments],
        "D_m": D,
        "L_m": L,
        "eps_m": [s.roughness for s in network.segments],
        "V_m_s": list(result.velocities),
        "Re": list(result.Re),
        "f": list(result.f),
        "K_minor": _k_in_balance(network),
        "major_coeff": coeff,
        "h_major_m": [h.h_major_m for h in losses],
        "h_minor_m": [h.h_minor_m for h in losses],
        "h_total_m": [h.h_total_m for h in losses],
    })


def history_frame(result: SolutionResult) -> pd.DataFrame:
    """Convergence trajectory, one row per iteration."""
    rows = []
    for r in result.history:
        rows.append({
            "iteration": r.iteration,
            "v1_old_m_s": r.v1_old_m_s,
            "v1_new_m_s": r.v1_new_m_s,
            "Re1": r.Re[0],
            "Re2": r.Re[1],
            "Re3": r.Re[2],
            "f1": r.f[0],
            "f2": r.f[1],
            "f3": r.f[2],
            "denom": r.denom,
            "err_pct": r.err_pct,
        })
    return pd.DataFrame(rows, columns=[
        "iteration", "v1_old_m_s", "v1_new_m_s", "Re1", "Re2", "Re3",
        "f1", "f2", "f3", "denom", "err_pct",
    ])


def format_summary(result: SolutionResult, *, title: str = "Residential Water System") -> str:
    f1, f2, f3 = result.f
    lines = [
        f"--- {title}: Final Results ---",
        f"Iterations:                 {result.iterations:d}",
        f"Inlet velocity, V1:         {result.v1_m_s:.4f} m/s",
        f"Segment 2 velocity, V2:     {result.v2_m_s:.4f} m/s",
        f"Segment 3 velocity, V3:     {result.v3_m_s:.4f} m/s",
        f"Volumetric flow rate, Q:    {m3s_to_l_min(result.q_m3s):.3f} L/min",
        f"Friction factors (Darcy):   f1={f1:.4f}, f2={f2:.4f}, f3={f3:.4f}",
        f"Final percent change:       {result.err_pct:.6f} %",
    ]
    if not result.converged:
        lines.append(
            f"WARNING: did not converge within max_iters={result.meta.get('max_iters', result.iterations)}"
        )
    return "\n".join(lines)


def friction_curve(Re: np.ndarray, *, eps_m: float, D_m: float) -> pd.DataFrame:
    """Darcy f over a range of Re for one pipe (Moody-style table)."""
    Re = np.asarray(Re, dtype=float)
    return pd.DataFrame({
        "Re": Re,
        "f": churchill_f_vec(Re, eps_m, D_m),
        "eps_over_D": eps_m / D_m,
    })
