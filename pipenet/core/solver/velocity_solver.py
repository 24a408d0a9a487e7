# pipenet/core/solver/velocity_solver.py
"""
Steady inlet velocity of a three-segment serial network.

The Darcy friction factor depends on Re, which depends on velocity, so the
rearranged energy balance

    V1 = sqrt(drive_term / denom(V1))

is solved by fixed-point iteration on V1 until the percent change between
successive estimates drops to the tolerance.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Literal, Mapping, Optional, Sequence, Tuple, Union

from pipenet.core.build.config import SolverSettings
from pipenet.core.build.validate import NetworkValidationError, raise_on_errors, validate_network
from pipenet.core.errors import InfeasibleConfigurationError, PipenetError
from pipenet.core.hydraulics.headloss import build_balance_terms
from pipenet.core.models.boundary import BoundaryCondition
from pipenet.core.models.fittings import MinorLossSet
from pipenet.core.models.fluid import FluidProperties
from pipenet.core.models.network import SerialNetwork
from pipenet.core.models.segment import SegmentGeometry
from pipenet.core.solver.friction_apply import area_ratios, compute_friction_at_v1

logger = logging.getLogger(__name__)


# ============================================================
# Results
# ============================================================

SolveStatus = Literal["converged", "exhausted"]
OutcomeStatus = Literal["converged", "not_converged", "failed"]


@dataclass(frozen=True)
class IterationRecord:
    iteration: int
    v1_old_m_s: float
    v1_new_m_s: float
    Re: Tuple[float, float, float]
    f: Tuple[float, float, float]
    denom: float
    err_pct: float


@dataclass(frozen=True)
class SolutionResult:
    v1_m_s: float
    v2_m_s: float
    v3_m_s: float

    f: Tuple[float, float, float]       # last iteration, evaluated at the pre-update V1
    Re: Tuple[float, float, float]

    q_m3s: float
    iterations: int
    err_pct: float
    converged: bool

    history: Tuple[IterationRecord, ...] = ()
    meta: Dict[str, object] = field(default_factory=dict)

    @property
    def status(self) -> SolveStatus:
        return "converged" if self.converged else "exhausted"

    @property
    def velocities(self) -> Tuple[float, float, float]:
        return (self.v1_m_s, self.v2_m_s, self.v3_m_s)

    @property
    def friction_factors(self) -> Tuple[float, float, float]:
        return self.f

    @property
    def q_l_min(self) -> float:
        return self.q_m3s * 1e3 * 60


@dataclass(frozen=True)
class SolveOutcome:
    """
    Tagged result of try_solve:
      - "converged": result set
      - "not_converged": result set (best effort), warning set
      - "failed": error set, no result
    """
    status: OutcomeStatus
    result: Optional[SolutionResult] = None
    error: Optional[ValueError] = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @property
    def warning(self) -> Optional[str]:
        if self.status != "not_converged" or self.result is None:
            return None
        return (
            f"Did not converge within max_iters={self.result.meta.get('max_iters', self.result.iterations)}. "
            f"Final err={self.result.err_pct:.4f}%"
        )


# ============================================================
# Solver
# ============================================================

def solve(network: SerialNetwork, settings: Optional[SolverSettings] = None) -> SolutionResult:
    """
    Fixed-point iteration on the inlet velocity.

    Raises:
      - NetworkValidationError for malformed geometry/fluid
      - InfeasibleConfigurationError if the drive term or the balance
        denominator is <= 0
      - InvalidInputError if a Reynolds number is <= 0 (e.g. zero guess)

    Non-convergence is not an error: the last estimate is returned with
    converged=False.
    """
    settings = settings or SolverSettings()
    settings.validate()
    raise_on_errors(validate_network(network))

    seg1, seg2, seg3 = network.segments
    L = (seg1.length, seg2.length, seg3.length)
    D = (seg1.diameter, seg2.diameter, seg3.diameter)

    ratios = area_ratios(network)
    ar12, ar13 = ratios[1], ratios[2]
    ar12_sq = ar12 ** 2
    ar13_sq = ar13 ** 2

    K2 = network.minor_losses.k_for(2)
    K3 = network.minor_losses.k_for(3)

    drive_term = network.drive_term
    if drive_term <= 0:
        raise InfeasibleConfigurationError(
            f"Non-positive driving term ({drive_term:.6g} m2/s2): check pressures/elevations; "
            "flow cannot proceed from inlet to outlet.",
            value=drive_term,
        )

    v1 = settings.initial_guess_m_s
    err_pct = math.inf
    it = 0
    history = []
    f: Tuple[float, float, float] = (math.nan, math.nan, math.nan)
    Re: Tuple[float, float, float] = (math.nan, math.nan, math.nan)
    denom = math.nan

    while err_pct > settings.tol_pct and it < settings.max_iters:
        fr = compute_friction_at_v1(network, v1_m_s=v1, ratios=ratios)
        f = (fr.f_by_id[seg1.uid], fr.f_by_id[seg2.uid], fr.f_by_id[seg3.uid])
        Re = (fr.Re_by_id[seg1.uid], fr.Re_by_id[seg2.uid], fr.Re_by_id[seg3.uid])

        terms = build_balance_terms(f=f, L_m=L, D_m=D, ar12_sq=ar12_sq, ar13_sq=ar13_sq, K2=K2, K3=K3)
        denom = terms.denominator
        if denom <= 0:
            raise InfeasibleConfigurationError(
                f"Non-positive denominator ({denom:.6g}) at iteration {it + 1}. "
                "Check K values, geometry, or formulation.",
                value=denom,
            )

        v1_new = math.sqrt(drive_term / denom)
        err_pct = abs(v1 - v1_new) / v1_new * 100

        history.append(IterationRecord(
            iteration=it + 1,
            v1_old_m_s=v1,
            v1_new_m_s=v1_new,
            Re=Re,
            f=f,
            denom=denom,
            err_pct=err_pct,
        ))
        logger.debug("iter=%d V1=%.6g -> %.6g m/s err=%.6g%%", it + 1, v1, v1_new, err_pct)

        v1 = v1_new
        it += 1

    converged = err_pct <= settings.tol_pct
    if converged:
        logger.info("Converged in %d iterations: V1=%.4f m/s, err=%.6f%%", it, v1, err_pct)
    else:
        logger.warning("Did not converge within max_iters=%d. Final err=%.4f%%", settings.max_iters, err_pct)

    return SolutionResult(
        v1_m_s=v1,
        v2_m_s=ar12 * v1,
        v3_m_s=ar13 * v1,
        f=f,
        Re=Re,
        q_m3s=v1 * seg1.area,
        iterations=it,
        err_pct=err_pct,
        converged=converged,
        history=tuple(history),
        meta={
            "method": "fixed-point iteration on V1, Churchill friction factor",
            "drive_term_m2_s2": drive_term,
            "denom": denom,
            "area_ratios": ratios,
            "K_minor": (K2, K3),
            "initial_guess_m_s": settings.initial_guess_m_s,
            "tol_pct": settings.tol_pct,
            "max_iters": settings.max_iters,
        },
    )


def try_solve(network: SerialNetwork, settings: Optional[SolverSettings] = None) -> SolveOutcome:
    """Same as solve, but modelling errors come back as a 'failed' outcome instead of raising."""
    try:
        result = solve(network, settings)
    except (PipenetError, NetworkValidationError) as e:
        return SolveOutcome(status="failed", error=e)

    return SolveOutcome(status="converged" if result.converged else "not_converged", result=result)


def solve_velocity(
    *,
    fluid: FluidProperties,
    segments: Sequence[SegmentGeometry],
    minor_losses: Union[MinorLossSet, Mapping[int, float], None],
    boundary: BoundaryCondition,
    initial_guess: float = 10.0,
    tol_pct: float = 1.0,
    max_iters: int = 200,
) -> SolutionResult:
    """Flat-argument form of solve()."""
    if minor_losses is None:
        minor_losses = MinorLossSet()
    elif not isinstance(minor_losses, MinorLossSet):
        minor_losses = MinorLossSet.from_k(minor_losses)

    network = SerialNetwork(
        fluid=fluid,
        segments=tuple(segments),
        boundary=boundary,
        minor_losses=minor_losses,
    )
    settings = SolverSettings(initial_guess_m_s=initial_guess, tol_pct=tol_pct, max_iters=max_iters)
    return solve(network, settings)
