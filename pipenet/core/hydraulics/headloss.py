# pipenet/core/hydraulics/headloss.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np


# Segments whose fittings enter the energy balance (segment 1 has none in this topology)
MINOR_LOSS_SEGMENTS: Tuple[int, ...] = (2, 3)


def velocity_head_coeff(ar13_sq: float) -> float:
    """Outlet/inlet kinetic-energy term in V1^2 form: AR13^2/2 - 0.5."""
    return (ar13_sq / 2) - 0.5


def major_coeff(*, f: float, L_m: float, D_m: float, ar_sq: float = 1.0) -> float:
    """Darcy-Weisbach f*(L/D)*(1/2), mapped to V1^2 through (A1/Ai)^2."""
    return (f * (L_m / D_m)) * 0.5 * ar_sq


def minor_coeff(*, K: float, ar_sq: float) -> float:
    """K*(1/2), mapped to V1^2 through (A1/Ai)^2."""
    return K * 0.5 * ar_sq


def major_coeff_vec(
    *,
    f: np.ndarray,
    L_m: np.ndarray,
    D_m: np.ndarray,
    ar_sq: np.ndarray,
) -> np.ndarray:
    """Vectorized: arrays (n_seg,) -> major coefficient per segment (n_seg,)."""
    f = np.asarray(f, dtype=float)
    L_m = np.asarray(L_m, dtype=float)
    D_m = np.asarray(D_m, dtype=float)
    ar_sq = np.asarray(ar_sq, dtype=float)

    if np.any(D_m <= 0) or np.any(L_m < 0):
        raise ValueError("major_coeff_vec: invalid geometry (D<=0 or L<0).")
    return (f * (L_m / D_m)) * 0.5 * ar_sq


@dataclass(frozen=True)
class BalanceTerms:
    """Coefficients multiplying V1^2 in the rearranged energy balance."""
    vel_head: float
    major: Tuple[float, float, float]
    minor: Tuple[float, float]          # segments 2 and 3

    @property
    def denominator(self) -> float:
        # left-to-right sum, fixed order
        return (
            self.vel_head
            + self.major[0] + self.major[1] + self.major[2]
            + self.minor[0] + self.minor[1]
        )


def build_balance_terms(
    *,
    f: Sequence[float],
    L_m: Sequence[float],
    D_m: Sequence[float],
    ar12_sq: float,
    ar13_sq: float,
    K2: float,
    K3: float,
) -> BalanceTerms:
    return BalanceTerms(
        vel_head=velocity_head_coeff(ar13_sq),
        major=(
            major_coeff(f=f[0], L_m=L_m[0], D_m=D_m[0]),
            major_coeff(f=f[1], L_m=L_m[1], D_m=D_m[1], ar_sq=ar12_sq),
            major_coeff(f=f[2], L_m=L_m[2], D_m=D_m[2], ar_sq=ar13_sq),
        ),
        minor=(
            minor_coeff(K=K2, ar_sq=ar12_sq),
            minor_coeff(K=K3, ar_sq=ar13_sq),
        ),
    )


@dataclass(frozen=True)
class SegmentHeadLoss:
    uid: str
    V_m_s: float
    h_major_m: float
    h_minor_m: float

    @property
    def h_total_m(self) -> float:
        return self.h_major_m + self.h_minor_m


@dataclass(frozen=True)
class HeadlossModel:
    g_m_s2: float = 9.81

    def h_major(self, *, f: float, L_m: float, D_m: float, V_m_s: float) -> float:
        """h = f (L/D) V^2 / 2g  [m]"""
        if D_m <= 0 or L_m < 0:
            raise ValueError(f"Invalid geometry: D={D_m}, L={L_m}")
        return f * (L_m / D_m) * V_m_s ** 2 / (2.0 * self.g_m_s2)

    def h_minor(self, *, K: float, V_m_s: float) -> float:
        """h = K V^2 / 2g  [m]"""
        return K * V_m_s ** 2 / (2.0 * self.g_m_s2)

    def segment_losses(
        self,
        *,
        uids: Sequence[str],
        V_m_s: Sequence[float],
        f: Sequence[float],
        L_m: Sequence[float],
        D_m: Sequence[float],
        K: Sequence[float],
    ) -> List[SegmentHeadLoss]:
        out: List[SegmentHeadLoss] = []
        for i, uid in enumerate(uids):
            out.append(SegmentHeadLoss(
                uid=uid,
                V_m_s=V_m_s[i],
                h_major_m=self.h_major(f=f[i], L_m=L_m[i], D_m=D_m[i], V_m_s=V_m_s[i]),
                h_minor_m=self.h_minor(K=K[i], V_m_s=V_m_s[i]),
            ))
        return out
