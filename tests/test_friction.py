from __future__ import annotations

import math

import numpy as np
import pytest

from pipenet.core.errors import InvalidInputError
from pipenet.core.hydraulics.friction import (
    churchill_f,
    churchill_f_vec,
    friction_factor,
    reynolds,
    rr_eps_over_D,
    velocity_from_q,
)


@pytest.mark.parametrize("Re", [0.0, -1.0, -2.5e4, float("nan")])
def test_non_positive_reynolds_is_rejected(Re):
    with pytest.raises(InvalidInputError):
        churchill_f(Re, 4.5e-5, 0.0254)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        friction_factor(0.0, 1.5e-6, 0.0127)


def test_laminar_limit_matches_64_over_re():
    for Re in (10.0, 100.0, 500.0):
        assert churchill_f(Re, 4.5e-5, 0.0254) == pytest.approx(64.0 / Re, rel=1e-6)


def test_smooth_turbulent_close_to_colebrook():
    # Colebrook, smooth pipe, Re = 1e5 -> f ~= 0.0180
    assert churchill_f(1e5, 0.0, 0.05) == pytest.approx(0.0180, rel=0.02)


def test_exact_correlation_form():
    Re, eps, D = 26156.0, 4.5e-5, 0.0254
    theta1 = (-2.457 * math.log((7 / Re) ** 0.9 + 0.27 * (eps / D))) ** 16
    theta2 = (37530 / Re) ** 16
    expected = 8 * ((8 / Re) ** 12 + 1 / ((theta1 + theta2) ** 1.5)) ** (1 / 12)
    assert churchill_f(Re, eps, D) == expected


@pytest.mark.parametrize("eps, D", [(4.5e-5, 0.0254), (1.5e-6, 0.0127), (1.5e-6, 0.0095), (0.0, 0.05)])
def test_monotonic_non_increasing_over_turbulent_range(eps, D):
    Re = np.logspace(np.log10(4000.0), 8.0, 400)
    f = [churchill_f(float(r), eps, D) for r in Re]
    assert all(b <= a for a, b in zip(f, f[1:]))
    assert all(math.isfinite(x) and x > 0 for x in f)


def test_vectorized_matches_scalar():
    Re = np.array([50.0, 2300.0, 4000.0, 1e5, 1e7])
    f_vec = churchill_f_vec(Re, 1.5e-6, 0.0127)
    f_scalar = [churchill_f(float(r), 1.5e-6, 0.0127) for r in Re]
    assert f_vec == pytest.approx(f_scalar, rel=1e-12)


def test_vectorized_rejects_non_positive_entries():
    with pytest.raises(InvalidInputError):
        churchill_f_vec(np.array([1e4, 0.0]), 1e-5, 0.02)


def test_helpers():
    assert reynolds(V_m_s=1.0, D_m=0.0254, nu_m2s=1.004e-6) == pytest.approx(25298.8, rel=1e-5)
    assert math.isnan(reynolds(V_m_s=1.0, D_m=0.0, nu_m2s=1e-6))
    assert velocity_from_q(q_m3s=2.0, area_m2=4.0) == 0.5
    assert math.isnan(velocity_from_q(q_m3s=1.0, area_m2=0.0))
    assert rr_eps_over_D(eps_m=1e-4, D_m=0.1) == pytest.approx(1e-3)
