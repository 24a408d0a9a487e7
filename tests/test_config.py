from __future__ import annotations

import pytest

from pipenet.core.build.config import ModelConfig, SolverSettings
from pipenet.core.build.validate import NetworkValidationError
from pipenet.core.solver.velocity_solver import solve


FLAT_CFG = {
    "rho_kg_m3": 998.2,
    "nu_m2_s": 1.004e-6,
    "g_m_s2": 9.81,
    "p_in_Pa": 550000,
    "p_out_Pa": 101325,
    "z_in_m": 0.0,
    "z_out_m": 7.0,
    "D1_m": 2.54e-2, "L1_m": 10.0, "eps1_m": 0.045e-3,
    "D2_m": 1.27e-2, "L2_m": 8.0, "eps2_m": 0.0015e-3,
    "D3_m": 0.95e-2, "L3_m": 1.0, "eps3_m": 0.0015e-3,
    "K_minor_seg2": 15.21,
    "K_minor_seg3": 1.72,
    "V1_init_mps": 10.0,
    "tol_pct": 1.0,
    "max_iters": 200,
}


def test_flat_config_builds_reference_network(network):
    cfg = ModelConfig.from_dict(FLAT_CFG)

    assert cfg.solver == SolverSettings(initial_guess_m_s=10.0, tol_pct=1.0, max_iters=200)
    assert [s.diameter for s in cfg.network.segments] == [s.diameter for s in network.segments]
    assert cfg.network.minor_losses.k_for(2) == pytest.approx(15.21)
    assert cfg.network.minor_losses.k_for(3) == pytest.approx(1.72)
    assert cfg.network.drive_term == pytest.approx(network.drive_term)

    a = solve(cfg.network, cfg.solver)
    b = solve(network)
    assert a.v1_m_s == pytest.approx(b.v1_m_s, rel=1e-9)


def test_nested_config_and_aliases():
    cfg = ModelConfig.from_dict({
        "fluid": "water_20C",
        "segments": [
            {"D": 0.0254, "L": 10, "eps": 4.5e-5, "name": "main"},
            {"diameter": 0.0127, "length": 8, "roughness": 1.5e-6},
            {"D_m": 0.0095, "L_m": 1, "eps_m": 1.5e-6},
        ],
        "minor_losses": {"seg2": [1.5, 1.5, 0.9, 0.9, 10.0, 0.41], 3: 1.72},
        "p_in": "550000",
        "z_out": 7,
        "tolerance_pct": 0.5,
        "max_iter": 50,
    })
    net = cfg.network
    assert net.fluid.rho == 998.2
    assert net.segments[0].name == "main"
    assert net.segments[2].uid == "seg3"
    assert net.boundary.p_out == 101325.0
    assert net.minor_losses.k_for(2) == pytest.approx(15.21)
    assert cfg.solver.tol_pct == 0.5
    assert cfg.solver.max_iters == 50


def test_solver_overrides():
    cfg = ModelConfig.from_dict(FLAT_CFG, solver_overrides={"max_iters": 1})
    assert cfg.solver.max_iters == 1


@pytest.mark.parametrize("bad", [
    {"max_iters": 0},
    {"tol_pct": -1.0},
    {"tol_pct": float("inf")},
    {"initial_guess_m_s": float("nan")},
    {"max_iters": "many"},
    {"max_iters": "inf"},
    {"max_iters": 2.7},
])
def test_invalid_solver_settings(bad):
    with pytest.raises(ValueError):
        SolverSettings.from_dict(bad)


def test_missing_fluid_properties():
    cfg = dict(FLAT_CFG)
    del cfg["nu_m2_s"]
    with pytest.raises(ValueError, match="nu"):
        ModelConfig.from_dict(cfg)


def test_missing_inlet_pressure():
    cfg = dict(FLAT_CFG)
    del cfg["p_in_Pa"]
    with pytest.raises(ValueError, match="p_in"):
        ModelConfig.from_dict(cfg)


def test_invalid_geometry_raises_validation_error():
    cfg = dict(FLAT_CFG, L2_m=0.0)
    with pytest.raises(NetworkValidationError) as exc:
        ModelConfig.from_dict(cfg)
    assert any("length" in it.message for it in exc.value.issues)


def test_unknown_fluid_preset():
    with pytest.raises(ValueError, match="Unknown fluid"):
        ModelConfig.from_dict(dict(FLAT_CFG, fluid="mercury"))
