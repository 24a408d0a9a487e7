from __future__ import annotations

import math
from dataclasses import replace

import pytest

from pipenet.core.build.validate import NetworkValidationError, raise_on_errors, validate_network
from pipenet.core.models.boundary import BoundaryCondition
from pipenet.core.models.fittings import FITTING_K, MinorLossComponent, MinorLossSet, get_fitting_k
from pipenet.core.models.fluid import WATER_20C, get_fluid
from pipenet.core.models.segment import SegmentGeometry


def test_segment_area_and_relative_roughness():
    s = SegmentGeometry(uid="s", name="s", diameter=0.0254, length=10.0, roughness=4.5e-5)
    assert s.area == pytest.approx(math.pi * 0.0254 ** 2 / 4)
    assert s.relative_roughness == pytest.approx(4.5e-5 / 0.0254)


def test_drive_term_reference_values():
    b = BoundaryCondition(p_in=550000.0, p_out=101325.0, z_in=0.0, z_out=7.0)
    expected = (550000.0 - 101325.0) / 998.2 + 9.81 * (0.0 - 7.0)
    assert b.drive_term(WATER_20C) == expected
    assert b.drive_term(WATER_20C) == pytest.approx(380.81, rel=1e-4)


def test_water_preset():
    assert get_fluid("WATER_20C") is WATER_20C
    assert WATER_20C.mu == pytest.approx(998.2 * 1.004e-6)
    with pytest.raises(ValueError):
        get_fluid("glycol")


def test_residential_fitting_totals(network):
    ml = network.minor_losses
    assert ml.k_for(1) == 0.0
    assert ml.k_for(2) == pytest.approx(2 * 1.5 + 2 * 0.9 + 10.0 + 0.41)
    assert ml.k_for(3) == pytest.approx(1.5 + 0.22)
    assert set(ml.k_by_segment) == {2, 3}


def test_minor_loss_builders():
    ml = MinorLossSet.from_components({2: [MinorLossComponent("elbow", 0.45, count=4), 0.2]})
    assert ml.k_for(2) == pytest.approx(2.0)
    assert MinorLossSet.from_k({3: 1.72}).k_by_segment == {3: 1.72}
    assert MinorLossComponent.from_catalogue("tee_inline", count=2).total_K == pytest.approx(1.8)
    assert get_fitting_k("globe_valve_open") == FITTING_K["globe_valve_open"] == 10.0
    with pytest.raises(ValueError):
        get_fitting_k("gate_valve_half_open")


def test_reference_network_is_valid(network):
    issues = validate_network(network)
    assert [i for i in issues if i.level == "error"] == []
    raise_on_errors(issues)


def test_validation_collects_errors(network):
    segs = (
        replace(network.segments[0], diameter=-0.01),
        replace(network.segments[1], length=0.0),
        replace(network.segments[2], roughness=-1e-6),
    )
    bad = replace(
        network,
        fluid=replace(WATER_20C, nu=0.0),
        segments=segs,
        minor_losses=MinorLossSet.from_k({2: -1.0, 5: 1.0}),
    )
    issues = validate_network(bad)
    errors = [i.message for i in issues if i.level == "error"]
    assert any("viscosity" in m for m in errors)
    assert any("diameter" in m for m in errors)
    assert any("length" in m for m in errors)
    assert any("roughness" in m for m in errors)
    assert any("K < 0" in m for m in errors)
    assert any("unknown segment index 5" in m for m in errors)

    with pytest.raises(NetworkValidationError) as exc:
        raise_on_errors(issues)
    assert exc.value.issues
    assert "Network validation failed" in str(exc.value)


def test_wrong_segment_count(network):
    issues = validate_network(replace(network, segments=network.segments[:2]))
    assert any("exactly 3 segments" in i.message for i in issues if i.level == "error")


def test_warnings_do_not_raise(network):
    noisy = replace(
        network,
        minor_losses=MinorLossSet.from_k({1: 0.5, 2: 15.21, 3: 1.72}),
        segments=(replace(network.segments[0], roughness=0.002),) + network.segments[1:],
    )
    issues = validate_network(noisy)
    warnings = [i for i in issues if i.level == "warning"]
    assert any("ignored by the energy balance" in w.message for w in warnings)
    assert any("relative roughness" in w.message for w in warnings)
    raise_on_errors(issues)


def test_non_numeric_fields_are_reported(network):
    segs = (replace(network.segments[0], length="10"),) + network.segments[1:]
    bad = replace(network, segments=segs, boundary=replace(network.boundary, p_in=None))
    messages = [i.message for i in validate_network(bad) if i.level == "error"]
    assert any("length is not a finite number" in m for m in messages)
    assert any("p_in is not a finite number" in m for m in messages)
    assert not any("<= 0" in m for m in messages)


def test_containers_with_dict_fields_are_unhashable(network):
    with pytest.raises(TypeError):
        hash(network)
    with pytest.raises(TypeError):
        hash(network.minor_losses)
    assert network == replace(network)
