# pipenet/core/build/config.py
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Dict, List, Mapping, Optional

from pipenet.core.build.validate import raise_on_errors, validate_network
from pipenet.core.models.boundary import BoundaryCondition
from pipenet.core.models.fittings import MinorLossSet
from pipenet.core.models.fluid import FluidProperties, get_fluid
from pipenet.core.models.network import N_SEGMENTS, SerialNetwork
from pipenet.core.models.segment import SegmentGeometry


def _get(cfg: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First key present in cfg wins (alias lookup)."""
    for k in keys:
        if k in cfg and cfg[k] is not None:
            return cfg[k]
    return default


def _as_float(x: Any, field: str) -> float:
    try:
        if isinstance(x, str) and x.strip() == "":
            raise ValueError("empty")
        return float(x)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid numeric value for '{field}': {x!r}") from e


def _as_int(x: Any, field: str) -> int:
    v = _as_float(x, field)
    if not v.is_integer():
        raise ValueError(f"Expected a whole number for '{field}': {x!r}")
    return int(v)


# ============================================================
# SolverSettings (iteration control)
# ============================================================

@dataclass(frozen=True)
class SolverSettings:
    """
    Fixed-point iteration controls.
    """
    initial_guess_m_s: float = 10.0
    tol_pct: float = 1.0
    max_iters: int = 200

    @staticmethod
    def from_dict(cfg: Mapping[str, Any]) -> "SolverSettings":
        v0 = _get(cfg, "initial_guess_m_s", "V1_init_mps", "initial_guess", "v0", default=10.0)
        tol = _get(cfg, "tol_pct", "tolerance_pct", "tol", default=1.0)
        max_it = _get(cfg, "max_iters", "max_iter", "maxiter", default=200)

        out = SolverSettings(
            initial_guess_m_s=_as_float(v0, "initial_guess_m_s"),
            tol_pct=_as_float(tol, "tol_pct"),
            max_iters=_as_int(max_it, "max_iters"),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if not math.isfinite(self.initial_guess_m_s):
            raise ValueError(f"SolverSettings.initial_guess_m_s must be finite (got {self.initial_guess_m_s})")
        if not (math.isfinite(self.tol_pct) and self.tol_pct >= 0):
            raise ValueError(f"SolverSettings.tol_pct must be finite and >= 0 (got {self.tol_pct})")
        if self.max_iters < 1:
            raise ValueError(f"SolverSettings.max_iters must be >= 1 (got {self.max_iters})")


# ============================================================
# Network pieces
# ============================================================

def fluid_from_dict(cfg: Mapping[str, Any]) -> FluidProperties:
    preset = _get(cfg, "fluid", "fluid_type")
    if preset is not None and not isinstance(preset, Mapping):
        base = get_fluid(str(preset))
    else:
        base = None
        if isinstance(preset, Mapping):
            cfg = {**cfg, **preset}

    rho = _get(cfg, "rho", "rho_kg_m3", "density", default=base.rho if base else None)
    nu = _get(cfg, "nu", "nu_m2_s", "viscosity", "kinematic_viscosity", default=base.nu if base else None)
    g = _get(cfg, "g", "g_m_s2", "gravity", default=base.g if base else 9.81)

    if rho is None or nu is None:
        raise ValueError("Fluid requires 'rho' and 'nu' (or a 'fluid' preset name).")

    return FluidProperties(
        rho=_as_float(rho, "rho"),
        nu=_as_float(nu, "nu"),
        g=_as_float(g, "g"),
        name=base.name if base else None,
        T_C=base.T_C if base else None,
    )


def _segment_from_dict(d: Mapping[str, Any], index: int) -> SegmentGeometry:
    D = _get(d, "diameter", "D", "D_m", "diameter_m")
    L = _get(d, "length", "L", "L_m", "length_m")
    eps = _get(d, "roughness", "eps", "eps_m", "roughness_m", default=0.0)
    if D is None or L is None:
        raise ValueError(f"Segment {index} requires 'diameter' and 'length'.")
    return SegmentGeometry(
        uid=str(_get(d, "uid", "id", default=f"seg{index}")),
        name=str(_get(d, "name", default=f"Segment {index}")),
        diameter=_as_float(D, f"segments[{index}].diameter"),
        length=_as_float(L, f"segments[{index}].length"),
        roughness=_as_float(eps, f"segments[{index}].roughness"),
        material=_get(d, "material"),
    )


def segments_from_dict(cfg: Mapping[str, Any]) -> List[SegmentGeometry]:
    """
    Either a 'segments' list of dicts, or flat keys D1_m/L1_m/eps1_m ... D3_m/L3_m/eps3_m.
    """
    seg_list = _get(cfg, "segments")
    if seg_list is not None:
        return [_segment_from_dict(d, i) for i, d in enumerate(seg_list, start=1)]

    out: List[SegmentGeometry] = []
    for i in range(1, N_SEGMENTS + 1):
        flat = {
            "diameter": _get(cfg, f"D{i}_m", f"D{i}"),
            "length": _get(cfg, f"L{i}_m", f"L{i}"),
            "roughness": _get(cfg, f"eps{i}_m", f"eps{i}", default=0.0),
        }
        out.append(_segment_from_dict(flat, i))
    return out


def minor_losses_from_dict(cfg: Mapping[str, Any]) -> MinorLossSet:
    """
    'minor_losses': {2: 13.71, 3: 1.72} or {2: [1.5, 1.5, ...]}, or flat K_minor_seg2 / K_minor_seg3.
    """
    ml = _get(cfg, "minor_losses", "K_minor")
    if isinstance(ml, Mapping):
        items: Dict[int, List[Any]] = {}
        for k, v in ml.items():
            idx = int(str(k).replace("seg", ""))
            items[idx] = list(v) if isinstance(v, (list, tuple)) else [v]
        return MinorLossSet.from_components(items)

    k_by_seg: Dict[int, float] = {}
    for i in range(1, N_SEGMENTS + 1):
        k = _get(cfg, f"K_minor_seg{i}", f"K{i}")
        if k is not None:
            k_by_seg[i] = _as_float(k, f"K_minor_seg{i}")
    return MinorLossSet.from_k(k_by_seg)


def boundary_from_dict(cfg: Mapping[str, Any]) -> BoundaryCondition:
    p_in = _get(cfg, "p_in", "p_in_Pa")
    p_out = _get(cfg, "p_out", "p_out_Pa", default=101325.0)
    z_in = _get(cfg, "z_in", "z_in_m", default=0.0)
    z_out = _get(cfg, "z_out", "z_out_m", default=0.0)
    if p_in is None:
        raise ValueError("Boundary requires 'p_in' (Pa, absolute).")
    return BoundaryCondition(
        p_in=_as_float(p_in, "p_in"),
        p_out=_as_float(p_out, "p_out"),
        z_in=_as_float(z_in, "z_in"),
        z_out=_as_float(z_out, "z_out"),
    )


# ============================================================
# ModelConfig (aggregate)
# ============================================================

@dataclass(frozen=True)
class ModelConfig:
    network: SerialNetwork
    solver: SolverSettings
    version: int = 1

    @staticmethod
    def from_dict(cfg: Mapping[str, Any], *, solver_overrides: Optional[Mapping[str, Any]] = None) -> "ModelConfig":
        network = SerialNetwork(
            fluid=fluid_from_dict(cfg),
            segments=tuple(segments_from_dict(cfg)),
            boundary=boundary_from_dict(cfg),
            minor_losses=minor_losses_from_dict(cfg),
        )

        solver_cfg = dict(cfg)
        if solver_overrides:
            solver_cfg.update(solver_overrides)

        out = ModelConfig(
            network=network,
            solver=SolverSettings.from_dict(solver_cfg),
            version=_as_int(_get(cfg, "config_version", "version", default=1), "version"),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if self.version <= 0:
            raise ValueError(f"ModelConfig.version must be > 0 (got {self.version})")
        self.solver.validate()
        raise_on_errors(validate_network(self.network))
