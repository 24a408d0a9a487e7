from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class FluidProperties:
    rho: float      # kg/m3
    nu: float       # m2/s  kinematic viscosity
    g: float = 9.81             # m/s2
    name: Optional[str] = None
    T_C: Optional[float] = None     # degrees Celsius

    @property
    def mu(self) -> float:
        """Dynamic viscosity [Pa*s]."""
        return self.rho * self.nu


WATER_20C = FluidProperties(rho=998.2, nu=1.004e-6, g=9.81, name="water", T_C=20.0)

FLUIDS: Dict[str, FluidProperties] = {
    "water_20c": WATER_20C,
}


def get_fluid(key: str) -> FluidProperties:
    k = str(key).strip().lower()
    if k not in FLUIDS:
        raise ValueError(f"Unknown fluid: {key!r}. Available: {sorted(FLUIDS)}")
    return FLUIDS[k]
