from __future__ import annotations

from dataclasses import dataclass

from pipenet.core.models.fluid import FluidProperties


@dataclass(frozen=True, slots=True)
class BoundaryCondition:
    p_in: float     # Pa (absolute)
    p_out: float    # Pa (absolute)
    z_in: float     # m
    z_out: float    # m

    def drive_term(self, fluid: FluidProperties) -> float:
        """
        Energy per unit mass available to drive the flow [m2/s2]:
          (p_in - p_out)/rho + g*(z_in - z_out)
        Velocity-head terms live in the solver denominator, not here.
        """
        return (self.p_in - self.p_out) / fluid.rho + fluid.g * (self.z_in - self.z_out)
