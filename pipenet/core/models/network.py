from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .boundary import BoundaryCondition
from .fittings import MinorLossSet
from .fluid import FluidProperties
from .segment import SegmentGeometry

N_SEGMENTS = 3


@dataclass(frozen=True)
class SerialNetwork:
    """
    Three pipe segments in series, inlet (segment 1) to outlet (segment 3).
    No branching or storage: A*V is the same on every segment.
    """
    fluid: FluidProperties
    segments: Tuple[SegmentGeometry, ...]
    boundary: BoundaryCondition
    minor_losses: MinorLossSet = field(default_factory=MinorLossSet)

    # holds dict-valued members, so instances compare by value but are not hashable
    __hash__ = None  # type: ignore[assignment]

    @property
    def areas(self) -> Tuple[float, ...]:
        return tuple(s.area for s in self.segments)

    @property
    def drive_term(self) -> float:
        return self.boundary.drive_term(self.fluid)
