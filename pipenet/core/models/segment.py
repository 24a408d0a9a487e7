from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class SegmentGeometry:
    """
    Straight pipe segment of the serial network.

    Notes:
    - diameter is the internal diameter
    - roughness is the absolute roughness eps (not eps/D)
    - diameter and length must be > 0 (checked by build.validate)
    """
    uid: str
    name: str

    diameter: float     # [m]
    length: float       # [m]
    roughness: float    # eps [m]

    material: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def area(self) -> float:
        return math.pi * (self.diameter ** 2) / 4.0

    @property
    def relative_roughness(self) -> float:
        return (self.roughness / self.diameter) if self.diameter > 0 else float("nan")
