"""
Minor-loss (fitting) model.

K values are referenced to the local velocity of the segment that holds the
fitting. A segment's aggregate K is the plain sum of count*K over its fittings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Tuple, Union


# Residential fittings used in the shower supply problem
FITTING_K: Dict[str, float] = {
    "elbow_90_short": 1.5,
    "tee_inline": 0.9,
    "globe_valve_open": 10.0,
    "contraction_1_2": 0.41,
    "contraction_2_3": 0.22,
    "shower_discharge": 1.5,
}


def get_fitting_k(fitting_id: str) -> float:
    if fitting_id not in FITTING_K:
        raise ValueError(f"Unknown fitting: {fitting_id!r}")
    return FITTING_K[fitting_id]


@dataclass(frozen=True, slots=True)
class MinorLossComponent:
    name: str
    K: float
    count: int = 1

    @staticmethod
    def from_catalogue(fitting_id: str, count: int = 1) -> "MinorLossComponent":
        return MinorLossComponent(name=fitting_id, K=get_fitting_k(fitting_id), count=count)

    @property
    def total_K(self) -> float:
        return self.count * self.K


ComponentSpec = Union[MinorLossComponent, float, int]


@dataclass(frozen=True)
class MinorLossSet:
    """
    Segment index (1-based) -> fittings on that segment.
    Segments absent from the mapping carry no minor losses.
    """
    components: Dict[int, Tuple[MinorLossComponent, ...]] = field(default_factory=dict)

    __hash__ = None  # type: ignore[assignment]  # dict field

    @staticmethod
    def from_k(k_by_segment: Mapping[int, float]) -> "MinorLossSet":
        """Build from already aggregated K values."""
        comps = {
            int(idx): (MinorLossComponent(name=f"K_seg{int(idx)}", K=float(k)),)
            for idx, k in k_by_segment.items()
        }
        return MinorLossSet(components=comps)

    @staticmethod
    def from_components(items: Mapping[int, Iterable[ComponentSpec]]) -> "MinorLossSet":
        comps: Dict[int, Tuple[MinorLossComponent, ...]] = {}
        for idx, seq in items.items():
            out = []
            for c in seq:
                if isinstance(c, MinorLossComponent):
                    out.append(c)
                else:
                    out.append(MinorLossComponent(name=f"K_seg{int(idx)}", K=float(c)))
            comps[int(idx)] = tuple(out)
        return MinorLossSet(components=comps)

    def k_for(self, segment_index: int) -> float:
        return sum(c.total_K for c in self.components.get(segment_index, ()))

    @property
    def k_by_segment(self) -> Dict[int, float]:
        return {idx: self.k_for(idx) for idx in sorted(self.components)}
