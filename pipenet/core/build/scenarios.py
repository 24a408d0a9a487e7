"""
Ready-made networks.

`residential_shower_network` is the three-segment supply from the street
main (commercial steel) up to a second-floor shower (drawn copper).
"""
from __future__ import annotations

from pipenet.core.models.boundary import BoundaryCondition
from pipenet.core.models.fittings import MinorLossComponent, MinorLossSet
from pipenet.core.models.fluid import WATER_20C
from pipenet.core.models.network import SerialNetwork
from pipenet.core.models.segment import SegmentGeometry


def residential_fittings() -> MinorLossSet:
    return MinorLossSet.from_components({
        2: [
            MinorLossComponent.from_catalogue("elbow_90_short", count=2),
            MinorLossComponent.from_catalogue("tee_inline", count=2),
            MinorLossComponent.from_catalogue("globe_valve_open"),
            MinorLossComponent.from_catalogue("contraction_1_2"),
        ],
        3: [
            MinorLossComponent.from_catalogue("shower_discharge"),
            MinorLossComponent.from_catalogue("contraction_2_3"),
        ],
    })


def residential_shower_network() -> SerialNetwork:
    segments = (
        SegmentGeometry(uid="seg1", name="Main (commercial steel)",
                        diameter=2.54e-2, length=10.0, roughness=0.045e-3, material="commercial_steel"),
        SegmentGeometry(uid="seg2", name="Riser (drawn copper)",
                        diameter=1.27e-2, length=8.0, roughness=0.0015e-3, material="drawn_copper"),
        SegmentGeometry(uid="seg3", name="Shower arm (drawn copper)",
                        diameter=0.95e-2, length=1.0, roughness=0.0015e-3, material="drawn_copper"),
    )
    # z_out = 6 m floor height + 1 m rise to the shower head
    boundary = BoundaryCondition(p_in=550000.0, p_out=101325.0, z_in=0.0, z_out=7.0)

    return SerialNetwork(
        fluid=WATER_20C,
        segments=segments,
        boundary=boundary,
        minor_losses=residential_fittings(),
    )
