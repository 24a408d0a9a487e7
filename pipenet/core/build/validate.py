from __future__ import annotations

from dataclasses import dataclass
import math
from typing import List, Optional

from pipenet.core.hydraulics.headloss import MINOR_LOSS_SEGMENTS
from pipenet.core.models.network import N_SEGMENTS, SerialNetwork


@dataclass(frozen=True)
class ValidationIssue:
    level: str              # "error" | "warning"
    message: str
    hint: Optional[str] = None


class NetworkValidationError(ValueError):
    """Raised when validation finds one or more errors."""
    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        lines = ["Network validation failed with errors:"]
        for it in issues:
            if it.level == "error":
                lines.append(f"- {it.message}" + (f" | hint: {it.hint}" if it.hint else ""))
        super().__init__("\n".join(lines))


def _bad_number(x: float) -> bool:
    if isinstance(x, (str, bytes)):
        return True
    try:
        return not math.isfinite(float(x))
    except (TypeError, ValueError):
        return True


def validate_network(network: SerialNetwork) -> List[ValidationIssue]:
    """
    Validate a SerialNetwork for basic consistency.
    Returns a list of issues (errors and warnings). If errors exist, caller may raise.

    The drive term sign is not checked here: the solver reports it as an
    infeasible configuration.
    """
    issues: List[ValidationIssue] = []

    # --- Fluid ---
    fl = network.fluid
    if _bad_number(fl.rho) or fl.rho <= 0:
        issues.append(ValidationIssue("error", f"Fluid density must be > 0: rho={fl.rho!r}"))
    if _bad_number(fl.nu) or fl.nu <= 0:
        issues.append(ValidationIssue("error", f"Fluid kinematic viscosity must be > 0: nu={fl.nu!r}"))
    if _bad_number(fl.g) or not (0.0 < fl.g < 20.0):
        issues.append(ValidationIssue("error", f"Gravity out of range: g={fl.g!r}"))

    # --- Segments ---
    if len(network.segments) != N_SEGMENTS:
        issues.append(ValidationIssue(
            "error",
            f"Network must have exactly {N_SEGMENTS} segments (got {len(network.segments)}).",
            "The energy balance is written for inlet, middle and outlet segments.",
        ))

    seen = set()
    for s in network.segments:
        if s.uid in seen:
            issues.append(ValidationIssue("error", f"Duplicate segment uid: {s.uid!r}"))
        seen.add(s.uid)

        tag = f"Segment(uid={s.uid}, name={s.name})"
        for attr in ("diameter", "length", "roughness"):
            if _bad_number(getattr(s, attr)):
                issues.append(ValidationIssue("error", f"{tag} {attr} is not a finite number: {getattr(s, attr)!r}"))
        if not _bad_number(s.diameter) and s.diameter <= 0:
            issues.append(ValidationIssue("error", f"{tag} diameter <= 0: {s.diameter}"))
        if not _bad_number(s.length) and s.length <= 0:
            issues.append(ValidationIssue("error", f"{tag} length <= 0: {s.length}"))
        if _bad_number(s.roughness):
            continue
        if s.roughness < 0:
            issues.append(ValidationIssue("error", f"{tag} roughness < 0: {s.roughness}"))
        elif not _bad_number(s.diameter) and s.diameter > 0 and s.roughness / s.diameter > 0.05:
            issues.append(ValidationIssue(
                "warning",
                f"{tag} relative roughness seems unusual: eps/D={s.roughness / s.diameter:.4g}",
                "Check roughness units (m, not mm).",
            ))

    # --- Minor losses ---
    for idx, comps in network.minor_losses.components.items():
        if not 1 <= idx <= N_SEGMENTS:
            issues.append(ValidationIssue("error", f"Minor loss references unknown segment index {idx}."))
            continue
        for c in comps:
            if _bad_number(c.K) or c.K < 0:
                issues.append(ValidationIssue("error", f"Minor loss '{c.name}' on segment {idx} has K < 0: {c.K!r}"))
            if c.count < 0:
                issues.append(ValidationIssue("error", f"Minor loss '{c.name}' on segment {idx} has negative count: {c.count}"))
        if idx not in MINOR_LOSS_SEGMENTS and network.minor_losses.k_for(idx) != 0:
            issues.append(ValidationIssue(
                "warning",
                f"Minor losses on segment {idx} are ignored by the energy balance.",
                f"Only segments {list(MINOR_LOSS_SEGMENTS)} carry fittings in this topology.",
            ))

    # --- Boundary ---
    b = network.boundary
    for name in ("p_in", "p_out", "z_in", "z_out"):
        if _bad_number(getattr(b, name)):
            issues.append(ValidationIssue("error", f"Boundary {name} is not a finite number: {getattr(b, name)!r}"))
    if not _bad_number(b.p_out) and b.p_out < 0:
        issues.append(ValidationIssue("warning", f"Outlet pressure is negative: p_out={b.p_out}", "Pressures are absolute [Pa]."))

    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errors = [i for i in issues if i.level == "error"]
    if errors:
        raise NetworkValidationError(errors)
