# beamcraft/diagrams.py
"""
FORCE DIAGRAM COMPUTATIONS
==========================

Internal shear, moment and axial force sampled along each member, built
by superposing the end-force statics with the direct effect of every
load acting left of the section.

SIGN CONVENTIONS:
-----------------
- x: local position from the start node (m)
- Positive V: net transverse force on the left segment acts in local +y
- Positive M: sagging (compression on the local +y face)
- Positive N: tension

With end forces V_i, M_i (anticlockwise) at the start node:

    V(x) = V_i - Σ (load applied over [0, x])
    M(x) = -M_i + V_i·x - Σ (moment of that load about x)

so M(0) = -M_i and M(L) = M_j, matching the slope-deflection end moments.

SAMPLING:
---------
n_points evenly spaced positions (21 by default) plus every load start
and end. A point load strictly inside the member is sampled twice at the
same x: once just left of it and once just right, so the shear jump is
visible and the shear design envelope sees both sides.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .loads import discontinuities, point_load_positions, static_effect
from .model import Member
from .results import DiagramPoint, MemberEndForces


def sample_positions(member: Member, n_points: int = 21) -> np.ndarray:
    L = member.length
    base = np.linspace(0.0, L, n_points)
    extra = discontinuities(member.loads)
    extra = extra[(extra >= 0.0) & (extra <= L)]
    return np.unique(np.concatenate([base, extra]))


def internal_forces_at(
    member: Member, forces: MemberEndForces, x: float, include_at: bool = True
) -> DiagramPoint:
    shear = forces.shear_start
    moment = -forces.moment_start + forces.shear_start * x
    for load in member.loads:
        f, m = static_effect(load, x, include_at=include_at)
        shear -= f
        moment -= m
    return DiagramPoint(x=float(x), shear=float(shear), moment=float(moment), axial=forces.axial)


def compute_member_diagram(
    member: Member, forces: MemberEndForces, n_points: int = 21
) -> List[DiagramPoint]:
    """
    Sample one member's internal forces.

    Parameters:
    -----------
    member : Member
        Member with its loads
    forces : MemberEndForces
        Solved end forces of the same member
    n_points : int
        Evenly spaced samples, before load discontinuities are added

    Returns:
    --------
    List[DiagramPoint]
        Ordered by x; interior point loads produce two points at the same x
    """
    L = member.length
    interior_points = set(
        float(p) for p in point_load_positions(member.loads) if 0.0 < p < L
    )
    points = []
    for x in sample_positions(member, n_points):
        x = float(x)
        if x in interior_points:
            points.append(internal_forces_at(member, forces, x, include_at=False))
        points.append(internal_forces_at(member, forces, x, include_at=True))
    return points


def shear_envelope(points: Sequence[DiagramPoint]) -> List[Tuple[float, float]]:
    """(x, V) pairs in the form the shear design engine consumes."""
    return [(p.x, p.shear) for p in points]
