# beamcraft/loads.py
"""
MEMBER LOADS
============

Three load shapes act on a member, always in MEMBER-LOCAL coordinates:

    PointLoad(position, magnitude)                  concentrated force (kN)
    UDL(start, span, intensity)                     uniform load (kN/m)
    VDL(high_value, high_position,
        low_value, low_position)                    linearly varying load (kN/m)

Positions are measured from the member's start node along its axis (m).
A positive magnitude acts in local -y, i.e. "downward" for a beam drawn
left-to-right. For a column drawn bottom-to-top local -y points to +x.

The three shapes form a closed set. Code that needs per-shape behaviour
dispatches with ``match`` on the class patterns instead of methods on a
base class, so the solver never depends on load internals beyond the
helpers in this module.

Everything a solver needs from a load is one of:
- its extent along the member           (load_extent)
- its resultant force and centroid      (resultant)
- its static effect at a section        (static_effect)
- the simply supported end reactions    (simple_support_reactions)
"""

from dataclasses import dataclass
from typing import Iterable, Tuple, Union

import numpy as np
from numpy.polynomial import Polynomial


@dataclass(frozen=True)
class PointLoad:
    position: float
    magnitude: float


@dataclass(frozen=True)
class UDL:
    start: float
    span: float
    intensity: float


@dataclass(frozen=True)
class VDL:
    high_value: float
    high_position: float
    low_value: float = 0.0
    low_position: float = 0.0


Load = Union[PointLoad, UDL, VDL]


def distributed_segment(load: Load) -> Tuple[float, float, float, float]:
    """
    Describe a distributed load as a linear segment (a, b, q_a, q_b).

    a < b always holds; q_a and q_b are the intensities at a and b.
    VDLs may be given with the high end on either side.
    """
    match load:
        case UDL(start=start, span=span, intensity=w):
            if span <= 0.0:
                raise ValueError(f"UDL span must be > 0, got {span}.")
            return start, start + span, w, w
        case VDL(high_value=qh, high_position=xh, low_value=ql, low_position=xl):
            if xh == xl:
                raise ValueError(
                    "VDL high and low positions cannot coincide "
                    f"(both at {xh})."
                )
            if xh > xl:
                return xl, xh, ql, qh
            return xh, xl, qh, ql
        case _:
            raise TypeError(f"{type(load).__name__} is not a distributed load.")


def intensity_polynomial(a: float, b: float, qa: float, qb: float) -> Polynomial:
    """Intensity q(s) of a linear segment as a polynomial in s."""
    slope = (qb - qa) / (b - a)
    return Polynomial([qa - slope * a, slope])


def load_extent(load: Load) -> Tuple[float, float]:
    match load:
        case PointLoad(position=p):
            return p, p
        case _:
            a, b, _, _ = distributed_segment(load)
            return a, b


def resultant(load: Load) -> Tuple[float, float]:
    """
    Resultant (magnitude, centroid) of a load.

    For a trapezoidal segment the centroid is measured from the member
    start, not from the start of the loaded length.
    """
    match load:
        case PointLoad(position=p, magnitude=P):
            return P, p
        case _:
            a, b, qa, qb = distributed_segment(load)
            q = intensity_polynomial(a, b, qa, qb)
            force = _definite(q, a, b)
            if force == 0.0:
                return 0.0, 0.5 * (a + b)
            first_moment = _definite(q * Polynomial([0.0, 1.0]), a, b)
            return force, first_moment / force


def static_effect(load: Load, x: float, include_at: bool = True) -> Tuple[float, float]:
    """
    Static effect at section x of the part of a load lying left of x.

    Returns (force, moment):
        force  - total load magnitude applied over [0, x]
        moment - moment of that load about the section, taken so that a
                 positive (downward) load gives a positive value

    include_at controls whether a point load sitting exactly at x counts
    as already applied (shear just right of the load) or not.
    """
    match load:
        case PointLoad(position=p, magnitude=P):
            if p < x or (include_at and p == x):
                return P, P * (x - p)
            return 0.0, 0.0
        case _:
            a, b, qa, qb = distributed_segment(load)
            if x <= a:
                return 0.0, 0.0
            c = min(x, b)
            q = intensity_polynomial(a, b, qa, qb)
            force = _definite(q, a, c)
            moment = _definite(q * Polynomial([x, -1.0]), a, c)
            return force, moment


def simple_support_reactions(loads: Iterable[Load], length: float) -> Tuple[float, float]:
    """
    End reactions of a simply supported span of given length.

    Both reactions act in local +y (opposing positive loads).
    """
    r_start = 0.0
    r_end = 0.0
    for load in loads:
        W, c = resultant(load)
        r_end += W * c / length
        r_start += W * (length - c) / length
    return r_start, r_end


def discontinuities(loads: Iterable[Load]) -> np.ndarray:
    """Positions where a diagram changes shape (load starts, ends, point loads)."""
    positions = []
    for load in loads:
        a, b = load_extent(load)
        positions.extend([a, b])
    return np.unique(np.asarray(positions, dtype=float))


def point_load_positions(loads: Iterable[Load]) -> np.ndarray:
    return np.unique(np.asarray(
        [load.position for load in loads if isinstance(load, PointLoad)],
        dtype=float,
    ))


def _definite(poly: Polynomial, lo: float, hi: float) -> float:
    antiderivative = poly.integ()
    return float(antiderivative(hi) - antiderivative(lo))
