# beamcraft/fem.py
"""
FIXED-END MOMENTS
=================

Moments that a fully fixed member develops under its own loads, before any
joint rotates or translates. Sign convention: anticlockwise positive, so a
downward load on a left-to-right beam gives a positive start moment and a
negative end moment (both hogging).

Closed forms, superposed over the member's loads:

    Point load P at a (b = L - a):
        start =  P·a·b²/L²
        end   = -P·a²·b/L²

    Distributed intensity q(x) over [a1, a2] (UDL and VDL alike):
        start =  ∫ q(x)·x·(L - x)²/L² dx
        end   = -∫ q(x)·x²·(L - x)/L² dx

    Relative settlement δ = settlement(end) - settlement(start):
        start += 6·E·I·δ/L²
        end   += 6·E·I·δ/L²

The distributed integrals are evaluated exactly with numpy polynomials,
so partial UDLs and triangular/trapezoidal VDLs share one code path.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from numpy.polynomial import Polynomial

from .loads import PointLoad, distributed_segment, intensity_polynomial
from .model import Member


@dataclass(frozen=True)
class FEMRecord:
    member_id: str
    start: float
    end: float


def load_fixed_end_moments(load, L: float) -> Tuple[float, float]:
    match load:
        case PointLoad(position=a, magnitude=P):
            b = L - a
            return P * a * b * b / (L * L), -P * a * a * b / (L * L)
        case _:
            a1, a2, qa, qb = distributed_segment(load)
            q = intensity_polynomial(a1, a2, qa, qb)
            x = Polynomial([0.0, 1.0])
            start_kernel = (q * x * (L - x) ** 2).integ()
            end_kernel = (q * x ** 2 * (L - x)).integ()
            start = (start_kernel(a2) - start_kernel(a1)) / (L * L)
            end = -(end_kernel(a2) - end_kernel(a1)) / (L * L)
            return float(start), float(end)


def settlement_moment(EI: float, L: float, delta: float) -> float:
    """Fixed-end moment at each end caused by relative settlement δ (both ends equal)."""
    return 6.0 * EI * delta / (L * L)


def fixed_end_moments(member: Member, settlement_delta: float = 0.0) -> Tuple[float, float]:
    """
    Fixed-end moments (start, end) of a member, kN·m anticlockwise positive.

    Parameters:
    -----------
    member : Member
        Member with its loads in local coordinates
    settlement_delta : float
        settlement(end) - settlement(start) in m, positive when the end
        node settles more than the start node

    Returns:
    --------
    Tuple[float, float]
        (start, end). (0.0, 0.0) for an unloaded, unsettled member.
    """
    L = member.length
    start = 0.0
    end = 0.0
    for load in member.loads:
        s, e = load_fixed_end_moments(load, L)
        start += s
        end += e
    if settlement_delta:
        extra = settlement_moment(member.EI, L, settlement_delta)
        start += extra
        end += extra
    return start, end


def member_settlement_delta(member: Member) -> float:
    return member.end.settlement - member.start.settlement


def fixed_end_moment_table(members: Iterable[Member], include_settlement: bool = True) -> List[FEMRecord]:
    """One FEMRecord per member, in input order."""
    table = []
    for member in members:
        delta = member_settlement_delta(member) if include_settlement else 0.0
        start, end = fixed_end_moments(member, delta)
        table.append(FEMRecord(member.id, start, end))
    return table
