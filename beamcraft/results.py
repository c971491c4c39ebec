# beamcraft/results.py
"""
Result containers shared by the beam and frame solvers.

All records are frozen; AnalysisResult.to_dict() renders the plain
JSON-ready shape returned by the API:

    {
      "mode": "beam" | "frame",
      "fem": [{"member_id", "start", "end"}, ...],
      "end_moments": [{"member_id", "left", "right"}, ...],
      "reactions": [{"node_id", "y", "x"?, "m"?}, ...],
      "sidesway": true | false | null,
      "diagrams": {member_id: {"x": [...], "shear": [...], "moment": [...], "axial": [...]}},
      "settlement_differentials": [{"left_id", "right_id", "delta"}, ...]
    }

"left"/"right" are the moments at the member's start/end node. Moments
at member ends are anticlockwise positive; diagram moments are sagging
positive.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .fem import FEMRecord
from .model import SettlementDifferential


@dataclass(frozen=True)
class EndMomentRecord:
    member_id: str
    left: float
    right: float


@dataclass(frozen=True)
class Reaction:
    node_id: str
    y: float
    x: Optional[float] = None
    m: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"node_id": self.node_id, "y": self.y}
        if self.x is not None:
            out["x"] = self.x
        if self.m is not None:
            out["m"] = self.m
        return out


@dataclass(frozen=True)
class MemberEndForces:
    """
    Forces exerted ON a member BY its end nodes.

    Shears are in member-local +y, moments anticlockwise positive, axial
    positive in tension.
    """
    member_id: str
    length: float
    c: float
    s: float
    shear_start: float
    moment_start: float
    shear_end: float
    moment_end: float
    axial: float = 0.0

    def global_start(self) -> Tuple[float, float, float]:
        """(fx, fy, m) at the start node, transverse shear only."""
        return -self.s * self.shear_start, self.c * self.shear_start, self.moment_start

    def global_end(self) -> Tuple[float, float, float]:
        return -self.s * self.shear_end, self.c * self.shear_end, self.moment_end


@dataclass(frozen=True)
class DiagramPoint:
    """Internal forces at local position x (m): shear (kN), sagging moment (kN·m), axial (kN)."""
    x: float
    shear: float
    moment: float
    axial: float = 0.0


@dataclass(frozen=True)
class AnalysisResult:
    mode: str
    fems: Tuple[FEMRecord, ...]
    end_moments: Tuple[EndMomentRecord, ...]
    reactions: Tuple[Reaction, ...]
    sidesway: Optional[bool]
    diagrams: Mapping[str, Tuple[DiagramPoint, ...]]
    member_forces: Tuple[MemberEndForces, ...]
    settlement_differentials: Tuple[SettlementDifferential, ...] = ()
    dof_labels: Tuple[str, ...] = field(default=(), compare=False)

    def reaction(self, node_id: str) -> Reaction:
        for r in self.reactions:
            if r.node_id == node_id:
                return r
        raise KeyError(f"No reaction at node {node_id}")

    def end_moment(self, member_id: str) -> EndMomentRecord:
        for rec in self.end_moments:
            if rec.member_id == member_id:
                return rec
        raise KeyError(f"No member {member_id}")

    def forces(self, member_id: str) -> MemberEndForces:
        for f in self.member_forces:
            if f.member_id == member_id:
                return f
        raise KeyError(f"No member {member_id}")

    def to_dict(self) -> Dict[str, Any]:
        diagrams: Dict[str, Dict[str, List[float]]] = {}
        for member_id, points in self.diagrams.items():
            diagrams[member_id] = {
                "x": [p.x for p in points],
                "shear": [p.shear for p in points],
                "moment": [p.moment for p in points],
                "axial": [p.axial for p in points],
            }
        return {
            "mode": self.mode,
            "fem": [
                {"member_id": f.member_id, "start": f.start, "end": f.end}
                for f in self.fems
            ],
            "end_moments": [
                {"member_id": e.member_id, "left": e.left, "right": e.right}
                for e in self.end_moments
            ],
            "reactions": [r.to_dict() for r in self.reactions],
            "sidesway": self.sidesway,
            "diagrams": diagrams,
            "settlement_differentials": [
                {"left_id": s.left_id, "right_id": s.right_id, "delta": s.delta}
                for s in self.settlement_differentials
            ],
        }
