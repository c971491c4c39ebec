# beamcraft/model.py
# Node, Support, Member, NodalAction and the assembled StructureModel

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .loads import Load, PointLoad, load_extent

GEOMETRY_TOL = 1e-9


class ModelValidationError(ValueError):
    """Raised when a structure is rejected before any solve."""
    pass


class SupportKind(str, Enum):
    FIXED = "fixed"
    PINNED = "pinned"
    ROLLER = "roller"

    @property
    def restrains_x(self) -> bool:
        return self is not SupportKind.ROLLER

    @property
    def restrains_y(self) -> bool:
        return True

    @property
    def restrains_rotation(self) -> bool:
        return self is SupportKind.FIXED


class MemberKind(str, Enum):
    BEAM = "beam"
    COLUMN = "column"
    INCLINED = "inclined"


class SectionType(str, Enum):
    RECTANGULAR = "Rectangular"
    L = "L"
    T = "T"


@dataclass(frozen=True)
class Support:
    kind: SupportKind
    settlement: float = 0.0  # m, positive downward


@dataclass(frozen=True)
class Node:
    id: str
    x: float
    y: float
    support: Optional[Support] = None

    @property
    def settlement(self) -> float:
        return self.support.settlement if self.support is not None else 0.0


@dataclass(frozen=True)
class NodalAction:
    """Concentrated action at a node, in global axes (+x right, +y up, mz anticlockwise)."""
    node_id: str
    fx: float = 0.0
    fy: float = 0.0
    mz: float = 0.0

    def __add__(self, other: "NodalAction") -> "NodalAction":
        if other.node_id != self.node_id:
            raise ValueError(
                f"Cannot combine actions on nodes {self.node_id!r} and {other.node_id!r}."
            )
        return NodalAction(
            self.node_id,
            self.fx + other.fx,
            self.fy + other.fy,
            self.mz + other.mz,
        )


def rectangular_inertia(b: float, h: float, slab_thickness: float = 0.0) -> float:
    """Second moment of area of the web below the slab, b·(h - slab)³/12."""
    return b * (h - slab_thickness) ** 3 / 12.0


@dataclass(frozen=True)
class Member:
    """
    Straight prismatic member between two nodes.

    Loads are in member-local coordinates, positions measured from `start`.
    BEAM members run left-to-right so that positive loads act downward.
    """
    kind: MemberKind
    start: Node
    end: Node
    loads: Tuple[Load, ...] = ()
    E: float = 1.0
    I: Optional[float] = None
    b: float = 0.0
    h: float = 0.0
    slab_thickness: float = 0.0
    section_type: Optional[SectionType] = None
    id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "loads", tuple(self.loads))
        if self.id is None:
            object.__setattr__(self, "id", f"{self.start.id}{self.end.id}")
        if self.I is None:
            if self.b > 0.0 and self.h > self.slab_thickness:
                inertia = rectangular_inertia(self.b, self.h, self.slab_thickness)
            else:
                inertia = 1.0
            object.__setattr__(self, "I", inertia)
        self._check_geometry()
        self._check_stiffness()
        self._check_loads()

    @property
    def dx(self) -> float:
        return self.end.x - self.start.x

    @property
    def dy(self) -> float:
        return self.end.y - self.start.y

    @property
    def length(self) -> float:
        return float(math.hypot(self.dx, self.dy))

    @property
    def EI(self) -> float:
        return self.E * self.I

    def _check_geometry(self):
        L = self.length
        if L <= GEOMETRY_TOL:
            raise ModelValidationError(f"Member {self.id} has zero length.")
        horizontal = abs(self.dy) <= GEOMETRY_TOL * max(1.0, L)
        vertical = abs(self.dx) <= GEOMETRY_TOL * max(1.0, L)
        if self.kind is MemberKind.BEAM:
            if not horizontal:
                raise ModelValidationError(
                    f"Beam {self.id} is not horizontal "
                    f"({self.start.id} at y={self.start.y}, {self.end.id} at y={self.end.y})."
                )
            if self.dx < 0.0:
                raise ModelValidationError(
                    f"Beam {self.id} runs right-to-left; "
                    f"define it from {self.end.id} to {self.start.id}."
                )
        elif self.kind is MemberKind.COLUMN:
            if not vertical:
                raise ModelValidationError(
                    f"Column {self.id} is not vertical "
                    f"({self.start.id} at x={self.start.x}, {self.end.id} at x={self.end.x})."
                )
        elif self.kind is MemberKind.INCLINED:
            if horizontal or vertical:
                raise ModelValidationError(
                    f"Inclined member {self.id} is axis-aligned; use BEAM or COLUMN."
                )

    def _check_stiffness(self):
        if not (self.E > 0.0 and self.I > 0.0):
            raise ModelValidationError(
                f"Member {self.id} needs positive E and I (got E={self.E}, I={self.I})."
            )

    def _check_loads(self):
        L = self.length
        tol = GEOMETRY_TOL * max(1.0, L)
        for load in self.loads:
            try:
                a, b = load_extent(load)
            except ValueError as exc:
                raise ModelValidationError(f"Member {self.id}: {exc}") from exc
            if a < -tol or b > L + tol:
                kind = "Point load" if isinstance(load, PointLoad) else "Load"
                raise ModelValidationError(
                    f"{kind} on member {self.id} spans [{a}, {b}] "
                    f"outside the member length {L}."
                )


def accumulate_nodal_actions(actions: Iterable[NodalAction]) -> Dict[str, NodalAction]:
    """Reduce any number of actions into one total per node id."""
    totals: Dict[str, NodalAction] = {}
    for action in actions:
        current = totals.get(action.node_id)
        totals[action.node_id] = action if current is None else current + action
    return totals


def support_chain(nodes: Iterable[Node]) -> List[Node]:
    """Supported nodes ordered left-to-right (x, then y)."""
    supported = [n for n in nodes if n.support is not None]
    return sorted(supported, key=lambda n: (n.x, n.y))


@dataclass(frozen=True)
class SettlementDifferential:
    left_id: str
    right_id: str
    delta: float  # settlement(right) - settlement(left), m


def settlement_differentials(chain: Sequence[Node]) -> List[SettlementDifferential]:
    return [
        SettlementDifferential(left.id, right.id, right.settlement - left.settlement)
        for left, right in zip(chain, chain[1:])
    ]


@dataclass(frozen=True)
class StructureModel:
    """
    Validated, immutable structure: nodes by id, members in input order and
    nodal actions reduced to one total per node.
    """
    nodes: Mapping[str, Node]
    members: Tuple[Member, ...]
    nodal_actions: Mapping[str, NodalAction] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        members: Sequence[Member],
        nodal_actions: Iterable[NodalAction] = (),
    ) -> "StructureModel":
        if not members:
            raise ModelValidationError("A structure needs at least one member.")

        nodes: Dict[str, Node] = {}
        positions: Dict[Tuple[float, float], str] = {}
        for member in members:
            for node in (member.start, member.end):
                known = nodes.get(node.id)
                if known is not None:
                    if known != node:
                        raise ModelValidationError(
                            f"Node {node.id} is defined twice with different "
                            f"coordinates or supports."
                        )
                    continue
                key = (round(node.x, 9), round(node.y, 9))
                other = positions.get(key)
                if other is not None:
                    if nodes[other].support != node.support:
                        raise ModelValidationError(
                            f"Conflicting supports at ({node.x}, {node.y}): "
                            f"nodes {other} and {node.id}."
                        )
                    raise ModelValidationError(
                        f"Nodes {other} and {node.id} share position ({node.x}, {node.y})."
                    )
                nodes[node.id] = node
                positions[key] = node.id

        seen = set()
        for member in members:
            if member.id in seen:
                raise ModelValidationError(f"Duplicate member id {member.id}.")
            seen.add(member.id)

        totals = accumulate_nodal_actions(nodal_actions)
        for node_id in totals:
            if node_id not in nodes:
                raise ModelValidationError(f"Nodal action targets unknown node {node_id}.")

        return cls(nodes=nodes, members=tuple(members), nodal_actions=totals)

    def nodal_action(self, node_id: str) -> NodalAction:
        return self.nodal_actions.get(node_id, NodalAction(node_id))

    def members_at(self, node_id: str) -> List[Member]:
        return [m for m in self.members if node_id in (m.start.id, m.end.id)]

    def supported_nodes(self) -> List[Node]:
        return support_chain(self.nodes.values())

    def check_connected(self):
        """Raise ModelValidationError when the member graph has more than one component."""
        adjacency: Dict[str, List[str]] = {nid: [] for nid in self.nodes}
        for m in self.members:
            adjacency[m.start.id].append(m.end.id)
            adjacency[m.end.id].append(m.start.id)
        start = next(iter(self.nodes))
        reached = {start}
        stack = [start]
        while stack:
            for nxt in adjacency[stack.pop()]:
                if nxt not in reached:
                    reached.add(nxt)
                    stack.append(nxt)
        missing = sorted(set(self.nodes) - reached)
        if missing:
            raise ModelValidationError(
                f"Structure is disconnected: nodes {missing} are not reachable from {start}."
            )
