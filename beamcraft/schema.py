# beamcraft/schema.py
"""
Input schema for structures, parsed with pydantic.

Field names follow the payload shape used by clients, so camelCase
aliases (startNodeId, slabThickness, nodalActions, ...) are accepted as
well as the snake_case names:

    {
      "nodes": [{"id": "A", "x": 0, "y": 0, "support": {"kind": "pinned"}}, ...],
      "members": [{"kind": "beam", "startNodeId": "A", "endNodeId": "B",
                   "loads": [{"type": "udl", "start": 0, "span": 6, "intensity": 10}]}],
      "nodalActions": [{"nodeId": "B", "fy": -20}]
    }

build_model() turns a parsed payload into a validated StructureModel.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .loads import UDL, VDL, PointLoad
from .model import (
    Member,
    MemberKind,
    ModelValidationError,
    NodalAction,
    Node,
    SectionType,
    StructureModel,
    Support,
    SupportKind,
)


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class SupportIn(_Schema):
    kind: SupportKind
    settlement: float = Field(0.0, description="Settlement (m), positive downward")


class NodeIn(_Schema):
    id: str
    x: float
    y: float
    support: Optional[SupportIn] = None


class PointLoadIn(_Schema):
    type: Literal["point"] = "point"
    position: float = Field(..., ge=0.0, description="Distance from start node (m)")
    magnitude: float = Field(..., description="Force (kN), positive in local -y")

    def to_load(self) -> PointLoad:
        return PointLoad(self.position, self.magnitude)


class UDLIn(_Schema):
    type: Literal["udl"] = "udl"
    start: float = Field(0.0, ge=0.0, alias="startPosition")
    span: float = Field(..., gt=0.0)
    intensity: float = Field(..., description="kN/m, positive in local -y")

    def to_load(self) -> UDL:
        return UDL(self.start, self.span, self.intensity)


class VDLIn(_Schema):
    type: Literal["vdl"] = "vdl"
    high_value: float = Field(..., alias="highValue")
    high_position: float = Field(..., ge=0.0, alias="highPosition")
    low_value: float = Field(0.0, alias="lowValue")
    low_position: float = Field(0.0, ge=0.0, alias="lowPosition")

    def to_load(self) -> VDL:
        return VDL(self.high_value, self.high_position, self.low_value, self.low_position)


LoadIn = Annotated[Union[PointLoadIn, UDLIn, VDLIn], Field(discriminator="type")]


class MemberIn(_Schema):
    kind: MemberKind
    start_node_id: str = Field(..., alias="startNodeId")
    end_node_id: str = Field(..., alias="endNodeId")
    id: Optional[str] = None
    b: float = Field(0.0, ge=0.0, description="Width (mm)")
    h: float = Field(0.0, ge=0.0, description="Depth (mm)")
    E: float = Field(1.0, gt=0.0)
    I: Optional[float] = Field(None, gt=0.0)
    slab_thickness: float = Field(0.0, ge=0.0, alias="slabThickness")
    section_type: Optional[SectionType] = Field(None, alias="sectionType")
    loads: List[LoadIn] = Field(default_factory=list)


class NodalActionIn(_Schema):
    node_id: str = Field(..., alias="nodeId")
    fx: float = 0.0
    fy: float = 0.0
    mz: float = 0.0


class StructureIn(_Schema):
    nodes: List[NodeIn]
    members: List[MemberIn] = Field(..., min_length=1)
    nodal_actions: List[NodalActionIn] = Field(default_factory=list, alias="nodalActions")


def build_nodes(nodes_in: List[NodeIn], keep_settlement: bool) -> Dict[str, Node]:
    nodes: Dict[str, Node] = {}
    for item in nodes_in:
        if item.id in nodes:
            raise ModelValidationError(f"Duplicate node id {item.id}.")
        support = None
        if item.support is not None:
            settlement = item.support.settlement if keep_settlement else 0.0
            support = Support(item.support.kind, settlement)
        nodes[item.id] = Node(item.id, item.x, item.y, support)
    return nodes


def build_model(payload: Union[StructureIn, dict], mode: str = "beam") -> StructureModel:
    """
    Build a validated StructureModel from a payload.

    Parameters:
    -----------
    payload : StructureIn or dict
        Parsed schema or raw mapping (validated here)
    mode : str
        "beam" keeps support settlements, "frame" drops them

    Raises:
    -------
    pydantic.ValidationError
        Malformed payload
    ModelValidationError
        Unknown node ids, bad geometry, conflicting supports, loads off a member
    """
    if mode not in ("beam", "frame"):
        raise ValueError(f"mode must be 'beam' or 'frame', got {mode!r}")
    if not isinstance(payload, StructureIn):
        payload = StructureIn.model_validate(payload)

    nodes = build_nodes(payload.nodes, keep_settlement=(mode == "beam"))
    members = []
    for item in payload.members:
        for node_id in (item.start_node_id, item.end_node_id):
            if node_id not in nodes:
                raise ModelValidationError(
                    f"Member {item.id or item.start_node_id + item.end_node_id} "
                    f"references unknown node {node_id}."
                )
        members.append(Member(
            kind=item.kind,
            start=nodes[item.start_node_id],
            end=nodes[item.end_node_id],
            loads=tuple(load.to_load() for load in item.loads),
            E=item.E,
            I=item.I,
            b=item.b,
            h=item.h,
            slab_thickness=item.slab_thickness,
            section_type=item.section_type,
            id=item.id,
        ))

    actions = [NodalAction(a.node_id, a.fx, a.fy, a.mz) for a in payload.nodal_actions]
    return StructureModel.create(members, actions)
