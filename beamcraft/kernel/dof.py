# beamcraft/kernel/dof.py
"""
DOF MANAGER: Rotations and Grouped Translations
===============================================

PURPOSE:
--------
This module handles the mapping from (node_id, direction) to global DOF
indices for slope-deflection analysis, where not every node owns every
DOF:

    rotation     one DOF per node, unless the node is rotationally fixed
    translation  one DOF per TRANSLATION GROUP, unless the group is restrained

A translation group is a set of nodes that must move together in one
direction because they are joined by axially rigid members:

    horizontal  nodes linked by beams share one sway (a floor)
    vertical    nodes linked by columns share one settlement (a column line)

In beam mode every node forms its own vertical group and horizontal
translation is ignored. In frame mode the groups come from the member
graph via union-find (group_nodes).

A DOF index of None means "held at zero". Assembly and post-processing
simply skip those entries, so no partitioning of K is required.

USAGE:
------
    dofs = DOFManager()
    for node in model.nodes.values():
        dofs.add_rotation(node.id, fixed=...)
    for group in group_nodes(node_ids, column_links):
        dofs.add_translation_group("y", group, restrained_ids)

    dofs.element_dof_map(member.start.id, member.end.id)
    # → [ux_i, uy_i, rz_i, ux_j, uy_j, rz_j] with None for held DOFs
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class TranslationGroup:
    """
    Nodes sharing one translation along `axis` ("x" or "y").

    restrained_ids lists the members of the group whose supports restrain
    that direction. dof is None when the group is restrained.
    """
    axis: str
    node_ids: Tuple[str, ...]
    restrained_ids: Tuple[str, ...]
    dof: Optional[int]

    @property
    def restrained(self) -> bool:
        return bool(self.restrained_ids)


@dataclass
class DOFManager:
    """
    Collects DOF labels and answers index lookups per node and element.

    Attributes:
    -----------
    labels : List[str]
        One human-readable label per global DOF, e.g. "rz:B" or "uy:[A,B]"
    rotation : Dict[str, Optional[int]]
        Node id → rotation DOF (None when rotationally fixed)
    ux, uy : Dict[str, Optional[int]]
        Node id → translation DOF (None when held). Missing ids are held.
    groups : List[TranslationGroup]
        Every translation group registered, restrained or not
    """
    labels: List[str] = field(default_factory=list)
    rotation: Dict[str, Optional[int]] = field(default_factory=dict)
    ux: Dict[str, Optional[int]] = field(default_factory=dict)
    uy: Dict[str, Optional[int]] = field(default_factory=dict)
    groups: List[TranslationGroup] = field(default_factory=list)

    def new_dof(self, label: str) -> int:
        self.labels.append(label)
        return len(self.labels) - 1

    @property
    def ndof(self) -> int:
        return len(self.labels)

    def add_rotation(self, node_id: str, fixed: bool) -> Optional[int]:
        index = None if fixed else self.new_dof(f"rz:{node_id}")
        self.rotation[node_id] = index
        return index

    def add_translation_group(
        self,
        axis: str,
        node_ids: Sequence[str],
        restrained_ids: Sequence[str],
        held: bool = False,
    ) -> TranslationGroup:
        """
        Register one group. `held` pins an otherwise free group without
        recording a restraint (used for the braced trial solve).
        """
        if axis not in ("x", "y"):
            raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
        index = None
        if not restrained_ids and not held:
            index = self.new_dof(f"u{axis}:[{','.join(node_ids)}]")
        group = TranslationGroup(axis, tuple(node_ids), tuple(restrained_ids), index)
        target = self.ux if axis == "x" else self.uy
        for node_id in node_ids:
            target[node_id] = index
        self.groups.append(group)
        return group

    def node_dofs(self, node_id: str) -> List[Optional[int]]:
        """[ux, uy, rz] for one node, None for held DOFs."""
        return [
            self.ux.get(node_id),
            self.uy.get(node_id),
            self.rotation.get(node_id),
        ]

    def element_dof_map(self, start_id: str, end_id: str) -> List[Optional[int]]:
        return self.node_dofs(start_id) + self.node_dofs(end_id)

    def groups_along(self, axis: str) -> List[TranslationGroup]:
        return [g for g in self.groups if g.axis == axis]


def group_nodes(node_ids: Iterable[str], links: Iterable[Tuple[str, str]]) -> List[List[str]]:
    """
    Partition nodes into connected groups (union-find over `links`).

    Groups come back in first-seen order of node_ids, members in input order.
    """
    order = list(node_ids)
    parent = {nid: nid for nid in order}

    def find(nid: str) -> str:
        while parent[nid] != nid:
            parent[nid] = parent[parent[nid]]
            nid = parent[nid]
        return nid

    for a, b in links:
        ra, rb = find(a), find(b)
        if ra != rb:
            parent[rb] = ra

    grouped: Dict[str, List[str]] = {}
    for nid in order:
        grouped.setdefault(find(nid), []).append(nid)
    return list(grouped.values())
