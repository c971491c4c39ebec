# beamcraft/post.py
"""
POST-PROCESSING
===============

Turns solved displacements into member end forces, support reactions and
axial forces.

Member end forces (back-substitution)
-------------------------------------
    ψ   = (v_j - v_i)/L                  chord rotation from local transverse
                                         displacements
    M_i = FEM_i + (2EI/L)(2θ_i + θ_j - 3ψ)
    M_j = FEM_j + (2EI/L)(2θ_j + θ_i - 3ψ)
    V_i = R_i + (M_i + M_j)/L            R = simply supported reactions
    V_j = R_j - (M_i + M_j)/L

Reactions (joint equilibrium)
-----------------------------
A node receives the opposite of every member end force, so

    reaction = Σ (member end forces at the node) - applied action

For translations the sum is taken over the whole translation group, since
axially rigid members carry forces between group members without showing
up as shear. A restrained group shares its total equally among the nodes
that restrain it.

Axial forces (chain equilibrium)
--------------------------------
Along a floor (or column line) sorted by coordinate, each node k
contributes P_k = applied + reaction - Σ shear from members of the other
kind. Cutting the chain after node k gives the tension

    N = -(P_0 + P_1 + ... + P_k)
"""

from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

from .assembly import MemberLoading
from .elements import member_geometry, member_transform, slope_deflection_moment
from .kernel import DOFManager, TranslationGroup, gather
from .loads import resultant
from .model import MemberKind, StructureModel, SupportKind
from .results import EndMomentRecord, MemberEndForces, Reaction

AXIS_INDEX = {"x": 0, "y": 1}


def member_end_forces(loading: MemberLoading, dofs: DOFManager, d: np.ndarray) -> MemberEndForces:
    member = loading.member
    L, c, s = member_geometry(member)
    dof_map = dofs.element_dof_map(member.start.id, member.end.id)
    v_i, theta_i, v_j, theta_j = member_transform(c, s) @ gather(d, dof_map)
    psi = (v_j - v_i) / L

    EI = member.EI
    m_i = slope_deflection_moment(loading.fem_start, EI, L, theta_i, theta_j, psi)
    m_j = slope_deflection_moment(loading.fem_end, EI, L, theta_j, theta_i, psi)
    couple = (m_i + m_j) / L

    return MemberEndForces(
        member_id=member.id,
        length=L,
        c=c,
        s=s,
        shear_start=loading.static_start + couple,
        moment_start=float(m_i),
        shear_end=loading.static_end - couple,
        moment_end=float(m_j),
    )


def end_moment_records(forces: Iterable[MemberEndForces]) -> List[EndMomentRecord]:
    return [EndMomentRecord(f.member_id, f.moment_start, f.moment_end) for f in forces]


def nodal_force_sums(
    model: StructureModel, forces: Sequence[MemberEndForces]
) -> Dict[str, np.ndarray]:
    """Σ [fx, fy, m] of member end forces (transverse part) at every node."""
    sums = {node_id: np.zeros(3) for node_id in model.nodes}
    for member, f in zip(model.members, forces):
        sums[member.start.id] += np.array(f.global_start())
        sums[member.end.id] += np.array(f.global_end())
    return sums


def group_residual(
    model: StructureModel, group: TranslationGroup, sums: Dict[str, np.ndarray]
) -> float:
    """
    Net force the group's supports (or a holding restraint) must provide
    along the group axis. Zero, up to round-off, for a free group.
    """
    k = AXIS_INDEX[group.axis]
    total = 0.0
    for node_id in group.node_ids:
        action = model.nodal_action(node_id)
        applied = action.fx if group.axis == "x" else action.fy
        total += sums[node_id][k] - applied
    return float(total)


def support_reactions(
    model: StructureModel,
    dofs: DOFManager,
    sums: Dict[str, np.ndarray],
    include_x: bool,
) -> List[Reaction]:
    shares: Dict[Tuple[str, str], float] = {}
    for group in dofs.groups:
        if not group.restrained or (group.axis == "x" and not include_x):
            continue
        share = group_residual(model, group, sums) / len(group.restrained_ids)
        for node_id in group.restrained_ids:
            shares[(node_id, group.axis)] = share

    reactions = []
    for node in model.supported_nodes():
        kind = node.support.kind
        m = None
        if kind is SupportKind.FIXED:
            m = float(sums[node.id][2] - model.nodal_action(node.id).mz)
        x = shares.get((node.id, "x")) if include_x and kind.restrains_x else None
        reactions.append(Reaction(
            node_id=node.id,
            y=shares.get((node.id, "y"), 0.0),
            x=x,
            m=m,
        ))
    return reactions


def chain_axial_forces(
    model: StructureModel,
    dofs: DOFManager,
    sums: Dict[str, np.ndarray],
    reactions: Sequence[Reaction],
) -> Dict[str, float]:
    """Axial tension per member id from equilibrium along floors and column lines."""
    by_node = {r.node_id: r for r in reactions}
    chain_kind = {"x": MemberKind.BEAM, "y": MemberKind.COLUMN}
    axial: Dict[str, float] = {}

    for group in dofs.groups:
        if len(group.node_ids) < 2:
            continue
        k = AXIS_INDEX[group.axis]
        coordinate = {
            node_id: (model.nodes[node_id].x if group.axis == "x" else model.nodes[node_id].y)
            for node_id in group.node_ids
        }
        ordered = sorted(group.node_ids, key=lambda nid: coordinate[nid])

        cumulative = {}
        running = 0.0
        for node_id in ordered:
            action = model.nodal_action(node_id)
            applied = action.fx if group.axis == "x" else action.fy
            reaction = by_node.get(node_id)
            supplied = 0.0
            if reaction is not None:
                value = reaction.x if group.axis == "x" else reaction.y
                supplied = value or 0.0
            running += applied + supplied - sums[node_id][k]
            cumulative[node_id] = running

        members = set(group.node_ids)
        for member in model.members:
            if member.kind is not chain_kind[group.axis]:
                continue
            if member.start.id in members and member.end.id in members:
                lower = min((member.start.id, member.end.id), key=lambda nid: coordinate[nid])
                axial[member.id] = -cumulative[lower]
    return axial


def with_axial(forces: Sequence[MemberEndForces], axial: Dict[str, float]) -> List[MemberEndForces]:
    out = []
    for f in forces:
        n = axial.get(f.member_id, 0.0)
        out.append(MemberEndForces(
            member_id=f.member_id,
            length=f.length,
            c=f.c,
            s=f.s,
            shear_start=f.shear_start,
            moment_start=f.moment_start,
            shear_end=f.shear_end,
            moment_end=f.moment_end,
            axial=float(n),
        ))
    return out


def applied_load_totals(model: StructureModel) -> Tuple[float, float]:
    """Global (Fx, Fy) of all member loads and nodal forces, +x right, +y up."""
    fx = 0.0
    fy = 0.0
    for member in model.members:
        _, c, s = member_geometry(member)
        for load in member.loads:
            W, _ = resultant(load)
            # positive loads act in local -y = (s, -c)
            fx += W * s
            fy -= W * c
    for action in model.nodal_actions.values():
        fx += action.fx
        fy += action.fy
    return fx, fy


def load_scale(model: StructureModel) -> float:
    """Sum of absolute load magnitudes, used to scale equilibrium tolerances."""
    scale = 0.0
    for member in model.members:
        for load in member.loads:
            scale += abs(resultant(load)[0])
    for action in model.nodal_actions.values():
        scale += abs(action.fx) + abs(action.fy) + abs(action.mz)
    return scale
