# beamcraft/assembly.py
# Member loadings, system assembly and solve shared by the beam and frame solvers

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .elements import (
    fixed_end_forces,
    member_geometry,
    member_global_stiffness,
    member_transform,
)
from .fem import fixed_end_moments, member_settlement_delta
from .kernel import DOFManager, assemble_global_F, assemble_global_K, solve_linear
from .loads import simple_support_reactions
from .model import Member, StructureModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberLoading:
    """Per-member quantities that do not depend on the solution."""
    member: Member
    fem_start: float
    fem_end: float
    static_start: float  # simply supported reaction, local +y
    static_end: float
    fixed_end_forces: np.ndarray  # [V_i, M_i, V_j, M_j], local


def member_loadings(model: StructureModel, include_settlement: bool) -> List[MemberLoading]:
    loadings = []
    for member in model.members:
        delta = member_settlement_delta(member) if include_settlement else 0.0
        fem_start, fem_end = fixed_end_moments(member, delta)
        r_start, r_end = simple_support_reactions(member.loads, member.length)
        loadings.append(MemberLoading(
            member=member,
            fem_start=fem_start,
            fem_end=fem_end,
            static_start=r_start,
            static_end=r_end,
            fixed_end_forces=fixed_end_forces(member, fem_start, fem_end),
        ))
    return loadings


def build_system(
    model: StructureModel,
    loadings: Sequence[MemberLoading],
    dofs: DOFManager,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Assemble K and F over the free DOFs.

    F = nodal actions - Tᵀ·f0 summed over members, where f0 are the end
    forces of the fully restrained member. Moving them to the right-hand
    side turns member loads into equivalent joint loads.
    """
    k_contributions = []
    f_contributions = []
    for loading in loadings:
        member = loading.member
        dof_map = dofs.element_dof_map(member.start.id, member.end.id)
        k_contributions.append((dof_map, member_global_stiffness(member)))
        _, c, s = member_geometry(member)
        T = member_transform(c, s)
        f_contributions.append((dof_map, -(T.T @ loading.fixed_end_forces)))

    for node_id, action in model.nodal_actions.items():
        f_contributions.append((
            dofs.node_dofs(node_id),
            np.array([action.fx, action.fy, action.mz], dtype=float),
        ))

    K = assemble_global_K(dofs.ndof, k_contributions)
    F = assemble_global_F(dofs.ndof, f_contributions)
    logger.debug("Assembled %d DOFs: %s", dofs.ndof, ", ".join(dofs.labels))
    return K, F


def solve_displacements(
    model: StructureModel,
    loadings: Sequence[MemberLoading],
    dofs: DOFManager,
    cond_limit: float,
) -> np.ndarray:
    K, F = build_system(model, loadings, dofs)
    return solve_linear(K, F, cond_limit=cond_limit)
