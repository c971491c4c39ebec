# beamcraft/frame.py
"""
2D FRAME SOLVER
===============

Rectilinear frames of horizontal BEAM and vertical COLUMN members joined
at shared nodes. Members are axially rigid, which ties translations
together:

    floor        nodes linked by beams     → one horizontal sway DOF
    column line  nodes linked by columns   → one vertical DOF

A group whose nodes include a support restraining that direction is held.
Every node that is not FIXED keeps its own rotation.

SIDESWAY CLASSIFICATION:
------------------------
1. Solve with every unrestrained floor held against sway (braced trial).
2. For each held floor, the holding force is the residual of horizontal
   equilibrium over the floor's nodes.
3. If any holding force exceeds the tolerance the frame sways: solve
   again with the sway DOFs released. Column end moments then carry the
   -6EIΔ/L² term through the chord rotation ψ = Δ/L.
4. Otherwise the braced trial is the answer.

A frame whose floors are all restrained is braced without a trial.
Support settlements are ignored in frame analysis.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .assembly import MemberLoading, member_loadings, solve_displacements
from .config import AnalysisOptions, DEFAULT_OPTIONS
from .diagrams import compute_member_diagram
from .fem import FEMRecord
from .kernel import DOFManager, group_nodes
from .model import MemberKind, ModelValidationError, StructureModel
from .post import (
    chain_axial_forces,
    end_moment_records,
    group_residual,
    load_scale,
    member_end_forces,
    nodal_force_sums,
    support_reactions,
    with_axial,
)
from .results import AnalysisResult, MemberEndForces

logger = logging.getLogger(__name__)


def validate_frame(model: StructureModel):
    for member in model.members:
        if member.kind is MemberKind.INCLINED:
            raise ModelValidationError(
                f"Member {member.id} is inclined; frame analysis supports beams and columns only."
            )
    model.check_connected()


def frame_dofs(model: StructureModel, hold_sway: bool) -> DOFManager:
    """
    Number rotations, then floors (x), then column lines (y).

    hold_sway pins every unrestrained floor for the braced trial.
    """
    dofs = DOFManager()
    node_ids = list(model.nodes)

    for node_id in node_ids:
        support = model.nodes[node_id].support
        dofs.add_rotation(node_id, support is not None and support.kind.restrains_rotation)

    beams = [(m.start.id, m.end.id) for m in model.members if m.kind is MemberKind.BEAM]
    columns = [(m.start.id, m.end.id) for m in model.members if m.kind is MemberKind.COLUMN]

    for floor in group_nodes(node_ids, beams):
        restrained = [nid for nid in floor if _restrains(model, nid, "x")]
        dofs.add_translation_group("x", floor, restrained, held=hold_sway)
    for line in group_nodes(node_ids, columns):
        restrained = [nid for nid in line if _restrains(model, nid, "y")]
        dofs.add_translation_group("y", line, restrained)
    return dofs


def _restrains(model: StructureModel, node_id: str, axis: str) -> bool:
    support = model.nodes[node_id].support
    if support is None:
        return False
    return support.kind.restrains_x if axis == "x" else support.kind.restrains_y


def _solve_forces(
    model: StructureModel,
    loadings: List[MemberLoading],
    dofs: DOFManager,
    options: AnalysisOptions,
) -> Tuple[List[MemberEndForces], dict]:
    d = solve_displacements(model, loadings, dofs, options.cond_limit)
    forces = [member_end_forces(loading, dofs, d) for loading in loadings]
    return forces, nodal_force_sums(model, forces)


def holding_forces(model: StructureModel, dofs: DOFManager, sums: dict) -> np.ndarray:
    """Residual horizontal force at each unrestrained floor of a braced solve."""
    floors = [g for g in dofs.groups_along("x") if not g.restrained]
    return np.array([group_residual(model, g, sums) for g in floors], dtype=float)


def solve_frame(model: StructureModel, options: Optional[AnalysisOptions] = None) -> AnalysisResult:
    """
    Solve a rectilinear frame and classify it as braced or swaying.

    Parameters:
    -----------
    model : StructureModel
        Beams and columns only, connected
    options : AnalysisOptions, optional
        Diagram resolution, conditioning limit and sway tolerance

    Returns:
    --------
    AnalysisResult
        sidesway is True when the frame needed sway DOFs, False otherwise.
        Reactions carry x for FIXED/PINNED supports and m for FIXED ones.

    Raises:
    -------
    ModelValidationError
        Inclined members or a disconnected structure
    MechanismError
        Singular or ill-conditioned system
    """
    options = options or DEFAULT_OPTIONS
    validate_frame(model)

    loadings = member_loadings(model, include_settlement=False)
    dofs = frame_dofs(model, hold_sway=True)
    forces, sums = _solve_forces(model, loadings, dofs, options)

    holding = holding_forces(model, dofs, sums)
    if holding.size == 0:
        sidesway = False
        logger.debug("All floors restrained; frame is braced")
    else:
        tolerance = max(options.sway_tolerance * load_scale(model), options.sway_floor)
        sidesway = bool(np.any(np.abs(holding) > tolerance))
        logger.info(
            "Sidesway %s (max holding force %.3e, tolerance %.3e)",
            "present" if sidesway else "absent",
            float(np.max(np.abs(holding))),
            tolerance,
        )
        if sidesway:
            dofs = frame_dofs(model, hold_sway=False)
            forces, sums = _solve_forces(model, loadings, dofs, options)

    reactions = support_reactions(model, dofs, sums, include_x=True)
    forces = with_axial(forces, chain_axial_forces(model, dofs, sums, reactions))

    diagrams = {
        member.id: tuple(compute_member_diagram(member, f, options.n_points))
        for member, f in zip(model.members, forces)
    }

    return AnalysisResult(
        mode="frame",
        fems=tuple(FEMRecord(ld.member.id, ld.fem_start, ld.fem_end) for ld in loadings),
        end_moments=tuple(end_moment_records(forces)),
        reactions=tuple(reactions),
        sidesway=sidesway,
        diagrams=diagrams,
        member_forces=tuple(forces),
        dof_labels=tuple(dofs.labels),
    )
