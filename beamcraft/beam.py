# beamcraft/beam.py
"""
CONTINUOUS BEAM SOLVER
======================

A chain of collinear, horizontal BEAM members solved by slope-deflection.

Unknowns:
- a rotation at every node that is not FIXED
- a vertical displacement at every node without a support, which covers
  cantilever overhangs and intermediate unsupported joints

Support settlements enter through the fixed-end moments (6EIδ/L² at both
ends of each affected span); supported nodes are otherwise held at zero.
Horizontal equilibrium is not part of beam analysis: no horizontal
reactions are reported and sidesway is None.
"""

import logging
from typing import Optional

from .assembly import member_loadings, solve_displacements
from .config import AnalysisOptions, DEFAULT_OPTIONS
from .diagrams import compute_member_diagram
from .fem import FEMRecord
from .kernel import DOFManager
from .model import MemberKind, ModelValidationError, StructureModel, settlement_differentials
from .post import end_moment_records, member_end_forces, nodal_force_sums, support_reactions
from .results import AnalysisResult

logger = logging.getLogger(__name__)


def validate_beam(model: StructureModel):
    """Reject anything that is not a single straight, non-overlapping beam line."""
    for member in model.members:
        if member.kind is not MemberKind.BEAM:
            raise ModelValidationError(
                f"Member {member.id} is a {member.kind.value}; beam analysis accepts beams only."
            )
    levels = {round(node.y, 9) for node in model.nodes.values()}
    if len(levels) > 1:
        raise ModelValidationError(
            f"Beam members are not collinear (node levels {sorted(levels)})."
        )
    model.check_connected()
    ordered = sorted(model.members, key=lambda m: m.start.x)
    for left, right in zip(ordered, ordered[1:]):
        if right.start.x < left.end.x:
            raise ModelValidationError(f"Members {left.id} and {right.id} overlap.")


def beam_dofs(model: StructureModel) -> DOFManager:
    dofs = DOFManager()
    nodes = sorted(model.nodes.values(), key=lambda n: n.x)
    for node in nodes:
        fixed = node.support is not None and node.support.kind.restrains_rotation
        dofs.add_rotation(node.id, fixed)
    for node in nodes:
        restrained = [node.id] if node.support is not None else []
        dofs.add_translation_group("y", [node.id], restrained)
    return dofs


def solve_beam(model: StructureModel, options: Optional[AnalysisOptions] = None) -> AnalysisResult:
    """
    Solve a continuous beam.

    Parameters:
    -----------
    model : StructureModel
        Beams only, all at the same level, connected
    options : AnalysisOptions, optional
        Diagram resolution and conditioning limit

    Returns:
    --------
    AnalysisResult
        FEMs, end moments, vertical (and fixed-end moment) reactions,
        diagrams per member and the support chain's settlement differentials

    Raises:
    -------
    ModelValidationError
        Structure is not a valid beam line
    MechanismError
        Supports do not prevent a mechanism
    """
    options = options or DEFAULT_OPTIONS
    validate_beam(model)

    loadings = member_loadings(model, include_settlement=True)
    dofs = beam_dofs(model)
    logger.debug("Beam with %d members, %d DOFs", len(model.members), dofs.ndof)

    d = solve_displacements(model, loadings, dofs, options.cond_limit)
    forces = [member_end_forces(loading, dofs, d) for loading in loadings]
    sums = nodal_force_sums(model, forces)
    reactions = support_reactions(model, dofs, sums, include_x=False)

    diagrams = {
        member.id: tuple(compute_member_diagram(member, f, options.n_points))
        for member, f in zip(model.members, forces)
    }

    return AnalysisResult(
        mode="beam",
        fems=tuple(FEMRecord(ld.member.id, ld.fem_start, ld.fem_end) for ld in loadings),
        end_moments=tuple(end_moment_records(forces)),
        reactions=tuple(reactions),
        sidesway=None,
        diagrams=diagrams,
        member_forces=tuple(forces),
        settlement_differentials=tuple(settlement_differentials(model.supported_nodes())),
        dof_labels=tuple(dofs.labels),
    )
