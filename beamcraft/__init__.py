# beamcraft - 2D beam/frame slope-deflection analysis and RC design
__version__ = "0.1.0"

from .loads import PointLoad, UDL, VDL
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
    accumulate_nodal_actions,
    settlement_differentials,
    support_chain,
)
from .fem import FEMRecord, fixed_end_moments, fixed_end_moment_table
from .config import AnalysisOptions, DEFAULT_OPTIONS
from .kernel import MechanismError
from .results import AnalysisResult, DiagramPoint, EndMomentRecord, Reaction
from .beam import solve_beam
from .frame import solve_frame
from .schema import build_model

__all__ = [
    "PointLoad",
    "UDL",
    "VDL",
    "Member",
    "MemberKind",
    "ModelValidationError",
    "NodalAction",
    "Node",
    "SectionType",
    "StructureModel",
    "Support",
    "SupportKind",
    "accumulate_nodal_actions",
    "settlement_differentials",
    "support_chain",
    "FEMRecord",
    "fixed_end_moments",
    "fixed_end_moment_table",
    "AnalysisOptions",
    "DEFAULT_OPTIONS",
    "MechanismError",
    "AnalysisResult",
    "DiagramPoint",
    "EndMomentRecord",
    "Reaction",
    "solve_beam",
    "solve_frame",
    "build_model",
]
