# beamcraft/kernel/__init__.py
"""
Analysis kernel: DOF indexing, scatter-add assembly and the linear solve.

Nothing in here knows about loads or design codes; beam.py and frame.py
feed it member contributions and read back displacements.
"""

from .dof import DOFManager, TranslationGroup, group_nodes
from .assemble import assemble_global_K, assemble_global_F, gather
from .solve import solve_linear, MechanismError

__all__ = [
    "DOFManager",
    "TranslationGroup",
    "group_nodes",
    "assemble_global_K",
    "assemble_global_F",
    "gather",
    "solve_linear",
    "MechanismError",
]
