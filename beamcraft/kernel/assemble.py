# beamcraft/kernel/assemble.py
"""
ASSEMBLY: Global Matrix Assembly over Reduced DOF Maps
======================================================

PURPOSE:
--------
Scatter-add of member contributions into the global stiffness matrix and
load vector. The DOF maps produced by DOFManager already exclude held
DOFs (entry None), so the assembled system is the reduced one and can be
solved directly.

USAGE:
------
    contributions = []
    for member in model.members:
        dof_map = dofs.element_dof_map(member.start.id, member.end.id)
        ke = member_global_stiffness(member)
        contributions.append((dof_map, ke))

    K = assemble_global_K(dofs.ndof, contributions)
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

DofMap = Sequence[Optional[int]]


def assemble_global_K(
    ndof: int,
    contributions: List[Tuple[DofMap, np.ndarray]]
) -> np.ndarray:
    """
    Assemble global stiffness matrix from member contributions.

    ALGORITHM:
    ----------
    K = zeros(ndof × ndof)
    for each member:
        for each (a, b) in ke with dof_map[a], dof_map[b] not None:
            K[dof_map[a], dof_map[b]] += ke[a, b]

    Several nodes may point at the same translation DOF (a floor or a
    column line); their contributions simply add.

    Parameters:
    -----------
    ndof : int
        Number of free DOFs
    contributions : List[Tuple[DofMap, np.ndarray]]
        (dof_map, ke) per member, ke in global coordinates with shape
        (len(dof_map), len(dof_map))

    Returns:
    --------
    np.ndarray
        Global stiffness matrix K, shape (ndof, ndof)
    """
    K = np.zeros((ndof, ndof), dtype=float)

    for dof_map, ke in contributions:
        n_element_dofs = len(dof_map)

        assert ke.shape == (n_element_dofs, n_element_dofs), \
            f"Element ke shape {ke.shape} doesn't match dof_map length {n_element_dofs}"

        for a in range(n_element_dofs):
            ia = dof_map[a]
            if ia is None:
                continue
            for b in range(n_element_dofs):
                ib = dof_map[b]
                if ib is None:
                    continue
                K[ia, ib] += ke[a, b]

    return K


def assemble_global_F(
    ndof: int,
    contributions: List[Tuple[DofMap, np.ndarray]]
) -> np.ndarray:
    """
    Assemble global load vector from member or nodal contributions.

    Same scatter-add as assemble_global_K. Entries mapped to None are held
    DOFs; their share ends up in the reactions instead.
    """
    F = np.zeros(ndof, dtype=float)

    for dof_map, fe in contributions:
        n_element_dofs = len(dof_map)

        assert fe.shape == (n_element_dofs,), \
            f"Element fe shape {fe.shape} doesn't match dof_map length {n_element_dofs}"

        for a in range(n_element_dofs):
            ia = dof_map[a]
            if ia is not None:
                F[ia] += fe[a]

    return F


def gather(d: np.ndarray, dof_map: DofMap) -> np.ndarray:
    """Pick a member's end displacements out of the global vector (held DOFs → 0)."""
    return np.array([0.0 if i is None else d[i] for i in dof_map], dtype=float)
