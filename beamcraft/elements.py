# beamcraft/elements.py
# Slope-deflection member: geometry, end-moment equation, local stiffness + transform

import numpy as np

from .loads import simple_support_reactions
from .model import Member


def member_geometry(member: Member):
    L = member.length
    c = member.dx / L
    s = member.dy / L
    return L, c, s


def slope_deflection_moment(
    fem: float, EI: float, L: float, theta_near: float, theta_far: float, psi: float
) -> float:
    """M_near = FEM + (2EI/L)(2θ_near + θ_far - 3ψ), anticlockwise positive."""
    return fem + (2.0 * EI / L) * (2.0 * theta_near + theta_far - 3.0 * psi)


def member_local_stiffness(EI: float, L: float) -> np.ndarray:
    """
    Flexural stiffness in member-local coords, axial terms omitted (rigid members).
    DOF order: [v_i, rz_i, v_j, rz_j]

    Rows 1 and 3 are the slope-deflection equation written for each end with
    ψ = (v_j - v_i)/L; rows 0 and 2 are the matching end shears.
    """
    L2 = L * L
    L3 = L2 * L
    k = np.array([
        [ 12*EI/L3,   6*EI/L2, -12*EI/L3,   6*EI/L2],
        [  6*EI/L2,    4*EI/L,  -6*EI/L2,    2*EI/L],
        [-12*EI/L3,  -6*EI/L2,  12*EI/L3,  -6*EI/L2],
        [  6*EI/L2,    2*EI/L,  -6*EI/L2,    4*EI/L],
    ], dtype=float)
    return k


def member_transform(c: float, s: float) -> np.ndarray:
    """
    4x6 transform from global end DOFs [ux_i, uy_i, rz_i, ux_j, uy_j, rz_j]
    to local [v_i, rz_i, v_j, rz_j]. Only the transverse component survives.
    """
    T = np.array([
        [-s,  c, 0,  0, 0, 0],
        [ 0,  0, 1,  0, 0, 0],
        [ 0,  0, 0, -s, c, 0],
        [ 0,  0, 0,  0, 0, 1],
    ], dtype=float)
    return T


def member_global_stiffness(member: Member) -> np.ndarray:
    L, c, s = member_geometry(member)
    k_local = member_local_stiffness(member.EI, L)
    T = member_transform(c, s)
    return T.T @ k_local @ T


def fixed_end_forces(member: Member, fem_start: float, fem_end: float) -> np.ndarray:
    """
    Local end forces of the fully restrained member: [V_i, M_i, V_j, M_j].

    Shears act in local +y and include the moment couple (M_i + M_j)/L, so a
    settlement-only FEM produces the matching pair of end shears.
    """
    L = member.length
    r_start, r_end = simple_support_reactions(member.loads, L)
    couple = (fem_start + fem_end) / L
    return np.array([r_start + couple, fem_start, r_end - couple, fem_end], dtype=float)
