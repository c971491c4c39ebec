# beamcraft/kernel/solve.py
"""Linear system solver with mechanism detection."""

import logging

import numpy as np

logger = logging.getLogger(__name__)


class MechanismError(RuntimeError):
    """Raised when structure is unstable or ill-conditioned."""
    pass


def solve_linear(
    K: np.ndarray,
    F: np.ndarray,
    cond_limit: float = 1e12
) -> np.ndarray:
    """
    Solve K·d = F for the free DOFs.

    Held DOFs are already excluded from K by the DOF maps, so no
    partitioning happens here.

    Args:
        K: Reduced stiffness matrix (ndof x ndof)
        F: Reduced load vector (ndof,)
        cond_limit: Max condition number before raising MechanismError

    Returns:
        d: Displacement vector (ndof,)

    Raises:
        MechanismError: If structure is unstable (cond > cond_limit)
    """
    ndof = K.shape[0]
    if ndof == 0:
        return np.zeros(0, dtype=float)

    cond = np.linalg.cond(K)
    logger.debug("Solving %d DOFs, cond=%.3e", ndof, cond)
    if not np.isfinite(cond) or cond > cond_limit:
        raise MechanismError(
            f"Unstable system (cond={cond:.2e}). Check supports. Need cond < {cond_limit:.0e}."
        )

    return np.linalg.solve(K, F)
