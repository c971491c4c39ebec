# beamcraft/config.py
"""
Analysis options and defaults.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class AnalysisOptions:
    """Numerical settings shared by the beam and frame solvers."""

    # Diagram sampling: evenly spaced points per member, load discontinuities added on top
    n_points: int = 21

    # Max condition number of the assembled system before MechanismError
    cond_limit: float = 1e12

    # Sidesway classification: a floor sways when its holding force exceeds
    # sway_tolerance × applied load scale (never less than sway_floor, kN)
    sway_tolerance: float = 1e-9
    sway_floor: float = 1e-9

    def __post_init__(self):
        if self.n_points < 2:
            raise ValueError(f"n_points must be >= 2, got {self.n_points}")
        if self.cond_limit <= 0.0:
            raise ValueError(f"cond_limit must be > 0, got {self.cond_limit}")

    def with_overrides(self, **changes) -> "AnalysisOptions":
        return replace(self, **changes)


# Global defaults instance
DEFAULT_OPTIONS = AnalysisOptions()
