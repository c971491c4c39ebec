# beamcraft/checks/config.py
"""
Design configuration: materials, detailing defaults and code constants.

Every design engine takes a DesignConfig explicitly; DEFAULT_DESIGN_CONFIG
holds the BS 8110 values used when none is given.
"""

from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class DesignConfig:
    """Materials (N/mm²), detailing (mm) and code constants."""

    # Materials
    fcu: float = 30.0
    fy: float = 460.0
    fyv: float = 250.0

    # Detailing
    cover: float = 25.0
    link_diameter: float = 10.0
    main_bar_diameter: float = 16.0

    # Flexure
    k_limit: float = 0.156
    lever_arm_cap: float = 0.95
    steel_factor: float = 0.87
    high_yield_threshold: float = 460.0
    as_min_high_yield: float = 0.0013
    as_min_mild: float = 0.0024
    as_max_ratio: float = 0.04
    flange_span_factor: float = 0.7
    t_flange_divisor: float = 5.0
    l_flange_divisor: float = 10.0
    beam_bar_sizes: Tuple[int, ...] = (12, 16, 20, 25, 32)
    beam_min_bars: int = 2
    beam_max_bars: int = 6

    # Shear
    shear_gamma_m: float = 1.25
    shear_steel_ratio_cap: float = 3.0
    shear_fcu_cap: float = 40.0
    vmax_factor: float = 0.8
    vmax_absolute: float = 5.0
    min_link_stress: float = 0.4
    link_spacing_depth_factor: float = 0.75
    max_link_spacing: float = 300.0

    # Columns
    short_column_limit: float = 12.0
    effective_length_factor: float = 1.0
    column_concrete_factor: float = 0.4
    column_steel_factor: float = 0.75
    column_steel_min: float = 0.004
    column_steel_max: float = 0.06
    column_bar_sizes: Tuple[int, ...] = (12, 16, 20, 25, 32)
    column_min_bars: int = 4
    column_max_bars: int = 8
    link_sizes: Tuple[int, ...] = (6, 8, 10, 12)
    min_link_diameter: float = 6.0
    column_link_spacing_cap: float = 300.0

    # Serviceability
    crack_spacing_constant: float = 47000.0
    max_clear_spacing: float = 300.0
    flanged_ratio_factor: float = 0.8
    max_modification_factor: float = 2.0
    service_load_factor: float = 1.5     # ultimate / service moment
    steel_modulus: float = 200000.0
    crack_width_limit: float = 0.3       # mm

    def __post_init__(self):
        for name in ("fcu", "fy", "fyv"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")
        if self.cover < 0.0:
            raise ValueError(f"cover must be >= 0, got {self.cover}")

    def with_overrides(self, **changes) -> "DesignConfig":
        return replace(self, **changes)

    @property
    def as_min_ratio(self) -> float:
        if self.fy >= self.high_yield_threshold:
            return self.as_min_high_yield
        return self.as_min_mild


# Global defaults instance
DEFAULT_DESIGN_CONFIG = DesignConfig()
