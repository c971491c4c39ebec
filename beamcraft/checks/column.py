# beamcraft/checks/column.py
"""Short braced column design per BS 8110 clause 3.8.4.3 (axially loaded)."""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import DEFAULT_DESIGN_CONFIG, DesignConfig

logger = logging.getLogger(__name__)


class ColumnStatus(str, Enum):
    SUCCESS = "SUCCESS"
    TERMINATED = "TERMINATED"


@dataclass(frozen=True)
class ColumnDesignResult:
    status: ColumnStatus
    message: str
    slenderness_ratio: float
    steel_required_area: Optional[int] = None   # mm², rounded up
    provided_steel: Optional[str] = None        # e.g. "4 Y16"
    provided_area: Optional[int] = None         # mm², rounded up
    links: Optional[str] = None                 # e.g. "R6 @ 192mm c/c"
    utilization_ratio: Optional[float] = None
    bar_count: Optional[int] = None
    bar_diameter: Optional[int] = None
    link_diameter: Optional[int] = None
    link_spacing: Optional[int] = None


def bar_area(diameter: float) -> float:
    return math.pi * diameter ** 2 / 4.0


class ColumnDesignEngine:
    """Sizes longitudinal bars and links for a short braced column."""

    def __init__(self, config: DesignConfig = None):
        self.config = config or DEFAULT_DESIGN_CONFIG

    def slenderness(self, b: float, h: float, clear_height: float) -> float:
        effective_height = self.config.effective_length_factor * clear_height
        return effective_height / min(b, h)

    def required_steel(self, load: float, gross_area: float, fcu: float, fy: float) -> float:
        """
        Asc from N = 0.4·fcu·(Ag - Asc) + 0.75·fy·Asc, solved directly.

        Negative when concrete alone carries the load.
        """
        cfg = self.config
        N = load * 1e3
        concrete = cfg.column_concrete_factor * fcu
        return (N - concrete * gross_area) / (cfg.column_steel_factor * fy - concrete)

    def select_bars(self, area: float):
        """(count, diameter): first standard size needing an even count ≤ the practical maximum."""
        cfg = self.config
        for diameter in cfg.column_bar_sizes:
            count = max(cfg.column_min_bars, math.ceil(area / bar_area(diameter)))
            if count % 2:
                count += 1
            if count <= cfg.column_max_bars or diameter == cfg.column_bar_sizes[-1]:
                return count, diameter
        raise ValueError("column_bar_sizes must not be empty")

    def select_links(self, bar_diameter: int, b: float, h: float):
        """(diameter, spacing) of links for a given main bar."""
        cfg = self.config
        needed = max(cfg.min_link_diameter, bar_diameter / 4.0)
        diameter = next((s for s in cfg.link_sizes if s >= needed), cfg.link_sizes[-1])
        spacing = math.floor(min(12 * bar_diameter, min(b, h), cfg.column_link_spacing_cap))
        return diameter, spacing

    def design(
        self,
        load: float,
        b: float,
        h: float,
        clear_height: float,
        fcu: float = None,
        fy: float = None,
    ) -> ColumnDesignResult:
        """
        Design a short braced column for an axial load.

        Args:
            load: Axial design load (kN), compression positive
            b, h: Section dimensions (mm)
            clear_height: Clear height between restraints (mm)
            fcu, fy: Override config strengths (N/mm²)

        Returns:
            ColumnDesignResult, TERMINATED for slender or over-reinforced sections
        """
        cfg = self.config
        fcu = cfg.fcu if fcu is None else fcu
        fy = cfg.fy if fy is None else fy
        for name, value in (("load", load), ("b", b), ("h", h), ("clear_height", clear_height)):
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if load <= 0.0:
            raise ValueError(f"Axial load must be compressive (> 0 kN), got {load}")
        if b <= 0.0 or h <= 0.0 or clear_height <= 0.0:
            raise ValueError(
                f"Column needs positive dimensions (b={b}, h={h}, clear_height={clear_height})"
            )

        ratio = self.slenderness(b, h, clear_height)
        if ratio > cfg.short_column_limit:
            message = (
                f"Column is slender (le/b = {ratio:.2f} > {cfg.short_column_limit:g}); "
                f"short column design does not apply."
            )
            logger.warning("Column design TERMINATED: %s", message)
            return ColumnDesignResult(ColumnStatus.TERMINATED, message, ratio)

        gross = b * h
        required = max(self.required_steel(load, gross, fcu, fy), cfg.column_steel_min * gross)
        maximum = cfg.column_steel_max * gross
        if required > maximum:
            message = (
                f"Section too small: required steel {math.ceil(required)} mm² exceeds "
                f"{cfg.column_steel_max:.0%} of the gross area ({math.ceil(maximum)} mm²). "
                f"Resize the column."
            )
            logger.warning("Column design TERMINATED: %s", message)
            return ColumnDesignResult(ColumnStatus.TERMINATED, message, ratio)

        count, diameter = self.select_bars(required)
        provided = count * bar_area(diameter)
        link_diameter, link_spacing = self.select_links(diameter, b, h)

        return ColumnDesignResult(
            status=ColumnStatus.SUCCESS,
            message="Design complete (BS 8110 short braced column).",
            slenderness_ratio=ratio,
            steel_required_area=math.ceil(required),
            provided_steel=f"{count} Y{diameter}",
            provided_area=math.ceil(provided),
            links=f"R{link_diameter} @ {link_spacing}mm c/c",
            utilization_ratio=round(required / provided, 2),
            bar_count=count,
            bar_diameter=diameter,
            link_diameter=link_diameter,
            link_spacing=link_spacing,
        )
