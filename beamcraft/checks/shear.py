# beamcraft/checks/shear.py
"""
Shear design of concrete beams per BS 8110 (Tables 3.7 and 3.8).

Each sample (x, V) of a shear envelope is classified:

    v = |V|·10³/(b·d)                                     N/mm²
    vc = 0.79·(100As/bd)^⅓·(400/d)^¼/γm·(fcu/25)^⅓        100As/bd ≤ 3, 400/d ≥ 1, fcu ≤ 40
    vmax = min(0.8√fcu, 5)

    OK       v ≤ vc           nominal or minimum links
    WARNING  vc < v ≤ vmax    designed links s = Asv·0.87·fyv / (b·max(v - vc, 0.4))
    FAIL     v > vmax         section must be resized, no spacing

Spacings are capped at min(0.75d, 300) and floored to whole millimetres.
Adjacent samples with the same status merge into one zone.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import DEFAULT_DESIGN_CONFIG, DesignConfig

logger = logging.getLogger(__name__)


class ShearStatus(str, Enum):
    OK = "OK"
    WARNING = "WARNING"
    FAIL = "FAIL"


CONDITION_NOMINAL = "Condition (i)"
CONDITION_MINIMUM = "Condition (ii)"
CONDITION_DESIGNED = "Condition (iii)"
CONDITION_FAIL = "FAIL"


@dataclass(frozen=True)
class ShearPointResult:
    x: float
    V: float
    v: float
    status: ShearStatus
    condition: str
    spacing: Optional[int]


@dataclass(frozen=True)
class ShearZone:
    start_x: float
    end_x: float
    status: ShearStatus
    condition: str
    provided_spacing: Optional[int]
    instruction: str = ""


def normalize_envelope(samples: Iterable[Tuple[float, float]]) -> List[Tuple[float, float]]:
    """Drop non-finite samples, keep the larger |V| at repeated x, sort by x."""
    by_x = {}
    for x, V in samples:
        if not (math.isfinite(x) and math.isfinite(V)):
            continue
        existing = by_x.get(x)
        if existing is None or abs(V) > abs(existing):
            by_x[x] = V
    return sorted(by_x.items())


class ShearDesignEngine:
    """Classifies a shear envelope and sizes links zone by zone."""

    def __init__(self, config: DesignConfig = None):
        self.config = config or DEFAULT_DESIGN_CONFIG

    def concrete_shear_stress(self, As: float, b: float, d: float, fcu: float = None) -> float:
        cfg = self.config
        fcu = cfg.fcu if fcu is None else fcu
        steel = min(100.0 * As / (b * d), cfg.shear_steel_ratio_cap)
        depth = max(400.0 / d, 1.0)
        grade = (min(fcu, cfg.shear_fcu_cap) / 25.0) ** (1.0 / 3.0)
        return 0.79 * steel ** (1.0 / 3.0) * depth ** 0.25 / cfg.shear_gamma_m * grade

    def maximum_shear_stress(self, fcu: float = None) -> float:
        cfg = self.config
        fcu = cfg.fcu if fcu is None else fcu
        return min(cfg.vmax_factor * math.sqrt(fcu), cfg.vmax_absolute)

    def maximum_spacing(self, d: float) -> int:
        cfg = self.config
        return max(1, math.floor(min(cfg.link_spacing_depth_factor * d, cfg.max_link_spacing)))

    def link_spacing(self, Asv: float, fyv: float, b: float, d: float, excess_stress: float) -> int:
        """
        Spacing (mm) for the stress carried by links, s = Asv·0.87·fyv/(b·(v - vc)).

        The excess stress is taken as at least 0.4 N/mm², the minimum links of
        BS 8110 Table 3.7 condition (ii).
        """
        cfg = self.config
        stress = max(excess_stress, cfg.min_link_stress)
        spacing = Asv * cfg.steel_factor * fyv / (b * stress)
        return max(1, math.floor(min(spacing, self.maximum_spacing(d))))

    def classify(
        self,
        envelope: Iterable[Tuple[float, float]],
        b: float,
        d: float,
        As: float,
        Asv: float,
        fcu: float = None,
        fyv: float = None,
    ) -> List[ShearPointResult]:
        """
        Classify every sample of a shear envelope.

        Args:
            envelope: (x [m], V [kN]) pairs
            b, d: Web width and effective depth (mm)
            As: Tension steel in use (mm²)
            Asv: Area of the link legs (mm²)
            fcu, fyv: Override config strengths (N/mm²)
        """
        cfg = self.config
        fcu = cfg.fcu if fcu is None else fcu
        fyv = cfg.fyv if fyv is None else fyv
        for name, value in (("b", b), ("d", d), ("As", As), ("Asv", Asv), ("fcu", fcu), ("fyv", fyv)):
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be a finite number > 0, got {value}")

        vc = self.concrete_shear_stress(As, b, d, fcu)
        vmax = self.maximum_shear_stress(fcu)
        results = []
        for x, V in normalize_envelope(envelope):
            v = abs(V) * 1e3 / (b * d)
            if v > vmax:
                status, condition, spacing = ShearStatus.FAIL, CONDITION_FAIL, None
            else:
                if v < 0.5 * vc:
                    condition = CONDITION_NOMINAL
                elif v <= vc + cfg.min_link_stress:
                    condition = CONDITION_MINIMUM
                else:
                    condition = CONDITION_DESIGNED
                if v <= vc:
                    status = ShearStatus.OK
                    if condition == CONDITION_NOMINAL:
                        spacing = self.maximum_spacing(d)
                    else:
                        spacing = self.link_spacing(Asv, fyv, b, d, 0.0)
                else:
                    status = ShearStatus.WARNING
                    spacing = self.link_spacing(Asv, fyv, b, d, v - vc)
            results.append(ShearPointResult(x, V, v, status, condition, spacing))
        return results

    def merge_zones(self, points: Sequence[ShearPointResult]) -> List[ShearZone]:
        """
        Merge runs of samples sharing a status.

        A zone spans its first to last sample, takes the smallest spacing in
        the run and the condition of its largest |V| sample.
        """
        zones = []
        run: List[ShearPointResult] = []
        for point in points:
            if run and point.status is not run[0].status:
                zones.append(self._zone(run))
                run = []
            run.append(point)
        if run:
            zones.append(self._zone(run))

        if len(zones) == 1 and zones[0].status is not ShearStatus.FAIL:
            only = zones[0]
            zones[0] = ShearZone(
                only.start_x, only.end_x, only.status, only.condition, only.provided_spacing,
                f"Provide 2-leg links at {only.provided_spacing}mm c/c throughout.",
            )
        return zones

    def design_zones(
        self,
        envelope: Iterable[Tuple[float, float]],
        b: float,
        d: float,
        As: float,
        Asv: float,
        fcu: float = None,
        fyv: float = None,
    ) -> List[ShearZone]:
        """Classify an envelope and return its merged zones with instructions."""
        zones = self.merge_zones(self.classify(envelope, b, d, As, Asv, fcu, fyv))
        failing = [z for z in zones if z.status is ShearStatus.FAIL]
        if failing:
            logger.warning("Shear FAIL in %d zone(s); section must be resized", len(failing))
        return zones

    @staticmethod
    def _zone(run: Sequence[ShearPointResult]) -> ShearZone:
        governing = max(run, key=lambda p: abs(p.V))
        spacings = [p.spacing for p in run if p.spacing is not None]
        spacing = min(spacings) if spacings else None
        start, end = run[0].x, run[-1].x
        if run[0].status is ShearStatus.FAIL:
            instruction = (
                f"From x = {start:.2f}m to x = {end:.2f}m: section fails in shear "
                f"(v > vmax). Increase b or d."
            )
        else:
            instruction = (
                f"From x = {start:.2f}m to x = {end:.2f}m, provide 2-leg links "
                f"at {spacing}mm c/c."
            )
        return ShearZone(
            start_x=start,
            end_x=end,
            status=run[0].status,
            condition=governing.condition,
            provided_spacing=spacing,
            instruction=instruction,
        )
