# beamcraft/checks/flexure.py
"""
Flexural design of singly reinforced concrete beams per BS 8110.

A beam is designed in two zones:
- support (hogging): rectangular, web width b, steel in the top face
- span (sagging): rectangular, L or T; a flanged section uses the
  effective flange width while the neutral axis stays in the slab

    d  = h - cover - link - bar/2
    K  = M·10⁶ / (b·d²·fcu)                  K > 0.156 → compression steel needed
    z  = d·(0.5 + √(0.25 - K/0.9)) ≤ 0.95d
    x  = (d - z)/0.45
    As = M·10⁶ / (0.87·fy·z)

Flanged span zone (lz = 0.7 × continuous span):
    T-beam: bf = bw + lz/5
    L-beam: bf = bw + lz/10
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..model import SectionType
from ..results import DiagramPoint
from .column import bar_area
from .config import DEFAULT_DESIGN_CONFIG, DesignConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlexuralZoneResult:
    """Design of one zone. K, z, x and As are None when the zone could not be designed."""
    zone: str                       # "support" or "span"
    section_type: SectionType
    design_moment: float            # kNm
    section_width_used: float       # mm
    bf: Optional[float]             # effective flange width, mm
    K: Optional[float]
    z: Optional[float]              # mm
    x: Optional[float]              # mm
    As: Optional[float]             # mm²
    ok: bool
    message: Optional[str] = None


@dataclass(frozen=True)
class ZonedBeamDesignResult:
    d: float
    As_min: float
    As_max: float
    support: FlexuralZoneResult
    span: FlexuralZoneResult
    top_steel_required: Optional[float]
    bottom_steel_required: Optional[float]
    governing_steel_required: Optional[float]
    ok: bool
    messages: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ProvidedBars:
    count: int
    diameter: int       # mm
    area: float         # mm²
    label: str          # e.g. "4Y16"


def design_moments(points: Sequence[DiagramPoint]) -> Tuple[float, float]:
    """(hogging, sagging) design magnitudes from a sagging-positive moment diagram."""
    if not points:
        return 0.0, 0.0
    moments = [p.moment for p in points]
    return max(0.0, -min(moments)), max(0.0, max(moments))


class FlexuralDesignEngine:
    """Zone-based moment capacity and tension steel design."""

    def __init__(self, config: DesignConfig = None):
        self.config = config or DEFAULT_DESIGN_CONFIG

    def effective_depth(
        self,
        h: float,
        cover: float = None,
        link_diameter: float = None,
        bar_diameter: float = None,
    ) -> float:
        cfg = self.config
        cover = cfg.cover if cover is None else cover
        link_diameter = cfg.link_diameter if link_diameter is None else link_diameter
        bar_diameter = cfg.main_bar_diameter if bar_diameter is None else bar_diameter
        return h - cover - link_diameter - bar_diameter / 2.0

    def minimum_steel(self, b: float, h: float) -> float:
        return self.config.as_min_ratio * b * h

    def maximum_steel(self, b: float, h: float) -> float:
        return self.config.as_max_ratio * b * h

    def effective_flange_width(
        self,
        section_type: SectionType,
        bw: float,
        span: float,
        flange_width_limit: float = None,
    ) -> float:
        """Effective flange width (mm) for a continuous span (mm)."""
        cfg = self.config
        if section_type is SectionType.RECTANGULAR:
            return bw
        lz = cfg.flange_span_factor * span
        divisor = cfg.t_flange_divisor if section_type is SectionType.T else cfg.l_flange_divisor
        bf = bw + lz / divisor
        if flange_width_limit is not None and flange_width_limit > 0.0:
            bf = min(bf, flange_width_limit)
        return bf

    def moment_factor(self, moment: float, width: float, d: float) -> float:
        return moment * 1e6 / (width * d * d * self.config.fcu)

    def lever_arm(self, K: float, d: float) -> float:
        z = d * (0.5 + math.sqrt(0.25 - K / 0.9))
        return min(z, self.config.lever_arm_cap * d)

    def neutral_axis_depth(self, z: float, d: float) -> float:
        return (d - z) / 0.45

    def steel_area(self, moment: float, z: float) -> float:
        return moment * 1e6 / (self.config.steel_factor * self.config.fy * z)

    def _rectangular(
        self, zone: str, section_type: SectionType, moment: float, width: float,
        d: float, bf: Optional[float], note: Optional[str] = None,
    ) -> FlexuralZoneResult:
        K = self.moment_factor(moment, width, d)
        if K > self.config.k_limit:
            message = (
                f"K = {K:.3f} exceeds {self.config.k_limit}: compression reinforcement "
                f"required; increase section depth or width."
            )
            if note:
                message = f"{note} {message}"
            return FlexuralZoneResult(
                zone=zone, section_type=section_type, design_moment=moment,
                section_width_used=width, bf=bf, K=K, z=None, x=None, As=None,
                ok=False, message=message,
            )
        z = self.lever_arm(K, d)
        return FlexuralZoneResult(
            zone=zone, section_type=section_type, design_moment=moment,
            section_width_used=width, bf=bf, K=K, z=z,
            x=self.neutral_axis_depth(z, d), As=self.steel_area(moment, z),
            ok=True, message=note,
        )

    def design_zone(
        self,
        zone: str,
        moment: float,
        section_type: SectionType,
        bw: float,
        d: float,
        span: float = None,
        slab_thickness: float = None,
        flange_width_limit: float = None,
    ) -> FlexuralZoneResult:
        """
        Design one zone for a moment magnitude (kNm).

        L and T zones need the continuous span and the slab thickness; when
        the neutral axis falls below the slab the zone is redesigned as a
        rectangle of width bw.
        """
        if not math.isfinite(moment):
            raise ValueError(f"Design moment must be finite, got {moment}")
        if bw <= 0.0 or d <= 0.0:
            raise ValueError(f"Section needs b > 0 and d > 0 (b={bw}, d={d})")
        moment = abs(moment)

        if section_type is SectionType.RECTANGULAR:
            return self._rectangular(zone, section_type, moment, bw, d, None)

        if not span or span <= 0.0 or not slab_thickness or slab_thickness <= 0.0:
            return FlexuralZoneResult(
                zone=zone, section_type=section_type, design_moment=moment,
                section_width_used=bw, bf=None, K=None, z=None, x=None, As=None,
                ok=False,
                message=f"{section_type.value}-section needs a continuous span and slab thickness.",
            )

        bf = self.effective_flange_width(section_type, bw, span, flange_width_limit)
        flanged = self._rectangular(zone, section_type, moment, bf, d, bf)
        if not flanged.ok or flanged.x <= slab_thickness:
            return flanged
        return self._rectangular(
            zone, section_type, moment, bw, d, bf,
            note=f"Neutral axis below the {slab_thickness:g} mm slab; web width used.",
        )

    def design_beam(
        self,
        support_moment: float,
        span_moment: float,
        b: float,
        h: float,
        section_type: SectionType = SectionType.RECTANGULAR,
        span: float = None,
        slab_thickness: float = None,
        flange_width_limit: float = None,
        cover: float = None,
        link_diameter: float = None,
        bar_diameter: float = None,
    ) -> ZonedBeamDesignResult:
        """
        Design support and span zones of one beam.

        Args:
            support_moment: Hogging moment at the support (kNm, magnitude used)
            span_moment: Sagging moment in the span (kNm, magnitude used)
            b: Web width (mm)
            h: Overall depth (mm)
            section_type: Shape of the span zone
            span: Continuous span for the flange width (mm)
            slab_thickness: Flange thickness (mm)
            flange_width_limit: Actual flange width available (mm)
            cover, link_diameter, bar_diameter: Override config detailing (mm)

        Returns:
            ZonedBeamDesignResult with face requirements max(As, As_min)
        """
        for name, value in (("support_moment", support_moment), ("span_moment", span_moment)):
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if b <= 0.0 or h <= 0.0:
            raise ValueError(f"Section needs b > 0 and h > 0 (b={b}, h={h})")

        d = self.effective_depth(h, cover, link_diameter, bar_diameter)
        if d <= 0.0:
            raise ValueError(f"Effective depth must be > 0, got {d}")
        As_min = self.minimum_steel(b, h)
        As_max = self.maximum_steel(b, h)

        support = self.design_zone("support", support_moment, SectionType.RECTANGULAR, b, d)
        span_zone = self.design_zone(
            "span", span_moment, section_type, b, d,
            span=span, slab_thickness=slab_thickness, flange_width_limit=flange_width_limit,
        )

        messages = []
        top = self._face_requirement(support, As_min, As_max, "Top", messages)
        bottom = self._face_requirement(span_zone, As_min, As_max, "Bottom", messages)
        required = [a for a in (top, bottom) if a is not None]
        governing = max(required) if required else None

        ok = support.ok and span_zone.ok and not any(
            a > As_max for a in required
        )
        if not ok:
            logger.warning("Flexural design CHECK: %s", "; ".join(messages) or "zone not designed")

        return ZonedBeamDesignResult(
            d=d,
            As_min=As_min,
            As_max=As_max,
            support=support,
            span=span_zone,
            top_steel_required=top,
            bottom_steel_required=bottom,
            governing_steel_required=governing,
            ok=ok,
            messages=tuple(messages),
        )

    def provide_bars(self, required_area: Optional[float]) -> Optional[ProvidedBars]:
        """
        Tension bars for one face: the first standard size needing an even
        count (at least two) within the practical maximum, else the largest size.

        None when nothing is required.
        """
        if required_area is None or not math.isfinite(required_area) or required_area <= 0.0:
            return None
        cfg = self.config
        for diameter in cfg.beam_bar_sizes:
            count = max(cfg.beam_min_bars, math.ceil(required_area / bar_area(diameter)))
            if count % 2:
                count += 1
            if count <= cfg.beam_max_bars or diameter == cfg.beam_bar_sizes[-1]:
                return ProvidedBars(count, diameter, count * bar_area(diameter), f"{count}Y{diameter}")
        raise ValueError("beam_bar_sizes must not be empty")

    @staticmethod
    def _face_requirement(zone: FlexuralZoneResult, As_min: float, As_max: float, face: str, messages):
        if zone.message:
            messages.append(f"{zone.zone}: {zone.message}")
        if not zone.ok or zone.As is None:
            return None
        area = max(zone.As, As_min)
        if area > As_max:
            messages.append(
                f"{face} steel {area:.0f} mm² exceeds the maximum {As_max:.0f} mm²."
            )
        return area
