# beamcraft/checks/serviceability.py
"""
Serviceability screening per BS 8110: span/effective depth ratios
(clause 3.4.6), bar spacing for crack control (clause 3.12.11) and a
screening estimate of the crack width from the service steel stress.

Every check returns a result record; a failed check is ok=False with a
message, never an exception.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import DEFAULT_DESIGN_CONFIG, DesignConfig
from .flexure import ProvidedBars


class SupportCondition(str, Enum):
    CANTILEVER = "cantilever"
    SIMPLY_SUPPORTED = "simply_supported"
    CONTINUOUS = "continuous"


# Table 3.9, rectangular sections
BASIC_SPAN_DEPTH = {
    SupportCondition.CANTILEVER: 7.0,
    SupportCondition.SIMPLY_SUPPORTED: 20.0,
    SupportCondition.CONTINUOUS: 26.0,
}


@dataclass(frozen=True)
class DeflectionCheckResult:
    ok: bool
    actual_ratio: float
    allowable_ratio: float
    basic_ratio: float
    modification_factor: float
    service_stress: Optional[float]
    message: str


@dataclass(frozen=True)
class CrackControlResult:
    ok: bool
    service_stress: float
    max_clear_spacing: float
    clear_spacing: Optional[float]
    message: str


@dataclass(frozen=True)
class CrackWidthResult:
    ok: bool
    crack_width: float                  # mm, estimated
    limit: float                        # mm
    service_moment: float               # kNm
    steel_stress: Optional[float]       # N/mm² at service
    clear_spacing: float                # mm between bars
    message: str


def service_stress(fy: float, As_req: float, As_prov: float) -> float:
    """fs = (2/3)·fy·As,req/As,prov."""
    if As_prov <= 0.0:
        raise ValueError(f"As_prov must be > 0, got {As_prov}")
    return 2.0 / 3.0 * fy * As_req / As_prov


def tension_modification_factor(
    fs: float, moment: float, b: float, d: float, cap: float = 2.0
) -> float:
    """Table 3.10: 0.55 + (477 - fs)/(120·(0.9 + M/bd²)), capped."""
    m_bd2 = moment * 1e6 / (b * d * d)
    factor = 0.55 + (477.0 - fs) / (120.0 * (0.9 + m_bd2))
    return min(factor, cap)


def check_span_depth(
    span: float,
    d: float,
    support_condition: SupportCondition = SupportCondition.SIMPLY_SUPPORTED,
    b: float = None,
    moment: float = None,
    As_req: float = None,
    As_prov: float = None,
    fy: float = None,
    web_width: float = None,
    flange_width: float = None,
    config: DesignConfig = None,
) -> DeflectionCheckResult:
    """
    Compare span/d against the allowable ratio.

    Args:
        span: Effective span (mm)
        d: Effective depth (mm)
        support_condition: Cantilever, simply supported or continuous
        b, moment, As_req, As_prov, fy: When all given (mm, kNm, mm², mm², N/mm²),
            the tension modification factor is applied; otherwise it is 1.0
        web_width, flange_width: For flanged sections (mm)
    """
    cfg = config or DEFAULT_DESIGN_CONFIG
    if span <= 0.0 or d <= 0.0:
        raise ValueError(f"span and d must be > 0 (span={span}, d={d})")
    support_condition = SupportCondition(support_condition)

    basic = BASIC_SPAN_DEPTH[support_condition]
    allowable = basic
    if web_width and flange_width and flange_width > web_width:
        web_ratio = web_width / flange_width
        if web_ratio <= 0.3:
            allowable *= cfg.flanged_ratio_factor
        else:
            # linear between 0.8 at bw/bf = 0.3 and 1.0 at bw/bf = 1.0
            allowable *= cfg.flanged_ratio_factor + (1.0 - cfg.flanged_ratio_factor) * (web_ratio - 0.3) / 0.7

    if span > 10000.0 and support_condition is not SupportCondition.CANTILEVER:
        allowable *= 10000.0 / span

    fs = None
    factor = 1.0
    if None not in (b, moment, As_req, As_prov):
        fs = service_stress(cfg.fy if fy is None else fy, As_req, As_prov)
        factor = tension_modification_factor(fs, abs(moment), b, d, cfg.max_modification_factor)
    allowable *= factor

    actual = span / d
    ok = actual <= allowable
    if ok:
        message = f"Span/d = {actual:.1f} within allowable {allowable:.1f}."
    else:
        message = f"Span/d = {actual:.1f} exceeds allowable {allowable:.1f}; increase depth."
    return DeflectionCheckResult(
        ok=ok,
        actual_ratio=actual,
        allowable_ratio=allowable,
        basic_ratio=basic,
        modification_factor=factor,
        service_stress=fs,
        message=message,
    )


def check_crack_spacing(
    fy: float,
    As_req: float,
    As_prov: float,
    clear_spacing: float = None,
    config: DesignConfig = None,
) -> CrackControlResult:
    """Maximum clear spacing between tension bars, 47000/fs ≤ 300 mm."""
    cfg = config or DEFAULT_DESIGN_CONFIG
    fs = service_stress(fy, As_req, As_prov)
    if fs > 0.0:
        limit = min(cfg.crack_spacing_constant / fs, cfg.max_clear_spacing)
    else:
        limit = cfg.max_clear_spacing
    limit = float(math.floor(limit))

    if clear_spacing is None:
        return CrackControlResult(
            True, fs, limit, None, f"Clear bar spacing must not exceed {limit:.0f} mm."
        )
    ok = clear_spacing <= limit
    if ok:
        message = f"Clear spacing {clear_spacing:.0f} mm within {limit:.0f} mm."
    else:
        message = f"Clear spacing {clear_spacing:.0f} mm exceeds {limit:.0f} mm; use more, smaller bars."
    return CrackControlResult(ok, fs, limit, clear_spacing, message)


def check_crack_width(
    moment: float,
    b: float,
    z: float,
    bars: ProvidedBars,
    cover: float = None,
    link_diameter: float = None,
    config: DesignConfig = None,
) -> CrackWidthResult:
    """
    Screening estimate of the surface crack width in the tension face.

        Ms = M / 1.5
        fs = Ms·10⁶ / (As,prov·z)
        wk = 3·(cover + link + φ/2 + s_clear/2)·fs/Es      ≤ 0.3 mm

    Args:
        moment: Ultimate sagging moment (kNm, magnitude used)
        b: Web width (mm)
        z: Lever arm (mm)
        bars: Provided tension bars
        cover, link_diameter: Override config detailing (mm)
    """
    cfg = config or DEFAULT_DESIGN_CONFIG
    cover = cfg.cover if cover is None else cover
    link_diameter = cfg.link_diameter if link_diameter is None else link_diameter
    if not math.isfinite(moment):
        raise ValueError(f"moment must be finite, got {moment}")
    if b <= 0.0 or z <= 0.0 or bars.area <= 0.0:
        raise ValueError(f"b, z and the provided area must be > 0 (b={b}, z={z}, As={bars.area})")

    limit = cfg.crack_width_limit
    phi = bars.diameter
    n = bars.count
    clear = 0.0
    if n > 1:
        clear = max(0.0, (b - 2.0 * (cover + link_diameter) - n * phi) / (n - 1))

    Ms = abs(moment) / cfg.service_load_factor
    if Ms == 0.0:
        return CrackWidthResult(
            True, 0.0, limit, 0.0, 0.0, clear,
            "No service moment; crack width is negligible.",
        )

    fs = Ms * 1e6 / (bars.area * z)
    wk = 3.0 * (cover + link_diameter + phi / 2.0 + clear / 2.0) * fs / cfg.steel_modulus
    ok = wk <= limit
    if ok:
        message = f"Estimated crack width {wk:.3f} mm within {limit:g} mm."
    else:
        message = (
            f"Estimated crack width {wk:.3f} mm exceeds {limit:g} mm; "
            f"review steel area or bar distribution."
        )
    return CrackWidthResult(ok, wk, limit, Ms, fs, clear, message)
