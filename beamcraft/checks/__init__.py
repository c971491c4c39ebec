# beamcraft/checks - Reinforced concrete design checks
"""Design checks per BS 8110: flexure, shear, short columns and serviceability."""

from .config import DesignConfig, DEFAULT_DESIGN_CONFIG

from .flexure import (
    FlexuralZoneResult,
    ZonedBeamDesignResult,
    FlexuralDesignEngine,
    ProvidedBars,
    design_moments,
)

from .shear import (
    ShearStatus,
    ShearPointResult,
    ShearZone,
    ShearDesignEngine,
    normalize_envelope,
)

from .column import (
    ColumnStatus,
    ColumnDesignResult,
    ColumnDesignEngine,
)

from .serviceability import (
    SupportCondition,
    DeflectionCheckResult,
    CrackControlResult,
    CrackWidthResult,
    check_span_depth,
    check_crack_spacing,
    check_crack_width,
    service_stress,
    tension_modification_factor,
)

__all__ = [
    # Config
    'DesignConfig',
    'DEFAULT_DESIGN_CONFIG',
    # Flexure
    'FlexuralZoneResult',
    'ZonedBeamDesignResult',
    'FlexuralDesignEngine',
    'ProvidedBars',
    'design_moments',
    # Shear
    'ShearStatus',
    'ShearPointResult',
    'ShearZone',
    'ShearDesignEngine',
    'normalize_envelope',
    # Column
    'ColumnStatus',
    'ColumnDesignResult',
    'ColumnDesignEngine',
    # Serviceability
    'SupportCondition',
    'DeflectionCheckResult',
    'CrackControlResult',
    'CrackWidthResult',
    'check_span_depth',
    'check_crack_spacing',
    'check_crack_width',
    'service_stress',
    'tension_modification_factor',
]
