# api/main.py
"""
FastAPI backend for BeamCraft - exposes the beamcraft engine as REST API.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

import beamcraft
from beamcraft import AnalysisOptions, MechanismError, ModelValidationError, build_model, solve_beam, solve_frame
from beamcraft.checks import (
    DEFAULT_DESIGN_CONFIG,
    ColumnDesignEngine,
    FlexuralDesignEngine,
    ShearDesignEngine,
)
from beamcraft.model import SectionType
from beamcraft.schema import StructureIn

logger = logging.getLogger(__name__)

app = FastAPI(
    title="BeamCraft API",
    description="2D beam/frame analysis and reinforced concrete design",
    version=beamcraft.__version__,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request Models
# =============================================================================

class AnalysisRequest(StructureIn):
    """Structure payload plus diagram resolution."""
    n_points: int = Field(21, ge=2, le=1001, alias="nPoints", description="Samples per member")


class MaterialOverrides(BaseModel):
    """Optional per-request material and detailing overrides."""
    model_config = ConfigDict(populate_by_name=True)

    fcu: Optional[float] = Field(None, gt=0.0, description="Concrete strength (N/mm²)")
    fy: Optional[float] = Field(None, gt=0.0, description="Main steel strength (N/mm²)")
    fyv: Optional[float] = Field(None, gt=0.0, description="Link steel strength (N/mm²)")
    cover: Optional[float] = Field(None, ge=0.0, description="Nominal cover (mm)")
    link_diameter: Optional[float] = Field(None, gt=0.0, alias="linkDiameter")
    main_bar_diameter: Optional[float] = Field(None, gt=0.0, alias="mainBarDiameter")

    def config(self):
        changes = {
            name: getattr(self, name)
            for name in MaterialOverrides.model_fields
            if getattr(self, name) is not None
        }
        return DEFAULT_DESIGN_CONFIG.with_overrides(**changes)


class FlexureRequest(MaterialOverrides):
    support_moment: float = Field(..., alias="supportMoment", description="Hogging moment (kNm)")
    span_moment: float = Field(..., alias="spanMoment", description="Sagging moment (kNm)")
    b: float = Field(..., gt=0.0, description="Web width (mm)")
    h: float = Field(..., gt=0.0, description="Overall depth (mm)")
    section_type: SectionType = Field(SectionType.RECTANGULAR, alias="sectionType")
    span: Optional[float] = Field(None, gt=0.0, description="Continuous span (mm)")
    slab_thickness: Optional[float] = Field(None, gt=0.0, alias="slabThickness")
    flange_width: Optional[float] = Field(None, gt=0.0, alias="flangeWidth")


class ShearSample(BaseModel):
    x: float
    V: float


class ShearRequest(MaterialOverrides):
    samples: List[ShearSample] = Field(..., min_length=1)
    b: float = Field(..., gt=0.0)
    d: float = Field(..., gt=0.0)
    As: float = Field(..., gt=0.0)
    Asv: float = Field(..., gt=0.0)


class ColumnRequest(MaterialOverrides):
    load: float = Field(..., description="Axial design load (kN)")
    b: float = Field(..., gt=0.0)
    h: float = Field(..., gt=0.0)
    clear_height: float = Field(..., gt=0.0, alias="clearHeight")


# =============================================================================
# Error mapping
# =============================================================================

def _run_analysis(request: AnalysisRequest, mode: str) -> Dict[str, Any]:
    options = AnalysisOptions(n_points=request.n_points)
    try:
        model = build_model(request, mode=mode)
        result = solve_beam(model, options) if mode == "beam" else solve_frame(model, options)
    except ModelValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except MechanismError as exc:
        logger.info("Analysis rejected: %s", exc)
        raise HTTPException(status_code=409, detail=str(exc))
    return result.to_dict()


def _design_error(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


# =============================================================================
# Endpoints
# =============================================================================

@app.get("/health")
def health():
    return {"status": "ok", "version": beamcraft.__version__}


@app.post("/analysis/beam")
def analyse_beam(request: AnalysisRequest):
    """Continuous beam: FEMs, end moments, reactions and diagrams."""
    return _run_analysis(request, "beam")


@app.post("/analysis/frame")
def analyse_frame(request: AnalysisRequest):
    """Rectilinear frame, including sidesway classification."""
    return _run_analysis(request, "frame")


@app.post("/design/flexure")
def design_flexure(request: FlexureRequest):
    engine = FlexuralDesignEngine(request.config())
    try:
        result = engine.design_beam(
            request.support_moment,
            request.span_moment,
            request.b,
            request.h,
            section_type=request.section_type,
            span=request.span,
            slab_thickness=request.slab_thickness,
            flange_width_limit=request.flange_width,
        )
    except ValueError as exc:
        raise _design_error(exc)
    return result


@app.post("/design/shear")
def design_shear(request: ShearRequest):
    engine = ShearDesignEngine(request.config())
    try:
        zones = engine.design_zones(
            [(s.x, s.V) for s in request.samples],
            request.b,
            request.d,
            request.As,
            request.Asv,
        )
    except ValueError as exc:
        raise _design_error(exc)
    return {"zones": zones}


@app.post("/design/column")
def design_column(request: ColumnRequest):
    engine = ColumnDesignEngine(request.config())
    try:
        return engine.design(request.load, request.b, request.h, request.clear_height)
    except ValueError as exc:
        raise _design_error(exc)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
