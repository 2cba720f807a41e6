"""
deployment/api.py - REST API v1

FastAPI surface over HydrostaticsService. Every route is a thin wrapper:
request models are validated by pydantic, HydroErrors are mapped to their
HTTP status with a structured error body.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, FastAPI, Path, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from hydrostab import __version__
from hydrostab.bootstrap.config import HydroConfig
from hydrostab.errors import HydroError, error_response
from hydrostab.service import HydrostaticsService
from hydrostab.stability.results import StabilityRequest

logger = logging.getLogger("deployment.api")


# =============================================================================
# Request Models
# =============================================================================

class HydroTableRequest(BaseModel):
    """Request model for a hydrostatic table."""
    drafts: List[float] = Field(description="Drafts to evaluate (m)")
    loadcase_id: Optional[str] = None
    trim_deg: float = Field(default=0.0, description="Trim angle, positive by the stern")


class CurvesRequest(BaseModel):
    """Request model for hydrostatic curves over a draft range."""
    curve_types: List[str] = Field(description="Curve types, e.g. displacement, kb, gmt")
    min_draft: float
    max_draft: float
    points: Optional[int] = Field(default=None, description="Number of draft samples")
    loadcase_id: Optional[str] = None


class StabilityRequestModel(BaseModel):
    """Request model for GZ/KN curves."""
    loadcase_id: Optional[str] = None
    min_angle: float = 0.0
    max_angle: float = 90.0
    angle_increment: float = 1.0
    method: str = Field(default="WallSided", description="WallSided or FullImmersion")
    draft: Optional[float] = Field(default=None, description="Defaults to the design draft")

    def to_request(self) -> StabilityRequest:
        return StabilityRequest(
            loadcase_id=self.loadcase_id,
            min_angle=self.min_angle,
            max_angle=self.max_angle,
            angle_increment=self.angle_increment,
            method=self.method,
            draft=self.draft,
        )


class TrimRequest(BaseModel):
    """Request model for the equilibrium draft solver."""
    target_displacement_t: float
    loadcase_id: Optional[str] = None
    initial_draft: Optional[float] = None
    max_iterations: int = 20


# =============================================================================
# ROUTER
# =============================================================================

def create_hydrostatics_router(service: HydrostaticsService) -> APIRouter:
    """
    Create the hydrostatics router bound to a service instance.

    Args:
        service: Service that resolves vessels and loadcases

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/v1", tags=["hydrostatics", "stability"])

    # =========================================================================
    # Hydrostatics
    # =========================================================================

    @router.get("/vessels/{vessel_id}/hydrostatics")
    def get_hydrostatics(
        vessel_id: str = Path(..., description="Vessel ID"),
        draft: float = Query(..., description="Draft (m)"),
        loadcase_id: Optional[str] = Query(None, description="Loadcase ID"),
        trim_deg: float = Query(0.0, description="Trim angle (deg)"),
    ):
        """Hydrostatic particulars at one draft."""
        result = service.compute_at_draft(vessel_id, draft, loadcase_id, trim_deg)
        return {"success": True, "result": result.to_dict()}

    @router.post("/vessels/{vessel_id}/hydrostatics/table")
    def post_hydrostatic_table(request: HydroTableRequest, vessel_id: str = Path(...)):
        """Hydrostatic particulars at each requested draft."""
        results = service.compute_table(vessel_id, request.drafts, request.loadcase_id, request.trim_deg)
        return {
            "success": True,
            "count": len(results),
            "results": [r.to_dict() for r in results],
        }

    # =========================================================================
    # Curves
    # =========================================================================

    @router.post("/vessels/{vessel_id}/curves")
    def post_curves(request: CurvesRequest, vessel_id: str = Path(...)):
        """Hydrostatic curves against draft."""
        curves = service.generate_curves(
            vessel_id,
            request.curve_types,
            request.min_draft,
            request.max_draft,
            request.points,
            request.loadcase_id,
        )
        return {
            "success": True,
            "curves": [c.to_dict() for c in curves.values()],
        }

    @router.get("/vessels/{vessel_id}/curves/bonjean")
    def get_bonjean_curves(vessel_id: str = Path(...)):
        """Sectional area against height for every station."""
        curves = service.generate_bonjean_curves(vessel_id)
        return {"success": True, "curves": [c.to_dict() for c in curves]}

    # =========================================================================
    # Stability
    # =========================================================================

    @router.get("/stability/methods")
    def get_stability_methods():
        """Available righting-arm methods."""
        return {"methods": [m.to_dict() for m in service.available_methods()]}

    @router.post("/vessels/{vessel_id}/stability/gz")
    def post_gz_curve(request: StabilityRequestModel, vessel_id: str = Path(...)):
        """GZ curve for a loading condition."""
        curve = service.compute_gz_curve(vessel_id, request.to_request())
        return {"success": True, "curve": curve.to_dict()}

    @router.post("/vessels/{vessel_id}/stability/kn")
    def post_kn_curve(request: StabilityRequestModel, vessel_id: str = Path(...)):
        """Cross curve (KN) at one draft."""
        curve = service.compute_kn_curve(vessel_id, request.to_request())
        return {"success": True, "curve": curve.to_dict()}

    @router.post("/vessels/{vessel_id}/stability/criteria")
    def post_stability_criteria(request: StabilityRequestModel, vessel_id: str = Path(...)):
        """GZ curve and its IMO intact stability assessment."""
        curve = service.compute_gz_curve(vessel_id, request.to_request())
        result = service.check_criteria(curve)
        return {
            "success": True,
            "curve": curve.to_dict(),
            "criteria": result.to_dict(),
        }

    # =========================================================================
    # Trim & validation
    # =========================================================================

    @router.post("/vessels/{vessel_id}/trim")
    def post_trim(request: TrimRequest, vessel_id: str = Path(...)):
        """Equilibrium draft and trim for a target displacement."""
        solution = service.solve_trim(
            vessel_id,
            request.target_displacement_t,
            request.loadcase_id,
            request.initial_draft,
            request.max_iterations,
        )
        return {"success": True, "solution": solution.to_dict()}

    @router.get("/vessels/{vessel_id}/validation")
    def get_validation(vessel_id: str = Path(...)):
        """Geometry validation report."""
        return service.validate_geometry(vessel_id).to_dict()

    return router


# =============================================================================
# APPLICATION
# =============================================================================

def create_app(service: HydrostaticsService, config: Optional[HydroConfig] = None) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        service: Hydrostatics service backing every route
        config: Root configuration (API section used for docs and CORS)

    Returns:
        FastAPI application instance
    """
    config = config or HydroConfig()

    app = FastAPI(
        title="hydrostab API",
        description="Hydrostatic and Stability Computation API",
        version=__version__,
        docs_url=config.api.docs_url if config.api.enable_docs else None,
        redoc_url="/redoc" if config.api.enable_docs else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HydroError)
    async def hydro_error_handler(request: Request, exc: HydroError):
        if exc.http_status >= 500:
            logger.error(f"{request.url.path}: {exc}")
        else:
            logger.info(f"{request.url.path}: {exc}")
        return JSONResponse(status_code=exc.http_status, content=error_response(exc))

    @app.get("/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(create_hydrostatics_router(service))
    logger.info("Hydrostatics router wired")
    return app
