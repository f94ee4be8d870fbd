"""Propagation API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List
import logging

from rfheatmap.api.deps import get_engine, get_materials, get_mount_resolver
from rfheatmap.services.domain import Band, HeatmapGrid
from rfheatmap.services.heatmap_generator import generate_coverage_report, render_heatmap_png
from rfheatmap.services.materials import MaterialAttenuation
from rfheatmap.services.mount_types import ModelMountTypeResolver
from rfheatmap.services.rf_propagation import PropagationEngine
from rfheatmap.schemas.propagation import (
    HeatmapRequest, HeatmapResponse, CoverageRequest, CoverageResponse, MaterialInfo
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _compute(
    request: HeatmapRequest,
    engine: PropagationEngine,
    mounts: ModelMountTypeResolver
) -> HeatmapGrid:
    try:
        return engine.compute_heatmap(
            bounds=request.bounds(),
            band=request.band,
            aps=request.domain_aps(mounts),
            walls_by_floor=request.domain_walls(),
            active_floor=request.active_floor,
            grid_resolution_m=request.grid_resolution_m,
            buildings=request.domain_buildings(),
        )
    except ValueError as e:
        logger.warning(f"Heatmap request rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))


# Handlers are sync so FastAPI runs the CPU-bound computation in its threadpool
@router.post("/heatmap", response_model=HeatmapResponse)
def compute_heatmap(
    request: HeatmapRequest,
    engine: PropagationEngine = Depends(get_engine),
    mounts: ModelMountTypeResolver = Depends(get_mount_resolver)
):
    """
    Compute an RSSI heatmap for the requested area.

    - **sw_lat/sw_lng/ne_lat/ne_lng**: Area to cover
    - **band**: 2.4GHz, 5GHz or 6GHz
    - **aps**: Access points (any floor)
    - **walls_by_floor**: Wall polylines keyed by floor index
    - **active_floor**: Floor to compute the heatmap for
    - **grid_resolution_m**: Cell size in meters (grid is capped at 500x500)
    - **buildings**: Optional footprints with per-floor slab materials

    Data is a flat row-major array; row 0 is the southern edge.
    """
    grid = _compute(request, engine, mounts)
    return HeatmapResponse.from_grid(grid)


@router.post("/heatmap/coverage", response_model=CoverageResponse)
def compute_coverage(
    request: CoverageRequest,
    engine: PropagationEngine = Depends(get_engine),
    mounts: ModelMountTypeResolver = Depends(get_mount_resolver)
):
    """Compute a heatmap and return coverage statistics instead of the raw grid."""
    grid = _compute(request, engine, mounts)
    report = generate_coverage_report(
        grid,
        threshold_dbm=request.threshold_dbm,
        no_coverage_dbm=engine.no_coverage_dbm
    )
    return CoverageResponse(width=grid.width, height=grid.height, **report)


@router.post(
    "/heatmap/image",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}}
)
def render_heatmap(
    request: HeatmapRequest,
    engine: PropagationEngine = Depends(get_engine),
    mounts: ModelMountTypeResolver = Depends(get_mount_resolver)
):
    """Compute a heatmap and return a PNG preview."""
    grid = _compute(request, engine, mounts)
    png = render_heatmap_png(grid, aps=request.domain_aps(mounts))
    return Response(content=png, media_type="image/png")


@router.get("/bands", response_model=List[str])
async def list_bands():
    """List supported radio bands."""
    return [band.value for band in Band]


@router.get("/materials", response_model=List[MaterialInfo])
async def list_materials(materials: MaterialAttenuation = Depends(get_materials)):
    """List wall and floor materials with their attenuation per band."""
    return [
        MaterialInfo(
            id=material,
            kind="floor" if material.startswith("floor_") else "wall",
            attenuation_db={band.value: materials.attenuation_db(material, band) for band in Band}
        )
        for material in materials.materials()
    ]
