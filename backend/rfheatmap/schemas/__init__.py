# Pydantic schemas
from rfheatmap.schemas.propagation import (
    LatLng, AccessPointIn, WallIn, BoundsIn, BuildingIn,
    HeatmapRequest, CoverageRequest, HeatmapResponse,
    CoverageLevel, CoverageResponse, MaterialInfo
)
