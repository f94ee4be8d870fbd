"""Propagation Pydantic schemas for API validation."""

from pydantic import BaseModel, Field, model_validator
from typing import Annotated, List, Optional, Dict

import numpy as np

from rfheatmap.core.config import settings
from rfheatmap.services.domain import (
    AccessPoint, Band, BoundingBox, BuildingFloorInfo, HeatmapGrid, MountType, WallPolyline
)
from rfheatmap.services.mount_types import MountTypeResolver


Latitude = Annotated[float, Field(ge=-90, le=90, allow_inf_nan=False)]
Longitude = Annotated[float, Field(ge=-180, le=180, allow_inf_nan=False)]


class LatLng(BaseModel):
    """Geographic point in WGS84 degrees."""
    lat: Latitude
    lng: Longitude


class AccessPointIn(BaseModel):
    """Access point radio placed on the map."""
    latitude: Latitude
    longitude: Longitude
    floor: int = 0
    tx_power_dbm: float = Field(..., ge=-10, le=36, allow_inf_nan=False)
    antenna_gain_dbi: float = Field(0.0, ge=-10, le=30, allow_inf_nan=False)
    model: str = Field(..., min_length=1, max_length=100)
    antenna_mode: Optional[str] = Field(None, max_length=50, description="e.g. 'omni' on switchable models")
    mount_type: Optional[MountType] = Field(
        None,
        description="ceiling, wall or desktop; defaults to the model's usual mount"
    )
    orientation_deg: float = Field(0.0, ge=0, lt=360, allow_inf_nan=False, description="Forward azimuth")

    def to_domain(self, mounts: MountTypeResolver) -> AccessPoint:
        mount_type = self.mount_type.value if self.mount_type else mounts.default_mount_type(self.model)
        return AccessPoint(
            latitude=self.latitude,
            longitude=self.longitude,
            floor=self.floor,
            tx_power_dbm=self.tx_power_dbm,
            antenna_gain_dbi=self.antenna_gain_dbi,
            model=self.model,
            mount_type=mount_type,
            orientation_deg=self.orientation_deg,
            antenna_mode=self.antenna_mode,
        )


class WallIn(BaseModel):
    """Wall polyline; materials optionally overrides the material per segment."""
    points: List[LatLng] = Field(..., min_length=2)
    material: str = Field("default", min_length=1, max_length=50)
    materials: Optional[List[Optional[str]]] = None

    @model_validator(mode="after")
    def check_segment_materials(self) -> "WallIn":
        if self.materials is not None and len(self.materials) != len(self.points) - 1:
            raise ValueError(
                f"materials must have one entry per segment "
                f"({len(self.points) - 1}), got {len(self.materials)}"
            )
        return self

    def to_domain(self, floor: int) -> WallPolyline:
        return WallPolyline(
            floor=floor,
            points=[(p.lat, p.lng) for p in self.points],
            material=self.material,
            materials=list(self.materials) if self.materials is not None else None,
        )


class BoundsIn(BaseModel):
    """Axis-aligned geographic box."""
    sw_lat: Latitude
    sw_lng: Longitude
    ne_lat: Latitude
    ne_lng: Longitude

    @model_validator(mode="after")
    def check_corners(self):
        if self.ne_lat < self.sw_lat or self.ne_lng < self.sw_lng:
            raise ValueError("north-east corner must not be south or west of the south-west corner")
        return self


class BuildingIn(BoundsIn):
    """Building footprint and the slab material of each floor."""
    floor_materials: Dict[int, str] = Field(default_factory=dict)

    def to_domain(self) -> BuildingFloorInfo:
        return BuildingFloorInfo(
            sw_lat=self.sw_lat,
            sw_lng=self.sw_lng,
            ne_lat=self.ne_lat,
            ne_lng=self.ne_lng,
            floor_materials=dict(self.floor_materials),
        )


class HeatmapRequest(BoundsIn):
    """Schema for a heatmap computation request."""
    band: Band = Band.BAND_5
    aps: List[AccessPointIn] = Field(..., min_length=1)
    walls_by_floor: Dict[int, List[WallIn]] = Field(default_factory=dict)
    active_floor: int = 0
    grid_resolution_m: float = Field(
        default_factory=lambda: settings.DEFAULT_GRID_RESOLUTION_METERS,
        gt=0,
        le=1000,
        allow_inf_nan=False
    )
    buildings: Optional[List[BuildingIn]] = None

    def bounds(self) -> BoundingBox:
        return BoundingBox(self.sw_lat, self.sw_lng, self.ne_lat, self.ne_lng)

    def domain_aps(self, mounts: MountTypeResolver) -> List[AccessPoint]:
        return [ap.to_domain(mounts) for ap in self.aps]

    def domain_walls(self) -> Dict[int, List[WallPolyline]]:
        return {
            floor: [wall.to_domain(floor) for wall in walls]
            for floor, walls in self.walls_by_floor.items()
        }

    def domain_buildings(self) -> Optional[List[BuildingFloorInfo]]:
        if self.buildings is None:
            return None
        return [b.to_domain() for b in self.buildings]


class CoverageRequest(HeatmapRequest):
    """Heatmap request plus the acceptable signal threshold."""
    threshold_dbm: float = Field(
        default_factory=lambda: settings.COVERAGE_THRESHOLD_DBM,
        le=0,
        allow_inf_nan=False
    )


class HeatmapResponse(BaseModel):
    """Computed heatmap: row-major dBm values, row 0 at the southern edge."""
    width: int
    height: int
    sw_lat: float
    sw_lng: float
    ne_lat: float
    ne_lng: float
    data: List[float]

    @classmethod
    def from_grid(cls, grid: HeatmapGrid) -> "HeatmapResponse":
        return cls(
            width=grid.width,
            height=grid.height,
            sw_lat=grid.bounds.sw_lat,
            sw_lng=grid.bounds.sw_lng,
            ne_lat=grid.bounds.ne_lat,
            ne_lng=grid.bounds.ne_lng,
            data=np.round(grid.data.astype(np.float64), 2).tolist(),
        )


class CoverageLevel(BaseModel):
    cells: int
    percentage: float
    threshold: str


class CoverageResponse(BaseModel):
    """Coverage statistics of a computed heatmap."""
    width: int
    height: int
    total_cells: int
    coverage_breakdown: Dict[str, CoverageLevel]
    total_coverage_percent: float
    acceptable_coverage_percent: float
    threshold_dbm: float
    signal_statistics: Dict[str, float]


class MaterialInfo(BaseModel):
    """Material with its attenuation per band."""
    id: str
    kind: str
    attenuation_db: Dict[str, float]
