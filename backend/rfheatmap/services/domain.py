"""Request-scoped value objects consumed and produced by the propagation engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np


class Band(str, Enum):
    """Radio bands supported by the engine."""
    BAND_2_4 = "2.4GHz"
    BAND_5 = "5GHz"
    BAND_6 = "6GHz"


class MountType(str, Enum):
    """Physical mounting of an access point."""
    CEILING = "ceiling"
    WALL = "wall"
    DESKTOP = "desktop"


@dataclass(frozen=True)
class AccessPoint:
    """One radio of an access point placed on the map."""
    latitude: float
    longitude: float
    floor: int
    tx_power_dbm: float
    antenna_gain_dbi: float
    model: str
    mount_type: str = MountType.CEILING.value
    orientation_deg: float = 0.0  # forward-facing azimuth reference
    antenna_mode: Optional[str] = None  # e.g. "omni" on switchable models


@dataclass(frozen=True)
class WallPolyline:
    """Wall drawn as a polyline; materials overrides the default per segment."""
    floor: int
    points: List[Tuple[float, float]]
    material: str
    materials: Optional[List[Optional[str]]] = None


@dataclass(frozen=True)
class WallSegment:
    lat1: float
    lng1: float
    lat2: float
    lng2: float
    material: str


@dataclass(frozen=True)
class BuildingFloorInfo:
    """Building footprint with the slab material of each floor."""
    sw_lat: float
    sw_lng: float
    ne_lat: float
    ne_lng: float
    floor_materials: Dict[int, str] = field(default_factory=dict)

    def contains(self, lat: float, lng: float) -> bool:
        return self.sw_lat <= lat <= self.ne_lat and self.sw_lng <= lng <= self.ne_lng

    @property
    def area(self) -> float:
        """Bounding-box area in square degrees, only meaningful for comparison."""
        return (self.ne_lat - self.sw_lat) * (self.ne_lng - self.sw_lng)


@dataclass(frozen=True)
class BoundingBox:
    sw_lat: float
    sw_lng: float
    ne_lat: float
    ne_lng: float


@dataclass
class HeatmapGrid:
    """Signal grid in dBm. Row 0 is the southern edge, column 0 the western edge."""
    width: int
    height: int
    bounds: BoundingBox
    data: np.ndarray  # flat row-major float32, len == width * height

    def as_2d(self) -> np.ndarray:
        """View of the data as (height, width)."""
        return self.data.reshape(self.height, self.width)


SegmentsByFloor = Mapping[int, Tuple[WallSegment, ...]]
