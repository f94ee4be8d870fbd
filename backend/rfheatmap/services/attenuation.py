"""Wall and floor attenuation along the AP to observation point path."""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from rfheatmap.services.domain import (
    AccessPoint, Band, BuildingFloorInfo, SegmentsByFloor, WallPolyline, WallSegment
)
from rfheatmap.services.geometry import segments_intersect
from rfheatmap.services.materials import MaterialAttenuationProvider

logger = logging.getLogger(__name__)


def precompute_wall_segments(walls: Iterable[WallPolyline]) -> Tuple[WallSegment, ...]:
    """Split polylines into segments, resolving per-segment material overrides."""
    segments: List[WallSegment] = []
    for wall in walls:
        for i in range(len(wall.points) - 1):
            material = wall.material
            if wall.materials is not None and i < len(wall.materials) and wall.materials[i] is not None:
                material = wall.materials[i]

            (lat1, lng1), (lat2, lng2) = wall.points[i], wall.points[i + 1]
            segments.append(WallSegment(lat1=lat1, lng1=lng1, lat2=lat2, lng2=lng2, material=material))
    return tuple(segments)


def build_segments_by_floor(walls_by_floor: Mapping[int, Sequence[WallPolyline]]) -> SegmentsByFloor:
    """Read-only floor -> segments mapping, built once per request."""
    return MappingProxyType({
        floor: precompute_wall_segments(walls)
        for floor, walls in walls_by_floor.items()
    })


def find_smallest_containing_building(
    buildings: Sequence[BuildingFloorInfo],
    lat: float,
    lng: float
) -> Optional[BuildingFloorInfo]:
    """
    Building with the smallest bounding box that contains the point.

    Keeps a large single-floor footprint from shadowing a smaller, more
    specific multi-floor building it overlaps.
    """
    best = None
    best_area = float("inf")
    for building in buildings:
        if building.contains(lat, lng) and building.area < best_area:
            best = building
            best_area = building.area
    return best


class AttenuationModel:
    """Obstruction losses for one band, backed by a material provider."""

    def __init__(self, materials: MaterialAttenuationProvider, band: Band, default_floor_material: str):
        self.materials = materials
        self.band = band
        self.default_floor_material = default_floor_material

    def wall_loss(
        self,
        ap_lat: float, ap_lng: float,
        point_lat: float, point_lng: float,
        segments: Iterable[WallSegment]
    ) -> float:
        """Sum of material losses of every segment the direct path crosses."""
        total_loss = 0.0
        ap = (ap_lat, ap_lng)
        point = (point_lat, point_lng)
        for wall in segments:
            if segments_intersect(ap, point, (wall.lat1, wall.lng1), (wall.lat2, wall.lng2)):
                total_loss += self.materials.attenuation_db(wall.material, self.band)
        return total_loss

    def path_wall_loss(
        self,
        ap: AccessPoint,
        point_lat: float, point_lng: float,
        active_floor: int,
        segments_by_floor: SegmentsByFloor
    ) -> float:
        """
        Wall loss on the active floor, plus the AP's own floor when they differ.

        A cross-floor signal passes walls on the AP floor before the slab and
        walls on the observation floor after it.
        """
        loss = 0.0
        active_segments = segments_by_floor.get(active_floor)
        if active_segments:
            loss += self.wall_loss(ap.latitude, ap.longitude, point_lat, point_lng, active_segments)
        if ap.floor != active_floor:
            ap_segments = segments_by_floor.get(ap.floor)
            if ap_segments:
                loss += self.wall_loss(ap.latitude, ap.longitude, point_lat, point_lng, ap_segments)
        return loss

    def floor_loss(
        self,
        ap: AccessPoint,
        point_lat: float, point_lng: float,
        active_floor: int,
        buildings: Optional[Sequence[BuildingFloorInfo]]
    ) -> float:
        """
        Slab attenuation between the AP floor and the active floor.

        The observation point's building is preferred (its slab is what the
        signal enters through), then the AP's. Each crossing between floor N
        and N+1 uses the material of floor N+1.
        """
        floor_separation = abs(ap.floor - active_floor)
        if floor_separation == 0:
            return 0.0

        if not buildings:
            return floor_separation * self.materials.attenuation_db(self.default_floor_material, self.band)

        building = (
            find_smallest_containing_building(buildings, point_lat, point_lng) or
            find_smallest_containing_building(buildings, ap.latitude, ap.longitude)
        )
        if building is None:
            # Both AP and point are outdoors
            return 0.0

        min_floor = min(ap.floor, active_floor)
        max_floor = max(ap.floor, active_floor)
        total_loss = 0.0
        for f in range(min_floor + 1, max_floor + 1):
            material = building.floor_materials.get(f, self.default_floor_material)
            total_loss += self.materials.attenuation_db(material, self.band)
        return total_loss


def describe_buildings(buildings: Sequence[BuildingFloorInfo]) -> List[Dict[str, object]]:
    """Compact summaries for diagnostics logging."""
    return [
        {
            "bounds": (b.sw_lat, b.sw_lng, b.ne_lat, b.ne_lng),
            "floors": {f"F{floor}": material for floor, material in sorted(b.floor_materials.items())},
        }
        for b in buildings
    ]
