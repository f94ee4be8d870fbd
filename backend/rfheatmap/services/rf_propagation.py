"""RF propagation heatmap engine.

Estimates received signal strength over a geographic area using:
- ITU-R P.1238 indoor log-distance path loss
- Antenna azimuth/elevation patterns with mount orientation correction
- Ray-cast wall penetration loss (per floor)
- Multi-floor slab attenuation from building floor materials
"""

import logging
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

import numpy as np

from rfheatmap.core.config import settings
from rfheatmap.services.antenna_orientation import AntennaOrientationResolver
from rfheatmap.services.antenna_patterns import AntennaPatternProvider
from rfheatmap.services.attenuation import (
    AttenuationModel, build_segments_by_floor, describe_buildings
)
from rfheatmap.services.domain import (
    AccessPoint, Band, BoundingBox, BuildingFloorInfo, HeatmapGrid,
    SegmentsByFloor, WallPolyline
)
from rfheatmap.services.geometry import calculate_bearing, haversine_distance
from rfheatmap.services.materials import MaterialAttenuationProvider
from rfheatmap.services.mount_types import MountTypeResolver

logger = logging.getLogger(__name__)

MIN_DISTANCE_M = 0.1  # avoids log10(0) at the AP position
HORIZON_ELEVATION_DEG = 90  # 0 = straight down, 90 = horizon
MAX_ELEVATION_DEG = 358


class HeatmapCancelledError(Exception):
    """Raised when a heatmap computation is abandoned between rows."""


def calculate_indoor_path_loss(distance_m: float, frequency_mhz: float, exponent: float = 2.8) -> float:
    """
    Indoor log-distance path loss (ITU-R P.1238 style).

    L = 10*n*log10(d) + 20*log10(f_MHz) - 27.55

    Args:
        distance_m: 3D distance in meters
        frequency_mhz: Carrier frequency in MHz
        exponent: Path loss exponent n (2.0 = free space)

    Returns:
        Path loss in dB
    """
    distance_m = max(distance_m, MIN_DISTANCE_M)
    return 10 * exponent * math.log10(distance_m) + 20 * math.log10(frequency_mhz) - 27.55


def grid_dimensions(bounds: BoundingBox, resolution_m: float, max_dimension: int = 500) -> Tuple[int, int]:
    """Grid (width, height) in cells for a bounding box, each in [1, max_dimension]."""
    width_m = haversine_distance(bounds.sw_lat, bounds.sw_lng, bounds.sw_lat, bounds.ne_lng)
    height_m = haversine_distance(bounds.sw_lat, bounds.sw_lng, bounds.ne_lat, bounds.sw_lng)

    # Clamp before int(): a tiny resolution overflows the quotient to inf
    grid_width = max(1, int(min(width_m / resolution_m, max_dimension)))
    grid_height = max(1, int(min(height_m / resolution_m, max_dimension)))
    return grid_width, grid_height


@dataclass(frozen=True)
class _RequestContext:
    """Everything a single point evaluation needs, fixed for one request."""
    band: Band
    frequency_mhz: float
    active_floor: int
    attenuation: AttenuationModel
    segments_by_floor: SegmentsByFloor
    buildings: Optional[Sequence[BuildingFloorInfo]]


class PropagationEngine:
    """
    Computes signal heatmaps for a set of access points.

    The engine is stateless between requests; all inputs are treated as
    read-only, so rows can be evaluated concurrently.
    """

    def __init__(
        self,
        patterns: AntennaPatternProvider,
        materials: MaterialAttenuationProvider,
        mounts: MountTypeResolver,
        floor_height_m: Optional[float] = None,
        path_loss_exponent: Optional[float] = None,
        max_grid_dimension: Optional[int] = None,
        no_coverage_dbm: Optional[float] = None,
        default_floor_material: Optional[str] = None,
        workers: Optional[int] = None
    ):
        self.patterns = patterns
        self.materials = materials
        self.orientation = AntennaOrientationResolver(patterns, mounts)

        self.floor_height_m = floor_height_m if floor_height_m is not None else settings.FLOOR_HEIGHT_METERS
        self.path_loss_exponent = (
            path_loss_exponent if path_loss_exponent is not None else settings.INDOOR_PATH_LOSS_EXPONENT
        )
        self.max_grid_dimension = max_grid_dimension or settings.MAX_GRID_DIMENSION
        self.no_coverage_dbm = no_coverage_dbm if no_coverage_dbm is not None else settings.NO_COVERAGE_DBM
        self.default_floor_material = default_floor_material or settings.DEFAULT_FLOOR_MATERIAL
        self.workers = workers or settings.HEATMAP_WORKERS

    def compute_heatmap(
        self,
        bounds: BoundingBox,
        band: Band,
        aps: Sequence[AccessPoint],
        walls_by_floor: Mapping[int, Sequence[WallPolyline]],
        active_floor: int,
        grid_resolution_m: float = 1.0,
        buildings: Optional[Sequence[BuildingFloorInfo]] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> HeatmapGrid:
        """
        Compute the strongest-AP signal for every cell of the area.

        Args:
            bounds: Area to cover
            band: Radio band
            aps: Access points (any floor)
            walls_by_floor: Wall polylines keyed by floor index
            active_floor: Floor the heatmap is computed for
            grid_resolution_m: Cell size in meters
            buildings: Optional building footprints with floor materials
            cancel_event: Checked between rows; when set the computation
                raises HeatmapCancelledError

        Rows go to a thread pool when workers > 1. The cell loop holds the
        GIL, so this splits work and allows cancellation per row but gives
        no CPU speedup on its own.

        Returns:
            HeatmapGrid with row-major dBm values
        """
        band = Band(band)
        start = time.perf_counter()

        grid_width, grid_height = grid_dimensions(bounds, grid_resolution_m, self.max_grid_dimension)
        grid = np.full((grid_height, grid_width), self.no_coverage_dbm, dtype=np.float32)

        if buildings:
            logger.debug(f"Heatmap buildings: {describe_buildings(buildings)}")

        if aps:
            ctx = self._build_context(band, active_floor, walls_by_floor, buildings)
            offsets = [self.orientation.elevation_offset(ap, band) for ap in aps]
            lat_step = (bounds.ne_lat - bounds.sw_lat) / grid_height
            lng_step = (bounds.ne_lng - bounds.sw_lng) / grid_width

            def compute_row(y: int) -> None:
                if cancel_event is not None and cancel_event.is_set():
                    raise HeatmapCancelledError(f"Heatmap cancelled at row {y}/{grid_height}")
                point_lat = bounds.sw_lat + (y + 0.5) * lat_step
                row = grid[y]
                for x in range(grid_width):
                    point_lng = bounds.sw_lng + (x + 0.5) * lng_step
                    row[x] = max(
                        self._signal(ap, offset, point_lat, point_lng, ctx)
                        for ap, offset in zip(aps, offsets)
                    )

            if self.workers > 1 and grid_height > 1:
                with ThreadPoolExecutor(max_workers=self.workers) as executor:
                    # Consume the iterator so worker exceptions propagate
                    for _ in executor.map(compute_row, range(grid_height)):
                        pass
            else:
                for y in range(grid_height):
                    compute_row(y)

        logger.info(
            f"Heatmap computed: {grid_width}x{grid_height} band={band.value} "
            f"floor={active_floor} aps={len(aps)} in {time.perf_counter() - start:.2f}s"
        )

        return HeatmapGrid(
            width=grid_width,
            height=grid_height,
            bounds=bounds,
            data=grid.reshape(-1)
        )

    def compute_signal_at_point(
        self,
        ap: AccessPoint,
        point_lat: float,
        point_lng: float,
        active_floor: int,
        band: Band,
        walls_by_floor: Optional[Mapping[int, Sequence[WallPolyline]]] = None,
        buildings: Optional[Sequence[BuildingFloorInfo]] = None
    ) -> float:
        """Signal in dBm from one AP at one point on the active floor."""
        band = Band(band)
        ctx = self._build_context(band, active_floor, walls_by_floor or {}, buildings)
        offset = self.orientation.elevation_offset(ap, band)
        return self._signal(ap, offset, point_lat, point_lng, ctx)

    def best_signal_at_point(
        self,
        aps: Sequence[AccessPoint],
        point_lat: float,
        point_lng: float,
        active_floor: int,
        band: Band,
        walls_by_floor: Optional[Mapping[int, Sequence[WallPolyline]]] = None,
        buildings: Optional[Sequence[BuildingFloorInfo]] = None
    ) -> Tuple[Optional[int], float]:
        """
        Strongest AP at a point.

        Returns:
            (index of the strongest AP, signal dBm); (None, sentinel) without APs
        """
        if not aps:
            return None, self.no_coverage_dbm

        band = Band(band)
        ctx = self._build_context(band, active_floor, walls_by_floor or {}, buildings)
        signals: List[float] = [
            self._signal(ap, self.orientation.elevation_offset(ap, band), point_lat, point_lng, ctx)
            for ap in aps
        ]
        best = int(np.argmax(signals))
        return best, signals[best]

    def _build_context(
        self,
        band: Band,
        active_floor: int,
        walls_by_floor: Mapping[int, Sequence[WallPolyline]],
        buildings: Optional[Sequence[BuildingFloorInfo]]
    ) -> _RequestContext:
        return _RequestContext(
            band=band,
            frequency_mhz=self.materials.center_frequency_mhz(band),
            active_floor=active_floor,
            attenuation=AttenuationModel(self.materials, band, self.default_floor_material),
            segments_by_floor=build_segments_by_floor(walls_by_floor),
            buildings=buildings,
        )

    def _signal(
        self,
        ap: AccessPoint,
        elevation_offset: int,
        point_lat: float,
        point_lng: float,
        ctx: _RequestContext
    ) -> float:
        distance_2d = max(haversine_distance(ap.latitude, ap.longitude, point_lat, point_lng), MIN_DISTANCE_M)

        floor_separation = abs(ap.floor - ctx.active_floor)
        vertical_distance = floor_separation * self.floor_height_m
        distance_3d = max(math.hypot(distance_2d, vertical_distance), MIN_DISTANCE_M)

        path_loss = calculate_indoor_path_loss(distance_3d, ctx.frequency_mhz, self.path_loss_exponent)

        bearing = calculate_bearing(ap.latitude, ap.longitude, point_lat, point_lng)
        azimuth_deg = int((bearing - ap.orientation_deg) % 360) % 360

        if floor_separation == 0:
            elevation_deg = HORIZON_ELEVATION_DEG
        else:
            elevation_deg = int(math.degrees(math.atan2(distance_2d, vertical_distance)))
            elevation_deg = min(max(elevation_deg, 0), MAX_ELEVATION_DEG)

        az_gain, el_gain = self.orientation.antenna_gain(
            ap, ctx.band, azimuth_deg, elevation_deg, elevation_offset
        )

        wall_loss = ctx.attenuation.path_wall_loss(
            ap, point_lat, point_lng, ctx.active_floor, ctx.segments_by_floor
        )
        floor_loss = ctx.attenuation.floor_loss(
            ap, point_lat, point_lng, ctx.active_floor, ctx.buildings
        )

        return (
            ap.tx_power_dbm +
            ap.antenna_gain_dbi +
            az_gain + el_gain -
            path_loss -
            wall_loss -
            floor_loss
        )
