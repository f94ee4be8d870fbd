"""Pytest fixtures shared by service and API tests."""

from __future__ import annotations

import math
from typing import Dict, Optional

import pytest

from rfheatmap.services.antenna_patterns import PatternLookup
from rfheatmap.services.domain import AccessPoint, Band
from rfheatmap.services.geometry import EARTH_RADIUS_METERS
from rfheatmap.services.mount_types import ModelMountTypeResolver
from rfheatmap.services.rf_propagation import PropagationEngine

ORIGIN = (40.0, -75.0)


def offset_point(lat: float, lng: float, north_m: float, east_m: float):
    """Move a point by a small metric offset (equirectangular approximation)."""
    d_lat = math.degrees(north_m / EARTH_RADIUS_METERS)
    d_lng = math.degrees(east_m / (EARTH_RADIUS_METERS * math.cos(math.radians(lat))))
    return lat + d_lat, lng + d_lng


class FlatPatternProvider:
    """0 dB in every direction, no omni variants."""

    def azimuth_gain(self, model, band, angle_deg, antenna_mode=None) -> float:
        return 0.0

    def elevation_gain(self, model, band, angle_deg, antenna_mode=None) -> float:
        return 0.0

    def has_omni_variant(self, model) -> bool:
        return False

    def lookup_pattern(self, model, band, antenna_mode=None) -> PatternLookup:
        return PatternLookup(None, is_fallback=True)

    def pattern_handle(self, model, band, antenna_mode=None):
        return None


class LinearPatternProvider(FlatPatternProvider):
    """Gains that identify which cut and angle were read."""

    def azimuth_gain(self, model, band, angle_deg, antenna_mode=None) -> float:
        return -0.01 * int(angle_deg)

    def elevation_gain(self, model, band, angle_deg, antenna_mode=None) -> float:
        return -0.02 * int(angle_deg)


class StubMaterials:
    """Fixed attenuation table and a single carrier frequency."""

    TABLE: Dict[str, float] = {
        "none": 0.0,
        "drywall": 3.0,
        "concrete": 12.0,
        "floor_wood": 10.0,
        "floor_concrete": 20.0,
        "floor_small": 7.0,
        "floor_large": 30.0,
    }

    def __init__(self, frequency_mhz: float = 5000.0):
        self.frequency_mhz = frequency_mhz

    def attenuation_db(self, material: str, band: Band) -> float:
        return self.TABLE.get(material, 5.0)

    def center_frequency_mhz(self, band: Band) -> float:
        return self.frequency_mhz


def make_ap(
    north_m: float = 0.0,
    east_m: float = 0.0,
    floor: int = 0,
    model: str = "Test-AP",
    mount_type: str = "ceiling",
    orientation_deg: float = 0.0,
    antenna_mode: Optional[str] = None,
    tx_power_dbm: float = 20.0,
    antenna_gain_dbi: float = 3.0,
) -> AccessPoint:
    lat, lng = offset_point(ORIGIN[0], ORIGIN[1], north_m, east_m)
    return AccessPoint(
        latitude=lat,
        longitude=lng,
        floor=floor,
        tx_power_dbm=tx_power_dbm,
        antenna_gain_dbi=antenna_gain_dbi,
        model=model,
        mount_type=mount_type,
        orientation_deg=orientation_deg,
        antenna_mode=antenna_mode,
    )


def point(north_m: float, east_m: float = 0.0):
    return offset_point(ORIGIN[0], ORIGIN[1], north_m, east_m)


@pytest.fixture()
def materials() -> StubMaterials:
    return StubMaterials()


@pytest.fixture()
def engine(materials) -> PropagationEngine:
    """Engine with flat patterns, stub materials and explicit constants."""
    return PropagationEngine(
        FlatPatternProvider(),
        materials,
        ModelMountTypeResolver(),
        floor_height_m=3.0,
        path_loss_exponent=2.8,
        max_grid_dimension=500,
        no_coverage_dbm=-100.0,
        default_floor_material="floor_wood",
        workers=1,
    )
