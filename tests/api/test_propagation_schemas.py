"""Validation tests for the propagation request schemas."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from rfheatmap.schemas.propagation import AccessPointIn, BuildingIn, HeatmapRequest, WallIn
from rfheatmap.services.domain import Band
from rfheatmap.services.mount_types import ModelMountTypeResolver


def _ap(**overrides) -> dict:
    body = {"latitude": 40.0, "longitude": -75.0, "tx_power_dbm": 20, "model": "U7-Pro-Outdoor"}
    body.update(overrides)
    return body


def _request(**overrides) -> dict:
    body = {
        "sw_lat": 40.0,
        "sw_lng": -75.0,
        "ne_lat": 40.0001,
        "ne_lng": -74.9999,
        "aps": [_ap()],
    }
    body.update(overrides)
    return body


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_coordinates_rejected(value: float) -> None:
    with pytest.raises(ValidationError):
        AccessPointIn.model_validate(_ap(latitude=value))
    with pytest.raises(ValidationError):
        HeatmapRequest.model_validate(_request(sw_lng=value))


def test_out_of_range_coordinates_rejected() -> None:
    with pytest.raises(ValidationError):
        AccessPointIn.model_validate(_ap(latitude=91))
    with pytest.raises(ValidationError):
        AccessPointIn.model_validate(_ap(longitude=-181))


def test_non_positive_resolution_rejected() -> None:
    with pytest.raises(ValidationError):
        HeatmapRequest.model_validate(_request(grid_resolution_m=0))


def test_degenerate_bounds_accepted() -> None:
    request = HeatmapRequest.model_validate(_request(ne_lat=40.0, ne_lng=-75.0))
    assert request.bounds().sw_lat == request.bounds().ne_lat


def test_defaults() -> None:
    request = HeatmapRequest.model_validate(_request())
    assert request.band == Band.BAND_5
    assert request.active_floor == 0
    assert request.grid_resolution_m == 1.0
    assert request.walls_by_floor == {}
    assert request.domain_buildings() is None


def test_missing_mount_type_resolved_from_model() -> None:
    mounts = ModelMountTypeResolver()

    assert AccessPointIn.model_validate(_ap()).to_domain(mounts).mount_type == "wall"
    assert AccessPointIn.model_validate(_ap(mount_type="ceiling")).to_domain(mounts).mount_type == "ceiling"
    assert AccessPointIn.model_validate(_ap(model="U6-Pro")).to_domain(mounts).mount_type == "ceiling"


def test_invalid_mount_type_rejected() -> None:
    with pytest.raises(ValidationError):
        AccessPointIn.model_validate(_ap(mount_type="floor"))


def test_orientation_range() -> None:
    with pytest.raises(ValidationError):
        AccessPointIn.model_validate(_ap(orientation_deg=360))


def test_wall_needs_two_points() -> None:
    with pytest.raises(ValidationError):
        WallIn.model_validate({"points": [{"lat": 40.0, "lng": -75.0}]})


def test_wall_materials_may_contain_nulls() -> None:
    wall = WallIn.model_validate({
        "points": [{"lat": 40.0, "lng": -75.0}, {"lat": 40.0, "lng": -74.9}, {"lat": 40.1, "lng": -74.9}],
        "material": "brick",
        "materials": [None, "glass"],
    })
    polyline = wall.to_domain(2)

    assert polyline.floor == 2
    assert polyline.materials == [None, "glass"]
    assert polyline.points[1] == (40.0, -74.9)


def test_walls_by_floor_keys_become_ints() -> None:
    wall = {"points": [{"lat": 40.0, "lng": -75.0}, {"lat": 40.0, "lng": -74.9}]}
    request = HeatmapRequest.model_validate(_request(walls_by_floor={"1": [wall], "-1": [wall]}))

    walls = request.domain_walls()
    assert set(walls) == {1, -1}
    assert walls[-1][0].floor == -1


def test_building_floor_materials() -> None:
    building = BuildingIn.model_validate({
        "sw_lat": 40.0, "sw_lng": -75.0, "ne_lat": 40.001, "ne_lng": -74.999,
        "floor_materials": {"1": "floor_concrete"},
    }).to_domain()

    assert building.floor_materials == {1: "floor_concrete"}
    assert building.contains(40.0005, -74.9995)
