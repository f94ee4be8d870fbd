"""Unit tests for the default material and mount type providers."""

from __future__ import annotations

import pytest

from rfheatmap.services.domain import Band
from rfheatmap.services.materials import BAND_CENTER_FREQUENCY_MHZ, MaterialAttenuation
from rfheatmap.services.mount_types import ModelMountTypeResolver


def test_known_material_attenuation_increases_with_band() -> None:
    materials = MaterialAttenuation()
    losses = [materials.attenuation_db("concrete", band) for band in Band]
    assert losses == sorted(losses)
    assert materials.attenuation_db("Concrete", Band.BAND_5) == materials.attenuation_db("concrete", Band.BAND_5)


def test_unknown_material_uses_default() -> None:
    materials = MaterialAttenuation()
    assert materials.attenuation_db("unobtainium", Band.BAND_5) == materials.attenuation_db("default", Band.BAND_5)
    assert materials.attenuation_db(None, Band.BAND_2_4) == materials.attenuation_db("default", Band.BAND_2_4)


def test_band_accepts_string_values() -> None:
    materials = MaterialAttenuation()
    assert materials.center_frequency_mhz("5GHz") == BAND_CENTER_FREQUENCY_MHZ[Band.BAND_5]
    assert materials.attenuation_db("brick", "2.4GHz") == materials.attenuation_db("brick", Band.BAND_2_4)


def test_center_frequencies_are_in_band() -> None:
    materials = MaterialAttenuation()
    assert 2400 <= materials.center_frequency_mhz(Band.BAND_2_4) <= 2500
    assert 5150 <= materials.center_frequency_mhz(Band.BAND_5) <= 5895
    assert 5925 <= materials.center_frequency_mhz(Band.BAND_6) <= 7125


def test_materials_lists_walls_before_floors() -> None:
    names = MaterialAttenuation().materials()
    first_floor = next(i for i, m in enumerate(names) if m.startswith("floor_"))
    assert all(m.startswith("floor_") for m in names[first_floor:])
    assert "default" in names


@pytest.mark.parametrize(
    "model, expected",
    [
        ("U6-Pro", "ceiling"),
        ("U7-Pro", "ceiling"),
        ("U6-Lite", "ceiling"),
        ("U7-Pro-Outdoor", "wall"),
        ("U6-Mesh", "wall"),
        ("U6-IW", "wall"),
        ("UAP-AC-M", "ceiling"),
        ("UAP-FlexHD", "desktop"),
        ("U6-Express", "desktop"),
        ("", "ceiling"),
    ],
)
def test_default_mount_type_rules(model: str, expected: str) -> None:
    assert ModelMountTypeResolver().default_mount_type(model) == expected


def test_mount_type_overrides_take_precedence() -> None:
    resolver = ModelMountTypeResolver(overrides={"U6-Pro": "wall", "u7-pro-outdoor": "ceiling"})
    assert resolver.default_mount_type("U6-Pro") == "wall"
    assert resolver.default_mount_type("U7-Pro-Outdoor") == "ceiling"


def test_mount_type_override_rejects_unknown_mount() -> None:
    with pytest.raises(ValueError):
        ModelMountTypeResolver(overrides={"U6-Pro": "floor"})
