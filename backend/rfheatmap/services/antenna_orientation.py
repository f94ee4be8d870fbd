"""Mount orientation correction for antenna pattern lookups.

Patterns are measured in one physical orientation (the pattern's native
mount). When an AP is installed differently, the elevation angle used for the
lookup is shifted by the difference of the two mount offsets, and a wall mount
swaps the azimuth and elevation planes.
"""

from typing import Optional, Tuple

from rfheatmap.services.antenna_patterns import AntennaPatternProvider, is_omni_mode
from rfheatmap.services.domain import AccessPoint, Band, MountType
from rfheatmap.services.mount_types import MountTypeResolver

# Elevation offset of each mount relative to a flat ceiling mount
MOUNT_ELEVATION_OFFSETS = {
    MountType.WALL.value: -90,
    MountType.DESKTOP.value: 180,
}


def mount_offset(mount_type: str) -> int:
    return MOUNT_ELEVATION_OFFSETS.get(mount_type, 0)


def adjust_elevation(elevation_deg: int, offset: int) -> int:
    """Apply a mount offset, wrapping into [0, 359)."""
    return ((elevation_deg + offset) % 359 + 359) % 359


class AntennaOrientationResolver:
    """Turn geometric angles into pattern gain for a specific AP installation."""

    def __init__(self, patterns: AntennaPatternProvider, mounts: MountTypeResolver):
        self.patterns = patterns
        self.mounts = mounts

    def pattern_native_mount(self, model: str, band: Band, antenna_mode: Optional[str] = None) -> str:
        """
        Orientation in which the pattern data for this lookup was measured.

        Switchable models (those with an omni variant) have their directional
        patterns measured flat, i.e. ceiling, and their omni patterns in the
        model's usual mount. If the omni variant lacks the requested band the
        provider hands back the directional base pattern, so the native mount
        is ceiling as well.
        """
        if not self.patterns.has_omni_variant(model):
            return self.mounts.default_mount_type(model)

        if is_omni_mode(antenna_mode):
            lookup = self.patterns.lookup_pattern(model, band, antenna_mode)
            if lookup.is_fallback or lookup.pattern is None:
                return MountType.CEILING.value
            return self.mounts.default_mount_type(model)

        return MountType.CEILING.value

    def elevation_offset(self, ap: AccessPoint, band: Band) -> int:
        native = self.pattern_native_mount(ap.model, band, ap.antenna_mode)
        return mount_offset(ap.mount_type) - mount_offset(native)

    def antenna_gain(
        self,
        ap: AccessPoint,
        band: Band,
        azimuth_deg: int,
        elevation_deg: int,
        elevation_offset: Optional[int] = None
    ) -> Tuple[float, float]:
        """
        Azimuth and elevation gain (dB) of the AP toward a direction.

        elevation_deg is the raw geometric elevation (0 = straight down,
        90 = horizon); the mount offset is applied here unless a
        precomputed one is passed in.
        """
        if elevation_offset is None:
            elevation_offset = self.elevation_offset(ap, band)
        elevation_deg = adjust_elevation(elevation_deg, elevation_offset)

        # A wall mount rotates both planes by 90 degrees: horizontal
        # directionality comes from the elevation cut and vice versa.
        if ap.mount_type == MountType.WALL.value:
            az_gain = self.patterns.elevation_gain(ap.model, band, azimuth_deg, ap.antenna_mode)
            el_gain = self.patterns.azimuth_gain(ap.model, band, elevation_deg, ap.antenna_mode)
        else:
            az_gain = self.patterns.azimuth_gain(ap.model, band, azimuth_deg, ap.antenna_mode)
            el_gain = self.patterns.elevation_gain(ap.model, band, elevation_deg, ap.antenna_mode)
        return az_gain, el_gain
