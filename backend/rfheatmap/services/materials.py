"""Building material penetration losses and band center frequencies.

Wall values follow ITU-R P.2040-2 typical penetration losses; floor slab values
follow the ITU-R P.1238-10 floor penetration factors.
"""

import logging
from typing import Dict, List, Protocol

from rfheatmap.services.domain import Band

logger = logging.getLogger(__name__)


# {material: {band: loss_db}}
MATERIAL_ATTENUATION_DB: Dict[str, Dict[Band, float]] = {
    "drywall": {  # Gypsum board / plasterboard
        Band.BAND_2_4: 3.0,
        Band.BAND_5: 4.0,
        Band.BAND_6: 5.0,
    },
    "plasterboard": {
        Band.BAND_2_4: 3.0,
        Band.BAND_5: 4.0,
        Band.BAND_6: 5.0,
    },
    "wood": {
        Band.BAND_2_4: 4.0,
        Band.BAND_5: 6.0,
        Band.BAND_6: 7.0,
    },
    "glass": {  # Standard clear glass
        Band.BAND_2_4: 2.5,
        Band.BAND_5: 4.0,
        Band.BAND_6: 6.0,
    },
    "glass_tinted": {  # IRR (Infrared Reflective) coated glass
        Band.BAND_2_4: 8.0,
        Band.BAND_5: 15.0,
        Band.BAND_6: 20.0,
    },
    "brick": {
        Band.BAND_2_4: 8.0,
        Band.BAND_5: 12.0,
        Band.BAND_6: 15.0,
    },
    "concrete": {
        Band.BAND_2_4: 12.0,
        Band.BAND_5: 18.0,
        Band.BAND_6: 23.0,
    },
    "reinforced_concrete": {
        Band.BAND_2_4: 18.0,
        Band.BAND_5: 27.0,
        Band.BAND_6: 32.0,
    },
    "metal": {
        Band.BAND_2_4: 40.0,
        Band.BAND_5: 50.0,
        Band.BAND_6: 55.0,
    },
    # Floor slabs (the slab belonging to the upper of two floors)
    "floor_wood": {
        Band.BAND_2_4: 10.0,
        Band.BAND_5: 13.0,
        Band.BAND_6: 15.0,
    },
    "floor_concrete": {
        Band.BAND_2_4: 15.0,
        Band.BAND_5: 16.0,
        Band.BAND_6: 18.0,
    },
    "floor_steel": {  # Steel deck with concrete topping
        Band.BAND_2_4: 25.0,
        Band.BAND_5: 30.0,
        Band.BAND_6: 33.0,
    },
    "default": {  # Generic interior wall
        Band.BAND_2_4: 6.0,
        Band.BAND_5: 10.0,
        Band.BAND_6: 13.0,
    },
}

# Center of the commonly used channel range per band
BAND_CENTER_FREQUENCY_MHZ: Dict[Band, float] = {
    Band.BAND_2_4: 2437.0,
    Band.BAND_5: 5500.0,
    Band.BAND_6: 6525.0,
}


class MaterialAttenuationProvider(Protocol):
    """Source of material losses and band frequencies for the engine."""

    def attenuation_db(self, material: str, band: Band) -> float:
        ...

    def center_frequency_mhz(self, band: Band) -> float:
        ...


class MaterialAttenuation:
    """
    Table-backed material attenuation provider.

    Unknown material ids resolve to the generic interior wall ("default")
    instead of failing.
    """

    def __init__(
        self,
        table: Dict[str, Dict[Band, float]] = None,
        frequencies: Dict[Band, float] = None
    ):
        self.table = table if table is not None else MATERIAL_ATTENUATION_DB
        self.frequencies = frequencies if frequencies is not None else BAND_CENTER_FREQUENCY_MHZ

    def attenuation_db(self, material: str, band: Band) -> float:
        key = (material or "default").lower()
        props = self.table.get(key)
        if props is None:
            logger.debug(f"Unknown material '{material}', using default attenuation")
            props = self.table["default"]
        return props[Band(band)]

    def center_frequency_mhz(self, band: Band) -> float:
        return self.frequencies[Band(band)]

    def materials(self) -> List[str]:
        """Known material ids, walls first then floor slabs."""
        walls = [m for m in self.table if not m.startswith("floor_")]
        floors = [m for m in self.table if m.startswith("floor_")]
        return walls + floors
