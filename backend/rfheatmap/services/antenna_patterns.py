"""Antenna radiation pattern loading and gain lookup.

Pattern files store sparse (angle_deg, gain_db) points per model, band and
plane. On load every cut is interpolated periodically onto 360 one-degree
buckets and normalized so the peak is 0 dB; combined gain is the sum of the
azimuth and elevation cuts (pattern multiplication in dB).

File layout::

    {
      "models": {
        "U6-Pro": {
          "5GHz": {"azimuth": [[0, 0.0], [90, -1.5], ...],
                   "elevation": [[0, 0.0], [90, -6.0], ...]}
        },
        "U7-Pro-Outdoor:omni": { ... }
      }
    }

A ``"<model>:omni"`` entry is the omni variant of a switchable model.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

import numpy as np

from rfheatmap.services.domain import Band
from rfheatmap.services.materials import BAND_CENTER_FREQUENCY_MHZ

logger = logging.getLogger(__name__)

OMNI_MODE = "omni"
OMNI_SUFFIX = ":omni"


def is_omni_mode(antenna_mode: Optional[str]) -> bool:
    return bool(antenna_mode) and antenna_mode.lower() == OMNI_MODE


def interpolate_cut(points: Iterable[Sequence[float]]) -> np.ndarray:
    """
    Resample sparse (angle, gain) points onto 360 one-degree buckets.

    Interpolation wraps around 360 degrees. The result is normalized to a
    0 dB peak. No points yields a flat 0 dB cut.
    """
    pts = sorted((float(a) % 360.0, float(g)) for a, g in points)
    if not pts:
        return np.zeros(360, dtype=np.float32)

    angles = np.array([a for a, _ in pts])
    gains = np.array([g for _, g in pts])
    table = np.interp(np.arange(360), angles, gains, period=360)
    return (table - table.max()).astype(np.float32)


@dataclass(frozen=True, eq=False)
class AntennaPattern:
    """Azimuth and elevation cuts for one model and band."""
    model: str
    band: Band
    azimuth: np.ndarray
    elevation: np.ndarray

    def azimuth_gain(self, angle_deg: float) -> float:
        return float(self.azimuth[int(angle_deg) % 360])

    def elevation_gain(self, angle_deg: float) -> float:
        return float(self.elevation[int(angle_deg) % 360])


@dataclass(frozen=True)
class PatternLookup:
    """Result of a pattern lookup.

    is_fallback is set when the exact (model, band, mode) pattern was not
    available and a substitute (base directional pattern, nearest band, or
    none at all) was returned instead.
    """
    pattern: Optional[AntennaPattern]
    is_fallback: bool


class AntennaPatternProvider(Protocol):
    """Source of antenna gains for the propagation engine."""

    def azimuth_gain(self, model: str, band: Band, angle_deg: float, antenna_mode: Optional[str] = None) -> float:
        ...

    def elevation_gain(self, model: str, band: Band, angle_deg: float, antenna_mode: Optional[str] = None) -> float:
        ...

    def has_omni_variant(self, model: str) -> bool:
        ...

    def lookup_pattern(self, model: str, band: Band, antenna_mode: Optional[str] = None) -> PatternLookup:
        ...

    def pattern_handle(self, model: str, band: Band, antenna_mode: Optional[str] = None) -> object:
        ...


class AntennaPatternLoader:
    """
    In-memory antenna pattern provider.

    Missing data never raises: an unknown band falls back to the nearest
    available band of the model, an omni request without omni data for that
    band falls back to the base pattern, and an unknown model gives 0 dB gain
    in every direction.
    """

    def __init__(self, patterns: Dict[str, Dict[Band, AntennaPattern]] = None):
        self._patterns = patterns or {}

    @classmethod
    def from_dict(cls, raw: dict) -> "AntennaPatternLoader":
        patterns: Dict[str, Dict[Band, AntennaPattern]] = {}
        for model_key, bands in raw.get("models", {}).items():
            model_patterns = {}
            for band_name, cuts in bands.items():
                band = Band(band_name)
                model_patterns[band] = AntennaPattern(
                    model=model_key,
                    band=band,
                    azimuth=interpolate_cut(cuts.get("azimuth", [])),
                    elevation=interpolate_cut(cuts.get("elevation", [])),
                )
            patterns[model_key] = model_patterns
        return cls(patterns)

    @classmethod
    def from_file(cls, path: str) -> "AntennaPatternLoader":
        """Load patterns from a JSON file; a missing file gives an empty loader."""
        if not os.path.exists(path):
            logger.warning(f"Antenna pattern file not found: {path}; all gains default to 0 dB")
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            loader = cls.from_dict(raw)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid antenna pattern file {path}: {e}") from e
        logger.info(f"Loaded antenna patterns for {len(loader._patterns)} models from {path}")
        return loader

    def models(self) -> List[str]:
        return sorted(m for m in self._patterns if not m.endswith(OMNI_SUFFIX))

    def bands_for(self, model: str) -> List[Band]:
        return list(self._patterns.get(model, {}))

    def has_omni_variant(self, model: str) -> bool:
        return (model + OMNI_SUFFIX) in self._patterns

    def lookup_pattern(self, model: str, band: Band, antenna_mode: Optional[str] = None) -> PatternLookup:
        band = Band(band)
        if is_omni_mode(antenna_mode):
            omni = self._patterns.get(model + OMNI_SUFFIX, {})
            if band in omni:
                return PatternLookup(omni[band], is_fallback=False)
            base = self._lookup_base(model, band)
            return PatternLookup(base.pattern, is_fallback=True)
        return self._lookup_base(model, band)

    def pattern_handle(self, model: str, band: Band, antenna_mode: Optional[str] = None) -> object:
        """Opaque identity of the pattern that a lookup resolves to."""
        return self.lookup_pattern(model, band, antenna_mode).pattern

    def azimuth_gain(self, model: str, band: Band, angle_deg: float, antenna_mode: Optional[str] = None) -> float:
        pattern = self.lookup_pattern(model, band, antenna_mode).pattern
        return pattern.azimuth_gain(angle_deg) if pattern is not None else 0.0

    def elevation_gain(self, model: str, band: Band, angle_deg: float, antenna_mode: Optional[str] = None) -> float:
        pattern = self.lookup_pattern(model, band, antenna_mode).pattern
        return pattern.elevation_gain(angle_deg) if pattern is not None else 0.0

    def _lookup_base(self, model: str, band: Band) -> PatternLookup:
        bands = self._patterns.get(model)
        if not bands:
            return PatternLookup(None, is_fallback=True)
        if band in bands:
            return PatternLookup(bands[band], is_fallback=False)

        target = BAND_CENTER_FREQUENCY_MHZ[band]
        nearest = min(bands, key=lambda b: abs(BAND_CENTER_FREQUENCY_MHZ[b] - target))
        return PatternLookup(bands[nearest], is_fallback=True)
