"""Shared collaborators for the API, built once per process."""

import logging
from functools import lru_cache

from fastapi import Depends

from rfheatmap.core.config import settings
from rfheatmap.services.antenna_patterns import AntennaPatternLoader
from rfheatmap.services.materials import MaterialAttenuation
from rfheatmap.services.mount_types import ModelMountTypeResolver
from rfheatmap.services.rf_propagation import PropagationEngine

logger = logging.getLogger(__name__)


@lru_cache()
def get_pattern_loader() -> AntennaPatternLoader:
    return AntennaPatternLoader.from_file(settings.ANTENNA_PATTERN_PATH)


@lru_cache()
def get_materials() -> MaterialAttenuation:
    return MaterialAttenuation()


@lru_cache()
def get_mount_resolver() -> ModelMountTypeResolver:
    return ModelMountTypeResolver()


def get_engine(
    patterns: AntennaPatternLoader = Depends(get_pattern_loader),
    materials: MaterialAttenuation = Depends(get_materials),
    mounts: ModelMountTypeResolver = Depends(get_mount_resolver)
) -> PropagationEngine:
    return PropagationEngine(patterns, materials, mounts)


def log_pattern_diagnostics(patterns: AntennaPatternLoader, mounts: ModelMountTypeResolver) -> None:
    """Log which antenna patterns are available; called once at startup."""
    for model in patterns.models():
        bands = ", ".join(b.value for b in patterns.bands_for(model))
        logger.info(
            f"Antenna pattern: {model} bands=[{bands}] "
            f"omni={patterns.has_omni_variant(model)} default_mount={mounts.default_mount_type(model)}"
        )
