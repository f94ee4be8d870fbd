"""Default physical mount type per access point model."""

import re
from typing import Dict, Protocol

from rfheatmap.services.domain import MountType


class MountTypeResolver(Protocol):
    def default_mount_type(self, model: str) -> str:
        ...


# Checked in order; first match wins
MOUNT_TYPE_RULES = [
    (re.compile(r"outdoor|mesh|\bm2\b|bullet|sector", re.IGNORECASE), MountType.WALL),
    (re.compile(r"(^|[-_ ])iw([-_ ]|$)|in-?wall", re.IGNORECASE), MountType.WALL),
    (re.compile(r"desktop|flex|express|instant|\bbeacon\b", re.IGNORECASE), MountType.DESKTOP),
]


class ModelMountTypeResolver:
    """
    Resolve a model's usual mount from its name.

    Outdoor, mesh and in-wall hardware mounts on walls, desktop-class units
    sit flat on a surface, everything else is assumed ceiling mounted.
    Explicit overrides take precedence over the name rules.
    """

    def __init__(self, overrides: Dict[str, str] = None):
        self.overrides = {k.lower(): MountType(v).value for k, v in (overrides or {}).items()}

    def default_mount_type(self, model: str) -> str:
        if not model:
            return MountType.CEILING.value

        override = self.overrides.get(model.lower())
        if override:
            return override

        for pattern, mount in MOUNT_TYPE_RULES:
            if pattern.search(model):
                return mount.value
        return MountType.CEILING.value
