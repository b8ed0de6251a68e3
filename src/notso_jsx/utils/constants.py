"""Constants and configuration for JSX generation."""

import math
from dataclasses import dataclass

# Values three.js assigns by default; props equal to these are not emitted
CAMERA_DEFAULTS: dict[str, float] = {
    "zoom": 1,
    "far": 2000,
    "near": 0.1,
    "fov": 50,
}

LIGHT_DEFAULTS: dict[str, float] = {
    "angle": math.pi / 3,
    "penumbra": 0,
    "decay": 1,
    "distance": 0,
}

DEFAULT_UP: tuple[float, float, float] = (0.0, 1.0, 0.0)

# Symbolic angle detection works on radians scaled by this factor (1e-5 rad)
ANGLE_SCALE = 100000
ANGLE_MAX_DIVISOR = 10

# Node types that carry no rendering identity of their own
# Options switched on together by the verbose shorthand (names and empty groups)
VERBOSE_OPTIONS: tuple[str, ...] = ("keepnames", "keepgroups")

GROUP_KINDS: frozenset[str] = frozenset({"group", "scene"})
TRANSFORM_KEYS: frozenset[str] = frozenset({"position", "rotation", "scale"})


@dataclass
class JsxConfig:
    """Options for a single scene-to-JSX conversion."""

    precision: int = 2  # Fractional digits for every emitted number
    keepnames: bool = False  # Emit name="..." on every named node
    keepgroups: bool = False  # Never prune wrapper groups
    shadows: bool = False  # castShadow/receiveShadow on every mesh
    meta: bool = False  # Emit userData
    types: bool = False  # TypeScript output
    draco: str | None = None  # Draco decoder path passed to useGLTF
    instance: bool = False  # Instance re-occurring geometry
    instanceall: bool = False  # Instance every geometry
    aggressive: bool = False  # Collapse transform-only and cancelling groups
    debug: bool = False  # Dump the scene tree and pruning decisions
    header: str | None = None  # Free-form header comment line
    size: str | None = None  # Size report line for the header

    @property
    def instancing(self) -> bool:
        return self.instance or self.instanceall


DEFAULT_CONFIG = JsxConfig()
