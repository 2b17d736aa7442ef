"""Gear geometry engine: tooth families, profiles, solids and geartrains."""

from .geartype import GearType, PRESETS
from .gear import Gear, GearKind
from .profile import GearProfile2D, RenderConfig, DEFAULT_CONFIG, gear_profile
from .solid import gear_solid, gear_lightened, gear_clearance, extrude_profile
from .gearplane import GearPlane, PlanetPlacement
from .stepped import SteppedPlanetary, stepped_plane, stepped_ratio
from .gearbox import Gearbox, GearboxStage, StageFrame

__all__ = [
    "GearType",
    "PRESETS",
    "Gear",
    "GearKind",
    "GearProfile2D",
    "RenderConfig",
    "DEFAULT_CONFIG",
    "gear_profile",
    "gear_solid",
    "gear_lightened",
    "gear_clearance",
    "extrude_profile",
    "GearPlane",
    "PlanetPlacement",
    "SteppedPlanetary",
    "stepped_plane",
    "stepped_ratio",
    "Gearbox",
    "GearboxStage",
    "StageFrame",
]
