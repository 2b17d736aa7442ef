"""Part and assembly generators for geartrains."""

from .base import AssemblyGenerator, PartGenerator, assemble
from .gear import GearGenerator
from .planetary import GearPlaneGenerator
from .stepped_planetary import SteppedPlanetaryGenerator
from .gearbox import GearboxGenerator
from .motor_params import MOTORS, MotorParams, motor

__all__ = [
    "AssemblyGenerator",
    "PartGenerator",
    "assemble",
    "GearGenerator",
    "GearPlaneGenerator",
    "SteppedPlanetaryGenerator",
    "GearboxGenerator",
    "MOTORS",
    "MotorParams",
    "motor",
]
