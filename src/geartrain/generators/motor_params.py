"""Parameters for the motors a gearbox can be driven by.

Only the dimensions needed to size the input axle bore and the motor plate
bolt circle are kept.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class MotorParams:
    """Mounting dimensions of a motor face."""

    name: str
    shaft_diameter: float       # Output shaft diameter
    body_diameter: float        # Can (or flange) diameter, for the plate pilot hole clearance
    boss_diameter: float        # Raised boss around the shaft on the mounting face
    bolt_circle_diameter: float  # Diameter of the circle through the mounting holes
    bolt_count: int = 2
    bolt_hole_diameter: float = 2.2  # Clearance hole for the mounting screws
    bolt_angle: float = 0.0     # Angle of the first mounting hole, degrees

    def bolt_positions(self) -> List[Tuple[float, float]]:
        """XY of each mounting hole around the shaft."""
        r = self.bolt_circle_diameter / 2
        step = 360.0 / self.bolt_count
        return [
            (
                r * math.cos(math.radians(self.bolt_angle + i * step)),
                r * math.sin(math.radians(self.bolt_angle + i * step)),
            )
            for i in range(self.bolt_count)
        ]


MOTORS: Dict[str, MotorParams] = {
    "130": MotorParams(
        name="130",
        shaft_diameter=2.0,
        body_diameter=20.0,
        boss_diameter=6.2,
        bolt_circle_diameter=12.0,
        bolt_count=2,
        bolt_hole_diameter=2.2,
    ),
    "n20": MotorParams(
        name="n20",
        shaft_diameter=3.0,
        body_diameter=12.0,
        boss_diameter=4.0,
        bolt_circle_diameter=9.0,
        bolt_count=2,
        bolt_hole_diameter=1.8,
    ),
    "28byj-48": MotorParams(
        name="28byj-48",
        shaft_diameter=5.0,
        body_diameter=28.0,
        boss_diameter=9.0,
        bolt_circle_diameter=35.0,
        bolt_count=2,
        bolt_hole_diameter=4.2,
    ),
    "nema17": MotorParams(
        name="nema17",
        shaft_diameter=5.0,
        body_diameter=42.3,
        boss_diameter=22.0,
        bolt_circle_diameter=43.84,  # 31mm square hole pattern
        bolt_count=4,
        bolt_hole_diameter=3.2,
        bolt_angle=45.0,
    ),
}


def motor(name: str) -> MotorParams:
    """Look up a motor by name."""
    try:
        return MOTORS[name.lower()]
    except KeyError:
        raise KeyError(f"unknown motor {name!r}, expected one of {sorted(MOTORS)}") from None
