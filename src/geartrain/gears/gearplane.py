"""Planetary gear plane: one sun, N identical planets and a derived ring.

Angle conventions (degrees, counter-clockwise about +Z):

- Every gear, ring included, has a tooth centred on +X at rotation 0.
- The ring is the fixed reference and is never rotated.
- A planet at orbit angle 0 is spun half a tooth so a tooth space faces the
  ring tooth at +X. Moving it around the orbit rolls it against the fixed
  ring, which spins it by ``-angle * (ring - planet) / planet``.
- The sun is spun half a tooth when the planet tooth count is odd, because
  such a planet then presents a tooth (not a space) to the sun.

With the ring and sun held still, a planet can only sit at multiples of
``360 / (ring + sun)``. Evenly spaced targets are snapped to that grid, so
planets are only evenly spaced when ``(ring + sun) % N == 0``.
"""

import logging
import math
import warnings
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import AssemblyWarning, InvalidGearError, InvalidGeartrainError
from .gear import Gear, GearKind
from .geartype import GearType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanetPlacement:
    """Where one planet sits and how far it is spun."""

    index: int
    ideal_angle: float  # evenly spaced target, degrees
    angle: float        # snapped orbit angle, degrees
    spin: float         # planet rotation about its own axis, degrees
    x: float
    y: float

    @property
    def deviation(self) -> float:
        return self.angle - self.ideal_angle


@dataclass(frozen=True)
class GearPlane:
    """A planetary gear set in a single plane.

    Attributes:
        geartype: Tooth family shared by sun, planets and ring.
        sun_teeth: Sun tooth count. Negative values are allowed as
            intermediates, but the sun gear then cannot be built.
        planet_teeth: Tooth count of each planet.
        planet_count: Number of planets.
    """

    geartype: GearType
    sun_teeth: int
    planet_teeth: int
    planet_count: int = 3

    def __post_init__(self):
        if self.sun_teeth == 0:
            raise InvalidGeartrainError(
                "sun has zero teeth: ratio and timing are undefined", subject=self.describe()
            )
        if self.planet_teeth <= 0:
            raise InvalidGearError(
                f"planets need a positive tooth count, got {self.planet_teeth}",
                subject=self.describe(),
            )
        if self.planet_count < 1:
            raise InvalidGeartrainError(
                f"needs at least one planet, got {self.planet_count}", subject=self.describe()
            )
        if self.ring_teeth + self.sun_teeth == 0:
            raise InvalidGeartrainError(
                f"sun of {self.sun_teeth} teeth cancels the ring: no planet timing exists",
                subject=self.describe(),
            )

    # --- derived tooth counts and gears ---

    @property
    def ring_teeth(self) -> int:
        return self.sun_teeth + 2 * self.planet_teeth

    @property
    def sun_gear(self) -> Gear:
        if self.sun_teeth < 0:
            raise InvalidGearError(
                f"sun tooth count {self.sun_teeth} does not resolve to a buildable gear",
                subject=self.describe(),
            )
        return Gear(self.geartype, self.sun_teeth, GearKind.SPUR)

    @property
    def planet_gear(self) -> Gear:
        return Gear(self.geartype, self.planet_teeth, GearKind.SPUR)

    @property
    def ring_gear(self) -> Gear:
        if self.ring_teeth <= 0:
            raise InvalidGearError(
                f"ring tooth count {self.ring_teeth} is not positive", subject=self.describe()
            )
        return Gear(self.geartype, self.ring_teeth, GearKind.RING)

    @property
    def orbit_radius(self) -> float:
        """Distance from the sun axis to each planet axis."""
        return self.geartype.diametral_pitch * (self.sun_teeth + self.planet_teeth) / 2

    @property
    def ratio_ring_fixed(self) -> float:
        """Sun turns per carrier turn with the ring held still."""
        return (self.ring_teeth + self.sun_teeth) / self.sun_teeth

    @property
    def constraint_angle(self) -> float:
        """Spacing of the orbit angles at which a planet meshes with both."""
        return 360.0 / (self.ring_teeth + self.sun_teeth)

    @property
    def is_evenly_spaced(self) -> bool:
        return (self.ring_teeth + self.sun_teeth) % self.planet_count == 0

    # --- timing ---

    @property
    def sun_spin(self) -> float:
        """Rotation applied to the sun so it meshes with the first planet."""
        return (self.planet_teeth % 2) * 180.0 / self.sun_teeth

    def snap_angle(self, angle: float) -> float:
        """Nearest orbit angle at which a planet meshes with sun and ring."""
        step = self.constraint_angle
        return math.floor(angle / step + 0.5) * step

    def planet_spin(self, angle: float) -> float:
        """Planet rotation at orbit angle ``angle``.

        Closed form of the timing correction: rather than nudging an evenly
        spaced planet by its deviation from the ideal angle, the spin is
        worked out from the actual orbit angle. Rolling a planet ``angle``
        degrees around the fixed ring turns it ``-angle * (ring - planet) /
        planet``, and ``180 / planet`` puts a gap on the ring tooth at +X.
        This always meshes with the ring; it meshes with the sun only on
        the snapped grid (see ``snap_angle``).
        """
        p = self.planet_teeth
        return 180.0 / p - angle * (self.ring_teeth - p) / p

    def planet_placements(self, tolerance: Optional[float] = None) -> List[PlanetPlacement]:
        """Snapped placement of every planet.

        Args:
            tolerance: If given, issue an AssemblyWarning when any planet is
                moved more than this many degrees from even spacing.
        """
        placements = []
        for i in range(self.planet_count):
            ideal = 360.0 * i / self.planet_count
            angle = self.snap_angle(ideal)
            rad = math.radians(angle)
            placements.append(
                PlanetPlacement(
                    index=i,
                    ideal_angle=ideal,
                    angle=angle,
                    spin=self.planet_spin(angle),
                    x=self.orbit_radius * math.cos(rad),
                    y=self.orbit_radius * math.sin(rad),
                )
            )

        logger.debug(
            f"{self.describe()}: planet angles "
            + ", ".join(f"{pl.angle:.3f}" for pl in placements)
        )

        if tolerance is not None:
            worst = max(placements, key=lambda pl: abs(pl.deviation))
            if abs(worst.deviation) > tolerance:
                warnings.warn(
                    f"planet {worst.index} of {self.describe()} moved "
                    f"{worst.deviation:+.3f} deg from even spacing "
                    f"(tolerance {tolerance} deg)",
                    AssemblyWarning,
                    stacklevel=2,
                )
        return placements

    def planet_angles(self) -> List[float]:
        return [pl.angle for pl in self.planet_placements()]

    def check_planet_clearance(self, clearance: float = 0.0) -> bool:
        """Warn if neighbouring planet tip circles come within ``clearance``.

        Returns:
            True if every pair of neighbouring planets clears.
        """
        if self.planet_count < 2:
            return True
        angles = sorted(self.planet_angles())
        gaps = [b - a for a, b in zip(angles, angles[1:])]
        gaps.append(360.0 - angles[-1] + angles[0])
        closest = min(gaps)
        spacing = 2 * self.orbit_radius * math.sin(math.radians(closest) / 2)
        needed = 2 * self.planet_gear.outer_radius + clearance
        if spacing < needed:
            warnings.warn(
                f"planets of {self.describe()} overlap: centres {spacing:.2f} mm "
                f"apart, tip circles need {needed:.2f} mm",
                AssemblyWarning,
                stacklevel=2,
            )
            return False
        return True

    # --- diagnostics ---

    def describe(self) -> str:
        return (
            f"gearplane(sun={self.sun_teeth}, planet={self.planet_teeth}, "
            f"ring={self.ring_teeth}, n={self.planet_count})"
        )

    def summary(self) -> str:
        """Human-readable calibration summary."""
        lines = [
            f"Gearplane: pitch {self.geartype.diametral_pitch:.4f} mm/tooth, "
            f"height {self.geartype.height:.2f} mm",
            f"  Sun:    {self.sun_teeth} teeth",
            f"  Planet: {self.planet_teeth} teeth x {self.planet_count}",
            f"  Ring:   {self.ring_teeth} teeth",
            f"  Orbit radius: {self.orbit_radius:.3f} mm",
            f"  Ratio (ring fixed): {self.ratio_ring_fixed:.4f}",
        ]
        if not self.is_evenly_spaced:
            worst = max(abs(pl.deviation) for pl in self.planet_placements())
            lines.append(f"  Planets snapped up to {worst:.3f} deg from even spacing")
        return "\n".join(lines)

    def print_summary(self):
        print(self.summary())

    def gears(self) -> Tuple[Gear, Gear, Gear]:
        """(sun, planet, ring)."""
        return self.sun_gear, self.planet_gear, self.ring_gear
