"""Stepped (compound) planetary: two gear planes sharing one planet orbit.

The planets of both planes are rigidly joined. Power enters the input sun;
the input ring is held still; the output ring turns. Because the two rings
differ by only a few teeth, the output ring creeps slowly, giving a very high
reduction in one compact disc.
"""

import logging
import warnings
from dataclasses import dataclass

from ..errors import AssemblyWarning, DegenerateGeartrainError, GeartrainError, InvalidGearError
from .gearplane import GearPlane

logger = logging.getLogger(__name__)


def stepped_ratio(plane_in: GearPlane, plane_out: GearPlane) -> float:
    """Input sun turns per output ring turn.

    Raises:
        DegenerateGeartrainError: The two rings have the same tooth count.
    """
    ring_in = plane_in.ring_teeth
    ring_out = plane_out.ring_teeth
    if ring_out == ring_in:
        raise DegenerateGeartrainError(
            f"stepped planetary rings both have {ring_in} teeth; "
            f"the output ring would never turn"
        )
    return plane_in.ratio_ring_fixed * ring_out / (ring_out - ring_in)


def stepped_plane(plane_in: GearPlane, delta: int) -> GearPlane:
    """Output gear plane with ``delta`` more sun teeth per planet.

    Keeps the planet count and planet tooth count, and re-pitches the tooth
    family so the output orbit radius equals the input orbit radius:
    ``pitch = 2 * orbit / (sun_out + planet)``.
    """
    sun_out = plane_in.sun_teeth + delta * plane_in.planet_count
    teeth_across = sun_out + plane_in.planet_teeth
    if teeth_across <= 0:
        raise InvalidGearError(
            f"stepped plane with sun {sun_out} and planet {plane_in.planet_teeth} "
            f"has no positive pitch"
        )
    pitch_out = 2 * plane_in.orbit_radius / teeth_across
    logger.debug(
        f"Stepped {plane_in.describe()} by {delta}: sun {sun_out}, pitch {pitch_out:.5f}"
    )
    return GearPlane(
        geartype=plane_in.geartype.with_pitch(pitch_out),
        sun_teeth=sun_out,
        planet_teeth=plane_in.planet_teeth,
        planet_count=plane_in.planet_count,
    )


@dataclass(frozen=True)
class SteppedPlanetary:
    """Two gear planes whose planets share an orbit and are joined together.

    Attributes:
        plane_in: Input plane (driven sun, fixed ring).
        delta: Sun teeth added per planet in the output plane.
    """

    plane_in: GearPlane
    delta: int = 1

    def __post_init__(self):
        if self.delta == 0:
            raise DegenerateGeartrainError(
                "stepped planetary with delta 0 has identical ring gears"
            )
        # Fails early on impossible pitches
        try:
            stepped_plane(self.plane_in, self.delta)
        except GeartrainError as err:
            raise err.within(f"output plane of delta {self.delta}") from err

    @property
    def plane_out(self) -> GearPlane:
        return stepped_plane(self.plane_in, self.delta)

    @property
    def orbit_radius(self) -> float:
        return self.plane_in.orbit_radius

    @property
    def ratio(self) -> float:
        return stepped_ratio(self.plane_in, self.plane_out)

    @property
    def planet_pair_offset(self) -> float:
        """Z offset of the output plane above the input plane."""
        return self.plane_in.geartype.height

    @property
    def total_height(self) -> float:
        return self.plane_in.geartype.height + self.plane_out.geartype.height

    def check_alignment(self, tolerance: float = 1e-6) -> bool:
        """Warn if the two planes would snap their planets to different angles.

        The generator places both halves of a planet pair at the input
        plane's angle and times the upper half against the output ring, so
        a disagreement still builds a meshing set. It does mean the output
        plane on its own could not take a sun. Agreement always holds when
        the input plane is evenly spaced, since each step adds
        ``planet_count`` sun teeth per unit of ``delta``.
        """
        pairs = zip(self.plane_in.planet_angles(), self.plane_out.planet_angles())
        worst = max(abs(a - b) for a, b in pairs)
        if worst > tolerance:
            warnings.warn(
                f"stepped planetary planets disagree by {worst:.3f} deg between "
                f"{self.plane_in.describe()} and {self.plane_out.describe()}",
                AssemblyWarning,
                stacklevel=2,
            )
            return False
        return True

    def summary(self) -> str:
        out = self.plane_out
        return "\n".join([
            "Stepped planetary",
            "Input stage:",
            self.plane_in.summary(),
            "Output stage:",
            out.summary(),
            f"Ring teeth {self.plane_in.ring_teeth} -> {out.ring_teeth}, "
            f"combined ratio {self.ratio:.3f}",
        ])

    def print_summary(self):
        print(self.summary())
