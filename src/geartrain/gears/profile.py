"""2D tooth boundary synthesis.

Tooth flanks are not true involutes. Each tooth is a six-point polygon with
three radial stations (root, pitch circle, tip) joined by straight chords;
the union of all teeth with a root disc is capped by the tip circle and then
rounded by paired grow/shrink passes, which stand in for root fillets and tip
radii. Ring gears are synthesised as their cutting shape: the teeth of the
cutter are the ring's tooth spaces.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

from shapely import affinity
from shapely.geometry import Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from ..errors import InvalidGearError
from .gear import Gear

logger = logging.getLogger(__name__)

# How far the root and tip stations extend past the root and tip circles,
# as a fraction of the tooth depth. Keeps the union and the cap clean.
STATION_OVERSHOOT = 0.1

# Narrowest allowed tip half-width, as a fraction of a quarter circular pitch.
MIN_TIP_FRACTION = 0.05


@dataclass(frozen=True)
class RenderConfig:
    """Options for profile synthesis, passed explicitly to every call.

    Attributes:
        render_teeth: If False, substitute the plain pitch circle (fast preview).
        tooth_clearance: Total backlash allowance in mm; half is taken off
            every profile.
        rounding_radius: Radius of the grow/shrink rounding passes in mm.
        resolution: Segments per quarter circle for discs and round joins.
    """

    render_teeth: bool = True
    tooth_clearance: float = 0.1
    rounding_radius: float = 0.2
    resolution: int = 16

    def __post_init__(self):
        if self.tooth_clearance < 0:
            raise ValueError(f"tooth_clearance cannot be negative: {self.tooth_clearance}")
        if self.rounding_radius < 0:
            raise ValueError(f"rounding_radius cannot be negative: {self.rounding_radius}")
        if self.resolution < 1:
            raise ValueError(f"resolution must be at least 1: {self.resolution}")


DEFAULT_CONFIG = RenderConfig()


def disc(radius: float, resolution: int = DEFAULT_CONFIG.resolution) -> Polygon:
    """Circle of the given radius centred on the origin."""
    return Point(0.0, 0.0).buffer(radius, quad_segs=resolution)


class GearProfile2D:
    """Builds the closed 2D boundary of one full turn of teeth."""

    def __init__(self, gear: Gear, config: RenderConfig = DEFAULT_CONFIG):
        self.gear = gear
        self.config = config

    @property
    def inner_radius(self) -> float:
        return self.gear.profile_radii[0]

    @property
    def outer_radius(self) -> float:
        return self.gear.profile_radii[1]

    @property
    def tilt(self) -> float:
        """Flank tilt in degrees: pressure angle less half the tooth angle."""
        return self.gear.geartype.pressure_angle - 0.5 * self.gear.tooth_angle

    def _check(self):
        if self.gear.teeth <= 0:
            raise InvalidGearError(
                f"cannot synthesise a profile for {self.gear.teeth} teeth"
            )

    def stations(self) -> List[Tuple[float, float]]:
        """(radius, half-width) at the root, pitch and tip stations."""
        self._check()
        gt = self.gear.geartype
        pitch_r = self.gear.pitch_radius
        inner, outer = self.inner_radius, self.outer_radius
        overshoot = STATION_OVERSHOOT * (outer - inner)
        slope = math.tan(math.radians(self.tilt))
        quarter = gt.circular_pitch / 4

        r_root = max(inner - overshoot, 0.0)
        r_tip = outer + overshoot

        # Neighbouring teeth may meet at the root but never cross it
        root_limit = r_root * math.tan(math.radians(self.gear.tooth_angle / 2))
        h_root = min(quarter + (pitch_r - r_root) * slope, root_limit)
        h_root = max(h_root, MIN_TIP_FRACTION * quarter)
        h_tip = max(quarter - (r_tip - pitch_r) * slope, MIN_TIP_FRACTION * quarter)

        return [(r_root, h_root), (pitch_r, quarter), (r_tip, h_tip)]

    def tooth_polygon(self, index: int = 0) -> Polygon:
        """Polygon of tooth ``index``, centred on angle ``index * tooth_angle``.

        Ring cutters are offset by half a tooth so that the ring itself, like
        every other gear, has a tooth centred on +X.
        """
        (r0, h0), (r1, h1), (r2, h2) = self.stations()
        points = [(r0, -h0), (r1, -h1), (r2, -h2), (r2, h2), (r1, h1), (r0, h0)]
        tooth = Polygon(points)
        phase = index + (0.5 if self.gear.is_ring else 0.0)
        if phase:
            tooth = affinity.rotate(tooth, phase * self.gear.tooth_angle, origin=(0, 0))
        return tooth

    def build(self) -> BaseGeometry:
        """Synthesise the boundary.

        Returns:
            A shapely polygon. For ring gears this is the cutting shape to
            subtract from the ring blank.
        """
        self._check()
        cfg = self.config

        if not cfg.render_teeth:
            return disc(self.gear.pitch_radius, cfg.resolution)

        teeth = [self.tooth_polygon(i) for i in range(self.gear.teeth)]
        shape = unary_union([disc(max(self.inner_radius, 0.0), cfg.resolution)] + teeth)
        shape = shape.intersection(disc(self.outer_radius, cfg.resolution))

        r = cfg.rounding_radius
        if r > 0:
            # Grow then shrink fills the reentrant root corners,
            # shrink then grow rounds the tips.
            shape = shape.buffer(r, quad_segs=cfg.resolution).buffer(-r, quad_segs=cfg.resolution)
            shape = shape.buffer(-r, quad_segs=cfg.resolution).buffer(r, quad_segs=cfg.resolution)

        if cfg.tooth_clearance > 0:
            # The ring profile is a cutter, so its clearance goes the other way
            half = cfg.tooth_clearance / 2
            shape = shape.buffer(half if self.gear.is_ring else -half, quad_segs=cfg.resolution)

        logger.debug(
            f"Profile for {self.gear}: {len(teeth)} teeth, "
            f"radii {self.inner_radius:.3f}..{self.outer_radius:.3f}, area {shape.area:.2f}"
        )
        return shape


def gear_profile(gear: Gear, config: RenderConfig = DEFAULT_CONFIG) -> BaseGeometry:
    """Convenience wrapper for ``GearProfile2D(gear, config).build()``."""
    return GearProfile2D(gear, config).build()
