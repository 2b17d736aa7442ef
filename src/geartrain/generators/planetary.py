"""Planetary gear plane assembly generator.

Places the sun at the origin, the planets on their snapped orbit angles and
the ring around them, each spun so that every mesh is in phase.
"""

import logging
from typing import Dict, Optional

import cadquery as cq

from ..gears import DEFAULT_CONFIG, GearPlane, RenderConfig, gear_solid
from ..gears.solid import DEFAULT_RING_RIM, ring_blank_radius
from ..models.geometry import AssemblyModel, PartMetadata, PartType
from .base import assemble

logger = logging.getLogger(__name__)


class GearPlaneGenerator:
    """Generator for a single-plane planetary gear set."""

    def __init__(
        self,
        plane: GearPlane,
        config: RenderConfig = DEFAULT_CONFIG,
        sun_bore: float = 0.0,
        planet_bore: float = 0.0,
        rim: float = DEFAULT_RING_RIM,
        tolerance: Optional[float] = None,
        name: str = "gearplane",
    ):
        """Initialize the planetary generator.

        Args:
            plane: The gear plane to build.
            config: Profile synthesis options.
            sun_bore: Sun bore diameter.
            planet_bore: Planet bore diameter.
            rim: Ring wall outside its root circle.
            tolerance: Warn when a planet snaps further than this from even
                spacing (degrees).
            name: Assembly name.
        """
        self.plane = plane
        self.config = config
        self.sun_bore = sun_bore
        self.planet_bore = planet_bore
        self.rim = rim
        self.tolerance = tolerance
        self.name = name
        self._parts: Optional[Dict[str, cq.Workplane]] = None

    def layout(self) -> AssemblyModel:
        plane = self.plane
        model = AssemblyModel()
        model.add_part(PartType.SUN, "sun", rotation=plane.sun_spin)
        model.add_shaft_axis("sun_axis", (0.0, 0.0, 0.0), ["sun"])
        for pl in plane.planet_placements(self.tolerance):
            part_id = f"planet_{pl.index}"
            model.add_part(
                PartType.PLANET,
                part_id,
                origin=(pl.x, pl.y, 0.0),
                rotation=pl.spin,
                metadata={"orbit_angle": pl.angle, "deviation": pl.deviation},
                solid_id="planet",
            )
            model.add_shaft_axis(f"{part_id}_axis", (pl.x, pl.y, 0.0), [part_id])
        model.add_part(PartType.RING, "ring")
        return model

    def parts(self) -> Dict[str, cq.Workplane]:
        if self._parts is None:
            sun, planet, ring = self.plane.gears()
            logger.info(f"Building {self.plane.describe()}")
            self._parts = {
                "sun": gear_solid(sun, self.config, bore=self.sun_bore),
                "planet": gear_solid(planet, self.config, bore=self.planet_bore),
                "ring": gear_solid(ring, self.config, rim=self.rim),
            }
        return self._parts

    def generate(self) -> cq.Assembly:
        """Generate the planetary assembly with the sun axis on +Z."""
        self.plane.check_planet_clearance()
        return assemble(self.name, self.layout(), self.parts())

    def get_metadata(self) -> Dict[str, PartMetadata]:
        plane = self.plane
        sun, planet, ring = plane.gears()
        pitch = plane.geartype.diametral_pitch
        height = plane.geartype.height
        return {
            "sun": PartMetadata(
                part_id="sun",
                part_type=PartType.SUN,
                name=f"Sun Gear {sun.teeth}T",
                dimensions={
                    "pitch": pitch,
                    "teeth": sun.teeth,
                    "outer_diameter": sun.outer_diameter,
                    "face_width": height,
                    "bore_diameter": self.sun_bore,
                },
            ),
            "planet": PartMetadata(
                part_id="planet",
                part_type=PartType.PLANET,
                name=f"Planet Gear {planet.teeth}T",
                count=plane.planet_count,
                dimensions={
                    "pitch": pitch,
                    "teeth": planet.teeth,
                    "outer_diameter": planet.outer_diameter,
                    "face_width": height,
                    "bore_diameter": self.planet_bore,
                    "orbit_radius": plane.orbit_radius,
                },
            ),
            "ring": PartMetadata(
                part_id="ring",
                part_type=PartType.RING,
                name=f"Ring Gear {ring.teeth}T",
                dimensions={
                    "pitch": pitch,
                    "teeth": ring.teeth,
                    "tip_diameter": ring.outer_diameter,
                    "blank_diameter": 2 * ring_blank_radius(ring, self.rim),
                    "face_width": height,
                },
                notes=f"Ratio with ring fixed: {plane.ratio_ring_fixed:.4f}",
            ),
        }
