"""Stepped planetary assembly generator.

The input plane (sun, planets, fixed ring) sits at Z=0 and the output plane
is stacked directly on top of it. Each planet of the input plane is joined
to the planet above it into one printed planet pair. The output plane has
no sun; its ring is the output.
"""

import logging
from typing import Dict, List, Optional

import cadquery as cq

from ..gears import DEFAULT_CONFIG, RenderConfig, SteppedPlanetary, gear_solid
from ..gears.solid import DEFAULT_RING_RIM, ring_blank_radius
from ..models.geometry import AssemblyModel, PartMetadata, PartType
from .base import assemble

logger = logging.getLogger(__name__)

# Phase differences closer than this (degrees) share one planet pair solid.
PHASE_TOLERANCE = 1e-6


class SteppedPlanetaryGenerator:
    """Generator for a two-plane stepped planetary."""

    def __init__(
        self,
        stepped: SteppedPlanetary,
        config: RenderConfig = DEFAULT_CONFIG,
        sun_bore: float = 0.0,
        planet_bore: float = 0.0,
        rim: float = DEFAULT_RING_RIM,
        tolerance: Optional[float] = None,
        name: str = "stepped",
    ):
        self.stepped = stepped
        self.config = config
        self.sun_bore = sun_bore
        self.planet_bore = planet_bore
        self.rim = rim
        self.tolerance = tolerance
        self.name = name
        # Snapped once, so a build warns about a misplaced planet only once
        self.placements = stepped.plane_in.planet_placements(tolerance)
        self._parts: Optional[Dict[str, cq.Workplane]] = None

    def _pair_phases(self) -> List[float]:
        """Output planet spin relative to its input planet, per planet.

        Both halves of a pair sit at the input plane's orbit angle. The
        output plane has no sun, so its planet only has to mesh with
        ``ring_out``, which holds at any orbit angle.

        Reduced modulo one planet tooth so that pairs that differ by whole
        teeth share a solid.
        """
        plane_out = self.stepped.plane_out
        tooth = 360.0 / plane_out.planet_teeth
        phases = []
        for pl in self.placements:
            phase = (plane_out.planet_spin(pl.angle) - pl.spin) % tooth
            if tooth - phase < PHASE_TOLERANCE:
                phase = 0.0
            phases.append(phase)
        return phases

    def _pair_ids(self) -> List[str]:
        distinct: List[float] = []
        ids = []
        for phase in self._pair_phases():
            for k, known in enumerate(distinct):
                if abs(phase - known) < PHASE_TOLERANCE:
                    break
            else:
                k = len(distinct)
                distinct.append(phase)
            ids.append("planet_pair" if k == 0 else f"planet_pair_{k}")
        return ids

    def layout(self) -> AssemblyModel:
        stepped = self.stepped
        plane_in = stepped.plane_in
        z_out = stepped.planet_pair_offset

        model = AssemblyModel()
        model.add_part(PartType.SUN, "sun", rotation=plane_in.sun_spin)
        model.add_shaft_axis("sun_axis", (0.0, 0.0, 0.0), ["sun"])
        for pl, solid_id in zip(self.placements, self._pair_ids()):
            part_id = f"planet_{pl.index}"
            model.add_part(
                PartType.PLANET_PAIR,
                part_id,
                origin=(pl.x, pl.y, 0.0),
                rotation=pl.spin,
                metadata={"orbit_angle": pl.angle, "deviation": pl.deviation},
                solid_id=solid_id,
            )
            model.add_shaft_axis(f"{part_id}_axis", (pl.x, pl.y, 0.0), [part_id])
        model.add_part(PartType.RING, "ring_in")
        model.add_part(PartType.RING, "ring_out", origin=(0.0, 0.0, z_out))
        return model

    def _planet_pair(self, phase: float) -> cq.Workplane:
        stepped = self.stepped
        lower = gear_solid(stepped.plane_in.planet_gear, self.config, bore=self.planet_bore)
        upper = (
            gear_solid(stepped.plane_out.planet_gear, self.config, bore=self.planet_bore)
            .rotate((0, 0, 0), (0, 0, 1), phase)
            .translate((0, 0, stepped.planet_pair_offset))
        )
        return lower.union(upper)

    def parts(self) -> Dict[str, cq.Workplane]:
        if self._parts is None:
            stepped = self.stepped
            logger.info(
                f"Building stepped planetary {stepped.plane_in.describe()} -> "
                f"{stepped.plane_out.describe()}"
            )
            parts = {
                "sun": gear_solid(stepped.plane_in.sun_gear, self.config, bore=self.sun_bore),
                "ring_in": gear_solid(stepped.plane_in.ring_gear, self.config, rim=self.rim),
                "ring_out": gear_solid(stepped.plane_out.ring_gear, self.config, rim=self.rim),
            }
            for solid_id, phase in zip(self._pair_ids(), self._pair_phases()):
                if solid_id not in parts:
                    parts[solid_id] = self._planet_pair(phase)
            self._parts = parts
        return self._parts

    def generate(self) -> cq.Assembly:
        """Generate the stepped planetary with the input plane at Z=0."""
        self.stepped.plane_in.check_planet_clearance()
        return assemble(self.name, self.layout(), self.parts())

    def get_metadata(self) -> Dict[str, PartMetadata]:
        stepped = self.stepped
        plane_in = stepped.plane_in
        plane_out = stepped.plane_out
        sun, planet_in, ring_in = plane_in.gears()
        ring_out = plane_out.ring_gear

        metadata = {
            "sun": PartMetadata(
                part_id="sun",
                part_type=PartType.SUN,
                name=f"Sun Gear {sun.teeth}T",
                dimensions={
                    "pitch": plane_in.geartype.diametral_pitch,
                    "teeth": sun.teeth,
                    "outer_diameter": sun.outer_diameter,
                    "bore_diameter": self.sun_bore,
                },
            ),
            "ring_in": PartMetadata(
                part_id="ring_in",
                part_type=PartType.RING,
                name=f"Fixed Ring Gear {ring_in.teeth}T",
                dimensions={
                    "pitch": plane_in.geartype.diametral_pitch,
                    "teeth": ring_in.teeth,
                    "blank_diameter": 2 * ring_blank_radius(ring_in, self.rim),
                },
            ),
            "ring_out": PartMetadata(
                part_id="ring_out",
                part_type=PartType.RING,
                name=f"Output Ring Gear {ring_out.teeth}T",
                dimensions={
                    "pitch": plane_out.geartype.diametral_pitch,
                    "teeth": ring_out.teeth,
                    "blank_diameter": 2 * ring_blank_radius(ring_out, self.rim),
                },
                notes=f"Reduction from sun: {stepped.ratio:.3f}",
            ),
        }
        ids = self._pair_ids()
        for solid_id in dict.fromkeys(ids):
            metadata[solid_id] = PartMetadata(
                part_id=solid_id,
                part_type=PartType.PLANET_PAIR,
                name=f"Planet Pair {planet_in.teeth}T/{planet_in.teeth}T",
                count=ids.count(solid_id),
                dimensions={
                    "pitch_in": plane_in.geartype.diametral_pitch,
                    "pitch_out": plane_out.geartype.diametral_pitch,
                    "teeth": planet_in.teeth,
                    "height": stepped.total_height,
                    "bore_diameter": self.planet_bore,
                },
            )
        return metadata
