"""Assembly builder - constructs a CadQuery assembly from a build specification."""

from __future__ import annotations

import logging
from typing import Any, Optional

import cadquery as cq

from ..models.spec import BuildSpec
from ..models.geometry import AssemblyModel, PartMetadata, PartType
from ..generators import (
    GearboxGenerator,
    GearGenerator,
    GearPlaneGenerator,
    SteppedPlanetaryGenerator,
    assemble,
    motor,
)

logger = logging.getLogger(__name__)


class AssemblyBuilder:
    """Builds a CadQuery assembly from a geartrain build specification."""

    def __init__(self, spec: BuildSpec):
        self.spec = spec
        self.layout: Optional[AssemblyModel] = None
        self.parts: dict[str, cq.Workplane] = {}
        self.metadata: dict[str, PartMetadata] = {}

    def generator(self):
        """The generator for this build's kind."""
        spec = self.spec
        config = spec.to_config()
        if spec.kind == "gear":
            gear_spec = spec.gear
            return GearGenerator(
                gear_spec.to_gear(spec.to_geartype()),
                config,
                bore=gear_spec.bore,
                bevel=gear_spec.bevel,
                lightened=gear_spec.lightened,
                pockets=gear_spec.pockets,
                hub_diameter=gear_spec.hub_diameter,
                rim=gear_spec.rim,
                part_id=spec.name,
            )
        if spec.kind == "gearplane":
            plane_spec = spec.gearplane
            return GearPlaneGenerator(
                spec.to_plane(),
                config,
                sun_bore=plane_spec.sun_bore,
                planet_bore=plane_spec.planet_bore,
                rim=plane_spec.rim,
                tolerance=plane_spec.tolerance,
                name=spec.name,
            )
        if spec.kind == "stepped":
            plane_spec = spec.gearplane
            return SteppedPlanetaryGenerator(
                spec.to_stepped(),
                config,
                sun_bore=plane_spec.sun_bore,
                planet_bore=plane_spec.planet_bore,
                rim=plane_spec.rim,
                tolerance=plane_spec.tolerance,
                name=spec.name,
            )
        gearbox_spec = spec.gearbox
        return GearboxGenerator(
            spec.to_gearbox(),
            config,
            motor=motor(gearbox_spec.motor) if gearbox_spec.motor else None,
            frame_thickness=gearbox_spec.frame_thickness,
            shaft_clearance=spec.tolerances.shaft_clearance,
            housing_clearance=spec.tolerances.housing_clearance,
            name=spec.name,
        )

    def build(self) -> cq.Assembly:
        """Build the complete assembly.

        Returns:
            CadQuery Assembly with all parts positioned
        """
        generator = self.generator()
        logger.info(f"Building {self.spec.kind} assembly: {self.spec.name}")

        if isinstance(generator, GearGenerator):
            part_type = PartType.RING if generator.gear.is_ring else PartType.GEAR
            self.layout = AssemblyModel()
            self.layout.add_part(part_type, self.spec.name)
            self.parts = {self.spec.name: generator.generate()}
            self.metadata = {self.spec.name: generator.get_metadata()}
            return assemble(self.spec.name, self.layout, self.parts)

        self.layout = generator.layout()
        self.parts = generator.parts()
        self.metadata = generator.get_metadata()
        return generator.generate()

    def get_bom(self) -> list[dict[str, Any]]:
        """Get bill of materials."""
        return [meta.bom_row() for meta in self.metadata.values()]
