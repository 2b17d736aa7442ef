"""Base protocols for part and assembly generators."""

from typing import Dict, Protocol

import cadquery as cq

from ..models.geometry import AssemblyModel, PartMetadata, PartType


class PartGenerator(Protocol):
    """Protocol for single-part generators."""

    def generate(self) -> cq.Workplane:
        """Generate the part geometry.

        Returns:
            CadQuery Workplane containing the part solid
        """
        ...

    def get_metadata(self) -> PartMetadata:
        """Get metadata for BOM generation.

        Returns:
            Part metadata including name, dimensions, material
        """
        ...


class AssemblyGenerator(Protocol):
    """Protocol for generators that place several parts."""

    def layout(self) -> AssemblyModel:
        """Placement of every part instance, without building geometry."""
        ...

    def parts(self) -> Dict[str, cq.Workplane]:
        """Distinct part solids keyed by part id, each built once."""
        ...

    def generate(self) -> cq.Assembly:
        """Build the positioned assembly."""
        ...

    def get_metadata(self) -> Dict[str, PartMetadata]:
        """BOM metadata for each distinct part."""
        ...


PART_COLORS = {
    PartType.GEAR: cq.Color(0.2, 0.6, 0.9, 1.0),  # Blue
    PartType.SUN: cq.Color(0.9, 0.6, 0.2, 1.0),  # Orange
    PartType.PLANET: cq.Color(0.2, 0.6, 0.9, 1.0),
    PartType.PLANET_PAIR: cq.Color(0.2, 0.6, 0.9, 1.0),
    PartType.RING: cq.Color(0.7, 0.7, 0.7, 1.0),  # Gray
    PartType.BIG_GEAR: cq.Color(0.2, 0.8, 0.2, 1.0),  # Green
    PartType.LIL_GEAR: cq.Color(0.9, 0.2, 0.2, 1.0),  # Red
    PartType.FRAME_PLATE: cq.Color(0.7, 0.7, 0.7, 0.6),
    PartType.MOTOR_PLATE: cq.Color(0.5, 0.5, 0.5, 0.8),
}


def assemble(name: str, layout: AssemblyModel, parts: Dict[str, cq.Workplane]) -> cq.Assembly:
    """Place the shared part solids at every instance in ``layout``."""
    assy = cq.Assembly(name=name)
    for part_id, placement in layout.parts.items():
        assy.add(
            parts[placement.source],
            name=part_id,
            loc=placement.to_location(),
            color=PART_COLORS.get(placement.part_type, cq.Color(0.8, 0.8, 0.8, 1.0)),
        )
    return assy
