"""Single gear generator for spur and ring gears."""

import cadquery as cq

from ..gears import DEFAULT_CONFIG, Gear, RenderConfig, gear_lightened, gear_solid
from ..gears.solid import DEFAULT_RING_RIM, ring_blank_radius
from ..models.geometry import PartMetadata, PartType


class GearGenerator:
    """Generator for a single spur or ring gear.

    Spur gears get an optional bore, tip bevel and lightening pockets. Ring
    gears are cut into a blank of ``rim`` wall thickness.
    """

    def __init__(
        self,
        gear: Gear,
        config: RenderConfig = DEFAULT_CONFIG,
        bore: float = 0.0,
        bevel: float = 0.0,
        lightened: bool = False,
        pockets: int = 5,
        hub_diameter: float = 8.0,
        rim: float = DEFAULT_RING_RIM,
        part_id: str = "gear",
    ):
        """Initialize generator.

        Args:
            gear: The gear to build.
            config: Profile synthesis options.
            bore: Central hole diameter (spur only).
            bevel: Tip chamfer depth.
            lightened: Cut lightening pockets through the web (spur only).
            pockets: Number of lightening pockets.
            hub_diameter: Solid hub left around the bore when lightened.
            rim: Wall outside the root circle (ring only).
            part_id: Identifier used in the BOM and exported filenames.
        """
        self.gear = gear
        self.config = config
        self.bore = bore
        self.bevel = bevel
        self.lightened = lightened
        self.pockets = pockets
        self.hub_diameter = hub_diameter
        self.rim = rim
        self.part_id = part_id

    def generate(self) -> cq.Workplane:
        """Generate the gear from Z=0 to Z=height."""
        if self.lightened and not self.gear.is_ring:
            return gear_lightened(
                self.gear,
                self.config,
                hub_diameter=self.hub_diameter,
                pockets=self.pockets,
                bevel=self.bevel,
                bore=self.bore,
            )
        return gear_solid(
            self.gear,
            self.config,
            bevel=self.bevel,
            bore=self.bore,
            rim=self.rim,
        )

    def get_metadata(self) -> PartMetadata:
        """Get metadata for BOM."""
        gear = self.gear
        dimensions = {
            "pitch": gear.geartype.diametral_pitch,
            "teeth": gear.teeth,
            "pitch_diameter": gear.pitch_diameter,
            "outer_diameter": gear.outer_diameter,
            "inner_diameter": gear.inner_diameter,
            "face_width": gear.geartype.height,
        }
        if gear.is_ring:
            dimensions["blank_diameter"] = 2 * ring_blank_radius(gear, self.rim)
        elif self.bore:
            dimensions["bore_diameter"] = self.bore

        return PartMetadata(
            part_id=self.part_id,
            part_type=PartType.RING if gear.is_ring else PartType.GEAR,
            name=f"{'Ring' if gear.is_ring else 'Spur'} Gear {gear.teeth}T",
            dimensions=dimensions,
            notes="lightened" if self.lightened and not gear.is_ring else None,
        )
