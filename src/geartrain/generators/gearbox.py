"""Serial gearbox assembly generator.

Builds every stage's big and little gear at its stage frame, and two frame
plates that carry the axles. When a motor is given, the plate on the motor
side gets the motor's pilot hole and bolt circle, and the last little gear
is bored to the motor shaft.
"""

import logging
from typing import Dict, List, Optional, Tuple

import cadquery as cq
from shapely import affinity
from shapely.ops import unary_union

from ..gears import DEFAULT_CONFIG, Gearbox, RenderConfig, extrude_profile, gear_solid
from ..gears.profile import disc
from ..gears.solid import DEFAULT_RING_RIM, ring_blank_radius
from ..models.geometry import AssemblyModel, PartMetadata, PartType
from .base import assemble
from .motor_params import MotorParams

logger = logging.getLogger(__name__)


class GearboxGenerator:
    """Generator for a multi-stage gearbox with frame plates."""

    def __init__(
        self,
        gearbox: Gearbox,
        config: RenderConfig = DEFAULT_CONFIG,
        motor: Optional[MotorParams] = None,
        frame_thickness: float = 3.0,
        shaft_clearance: float = 0.2,
        housing_clearance: float = 0.5,
        rim: float = DEFAULT_RING_RIM,
        include_frame: bool = True,
        name: str = "gearbox",
    ):
        """Initialize the gearbox generator.

        Args:
            gearbox: Stage chain to build.
            config: Profile synthesis options.
            motor: Motor driving the last stage, if any.
            frame_thickness: Thickness of each frame plate.
            shaft_clearance: Added to the motor shaft diameter for the input bore.
            housing_clearance: Margin of the frame plates around the gears.
            rim: Wall outside the root circle of ring big gears.
            include_frame: Whether to build the frame plates.
            name: Assembly name.
        """
        if motor is not None:
            gearbox = gearbox.with_input_bore(motor.shaft_diameter + shaft_clearance)
        self.gearbox = gearbox
        self.config = config
        self.motor = motor
        self.frame_thickness = frame_thickness
        self.shaft_clearance = shaft_clearance
        self.housing_clearance = housing_clearance
        self.rim = rim
        self.include_frame = include_frame
        self.name = name
        self._parts: Optional[Dict[str, cq.Workplane]] = None

    # --- extents ---

    def _axle_radius(self, axle: int) -> float:
        """Largest radius swept by the gears on ``axle``."""
        gb = self.gearbox
        radii = []
        if axle < len(gb):
            big = gb.stages[axle].big_gear
            radii.append(ring_blank_radius(big, self.rim) if big.is_ring else big.outer_radius)
        if axle > 0:
            radii.append(gb.stages[axle - 1].lil_gear.outer_radius)
        return max(radii)

    def z_extent(self) -> Tuple[float, float]:
        """Lowest and highest Z of any gear face."""
        gb = self.gearbox
        bottoms = [gb.frame(i).z for i in range(len(gb))]
        tops = [gb.frame(i).z + stage.geartype.height for i, stage in enumerate(gb.stages)]
        return min(bottoms), max(tops)

    def _plate_z(self) -> Tuple[float, float]:
        low, high = self.z_extent()
        gap = self.gearbox.clearance_axial
        return low - gap - self.frame_thickness, high + gap

    @property
    def motor_plate_id(self) -> str:
        """The plate the motor mounts to: the one nearest the last stage."""
        return "frame_top" if self.gearbox.axial_direction > 0 else "frame_bottom"

    # --- layout ---

    def layout(self) -> AssemblyModel:
        gb = self.gearbox
        model = AssemblyModel()
        for i, stage in enumerate(gb.stages):
            frame = gb.frame(i)
            lil = gb.lil_frame(i)
            model.add_part(
                PartType.BIG_GEAR,
                f"big_{i}",
                origin=frame.origin,
                rotation=frame.rotation,
                metadata={"teeth": stage.big_teeth},
            )
            model.add_part(
                PartType.LIL_GEAR,
                f"lil_{i}",
                origin=lil.origin,
                rotation=frame.rotation + stage.lil_spin(),
                metadata={"teeth": stage.lil_teeth},
            )

        for axle, (x, y) in enumerate(gb.axle_positions()):
            parts = []
            if axle < len(gb):
                parts.append(f"big_{axle}")
            if axle > 0:
                parts.append(f"lil_{axle - 1}")
            model.add_shaft_axis(f"axle_{axle}", (x, y, 0.0), parts)

        if self.include_frame:
            bottom_z, top_z = self._plate_z()
            plate_type = {
                "frame_bottom": PartType.FRAME_PLATE,
                "frame_top": PartType.FRAME_PLATE,
            }
            if self.motor is not None:
                plate_type[self.motor_plate_id] = PartType.MOTOR_PLATE
            model.add_part(plate_type["frame_bottom"], "frame_bottom", origin=(0.0, 0.0, bottom_z))
            model.add_part(plate_type["frame_top"], "frame_top", origin=(0.0, 0.0, top_z))
        return model

    # --- solids ---

    def _plate_outline(self):
        outline = []
        for axle, (x, y) in enumerate(self.gearbox.axle_positions()):
            r = self._axle_radius(axle) + self.housing_clearance
            outline.append(affinity.translate(disc(r, self.config.resolution), x, y))
        return unary_union(outline).convex_hull

    def _plate_holes(self, plate_id: str) -> List:
        gb = self.gearbox
        holes = []
        positions = gb.axle_positions()
        for axle, (x, y) in enumerate(positions[:-1]):
            hole = gb.stages[axle].frame_hole
            if hole > 0:
                holes.append(affinity.translate(disc(hole / 2, self.config.resolution), x, y))

        motor = self.motor
        if motor is not None and plate_id == self.motor_plate_id:
            mx, my = positions[-1]
            pilot = motor.boss_diameter + self.shaft_clearance
            holes.append(affinity.translate(disc(pilot / 2, self.config.resolution), mx, my))
            for bx, by in motor.bolt_positions():
                holes.append(
                    affinity.translate(
                        disc(motor.bolt_hole_diameter / 2, self.config.resolution),
                        mx + bx,
                        my + by,
                    )
                )
        return holes

    def _plate(self, plate_id: str) -> cq.Workplane:
        outline = self._plate_outline()
        holes = self._plate_holes(plate_id)
        if holes:
            outline = outline.difference(unary_union(holes))
        return extrude_profile(outline, self.frame_thickness)

    def parts(self) -> Dict[str, cq.Workplane]:
        if self._parts is None:
            gb = self.gearbox
            parts = {}
            for i, stage in enumerate(gb.stages):
                logger.info(
                    f"Building stage {i}: {stage.big_gear} driven by {stage.lil_gear}"
                )
                parts[f"big_{i}"] = gear_solid(
                    stage.big_gear,
                    self.config,
                    bore=0.0 if stage.is_ring else gb.axle_bore(i),
                    rim=self.rim,
                )
                parts[f"lil_{i}"] = gear_solid(stage.lil_gear, self.config, bore=gb.axle_bore(i + 1))
            if self.include_frame:
                parts["frame_bottom"] = self._plate("frame_bottom")
                parts["frame_top"] = self._plate("frame_top")
            self._parts = parts
        return self._parts

    def generate(self) -> cq.Assembly:
        """Generate the gearbox with the output axle at the origin."""
        return assemble(self.name, self.layout(), self.parts())

    def get_metadata(self) -> Dict[str, PartMetadata]:
        gb = self.gearbox
        metadata = {}
        for i, stage in enumerate(gb.stages):
            big, lil = stage.big_gear, stage.lil_gear
            metadata[f"big_{i}"] = PartMetadata(
                part_id=f"big_{i}",
                part_type=PartType.BIG_GEAR,
                name=f"Stage {i} {'Ring' if big.is_ring else 'Spur'} Gear {big.teeth}T",
                dimensions={
                    "pitch": big.geartype.diametral_pitch,
                    "teeth": big.teeth,
                    "pitch_diameter": big.pitch_diameter,
                    "face_width": big.geartype.height,
                    "bore_diameter": 0.0 if big.is_ring else gb.axle_bore(i),
                },
                notes=f"Reduction to this stage: {gb.ratio(i):.3f}",
            )
            metadata[f"lil_{i}"] = PartMetadata(
                part_id=f"lil_{i}",
                part_type=PartType.LIL_GEAR,
                name=f"Stage {i} Pinion {lil.teeth}T",
                dimensions={
                    "pitch": lil.geartype.diametral_pitch,
                    "teeth": lil.teeth,
                    "pitch_diameter": lil.pitch_diameter,
                    "face_width": lil.geartype.height,
                    "bore_diameter": gb.axle_bore(i + 1),
                },
            )
        if self.include_frame:
            for plate_id in ("frame_bottom", "frame_top"):
                is_motor = self.motor is not None and plate_id == self.motor_plate_id
                metadata[plate_id] = PartMetadata(
                    part_id=plate_id,
                    part_type=PartType.MOTOR_PLATE if is_motor else PartType.FRAME_PLATE,
                    name="Motor Plate" if is_motor else "Frame Plate",
                    dimensions={"thickness": self.frame_thickness},
                    notes=f"Motor: {self.motor.name}" if is_motor else None,
                )
        return metadata
