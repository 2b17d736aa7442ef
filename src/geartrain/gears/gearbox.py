"""Serial multi-stage gearbox.

Stage 0 drives the output axle; the last stage is driven by the motor. Each
stage is a big gear meshing with a little gear. The little gear of stage
``i`` shares an axle with the big gear of stage ``i + 1``, stacked one step
along Z, so every stage frame is found from the previous one:

    frame(0) = identity
    frame(i) = frame(i-1) * rotZ(angle[i-1]) * moveX(center_distance(i-1)) * moveZ(step_z(i))
"""

import logging
import math
from dataclasses import dataclass, replace
from functools import cached_property
from typing import List, Sequence, Tuple

import cadquery as cq

from ..errors import InvalidGearError, InvalidGeartrainError
from .gear import Gear, GearKind
from .geartype import GearType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageFrame:
    """Rigid transform made of a rotation about Z and a translation."""

    rotation: float = 0.0  # degrees
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def then(self, angle: float = 0.0, dx: float = 0.0, dz: float = 0.0) -> "StageFrame":
        """Compose ``self * rotZ(angle) * moveX(dx) * moveZ(dz)``."""
        rotation = self.rotation + angle
        rad = math.radians(rotation)
        return StageFrame(
            rotation=rotation,
            x=self.x + dx * math.cos(rad),
            y=self.y + dx * math.sin(rad),
            z=self.z + dz,
        )

    @property
    def origin(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_location(self) -> cq.Location:
        """Convert to CadQuery Location for assembly positioning."""
        return cq.Location(cq.Vector(*self.origin), cq.Vector(0, 0, 1), self.rotation)


IDENTITY = StageFrame()


@dataclass(frozen=True)
class GearboxStage:
    """One big/little gear pair.

    Attributes:
        geartype: Tooth family of both gears.
        big_teeth: Big (driven) gear tooth count.
        lil_teeth: Little (driving) gear tooth count.
        angle: Direction from this stage's axle to the next, degrees.
        axle_bore: Bore diameter of the gears on this stage's axle.
        frame_hole: Hole diameter in the frame plates for this axle (0 = none).
        big_kind: SPUR, or RING when the little gear runs inside the big one.
    """

    geartype: GearType
    big_teeth: int
    lil_teeth: int
    angle: float = 0.0
    axle_bore: float = 3.0
    frame_hole: float = 0.0
    big_kind: GearKind = GearKind.SPUR

    def __post_init__(self):
        if self.big_teeth <= 0 or self.lil_teeth <= 0:
            raise InvalidGearError(
                f"gearbox stage needs positive tooth counts, got big={self.big_teeth} "
                f"lil={self.lil_teeth}"
            )

    @classmethod
    def from_signed(cls, geartype: GearType, big_teeth: int, lil_teeth: int, **kwargs) -> "GearboxStage":
        """Accept the older convention where a negative big tooth count means a ring."""
        kind = GearKind.RING if big_teeth < 0 else GearKind.SPUR
        return cls(geartype, abs(big_teeth), lil_teeth, big_kind=kind, **kwargs)

    @property
    def big_gear(self) -> Gear:
        return Gear(self.geartype, self.big_teeth, self.big_kind)

    @property
    def lil_gear(self) -> Gear:
        return Gear(self.geartype, self.lil_teeth, GearKind.SPUR)

    @property
    def is_ring(self) -> bool:
        return self.big_kind is GearKind.RING

    @property
    def ratio(self) -> float:
        return self.big_gear.pitch_radius / self.lil_gear.pitch_radius

    def lil_spin(self) -> float:
        """Little gear rotation (in the stage frame) that meshes with the big gear.

        The big gear has a tooth on the stage frame's +X axis.
        """
        big, lil = self.big_teeth, self.lil_teeth
        theta = self.angle
        if self.is_ring:
            return theta - theta * big / lil - 180.0 / lil
        return theta + 180.0 - 180.0 / lil + theta * big / lil


@dataclass(frozen=True)
class Gearbox:
    """A chain of gear stages from the output (stage 0) to the motor.

    Attributes:
        stages: Stages in order from output to input.
        clearance_radial: Extra center distance between meshing gears.
        clearance_axial: Gap between stacked gears on one axle.
        axial_direction: +1 to stack stages upward, -1 downward.
        input_bore: Bore of the last little gear, which sits on the motor shaft.
    """

    stages: Tuple[GearboxStage, ...]
    clearance_radial: float = 0.3
    clearance_axial: float = 0.5
    axial_direction: int = 1
    input_bore: float = 3.0

    def __post_init__(self):
        object.__setattr__(self, "stages", tuple(self.stages))
        if not self.stages:
            raise InvalidGearError("gearbox needs at least one stage")
        if self.axial_direction not in (1, -1):
            raise ValueError(f"axial_direction must be +1 or -1, got {self.axial_direction}")
        for i in range(len(self.stages)):
            if self.center_distance(i) <= 0:
                stage = self.stages[i]
                raise InvalidGeartrainError(
                    f"ring gear {stage.big_teeth}T has no room for a {stage.lil_teeth}T pinion "
                    f"(center distance {self.center_distance(i):.3f} mm)",
                    subject=f"stage {i}",
                )

    def __len__(self) -> int:
        return len(self.stages)

    def center_distance(self, i: int) -> float:
        """Distance from stage ``i``'s big gear axle to its little gear axle."""
        stage = self.stages[i]
        big_r = stage.big_gear.pitch_radius
        lil_r = stage.lil_gear.pitch_radius
        if stage.is_ring:
            return big_r - (self.clearance_radial + lil_r)
        return big_r + (self.clearance_radial + lil_r)

    def step_z(self, i: int) -> float:
        """Axial offset of stage ``i`` relative to stage ``i - 1``."""
        if i == 0:
            return 0.0
        return self.axial_direction * (self.stages[i - 1].geartype.height + self.clearance_axial)

    @cached_property
    def frames(self) -> Tuple[StageFrame, ...]:
        """Frame of every stage's big gear axle."""
        frames = [IDENTITY]
        for i in range(1, len(self.stages)):
            prev = self.stages[i - 1]
            frames.append(
                frames[-1].then(prev.angle, self.center_distance(i - 1), self.step_z(i))
            )
        logger.debug(
            "Gearbox frames: "
            + "; ".join(f"({f.x:.2f}, {f.y:.2f}, {f.z:.2f}) @ {f.rotation:.1f}" for f in frames)
        )
        return tuple(frames)

    def frame(self, i: int) -> StageFrame:
        return self.frames[i]

    def lil_frame(self, i: int) -> StageFrame:
        """Frame of stage ``i``'s little gear axle, at stage ``i``'s Z."""
        return self.frames[i].then(self.stages[i].angle, self.center_distance(i))

    @property
    def motor_frame(self) -> StageFrame:
        """Axle driven by the motor: the last stage's little gear."""
        return self.lil_frame(len(self.stages) - 1)

    def ratio(self, i: int = 0) -> float:
        """Reduction from the motor down to stage ``i``'s big gear."""
        result = 1.0
        for stage in self.stages[i:]:
            result *= stage.ratio
        return result

    def axle_positions(self) -> List[Tuple[float, float]]:
        """XY of every axle from output to motor."""
        positions = [(f.x, f.y) for f in self.frames]
        motor = self.motor_frame
        positions.append((motor.x, motor.y))
        return positions

    def with_stage(self, stage: GearboxStage) -> "Gearbox":
        """A new gearbox with ``stage`` appended on the motor side."""
        return replace(self, stages=self.stages + (stage,))

    def axle_bore(self, axle: int) -> float:
        """Bore of the gears on axle ``axle``; the motor axle is ``len(self)``."""
        if axle == len(self.stages):
            return self.input_bore
        return self.stages[axle].axle_bore

    def with_input_bore(self, diameter: float) -> "Gearbox":
        """Resize the motor side bore, e.g. to fit a motor shaft."""
        return replace(self, input_bore=diameter)

    @classmethod
    def from_stages(cls, stages: Sequence[GearboxStage], **kwargs) -> "Gearbox":
        return cls(tuple(stages), **kwargs)
