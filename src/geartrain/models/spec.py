"""Pydantic models for build specification parsing and validation."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ..gears import (
    Gear,
    Gearbox,
    GearboxStage,
    GearKind,
    GearPlane,
    GearType,
    PRESETS,
    RenderConfig,
    SteppedPlanetary,
)
from ..generators.motor_params import MOTORS


class GearTypeSpec(BaseModel):
    """Tooth family, either a named preset or explicit parameters."""

    preset: Optional[str] = Field(default=None, description="Named GearType preset")
    pitch: Optional[float] = Field(default=None, gt=0, description="Diametral pitch in mm per tooth")
    height: Optional[float] = Field(default=None, gt=0, description="Gear face width in mm")
    pressure_angle: float = Field(default=20, ge=14.5, le=25, description="Pressure angle in degrees")
    addendum: float = Field(default=0.32, gt=0, description="Addendum as a multiple of circular pitch")
    dedendum: float = Field(default=0.4, gt=0, description="Dedendum as a multiple of circular pitch")

    @model_validator(mode="after")
    def validate_source(self) -> "GearTypeSpec":
        if self.preset is None and (self.pitch is None or self.height is None):
            raise ValueError("geartype needs either a preset or both pitch and height")
        if self.preset is not None and self.preset not in PRESETS:
            raise ValueError(f"unknown gear type preset {self.preset!r}, expected one of {sorted(PRESETS)}")
        return self

    def to_geartype(self) -> GearType:
        if self.preset is not None:
            base = GearType.preset(self.preset)
            if self.height is not None:
                base = base.with_height(self.height)
            if self.pitch is not None:
                base = base.with_pitch(self.pitch)
            return base
        return GearType.create(
            self.pitch,
            self.height,
            pressure=self.pressure_angle,
            add=self.addendum,
            ded=self.dedendum,
        )


class RenderSpec(BaseModel):
    """Profile synthesis options."""

    render_teeth: bool = Field(default=True, description="False renders pitch circles only")
    tooth_clearance: float = Field(default=0.1, ge=0, description="Backlash allowance in mm")
    rounding_radius: float = Field(default=0.2, ge=0, description="Corner rounding radius in mm")
    resolution: int = Field(default=16, ge=1, le=128, description="Segments per quarter circle")

    def to_config(self) -> RenderConfig:
        return RenderConfig(
            render_teeth=self.render_teeth,
            tooth_clearance=self.tooth_clearance,
            rounding_radius=self.rounding_radius,
            resolution=self.resolution,
        )


class GearSpec(BaseModel):
    """A single spur or ring gear."""

    teeth: int = Field(ge=1, le=500, description="Tooth count")
    kind: GearKind = Field(default=GearKind.SPUR, description="spur or ring")
    bore: float = Field(default=0.0, ge=0, description="Bore diameter in mm (spur only)")
    bevel: float = Field(default=0.0, ge=0, description="Tip chamfer in mm")
    lightened: bool = Field(default=False, description="Cut lightening pockets (spur only)")
    pockets: int = Field(default=5, ge=1, le=24, description="Number of lightening pockets")
    hub_diameter: float = Field(default=8.0, gt=0, description="Solid hub diameter around the bore")
    rim: float = Field(default=3.0, gt=0, description="Wall outside a ring gear's root circle")

    @model_validator(mode="after")
    def validate_lightened(self) -> "GearSpec":
        if self.lightened and self.kind is GearKind.RING:
            raise ValueError("lightening pockets apply to spur gears only")
        if self.bore and self.hub_diameter <= self.bore:
            raise ValueError("hub_diameter must exceed bore")
        return self

    def to_gear(self, geartype: GearType) -> Gear:
        return Gear(geartype, self.teeth, self.kind)


class GearPlaneSpec(BaseModel):
    """A planetary gear plane."""

    sun: int = Field(ge=4, le=400, description="Sun tooth count")
    planet: int = Field(ge=4, le=400, description="Planet tooth count")
    count: int = Field(default=3, ge=1, le=24, description="Number of planets")
    tolerance: Optional[float] = Field(
        default=None, ge=0, description="Warn if planets snap further than this (degrees)"
    )
    sun_bore: float = Field(default=0.0, ge=0, description="Sun bore diameter in mm")
    planet_bore: float = Field(default=0.0, ge=0, description="Planet bore diameter in mm")
    rim: float = Field(default=3.0, gt=0, description="Ring wall outside the root circle")

    def to_plane(self, geartype: GearType) -> GearPlane:
        return GearPlane(geartype, self.sun, self.planet, self.count)


class SteppedSpec(BaseModel):
    """Second plane of a stepped planetary, derived from the gearplane section."""

    delta: int = Field(default=1, description="Sun teeth added per planet in the output plane")

    @model_validator(mode="after")
    def validate_delta(self) -> "SteppedSpec":
        if self.delta == 0:
            raise ValueError("delta must be non-zero (equal rings never turn)")
        return self


class StageSpec(BaseModel):
    """One gearbox stage."""

    big: int = Field(ge=1, le=500, description="Big gear tooth count")
    lil: int = Field(ge=1, le=500, description="Little gear tooth count")
    angle: float = Field(default=0.0, description="Direction to the next axle in degrees")
    axle_bore: float = Field(default=3.0, ge=0, description="Gear bore diameter in mm")
    frame_hole: float = Field(default=0.0, ge=0, description="Frame plate hole diameter in mm")
    ring: bool = Field(default=False, description="Big gear is a ring gear")
    geartype: Optional[GearTypeSpec] = Field(
        default=None, description="Per-stage tooth family (defaults to top-level)"
    )

    @model_validator(mode="after")
    def validate_ring(self) -> "StageSpec":
        if self.ring and self.big <= self.lil:
            raise ValueError(f"ring stage needs big ({self.big}) > lil ({self.lil})")
        return self

    def to_stage(self, geartype: GearType) -> GearboxStage:
        return GearboxStage(
            geartype=self.geartype.to_geartype() if self.geartype else geartype,
            big_teeth=self.big,
            lil_teeth=self.lil,
            angle=self.angle,
            axle_bore=self.axle_bore,
            frame_hole=self.frame_hole,
            big_kind=GearKind.RING if self.ring else GearKind.SPUR,
        )


class GearboxSpec(BaseModel):
    """A serial gearbox."""

    stages: List[StageSpec] = Field(min_length=1, description="Stages from output to motor")
    clearance_radial: float = Field(default=0.3, ge=0, description="Extra center distance in mm")
    clearance_axial: float = Field(default=0.5, ge=0, description="Gap between stacked gears in mm")
    axial_direction: Literal[1, -1] = Field(default=1, description="Stacking direction")
    motor: Optional[str] = Field(default=None, description="Named motor driving the last stage")
    input_bore: float = Field(default=3.0, ge=0, description="Bore of the last pinion when no motor is named")
    frame_thickness: float = Field(default=3.0, gt=0, description="Frame plate thickness in mm")

    @model_validator(mode="after")
    def validate_motor(self) -> "GearboxSpec":
        if self.motor is not None and self.motor.lower() not in MOTORS:
            raise ValueError(f"unknown motor {self.motor!r}, expected one of {sorted(MOTORS)}")
        return self

    def to_gearbox(self, geartype: GearType) -> Gearbox:
        return Gearbox(
            stages=tuple(s.to_stage(geartype) for s in self.stages),
            clearance_radial=self.clearance_radial,
            clearance_axial=self.clearance_axial,
            axial_direction=self.axial_direction,
            input_bore=self.input_bore,
        )


class ToleranceSpec(BaseModel):
    """Manufacturing tolerances (FDM defaults)."""

    shaft_clearance: float = Field(
        default=0.2, ge=0, description="Clearance added to holes for shaft fit in mm"
    )
    housing_clearance: float = Field(
        default=0.5, ge=0, description="Radial/axial clearance around moving gears in mm"
    )


class BuildSpec(BaseModel):
    """Top-level specification for one generated part or assembly."""

    name: str = Field(min_length=1, description="Build identifier")
    kind: Literal["gear", "gearplane", "stepped", "gearbox"]
    geartype: GearTypeSpec
    render: RenderSpec = Field(default_factory=RenderSpec)
    tolerances: ToleranceSpec = Field(default_factory=ToleranceSpec)
    gear: Optional[GearSpec] = None
    gearplane: Optional[GearPlaneSpec] = None
    stepped: Optional[SteppedSpec] = None
    gearbox: Optional[GearboxSpec] = None

    @model_validator(mode="after")
    def validate_sections(self) -> "BuildSpec":
        required = {
            "gear": ["gear"],
            "gearplane": ["gearplane"],
            "stepped": ["gearplane", "stepped"],
            "gearbox": ["gearbox"],
        }[self.kind]
        missing = [section for section in required if getattr(self, section) is None]
        if missing:
            raise ValueError(f"{self.kind} build requires sections: {', '.join(missing)}")
        return self

    def to_geartype(self) -> GearType:
        return self.geartype.to_geartype()

    def to_config(self) -> RenderConfig:
        return self.render.to_config()

    def to_plane(self) -> GearPlane:
        return self.gearplane.to_plane(self.to_geartype())

    def to_stepped(self) -> SteppedPlanetary:
        return SteppedPlanetary(self.to_plane(), self.stepped.delta)

    def to_gearbox(self) -> Gearbox:
        return self.gearbox.to_gearbox(self.to_geartype())
