"""Data models for the geartrain generator."""

from .spec import (
    BuildSpec,
    GearboxSpec,
    GearPlaneSpec,
    GearSpec,
    GearTypeSpec,
    RenderSpec,
    StageSpec,
    SteppedSpec,
    ToleranceSpec,
)
from .geometry import AssemblyModel, PartMetadata, PartPlacement, PartType, ShaftAxis

__all__ = [
    "BuildSpec",
    "GearboxSpec",
    "GearPlaneSpec",
    "GearSpec",
    "GearTypeSpec",
    "RenderSpec",
    "StageSpec",
    "SteppedSpec",
    "ToleranceSpec",
    "AssemblyModel",
    "PartMetadata",
    "PartPlacement",
    "PartType",
    "ShaftAxis",
]
