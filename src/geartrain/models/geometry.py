"""Placement and BOM records produced by the generators.

All placements are planar: gears only ever turn about +Z, so a part is
located by its origin and one rotation angle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

import cadquery as cq

Vec3 = Tuple[float, float, float]
ORIGIN: Vec3 = (0.0, 0.0, 0.0)


class PartType(Enum):
    """Kinds of part a geartrain is built from."""

    GEAR = "gear"
    RING = "ring"
    SUN = "sun"
    PLANET = "planet"
    PLANET_PAIR = "planet_pair"
    BIG_GEAR = "big_gear"
    LIL_GEAR = "lil_gear"
    FRAME_PLATE = "frame_plate"
    MOTOR_PLATE = "motor_plate"


@dataclass
class PartPlacement:
    """One part instance: where it sits and how far it is turned."""

    part_type: PartType
    part_id: str
    origin: Vec3 = ORIGIN
    rotation: float = 0.0  # about +Z, degrees
    metadata: Optional[Dict[str, float]] = None
    solid_id: Optional[str] = None  # set when several instances share one solid

    @property
    def source(self) -> str:
        """Key of the solid this instance is made from."""
        return self.solid_id or self.part_id

    def to_location(self) -> cq.Location:
        return cq.Location(cq.Vector(*self.origin), cq.Vector(0, 0, 1), self.rotation)


@dataclass
class ShaftAxis:
    """An axle shared by coaxial parts."""

    axis_id: str
    origin: Vec3
    parts: list[str] = field(default_factory=list)


@dataclass
class PartMetadata:
    """What the BOM says about one distinct part."""

    part_id: str
    part_type: PartType
    name: str
    material: str = "PLA"
    count: int = 1
    dimensions: dict[str, float] = field(default_factory=dict)
    notes: Optional[str] = None

    def bom_row(self) -> dict:
        return {
            "part_id": self.part_id,
            "type": self.part_type.value,
            "name": self.name,
            "material": self.material,
            "count": self.count,
            "dimensions": self.dimensions,
            "notes": self.notes,
        }


@dataclass
class AssemblyModel:
    """Placed parts and axles of one geartrain, before any solid is built."""

    parts: dict[str, PartPlacement] = field(default_factory=dict)
    shafts: list[ShaftAxis] = field(default_factory=list)

    def add_part(
        self,
        part_type: PartType,
        part_id: str,
        origin: Vec3 = ORIGIN,
        rotation: float = 0.0,
        metadata: Optional[Dict[str, float]] = None,
        solid_id: Optional[str] = None,
    ) -> PartPlacement:
        """Place a part; a later call with the same id replaces it."""
        self.parts[part_id] = PartPlacement(
            part_type, part_id, tuple(origin), rotation, metadata, solid_id
        )
        return self.parts[part_id]

    def add_shaft_axis(
        self,
        axis_id: str,
        origin: Vec3,
        parts: Optional[list[str]] = None,
    ) -> ShaftAxis:
        """Record an axle through coaxial parts."""
        self.shafts.append(ShaftAxis(axis_id, tuple(origin), list(parts or [])))
        return self.shafts[-1]
