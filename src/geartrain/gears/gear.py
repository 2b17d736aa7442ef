"""A sized gear: a tooth family plus a tooth count."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ..errors import InvalidGearError
from .geartype import GearType


class GearKind(str, Enum):
    """Whether the teeth point outward (spur) or inward (ring)."""

    SPUR = "spur"
    RING = "ring"


@dataclass(frozen=True)
class Gear:
    """A gear with a known tooth count.

    Ring gears swap the roles of addendum and dedendum: their teeth point
    inward, so the tip circle is smaller than the pitch circle and the root
    circle larger.
    """

    geartype: GearType
    teeth: int
    kind: GearKind = GearKind.SPUR

    def __post_init__(self):
        if self.teeth == 0:
            raise InvalidGearError("gear has zero teeth (pitch radius would be zero)")

    @classmethod
    def spur(cls, geartype: GearType, teeth: int) -> "Gear":
        return cls(geartype, teeth, GearKind.SPUR)

    @classmethod
    def ring(cls, geartype: GearType, teeth: int) -> "Gear":
        return cls(geartype, teeth, GearKind.RING)

    @property
    def is_ring(self) -> bool:
        return self.kind is GearKind.RING

    @property
    def pitch_diameter(self) -> float:
        return self.geartype.diametral_pitch * self.teeth

    @property
    def pitch_radius(self) -> float:
        return self.pitch_diameter / 2

    @property
    def outer_diameter(self) -> float:
        """Tip circle diameter."""
        if self.is_ring:
            return self.pitch_diameter - 2 * self.geartype.addendum
        return self.pitch_diameter + 2 * self.geartype.addendum

    @property
    def inner_diameter(self) -> float:
        """Root circle diameter."""
        if self.is_ring:
            return self.pitch_diameter + 2 * self.geartype.dedendum
        return self.pitch_diameter - 2 * self.geartype.dedendum

    @property
    def outer_radius(self) -> float:
        return self.outer_diameter / 2

    @property
    def inner_radius(self) -> float:
        return self.inner_diameter / 2

    @property
    def tooth_angle(self) -> float:
        """Angular pitch between teeth in degrees."""
        return 360.0 / self.teeth

    @property
    def profile_radii(self) -> Tuple[float, float]:
        """Smallest and largest radius of the synthesised tooth boundary.

        For a ring gear the boundary is the cutting shape: its teeth are the
        ring's tooth spaces, reaching out to the ring's root circle.
        """
        return (
            min(self.inner_radius, self.outer_radius),
            max(self.inner_radius, self.outer_radius),
        )

    def mesh_distance(self, other: "Gear") -> float:
        """Center distance at which this gear meshes with another."""
        if not self.geartype.is_compatible(other.geartype):
            raise InvalidGearError(
                f"gears of pitch {self.geartype.diametral_pitch} and "
                f"{other.geartype.diametral_pitch} cannot mesh"
            )
        if self.is_ring and other.is_ring:
            raise InvalidGearError("two ring gears cannot mesh")
        if self.is_ring or other.is_ring:
            return abs(self.pitch_radius - other.pitch_radius)
        return self.pitch_radius + other.pitch_radius

    def __str__(self) -> str:
        return f"{self.kind.value} gear ({self.teeth}T, pitch {self.geartype.diametral_pitch})"
