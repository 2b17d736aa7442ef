"""Tooth family parameters shared by every gear cut from the same family.

Two gears mesh only if they share a GearType: same diametral pitch,
pressure angle and addendum/dedendum proportions.
"""

import math
from dataclasses import dataclass, replace
from typing import Dict

from ..errors import InvalidGearError


@dataclass(frozen=True)
class GearType:
    """Immutable tooth profile parameters.

    Attributes:
        diametral_pitch: Pitch diameter per tooth in mm (the gear "module").
        height: Extrusion depth along the gear axis in mm.
        pressure_angle: Pressure angle in degrees.
        addendum_ratio: Addendum as a multiple of circular pitch.
        dedendum_ratio: Dedendum as a multiple of circular pitch.
    """

    diametral_pitch: float
    height: float
    pressure_angle: float = 20.0
    addendum_ratio: float = 0.32
    dedendum_ratio: float = 0.4

    def __post_init__(self):
        if not self.diametral_pitch > 0:
            raise InvalidGearError(
                f"diametral_pitch must be positive, got {self.diametral_pitch}"
            )
        if not self.height > 0:
            raise InvalidGearError(f"height must be positive, got {self.height}")
        if not (self.addendum_ratio > 0 and self.dedendum_ratio > 0):
            raise InvalidGearError(
                f"addendum/dedendum ratios must be positive, got "
                f"{self.addendum_ratio}/{self.dedendum_ratio}"
            )

    @classmethod
    def create(
        cls,
        pitch: float,
        height: float,
        pressure: float = 20.0,
        add: float = 0.32,
        ded: float = 0.4,
    ) -> "GearType":
        """Factory taking the short parameter names used in gear tables."""
        return cls(
            diametral_pitch=pitch,
            height=height,
            pressure_angle=pressure,
            addendum_ratio=add,
            dedendum_ratio=ded,
        )

    @classmethod
    def preset(cls, name: str) -> "GearType":
        """Look up a named tooth family from PRESETS."""
        try:
            return PRESETS[name]
        except KeyError:
            known = ", ".join(sorted(PRESETS))
            raise KeyError(f"Unknown gear type preset '{name}' (known: {known})") from None

    @property
    def circular_pitch(self) -> float:
        """Arc length between adjacent teeth along the pitch circle."""
        return self.diametral_pitch * math.pi

    @property
    def addendum(self) -> float:
        return self.addendum_ratio * self.circular_pitch

    @property
    def dedendum(self) -> float:
        return self.dedendum_ratio * self.circular_pitch

    @property
    def tooth_depth(self) -> float:
        return self.addendum + self.dedendum

    def with_pitch(self, pitch: float) -> "GearType":
        """Same tooth family proportions at a different diametral pitch."""
        return replace(self, diametral_pitch=pitch)

    def with_height(self, height: float) -> "GearType":
        return replace(self, height=height)

    def is_compatible(self, other: "GearType") -> bool:
        """Gears of these two types can mesh (height may differ)."""
        return (
            math.isclose(self.diametral_pitch, other.diametral_pitch)
            and math.isclose(self.pressure_angle, other.pressure_angle)
            and math.isclose(self.addendum_ratio, other.addendum_ratio)
            and math.isclose(self.dedendum_ratio, other.dedendum_ratio)
        )


# Common printable tooth families, keyed by pitch in mm per tooth.
PRESETS: Dict[str, GearType] = {
    "0.5mm": GearType.create(0.5, 5.0),
    "0.8mm": GearType.create(0.8, 10.0),
    "1.0mm": GearType.create(1.0, 12.0),
    "1.5mm": GearType.create(1.5, 15.0),
    "2.0mm": GearType.create(2.0, 20.0),
    "2.0mm-heavy": GearType.create(2.0, 25.0, pressure=25.0),
}
