"""Error taxonomy for gear and geartrain construction."""

from typing import Optional


class GeartrainError(ValueError):
    """Base class for invalid gear or geartrain parameters.

    Attributes:
        message: What is wrong.
        subject: Where it is wrong, e.g. ``"stage 1"`` or ``"gear plane 40/12x3"``.
    """

    def __init__(self, message: str, subject: Optional[str] = None):
        self.message = message
        self.subject = subject
        super().__init__(f"{subject}: {message}" if subject else message)

    def within(self, subject: str) -> "GeartrainError":
        """The same error, located inside ``subject``."""
        if self.subject:
            subject = f"{subject}, {self.subject}"
        return type(self)(self.message, subject)


class InvalidGearError(GeartrainError):
    """Raised when a tooth count or pitch cannot produce gear geometry."""


class InvalidGeartrainError(GeartrainError):
    """Raised when gears cannot be arranged into the requested train."""


class DegenerateGeartrainError(GeartrainError):
    """Raised when a stepped planetary has equal ring tooth counts."""


class AssemblyWarning(UserWarning):
    """Advisory: a gear assembly meshes, but not the way it was asked for.

    Issued when planet placement snapping moves a planet further from its
    evenly spaced position than the caller tolerates, or when neighbouring
    planets would touch.
    """
