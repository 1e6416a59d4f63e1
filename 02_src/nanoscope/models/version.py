"""ROM version model."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Version:
    """A ``major.minor.patch`` release number."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def from_string(cls, value: str) -> "Version":
        """Parse ``"M.m.p"``; anything else raises ValueError."""
        parts = value.strip().split(".")
        if len(parts) != 3:
            raise ValueError(f"Invalid version string: {value}")
        try:
            major, minor, patch = (int(part) for part in parts)
        except ValueError as e:
            raise ValueError(f"Invalid version string: {value}") from e
        return cls(major, minor, patch)

    def is_compatible_with(self, other: "Version") -> bool:
        """Same major, and same minor too while the major is still 0."""
        if self.major != other.major:
            return False
        return self.major != 0 or self.minor == other.minor
