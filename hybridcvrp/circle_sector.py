"""Circle sectors over integer polar angles."""

from dataclasses import dataclass

# Polar angles are represented as integers in [0, MAX_ANGLE).
MAX_ANGLE = 65536


@dataclass
class CircleSector:
    """A sector of a circle between a start and an end polar angle."""

    start: int = 0
    end: int = 0

    def reset(self) -> None:
        self.start = 0
        self.end = 0

    def from_angle(self, angle: int) -> None:
        """Collapse the sector onto a single angle."""
        self.start = angle
        self.end = angle

    def extend(self, angle: int) -> None:
        """Grow the sector by the smaller amount needed to enclose ``angle``."""
        if self.start == 0 and self.end == 0:
            self.from_angle(angle)
        elif not self.is_enclosed(angle):
            if (angle - self.end) % MAX_ANGLE <= (self.start - angle) % MAX_ANGLE:
                self.end = angle
            else:
                self.start = angle

    def is_enclosed(self, angle: int) -> bool:
        return (angle - self.start) % MAX_ANGLE <= (self.end - self.start) % MAX_ANGLE

    def overlaps(self, other: "CircleSector") -> bool:
        return (other.start - self.start) % MAX_ANGLE <= (
            self.end - self.start
        ) % MAX_ANGLE or (self.start - other.start) % MAX_ANGLE <= (
            other.end - other.start
        ) % MAX_ANGLE