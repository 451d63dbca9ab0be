"""Skyline Bounded Context - Error Hierarchy.

Custom exceptions for map lookup, angle computation, area scanning and
window compositing. All of them are caller-input errors or broken internal
invariants; none is transient, so nothing here is retried.
"""

from __future__ import annotations


class SkylineError(Exception):
    """Base error for skyline operations."""


class EmptyMapError(SkylineError):
    """Point lookup attempted before a (non-empty) map was loaded."""

    def __init__(self, message: str = "map data is undefined") -> None:
        super().__init__(message)


class InvalidMapError(SkylineError):
    """Map source could not be parsed into numeric cells."""


# ---------------------------------------------------------------------------
# Geometry Errors
# ---------------------------------------------------------------------------
class DegenerateGeometryError(SkylineError):
    """Angle requested between a point and itself.

    Attributes:
        observer: (x0, y0) of the observer
        target: (x1, y1) of the target
    """

    def __init__(self, observer: tuple[int, int], target: tuple[int, int]) -> None:
        self.observer = observer
        self.target = target
        super().__init__(
            f"Same points given for angle calculation: "
            f"observer {observer}, target {target}"
        )


class DegenerateRegionError(SkylineError):
    """Scan region is empty or has zero span on exactly one axis.

    Attributes:
        corner1: (x1, y1)
        corner2: (x2, y2)
        reason: What makes the region unusable
    """

    def __init__(
        self, corner1: tuple[int, int], corner2: tuple[int, int], reason: str
    ) -> None:
        self.corner1 = corner1
        self.corner2 = corner2
        self.reason = reason
        super().__init__(
            f"Scan region {corner1}-{corner2} is degenerate: {reason}"
        )


# ---------------------------------------------------------------------------
# Compositor Errors
# ---------------------------------------------------------------------------
class RankRangeError(SkylineError):
    """A rank outside [0, max_rank] reached the window compositor.

    Attributes:
        column: Column index of the offending cell
        row: Row index of the offending cell
        value: The offending rank
        max_rank: Largest valid rank (resolution - 1)
    """

    def __init__(self, column: int, row: int, value: int, max_rank: int) -> None:
        self.column = column
        self.row = row
        self.value = value
        self.max_rank = max_rank
        bound = "less than 0" if value < 0 else f"greater than {max_rank}"
        super().__init__(f"Range Error: ({column},{row}) = {value} is {bound}")


class InvalidCommandError(SkylineError):
    """View-composition command is malformed."""
