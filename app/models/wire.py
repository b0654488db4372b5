"""
WireData / JunctionData - Pure Python data models for conductors.

This module contains no UI dependencies. Wire points are stored as
Point values rather than canvas coordinates.
"""

from dataclasses import dataclass, field

from .element import Point


@dataclass
class WireData:
    """
    A wire drawn as a polyline.

    Every point of the polyline is the same conductor, so the whole wire is
    electrically a single node regardless of how far apart its points are.
    """

    wire_id: str
    points: list[Point] = field(default_factory=list)

    def __post_init__(self):
        """Validate and clean up points."""
        if len(self.points) < 2:
            raise ValueError(f"Wire '{self.wire_id}' must have at least 2 points, got {len(self.points)}")

        # De-duplicate consecutive identical points
        deduplicated = [self.points[0]]
        for pt in self.points[1:]:
            if pt != deduplicated[-1]:
                deduplicated.append(pt)
        # A wire folded onto a single point is still a valid (zero-length) conductor
        if len(deduplicated) == 1:
            deduplicated.append(deduplicated[0])
        self.points = deduplicated

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def segments(self) -> list[tuple[Point, Point]]:
        """Consecutive point pairs of the polyline."""
        return list(zip(self.points, self.points[1:]))

    def to_dict(self) -> dict:
        return {"id": self.wire_id, "points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: dict) -> "WireData":
        return cls(wire_id=data["id"], points=[Point.from_dict(p) for p in data["points"]])

    def __repr__(self) -> str:
        return f"WireData({self.wire_id}, {len(self.points)} points)"


@dataclass
class JunctionData:
    """
    Explicit junction node where crossing wires must bond.
    """

    junction_id: str
    p: Point

    def to_dict(self) -> dict:
        return {"id": self.junction_id, "p": self.p.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> "JunctionData":
        return cls(junction_id=data["id"], p=Point.from_dict(data["p"]))
