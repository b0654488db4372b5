"""
ElementData / GroundData - Pure Python data models for drawn circuit elements.

This module contains no UI dependencies. Positions are represented as
Point(x, y) values in document length units.

Element types use the single-letter tags of the exchange format:
'R', 'C', 'L', 'V', 'I' (two-terminal) and 'GND' (one terminal).
"""

from dataclasses import dataclass
from typing import Optional, Union

# Two-terminal element types, in palette order
TWO_TERMINAL_TYPES = ["R", "C", "L", "V", "I"]

ELEMENT_TYPES = TWO_TERMINAL_TYPES + ["GND"]

PASSIVE_TYPES = {"R", "C", "L"}
SOURCE_TYPES = {"V", "I"}

# Display names per element type
ELEMENT_NAMES = {
    "R": "Resistor",
    "C": "Capacitor",
    "L": "Inductor",
    "V": "Voltage Source",
    "I": "Current Source",
    "GND": "Ground",
}

# Default values per element type
DEFAULT_VALUES = {
    "R": "1k",
    "C": "1u",
    "L": "1m",
    "V": "5",
    "I": "1m",
}

# Units shown next to values
ELEMENT_UNITS = {
    "R": "Ω",
    "C": "F",
    "L": "H",
    "V": "V",
    "I": "A",
}

VALID_ROTATIONS = (0, 90, 180, 270)

# Distance between the two terminals of a placed element
TERMINAL_SPAN = 160.0

# Ground terminal sits this far above the ground symbol's centre
GROUND_TERMINAL_OFFSET = 20.0


@dataclass(frozen=True)
class Point:
    """A 2-D coordinate. Value type, no identity."""

    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "Point":
        return cls(x=float(data["x"]), y=float(data["y"]))

    def distance2(self, other: "Point") -> float:
        """Squared Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy


def terminal_positions(x: float, y: float, rotation: int) -> tuple[Point, Point]:
    """
    Return the (a, b) terminal points of a two-terminal element centred at (x, y).

    Rotation 0 puts terminal a on the left; 180 mirrors it. Rotation 90 puts
    terminal a on top; 270 mirrors it.
    """
    half = TERMINAL_SPAN / 2
    if rotation == 0:
        return Point(x - half, y), Point(x + half, y)
    if rotation == 180:
        return Point(x + half, y), Point(x - half, y)
    if rotation == 90:
        return Point(x, y - half), Point(x, y + half)
    if rotation == 270:
        return Point(x, y + half), Point(x, y - half)
    raise ValueError(f"Rotation must be one of {VALID_ROTATIONS}, got {rotation}")


@dataclass
class ElementData:
    """
    Pure Python data class representing a two-terminal element (R, C, L, V, I).

    The value is kept as the raw string the user typed; it is parsed lazily
    by the solver. Rotation is display-only.
    """

    element_id: str
    element_type: str
    name: str
    a: Point
    b: Point
    value: str
    rotation: int = 0
    x: Optional[float] = None
    y: Optional[float] = None

    def __post_init__(self):
        if self.element_type not in TWO_TERMINAL_TYPES:
            raise ValueError(f"Unknown two-terminal element type '{self.element_type}'")
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(f"Rotation must be one of {VALID_ROTATIONS}, got {self.rotation}")
        # Centre defaults to the midpoint between terminals
        if self.x is None:
            self.x = (self.a.x + self.b.x) / 2
        if self.y is None:
            self.y = (self.a.y + self.b.y) / 2

    @classmethod
    def place(
        cls,
        element_id: str,
        element_type: str,
        x: float,
        y: float,
        rotation: int = 0,
        value: Optional[str] = None,
        name: Optional[str] = None,
    ) -> "ElementData":
        """Create an element centred at (x, y) with terminals derived from rotation."""
        a, b = terminal_positions(x, y, rotation)
        return cls(
            element_id=element_id,
            element_type=element_type,
            name=name or element_id,
            a=a,
            b=b,
            value=DEFAULT_VALUES[element_type] if value is None else value,
            rotation=rotation,
            x=x,
            y=y,
        )

    def rotated(self, rotation: int) -> "ElementData":
        """Return a copy rotated in place about its centre."""
        return ElementData.place(
            self.element_id, self.element_type, self.x, self.y, rotation, self.value, self.name
        )

    def get_terminal_positions(self) -> list[Point]:
        return [self.a, self.b]

    def to_dict(self) -> dict:
        return {
            "id": self.element_id,
            "type": self.element_type,
            "name": self.name,
            "a": self.a.to_dict(),
            "b": self.b.to_dict(),
            "value": self.value,
            "rotation": self.rotation,
            "x": self.x,
            "y": self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ElementData":
        return cls(
            element_id=data["id"],
            element_type=data["type"],
            name=data.get("name", data["id"]),
            a=Point.from_dict(data["a"]),
            b=Point.from_dict(data["b"]),
            value=str(data.get("value", "")),
            rotation=int(data.get("rotation", 0)),
            x=data.get("x"),
            y=data.get("y"),
        )

    def __repr__(self) -> str:
        return (
            f"ElementData(id={self.element_id!r}, type={self.element_type!r}, "
            f"value={self.value!r}, a=({self.a.x}, {self.a.y}), b=({self.b.x}, {self.b.y}))"
        )


@dataclass
class GroundData:
    """A ground reference marker with a single terminal point p."""

    element_id: str
    p: Point
    name: str = "GND"
    x: Optional[float] = None
    y: Optional[float] = None
    element_type: str = "GND"

    def __post_init__(self):
        if self.x is None:
            self.x = self.p.x
        if self.y is None:
            self.y = self.p.y + GROUND_TERMINAL_OFFSET

    @classmethod
    def place(cls, element_id: str, x: float, y: float, name: str = "GND") -> "GroundData":
        """Create a ground symbol centred at (x, y); its terminal sits just above."""
        return cls(element_id=element_id, p=Point(x, y - GROUND_TERMINAL_OFFSET), name=name, x=x, y=y)

    def get_terminal_positions(self) -> list[Point]:
        return [self.p]

    def to_dict(self) -> dict:
        return {
            "id": self.element_id,
            "type": "GND",
            "name": self.name,
            "p": self.p.to_dict(),
            "x": self.x,
            "y": self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GroundData":
        return cls(
            element_id=data["id"],
            p=Point.from_dict(data["p"]),
            name=data.get("name", "GND"),
            x=data.get("x"),
            y=data.get("y"),
        )


AnyElement = Union[ElementData, GroundData]


def element_from_dict(data: dict) -> AnyElement:
    """Deserialize either element variant based on its 'type' tag."""
    if data.get("type") == "GND":
        return GroundData.from_dict(data)
    return ElementData.from_dict(data)
