"""
CircuitDocument - The drawn circuit as exchanged with the editor.

This module contains no UI dependencies. It holds elements, wires and
junctions together with the grid spacing and excitation frequency.
"""

from dataclasses import dataclass, field
from typing import Optional

from .element import AnyElement, ElementData, GroundData, element_from_dict
from .wire import JunctionData, WireData

DOCUMENT_VERSION = 1
DEFAULT_GRID = 20


@dataclass
class CircuitDocument:
    """
    Central data store for one drawn circuit.

    Elements, wires and junctions keep their insertion order; the net
    builder relies on that order for stable node numbering.
    """

    version: int = DOCUMENT_VERSION
    grid: float = DEFAULT_GRID
    freq_hz: float = 0.0
    elements: list[AnyElement] = field(default_factory=list)
    wires: list[WireData] = field(default_factory=list)
    junctions: list[JunctionData] = field(default_factory=list)

    # --- Element operations ---

    def add_element(self, element: AnyElement) -> None:
        """Add an element to the document."""
        self.elements.append(element)

    def get_element(self, element_id: str) -> Optional[AnyElement]:
        for element in self.elements:
            if element.element_id == element_id:
                return element
        return None

    def remove_element(self, element_id: str) -> bool:
        """Remove an element by id. Returns True if something was removed."""
        before = len(self.elements)
        self.elements = [e for e in self.elements if e.element_id != element_id]
        return len(self.elements) != before

    def has_ground(self) -> bool:
        return any(isinstance(e, GroundData) for e in self.elements)

    def two_terminal_elements(self) -> list[ElementData]:
        return [e for e in self.elements if isinstance(e, ElementData)]

    # --- Wire / junction operations ---

    def add_wire(self, wire: WireData) -> None:
        self.wires.append(wire)

    def add_junction(self, junction: JunctionData) -> None:
        self.junctions.append(junction)

    def clear(self) -> None:
        """Clear all drawn content (grid and frequency are kept)."""
        self.elements.clear()
        self.wires.clear()
        self.junctions.clear()

    # --- Serialization ---

    def to_dict(self) -> dict:
        """Serialize to the exchange format."""
        return {
            "version": self.version,
            "grid": self.grid,
            "freqHz": self.freq_hz,
            "elements": [e.to_dict() for e in self.elements],
            "wires": [w.to_dict() for w in self.wires],
            "junctions": [j.to_dict() for j in self.junctions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CircuitDocument":
        """
        Deserialize from the exchange format.

        A missing frequency defaults to 0 Hz (DC). Only version 1 is accepted.
        """
        version = data.get("version", DOCUMENT_VERSION)
        if version != DOCUMENT_VERSION:
            raise ValueError(f"Unsupported document version {version!r}")

        freq = data.get("freqHz")
        if not isinstance(freq, (int, float)) or isinstance(freq, bool):
            freq = 0.0

        return cls(
            version=version,
            grid=data.get("grid", DEFAULT_GRID),
            freq_hz=float(freq),
            elements=[element_from_dict(e) for e in data.get("elements", [])],
            wires=[WireData.from_dict(w) for w in data.get("wires", [])],
            junctions=[JunctionData.from_dict(j) for j in data.get("junctions", [])],
        )
