"""
Net data models - the canonical solvable graph produced from a document.

This module contains no UI dependencies. A net node is a set of drawn
points that are electrically the same potential; net elements reference
node identifiers instead of coordinates.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

from .element import Point

GROUND_ID = "gnd"


def node_label(index: int) -> str:
    """Sequential identifier for the index-th non-ground node (1-based)."""
    return f"n{index}"


@dataclass(frozen=True)
class NetNode:
    """A non-ground node. The position is the centroid of its member points."""

    node_id: str
    position: Point

    def to_dict(self) -> dict:
        return {"id": self.node_id, "p": self.position.to_dict()}


@dataclass(frozen=True)
class NetElement:
    """
    An element rewritten onto node identifiers.

    Two-terminal elements use a and b; a ground marker uses a only.
    """

    element_id: str
    element_type: str
    name: str
    a: str = GROUND_ID
    b: Optional[str] = None
    value: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"id": self.element_id, "type": self.element_type, "name": self.name, "a": self.a}
        if self.element_type != "GND":
            data["b"] = self.b
            data["value"] = self.value
        return data


@dataclass(frozen=True)
class CircuitNet:
    """
    Canonical electrical graph: non-ground nodes plus rewritten elements.

    Ground is implicit and always named "gnd". Transformations return new
    nets and never mutate this one.
    """

    nodes: tuple[NetNode, ...] = field(default_factory=tuple)
    elements: tuple[NetElement, ...] = field(default_factory=tuple)
    has_ground: bool = True

    @property
    def node_ids(self) -> list[str]:
        return [n.node_id for n in self.nodes if n.node_id != GROUND_ID]

    def get_element(self, element_id: str) -> Optional[NetElement]:
        for element in self.elements:
            if element.element_id == element_id:
                return element
        return None

    def unused_element_id(self, base: str) -> str:
        """base, or base_2, base_3, ... whichever no element of this net uses."""
        taken = {e.element_id for e in self.elements}
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}_{suffix}"
            suffix += 1
        return candidate

    def has_node(self, node_id: str) -> bool:
        return node_id == GROUND_ID or node_id in self.node_ids

    def without_element(self, element_id: Optional[str]) -> "CircuitNet":
        """Return a net with the given element removed (no-op for None)."""
        if not element_id:
            return self
        return replace(self, elements=tuple(e for e in self.elements if e.element_id != element_id))

    def with_sources_zeroed(self) -> "CircuitNet":
        """Deactivate every independent source: V becomes a short, I becomes an open."""
        return replace(
            self,
            elements=tuple(
                replace(e, value="0") if e.element_type in ("V", "I") else e for e in self.elements
            ),
        )

    def with_element(self, element: NetElement) -> "CircuitNet":
        return replace(self, elements=self.elements + (element,))

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "hasGround": self.has_ground,
            "elements": [e.to_dict() for e in self.elements],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CircuitNet":
        nodes = tuple(
            NetNode(node_id=n["id"], position=Point.from_dict(n.get("p", {"x": 0, "y": 0})))
            for n in data.get("nodes", [])
        )
        elements = tuple(
            NetElement(
                element_id=e["id"],
                element_type=e["type"],
                name=e.get("name", e["id"]),
                a=e.get("a") or GROUND_ID,
                b=e.get("b"),
                value=e.get("value"),
            )
            for e in data.get("elements", [])
        )
        return cls(nodes=nodes, elements=elements, has_ground=data.get("hasGround", True))
