"""
Pure Python data models for the phasor circuit solver.

This package contains UI-free data classes that represent the drawn
circuit document and the electrical net built from it.
"""

from .circuit import CircuitDocument
from .element import (
    DEFAULT_VALUES,
    ELEMENT_NAMES,
    ELEMENT_TYPES,
    ELEMENT_UNITS,
    ElementData,
    GroundData,
    Point,
)
from .node import GROUND_ID, CircuitNet, NetElement, NetNode
from .wire import JunctionData, WireData

__all__ = [
    "CircuitDocument",
    "ElementData",
    "GroundData",
    "Point",
    "ELEMENT_TYPES",
    "ELEMENT_NAMES",
    "ELEMENT_UNITS",
    "DEFAULT_VALUES",
    "WireData",
    "JunctionData",
    "CircuitNet",
    "NetElement",
    "NetNode",
    "GROUND_ID",
]
