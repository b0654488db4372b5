"""
Shared test fixtures for the phasor circuit solver test suite.

All fixtures build pure-Python document objects (no UI dependencies).
Coordinates sit on a 20-unit grid; unconnected points are at least two
grid steps apart so the clustering tolerance never merges them by accident.
"""

import json
import sys
from pathlib import Path

# Ensure app/ is on sys.path so bare imports (models, simulation, controllers)
# work when running individual test files (e.g., python -m pytest app/tests/unit/test_foo.py).
_app_dir = str(Path(__file__).resolve().parent.parent)
if _app_dir not in sys.path:
    sys.path.insert(0, _app_dir)

import pytest
from models.circuit import CircuitDocument
from models.element import ElementData, GroundData, Point
from models.wire import JunctionData, WireData


def make_element(element_id, element_type, a, b, value):
    """Helper to create an ElementData from terminal coordinate tuples."""
    return ElementData(
        element_id=element_id,
        element_type=element_type,
        name=element_id,
        a=Point(*a),
        b=Point(*b),
        value=value,
    )


def make_ground(element_id, p):
    """Helper to create a GroundData whose terminal sits at p."""
    return GroundData(element_id=element_id, p=Point(*p))


def make_wire(wire_id, *points):
    """Helper to create a WireData from coordinate tuples."""
    return WireData(wire_id=wire_id, points=[Point(*p) for p in points])


def make_junction(junction_id, p):
    return JunctionData(junction_id=junction_id, p=Point(*p))


def make_document(elements, wires=(), junctions=(), freq_hz=0.0, grid=20):
    return CircuitDocument(
        grid=grid,
        freq_hz=freq_hz,
        elements=list(elements),
        wires=list(wires),
        junctions=list(junctions),
    )


def voltage_divider_document(v="5", r1="1k", r2="1k"):
    """
    V1 (a=+) -- W1 -- R1 -- W2 -- R2 -- W3 -- gnd
    V1 (b=-) sits on GND1.

    Nodes: n1 (V1.a, R1.a), n2 (R1.b, R2.a), gnd (V1.b, R2.b, GND1)
    """
    return make_document(
        elements=[
            make_element("V1", "V", (0, 0), (0, 200), v),
            make_element("R1", "R", (100, 0), (260, 0), r1),
            make_element("R2", "R", (360, 0), (360, 160), r2),
            make_ground("GND1", (0, 200)),
        ],
        wires=[
            make_wire("W1", (0, 0), (100, 0)),
            make_wire("W2", (260, 0), (360, 0)),
            make_wire("W3", (360, 160), (360, 200), (0, 200)),
        ],
    )


def shunt_document(element_type="R", value="1", source="1", freq_hz=0.0, source_a_on_ground=True):
    """
    A current source I1 in parallel with one element X1 between n1 and gnd.

    With source_a_on_ground the source's a terminal is on gnd and b on n1,
    so the current I1 enters n1 and V(n1) = I1 * Z(X1).

    Nodes: n1 (top rail), gnd (bottom rail with GND1)
    """
    if source_a_on_ground:
        source_a, source_b = (0, 200), (0, 0)
    else:
        source_a, source_b = (0, 0), (0, 200)
    return make_document(
        elements=[
            make_element("I1", "I", source_a, source_b, source),
            make_element("X1", element_type, (100, 0), (100, 200), value),
            make_ground("GND1", (100, 200)),
        ],
        wires=[
            make_wire("W1", (0, 0), (100, 0)),
            make_wire("W2", (0, 200), (100, 200)),
        ],
        freq_hz=freq_hz,
    )


def floating_pair_document():
    """
    A grounded V1-R1 loop plus a series pair R2-R3 that touches nothing else.

    The pair's three nodes have no path to gnd, so the solve is singular.
    """
    return make_document(
        elements=[
            make_element("V1", "V", (0, 0), (0, 200), "5"),
            make_element("R1", "R", (100, 0), (100, 200), "1k"),
            make_ground("GND1", (0, 200)),
            make_element("R2", "R", (400, 0), (560, 0), "1k"),
            make_element("R3", "R", (560, 0), (720, 0), "1k"),
        ],
        wires=[
            make_wire("W1", (0, 0), (100, 0)),
            make_wire("W2", (0, 200), (100, 200)),
        ],
    )


@pytest.fixture
def divider_doc():
    return voltage_divider_document()


@pytest.fixture
def shunt_resistor_doc():
    return shunt_document("R", "1", "1")


@pytest.fixture
def rc_doc():
    """1 uF capacitor driven by a 1 A source at 1 kHz."""
    return shunt_document("C", "1u", "1", freq_hz=1000.0)


@pytest.fixture
def floating_doc():
    return floating_pair_document()


@pytest.fixture
def divider_file(tmp_path, divider_doc):
    """The voltage divider saved as a document JSON file."""
    path = tmp_path / "divider.json"
    path.write_text(json.dumps(divider_doc.to_dict()))
    return path
