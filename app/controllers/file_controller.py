"""
FileController - Handles circuit document I/O.

File dialog interaction is the responsibility of the caller. Documents are
stored as the JSON exchange format produced by CircuitDocument.to_dict().
"""

import json
import logging
from pathlib import Path
from typing import Optional

from models.circuit import DOCUMENT_VERSION, CircuitDocument
from models.element import ELEMENT_TYPES, VALID_ROTATIONS

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_point(point, what: str) -> None:
    if not isinstance(point, dict) or "x" not in point or "y" not in point:
        raise ValueError(f"{what} has invalid point data.")
    if not _is_number(point["x"]) or not _is_number(point["y"]):
        raise ValueError(f"{what} point values must be numeric.")


def validate_document_data(data) -> None:
    """
    Validate JSON structure before loading.

    Raises ValueError with a descriptive message if anything is wrong.
    A missing or non-numeric freqHz is not an error; it loads as 0 Hz.
    """
    if not isinstance(data, dict):
        raise ValueError("File does not contain a valid circuit object.")

    version = data.get("version", DOCUMENT_VERSION)
    if version != DOCUMENT_VERSION:
        raise ValueError(f"Unsupported document version {version!r}; expected {DOCUMENT_VERSION}.")

    grid = data.get("grid", 20)
    if not _is_number(grid) or grid <= 0:
        raise ValueError("Grid spacing must be a positive number.")

    if "elements" not in data or not isinstance(data["elements"], list):
        raise ValueError("Missing or invalid 'elements' list.")
    for key in ("wires", "junctions"):
        if key in data and not isinstance(data[key], list):
            raise ValueError(f"Invalid '{key}' list.")

    element_ids = set()
    for i, element in enumerate(data["elements"]):
        if not isinstance(element, dict):
            raise ValueError(f"Element #{i + 1} is not an object.")
        for key in ("id", "type"):
            if key not in element:
                raise ValueError(f"Element #{i + 1} is missing required field '{key}'.")
        eid = element["id"]
        if eid in element_ids:
            raise ValueError(f"Duplicate element id '{eid}'.")
        element_ids.add(eid)

        etype = element["type"]
        if etype not in ELEMENT_TYPES:
            raise ValueError(f"Element '{eid}' has unknown type '{etype}'.")
        if etype == "GND":
            if "p" not in element:
                raise ValueError(f"Ground '{eid}' is missing required field 'p'.")
            _check_point(element["p"], f"Ground '{eid}'")
            continue

        for key in ("a", "b", "value"):
            if key not in element:
                raise ValueError(f"Element '{eid}' is missing required field '{key}'.")
        _check_point(element["a"], f"Element '{eid}' terminal a")
        _check_point(element["b"], f"Element '{eid}' terminal b")
        if element.get("rotation", 0) not in VALID_ROTATIONS:
            raise ValueError(f"Element '{eid}' rotation must be one of {VALID_ROTATIONS}.")

    for i, wire in enumerate(data.get("wires", [])):
        if not isinstance(wire, dict) or "points" not in wire or not isinstance(wire["points"], list):
            raise ValueError(f"Wire #{i + 1} is missing its 'points' list.")
        if len(wire["points"]) < 2:
            raise ValueError(f"Wire #{i + 1} needs at least two points.")
        for point in wire["points"]:
            _check_point(point, f"Wire #{i + 1}")

    for i, junction in enumerate(data.get("junctions", [])):
        if not isinstance(junction, dict) or "p" not in junction:
            raise ValueError(f"Junction #{i + 1} is missing required field 'p'.")
        _check_point(junction["p"], f"Junction #{i + 1}")


def export_document_text(doc: CircuitDocument) -> str:
    """Serialize a document to the JSON exchange text."""
    return json.dumps(doc.to_dict(), indent=2, ensure_ascii=False)


def import_document_text(text: str) -> CircuitDocument:
    """
    Parse JSON exchange text into a document.

    Raises:
        ValueError: If the text is not valid JSON or the structure is invalid.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Document is not valid JSON: {e}") from e
    validate_document_data(data)
    return CircuitDocument.from_dict(data)


def load_document(filepath) -> CircuitDocument:
    """
    Load a document from a JSON file.

    Raises:
        ValueError: If the content is not a valid document.
        OSError: If the file cannot be read.
    """
    with open(Path(filepath), "r", encoding="utf-8") as f:
        return import_document_text(f.read())


def save_document(doc: CircuitDocument, filepath) -> None:
    """
    Save a document to a JSON file.

    Raises:
        OSError: If the file cannot be written.
    """
    with open(Path(filepath), "w", encoding="utf-8") as f:
        f.write(export_document_text(doc))


class FileController:
    """
    Manages document file I/O.

    Tracks the current file path for quick-save.
    """

    def __init__(self, doc: Optional[CircuitDocument] = None):
        self.doc = doc or CircuitDocument()
        self.current_file: Optional[Path] = None

    def new_document(self) -> None:
        """Clear the document and reset file state."""
        self.doc.clear()
        self.current_file = None

    def save(self, filepath=None) -> None:
        """
        Save to filepath, or to the current file when omitted.

        Raises:
            ValueError: If no path is given and none is current.
            OSError: If the file cannot be written.
        """
        if filepath is None:
            if self.current_file is None:
                raise ValueError("No file path to save to.")
            filepath = self.current_file
        filepath = Path(filepath)
        save_document(self.doc, filepath)
        self.current_file = filepath
        logger.info("Saved document to %s", filepath)

    def load(self, filepath) -> None:
        """
        Load a document, replacing the current one in place.

        The CircuitDocument object is kept so holders of a reference stay
        connected.

        Raises:
            ValueError: If file structure is invalid.
            OSError: If the file cannot be read.
        """
        filepath = Path(filepath)
        loaded = load_document(filepath)

        self.doc.version = loaded.version
        self.doc.grid = loaded.grid
        self.doc.freq_hz = loaded.freq_hz
        self.doc.elements = loaded.elements
        self.doc.wires = loaded.wires
        self.doc.junctions = loaded.junctions

        self.current_file = filepath
        logger.info("Loaded document from %s (%d elements)", filepath, len(loaded.elements))

    def has_file(self) -> bool:
        """Return whether a current file path is set (for quick-save)."""
        return self.current_file is not None

    def get_title(self, base: str = "Phasor Circuit Solver") -> str:
        if self.current_file:
            return f"{base} - {self.current_file.name}"
        return base
