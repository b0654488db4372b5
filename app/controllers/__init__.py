"""
Controllers for the phasor circuit solver.

This package contains UI-free controller classes that orchestrate
operations between the document models and the solver.
"""

from .file_controller import (
    FileController,
    export_document_text,
    import_document_text,
    load_document,
    save_document,
    validate_document_data,
)
from .simulation_controller import SimulationController, SimulationResult

__all__ = [
    "SimulationController",
    "SimulationResult",
    "FileController",
    "validate_document_data",
    "load_document",
    "save_document",
    "export_document_text",
    "import_document_text",
]
