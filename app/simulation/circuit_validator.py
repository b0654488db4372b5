"""
simulation/circuit_validator.py

Pre-solve document validation.

Errors block solving; warnings flag drawings that will solve but probably
not the way the user intended.
"""

import math

from models.circuit import CircuitDocument
from models.element import ELEMENT_NAMES, PASSIVE_TYPES, SOURCE_TYPES

from .clustering import TERMINAL_ROLES, cluster_points, collect_points
from .complex_value import looks_complex, parse_complex, parse_real
from .messages import message
from .settings import DEFAULT_SETTINGS, SolverSettings


def parsed_element_value(element_type: str, raw) -> complex:
    """Value as the solver reads it, before any frequency dependence."""
    if element_type in ("C", "L") and not looks_complex(raw):
        return complex(parse_real(raw), 0.0)
    return parse_complex(raw)


def validate_document(doc: CircuitDocument, settings: SolverSettings = DEFAULT_SETTINGS):
    """
    Validate a document before solving.

    Args:
        doc: The drawn circuit.
        settings: Clustering constants and message locale.

    Returns:
        (is_valid, errors, warnings) where:
            is_valid: bool — False if any errors found
            errors: list[str] — problems that block solving
            warnings: list[str] — non-blocking issues
    """
    errors = []
    warnings = []

    # 1. Must have elements
    if not doc.elements:
        errors.append(message("no_elements", settings.locale))
        return False, errors, warnings

    # 2. Must have a ground reference
    if not doc.has_ground():
        errors.append(message("no_ground", settings.locale))

    # 3. Values must parse
    parts = doc.two_terminal_elements()
    for element in parts:
        value = parsed_element_value(element.element_type, element.value)
        if math.isnan(value.real) or math.isnan(value.imag):
            warnings.append(
                f"{element.name} ({ELEMENT_NAMES[element.element_type]}) has a value "
                f"that cannot be parsed: {element.value!r}."
            )
        elif element.element_type in PASSIVE_TYPES and value == 0:
            warnings.append(
                f"{element.name} ({ELEMENT_NAMES[element.element_type]}) has a zero value; "
                f"the solve will likely be singular or non-finite."
            )

    # 4. Dangling terminals: a terminal that shares its cluster with nothing
    refs = collect_points(doc)
    clusters = cluster_points(refs, doc.grid, settings)
    dangling: dict[str, list[str]] = {}
    for members in clusters.groups.values():
        if len(members) != 1:
            continue
        ref = refs[members[0]]
        if ref.role in TERMINAL_ROLES:
            dangling.setdefault(ref.owner_id, []).append(ref.role)

    for element in doc.elements:
        roles = dangling.get(element.element_id)
        if not roles:
            continue
        if element.element_type == "GND" or len(roles) == 2:
            warnings.append(f"{element.name} ({element.element_type}) has no connections.")
        else:
            warnings.append(f"{element.name} ({element.element_type}) has an unconnected terminal: {roles[0]}.")

    # 5. Sources
    if not any(e.element_type in SOURCE_TYPES for e in parts):
        warnings.append(
            "Circuit has no voltage or current sources. "
            "Every node voltage will be zero."
        )

    # 6. Frequency
    if doc.freq_hz < 0:
        warnings.append(f"Frequency {doc.freq_hz} Hz is negative; it is treated as 0 Hz (DC).")

    is_valid = len(errors) == 0
    return is_valid, errors, warnings
