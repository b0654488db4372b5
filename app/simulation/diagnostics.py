"""
simulation/diagnostics.py

Classifies net-building and solve failures and attaches likely causes
and suggestions for the user.
"""

from dataclasses import dataclass
from enum import Enum

from .messages import message


class ErrorCategory(Enum):
    """Categories of recoverable, user-facing failures."""

    # Structural
    NO_ELEMENTS = "no_elements"
    NO_GROUND = "no_ground"
    ONLY_GROUND = "only_ground"
    NO_NODES = "no_nodes"
    MISSING_GROUND_NET = "missing_ground_net"
    # Numeric
    SINGULAR_MATRIX = "singular_matrix"
    NON_FINITE = "non_finite"
    # Port analysis
    PORT_NOT_SELECTED = "port_not_selected"
    UNKNOWN_PORT_NODE = "unknown_port_node"
    UNKNOWN_LOAD = "unknown_load"


@dataclass
class ErrorDiagnosis:
    """Structured diagnosis of a failure."""

    category: ErrorCategory
    message: str
    causes: list[str]
    suggestions: list[str]


_CAUSES: dict[ErrorCategory, tuple[list[str], list[str]]] = {
    ErrorCategory.NO_ELEMENTS: (
        [],
        ["Place at least one element and a ground marker"],
    ),
    ErrorCategory.NO_GROUND: (
        ["Node voltages need a 0 V reference"],
        ["Place a GND marker and wire it to the circuit"],
    ),
    ErrorCategory.ONLY_GROUND: (
        [
            "Every terminal touches the ground marker",
            "Elements are drawn but not yet wired",
        ],
        ["Check that element terminals are not all stacked on the ground point"],
    ),
    ErrorCategory.SINGULAR_MATRIX: (
        [
            "A node has no path to ground (floating node)",
            "Two ideal voltage sources are in parallel or form a loop",
            "A reactive element has a zero value at the chosen frequency",
        ],
        [
            "Check that every node has a path to ground",
            "Ensure no two voltage sources are directly in parallel",
            "Give capacitors and inductors non-zero values",
        ],
    ),
    ErrorCategory.NON_FINITE: (
        [
            "A 0 Ω resistor, 0 H inductor or 0 F capacitor",
            "An impedance that degenerates at ω = 0",
            "A value that could not be parsed",
        ],
        [
            "Replace zero-valued elements with a small non-zero value",
            "Check every value uses a supported suffix (p n u m k meg g) or a+bj form",
        ],
    ),
}


def diagnose(category: ErrorCategory, locale: str = "en", **kwargs) -> ErrorDiagnosis:
    """Return a full diagnosis for a failure category."""
    causes, suggestions = _CAUSES.get(category, ([], []))
    return ErrorDiagnosis(
        category=category,
        message=message(category.value, locale, **kwargs),
        causes=list(causes),
        suggestions=list(suggestions),
    )


def format_user_message(diagnosis: ErrorDiagnosis) -> str:
    """Build a friendly multi-line error message string."""
    parts = [diagnosis.message]

    if diagnosis.causes:
        parts.append("\nCommon causes:")
        for cause in diagnosis.causes:
            parts.append(f"  - {cause}")

    if diagnosis.suggestions:
        parts.append("\nSuggestions:")
        for suggestion in diagnosis.suggestions:
            parts.append(f"  - {suggestion}")

    return "\n".join(parts)
