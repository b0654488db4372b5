"""
simulation/mna_solver.py

Modified Nodal Analysis for DC and single-frequency AC phasor circuits.

Unknowns are the non-ground node voltages followed by one branch current
per independent voltage source. Conventions:
    - Node voltages are relative to gnd.
    - V element: Va - Vb = value (a is +, b is -).
    - I element: current of the given value flows a -> b through the
      source, so it leaves node a and enters node b.
    - Element power is S = Vab * conj(I).

Besides the solution, a solve produces a readable derivation trace and a
formatted dump of A, z and x.
"""

import cmath
import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np

from models.node import GROUND_ID, CircuitNet

from .complex_value import (
    NAN,
    divide,
    format_complex,
    format_number,
    looks_complex,
    parse_complex,
    parse_real,
    to_pair,
)
from .diagnostics import ErrorCategory
from .linear_solver import SINGULAR, solve_linear
from .messages import message
from .settings import DEFAULT_SETTINGS, SolverSettings

logger = logging.getLogger(__name__)

ZERO = complex(0.0, 0.0)


# --- Result types -----------------------------------------------------------


@dataclass(frozen=True)
class SolveStep:
    """One block of the derivation trace."""

    kind: str
    title: str
    lines: tuple[str, ...] = ()
    note: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"kind": self.kind, "title": self.title, "lines": list(self.lines)}
        if self.note:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class DebugDump:
    """Formatted copy of the assembled system, for diagnostics only."""

    node_order: tuple[str, ...]
    vsrc_order: tuple[str, ...]
    unknown_order: tuple[str, ...]
    A: tuple[tuple[str, ...], ...]
    z: tuple[str, ...]
    x: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "nodeOrder": list(self.node_order),
            "vsrcOrder": list(self.vsrc_order),
            "unknownOrder": list(self.unknown_order),
            "A": [list(row) for row in self.A],
            "z": list(self.z),
            "x": list(self.x),
        }


@dataclass(frozen=True)
class SolveResult:
    """
    Outcome of one MNA solve.

    On failure, steps still holds whatever trace was produced before the
    failure was detected.
    """

    success: bool
    freq_hz: float = 0.0
    error: Optional[str] = None
    category: Optional[ErrorCategory] = None
    node_voltages: Mapping[str, complex] = field(default_factory=dict)
    element_voltages: Mapping[str, complex] = field(default_factory=dict)
    element_currents: Mapping[str, complex] = field(default_factory=dict)
    element_powers: Mapping[str, complex] = field(default_factory=dict)
    vsource_currents: Mapping[str, complex] = field(default_factory=dict)
    steps: tuple[SolveStep, ...] = ()
    debug: Optional[DebugDump] = None

    def __post_init__(self):
        # Read-only copies, so a returned result cannot be edited in place
        for name in ("node_voltages", "element_voltages", "element_currents", "element_powers", "vsource_currents"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def voltage(self, node_id: Optional[str]) -> complex:
        """Voltage of a node; gnd and unknown ids read as 0."""
        if not node_id or node_id == GROUND_ID:
            return ZERO
        return self.node_voltages.get(node_id, ZERO)

    def to_dict(self) -> dict:
        def pairs(values: Mapping[str, complex]) -> dict:
            return {key: to_pair(v) for key, v in values.items()}

        data = {
            "success": self.success,
            "freqHz": self.freq_hz,
            "steps": [s.to_dict() for s in self.steps],
        }
        if not self.success:
            data["error"] = self.error
            return data
        data.update(
            {
                "nodeVoltages": pairs(self.node_voltages),
                "elementVoltages": pairs(self.element_voltages),
                "elementCurrents": pairs(self.element_currents),
                "elementPowers": pairs(self.element_powers),
                "vsourceCurrents": pairs(self.vsource_currents),
                "debug": self.debug.to_dict() if self.debug else None,
            }
        )
        return data


# --- Element models ---------------------------------------------------------


def angular_frequency(freq_hz: float) -> float:
    """omega = 2*pi*f, with negative frequencies clamped to DC."""
    return 2 * math.pi * max(0.0, freq_hz)


def parse_value(raw) -> complex:
    """Source values and resistances: real SI number or rectangular complex."""
    return parse_complex(raw)


def element_impedance(
    element_type: str,
    value,
    freq_hz: float,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> complex:
    """
    Impedance of an R, C or L element at the given frequency.

    A resistor value is an impedance directly (complex entry allowed). A
    capacitor or inductor value carrying an i/j marker is likewise taken
    as an impedance; otherwise it is a capacitance or inductance. At DC the
    capacitor becomes a very large and the inductor a very small real
    impedance, taken from settings.

    Returns NAN when the value does not parse.
    """
    if element_type == "R":
        return parse_value(value)
    if element_type not in ("C", "L"):
        raise ValueError(f"No impedance model for element type '{element_type}'")

    if looks_complex(value):
        return parse_complex(value)

    x = parse_real(value)
    if math.isnan(x):
        return NAN

    w = angular_frequency(freq_hz)
    if element_type == "C":
        if w == 0:
            return complex(settings.capacitor_dc_impedance, 0.0)
        # Z = 1 / (jwC) = -j / (wC)
        return divide(complex(0.0, -1.0), complex(w * x, 0.0))

    if w == 0:
        return complex(settings.inductor_dc_impedance, 0.0)
    return complex(0.0, w * x)


def element_admittance(impedance: complex) -> complex:
    return divide(complex(1.0, 0.0), impedance)


# --- Assembly ---------------------------------------------------------------


class _System:
    """Call-scoped MNA system under assembly."""

    def __init__(self, node_ids: list[str], vsrc_ids: list[str]):
        self.node_ids = node_ids
        self.vsrc_ids = vsrc_ids
        self.node_index = {nid: i for i, nid in enumerate(node_ids)}
        self.n = len(node_ids)
        self.dim = len(node_ids) + len(vsrc_ids)
        self.A = np.zeros((self.dim, self.dim), dtype=np.complex128)
        self.z = np.zeros(self.dim, dtype=np.complex128)

    def index(self, node_id: Optional[str]) -> Optional[int]:
        if not node_id or node_id == GROUND_ID:
            return None
        return self.node_index.get(node_id)

    def stamp_admittance(self, a: Optional[str], b: Optional[str], y: complex) -> None:
        ia = self.index(a)
        ib = self.index(b)
        if ia is not None:
            self.A[ia, ia] += y
        if ib is not None:
            self.A[ib, ib] += y
        if ia is not None and ib is not None:
            self.A[ia, ib] -= y
            self.A[ib, ia] -= y

    def stamp_current_source(self, a: Optional[str], b: Optional[str], current: complex) -> None:
        ia = self.index(a)
        ib = self.index(b)
        if ia is not None:
            self.z[ia] -= current
        if ib is not None:
            self.z[ib] += current

    def stamp_voltage_source(self, k: int, a: Optional[str], b: Optional[str], voltage: complex) -> None:
        row = self.n + k
        ia = self.index(a)
        ib = self.index(b)
        if ia is not None:
            self.A[ia, row] += 1
            self.A[row, ia] += 1
        if ib is not None:
            self.A[ib, row] -= 1
            self.A[row, ib] -= 1
        self.z[row] += voltage

    @property
    def unknown_order(self) -> list[str]:
        return [f"V({nid})" for nid in self.node_ids] + [f"I({vid})" for vid in self.vsrc_ids]


def _fmt(value, settings: SolverSettings) -> str:
    return format_complex(complex(value), settings.display_digits)


def _kcl_lines(system: _System, settings: SolverSettings) -> list[str]:
    lines = []
    for i, nid in enumerate(system.node_ids):
        terms = []
        for j, other in enumerate(system.node_ids):
            c = system.A[i, j]
            if c != 0:
                terms.append(f"{_fmt(c, settings)}·V({other})")
        for k, vid in enumerate(system.vsrc_ids):
            c = system.A[i, system.n + k]
            if c != 0:
                terms.append(f"{_fmt(c, settings)}·I({vid})")
        lines.append(f"KCL({nid}): {' + '.join(terms)} = {_fmt(system.z[i], settings)}")
    return lines


def _failure(
    category: ErrorCategory,
    settings: SolverSettings,
    freq_hz: float,
    steps=(),
) -> SolveResult:
    return SolveResult(
        success=False,
        freq_hz=freq_hz,
        error=message(category.value, settings.locale),
        category=category,
        steps=tuple(steps),
    )


def solve_mna(
    net: CircuitNet,
    freq_hz: float,
    settings: Optional[SolverSettings] = None,
) -> SolveResult:
    """
    Solve a net at one frequency.

    Args:
        net: Net produced by build_net() or a transformation of one.
        freq_hz: Excitation frequency in Hz; 0 (or negative) is DC.
        settings: Impedance approximations, pivot threshold, display and
            message locale.

    Returns:
        SolveResult. Failures (no nodes, no ground, singular system,
        non-finite solution) are reported in the result, never raised.
    """
    settings = settings or DEFAULT_SETTINGS
    loc = settings.locale

    node_ids = net.node_ids
    if not node_ids:
        return _failure(ErrorCategory.NO_NODES, settings, freq_hz)
    if not net.has_ground:
        return _failure(ErrorCategory.MISSING_GROUND_NET, settings, freq_hz)

    vsrcs = [e for e in net.elements if e.element_type == "V"]
    system = _System(node_ids, [e.element_id for e in vsrcs])
    steps: list[SolveStep] = []
    none = message("none", loc)

    steps.append(
        SolveStep(
            kind="intro",
            title=message("step_intro", loc),
            lines=(
                f"{GROUND_ID} = 0 V",
                "V: " + (", ".join(f"V({nid})" for nid in node_ids) or none),
                "I: " + (", ".join(f"I({vid})" for vid in system.vsrc_ids) or none),
            ),
        )
    )

    # Element models
    w = angular_frequency(freq_hz)
    element_lines = [f"f = {format_number(freq_hz, settings.display_digits)} Hz", f"ω = 2πf = {w:.6f}"]
    # Indexed by element position; ids are labels only and may repeat
    impedances: list[Optional[complex]] = []
    source_values: list[Optional[complex]] = []
    for e in net.elements:
        z = None
        value = None
        if e.element_type in ("R", "C", "L"):
            z = element_impedance(e.element_type, e.value, freq_hz, settings)
            element_lines.append(
                f"{e.name} ({e.element_type}): Z = {_fmt(z, settings)} Ω, "
                f"Y = 1/Z = {_fmt(element_admittance(z), settings)} S"
            )
        elif e.element_type == "V":
            value = parse_value(e.value)
            element_lines.append(f"{e.name} (V): Va - Vb = {_fmt(value, settings)} V")
        elif e.element_type == "I":
            value = parse_value(e.value)
            element_lines.append(f"{e.name} (I): I(a→b) = {_fmt(value, settings)} A")
        else:
            element_lines.append(f"{e.name} ({e.element_type})")
        impedances.append(z)
        source_values.append(value)
    steps.append(SolveStep(kind="elements", title=message("step_elements", loc), lines=tuple(element_lines)))

    # Stamping
    vsrc_rows: dict[int, int] = {}
    kvl_lines = []
    for idx, e in enumerate(net.elements):
        if impedances[idx] is not None:
            system.stamp_admittance(e.a, e.b, element_admittance(impedances[idx]))
        elif e.element_type == "I":
            system.stamp_current_source(e.a, e.b, source_values[idx])
        elif e.element_type == "V":
            k = len(vsrc_rows)
            vsrc_rows[idx] = k
            v = source_values[idx]
            system.stamp_voltage_source(k, e.a, e.b, v)
            kvl_lines.append(f"KVL({e.element_id}): 1·V({e.a}) + (-1)·V({e.b}) = {_fmt(v, settings)}  (Va−Vb=V)")

    steps.append(
        SolveStep(
            kind="kcl",
            title=message("step_kcl", loc),
            lines=tuple(_kcl_lines(system, settings)) or (none,),
            note=message("step_kcl_note", loc),
        )
    )
    steps.append(
        SolveStep(
            kind="kvl",
            title=message("step_kvl", loc),
            lines=tuple(kvl_lines) or (none,),
            note=message("step_kvl_note", loc),
        )
    )
    steps.append(
        SolveStep(
            kind="matrix",
            title=message("step_matrix", loc),
            lines=(
                f"x = [{', '.join(system.unknown_order)}]^T",
                f"A: {system.dim}×{system.dim}",
            ),
        )
    )
    logger.debug("Assembled MNA system: %d nodes, %d voltage sources", system.n, len(vsrcs))

    solution = solve_linear(system.A, system.z, settings.pivot_epsilon)
    if not solution.success:
        category = ErrorCategory.SINGULAR_MATRIX if solution.error_code == SINGULAR else ErrorCategory.NON_FINITE
        logger.info("Solve failed at %s Hz: %s", freq_hz, category.value)
        return _failure(category, settings, freq_hz, steps)

    x = solution.x
    node_voltages = {nid: complex(x[i]) for i, nid in enumerate(node_ids)}
    node_voltages[GROUND_ID] = ZERO
    branch_currents = [complex(x[system.n + k]) for k in range(len(system.vsrc_ids))]
    vsource_currents = dict(zip(system.vsrc_ids, branch_currents))

    element_voltages: dict[str, complex] = {}
    element_currents: dict[str, complex] = {}
    element_powers: dict[str, complex] = {}
    for idx, e in enumerate(net.elements):
        if e.element_type == "GND":
            element_voltages[e.element_id] = ZERO
            element_currents[e.element_id] = ZERO
            element_powers[e.element_id] = ZERO
            continue

        vab = _node_voltage(node_voltages, e.a) - _node_voltage(node_voltages, e.b)
        if e.element_type == "V":
            current = branch_currents[vsrc_rows[idx]]
        elif e.element_type == "I":
            current = source_values[idx]
        else:
            current = divide(vab, impedances[idx])
        element_voltages[e.element_id] = vab
        element_currents[e.element_id] = current
        element_powers[e.element_id] = vab * current.conjugate()

    solve_lines = [f"V({nid}) = {_fmt(node_voltages[nid], settings)}" for nid in node_ids]
    solve_lines += [f"I({vid}) = {_fmt(i, settings)}" for vid, i in zip(system.vsrc_ids, branch_currents)]
    steps.append(
        SolveStep(
            kind="solve",
            title=message("step_solve", loc),
            lines=tuple(solve_lines),
            note=message("step_solve_note", loc),
        )
    )

    debug = DebugDump(
        node_order=tuple(node_ids),
        vsrc_order=tuple(system.vsrc_ids),
        unknown_order=tuple(system.unknown_order),
        A=tuple(tuple(_fmt(v, settings) for v in row) for row in system.A),
        z=tuple(_fmt(v, settings) for v in system.z),
        x=tuple(_fmt(v, settings) for v in x),
    )

    return SolveResult(
        success=True,
        freq_hz=freq_hz,
        node_voltages=node_voltages,
        element_voltages=element_voltages,
        element_currents=element_currents,
        element_powers=element_powers,
        vsource_currents=vsource_currents,
        steps=tuple(steps),
        debug=debug,
    )


def _node_voltage(node_voltages: dict[str, complex], node_id: Optional[str]) -> complex:
    if not node_id or node_id == GROUND_ID:
        return ZERO
    return node_voltages.get(node_id, ZERO)


def phasor_summary(value: complex, digits: int = 6) -> str:
    """'|v| ∠ phase°' rendering used by text reports."""
    if not cmath.isfinite(value):
        return format_complex(value, digits)
    return f"{format_number(abs(value), digits)} ∠ {format_number(math.degrees(cmath.phase(value)), 3)}°"
