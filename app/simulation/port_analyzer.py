"""
simulation/port_analyzer.py

Thevenin/Norton equivalent of a net seen from two nodes A and B.

Two ordinary MNA solves are combined:
    1. Open circuit (optional load removed): Vth = V(A) - V(B).
    2. Sources off plus a 1 A test source: Zth = V(A) - V(B).
The test source is stamped b -> a (from B to A) so that, under the
solver's a -> b current convention, the unit current enters the port at A
and the measured Vab equals +Zth.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from models.node import CircuitNet, NetElement

from .complex_value import NAN, conjugate, divide, format_complex, format_number, magnitude, to_pair
from .diagnostics import ErrorCategory
from .messages import message
from .mna_solver import solve_mna
from .settings import DEFAULT_SETTINGS, SolverSettings

logger = logging.getLogger(__name__)

TEST_SOURCE_ID = "I_TEST"

STAGE_INPUT = "input"
STAGE_VTH = "vth"
STAGE_ZTH = "zth"


@dataclass
class PortReport:
    """Port equivalent, or the stage at which it could not be computed."""

    success: bool
    node_a: Optional[str] = None
    node_b: Optional[str] = None
    load_element_id: Optional[str] = None
    error: Optional[str] = None
    stage: Optional[str] = None
    vth: complex = NAN
    zth: complex = NAN
    i_norton: complex = NAN
    z_load_opt: complex = NAN
    r_th: float = math.nan
    p_max: Optional[float] = None
    p_max_peak: Optional[float] = None
    va: complex = NAN
    vb: complex = NAN
    va_test: complex = NAN
    vb_test: complex = NAN
    lines: list[str] = field(default_factory=list)

    @property
    def p_max_applicable(self) -> bool:
        return self.p_max is not None

    def to_dict(self) -> dict:
        data = {
            "success": self.success,
            "a": self.node_a,
            "b": self.node_b,
            "load": self.load_element_id,
        }
        if not self.success:
            data.update({"error": self.error, "stage": self.stage})
            return data
        data.update(
            {
                "vth": to_pair(self.vth),
                "zth": to_pair(self.zth),
                "in": to_pair(self.i_norton),
                "zlOpt": to_pair(self.z_load_opt),
                "rth": self.r_th,
                "pmax": self.p_max,
                "pmaxPeak": self.p_max_peak,
                "lines": list(self.lines),
            }
        )
        return data

    def report_text(self) -> str:
        return self.error if not self.success else "\n".join(self.lines)


def make_test_source(node_a: str, node_b: str, net: Optional[CircuitNet] = None) -> NetElement:
    """
    Unit current source entering the port at A (stamped from B to A).

    When a net is given, the id is suffixed until no element of it uses it.
    """
    source_id = net.unused_element_id(TEST_SOURCE_ID) if net is not None else TEST_SOURCE_ID
    return NetElement(
        element_id=source_id,
        element_type="I",
        name=source_id,
        a=node_b,
        b=node_a,
        value="1",
    )


def analyze_port(
    net: CircuitNet,
    node_a: Optional[str],
    node_b: Optional[str],
    freq_hz: float,
    load_element_id: Optional[str] = None,
    settings: Optional[SolverSettings] = None,
) -> PortReport:
    """
    Compute Vth, Zth, In, the conjugate-matched load and maximum power.

    Args:
        net: A built net.
        node_a: Positive port node id.
        node_b: Negative port node id.
        freq_hz: Working frequency.
        load_element_id: Element removed before both solves, if given.
        settings: Solver settings, shared by both inner solves.

    Returns:
        PortReport. When an inner solve fails the report carries its
        error verbatim behind a Vth/Zth prefix and the failing stage.
    """
    settings = settings or DEFAULT_SETTINGS
    loc = settings.locale
    digits = settings.display_digits

    def fail(stage: str, text: str) -> PortReport:
        logger.info("Port analysis failed at stage %s: %s", stage, text)
        return PortReport(
            success=False,
            node_a=node_a,
            node_b=node_b,
            load_element_id=load_element_id,
            error=text,
            stage=stage,
        )

    if not node_a or not node_b:
        return fail(STAGE_INPUT, message(ErrorCategory.PORT_NOT_SELECTED.value, loc))
    for node in (node_a, node_b):
        if not net.has_node(node):
            return fail(STAGE_INPUT, message(ErrorCategory.UNKNOWN_PORT_NODE.value, loc, node=node))
    if load_element_id and net.get_element(load_element_id) is None:
        return fail(STAGE_INPUT, message(ErrorCategory.UNKNOWN_LOAD.value, loc, element=load_element_id))

    base = net.without_element(load_element_id)

    open_circuit = solve_mna(base, freq_hz, settings)
    if not open_circuit.success:
        return fail(STAGE_VTH, message("vth_failed", loc, error=open_circuit.error or ""))
    va = open_circuit.voltage(node_a)
    vb = open_circuit.voltage(node_b)
    vth = va - vb

    zeroed = base.with_sources_zeroed()
    test_net = zeroed.with_element(make_test_source(node_a, node_b, zeroed))
    tested = solve_mna(test_net, freq_hz, settings)
    if not tested.success:
        return fail(STAGE_ZTH, message("zth_failed", loc, error=tested.error or ""))
    va_test = tested.voltage(node_a)
    vb_test = tested.voltage(node_b)
    # Unit test current, so Vab is numerically Zth
    zth = va_test - vb_test

    i_norton = divide(vth, zth)
    z_load_opt = conjugate(zth)
    r_th = zth.real
    p_max = None
    p_max_peak = None
    if r_th > 0:
        p_max = magnitude(vth) ** 2 / (4 * r_th)
        p_max_peak = p_max / 2

    def fc(value: complex) -> str:
        return format_complex(value, digits)

    lines = [message("port_step_definition", loc), f"A={node_a}, B={node_b}"]
    if load_element_id:
        lines.append(message("port_load_removed", loc, element=load_element_id))
    lines += [
        "",
        message("port_step_vth", loc),
        f"Va = {fc(va)} V",
        f"Vb = {fc(vb)} V",
        f"Vth = Va − Vb = {fc(vth)} V",
        "",
        message("port_step_zth", loc),
        message("port_sources_off", loc),
        message("port_test_source", loc),
        f"Va_test = {fc(va_test)} V",
        f"Vb_test = {fc(vb_test)} V",
        f"Vab_test = Va_test − Vb_test = {fc(zth)} V",
        f"Zth = Vab_test / 1A = {fc(zth)} Ω",
        "",
        message("port_step_norton", loc),
        f"In = Vth / Zth = {fc(vth)} / {fc(zth)} = {fc(i_norton)} A",
        "",
        message("port_step_pmax", loc),
        f"ZL_opt = conj(Zth) = {fc(z_load_opt)} Ω",
        f"Re(Zth) = {format_number(r_th, digits)}",
        "Pmax(RMS) = |Vth|^2 / (4·Re(Zth))",
    ]
    if p_max is not None:
        lines += [
            f"|Vth| = {format_number(magnitude(vth), digits)}",
            f"Pmax(RMS) = {format_number(p_max, digits)} W",
            f"Pmax(Peak-convention) = Pmax/2 = {format_number(p_max_peak, digits)} W",
        ]
    else:
        lines.append(message("pmax_not_applicable", loc))

    logger.debug("Port %s/%s: Vth=%s Zth=%s", node_a, node_b, vth, zth)
    return PortReport(
        success=True,
        node_a=node_a,
        node_b=node_b,
        load_element_id=load_element_id,
        vth=vth,
        zth=zth,
        i_norton=i_norton,
        z_load_opt=z_load_opt,
        r_th=r_th,
        p_max=p_max,
        p_max_peak=p_max_peak,
        va=va,
        vb=vb,
        va_test=va_test,
        vb_test=vb_test,
        lines=lines,
    )
