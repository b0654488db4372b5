"""
simulation/csv_exporter.py

Export solve results and port reports to CSV format.
No file dialogs here: the caller decides where the text goes.
"""

import csv
import io
from datetime import datetime

from .complex_value import magnitude, phase_degrees

NODE_HEADERS = ["Node", "Re(V) (V)", "Im(V) (V)", "|V| (V)", "phase(V) (deg)"]
ELEMENT_HEADERS = [
    "Element",
    "Type",
    "Re(V) (V)",
    "Im(V) (V)",
    "Re(I) (A)",
    "Im(I) (A)",
    "P (W)",
    "Q (var)",
    "|V| (V)",
    "|I| (A)",
]


def _write_preamble(writer, analysis_type, circuit_name="", freq_hz=None):
    writer.writerow(["# Analysis Type", analysis_type])
    writer.writerow(["# Date", datetime.now().strftime("%Y-%m-%d %H:%M:%S")])
    if circuit_name:
        writer.writerow(["# Circuit", circuit_name])
    if freq_hz is not None:
        writer.writerow(["# Frequency (Hz)", freq_hz])
    writer.writerow([])


def analysis_label(freq_hz):
    return "DC Operating Point" if freq_hz <= 0 else "AC Phasor"


def node_rows(result):
    """One row per node voltage, ground included."""
    rows = []
    for node, v in result.node_voltages.items():
        rows.append([node, v.real, v.imag, magnitude(v), phase_degrees(v)])
    return rows


def element_rows(result, net=None):
    """One row per element with V, I and complex power split into P and Q."""
    rows = []
    for element_id, v in result.element_voltages.items():
        element = net.get_element(element_id) if net is not None else None
        name = element.name if element is not None else element_id
        element_type = element.element_type if element is not None else ""
        i = result.element_currents.get(element_id, complex(0.0, 0.0))
        s = result.element_powers.get(element_id, complex(0.0, 0.0))
        rows.append([name, element_type, v.real, v.imag, i.real, i.imag, s.real, s.imag, magnitude(v), magnitude(i)])
    return rows


def export_solve_results(result, net=None, circuit_name=""):
    """
    Export a successful solve to a CSV string.

    Args:
        result: SolveResult from solve_mna()
        net: optional CircuitNet, used for element names and types
        circuit_name: optional circuit filename

    Returns:
        str: CSV content
    """
    output = io.StringIO()
    writer = csv.writer(output)

    _write_preamble(writer, analysis_label(result.freq_hz), circuit_name, result.freq_hz)

    writer.writerow(NODE_HEADERS)
    for row in node_rows(result):
        writer.writerow(row)
    writer.writerow([])

    writer.writerow(ELEMENT_HEADERS)
    for row in element_rows(result, net):
        writer.writerow(row)

    return output.getvalue()


def port_rows(report):
    """Quantity, real part, imaginary part, magnitude for a port report."""
    rows = []
    for label, value in (
        ("Vth (V)", report.vth),
        ("Zth (ohm)", report.zth),
        ("In (A)", report.i_norton),
        ("ZL_opt (ohm)", report.z_load_opt),
    ):
        rows.append([label, value.real, value.imag, magnitude(value)])
    rows.append(["Re(Zth) (ohm)", report.r_th, "", ""])
    rows.append(["Pmax RMS (W)", "" if report.p_max is None else report.p_max, "", ""])
    rows.append(["Pmax peak-convention (W)", "" if report.p_max_peak is None else report.p_max_peak, "", ""])
    return rows


def export_port_report(report, freq_hz=0.0, circuit_name=""):
    """
    Export a successful port analysis to a CSV string.

    Args:
        report: PortReport from analyze_port()
        freq_hz: working frequency, for the preamble
        circuit_name: optional circuit filename

    Returns:
        str: CSV content
    """
    output = io.StringIO()
    writer = csv.writer(output)

    _write_preamble(writer, "Port Equivalent", circuit_name, freq_hz)
    writer.writerow(["# Port", f"A={report.node_a}", f"B={report.node_b}"])
    if report.load_element_id:
        writer.writerow(["# Load removed", report.load_element_id])
    writer.writerow([])

    writer.writerow(["Quantity", "Real", "Imag", "Magnitude"])
    for row in port_rows(report):
        writer.writerow(row)

    return output.getvalue()


def write_csv(csv_content, filepath):
    """
    Write CSV content string to a file.

    Args:
        csv_content: str from one of the export_* functions
        filepath: path to write to
    """
    with open(filepath, "w", newline="") as f:
        f.write(csv_content)
