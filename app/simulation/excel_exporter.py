"""
simulation/excel_exporter.py

Export solve results and port reports to Excel (.xlsx) format.
No file dialogs here: the caller decides where the workbook goes.
"""

from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from .csv_exporter import ELEMENT_HEADERS, NODE_HEADERS, analysis_label, element_rows, node_rows, port_rows


def _add_metadata_sheet(wb, analysis_type, circuit_name="", freq_hz=None):
    """Add a Summary sheet with circuit metadata."""
    ws = wb.active
    ws.title = "Summary"
    header_font = Font(bold=True)
    ws.append(["Circuit Report Summary"])
    ws["A1"].font = Font(bold=True, size=14)
    ws.append([])
    ws.append(["Analysis Type", analysis_type])
    ws.append(["Date", datetime.now().strftime("%Y-%m-%d %H:%M:%S")])
    if circuit_name:
        ws.append(["Circuit", circuit_name])
    if freq_hz is not None:
        ws.append(["Frequency (Hz)", freq_hz])
    for row in ws.iter_rows(min_row=3, max_col=1):
        row[0].font = header_font
    ws.column_dimensions["A"].width = 18
    ws.column_dimensions["B"].width = 30
    return ws


def _style_header_row(ws, row_num=1):
    """Apply header styling to a row of a worksheet."""
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    for cell in ws[row_num]:
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")


def _fill_sheet(ws, headers, rows, width=15):
    ws.append(headers)
    _style_header_row(ws)
    for row in rows:
        ws.append(row)
    for j in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(j)].width = width


def export_solve_to_excel(result, filepath, net=None, circuit_name=""):
    """Export a successful solve to an Excel workbook.

    Sheets: Summary, Node Voltages, Elements, and Derivation with the
    solve trace.

    Args:
        result: SolveResult from solve_mna()
        filepath: path to write the .xlsx file
        net: optional CircuitNet for element names and types
        circuit_name: optional circuit filename for metadata
    """
    wb = Workbook()
    _add_metadata_sheet(wb, analysis_label(result.freq_hz), circuit_name, result.freq_hz)

    _fill_sheet(wb.create_sheet("Node Voltages"), NODE_HEADERS, node_rows(result))
    _fill_sheet(wb.create_sheet("Elements"), ELEMENT_HEADERS, element_rows(result, net))

    ws = wb.create_sheet("Derivation")
    for step in result.steps:
        ws.append([step.title])
        ws.cell(row=ws.max_row, column=1).font = Font(bold=True)
        if step.note:
            ws.append([step.note])
        for line in step.lines:
            ws.append([line])
        ws.append([])
    ws.column_dimensions["A"].width = 90

    wb.save(filepath)


def export_port_to_excel(report, filepath, freq_hz=0.0, circuit_name=""):
    """Export a successful port analysis to an Excel workbook.

    Args:
        report: PortReport from analyze_port()
        filepath: path to write the .xlsx file
        freq_hz: working frequency for metadata
        circuit_name: optional circuit filename for metadata
    """
    wb = Workbook()
    summary = _add_metadata_sheet(wb, "Port Equivalent", circuit_name, freq_hz)
    summary.append(["Port", f"A={report.node_a}, B={report.node_b}"])
    if report.load_element_id:
        summary.append(["Load removed", report.load_element_id])

    _fill_sheet(wb.create_sheet("Port"), ["Quantity", "Real", "Imag", "Magnitude"], port_rows(report), width=24)

    ws = wb.create_sheet("Report")
    for line in report.lines:
        ws.append([line])
    ws.column_dimensions["A"].width = 90

    wb.save(filepath)
