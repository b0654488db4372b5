"""Tests for Excel (.xlsx) export functionality."""

import pytest
from models.node import GROUND_ID
from openpyxl import load_workbook
from simulation.excel_exporter import export_port_to_excel, export_solve_to_excel
from simulation.mna_solver import solve_mna
from simulation.net_builder import build_net
from simulation.port_analyzer import analyze_port


@pytest.fixture
def divider_solution(divider_doc):
    net = build_net(divider_doc).net
    return net, solve_mna(net, 0)


class TestExportSolveToExcel:
    def test_sheets(self, tmp_path, divider_solution):
        net, result = divider_solution
        path = tmp_path / "solve.xlsx"
        export_solve_to_excel(result, str(path), net, circuit_name="divider.json")
        wb = load_workbook(str(path))
        assert wb.sheetnames == ["Summary", "Node Voltages", "Elements", "Derivation"]

    def test_summary(self, tmp_path, divider_solution):
        net, result = divider_solution
        path = tmp_path / "solve.xlsx"
        export_solve_to_excel(result, str(path), net, circuit_name="divider.json")
        ws = load_workbook(str(path))["Summary"]
        values = {row[0]: row[1] for row in ws.iter_rows(min_row=3, values_only=True) if row[0]}
        assert values["Analysis Type"] == "DC Operating Point"
        assert values["Circuit"] == "divider.json"

    def test_node_voltages(self, tmp_path, divider_solution):
        net, result = divider_solution
        path = tmp_path / "solve.xlsx"
        export_solve_to_excel(result, str(path), net)
        ws = load_workbook(str(path))["Node Voltages"]
        assert ws.cell(row=1, column=1).value == "Node"
        assert ws.cell(row=1, column=1).font.bold
        rows = {row[0]: row for row in ws.iter_rows(min_row=2, values_only=True)}
        assert rows["n2"][1] == pytest.approx(2.5)
        assert GROUND_ID in rows

    def test_elements(self, tmp_path, divider_solution):
        net, result = divider_solution
        path = tmp_path / "solve.xlsx"
        export_solve_to_excel(result, str(path), net)
        ws = load_workbook(str(path))["Elements"]
        rows = {row[0]: row for row in ws.iter_rows(min_row=2, values_only=True)}
        assert rows["R2"][1] == "R"
        assert rows["R2"][6] == pytest.approx(6.25e-3)

    def test_derivation(self, tmp_path, divider_solution):
        net, result = divider_solution
        path = tmp_path / "solve.xlsx"
        export_solve_to_excel(result, str(path), net)
        ws = load_workbook(str(path))["Derivation"]
        lines = [row[0] for row in ws.iter_rows(values_only=True) if row[0]]
        assert lines[0] == result.steps[0].title
        assert "A: 3×3" in lines


class TestExportPortToExcel:
    def test_port_workbook(self, tmp_path, divider_doc):
        report = analyze_port(build_net(divider_doc).net, "n2", GROUND_ID, 0, load_element_id="R2")
        path = tmp_path / "port.xlsx"
        export_port_to_excel(report, str(path))
        wb = load_workbook(str(path))
        assert wb.sheetnames == ["Summary", "Port", "Report"]

        port = wb["Port"]
        assert port.cell(row=1, column=1).value == "Quantity"
        assert port.cell(row=2, column=1).value == "Vth (V)"
        assert port.cell(row=2, column=2).value == pytest.approx(5.0)

        report_lines = [row[0] for row in wb["Report"].iter_rows(values_only=True)]
        assert report_lines[0] == report.lines[0]

    def test_summary_names_port(self, tmp_path, divider_doc):
        report = analyze_port(build_net(divider_doc).net, "n2", GROUND_ID, 0, load_element_id="R2")
        path = tmp_path / "port.xlsx"
        export_port_to_excel(report, str(path))
        ws = load_workbook(str(path))["Summary"]
        values = {row[0]: row[1] for row in ws.iter_rows(min_row=3, values_only=True) if row[0]}
        assert values["Port"] == "A=n2, B=gnd"
        assert values["Load removed"] == "R2"
        assert values["Analysis Type"] == "Port Equivalent"
