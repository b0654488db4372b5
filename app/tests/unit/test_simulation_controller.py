"""
Tests for SimulationController.

The controller runs validate -> build net -> solve without any UI.
"""

import pytest
from controllers.simulation_controller import SimulationController, SimulationResult
from models.circuit import CircuitDocument
from models.node import GROUND_ID
from simulation.messages import message
from simulation.mna_solver import SolveResult
from simulation.port_analyzer import PortReport
from simulation.settings import SolverSettings
from tests.conftest import make_document, make_element, make_ground


class TestInit:
    def test_defaults(self):
        ctrl = SimulationController()
        assert isinstance(ctrl.doc, CircuitDocument)
        assert ctrl.net is None
        assert ctrl.last_result is None

    def test_with_document(self, divider_doc):
        ctrl = SimulationController(divider_doc)
        assert ctrl.doc is divider_doc


class TestValidate:
    def test_valid(self, divider_doc):
        result = SimulationController(divider_doc).validate()
        assert result.success
        assert result.error == ""

    def test_empty(self):
        result = SimulationController().validate()
        assert not result.success
        assert result.errors == [message("no_elements")]
        assert result.error == message("no_elements")


class TestBuildNet:
    def test_builds(self, divider_doc):
        ctrl = SimulationController(divider_doc)
        result = ctrl.build_net()
        assert result.success
        assert result.data is ctrl.net
        assert ctrl.net.node_ids == ["n1", "n2"]
        assert "n1" in ctrl.node_points

    def test_failure_is_friendly(self):
        doc = make_document([make_ground("GND1", (0, 0))])
        ctrl = SimulationController(doc)
        result = ctrl.build_net()
        assert not result.success
        assert result.errors == [message("only_ground")]
        assert result.error.startswith(message("only_ground"))
        assert "Suggestions:" in result.error
        assert ctrl.net is None


class TestSolve:
    def test_divider(self, divider_doc):
        ctrl = SimulationController(divider_doc)
        result = ctrl.solve()
        assert result.success
        assert isinstance(result.data, SolveResult)
        assert result.data.node_voltages["n2"] == pytest.approx(2.5)
        assert len(result.steps) == 6
        assert ctrl.last_result is result

    def test_frequency_override(self, rc_doc):
        result = SimulationController(rc_doc).solve(freq_hz=2000.0)
        assert result.data.freq_hz == 2000.0

    def test_uses_document_frequency(self, rc_doc):
        result = SimulationController(rc_doc).solve()
        assert result.data.freq_hz == 1000.0

    def test_validation_blocks_solve(self):
        doc = make_document([make_element("R1", "R", (0, 0), (160, 0), "1k")])
        ctrl = SimulationController(doc)
        result = ctrl.solve()
        assert not result.success
        assert result.data is None
        assert ctrl.net is None

    def test_warnings_carried(self, divider_doc):
        divider_doc.add_element(make_element("R3", "R", (600, 0), (760, 0), "1k"))
        result = SimulationController(divider_doc).solve()
        assert "R3 (R) has no connections." in result.warnings

    def test_singular(self, floating_doc):
        result = SimulationController(floating_doc).solve()
        assert not result.success
        assert isinstance(result.data, SolveResult)
        assert result.errors == [message("singular_matrix")]
        assert "Common causes:" in result.error
        assert [s.kind for s in result.steps][-1] == "matrix"

    def test_locale(self, floating_doc):
        ctrl = SimulationController(floating_doc, SolverSettings(locale="zh-TW"))
        result = ctrl.solve()
        assert result.errors == [message("singular_matrix", "zh-TW")]


class TestAnalyzePort:
    def test_builds_net_on_demand(self, divider_doc):
        ctrl = SimulationController(divider_doc)
        result = ctrl.analyze_port("n2", GROUND_ID)
        assert result.success
        assert isinstance(result.data, PortReport)
        assert result.data.zth == pytest.approx(500.0)

    def test_with_load(self, divider_doc):
        ctrl = SimulationController(divider_doc)
        ctrl.solve()
        result = ctrl.analyze_port("n2", GROUND_ID, load_element_id="R2")
        assert result.data.vth == pytest.approx(5.0)

    def test_sees_document_edits_after_solve(self, divider_doc):
        ctrl = SimulationController(divider_doc)
        ctrl.solve()
        divider_doc.get_element("R1").value = "3k"
        result = ctrl.analyze_port("n2", GROUND_ID)
        assert result.data.vth == pytest.approx(1.25)
        assert result.data.zth == pytest.approx(750.0)

    def test_failure(self, divider_doc):
        result = SimulationController(divider_doc).analyze_port("n2", "n7")
        assert not result.success
        assert result.errors == [result.data.error]

    def test_unbuildable_document(self):
        result = SimulationController().analyze_port("n1", GROUND_ID)
        assert isinstance(result, SimulationResult)
        assert not result.success
        assert result.data is None
