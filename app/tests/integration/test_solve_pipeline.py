"""
End-to-end tests: document text -> net -> MNA solve -> port equivalent.

These check circuit-theory identities (Thevenin equivalence, superposition,
resonance, power balance) across the whole pipeline rather than single
functions.
"""
import math
from concurrent.futures import ThreadPoolExecutor

import pytest
from controllers.file_controller import export_document_text, import_document_text
from controllers.simulation_controller import SimulationController
from models.node import GROUND_ID
from simulation.csv_exporter import export_solve_results
from simulation.mna_solver import solve_mna
from simulation.net_builder import build_net
from simulation.power_calculator import power_balance
from tests.conftest import make_document, make_element, make_ground, make_wire, voltage_divider_document


def series_rlc_document(r="100", l="10m", c="1u", v="1", freq_hz=0.0):
    """
    V1 -- R1 -- L1 -- C1 -- gnd, all in series.

    Nodes: n1 (V1.a, R1.a), n2 (R1.b, L1.a), n3 (L1.b, C1.a), gnd
    """
    return make_document(
        elements=[
            make_element("V1", "V", (0, 0), (0, 200), v),
            make_element("R1", "R", (100, 0), (260, 0), r),
            make_element("L1", "L", (360, 0), (520, 0), l),
            make_element("C1", "C", (620, 0), (620, 160), c),
            make_ground("GND1", (0, 200)),
        ],
        wires=[
            make_wire("W1", (0, 0), (100, 0)),
            make_wire("W2", (260, 0), (360, 0)),
            make_wire("W3", (520, 0), (620, 0)),
            make_wire("W4", (620, 160), (620, 200), (0, 200)),
        ],
        freq_hz=freq_hz,
    )


def divider_with_current_source(v="5", i="1m"):
    """Voltage divider with I1 in parallel with R2, pushing current into n2."""
    doc = voltage_divider_document(v=v)
    doc.add_element(make_element("I1", "I", (360, 160), (360, 0), i))
    return doc


def _solve(doc):
    result = SimulationController(doc).solve()
    assert result.success, result.error
    return result.data


class TestFromText:
    def test_text_to_solution(self, divider_doc):
        doc = import_document_text(export_document_text(divider_doc))
        solved = _solve(doc)
        assert solved.node_voltages["n2"] == pytest.approx(2.5, abs=1e-9)
        assert "DC Operating Point" in export_solve_results(solved)

    def test_ac_document_exports_phasor_label(self, rc_doc):
        doc = import_document_text(export_document_text(rc_doc))
        assert "AC Phasor" in export_solve_results(_solve(doc))


class TestTheveninEquivalence:
    def test_load_voltage_matches_equivalent(self, divider_doc):
        ctrl = SimulationController(divider_doc)
        full = ctrl.solve().data
        report = ctrl.analyze_port("n2", GROUND_ID, load_element_id="R2").data

        r_load = 1000.0
        v_load = report.vth * r_load / (report.zth + r_load)
        assert v_load == pytest.approx(full.node_voltages["n2"])

    def test_norton_consistent(self):
        doc = divider_with_current_source()
        report = SimulationController(doc).analyze_port("n2", GROUND_ID).data
        assert report.i_norton * report.zth == pytest.approx(report.vth)

    def test_current_source_does_not_change_zth(self, divider_doc):
        plain = SimulationController(divider_doc).analyze_port("n2", GROUND_ID).data
        driven = SimulationController(divider_with_current_source()).analyze_port("n2", GROUND_ID).data
        assert driven.zth == pytest.approx(plain.zth)
        assert driven.vth == pytest.approx(plain.vth + 0.5)

    def test_ac_port(self):
        doc = series_rlc_document(freq_hz=1000.0)
        report = SimulationController(doc).analyze_port("n3", GROUND_ID, load_element_id="C1").data
        w = 2 * math.pi * 1000.0
        # Sources off: looking back into n3 sees R1 + L1 to gnd
        assert report.zth == pytest.approx(complex(100.0, w * 10e-3))
        assert report.vth == pytest.approx(1.0)
        assert report.z_load_opt == pytest.approx(complex(100.0, -w * 10e-3))
        assert report.p_max == pytest.approx(1.0 / 400.0)


class TestSuperposition:
    def test_sum_of_single_source_solutions(self):
        both = _solve(divider_with_current_source("5", "1m"))
        v_only = _solve(divider_with_current_source("5", "0"))
        i_only = _solve(divider_with_current_source("0", "1m"))

        assert v_only.node_voltages["n2"] == pytest.approx(2.5)
        assert i_only.node_voltages["n2"] == pytest.approx(0.5)
        for node in ("n1", "n2"):
            assert both.node_voltages[node] == pytest.approx(
                v_only.node_voltages[node] + i_only.node_voltages[node]
            )

    def test_power_still_balances(self):
        assert power_balance(_solve(divider_with_current_source())).is_balanced()


class TestSeriesResonance:
    def test_current_limited_by_resistance(self):
        f0 = 1.0 / (2 * math.pi * math.sqrt(10e-3 * 1e-6))
        solved = _solve(series_rlc_document(freq_hz=f0))
        assert solved.element_currents["R1"] == pytest.approx(0.01, rel=1e-6)
        assert solved.element_voltages["R1"] == pytest.approx(1.0, rel=1e-6)
        # Reactive voltages cancel but each is Q times the source
        q = math.sqrt(10e-3 / 1e-6) / 100.0
        assert abs(solved.element_voltages["L1"]) == pytest.approx(q, rel=1e-6)
        assert solved.element_voltages["L1"] + solved.element_voltages["C1"] == pytest.approx(0.0, abs=1e-6)

    def test_capacitor_blocks_dc(self):
        doc = series_rlc_document(freq_hz=0.0)
        doc.remove_element("L1")
        doc.add_element(make_element("R2", "R", (360, 0), (520, 0), "100"))
        solved = _solve(doc)
        assert abs(solved.element_currents["R1"]) < 1e-15
        assert solved.node_voltages["n3"] == pytest.approx(1.0)

    def test_reactive_power_cancels_at_resonance(self):
        f0 = 1.0 / (2 * math.pi * math.sqrt(10e-3 * 1e-6))
        solved = _solve(series_rlc_document(freq_hz=f0))
        q_total = solved.element_powers["L1"].imag + solved.element_powers["C1"].imag
        assert q_total == pytest.approx(0.0, abs=1e-9)
        assert power_balance(solved).is_balanced()


class TestFrequencySweep:
    def test_capacitor_impedance_falls_with_frequency(self, rc_doc):
        net = build_net(rc_doc).net
        magnitudes = [abs(solve_mna(net, f).node_voltages["n1"]) for f in (100.0, 1000.0, 10000.0)]
        assert magnitudes == sorted(magnitudes, reverse=True)
        assert magnitudes[0] == pytest.approx(10 * magnitudes[1])

    def test_parallel_solves_are_identical(self, divider_doc):
        net = build_net(divider_doc).net
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: solve_mna(net, 0.0), range(8)))
        assert all(r == results[0] for r in results)
