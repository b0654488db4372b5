"""
SimulationController - Orchestrates the solve pipeline.

This module contains no UI dependencies. It coordinates document
validation, net building, the MNA solve and port analysis, and turns
their result values into SimulationResult objects for the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from models.circuit import CircuitDocument
from models.node import CircuitNet
from simulation.circuit_validator import validate_document
from simulation.diagnostics import diagnose, format_user_message
from simulation.mna_solver import SolveStep, solve_mna
from simulation.net_builder import build_net
from simulation.port_analyzer import analyze_port
from simulation.settings import DEFAULT_SETTINGS, SolverSettings

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Result of one controller operation."""

    success: bool
    data: Any = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: str = ""
    steps: tuple[SolveStep, ...] = ()


class SimulationController:
    """
    Controller for the solve pipeline.

    Coordinates: validate -> build net -> solve (-> port analysis)
    """

    def __init__(self, doc: Optional[CircuitDocument] = None, settings: Optional[SolverSettings] = None):
        self.doc = doc or CircuitDocument()
        self.settings = settings or DEFAULT_SETTINGS
        self.net: Optional[CircuitNet] = None
        self.node_points: dict = {}
        self.last_result: Optional[SimulationResult] = None

    def _friendly(self, category, fallback: str) -> str:
        if category is None:
            return fallback
        return format_user_message(diagnose(category, self.settings.locale))

    def validate(self) -> SimulationResult:
        """
        Validate the document before solving.

        Returns a SimulationResult with success=False and errors if invalid.
        """
        is_valid, errors, warnings = validate_document(self.doc, self.settings)
        return SimulationResult(
            success=is_valid,
            errors=errors,
            warnings=warnings,
            error="; ".join(errors) if errors else "",
        )

    def build_net(self) -> SimulationResult:
        """Cluster the document into a net. data is the CircuitNet."""
        built = build_net(self.doc, self.settings)
        if not built.success:
            logger.info("Net build failed: %s", built.error)
            self.net = None
            self.node_points = {}
            return SimulationResult(
                success=False,
                errors=[built.error],
                error=self._friendly(built.category, built.error),
            )

        self.net = built.net
        self.node_points = built.node_points
        return SimulationResult(success=True, data=built.net)

    def solve(self, freq_hz: Optional[float] = None) -> SimulationResult:
        """
        Run the full pipeline at the document frequency or an override.

        Steps: validate -> build net -> solve
        """
        # 1. Validate
        validation = self.validate()
        if not validation.success:
            self.last_result = validation
            return validation

        # 2. Build net
        built = self.build_net()
        if not built.success:
            built.warnings = validation.warnings
            self.last_result = built
            return built

        # 3. Solve
        freq = self.doc.freq_hz if freq_hz is None else freq_hz
        logger.info("Solving %d nodes at %s Hz", len(self.net.node_ids), freq)
        solved = solve_mna(self.net, freq, self.settings)
        if not solved.success:
            result = SimulationResult(
                success=False,
                data=solved,
                errors=[solved.error],
                warnings=validation.warnings,
                error=self._friendly(solved.category, solved.error),
                steps=solved.steps,
            )
        else:
            result = SimulationResult(
                success=True,
                data=solved,
                warnings=validation.warnings,
                steps=solved.steps,
            )
        self.last_result = result
        return result

    def analyze_port(
        self,
        node_a: Optional[str],
        node_b: Optional[str],
        load_element_id: Optional[str] = None,
        freq_hz: Optional[float] = None,
    ) -> SimulationResult:
        """
        Thevenin/Norton equivalent between two nodes. data is the PortReport.

        The net is rebuilt from the current document on every call.
        """
        built = self.build_net()
        if not built.success:
            return built

        freq = self.doc.freq_hz if freq_hz is None else freq_hz
        report = analyze_port(self.net, node_a, node_b, freq, load_element_id, self.settings)
        if not report.success:
            return SimulationResult(success=False, data=report, errors=[report.error], error=report.error)
        return SimulationResult(success=True, data=report)
