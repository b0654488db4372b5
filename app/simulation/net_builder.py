"""
simulation/net_builder.py

Turns a drawn CircuitDocument into a CircuitNet.

Terminal, junction and wire points are clustered into nodes; the ground
class is named "gnd" and every other class gets a sequential id (n1, n2,
...) in discovery order. Elements are then rewritten onto node ids.
Failures are returned, not raised, since an empty or half-drawn document
is a normal editor state.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from models.circuit import CircuitDocument
from models.element import ElementData, GroundData, Point
from models.node import GROUND_ID, CircuitNet, NetElement, NetNode, node_label

from .clustering import GROUND_TERMINAL, TERMINAL_A, TERMINAL_B, cluster_points, collect_points
from .diagnostics import ErrorCategory
from .messages import message
from .settings import DEFAULT_SETTINGS, SolverSettings

logger = logging.getLogger(__name__)


@dataclass
class NetBuildResult:
    """Outcome of building a net from a document."""

    success: bool
    net: Optional[CircuitNet] = None
    node_points: dict[str, Point] = field(default_factory=dict)
    error: Optional[str] = None
    category: Optional[ErrorCategory] = None


def _failure(category: ErrorCategory, settings: SolverSettings) -> NetBuildResult:
    return NetBuildResult(
        success=False,
        error=message(category.value, settings.locale),
        category=category,
    )


def build_net(doc: CircuitDocument, settings: Optional[SolverSettings] = None) -> NetBuildResult:
    """
    Build the electrical net for a document.

    Args:
        doc: The drawn circuit.
        settings: Clustering constants and message locale.

    Returns:
        NetBuildResult holding the net and a node id -> centroid map on
        success, or a localized error on failure.
    """
    settings = settings or DEFAULT_SETTINGS

    if not doc.elements:
        return _failure(ErrorCategory.NO_ELEMENTS, settings)
    if not doc.has_ground():
        return _failure(ErrorCategory.NO_GROUND, settings)

    refs = collect_points(doc)
    clusters = cluster_points(refs, doc.grid, settings)

    root_to_id: dict[int, str] = {}
    node_points: dict[str, Point] = {}
    nodes: list[NetNode] = []
    counter = 0
    for root in clusters.groups:
        if clusters.is_ground(root):
            root_to_id[root] = GROUND_ID
            node_points.setdefault(GROUND_ID, clusters.centroids[root])
            continue
        counter += 1
        node_id = node_label(counter)
        root_to_id[root] = node_id
        node_points[node_id] = clusters.centroids[root]
        nodes.append(NetNode(node_id, clusters.centroids[root]))

    if not nodes:
        return _failure(ErrorCategory.ONLY_GROUND, settings)

    # Terminal ref index per (element id, role); collect_points emits terminals first
    terminal_index: dict[tuple[str, str], int] = {}
    for i, ref in enumerate(refs):
        terminal_index.setdefault((ref.owner_id, ref.role), i)

    def resolve(owner_id: str, role: str) -> str:
        index = terminal_index.get((owner_id, role))
        if index is None:
            logger.warning("Terminal %s of %s was not clustered; using gnd", role, owner_id)
            return GROUND_ID
        return root_to_id.get(clusters.root_of(index), GROUND_ID)

    elements: list[NetElement] = []
    for element in doc.elements:
        if isinstance(element, GroundData):
            elements.append(
                NetElement(
                    element_id=element.element_id,
                    element_type="GND",
                    name=element.name,
                    a=resolve(element.element_id, GROUND_TERMINAL),
                )
            )
        elif isinstance(element, ElementData):
            elements.append(
                NetElement(
                    element_id=element.element_id,
                    element_type=element.element_type,
                    name=element.name,
                    a=resolve(element.element_id, TERMINAL_A),
                    b=resolve(element.element_id, TERMINAL_B),
                    value=element.value,
                )
            )

    net = CircuitNet(nodes=tuple(nodes), elements=tuple(elements), has_ground=True)
    logger.debug("Built net: %d nodes, %d elements", len(nodes), len(elements))
    return NetBuildResult(success=True, net=net, node_points=node_points)
