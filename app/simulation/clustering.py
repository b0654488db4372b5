"""
simulation/clustering.py

Decides which drawn points are electrically the same node.

Every element terminal, junction and wire point is collected, then points
within a grid-relative tolerance of each other are merged with a
union-find. A uniform cell hash limits each comparison to the 3x3
neighbourhood of cells around a point, so merging stays near-linear.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from models.circuit import CircuitDocument
from models.element import ElementData, GroundData, Point

from .settings import DEFAULT_SETTINGS, SolverSettings
from .union_find import UnionFind

logger = logging.getLogger(__name__)

# Point roles
TERMINAL_A = "terminal-a"
TERMINAL_B = "terminal-b"
GROUND_TERMINAL = "ground-terminal"
JUNCTION = "junction"
WIRE_POINT = "wire-point"

TERMINAL_ROLES = {TERMINAL_A, TERMINAL_B, GROUND_TERMINAL}


@dataclass(frozen=True)
class PointRef:
    """A drawn point tagged with its owning entity and role."""

    point: Point
    role: str
    owner_id: str


def clustering_tolerance(grid: float, settings: SolverSettings = DEFAULT_SETTINGS) -> float:
    """Merge distance: a fixed floor plus a grid-relative part."""
    return max(settings.tolerance_floor, math.floor(grid * settings.tolerance_grid_ratio))


def cell_size(grid: float, settings: SolverSettings = DEFAULT_SETTINGS) -> float:
    return max(settings.min_cell_size, grid)


def collect_points(doc: CircuitDocument) -> list[PointRef]:
    """Element terminals first, then junctions, then every wire point."""
    refs: list[PointRef] = []

    for element in doc.elements:
        if isinstance(element, GroundData):
            refs.append(PointRef(element.p, GROUND_TERMINAL, element.element_id))
        elif isinstance(element, ElementData):
            refs.append(PointRef(element.a, TERMINAL_A, element.element_id))
            refs.append(PointRef(element.b, TERMINAL_B, element.element_id))

    for junction in doc.junctions:
        refs.append(PointRef(junction.p, JUNCTION, junction.junction_id))

    for wire in doc.wires:
        for p in wire.points:
            refs.append(PointRef(p, WIRE_POINT, wire.wire_id))

    return refs


@dataclass
class ClusterResult:
    """Equivalence classes of drawn points."""

    refs: list[PointRef]
    uf: UnionFind
    groups: dict[int, list[int]] = field(default_factory=dict)
    centroids: dict[int, Point] = field(default_factory=dict)
    ground_roots: set[int] = field(default_factory=set)

    def root_of(self, index: int) -> int:
        return self.uf.find(index)

    def is_ground(self, root: int) -> bool:
        return root in self.ground_roots

    def members(self, root: int) -> list[PointRef]:
        return [self.refs[i] for i in self.groups.get(root, [])]


def _cell_of(p: Point, cell: float) -> tuple[int, int]:
    return math.floor(p.x / cell), math.floor(p.y / cell)


def cluster_points(
    refs: list[PointRef],
    grid: float,
    settings: SolverSettings = DEFAULT_SETTINGS,
    tolerance: Optional[float] = None,
) -> ClusterResult:
    """
    Union coincident points and return the resulting classes.

    Args:
        refs: Tagged points, usually from collect_points().
        grid: Document grid spacing.
        settings: Tolerance constants.
        tolerance: Explicit merge distance, overriding the grid formula.

    Returns:
        ClusterResult with groups keyed by root in first-member order, the
        centroid of each group, and the set of roots holding a ground terminal.
    """
    tol = clustering_tolerance(grid, settings) if tolerance is None else tolerance
    tol2 = tol * tol
    # The 3x3 scan only sees neighbours within one cell
    cell = max(cell_size(grid, settings), tol)

    uf = UnionFind(len(refs))

    buckets: dict[tuple[int, int], list[int]] = {}
    for i, ref in enumerate(refs):
        buckets.setdefault(_cell_of(ref.point, cell), []).append(i)

    for i, ref in enumerate(refs):
        cx, cy = _cell_of(ref.point, cell)
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for j in buckets.get((cx + dx, cy + dy), ()):
                    if j <= i:
                        continue
                    if ref.point.distance2(refs[j].point) <= tol2:
                        uf.union(i, j)

    # Every point of a wire is the same conductor
    first_point_of_wire: dict[str, int] = {}
    for i, ref in enumerate(refs):
        if ref.role != WIRE_POINT:
            continue
        first = first_point_of_wire.setdefault(ref.owner_id, i)
        if first != i:
            uf.union(first, i)

    groups = uf.groups()
    centroids: dict[int, Point] = {}
    ground_roots: set[int] = set()
    for root, members in groups.items():
        sx = sum(refs[i].point.x for i in members)
        sy = sum(refs[i].point.y for i in members)
        centroids[root] = Point(sx / len(members), sy / len(members))
        if any(refs[i].role == GROUND_TERMINAL for i in members):
            ground_roots.add(root)

    logger.debug(
        "Clustered %d points into %d groups (tolerance=%s, cell=%s)",
        len(refs),
        len(groups),
        tol,
        cell,
    )
    return ClusterResult(refs=refs, uf=uf, groups=groups, centroids=centroids, ground_roots=ground_roots)
