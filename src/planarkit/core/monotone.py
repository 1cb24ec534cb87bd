"""Sweep-line decomposition into y-monotone polygons.

The sweep visits vertices from top to bottom (ties: right to left), keeps the
edges currently crossing the sweep line that have the interior on their
right, and records for each of them a "helper" vertex. Split and merge
vertices get connected to helpers with diagonals; the boundary plus the
diagonals is then traced face by face.

The active edges are a plain list kept in left-to-right order. Their order is
only defined relative to the current sweep position, which is valid because
active edges never cross: edges are only inserted and removed at the event
vertices the rules below prescribe.

Every ring is normalized on a working copy (outer counter-clockwise, holes
clockwise, duplicate and collinear points removed) before classification.
An outer ring that meets itself at a vertex is cut there into lobes that are
decomposed one by one.
"""

import logging
import math
from dataclasses import dataclass, field

from planarkit.config import DEFAULT_TOLERANCE, ToleranceConfig
from planarkit.core.polygon import (
    contains_point,
    insert_touching_points,
    is_monotone,
    remove_collinear_points,
    remove_duplicate_points,
)
from planarkit.core.polygon import signed_area as polygon_signed_area
from planarkit.domain import Point, Polygon, Topolygon, VertexType
from planarkit.exceptions import MalformedPolygonError

logger = logging.getLogger(__name__)


def is_convex_turn(p0: Point, p1: Point, p2: Point) -> bool:
    """True if p0 -> p1 -> p2 is strictly counter-clockwise."""
    return (p2.y - p0.y) * (p1.x - p0.x) - (p2.x - p0.x) * (p1.y - p0.y) > 0


def classify_vertex(previous: Point, p: Point, following: Point) -> VertexType:
    """Classify a vertex of a ring whose interior lies to the left of travel.

    Examples:
        >>> classify_vertex(Point(1.0, 0.0), Point(0.5, 1.0), Point(0.0, 0.0))
        <VertexType.START: 1>
    """
    if previous.is_below(p) and following.is_below(p):
        return VertexType.START if is_convex_turn(following, previous, p) else VertexType.SPLIT
    if p.is_below(previous) and p.is_below(following):
        return VertexType.END if is_convex_turn(following, previous, p) else VertexType.MERGE
    return VertexType.REGULAR


@dataclass(frozen=True, slots=True)
class _SweepVertex:
    point: Point
    kind: VertexType
    previous: int
    following: int


@dataclass(frozen=True, slots=True)
class _ActiveEdge:
    index: int
    p0: Point
    p1: Point

    @property
    def is_horizontal(self) -> bool:
        return self.p0.y == self.p1.y


def _is_left_of(lhs: _ActiveEdge, rhs: _ActiveEdge) -> bool:
    """Sweep-relative order of two active edges (or an edge and a query point).

    A query point is a degenerate edge whose endpoints are the event vertex. The
    test is made against whichever edge starts lower, where both are known to
    span the sweep line.
    """
    if rhs.is_horizontal:
        if lhs.is_horizontal:
            return lhs.p0.y < rhs.p0.y
        return is_convex_turn(lhs.p0, lhs.p1, rhs.p0)
    if lhs.is_horizontal:
        return not is_convex_turn(rhs.p0, rhs.p1, lhs.p0)
    if lhs.p0.y < rhs.p0.y:
        return not is_convex_turn(rhs.p0, rhs.p1, lhs.p0)
    return is_convex_turn(lhs.p0, lhs.p1, rhs.p0)


class _ActiveEdges:
    """Active edges ordered left to right along the sweep line."""

    def __init__(self) -> None:
        self._edges: list[_ActiveEdge] = []

    def __len__(self) -> int:
        return len(self._edges)

    def insert(self, edge: _ActiveEdge) -> None:
        position = len(self._edges)
        for i, existing in enumerate(self._edges):
            if _is_left_of(edge, existing):
                position = i
                break
        self._edges.insert(position, edge)

    def remove(self, index: int) -> None:
        for i, existing in enumerate(self._edges):
            if existing.index == index:
                del self._edges[i]
                return
        raise MalformedPolygonError(f"edge {index} is not on the sweep line")

    def left_of(self, p: Point) -> _ActiveEdge | None:
        """Nearest active edge strictly to the left of p."""
        marker = _ActiveEdge(-1, p, p)
        found = None
        for existing in self._edges:
            if _is_left_of(existing, marker):
                found = existing
        return found


@dataclass
class MonotoneDecomposition:
    """Result of decomposing one topolygon.

    Attributes:
        polygons: Y-monotone pieces that passed the post-check
        diagonals: Emitted diagonals as (i, j) vertex indices, i < j
        vertices: Cleaned vertices the diagonal indices refer to
        rejected: Number of traced faces that failed the monotone check, plus
            an outer ring rejected for enclosing no area
    """

    polygons: list[Polygon] = field(default_factory=list)
    diagonals: list[tuple[int, int]] = field(default_factory=list)
    vertices: list[Point] = field(default_factory=list)
    rejected: int = 0


def _prepared_rings(
    topolygon: Topolygon, tolerance: ToleranceConfig
) -> list[tuple[Point, ...]] | None:
    """Cleaned working copies: outer counter-clockwise, holes clockwise.

    None means the outer ring has points left but no area, as when two lobes
    of a self-crossing ring cancel out.
    """
    rings: list[tuple[Point, ...]] = []
    for k, ring in enumerate(topolygon.rings):
        points = remove_collinear_points(remove_duplicate_points(ring.points), tolerance)
        if len(points) < 3:
            if k == 0:
                return []
            continue
        area = polygon_signed_area(Polygon(points))
        if abs(area) < tolerance.epsilon:
            if k == 0:
                logger.warning("Rejecting a %d-point ring with no area", len(points))
                return None
            logger.debug("Dropping hole %d with no area", k)
            continue
        wants_ccw = k == 0
        if (area > 0) != wants_ccw:
            points = tuple(reversed(points))
        rings.append(points)
    return rings


def _pinch(ring: tuple[Point, ...]) -> tuple[int, int] | None:
    """Positions of the first vertex the ring visits twice."""
    seen: dict[Point, int] = {}
    for j, p in enumerate(ring):
        if p in seen:
            return seen[p], j
        seen[p] = j
    return None


def _decompose_pinched(
    outer: tuple[Point, ...],
    pinch: tuple[int, int],
    holes: list[tuple[Point, ...]],
    tolerance: ToleranceConfig,
) -> MonotoneDecomposition:
    """Decompose the two lobes of a ring that meets itself at one vertex.

    Each hole goes to the lobe containing its first point. The lobes are
    joined by a zero-length diagonal between the two copies of the shared
    vertex, so the piece count stays one above the diagonal count.
    """
    i, j = pinch
    shared = outer[i]
    result = MonotoneDecomposition()
    for lobe in (outer[i:j], outer[j:] + outer[:i]):
        ring = Polygon(lobe)
        area = polygon_signed_area(ring)
        if area < -tolerance.epsilon:
            raise MalformedPolygonError("ring turns inside out at a shared vertex", len(outer))
        if area < tolerance.epsilon:
            logger.debug("Dropping a %d-point lobe with no area", len(lobe))
            continue
        lobe_holes = tuple(Polygon(h) for h in holes if contains_point(ring, h[0]))
        part = decompose(Topolygon(ring, lobe_holes), tolerance)

        offset = len(result.vertices)
        if offset and shared in result.vertices and shared in part.vertices:
            result.diagonals.append(
                (result.vertices.index(shared), offset + part.vertices.index(shared))
            )
        result.diagonals.extend((a + offset, b + offset) for a, b in part.diagonals)
        result.vertices.extend(part.vertices)
        result.polygons.extend(part.polygons)
        result.rejected += part.rejected
    return result


def _sweep(vertices: list[_SweepVertex]) -> list[tuple[int, int]]:
    edges = [
        _ActiveEdge(i, v.point, vertices[v.following].point) for i, v in enumerate(vertices)
    ]
    active = _ActiveEdges()
    helpers: dict[int, int] = {}
    diagonals: list[tuple[int, int]] = []

    def add_diagonal(i: int, j: int) -> None:
        diagonals.append((i, j) if i < j else (j, i))

    def helper_of(edge_index: int, at: int) -> int:
        helper = helpers.get(edge_index)
        if helper is None:
            raise MalformedPolygonError(
                f"edge {edge_index} has no helper at vertex {at}", len(vertices)
            )
        return helper

    def left_edge(at: int) -> int:
        edge = active.left_of(vertices[at].point)
        if edge is None:
            raise MalformedPolygonError(
                f"no active edge left of vertex {at}", len(vertices)
            )
        return edge.index

    order = sorted(
        range(len(vertices)),
        key=lambda k: (vertices[k].point.y, vertices[k].point.x),
        reverse=True,
    )
    for i in order:
        v = vertices[i]
        match v.kind:
            case VertexType.START:
                active.insert(edges[i])
                helpers[i] = i
            case VertexType.END:
                h = helper_of(v.previous, i)
                if vertices[h].kind is VertexType.MERGE:
                    add_diagonal(i, h)
                active.remove(v.previous)
            case VertexType.SPLIT:
                j = left_edge(i)
                add_diagonal(i, helper_of(j, i))
                helpers[j] = i
                active.insert(edges[i])
                helpers[i] = i
            case VertexType.MERGE:
                h = helper_of(v.previous, i)
                if vertices[h].kind is VertexType.MERGE:
                    add_diagonal(i, h)
                active.remove(v.previous)
                j = left_edge(i)
                hj = helper_of(j, i)
                if vertices[hj].kind is VertexType.MERGE:
                    add_diagonal(i, hj)
                helpers[j] = i
            case VertexType.REGULAR:
                if v.point.is_below(vertices[v.previous].point):
                    # Interior lies to the right of the vertex
                    h = helper_of(v.previous, i)
                    if vertices[h].kind is VertexType.MERGE:
                        add_diagonal(i, h)
                    active.remove(v.previous)
                    active.insert(edges[i])
                    helpers[i] = i
                else:
                    j = left_edge(i)
                    hj = helper_of(j, i)
                    if vertices[hj].kind is VertexType.MERGE:
                        add_diagonal(i, hj)
                    helpers[j] = i
    return diagonals


def _trace_faces(
    vertices: list[_SweepVertex], diagonals: list[tuple[int, int]]
) -> list[list[int]]:
    """Trace the faces of boundary plus diagonals.

    Each vertex lists its outgoing directions sorted clockwise; after arriving
    along (i, j) the walk continues with the entry following (j, i) in that
    list, the sharpest left turn.
    """
    boundary = [(i, v.following) for i, v in enumerate(vertices)]
    fan: dict[int, list[tuple[float, tuple[int, int]]]] = {}

    def add(i: int, j: int) -> None:
        direction = vertices[j].point - vertices[i].point
        fan.setdefault(i, []).append((math.atan2(direction.y, direction.x), (i, j)))

    for i, j in boundary + diagonals:
        add(i, j)
        add(j, i)
    for entries in fan.values():
        entries.sort(key=lambda entry: entry[0], reverse=True)

    def next_step(step: tuple[int, int]) -> tuple[int, int] | None:
        entries = fan.get(step[1])
        if not entries:
            return None
        back = (step[1], step[0])
        for k, (_, candidate) in enumerate(entries):
            if candidate == back:
                return entries[(k + 1) % len(entries)][1]
        return None

    starts = boundary + diagonals + [(j, i) for i, j in diagonals]
    used: set[tuple[int, int]] = set()
    faces: list[list[int]] = []
    for first in starts:
        if first in used:
            continue
        face: list[int] = []
        step = first
        while True:
            face.append(step[0])
            used.add(step)
            following = next_step(step)
            if following is None or following in used:
                break
            step = following
        faces.append(face)
    return faces


def decompose(
    shape: Topolygon | Polygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> MonotoneDecomposition:
    """Decompose a polygon with optional holes into y-monotone polygons.

    For a polygon without holes the number of pieces is the number of
    diagonals plus one. Each hole's topmost vertex is a split vertex, so a
    hole always adds one diagonal without adding a piece. An outer ring that
    touches itself, like an hourglass pinched at its waist, is cut at the
    touching vertex and its lobes are decomposed separately.

    Args:
        shape: Simple polygon, or outer polygon plus holes
        tolerance: Tolerances; ``epsilon`` drives collinear-point removal

    Returns:
        Pieces, diagonals and the number of rejected faces. An outer ring
        that keeps three or more points after cleaning but encloses no area
        is logged and counted as one rejected face.

    Raises:
        MalformedPolygonError: If the sweep finds an edge without a helper or
            a vertex without an active edge to its left (crossing or
            overlapping rings), or a pinched ring folds a lobe inwards
    """
    topolygon = shape if isinstance(shape, Topolygon) else Topolygon(shape)
    rings = _prepared_rings(topolygon, tolerance)
    if rings is None:
        return MonotoneDecomposition(rejected=1)
    if not rings:
        return MonotoneDecomposition()
    outer = insert_touching_points(rings[0], tolerance)
    pinch = _pinch(outer)
    if pinch is not None:
        return _decompose_pinched(outer, pinch, rings[1:], tolerance)

    vertices: list[_SweepVertex] = []
    offset = 0
    for points in rings:
        n = len(points)
        for k, p in enumerate(points):
            previous = (k - 1) % n
            following = (k + 1) % n
            kind = classify_vertex(points[previous], p, points[following])
            vertices.append(_SweepVertex(p, kind, previous + offset, following + offset))
        offset += n
    points_only = [v.point for v in vertices]

    diagonals = _sweep(vertices)
    if not diagonals:
        if len(rings) > 1:
            raise MalformedPolygonError("holes produced no diagonals", len(vertices))
        return MonotoneDecomposition([Polygon(rings[0])], [], points_only, 0)

    result = MonotoneDecomposition(diagonals=diagonals, vertices=points_only)
    for face in _trace_faces(vertices, diagonals):
        piece = Polygon(tuple(vertices[k].point for k in face))
        if is_monotone(piece):
            result.polygons.append(piece)
        else:
            result.rejected += 1
            logger.warning("Skipping non-monotone face with %d points", len(piece))
    return result


def monotone_polygons(
    shape: Topolygon | Polygon, tolerance: ToleranceConfig = DEFAULT_TOLERANCE
) -> list[Polygon]:
    """The y-monotone pieces of ``decompose``."""
    return decompose(shape, tolerance).polygons
