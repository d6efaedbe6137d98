"""
Connector geometry between task bars.

A connector leaves the predecessor at the anchor its constraint names and
arrives at the successor's anchor with an arrowhead:

- FS: right edge -> left edge, cubic S-curve
- SS: left edge -> left edge, looping left of both bars
- FF: right edge -> right edge, looping right of both bars
- SF: left edge -> right edge, jogging through the gap between the two rows

Routing is a pure function of the two rectangles and the constraint type.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from gantt.config import get_settings
from gantt.models import Task, ConstraintType, DependencyEdge, DependencyMap
from gantt.services.graph import as_dependency_map
from gantt.services.timeline import BarRect, Point, TimelineViewport, bar_rect
from gantt.logging_config import get_logger

logger = get_logger(__name__)

ARROW_MARKER = "arrowhead"


@dataclass(frozen=True)
class PathSegment:
    """
    One drawing command.

    kind is "move" or "line" (one point) or "cubic" (two control points
    followed by the end point).
    """
    kind: str
    points: tuple[Point, ...]


@dataclass
class PathSpec:
    segments: list[PathSegment]
    marker_end: str = ARROW_MARKER

    @property
    def start(self) -> Point:
        return self.segments[0].points[-1]

    @property
    def end(self) -> Point:
        return self.segments[-1].points[-1]

    @property
    def points(self) -> list[Point]:
        """Every point in drawing order, control points included."""
        return [point for segment in self.segments for point in segment.points]

    def to_svg(self) -> str:
        commands = {"move": "M", "line": "L", "cubic": "C"}
        parts = []
        for segment in self.segments:
            coords = " ".join(f"{_fmt(p.x)} {_fmt(p.y)}" for p in segment.points)
            parts.append(f"{commands[segment.kind]} {coords}")
        return " ".join(parts)


@dataclass
class Connector:
    predecessor_id: str
    successor_id: str
    dependency_type: ConstraintType
    path: PathSpec = field(repr=False)


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _polyline(points: Sequence[Point]) -> PathSpec:
    segments = [PathSegment("move", (points[0],))]
    segments.extend(PathSegment("line", (point,)) for point in points[1:])
    return PathSpec(segments)


def connector_path(
    from_rect: BarRect,
    to_rect: BarRect,
    constraint: ConstraintType,
    offset: float | None = None,
    buffer: float | None = None,
) -> PathSpec:
    """
    Route a connector from the predecessor bar to the successor bar.

    Args:
        from_rect: Predecessor bar
        to_rect: Successor bar
        constraint: Constraint type, already resolved
        offset: Horizontal reach of curves and loops (settings default)
        buffer: Extra clearance for the SS/FF loops (settings default)
    """
    settings = get_settings()
    offset = settings.connector_offset if offset is None else offset
    buffer = settings.connector_buffer if buffer is None else buffer

    constraint = ConstraintType(constraint)
    start = from_rect.anchor(constraint.predecessor_anchor)
    end = to_rect.anchor(constraint.successor_anchor)

    if constraint is ConstraintType.FS:
        # Control points pull right out of the predecessor and left into the
        # successor, which bends into an S when the successor sits further left
        return PathSpec([
            PathSegment("move", (start,)),
            PathSegment("cubic", (
                Point(start.x + offset, start.y),
                Point(end.x - offset, end.y),
                end,
            )),
        ])

    if constraint is ConstraintType.SS:
        loop_x = min(from_rect.start_x, to_rect.start_x) - offset - buffer
        return _polyline([
            start,
            Point(loop_x, start.y),
            Point(loop_x, end.y),
            end,
        ])

    if constraint is ConstraintType.FF:
        loop_x = max(from_rect.end_x, to_rect.end_x) + offset + buffer
        return _polyline([
            start,
            Point(loop_x, start.y),
            Point(loop_x, end.y),
            end,
        ])

    # SF: out to the left, across between the rows, back in from the right
    left_x = start.x - offset
    right_x = end.x + offset
    mid_y = (start.y + end.y) / 2
    return _polyline([
        start,
        Point(left_x, start.y),
        Point(left_x, mid_y),
        Point(right_x, mid_y),
        Point(right_x, end.y),
        end,
    ])


def build_connectors(
    rows: Sequence[Task],
    dependencies: DependencyMap | Iterable[DependencyEdge] | None,
    viewport: TimelineViewport,
) -> list[Connector]:
    """
    Connectors for every dependency whose two tasks are on screen.

    `rows` is the visible row order; a task's index is its row. Dependencies
    touching a hidden, unknown or undated task are skipped.
    """
    dependency_map = as_dependency_map(dependencies)
    rects: dict[str, BarRect] = {}
    for row, task in enumerate(rows):
        rect = bar_rect(task, row, viewport)
        if rect is not None:
            rects[task.id] = rect

    connectors = []
    skipped = 0
    for task in rows:
        for predecessor_id in task.depends_on:
            if task.id not in rects or predecessor_id not in rects:
                skipped += 1
                continue
            dependency_type = dependency_map.get_type(predecessor_id, task.id)
            connectors.append(Connector(
                predecessor_id=predecessor_id,
                successor_id=task.id,
                dependency_type=dependency_type,
                path=connector_path(
                    rects[predecessor_id],
                    rects[task.id],
                    dependency_type,
                    offset=viewport.connector_offset,
                    buffer=viewport.connector_buffer,
                ),
            ))

    if skipped:
        logger.debug(f"Skipped {skipped} connector(s) with hidden or undated tasks")

    return connectors
