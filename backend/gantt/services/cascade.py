"""
Cascade service for propagating a task's date change to its dependents.

When a predecessor's dates change, every Finish-to-Start successor whose
start is not after the predecessor's end is pushed to start the day after:

    Successor.Start = Predecessor.End + 1 day   (only when End >= Start)

The push is repeated from each moved successor, depth-first. SS, FF and SF
edges are drawn but never pushed. Only the start date moves; end dates of
cascaded tasks are left as stored.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

import networkx as nx

from gantt.models import Task, ConstraintType, DependencyEdge, DependencyMap
from gantt.services.dates import DateLike, parse_date
from gantt.services.graph import build_dependency_graph, direct_successors
from gantt.exceptions import TaskNotFoundError
from gantt.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DependencyAdjustment:
    """A proposed new start date for one dependent task."""
    task_id: str
    new_start_date: date


@dataclass
class CascadeResult:
    """Outcome of editing one task and cascading the change."""
    task: Task  # The edited task with its new dates
    adjustments: list[DependencyAdjustment]  # In emitted order, may repeat a task
    final_adjustments: list[DependencyAdjustment]  # One per task, last writer wins
    tasks: list[Task] = field(default_factory=list)  # Full task list after applying everything


def calculate_dependency_adjustments(
    changed_task: Task,
    all_tasks: Iterable[Task],
    dependencies: DependencyMap | Iterable[DependencyEdge] | None = None,
    processed: frozenset[str] = frozenset(),
    graph: nx.DiGraph | None = None,
) -> list[DependencyAdjustment]:
    """
    Compute the start-date adjustments caused by `changed_task`'s dates.

    Args:
        changed_task: The task with its new dates already applied
        all_tasks: Every task in the project (stored state)
        dependencies: Constraint type per (predecessor, successor) pair
        processed: Task IDs already visited on the current path
        graph: A prebuilt dependency graph, to skip rebuilding it

    Returns:
        Adjustments in emitted order: each successor's own adjustment comes
        right before the ones cascading from it. A task reachable along two
        paths can appear more than once; apply in order and let the last one win.
    """
    if graph is None:
        graph = build_dependency_graph(all_tasks, dependencies)

    adjustments = _cascade(changed_task, graph, frozenset(processed))

    logger.debug(f"Cascade from task {changed_task.id}: {len(adjustments)} adjustment(s)")

    return adjustments


def _cascade(
    changed_task: Task,
    graph: nx.DiGraph,
    processed: frozenset[str],
) -> list[DependencyAdjustment]:
    adjustments: list[DependencyAdjustment] = []

    if changed_task.end_date is None or changed_task.id in processed:
        return adjustments

    # Visited set for this branch only; sibling branches get their own
    branch_processed = processed | {changed_task.id}

    for successor in direct_successors(graph, changed_task.id):
        if successor.start_date is None or successor.end_date is None:
            logger.debug(f"Skipping undated successor {successor.id}")
            continue

        dependency_type = graph.edges[changed_task.id, successor.id]["dependency_type"]
        if dependency_type != ConstraintType.FS:
            continue

        # Inclusive: an end date equal to the successor's start still pushes
        if changed_task.end_date >= successor.start_date:
            new_start_date = changed_task.end_date + timedelta(days=1)

            adjustments.append(DependencyAdjustment(
                task_id=successor.id,
                new_start_date=new_start_date,
            ))

            adjusted_successor = successor.model_copy(update={"start_date": new_start_date})
            adjustments.extend(_cascade(adjusted_successor, graph, branch_processed))

    return adjustments


def dedupe_adjustments(adjustments: Iterable[DependencyAdjustment]) -> list[DependencyAdjustment]:
    """Collapse repeated task IDs, keeping the last date and the first position."""
    latest: dict[str, DependencyAdjustment] = {}
    for adjustment in adjustments:
        latest[adjustment.task_id] = adjustment
    return list(latest.values())


def apply_adjustments(
    tasks: Iterable[Task],
    adjustments: Iterable[DependencyAdjustment],
) -> list[Task]:
    """
    Return copies of `tasks` with the adjustments applied.

    Only start_date changes. Adjustments naming unknown tasks are ignored.
    """
    new_starts = {a.task_id: a.new_start_date for a in dedupe_adjustments(adjustments)}

    return [
        task.model_copy(update={"start_date": new_starts[task.id]})
        if task.id in new_starts else task
        for task in tasks
    ]


def cascade_task_change(
    task_id: str,
    start_date: DateLike | None,
    end_date: DateLike | None,
    tasks: Iterable[Task],
    dependencies: DependencyMap | Iterable[DependencyEdge] | None = None,
) -> CascadeResult:
    """
    Apply a direct date edit to one task and cascade it to its dependents.

    The edit is applied to the local task list first, then the cascade runs
    against that list, so callers can persist the returned tasks in any order.

    Raises:
        TaskNotFoundError: If `task_id` is not among `tasks`.
    """
    tasks = list(tasks)
    target = next((t for t in tasks if t.id == task_id), None)
    if target is None:
        raise TaskNotFoundError(task_id)

    changed_task = target.model_copy(update={
        "start_date": parse_date(start_date),
        "end_date": parse_date(end_date),
    })
    tasks = [changed_task if t.id == task_id else t for t in tasks]

    adjustments = calculate_dependency_adjustments(changed_task, tasks, dependencies)
    final = dedupe_adjustments(adjustments)

    if final:
        logger.info(
            f"Task {task_id} moved to {changed_task.start_date}..{changed_task.end_date}; "
            f"cascading to {len(final)} task(s)"
        )

    return CascadeResult(
        task=changed_task,
        adjustments=adjustments,
        final_adjustments=final,
        tasks=apply_adjustments(tasks, final),
    )
