"""
Graph operations using NetworkX.

This module handles:
- Building the predecessor -> successor graph from tasks' depends_on lists
- Successor lookup in task-list order for the cascade
- Cycle detection for dependency validation and diagnostics
- Linking and unlinking tasks on a stateless task list
"""

from collections.abc import Iterable
from dataclasses import dataclass

import networkx as nx

from gantt.models import Task, ConstraintType, DEFAULT_CONSTRAINT, DependencyEdge, DependencyMap
from gantt.exceptions import SelfDependencyError, TaskNotFoundError
from gantt.logging_config import get_logger

logger = get_logger(__name__)


def as_dependency_map(
    dependencies: DependencyMap | Iterable[DependencyEdge] | None,
) -> DependencyMap:
    """Accept either a ready map or a list of edges."""
    if isinstance(dependencies, DependencyMap):
        return dependencies
    return DependencyMap.from_edges(dependencies or [])


def build_dependency_graph(
    tasks: Iterable[Task],
    dependencies: DependencyMap | Iterable[DependencyEdge] | None = None,
) -> nx.DiGraph:
    """
    Build a NetworkX DiGraph from the tasks' depends_on lists.

    Returns a graph where:
    - Nodes are task IDs, carrying the task under the "task" attribute
    - Edges go from predecessor -> successor with a "dependency_type" attribute

    Edges are only created for pairs listed in a successor's depends_on; an
    entry in the dependency map alone does not make a dependency. Edges are
    added in task-list order, so a node's successors come back in that order.
    """
    dependency_map = as_dependency_map(dependencies)
    graph = nx.DiGraph()

    for task in tasks:
        graph.add_node(task.id, task=task)

    for node_id, data in list(graph.nodes(data=True)):
        task = data.get("task")
        if task is None:
            continue
        for predecessor_id in task.depends_on:
            graph.add_edge(
                predecessor_id,
                task.id,
                dependency_type=dependency_map.get_type(predecessor_id, task.id),
            )

    return graph


def direct_successors(graph: nx.DiGraph, task_id: str) -> list[Task]:
    """Tasks that list `task_id` in their depends_on, in task-list order."""
    if task_id not in graph:
        return []
    return [
        graph.nodes[successor_id]["task"]
        for successor_id in graph.successors(task_id)
        if "task" in graph.nodes[successor_id]
    ]


def detect_cycle(
    graph: nx.DiGraph,
    new_predecessor_id: str,
    new_successor_id: str,
) -> bool:
    """
    Check if adding an edge (predecessor -> successor) would create a cycle.

    The new edge closes a cycle exactly when the successor already reaches
    the predecessor.
    """
    if new_predecessor_id == new_successor_id:
        return True

    if new_predecessor_id not in graph or new_successor_id not in graph:
        return False

    return nx.has_path(graph, new_successor_id, new_predecessor_id)


def find_cycle(graph: nx.DiGraph) -> list[str] | None:
    """
    One cycle in the graph as a list of task IDs, or None when acyclic.

    Diagnostics only. Enumerating every cycle grows factorially on densely
    linked graphs, so a single example is returned.
    """
    try:
        edges = nx.find_cycle(graph)
    except nx.NetworkXNoCycle:
        return None
    return [predecessor_id for predecessor_id, _ in edges]


@dataclass
class LinkResult:
    """Task list and dependency map after linking or unlinking two tasks."""
    task: Task
    tasks: list[Task]
    dependencies: DependencyMap
    creates_cycle: bool = False


def _replace_task(tasks: list[Task], updated: Task) -> list[Task]:
    return [updated if t.id == updated.id else t for t in tasks]


def link_tasks(
    tasks: Iterable[Task],
    dependencies: DependencyMap | Iterable[DependencyEdge] | None,
    predecessor_id: str,
    successor_id: str,
    dependency_type: ConstraintType | str = DEFAULT_CONSTRAINT,
) -> LinkResult:
    """
    Make `successor_id` depend on `predecessor_id` with the given type.

    An existing link between the pair is replaced and moves to the end of
    the successor's depends_on. Cycles are allowed; the cascade stops at
    them, so a closing edge is only reported through `creates_cycle`.

    Raises:
        SelfDependencyError: predecessor and successor are the same task
        TaskNotFoundError: either task is not in `tasks`
    """
    if predecessor_id == successor_id:
        raise SelfDependencyError(predecessor_id)

    tasks = list(tasks)
    tasks_by_id = {t.id: t for t in tasks}
    for task_id in (predecessor_id, successor_id):
        if task_id not in tasks_by_id:
            raise TaskNotFoundError(task_id)

    dependency_map = DependencyMap.from_edges(as_dependency_map(dependencies).edges())
    creates_cycle = detect_cycle(build_dependency_graph(tasks, dependency_map), predecessor_id, successor_id)
    if creates_cycle:
        logger.warning(f"Link {predecessor_id} -> {successor_id} closes a dependency cycle")

    successor = tasks_by_id[successor_id]
    updated = successor.model_copy(update={
        "depends_on": [d for d in successor.depends_on if d != predecessor_id] + [predecessor_id],
    })
    dependency_map.set(predecessor_id, successor_id, dependency_type)

    logger.info(f"Linked {predecessor_id} -> {successor_id} ({ConstraintType(dependency_type).value})")

    return LinkResult(
        task=updated,
        tasks=_replace_task(tasks, updated),
        dependencies=dependency_map,
        creates_cycle=creates_cycle,
    )


def unlink_tasks(
    tasks: Iterable[Task],
    dependencies: DependencyMap | Iterable[DependencyEdge] | None,
    predecessor_id: str,
    successor_id: str,
) -> LinkResult:
    """
    Remove the link predecessor -> successor. A missing link is a no-op.

    Raises:
        TaskNotFoundError: the successor is not in `tasks`
    """
    tasks = list(tasks)
    successor = next((t for t in tasks if t.id == successor_id), None)
    if successor is None:
        raise TaskNotFoundError(successor_id)

    dependency_map = DependencyMap.from_edges(as_dependency_map(dependencies).edges())
    dependency_map.remove(predecessor_id, successor_id)

    if predecessor_id not in successor.depends_on:
        return LinkResult(task=successor, tasks=tasks, dependencies=dependency_map)

    updated = successor.model_copy(update={
        "depends_on": [d for d in successor.depends_on if d != predecessor_id],
    })
    logger.info(f"Unlinked {predecessor_id} -> {successor_id}")

    return LinkResult(task=updated, tasks=_replace_task(tasks, updated), dependencies=dependency_map)
