"""
Row order for the task hierarchy.

Tasks form a tree through parent_id back-references. This module derives
which rows are visible under the caller's collapse state and re-sequences
rows after a drag, keeping every task inside its parent's block.

Parent chains come from user data and may point at missing tasks or loop
back on themselves; every walk here stops at the first missing parent or
repeated ID instead of failing.
"""

from collections.abc import Iterable, Sequence

from gantt.models import Task
from gantt.services.dates import clamp, round_half_up
from gantt.logging_config import get_logger

logger = get_logger(__name__)


def index_by_id(tasks: Iterable[Task]) -> dict[str, Task]:
    return {task.id: task for task in tasks}


def ancestor_ids(task: Task, tasks_by_id: dict[str, Task]) -> list[str]:
    """Parent, grandparent, ... of `task`, nearest first."""
    ancestors: list[str] = []
    seen = {task.id}
    parent_id = task.parent_id

    while parent_id is not None and parent_id in tasks_by_id and parent_id not in seen:
        ancestors.append(parent_id)
        seen.add(parent_id)
        parent_id = tasks_by_id[parent_id].parent_id

    return ancestors


def effective_parent_id(task: Task, tasks_by_id: dict[str, Task]) -> str | None:
    """parent_id if it names a known task other than itself, else None."""
    parent_id = task.parent_id
    if parent_id is None or parent_id == task.id or parent_id not in tasks_by_id:
        return None
    return parent_id


def has_children(task_id: str, tasks: Iterable[Task]) -> bool:
    """Structural check; a plain "task" can have children too."""
    return any(t.parent_id == task_id and t.id != task_id for t in tasks)


def sort_key(task: Task) -> int:
    return task.sort_order if task.sort_order is not None else 0


def visible_tasks(tasks: Iterable[Task], collapsed_ids: Iterable[str] = ()) -> list[Task]:
    """
    Rows to render, in sort_order.

    A task is hidden when any ancestor is collapsed. The collapsed task itself
    stays visible. Equal sort_order values keep their input order.
    """
    tasks = list(tasks)
    collapsed = set(collapsed_ids or ())
    tasks_by_id = index_by_id(tasks)

    ordered = sorted(tasks, key=sort_key)
    if not collapsed:
        return ordered

    return [
        task for task in ordered
        if not any(ancestor in collapsed for ancestor in ancestor_ids(task, tasks_by_id))
    ]


def toggle_collapsed(collapsed_ids: Iterable[str], task_id: str) -> frozenset[str]:
    """Collapse state with `task_id` flipped."""
    collapsed = set(collapsed_ids)
    if task_id in collapsed:
        collapsed.discard(task_id)
    else:
        collapsed.add(task_id)
    return frozenset(collapsed)


def target_index(current_index: int, delta_y: float, row_height: float, count: int) -> int:
    """Row a dragged task lands on after moving `delta_y` screen units."""
    if count <= 0:
        return 0
    if row_height <= 0:
        return clamp(current_index, 0, count - 1)
    return clamp(current_index + round_half_up(delta_y / row_height), 0, count - 1)


def resequence(rows: Sequence[Task]) -> list[Task]:
    """Copies of `rows` with sort_order set to each row's index."""
    return [task.model_copy(update={"sort_order": index}) for index, task in enumerate(rows)]


def _subtree_end(rows: Sequence[Task], index: int, tasks_by_id: dict[str, Task]) -> int:
    """Index of the last row in the contiguous block of rows[index]'s descendants."""
    root_id = rows[index].id
    end = index
    while end + 1 < len(rows) and root_id in ancestor_ids(rows[end + 1], tasks_by_id):
        end += 1
    return end


def _snap_out_of_groups(
    rows: Sequence[Task],
    insert_at: int,
    parent_id: str | None,
    tasks_by_id: dict[str, Task],
    moving_down: bool,
) -> int:
    """
    Move an insertion point out of any sibling's child block.

    Inserting before rows[insert_at] is fine when that row is a sibling of
    the moved task (same parent) or lies outside the parent's scope. When
    it is a descendant of a sibling, the drop would nest the task inside
    that sibling's group, so it is pushed past the group's last row when
    moving down, or onto the group's own row when moving up.
    """
    if insert_at >= len(rows):
        return insert_at

    row = rows[insert_at]
    chain = [row.id] + ancestor_ids(row, tasks_by_id)
    group_id = next(
        (node_id for node_id in chain if effective_parent_id(tasks_by_id[node_id], tasks_by_id) == parent_id),
        None,
    )
    if group_id is None or group_id == row.id:
        return insert_at

    group_index = next((i for i, t in enumerate(rows) if t.id == group_id), None)
    if group_index is None or group_index >= insert_at:
        return insert_at

    if moving_down:
        return _subtree_end(rows, group_index, tasks_by_id) + 1
    return group_index


def reorder_tasks(visible: Sequence[Task], task_id: str, target: int) -> list[Task]:
    """
    Move a visible task to row `target` and re-sequence every row.

    The task moves together with the contiguous block of its descendants.
    A task with a parent stays between the parent's row and the end of the
    parent's block. Any task dropped inside a sibling's child block is
    snapped to just outside that block, so a drag never changes nesting.

    Returns:
        All visible tasks in their new order, sort_order = new row index.
    """
    rows = list(visible)
    tasks_by_id = index_by_id(rows)

    from_index = next((i for i, t in enumerate(rows) if t.id == task_id), None)
    if from_index is None:
        logger.debug(f"Reorder ignored: task {task_id} is not a visible row")
        return resequence(rows)

    target = clamp(target, 0, len(rows) - 1)
    if target == from_index:
        return resequence(rows)

    moving = rows[from_index]
    block_end = _subtree_end(rows, from_index, tasks_by_id)
    block = rows[from_index:block_end + 1]
    rest = rows[:from_index] + rows[block_end + 1:]
    moving_down = target > from_index

    insert_at = clamp(target, 0, len(rest))

    parent_id = effective_parent_id(moving, tasks_by_id)
    if parent_id is not None:
        parent_index = next((i for i, t in enumerate(rest) if t.id == parent_id), None)
        if parent_index is None:
            # Parent chain loops back into the moved block
            parent_id = None
        else:
            parent_end = _subtree_end(rest, parent_index, tasks_by_id)
            insert_at = clamp(insert_at, parent_index + 1, parent_end + 1)

    insert_at = _snap_out_of_groups(rest, insert_at, parent_id, tasks_by_id, moving_down)

    logger.debug(
        f"Reorder {task_id}: row {from_index} -> {insert_at} "
        f"({len(block)} row(s) moved)"
    )

    return resequence(rest[:insert_at] + block + rest[insert_at:])


def reorder_by_displacement(
    visible: Sequence[Task],
    task_id: str,
    delta_y: float,
    row_height: float,
) -> list[Task]:
    """Reorder from a pointer displacement instead of a row index."""
    rows = list(visible)
    from_index = next((i for i, t in enumerate(rows) if t.id == task_id), None)
    if from_index is None:
        return reorder_tasks(rows, task_id, 0)
    return reorder_tasks(rows, task_id, target_index(from_index, delta_y, row_height, len(rows)))
