"""
Drag sessions for moving, resizing and reordering task bars.

A session is short-lived and local:

    session = DragSession.begin(task, "move", x0, y0, tasks, dependencies)
    session.update(x, y)       # proposed task, nothing committed
    outcome = session.end(x, y)

`end` returns the new local task list plus the point updates the caller
should persist. The local list is final as soon as `end` returns; the
writes may complete in any order. Ending with no net displacement, or
cancelling, changes nothing.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any

from gantt.config import get_settings
from gantt.models import Task, DependencyEdge, DependencyMap
from gantt.services.cascade import DependencyAdjustment, cascade_task_change
from gantt.services.dates import round_half_up
from gantt.services.hierarchy import reorder_by_displacement, visible_tasks
from gantt.logging_config import get_logger

logger = get_logger(__name__)


class DragMode(str, Enum):
    MOVE = "move"
    RESIZE_LEFT = "resize-left"
    RESIZE_RIGHT = "resize-right"
    REORDER = "reorder"


@dataclass
class TaskUpdate:
    """Partial fields to write back for one task."""
    task_id: str
    fields: dict[str, Any]


@dataclass
class DragOutcome:
    """Result of ending a drag session."""
    tasks: list[Task]
    task_updates: list[TaskUpdate] = field(default_factory=list)
    adjustments: list[DependencyAdjustment] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.task_updates


class DragSession:
    """One pointer drag on one task bar."""

    def __init__(
        self,
        task: Task,
        mode: DragMode | str,
        start_client_x: float,
        start_client_y: float,
        tasks: Iterable[Task],
        dependencies: DependencyMap | Iterable[DependencyEdge] | None = None,
        collapsed_ids: Iterable[str] = (),
        pixels_per_day: float | None = None,
        row_height: float | None = None,
    ):
        settings = get_settings()
        self.task = task
        self.mode = DragMode(mode)
        self.start_client_x = start_client_x
        self.start_client_y = start_client_y
        self.tasks = list(tasks)
        self.dependencies = dependencies
        self.collapsed_ids = frozenset(collapsed_ids)
        self.pixels_per_day = pixels_per_day or settings.pixels_per_day
        self.row_height = row_height or settings.row_height
        self.active = True

    @classmethod
    def begin(cls, task: Task, mode: DragMode | str, client_x: float, client_y: float, tasks: Iterable[Task], **kwargs) -> "DragSession":
        logger.debug(f"Drag {mode} started on task {task.id}")
        return cls(task, mode, client_x, client_y, tasks, **kwargs)

    def day_delta(self, client_x: float) -> int:
        return round_half_up((client_x - self.start_client_x) / self.pixels_per_day)

    def update(self, client_x: float, client_y: float) -> Task:
        """
        Proposed state of the dragged task for the current pointer position.

        After `end` or `cancel` the session is closed and the task is returned
        as it was when the drag began.
        """
        if not self.active:
            logger.debug(f"Drag on task {self.task.id} is closed, update ignored")
            return self.task
        if self.mode is DragMode.REORDER:
            rows = self._reordered_rows(client_y)
            return next((t for t in rows if t.id == self.task.id), self.task)
        return self._proposed_dates(self.day_delta(client_x))

    def end(self, client_x: float, client_y: float) -> DragOutcome:
        """Commit the drag at the final pointer position."""
        if not self.active:
            logger.warning(f"Drag on task {self.task.id} already finished")
            return DragOutcome(tasks=self.tasks)
        self.active = False

        if self.mode is DragMode.REORDER:
            return self._commit_reorder(client_y)
        return self._commit_dates(client_x)

    def cancel(self) -> DragOutcome:
        """Abandon the drag; nothing changes."""
        self.active = False
        logger.debug(f"Drag {self.mode.value} cancelled on task {self.task.id}")
        return DragOutcome(tasks=self.tasks)

    def _proposed_dates(self, days: int) -> Task:
        task = self.task
        if days == 0 or task.start_date is None or task.end_date is None:
            return task

        shift = timedelta(days=days)
        if self.mode is DragMode.MOVE:
            return task.model_copy(update={
                "start_date": task.start_date + shift,
                "end_date": task.end_date + shift,
            })
        if self.mode is DragMode.RESIZE_LEFT:
            return task.model_copy(update={"start_date": min(task.start_date + shift, task.end_date)})
        return task.model_copy(update={"end_date": max(task.end_date + shift, task.start_date)})

    def _commit_dates(self, client_x: float) -> DragOutcome:
        proposed = self._proposed_dates(self.day_delta(client_x))
        if (proposed.start_date, proposed.end_date) == (self.task.start_date, self.task.end_date):
            return DragOutcome(tasks=self.tasks)
        if not any(t.id == self.task.id for t in self.tasks):
            logger.debug(f"Drag ended on task {self.task.id}, which is not in the task list")
            return DragOutcome(tasks=self.tasks)

        result = cascade_task_change(
            self.task.id,
            proposed.start_date,
            proposed.end_date,
            self.tasks,
            self.dependencies,
        )

        updates = [TaskUpdate(self.task.id, {
            "start_date": result.task.start_date,
            "end_date": result.task.end_date,
        })]
        updates.extend(
            TaskUpdate(adjustment.task_id, {"start_date": adjustment.new_start_date})
            for adjustment in result.final_adjustments
        )

        logger.info(f"Drag {self.mode.value} on task {self.task.id} committed {len(updates)} update(s)")

        return DragOutcome(tasks=result.tasks, task_updates=updates, adjustments=result.adjustments)

    def _reordered_rows(self, client_y: float) -> Sequence[Task]:
        visible = visible_tasks(self.tasks, self.collapsed_ids)
        return reorder_by_displacement(visible, self.task.id, client_y - self.start_client_y, self.row_height)

    def _commit_reorder(self, client_y: float) -> DragOutcome:
        visible = visible_tasks(self.tasks, self.collapsed_ids)
        before = [t.id for t in visible]
        rows = self._reordered_rows(client_y)
        if [t.id for t in rows] == before:
            return DragOutcome(tasks=self.tasks)

        new_orders = {t.id: t.sort_order for t in rows}
        stored = {t.id: t.sort_order for t in self.tasks}
        updates = [
            TaskUpdate(task_id, {"sort_order": sort_order})
            for task_id, sort_order in new_orders.items()
            if stored.get(task_id) != sort_order
        ]
        tasks = [
            t.model_copy(update={"sort_order": new_orders[t.id]}) if t.id in new_orders else t
            for t in self.tasks
        ]

        logger.info(f"Reordered task {self.task.id}: {len(updates)} row(s) renumbered")

        return DragOutcome(tasks=tasks, task_updates=updates)
