from datetime import date
from pydantic import BaseModel, Field

from gantt.models import Task, Anchor, ConstraintType, DependencyEdge


class CascadeRequest(BaseModel):
    """A direct date edit on one task, with the project state it applies to."""
    task_id: str
    start_date: date | None = None
    end_date: date | None = None
    tasks: list[Task]
    dependencies: list[DependencyEdge] = Field(default_factory=list)


class AdjustmentRead(BaseModel):
    """A dependent task's new start date."""
    task_id: str
    new_start_date: date

    model_config = {"from_attributes": True}


class CascadeResponse(BaseModel):
    """Edited task, the adjustments it caused and the resulting task list."""
    task: Task
    adjustments: list[AdjustmentRead]  # Emitted order, may repeat a task
    final_adjustments: list[AdjustmentRead]  # One per task
    tasks: list[Task]


class LinkRequest(BaseModel):
    """
    Link two tasks.

    Give `dependency_type` directly, or the two bar endpoints the user joined
    (`from_anchor` on the predecessor, `to_anchor` on the successor).
    """
    tasks: list[Task]
    dependencies: list[DependencyEdge] = Field(default_factory=list)
    predecessor_id: str
    successor_id: str
    dependency_type: ConstraintType | None = None
    from_anchor: Anchor | None = None
    to_anchor: Anchor | None = None


class UnlinkRequest(BaseModel):
    tasks: list[Task]
    dependencies: list[DependencyEdge] = Field(default_factory=list)
    predecessor_id: str
    successor_id: str


class LinkResponse(BaseModel):
    task: Task
    tasks: list[Task]
    dependencies: list[DependencyEdge]
    creates_cycle: bool = False
