from pydantic import BaseModel, Field

from gantt.models import Task


class RowsRequest(BaseModel):
    """Tasks plus the caller's collapse state."""
    tasks: list[Task]
    collapsed_ids: list[str] = Field(default_factory=list)


class ReorderRequest(BaseModel):
    """
    A drag-reorder of one row.

    Give either the pointer displacement (`delta_y`, converted to rows with
    `row_height`) or the `target_index` directly.
    """
    tasks: list[Task]
    collapsed_ids: list[str] = Field(default_factory=list)
    task_id: str
    delta_y: float | None = None
    target_index: int | None = None
    row_height: float | None = None


class SortOrderRead(BaseModel):
    id: str
    sort_order: int

    model_config = {"from_attributes": True}
