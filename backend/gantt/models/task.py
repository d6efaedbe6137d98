from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class TaskType(str, Enum):
    """Hierarchy role of a task row."""

    TASK = "task"
    SUMMARY = "summary"
    SUB_SUMMARY = "sub_summary"


class Task(BaseModel):
    """
    A schedulable unit of work as supplied by the task repository.

    Key fields:
    - start_date / end_date: calendar days, either may be missing
    - parent_id: back-reference to the summary row this task sits under
    - depends_on: predecessor task IDs, in the order they were linked
    - sort_order: row position among the visible tasks

    Presentation fields (name, color, progress, ...) are carried through
    untouched. duration_days is stored separately and can drift from the
    dates; nothing here reconciles the two.
    """

    id: str
    project_id: str | None = None
    name: str | None = None
    description: str | None = None

    start_date: date | None = None
    end_date: date | None = None

    # Hierarchy
    parent_id: str | None = None
    task_type: TaskType = TaskType.TASK
    sort_order: int | None = None

    depends_on: list[str] = Field(default_factory=list)

    duration_days: int = 1
    crew_size: int | None = None
    progress: int | None = None  # 0-100, not enforced
    is_critical: bool | None = None
    color: str | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _blank_date_is_missing(cls, value):
        if value == "":
            return None
        return value

    @field_validator("depends_on", mode="before")
    @classmethod
    def _null_depends_on(cls, value):
        return [] if value is None else value

    @property
    def is_summary(self) -> bool:
        return self.task_type in (TaskType.SUMMARY, TaskType.SUB_SUMMARY)

    @property
    def has_dates(self) -> bool:
        return self.start_date is not None and self.end_date is not None
