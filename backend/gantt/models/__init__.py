from gantt.models.task import Task, TaskType
from gantt.models.dependency import (
    Anchor,
    ConstraintType,
    DEFAULT_CONSTRAINT,
    DependencyEdge,
    DependencyMap,
)

__all__ = [
    "Task",
    "TaskType",
    "Anchor",
    "ConstraintType",
    "DEFAULT_CONSTRAINT",
    "DependencyEdge",
    "DependencyMap",
]
