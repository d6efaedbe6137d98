"""
Layout routes: visible rows and drag-reorder.
"""

from fastapi import APIRouter

from gantt.config import get_settings
from gantt.models import Task
from gantt.schemas import RowsRequest, ReorderRequest, SortOrderRead
from gantt.services.hierarchy import reorder_tasks, target_index, visible_tasks
from gantt.exceptions import TaskNotFoundError, ValidationError
from gantt.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/rows", response_model=list[Task])
async def list_rows(request: RowsRequest) -> list[Task]:
    """Visible rows in display order, hiding descendants of collapsed tasks."""
    rows = visible_tasks(request.tasks, request.collapsed_ids)

    logger.debug(f"{len(rows)} of {len(request.tasks)} tasks visible")

    return rows


@router.post("/reorder", response_model=list[SortOrderRead])
async def reorder(request: ReorderRequest) -> list[SortOrderRead]:
    """
    Move one visible row and return the new sort_order of every visible row.

    Either delta_y or target_index must be given.
    """
    rows = visible_tasks(request.tasks, request.collapsed_ids)

    from_index = next((i for i, t in enumerate(rows) if t.id == request.task_id), None)
    if from_index is None:
        raise TaskNotFoundError(request.task_id)

    if request.target_index is not None:
        target = request.target_index
    elif request.delta_y is not None:
        row_height = request.row_height or get_settings().row_height
        target = target_index(from_index, request.delta_y, row_height, len(rows))
    else:
        raise ValidationError(
            "Either delta_y or target_index is required",
            details=[{"loc": ["body"], "msg": "delta_y or target_index missing", "type": "missing"}],
        )

    logger.info(f"Reorder request: task={request.task_id} row {from_index} -> {target}")

    return [
        SortOrderRead(id=task.id, sort_order=task.sort_order)
        for task in reorder_tasks(rows, request.task_id, target)
    ]
