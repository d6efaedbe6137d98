"""
Scheduling routes: cascade date edits and link or unlink tasks.
"""

from fastapi import APIRouter

from gantt.models import ConstraintType, DEFAULT_CONSTRAINT
from gantt.schemas import (
    CascadeRequest,
    CascadeResponse,
    AdjustmentRead,
    LinkRequest,
    UnlinkRequest,
    LinkResponse,
)
from gantt.services.cascade import cascade_task_change
from gantt.services.graph import (
    LinkResult,
    build_dependency_graph,
    find_cycle,
    link_tasks,
    unlink_tasks,
)
from gantt.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/cascade", response_model=CascadeResponse)
async def cascade(request: CascadeRequest) -> CascadeResponse:
    """
    Apply new dates to one task and propagate them along FS dependencies.

    Nothing is stored; the caller persists the returned tasks.
    Unknown task_id returns 404.
    """
    logger.info(
        f"Cascade request: task={request.task_id} "
        f"{request.start_date}..{request.end_date} over {len(request.tasks)} tasks"
    )

    cycle = find_cycle(build_dependency_graph(request.tasks, request.dependencies))
    if cycle:
        logger.warning(f"Dependency cycle present, cascade stops where a path repeats: {' -> '.join(cycle)}")

    result = cascade_task_change(
        request.task_id,
        request.start_date,
        request.end_date,
        request.tasks,
        request.dependencies,
    )

    return CascadeResponse(
        task=result.task,
        adjustments=[
            AdjustmentRead(task_id=a.task_id, new_start_date=a.new_start_date)
            for a in result.adjustments
        ],
        final_adjustments=[
            AdjustmentRead(task_id=a.task_id, new_start_date=a.new_start_date)
            for a in result.final_adjustments
        ],
        tasks=result.tasks,
    )


def _link_response(result: LinkResult) -> LinkResponse:
    return LinkResponse(
        task=result.task,
        tasks=result.tasks,
        dependencies=result.dependencies.edges(),
        creates_cycle=result.creates_cycle,
    )


@router.post("/link", response_model=LinkResponse)
async def link(request: LinkRequest) -> LinkResponse:
    """
    Make successor_id depend on predecessor_id.

    The type comes from dependency_type, else from the joined endpoints,
    else FS. Self links return 400, unknown tasks 404. A link that closes a
    cycle is accepted and flagged.
    """
    if request.dependency_type is not None:
        dependency_type = request.dependency_type
    elif request.from_anchor is not None and request.to_anchor is not None:
        dependency_type = ConstraintType.from_endpoints(request.from_anchor, request.to_anchor)
    else:
        dependency_type = DEFAULT_CONSTRAINT

    result = link_tasks(
        request.tasks,
        request.dependencies,
        request.predecessor_id,
        request.successor_id,
        dependency_type,
    )
    return _link_response(result)


@router.post("/unlink", response_model=LinkResponse)
async def unlink(request: UnlinkRequest) -> LinkResponse:
    """Remove a link; removing a link that does not exist changes nothing."""
    result = unlink_tasks(
        request.tasks,
        request.dependencies,
        request.predecessor_id,
        request.successor_id,
    )
    return _link_response(result)
