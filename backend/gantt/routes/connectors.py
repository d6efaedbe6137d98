"""
Connector routes: dependency arrows for the visible rows.
"""

from fastapi import APIRouter

from gantt.schemas import ConnectorRequest, ConnectorResponse, ConnectorRead, PointRead
from gantt.services.connectors import build_connectors
from gantt.services.hierarchy import visible_tasks
from gantt.services.timeline import TimelineViewport, timeline_bounds
from gantt.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/", response_model=ConnectorResponse)
async def list_connectors(request: ConnectorRequest) -> ConnectorResponse:
    """
    Connector paths for every dependency between two visible, dated tasks.

    Row positions follow the visible row order; the timeline origin defaults
    to the day before the earliest start.
    """
    rows = visible_tasks(request.tasks, request.collapsed_ids)
    min_date, total_days = timeline_bounds(request.tasks)

    overrides = request.viewport.model_dump() if request.viewport else {}
    if overrides.get("min_date") is not None:
        min_date = overrides["min_date"]
    overrides.pop("min_date", None)

    viewport = TimelineViewport.from_settings(min_date, **overrides)
    connectors = build_connectors(rows, request.dependencies, viewport)

    logger.debug(f"Built {len(connectors)} connector(s) for {len(rows)} rows")

    return ConnectorResponse(
        min_date=min_date,
        total_days=total_days,
        connectors=[
            ConnectorRead(
                predecessor_id=c.predecessor_id,
                successor_id=c.successor_id,
                dependency_type=c.dependency_type,
                path=c.path.to_svg(),
                start=PointRead(x=c.path.start.x, y=c.path.start.y),
                end=PointRead(x=c.path.end.x, y=c.path.end.y),
                points=[PointRead(x=p.x, y=p.y) for p in c.path.points],
                marker_end=c.path.marker_end,
            )
            for c in connectors
        ],
    )
