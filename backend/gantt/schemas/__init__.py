from gantt.schemas.schedule import (
    CascadeRequest,
    AdjustmentRead,
    CascadeResponse,
    LinkRequest,
    UnlinkRequest,
    LinkResponse,
)
from gantt.schemas.layout import RowsRequest, ReorderRequest, SortOrderRead
from gantt.schemas.connector import (
    ViewportOverrides,
    ConnectorRequest,
    PointRead,
    ConnectorRead,
    ConnectorResponse,
)

__all__ = [
    "CascadeRequest",
    "AdjustmentRead",
    "CascadeResponse",
    "LinkRequest",
    "UnlinkRequest",
    "LinkResponse",
    "RowsRequest",
    "ReorderRequest",
    "SortOrderRead",
    "ViewportOverrides",
    "ConnectorRequest",
    "PointRead",
    "ConnectorRead",
    "ConnectorResponse",
]
