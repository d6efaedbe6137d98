from datetime import date
from pydantic import BaseModel, Field

from gantt.models import Task, ConstraintType, DependencyEdge


class ViewportOverrides(BaseModel):
    """Optional overrides of the configured timeline geometry."""
    min_date: date | None = None  # Defaults to the padded earliest start
    pixels_per_day: float | None = None
    left_column_width: float | None = None
    header_height: float | None = None
    row_height: float | None = None
    pan_x: float | None = None


class ConnectorRequest(BaseModel):
    tasks: list[Task]
    dependencies: list[DependencyEdge] = Field(default_factory=list)
    collapsed_ids: list[str] = Field(default_factory=list)
    viewport: ViewportOverrides | None = None


class PointRead(BaseModel):
    x: float
    y: float

    model_config = {"from_attributes": True}


class ConnectorRead(BaseModel):
    """One connector, as SVG path data plus its points."""
    predecessor_id: str
    successor_id: str
    dependency_type: ConstraintType
    path: str
    start: PointRead
    end: PointRead
    points: list[PointRead]
    marker_end: str


class ConnectorResponse(BaseModel):
    min_date: date
    total_days: int
    connectors: list[ConnectorRead]
