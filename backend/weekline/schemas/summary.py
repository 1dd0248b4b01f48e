"""Pydantic schemas for the weekly summary endpoints."""

from pydantic import BaseModel, Field

from weekline.schemas.week import HistoryInfo, ProjectTotalItem


class SummaryResponse(BaseModel):
    """Markdown summary plus the metrics it was built from."""

    offset: int
    mode: str
    view: str = Field(..., description="View after client policy is applied")
    total_time_label: str = Field(..., description="Per-mode metric labels")
    sessions_label: str
    projects_label: str
    week_start: str = Field(..., description="Local date of the week's Monday")
    start_label: str
    end_label: str
    markdown: str
    highlight: str = ""
    total_ms: int
    sessions_count: int
    projects_count: int
    project_totals: list[ProjectTotalItem] = Field(default_factory=list)
    history: HistoryInfo


class HighlightUpdate(BaseModel):
    week_start: str | None = Field(None, description="ISO date of the week's Monday")
    highlight: str | None = None
