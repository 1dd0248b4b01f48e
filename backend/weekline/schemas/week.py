"""Pydantic schemas for the Today, Week, Projects and Settings views."""

from datetime import datetime

from pydantic import BaseModel, Field


class SessionItem(BaseModel):
    id: int
    project_id: int
    project_name: str
    project_color: str = Field(..., description="Normalized color key")
    intention: str
    notes: str | None = None
    start_time: datetime
    end_time: datetime
    duration_ms: int
    duration_label: str = Field(..., description='Truncated duration, e.g. "1h 05m"')


class ProjectTotalItem(BaseModel):
    project_id: int
    name: str
    color: str
    total_ms: int
    count: int
    percentage_of_week: int = Field(..., ge=0, le=100)


class DayStripItem(BaseModel):
    key: str = Field(..., description="Local date, YYYY-MM-DD")
    label: str = Field(..., description="Upper-case weekday, e.g. MON")
    day_number: int
    is_weekend: bool
    total_ms: int
    has_sessions: bool


class DayGroupItem(BaseModel):
    key: str
    label: str
    total_ms: int
    sessions: list[SessionItem] = Field(default_factory=list)


class HistoryInfo(BaseModel):
    """Free-plan clamp applied to the requested week."""

    is_limited: bool
    is_locked: bool
    history_limit: datetime
    effective_start: datetime


class WeekResponse(BaseModel):
    offset: int
    start: datetime
    end: datetime
    start_label: str
    end_label: str
    total_ms: int
    sessions_count: int
    projects_count: int
    active_days_count: int
    avg_per_active_day_ms: int
    project_totals: list[ProjectTotalItem] = Field(default_factory=list)
    days: list[DayStripItem] = Field(default_factory=list)
    active_day: str
    day_groups: list[DayGroupItem] = Field(default_factory=list, description="Active day first, then ascending")
    history: HistoryInfo


class TodayProject(BaseModel):
    id: int
    name: str
    color: str


class TodayResponse(BaseModel):
    start: datetime
    end: datetime
    total_ms: int
    sessions_count: int
    primary_project_name: str | None = None
    projects: list[TodayProject] = Field(default_factory=list, description="Active projects for the new-session form")
    sessions: list[SessionItem] = Field(default_factory=list)


class ProjectItem(BaseModel):
    id: int
    name: str
    color: str
    color_label: str = Field(..., description='Human name of the color key, e.g. "Neutral"')
    is_archived: bool
    created_at: datetime
    week_total_ms: int = 0
    week_sessions_count: int = 0


class ProjectsOverviewResponse(BaseModel):
    active: list[ProjectItem] = Field(default_factory=list)
    archived: list[ProjectItem] = Field(default_factory=list)
    active_touched_this_week: int = 0
    active_week_total_ms: int = 0


class AccountOverviewResponse(BaseModel):
    email: str | None = None
    is_pro: bool
    plan: str
    pro_expires_at: datetime | None = None
    week_total_ms: int
    lifetime_total_ms: int
    lifetime_sessions_count: int
