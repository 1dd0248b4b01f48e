"""Summary modes, views and per-mode vocabulary."""

from dataclasses import dataclass
from enum import StrEnum


class SummaryMode(StrEnum):
    SELF = "self"
    MANAGER = "manager"
    CLIENT = "client"


class SummaryView(StrEnum):
    FULL = "full"
    TOTALS = "totals"
    PROJECTS = "projects"
    DAYS = "days"


def parse_mode(raw: str | None) -> SummaryMode:
    """Unknown or missing values fall back to ``self``."""
    if raw == SummaryMode.MANAGER:
        return SummaryMode.MANAGER
    if raw == SummaryMode.CLIENT:
        return SummaryMode.CLIENT
    return SummaryMode.SELF


def parse_view(raw: str | None) -> SummaryView:
    try:
        return SummaryView(raw)
    except ValueError:
        return SummaryView.FULL


def resolve_view(mode: SummaryMode, view: SummaryView) -> SummaryView:
    """Client-facing summaries never include the day-by-day breakdown."""
    if mode == SummaryMode.CLIENT and view in (SummaryView.FULL, SummaryView.DAYS):
        return SummaryView.TOTALS
    return view


@dataclass(frozen=True)
class SummarySections:
    totals: bool
    projects: bool
    days: bool

    @classmethod
    def for_request(cls, mode: SummaryMode, view: SummaryView) -> "SummarySections":
        view = resolve_view(mode, view)
        return cls(
            totals=view in (SummaryView.FULL, SummaryView.TOTALS),
            projects=view in (SummaryView.FULL, SummaryView.PROJECTS),
            days=mode != SummaryMode.CLIENT and view in (SummaryView.FULL, SummaryView.DAYS),
        )


@dataclass(frozen=True)
class SummaryVocabulary:
    title: str
    intro: str | None
    total_time_label: str
    sessions_label: str
    projects_label: str
    projects_heading: str
    days_heading: str
    filename_base: str
    include_notes: bool

    @classmethod
    def for_mode(cls, mode: SummaryMode) -> "SummaryVocabulary":
        return _VOCABULARY[mode]


_VOCABULARY = {
    SummaryMode.SELF: SummaryVocabulary(
        title="Weekly dev log",
        intro=None,
        total_time_label="Total time",
        sessions_label="Sessions",
        projects_label="Active projects",
        projects_heading="By project",
        days_heading="Sessions by day",
        filename_base="weekly-dev-log",
        include_notes=True,
    ),
    SummaryMode.MANAGER: SummaryVocabulary(
        title="Weekly update",
        intro="This update summarizes what I worked on this week for visibility and planning.",
        total_time_label="Total time",
        sessions_label="Sessions",
        projects_label="Active projects",
        projects_heading="Projects worked on",
        days_heading="Activities by day",
        filename_base="weekly-update",
        include_notes=True,
    ),
    SummaryMode.CLIENT: SummaryVocabulary(
        title="Weekly client update",
        intro=(
            "This is a brief, client-facing snapshot of shipped work, "
            "progress, and time spent this week."
        ),
        total_time_label="Total tracked time",
        sessions_label="Work blocks",
        projects_label="Projects in scope",
        projects_heading="Projects & deliverables",
        days_heading="Work by day",
        filename_base="weekly-client-update",
        include_notes=False,
    ),
}
