"""JSON export: an array of session objects with camelCase keys."""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from weekline.domain.durations import round_minutes
from weekline.domain.report import WeekReport
from weekline.exports.formatting import local_date_key, to_iso


class SessionExport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    date: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    duration_ms: int = Field(alias="durationMs")
    duration_minutes: int = Field(alias="durationMinutes")
    project_id: int = Field(alias="projectId")
    project_name: str = Field(alias="projectName")
    intention: str
    notes: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")


_rows_adapter = TypeAdapter(list[SessionExport])


class JSONExporter:
    def build_rows(self, report: WeekReport) -> list[SessionExport]:
        return [
            SessionExport(
                id=s.id,
                date=local_date_key(s.start_time, report.tz),
                start_time=to_iso(s.start_time),
                end_time=to_iso(s.end_time),
                duration_ms=s.duration_ms,
                duration_minutes=round_minutes(s.duration_ms),
                project_id=s.project_id,
                project_name=s.project_name,
                intention=s.intention,
                notes=s.notes,
                created_at=to_iso(s.created_at),
            )
            for s in report.aggregate.sessions
        ]

    def export_week(self, report: WeekReport) -> bytes:
        """Pretty-printed (2-space) JSON array."""
        return _rows_adapter.dump_json(self.build_rows(report), indent=2, by_alias=True)
