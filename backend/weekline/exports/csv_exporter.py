"""CSV export: one row per session."""

from weekline.domain.durations import round_minutes
from weekline.domain.report import WeekReport
from weekline.exports.formatting import local_date_key, to_iso

CSV_HEADER = (
    "date",
    "start_time",
    "end_time",
    "project",
    "intention",
    "notes",
    "duration_minutes",
)


def escape_csv(value) -> str:
    """Quote a field only when it contains a comma, a double quote or a newline."""
    if value is None:
        return ""
    text = str(value)
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


class CSVExporter:
    """Render a week's sessions as CRLF-delimited CSV."""

    def build_rows(self, report: WeekReport) -> list[list[str]]:
        return [
            [
                local_date_key(s.start_time, report.tz),
                to_iso(s.start_time),
                to_iso(s.end_time),
                s.project_name,
                s.intention,
                s.notes or "",
                str(round_minutes(s.duration_ms)),
            ]
            for s in report.aggregate.sessions
        ]

    def export_week(self, report: WeekReport) -> str:
        lines = [",".join(escape_csv(h) for h in CSV_HEADER)]
        lines.extend(",".join(escape_csv(v) for v in row) for row in self.build_rows(report))
        return "\r\n".join(lines)
