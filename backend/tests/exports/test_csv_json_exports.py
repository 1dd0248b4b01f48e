"""Tests for CSV and JSON week exports."""

import json
from datetime import UTC, datetime

import pytest

from weekline.exports import CSVExporter, JSONExporter, MarkdownExporter
from weekline.exports.csv_exporter import escape_csv
from weekline.exports.formatting import export_filename, to_iso
from weekline.domain.summary import SummaryMode

pytestmark = pytest.mark.unit


class TestEscapeCsv:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("plain", "plain"),
            (None, ""),
            ("a,b", '"a,b"'),
            ('say "hi"', '"say ""hi"""'),
            ("line1\nline2", '"line1\nline2"'),
            (42, "42"),
        ],
    )
    def test_quotes_only_when_needed(self, value, expected):
        assert escape_csv(value) == expected


class TestCSVExporter:
    def test_header_and_rows(self, make_report, sample_records):
        csv_text = CSVExporter().export_week(make_report(sample_records))
        lines = csv_text.split("\r\n")

        assert lines[0] == "date,start_time,end_time,project,intention,notes,duration_minutes"
        assert len(lines) == 4
        assert lines[1] == (
            "2025-11-17,2025-11-17T09:00:00.000Z,2025-11-17T09:45:00.000Z,"
            "Alpha,Deep work,Shipped the parser,45"
        )

    def test_special_characters_are_escaped(self, make_report, make_record):
        record = make_record(
            1,
            10,
            datetime(2025, 11, 18, 8, 0, tzinfo=UTC),
            project_name="Acme, Inc.",
            intention='Fix "the" bug',
            notes="first\nsecond",
        )

        row = CSVExporter().export_week(make_report([record])).split("\r\n", 1)[1]

        assert '"Acme, Inc."' in row
        assert '"Fix ""the"" bug"' in row
        assert '"first\nsecond"' in row

    def test_duration_minutes_are_rounded(self, make_report, make_record):
        record = make_record(1, 1.75, datetime(2025, 11, 18, 8, 0, tzinfo=UTC))

        csv_text = CSVExporter().export_week(make_report([record]))

        assert csv_text.endswith(",2")

    def test_empty_week_is_header_only(self, make_report):
        assert CSVExporter().export_week(make_report([])) == (
            "date,start_time,end_time,project,intention,notes,duration_minutes"
        )


class TestJSONExporter:
    def test_objects_use_camel_case(self, make_report, sample_records):
        payload = json.loads(JSONExporter().export_week(make_report(sample_records)))

        assert len(payload) == 3
        first = payload[0]
        assert set(first) == {
            "id",
            "date",
            "startTime",
            "endTime",
            "durationMs",
            "durationMinutes",
            "projectId",
            "projectName",
            "intention",
            "notes",
            "createdAt",
        }
        assert first["projectName"] == "Alpha"
        assert first["durationMs"] == 45 * 60_000
        assert first["durationMinutes"] == 45
        assert first["startTime"] == "2025-11-17T09:00:00.000Z"
        assert payload[1]["notes"] is None

    def test_pretty_printed_with_two_spaces(self, make_report, sample_records):
        raw = JSONExporter().export_week(make_report(sample_records)).decode()
        assert raw.startswith('[\n  {\n    "id": ')

    def test_totals_agree_with_csv(self, make_report, sample_records):
        report = make_report(sample_records)
        json_minutes = sum(row["durationMinutes"] for row in json.loads(JSONExporter().export_week(report)))
        csv_minutes = sum(
            int(line.rsplit(",", 1)[1]) for line in CSVExporter().export_week(report).split("\r\n")[1:]
        )
        assert json_minutes == csv_minutes == 90


class TestCrossFormatRounding:
    """Markdown truncates to the minute; CSV and JSON round half up."""

    def test_partial_minute_differs_by_one(self, make_report, make_record):
        record = make_record(1, 89.5, datetime(2025, 11, 18, 9, 0, tzinfo=UTC), project_name="Alpha")
        report = make_report([record])

        md = MarkdownExporter().export_week(report, SummaryMode.SELF)
        csv_row = CSVExporter().export_week(report).split("\r\n")[1]
        [json_row] = json.loads(JSONExporter().export_week(report))

        assert "Total time: 1h 29m\n" in md
        assert "- [Alpha] Deep work (1h 29m, 09:00)" in md
        assert csv_row.endswith(",90")
        assert json_row["durationMinutes"] == 90
        assert json_row["durationMs"] == report.aggregate.total_ms == 5_370_000


class TestFormatting:
    def test_to_iso_normalizes_to_utc(self):
        from zoneinfo import ZoneInfo

        moment = datetime(2025, 11, 17, 9, 30, tzinfo=ZoneInfo("Europe/Berlin"))
        assert to_iso(moment) == "2025-11-17T08:30:00.000Z"
        assert to_iso(None) is None

    def test_export_filename(self):
        name = export_filename(SummaryMode.SELF, "Nov 17, 2025", "Nov 23, 2025", "pdf")
        assert name == "weekly-dev-log-Nov-17--2025-to-Nov-23--2025.pdf"

    def test_client_export_filename(self):
        name = export_filename(SummaryMode.CLIENT, "Nov 17, 2025", "Nov 23, 2025", "csv")
        assert name == "weekly-client-update-Nov-17--2025-to-Nov-23--2025.csv"
