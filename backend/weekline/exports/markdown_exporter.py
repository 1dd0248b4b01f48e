"""Markdown export of the weekly summary.

One template serves all three tones; the mode picks the vocabulary and the
(policy-resolved) view picks which sections render.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from weekline.domain.durations import format_duration
from weekline.domain.report import WeekReport
from weekline.domain.summary import (
    SummaryMode,
    SummarySections,
    SummaryView,
    SummaryVocabulary,
)
from weekline.exports.formatting import clock

MARKDOWN_TEMPLATE_DIR = Path(__file__).parent / "templates" / "markdown"


class MarkdownExporter:
    """Render a WeekReport as Markdown for pasting into docs or email."""

    def __init__(self):
        self.env = Environment(
            loader=FileSystemLoader(str(MARKDOWN_TEMPLATE_DIR)),
            autoescape=False,  # Markdown should NOT be escaped
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["duration"] = format_duration
        self.env.filters["clock"] = clock

    def export_week(
        self,
        report: WeekReport,
        mode: SummaryMode,
        view: SummaryView = SummaryView.FULL,
        client_name: str | None = None,
    ) -> str:
        """Export a week as a Markdown string.

        Args:
            report: Aggregated week plus highlight and labels
            mode: self / manager / client tone
            view: Requested sections; client mode is forced to totals
            client_name: Shown only in client mode

        Returns:
            Markdown string
        """
        template = self.env.get_template("weekly_summary.md.j2")
        return template.render(
            vocab=SummaryVocabulary.for_mode(mode),
            sections=SummarySections.for_request(mode, view),
            aggregate=report.aggregate,
            start_label=report.start_label,
            end_label=report.end_label,
            highlight=(report.highlight or "").strip(),
            client_name=(client_name or "").strip() if mode == SummaryMode.CLIENT else "",
            tz=report.tz,
        )
