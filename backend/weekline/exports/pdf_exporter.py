"""PDF export of the weekly summary using WeasyPrint and Jinja2.

The HTML is rendered first (and is useful on its own for debugging); WeasyPrint
then lays it out on A4 pages. Long project tables paginate with the header row
repeated on each page.
"""

import asyncio
from datetime import UTC, datetime

import structlog
from jinja2 import Environment, FileSystemLoader

from weekline.core.exceptions import PDFRenderError
from weekline.domain.durations import format_duration
from weekline.domain.project_colors import PROJECT_COLOR_HEX, normalize_color
from weekline.domain.report import WeekReport
from weekline.domain.summary import SummaryMode, SummaryVocabulary
from weekline.exports.markdown_exporter import MARKDOWN_TEMPLATE_DIR

logger = structlog.get_logger(__name__)

TEMPLATE_DIR = MARKDOWN_TEMPLATE_DIR.parent


def _color_hex(color: str | None) -> str:
    return PROJECT_COLOR_HEX[normalize_color(color)]


class PDFExporter:
    """Export a week as a printable PDF.

    All PDF generation runs in a thread pool via asyncio.to_thread() so layout
    never blocks the event loop.
    """

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=True,
        )
        self.env.filters["duration"] = format_duration
        self.env.filters["color_hex"] = _color_hex

    def render_html(
        self,
        report: WeekReport,
        mode: SummaryMode = SummaryMode.SELF,
        owner_email: str | None = None,
        client_name: str | None = None,
        generated_at: datetime | None = None,
    ) -> str:
        """Render the HTML that WeasyPrint turns into a PDF (for testing/debugging).

        Args:
            report: Aggregated week plus highlight and labels
            mode: Picks title, metric labels and project heading
            owner_email: Shown as "Prepared by"
            client_name: Optional client line in the header
            generated_at: Footer date (defaults to now)

        Returns:
            HTML string
        """
        generated = (generated_at or datetime.now(UTC)).astimezone(report.tz)
        template = self.env.get_template("weekly_summary.html")
        return template.render(
            vocab=SummaryVocabulary.for_mode(mode),
            aggregate=report.aggregate,
            start_label=report.start_label,
            end_label=report.end_label,
            highlight=(report.highlight or "").strip(),
            owner_email=owner_email or "",
            client_name=(client_name or "").strip(),
            generated_date=f"{generated:%b} {generated.day}, {generated.year}",
        )

    async def export_week(
        self,
        report: WeekReport,
        mode: SummaryMode = SummaryMode.SELF,
        owner_email: str | None = None,
        client_name: str | None = None,
        generated_at: datetime | None = None,
    ) -> bytes:
        """Export a week as PDF bytes.

        Raises:
            PDFRenderError: WeasyPrint is unavailable or failed to render
        """
        html_content = self.render_html(report, mode, owner_email, client_name, generated_at)

        try:
            from weasyprint import HTML
            from weasyprint.text.fonts import FontConfiguration
        except ImportError as e:
            raise PDFRenderError("WeasyPrint is not available") from e

        font_config = FontConfiguration()

        try:
            pdf_bytes = await asyncio.to_thread(
                lambda: HTML(string=html_content, base_url=str(TEMPLATE_DIR)).write_pdf(
                    font_config=font_config,
                )
            )
        except Exception as e:
            logger.error("pdf_render_failed", error=str(e), error_type=type(e).__name__)
            raise PDFRenderError("Failed to render PDF") from e

        return pdf_bytes
