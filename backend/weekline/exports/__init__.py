"""Weekly report exporters.

Provides:
- MarkdownExporter: copy-paste summary in self/manager/client tone
- CSVExporter / JSONExporter: one row/object per session
- PDFExporter: paginated project table rendered with WeasyPrint
"""

from weekline.exports.csv_exporter import CSVExporter
from weekline.exports.json_exporter import JSONExporter
from weekline.exports.markdown_exporter import MarkdownExporter
from weekline.exports.pdf_exporter import PDFExporter

__all__ = ["CSVExporter", "JSONExporter", "MarkdownExporter", "PDFExporter"]
