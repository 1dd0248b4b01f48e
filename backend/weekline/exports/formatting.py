"""Helpers shared by the exporters."""

import re
from datetime import UTC, datetime, tzinfo

from weekline.domain.summary import SummaryMode, SummaryVocabulary


def to_iso(moment: datetime | None) -> str | None:
    """ISO-8601 UTC timestamp with millisecond precision ("...T09:00:00.000Z")."""
    if moment is None:
        return None
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def local_date_key(moment: datetime, tz: tzinfo) -> str:
    return moment.astimezone(tz).date().isoformat()


def clock(moment: datetime, tz: tzinfo) -> str:
    return moment.astimezone(tz).strftime("%H:%M")


def _safe_label(label: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "-", label)


def export_filename(mode: SummaryMode, start_label: str, end_label: str, extension: str) -> str:
    """e.g. ``weekly-dev-log-Nov-17--2025-to-Nov-23--2025.pdf``."""
    base = SummaryVocabulary.for_mode(mode).filename_base
    return f"{base}-{_safe_label(start_label)}-to-{_safe_label(end_label)}.{extension}"
