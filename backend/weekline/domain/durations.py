"""Duration formatting.

Two rounding rules coexist: on-screen and Markdown durations
truncate to whole minutes, while CSV/JSON exports and charts round to the
nearest minute. A single session can therefore differ by one minute between
the two.
"""

MS_PER_MINUTE = 60_000


def format_duration(ms: int) -> str:
    """Format a duration in ms as "1h 23m" or "12m"."""
    if ms <= 0:
        return "0m"

    total_minutes = int(ms) // MS_PER_MINUTE
    hours, minutes = divmod(total_minutes, 60)

    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def round_minutes(ms: int) -> int:
    """Nearest whole minute, halves rounded up."""
    return (int(ms) + MS_PER_MINUTE // 2) // MS_PER_MINUTE


def minutes_to_ms(minutes: float) -> int:
    return int(round(minutes * MS_PER_MINUTE))
