"""Fixed palette of project color keys."""

DEFAULT_PROJECT_COLOR = "slate"

PROJECT_COLOR_KEYS = ["slate", "blue", "green", "purple", "amber", "rose"]

PROJECT_COLOR_LABELS = {
    "slate": "Neutral",
    "blue": "Blue",
    "green": "Green",
    "purple": "Purple",
    "amber": "Amber",
    "rose": "Rose",
}

# Hex swatches used by the PDF template
PROJECT_COLOR_HEX = {
    "slate": "#94A3B8",
    "blue": "#60A5FA",
    "green": "#34D399",
    "purple": "#C084FC",
    "amber": "#FBBF24",
    "rose": "#FB7185",
}


def normalize_color(color: str | None) -> str:
    """Return a known color key, falling back to the neutral one."""
    if isinstance(color, str) and color.strip() in PROJECT_COLOR_KEYS:
        return color.strip()
    return DEFAULT_PROJECT_COLOR


def color_label(color: str | None) -> str:
    return PROJECT_COLOR_LABELS[normalize_color(color)]
