"""Everything a renderer needs to describe one week."""

from dataclasses import dataclass
from datetime import tzinfo

from weekline.domain.aggregation import WeekAggregate
from weekline.domain.history import HistoryWindow
from weekline.domain.weeks import WeekRange, week_labels


@dataclass(frozen=True)
class WeekReport:
    week: WeekRange
    tz: tzinfo
    aggregate: WeekAggregate
    window: HistoryWindow
    highlight: str = ""
    project_id: int | None = None

    @property
    def labels(self) -> tuple[str, str]:
        return week_labels(self.week)

    @property
    def start_label(self) -> str:
        return self.labels[0]

    @property
    def end_label(self) -> str:
        return self.labels[1]

    @property
    def is_locked(self) -> bool:
        return self.window.is_locked
