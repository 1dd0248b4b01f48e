"""Stopwatch state for an unsaved focus session.

An explicit state object with pure transitions; callers pass the current
epoch-millisecond clock. Nothing is persisted until the session is submitted.
"""

from dataclasses import dataclass, replace

from weekline.domain.durations import MS_PER_MINUTE


@dataclass(frozen=True)
class TimerState:
    is_running: bool = False
    elapsed_ms: int = 0
    start_timestamp: int | None = None  # epoch ms, adjusted so elapsed = now - start
    project_name: str | None = None
    intention: str | None = None

    @property
    def elapsed_minutes(self) -> int:
        """Whole minutes, used to pre-fill the new-session form."""
        return self.elapsed_ms // MS_PER_MINUTE


def start(project_name: str | None, intention: str | None, now_ms: int) -> TimerState:
    return TimerState(
        is_running=True,
        elapsed_ms=0,
        start_timestamp=now_ms,
        project_name=project_name,
        intention=intention,
    )


def tick(state: TimerState, now_ms: int) -> TimerState:
    if not state.is_running or state.start_timestamp is None:
        return state
    return replace(state, elapsed_ms=max(0, now_ms - state.start_timestamp))


def pause(state: TimerState, now_ms: int) -> TimerState:
    if not state.is_running or state.start_timestamp is None:
        return state
    return replace(
        state,
        is_running=False,
        start_timestamp=None,
        elapsed_ms=max(0, now_ms - state.start_timestamp),
    )


def resume(state: TimerState, now_ms: int) -> TimerState:
    if state.is_running or state.elapsed_ms <= 0:
        return state
    return replace(state, is_running=True, start_timestamp=now_ms - state.elapsed_ms)


def reset() -> TimerState:
    return TimerState()
