# tickreplay/replay/window_planner.py
from __future__ import annotations

from typing import Iterator, List

from tickreplay.replay.types import ReplayRange, Window
from tickreplay.utils.errors import UserInputError


def iter_windows(replay_range: ReplayRange, duration: int) -> Iterator[Window]:
    """
    连续、不重叠、覆盖整个区间的 window 序列；最后一个 window 截断到 range.end。
    区间不超过一个 duration 时只产生一个 window（等于整个区间）。
    """
    if duration <= 0:
        raise UserInputError(f"[WindowPlanner] window duration must be > 0, got {duration}")

    start, end = replay_range.start, replay_range.end
    if end - start <= duration:
        yield Window(start, end)
        return

    now = start
    while now < end:
        step_end = min(now + duration, end)
        yield Window(now, step_end)
        now = step_end


def plan(replay_range: ReplayRange, duration: int) -> List[Window]:
    return list(iter_windows(replay_range, duration))
