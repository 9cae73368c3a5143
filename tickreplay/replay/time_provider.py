# tickreplay/replay/time_provider.py
from __future__ import annotations

from typing import Optional

from tickreplay.events import Event
from tickreplay.replay.types import OrderMode, ReplayRange, effective_time


class EventTimeManager:
    """
    TimeProvider：
      - initial_time : replay 区间起点
      - next_time    : 事件有效时间（由 OrderMode 决定）
    """

    def __init__(self, replay_range: Optional[ReplayRange], mode: OrderMode):
        self.replay_range = replay_range
        self.mode = mode

    def initial_time(self) -> Optional[int]:
        if self.replay_range is None:
            return None
        return self.replay_range.start

    def next_time(self, event: Event) -> int:
        return effective_time(event, self.mode)
