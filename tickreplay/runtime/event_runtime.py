# tickreplay/runtime/event_runtime.py
from __future__ import annotations

import heapq
from typing import Callable, List, Optional, Tuple

from tickreplay import logs
from tickreplay.events import Event
from tickreplay.utils.errors import ClockRegression

Listener = Callable[[Event], None]
TimerCallback = Callable[[int], None]


class EventRuntime:
    """
    进程内 runtime：

    - publish      : 事件按调用顺序交给所有 listener
    - advance_time : 时钟单调推进；触发 due <= 新时钟 的 timer（按 due 顺序）
    - 时钟回退直接报 ClockRegression
    """

    def __init__(self, initial_time: Optional[int] = None):
        self._clock: Optional[int] = initial_time
        self._listeners: List[Listener] = []
        # heap item: (due_us, seq, callback)
        self._timers: List[Tuple[int, int, TimerCallback]] = []
        self._seq = 0
        self.last_event_time: Optional[int] = None
        self.events_published = 0

    @property
    def current_time(self) -> Optional[int]:
        return self._clock

    # --------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def schedule_at(self, due_us: int, callback: TimerCallback) -> None:
        heapq.heappush(self._timers, (due_us, self._seq, callback))
        self._seq += 1

    # --------------------------------------------------
    def publish(self, event: Event, at: Optional[int] = None) -> None:
        at = event.time if at is None else at
        if self._clock is not None and at < self._clock:
            logs.warning(f"[EventRuntime] late event: {at} < clock {self._clock} ({type(event).__name__})")

        self.last_event_time = at
        self.events_published += 1
        for listener in list(self._listeners):
            listener(event)

    def advance_time(self, ts_us: int) -> None:
        if self._clock is not None and ts_us < self._clock:
            raise ClockRegression(f"[EventRuntime] clock regression: {ts_us} < {self._clock}")

        self._clock = ts_us

        # 时间触发（窗口内没有事件时同样触发）
        while self._timers and self._timers[0][0] <= ts_us:
            due, _, callback = heapq.heappop(self._timers)
            callback(due)
