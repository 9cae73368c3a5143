# tickreplay/runtime/context.py
from __future__ import annotations

from typing import Callable, Optional

from tickreplay.events import Event
from tickreplay.runtime.base import TimeProvider
from tickreplay.runtime.event_runtime import EventRuntime, Listener, TimerCallback


class Context:
    """
    Replay 运行上下文：持有 runtime，时间语义由 TimeProvider 决定。

    replay 期间：
      - 初始时钟 = time_provider.initial_time()
      - 每个事件的有效时间 = time_provider.next_time(event)
    """

    def __init__(self, time_provider: Optional[TimeProvider] = None, runtime: Optional[EventRuntime] = None):
        self.time_provider = time_provider
        initial = time_provider.initial_time() if time_provider is not None else None
        self._runtime = runtime if runtime is not None else EventRuntime(initial_time=initial)

    @classmethod
    def create(cls, time_provider: Optional[TimeProvider] = None) -> "Context":
        return cls(time_provider)

    def current_runtime(self) -> EventRuntime:
        return self._runtime

    @property
    def current_time(self) -> Optional[int]:
        return self._runtime.current_time

    # --------------------------------------------------
    def publish(self, event: Event) -> None:
        at = self.time_provider.next_time(event) if self.time_provider is not None else event.time
        self._runtime.publish(event, at=at)

    def advance_time(self, ts_us: int) -> None:
        self._runtime.advance_time(ts_us)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._runtime.subscribe(listener)

    def schedule_at(self, due_us: int, callback: TimerCallback) -> None:
        self._runtime.schedule_at(due_us, callback)
