# tickreplay/replay/dispatcher.py
from __future__ import annotations

from typing import Sequence

from tickreplay import logs
from tickreplay.events import Event
from tickreplay.replay.types import Window
from tickreplay.runtime.base import Runtime
from tickreplay.utils.errors import DispatchFailure


class Dispatcher:
    """
    一个 window 的交付：

      publish(e1) → publish(e2) → ... → advance_time(window.end)

    - 空 window 也推进一次时钟（只依赖时间的 trigger 仍然触发）
    - window.end 低于当前时钟时拒绝，时钟永不回退
    - runtime 异常包装成 DispatchFailure
    """

    def __init__(self, runtime: Runtime):
        self.runtime = runtime

    def dispatch(self, window: Window, events: Sequence[Event]) -> int:
        clock = self.runtime.current_time
        if clock is not None and window.end < clock:
            raise DispatchFailure(window, f"[Dispatcher] window end {window.end} < runtime clock {clock}")

        try:
            for event in events:
                self.runtime.publish(event)
            self.runtime.advance_time(window.end)
        except Exception as e:
            raise DispatchFailure(window, f"[Dispatcher] runtime error: {e}") from e

        logs.debug(f"[Dispatcher] window={window} published={len(events)} clock={window.end}")
        return len(events)
