# tickreplay/runtime/base.py
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from tickreplay.events import Event


@runtime_checkable
class Runtime(Protocol):
    """
    下游时间推进型 runtime 的最小契约：
      - publish(event)      : 交付一个事件
      - advance_time(ts_us) : 推进时钟（不得回退）
      - current_time        : 当前时钟（未初始化时为 None）
    """

    @property
    def current_time(self) -> Optional[int]:
        ...

    def publish(self, event: Event) -> None:
        ...

    def advance_time(self, ts_us: int) -> None:
        ...


@runtime_checkable
class TimeProvider(Protocol):
    def initial_time(self) -> Optional[int]:
        ...

    def next_time(self, event: Event) -> int:
        ...
