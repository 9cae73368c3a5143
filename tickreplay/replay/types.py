# tickreplay/replay/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from tickreplay.events import Event, RemoteEvent
from tickreplay.utils.datetime_utils import DateTimeUtils as dtu
from tickreplay.utils.errors import UserInputError


class OrderMode(str, Enum):
    """
    EVENT_TIME   : 按事件发生时间（time）
    RECEIPT_TIME : 按原始记录系统的接收时间（time_received）
    """
    EVENT_TIME = "event_time"
    RECEIPT_TIME = "receipt_time"

    @classmethod
    def from_flag(cls, order_by_time_received: bool) -> "OrderMode":
        return cls.RECEIPT_TIME if order_by_time_received else cls.EVENT_TIME

    @property
    def time_field(self) -> str:
        return "time_received" if self is OrderMode.RECEIPT_TIME else "time"


def effective_time(event: Event, mode: OrderMode) -> int:
    """有效时间：range 过滤 + 排序共用同一个字段"""
    if mode is OrderMode.RECEIPT_TIME and isinstance(event, RemoteEvent):
        return event.time_received
    return event.time


@dataclass(frozen=True)
class ReplayRange:
    """
    [start, end) replay 区间，一次 run 内不可变
    """
    start: int
    end: int
    mode: OrderMode = OrderMode.EVENT_TIME

    def __post_init__(self):
        if self.start > self.end:
            raise UserInputError(f"[ReplayRange] start > end: {self.start} > {self.end}")

    @property
    def duration(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"[{dtu.fmt(self.start)}, {dtu.fmt(self.end)}) {self.mode.value}"


@dataclass(frozen=True)
class Window:
    """半开区间 [start, end)；长度由引擎配置决定"""
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    def contains(self, ts: int) -> bool:
        return self.start <= ts < self.end

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


class WindowState(str, Enum):
    PLANNED = "PLANNED"
    FETCHING = "FETCHING"
    MERGING = "MERGING"
    DISPATCHING = "DISPATCHING"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass
class WindowReport:
    seq: int
    window: Window
    state: WindowState = WindowState.PLANNED
    n_events: int = 0
    error: Optional[str] = None


@dataclass
class ReplayResult:
    """
    一次 run 的事实结果；range 为 None 表示无可 replay 的数据
    """
    range: Optional[ReplayRange]
    strategy: str = "inline"
    windows: List[WindowReport] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return self.range is None

    @property
    def n_events(self) -> int:
        return sum(w.n_events for w in self.windows)

    @property
    def n_windows(self) -> int:
        return len(self.windows)
