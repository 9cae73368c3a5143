# tickreplay/replay/fetcher.py
from __future__ import annotations

from typing import Dict, List, Literal, Sequence, Type

from tickreplay import logs
from tickreplay.events import Book, RemoteEvent, Trade
from tickreplay.replay.types import OrderMode, Window, effective_time
from tickreplay.store.base import EventStore
from tickreplay.utils.errors import FetchFailure

Boundary = Literal["closed", "half_open"]


class EventFetcher:
    """
    单个 window 的取数：

    - 每个 kind 一次 query_list，过滤字段 = mode.time_field
    - 默认闭区间 [window.start, window.end]：正好落在边界上的事件会被相邻两个 window 各取一次
    - boundary="half_open" 时除最后一个 window 外丢弃 == window.end 的事件
    - store 异常包装成 FetchFailure，不重试
    """

    def __init__(
        self,
        store: EventStore,
        mode: OrderMode,
        kinds: Sequence[Type[RemoteEvent]] = (Trade, Book),
        boundary: Boundary = "closed",
    ):
        self.store = store
        self.mode = mode
        self.kinds = tuple(kinds)
        self.boundary = boundary

    def fetch(self, window: Window, *, last: bool = True) -> Dict[Type[RemoteEvent], List[RemoteEvent]]:
        field = self.mode.time_field
        out: Dict[Type[RemoteEvent], List[RemoteEvent]] = {}

        for kind in self.kinds:
            try:
                rows = self.store.query_list(kind, field, window.start, window.end)
            except Exception as e:
                raise FetchFailure(window, f"[EventFetcher] {kind.__name__} query failed: {e}") from e

            if self.boundary == "half_open" and not last:
                rows = [ev for ev in rows if window.contains(effective_time(ev, self.mode))]

            out[kind] = rows

        logs.debug(
            f"[EventFetcher] window={window} "
            + " ".join(f"{k.kind}={len(v)}" for k, v in out.items())
        )
        return out
