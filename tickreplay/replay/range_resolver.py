# tickreplay/replay/range_resolver.py
from __future__ import annotations

from typing import Optional, Sequence, Type

from tickreplay import logs
from tickreplay.events import Book, RemoteEvent, Trade
from tickreplay.replay.types import OrderMode, ReplayRange
from tickreplay.store.base import EventStore
from tickreplay.utils.errors import RangeUnavailable


class RangeResolver:
    """
    请求 → 具体 [start, end)

    - start 缺省：各 kind 的 min(有效时间) 取最小
    - end   缺省：各 kind 的 max(有效时间) 取最大
    - 所有 store 都为空且需要推断边界 → None
    """

    def __init__(self, store: EventStore, kinds: Sequence[Type[RemoteEvent]] = (Trade, Book)):
        self.store = store
        self.kinds = tuple(kinds)

    def _bound(self, aggregate: str, mode: OrderMode) -> Optional[int]:
        values = [
            v for v in (
                self.store.query_scalar(aggregate, kind, mode.time_field)
                for kind in self.kinds
            )
            if v is not None
        ]
        if not values:
            return None
        return min(values) if aggregate == "min" else max(values)

    def events_start(self, mode: OrderMode) -> Optional[int]:
        return self._bound("min", mode)

    def events_end(self, mode: OrderMode) -> Optional[int]:
        return self._bound("max", mode)

    def resolve(
        self,
        start: Optional[int] = None,
        end: Optional[int] = None,
        mode: OrderMode = OrderMode.EVENT_TIME,
    ) -> Optional[ReplayRange]:
        if start is None:
            start = self.events_start(mode)
        if end is None:
            end = self.events_end(mode)

        if start is None or end is None:
            logs.warning(f"[RangeResolver] nothing to replay (start={start}, end={end}, mode={mode.value})")
            return None

        replay_range = ReplayRange(start=start, end=end, mode=mode)
        logs.info(f"[RangeResolver] resolved {replay_range}")
        return replay_range

    def resolve_or_raise(
        self,
        start: Optional[int] = None,
        end: Optional[int] = None,
        mode: OrderMode = OrderMode.EVENT_TIME,
    ) -> ReplayRange:
        replay_range = self.resolve(start, end, mode)
        if replay_range is None:
            raise RangeUnavailable(f"[RangeResolver] stores are empty, cannot infer range for {mode.value}")
        return replay_range
