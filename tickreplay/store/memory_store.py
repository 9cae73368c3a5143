# tickreplay/store/memory_store.py
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Type

from tickreplay import logs
from tickreplay.events import RemoteEvent
from tickreplay.store.base import DEFAULT_PAGE_SIZE, Aggregate, EventStore, T, check_time_field
from tickreplay.utils.errors import UserInputError


class InMemoryEventStore(EventStore):
    """
    进程内事件仓库（测试 / ad-hoc 使用），语义与 ParquetEventStore 一致：
      - 按插入顺序返回
      - 时间过滤为闭区间
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.page_size = page_size
        self._rows: Dict[Type[RemoteEvent], List[RemoteEvent]] = defaultdict(list)
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> "InMemoryEventStore":
        self._open = True
        return self

    def reset_for_tests(self) -> "InMemoryEventStore":
        logs.info("[InMemoryEventStore] resetting store")
        self._rows.clear()
        return self.open()

    def close(self) -> None:
        self._open = False

    # --------------------------------------------------
    def insert(self, *events: RemoteEvent) -> int:
        self._check_open()
        for ev in events:
            if not isinstance(ev, RemoteEvent):
                raise TypeError(f"[InMemoryEventStore] not a RemoteEvent: {ev!r}")
        for ev in events:
            self._rows[type(ev)].append(ev)
        return len(events)

    def _select(self, kind, time_field, start, end) -> List[RemoteEvent]:
        rows = self._rows.get(kind, [])
        if time_field is None:
            return list(rows)
        return [
            ev for ev in rows
            if (start is None or getattr(ev, time_field) >= start)
            and (end is None or getattr(ev, time_field) <= end)
        ]

    def query_list(self, kind: Type[T], time_field: str, start: int, end: int) -> List[T]:
        self._check_open()
        check_time_field(time_field)
        return self._select(kind, time_field, start, end)

    def query_scalar(self, aggregate: Aggregate, kind: Type[T], time_field: str) -> Optional[int]:
        self._check_open()
        check_time_field(time_field)
        fn = {"min": min, "max": max}.get(aggregate)
        if fn is None:
            raise UserInputError(f"unsupported aggregate: {aggregate!r}")
        rows = self._rows.get(kind, [])
        if not rows:
            return None
        return fn(getattr(ev, time_field) for ev in rows)

    def count(self, kind: Type[T]) -> int:
        self._check_open()
        return len(self._rows.get(kind, []))

    def _page(self, kind, time_field, start, end, first_result, max_results):
        self._check_open()
        return self._select(kind, time_field, start, end)[first_result:first_result + max_results]
