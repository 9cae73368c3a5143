# tickreplay/replay/merger.py
from __future__ import annotations

from typing import Iterable, List, Mapping, Type

from tickreplay.events import RemoteEvent
from tickreplay.replay.types import OrderMode, effective_time


def merge(per_kind: Mapping[Type[RemoteEvent], Iterable[RemoteEvent]] | Iterable[Iterable[RemoteEvent]],
          mode: OrderMode) -> List[RemoteEvent]:
    """
    整个 window 拼接后稳定排序（不是 k-way merge；window 大小保证内存有界）。

    同一有效时间的事件保持拼接顺序：先按 kind 的拼接顺序，再按 store 返回顺序。
    """
    lists = per_kind.values() if isinstance(per_kind, Mapping) else per_kind

    events: List[RemoteEvent] = []
    for rows in lists:
        events.extend(rows)

    # sorted 是稳定排序
    return sorted(events, key=lambda ev: effective_time(ev, mode))


def is_ordered(events: List[RemoteEvent], mode: OrderMode) -> bool:
    return all(
        effective_time(a, mode) <= effective_time(b, mode)
        for a, b in zip(events, events[1:])
    )
