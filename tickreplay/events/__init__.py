# tickreplay/events/__init__.py
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Tuple, Type

from tickreplay.utils.logger import logs


# -------------------------
# Base
# -------------------------
@dataclass(frozen=True)
class Event:
    """
    任何可被 runtime 消费的事件；time = 事件发生时间（epoch us）
    """
    time: int


@dataclass(frozen=True)
class RemoteEvent(Event):
    """
    来自外部（交易所）的事件，额外携带本地接收时间。

    time_received 通常 >= time；数据里出现反例时只告警，照常 replay
    """
    time_received: int
    exchange: str
    symbol: str

    kind: ClassVar[str] = ""

    def __post_init__(self):
        if self.time_received < self.time:
            logs.warning(
                f"[{type(self).__name__}] time_received < time: "
                f"{self.time_received} < {self.time} ({self.exchange}:{self.symbol})"
            )


# -------------------------
# Market
# -------------------------
@dataclass(frozen=True)
class Trade(RemoteEvent):
    price: float
    volume: float
    remote_key: Optional[str] = None     # 交易所侧 trade id

    kind: ClassVar[str] = "trade"


@dataclass(frozen=True)
class Book(RemoteEvent):
    """
    Order-book snapshot；bid 由高到低，ask 由低到高
    """
    bid_prices: Tuple[float, ...]
    bid_volumes: Tuple[float, ...]
    ask_prices: Tuple[float, ...]
    ask_volumes: Tuple[float, ...]

    kind: ClassVar[str] = "book"

    def __post_init__(self):
        super().__post_init__()
        if len(self.bid_prices) != len(self.bid_volumes):
            raise ValueError(f"[Book] bid levels mismatch: {len(self.bid_prices)} != {len(self.bid_volumes)}")
        if len(self.ask_prices) != len(self.ask_volumes):
            raise ValueError(f"[Book] ask levels mismatch: {len(self.ask_prices)} != {len(self.ask_volumes)}")

    @property
    def best_bid(self) -> Optional[float]:
        return self.bid_prices[0] if self.bid_prices else None

    @property
    def best_ask(self) -> Optional[float]:
        return self.ask_prices[0] if self.ask_prices else None


# kind name → event class（config / CLI / store 目录名共用）
EVENT_KINDS: Dict[str, Type[RemoteEvent]] = {
    Trade.kind: Trade,
    Book.kind: Book,
}


def kind_of(name: str) -> Type[RemoteEvent]:
    try:
        return EVENT_KINDS[name]
    except KeyError:
        raise KeyError(f"unknown event kind: {name}") from None


__all__ = ["Event", "RemoteEvent", "Trade", "Book", "EVENT_KINDS", "kind_of"]
