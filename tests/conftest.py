# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import pytest
from loguru import logger

from tickreplay import logs
from tickreplay.events import Book, Trade
from tickreplay.store import InMemoryEventStore, ParquetEventStore


@pytest.fixture(autouse=True)
def disable_file_logger():
    logs.disable_file_sink()
    logger.remove()
    logger.add(lambda msg: None)
    yield


# ============================================================
# event factories
# ============================================================
def make_trade(time: int, time_received: Optional[int] = None, symbol: str = "BTC.USD",
               price: float = 100.0, volume: float = 1.0, exchange: str = "BITFINEX") -> Trade:
    return Trade(
        time=time,
        time_received=time if time_received is None else time_received,
        exchange=exchange,
        symbol=symbol,
        price=price,
        volume=volume,
        remote_key=f"t{time}",
    )


def make_book(time: int, time_received: Optional[int] = None, symbol: str = "BTC.USD",
              exchange: str = "BITFINEX") -> Book:
    return Book(
        time=time,
        time_received=time if time_received is None else time_received,
        exchange=exchange,
        symbol=symbol,
        bid_prices=(99.0, 98.5),
        bid_volumes=(1.0, 2.0),
        ask_prices=(101.0, 101.5),
        ask_volumes=(1.5, 3.0),
    )


@pytest.fixture
def trade():
    return make_trade


@pytest.fixture
def book():
    return make_book


# ============================================================
# stores
# ============================================================
@pytest.fixture
def mem_store() -> InMemoryEventStore:
    store = InMemoryEventStore().open()
    yield store
    store.close()


@pytest.fixture
def parquet_store(tmp_path: Path) -> ParquetEventStore:
    store = ParquetEventStore(tmp_path / "events", page_size=3).open()
    yield store
    store.close()


# ============================================================
# runtime
# ============================================================
class RecordingRuntime:
    """
    记录所有 publish / advance_time 调用；时钟语义与 EventRuntime 一致
    """

    def __init__(self, initial_time: Optional[int] = None, fail_on_publish: Optional[int] = None):
        self.current_time = initial_time
        self.calls: List[Tuple[str, object]] = []
        self.fail_on_publish = fail_on_publish

    def publish(self, event) -> None:
        if self.fail_on_publish is not None and event.time == self.fail_on_publish:
            raise RuntimeError(f"runtime rejected event at {event.time}")
        self.calls.append(("publish", event))

    def advance_time(self, ts_us: int) -> None:
        if self.current_time is not None and ts_us < self.current_time:
            raise RuntimeError("clock regression")
        self.current_time = ts_us
        self.calls.append(("advance", ts_us))

    # ---------- 断言辅助 ----------
    @property
    def published(self) -> list:
        return [arg for name, arg in self.calls if name == "publish"]

    @property
    def advances(self) -> List[int]:
        return [arg for name, arg in self.calls if name == "advance"]


@pytest.fixture
def recording_runtime() -> RecordingRuntime:
    return RecordingRuntime()


@pytest.fixture
def make_runtime():
    return RecordingRuntime
