#!filepath: tests/events/test_events.py
import pytest
from loguru import logger

from tickreplay.events import Book, EVENT_KINDS, Trade, kind_of
from tickreplay.replay.types import OrderMode, ReplayRange, effective_time
from tickreplay.utils.errors import UserInputError


def test_receipt_before_occurrence_is_kept():
    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)), level="WARNING")

    t = Trade(time=20, time_received=19, exchange="X", symbol="A", price=1.0, volume=1.0)

    logger.remove(sink_id)
    assert effective_time(t, OrderMode.RECEIPT_TIME) == 19
    assert "time_received < time: 19 < 20" in "\n".join(captured)


def test_book_levels_validated():
    with pytest.raises(ValueError):
        Book(time=1, time_received=1, exchange="X", symbol="A",
             bid_prices=(1.0,), bid_volumes=(), ask_prices=(), ask_volumes=())


def test_effective_time(trade):
    t = trade(10, 12)

    assert effective_time(t, OrderMode.EVENT_TIME) == 10
    assert effective_time(t, OrderMode.RECEIPT_TIME) == 12


def test_order_mode():
    assert OrderMode.from_flag(True) is OrderMode.RECEIPT_TIME
    assert OrderMode.from_flag(False) is OrderMode.EVENT_TIME
    assert OrderMode.RECEIPT_TIME.time_field == "time_received"
    assert OrderMode.EVENT_TIME.time_field == "time"


def test_kind_registry():
    assert EVENT_KINDS == {"trade": Trade, "book": Book}
    assert kind_of("book") is Book
    with pytest.raises(KeyError):
        kind_of("quote")


def test_replay_range_invariant():
    with pytest.raises(UserInputError):
        ReplayRange(10, 5)
    assert ReplayRange(5, 5).duration == 0
