#!filepath: tests/replay/test_merger.py
from tickreplay.events import Book, Trade
from tickreplay.replay.merger import is_ordered, merge
from tickreplay.replay.types import OrderMode


def test_merge_orders_across_kinds(trade, book):
    per_kind = {
        Trade: [trade(30), trade(10)],
        Book: [book(20), book(5)],
    }

    out = merge(per_kind, OrderMode.EVENT_TIME)

    assert [e.time for e in out] == [5, 10, 20, 30]
    assert is_ordered(out, OrderMode.EVENT_TIME)


def test_merge_is_stable_on_ties(trade, book):
    """同一时间：先 kind 拼接顺序，再 store 返回顺序"""
    t1 = trade(10, price=1.0)
    t2 = trade(10, price=2.0)
    b1 = book(10)

    out = merge({Trade: [t1, t2], Book: [b1]}, OrderMode.EVENT_TIME)

    assert out == [t1, t2, b1]


def test_merge_by_receipt_time(trade):
    events = [trade(10, 12), trade(20, 19), trade(30, 35)]

    by_event = merge([events], OrderMode.EVENT_TIME)
    by_receipt = merge([events], OrderMode.RECEIPT_TIME)

    assert [e.time for e in by_event] == [10, 20, 30]
    assert [e.time_received for e in by_receipt] == [12, 19, 35]
    assert [e.time for e in by_receipt] == [10, 20, 30]


def test_merge_receipt_time_reorders(trade):
    late = trade(10, 50)
    early = trade(20, 21)

    out = merge({Trade: [late, early]}, OrderMode.RECEIPT_TIME)

    assert out == [early, late]
    assert not is_ordered(out, OrderMode.EVENT_TIME)


def test_merge_empty():
    assert merge({Trade: [], Book: []}, OrderMode.EVENT_TIME) == []
