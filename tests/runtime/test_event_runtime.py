#!filepath: tests/runtime/test_event_runtime.py
import pytest

from tickreplay.runtime import Context, EventRuntime, Runtime
from tickreplay.replay.time_provider import EventTimeManager
from tickreplay.replay.types import OrderMode, ReplayRange
from tickreplay.utils.errors import ClockRegression


def test_listeners_receive_in_order(trade):
    rt = EventRuntime()
    seen = []
    rt.subscribe(seen.append)

    rt.publish(trade(1))
    rt.publish(trade(2))

    assert [e.time for e in seen] == [1, 2]
    assert rt.events_published == 2
    assert rt.last_event_time == 2


def test_unsubscribe(trade):
    rt = EventRuntime()
    seen = []
    unsubscribe = rt.subscribe(seen.append)
    unsubscribe()

    rt.publish(trade(1))

    assert seen == []


def test_clock_never_moves_backward():
    rt = EventRuntime(initial_time=10)
    rt.advance_time(10)
    rt.advance_time(20)

    with pytest.raises(ClockRegression):
        rt.advance_time(19)
    assert rt.current_time == 20


def test_timers_fire_in_due_order():
    rt = EventRuntime(initial_time=0)
    fired = []
    rt.schedule_at(30, fired.append)
    rt.schedule_at(10, fired.append)
    rt.schedule_at(50, fired.append)

    rt.advance_time(40)
    assert fired == [10, 30]

    rt.advance_time(50)
    assert fired == [10, 30, 50]


def test_context_uses_time_provider(trade):
    tp = EventTimeManager(ReplayRange(5, 100, OrderMode.RECEIPT_TIME), OrderMode.RECEIPT_TIME)
    ctx = Context.create(tp)

    assert ctx.current_time == 5
    ctx.publish(trade(10, 12))

    assert ctx.current_runtime().last_event_time == 12


def test_context_satisfies_runtime_protocol():
    assert isinstance(Context.create(), Runtime)
    assert isinstance(EventRuntime(), Runtime)


def test_time_provider_without_range(trade):
    tp = EventTimeManager(None, OrderMode.EVENT_TIME)

    assert tp.initial_time() is None
    assert tp.next_time(trade(7, 9)) == 7
