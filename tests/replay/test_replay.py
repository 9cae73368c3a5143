#!filepath: tests/replay/test_replay.py
import pytest

from tickreplay.config.replay_config import ReplayConfig
from tickreplay.events import Trade
from tickreplay.replay import OrderMode, Replay, ReplayRange


def _collect(replay):
    seen = []
    advances = []
    replay.context.subscribe(seen.append)
    runtime = replay.context.current_runtime()
    original = runtime.advance_time

    def spy(ts):
        advances.append(ts)
        original(ts)

    runtime.advance_time = spy
    return seen, advances


@pytest.fixture
def trades_10_20_30(parquet_store, trade):
    parquet_store.insert(trade(10, 12), trade(20, 19), trade(30, 35))
    return parquet_store


def test_event_time_scenario(trades_10_20_30):
    replay = Replay.all(store=trades_10_20_30)
    seen, advances = _collect(replay)

    result = replay.run()

    assert [e.time for e in seen] == [10, 20, 30]
    assert advances == [30]
    assert result.n_events == 3
    assert replay.context.current_time == 30


def test_receipt_time_scenario(trades_10_20_30):
    replay = Replay.all(order_by_time_received=True, store=trades_10_20_30)
    seen, advances = _collect(replay)

    replay.run()

    assert [e.time_received for e in seen] == [12, 19, 35]
    assert advances == [35]


def test_initial_clock_is_range_start(trades_10_20_30):
    replay = Replay.between(5, 40, store=trades_10_20_30)

    assert replay.replay_range == ReplayRange(5, 40, OrderMode.EVENT_TIME)
    assert replay.context.current_time == 5


def test_since_until(trades_10_20_30):
    assert Replay.since(15, store=trades_10_20_30).replay_range == ReplayRange(15, 30)
    assert Replay.until(25, store=trades_10_20_30).replay_range == ReplayRange(10, 25)


def test_accepts_datetime_strings(parquet_store, trade):
    replay = Replay.between("1970-01-01 00:00:00", "1970-01-01 00:00:01", store=parquet_store)

    assert replay.replay_range == ReplayRange(0, 1_000_000)


def test_during(trades_10_20_30):
    r = ReplayRange(0, 100, OrderMode.RECEIPT_TIME)
    replay = Replay.during(r, store=trades_10_20_30)

    assert replay.mode is OrderMode.RECEIPT_TIME
    assert replay.run().n_events == 3


def test_empty_store_no_runtime_calls(parquet_store):
    replay = Replay.all(store=parquet_store)
    seen, advances = _collect(replay)

    result = replay.run()

    assert replay.empty
    assert result.empty
    assert seen == [] and advances == []
    assert replay.context.current_time is None


def test_windowed_run_with_timer(parquet_store, trade):
    parquet_store.insert(*[trade(t) for t in (0, 15, 55, 99)])
    replay = Replay.between(0, 100, store=parquet_store)
    replay.scheduler.window_us = 40
    fired = []
    replay.context.schedule_at(60, fired.append)
    seen, advances = _collect(replay)

    result = replay.run()

    assert result.strategy == "queued"
    assert advances == [40, 80, 100]
    assert [e.time for e in seen] == [0, 15, 55, 99]
    assert fired == [60]


def test_submit_returns_handle(trades_10_20_30):
    handle = Replay.all(store=trades_10_20_30, cfg=ReplayConfig(strategy="queued")).submit()

    result = handle.result(timeout=5)

    assert result.n_events == 3
    assert not handle.running


def test_kinds_from_config(parquet_store, trade, book):
    parquet_store.insert(trade(10), book(20))
    replay = Replay.all(store=parquet_store, cfg=ReplayConfig(kinds=["trade"]))
    seen, _ = _collect(replay)

    replay.run()

    assert replay.replay_range == ReplayRange(10, 10)
    assert all(isinstance(e, Trade) for e in seen)


def test_default_cfg_comes_from_app_config(trades_10_20_30, monkeypatch):
    from tickreplay.config.app_config import AppConfig

    custom = AppConfig(replay=ReplayConfig(window_days=7, strategy="queued", kinds=["trade"]))
    monkeypatch.setattr(AppConfig, "load", staticmethod(lambda path=None: custom))

    replay = Replay.all(store=trades_10_20_30)

    assert replay.cfg.strategy == "queued"
    assert replay.scheduler.strategy == "queued"
    assert replay.scheduler.kinds == (Trade,)
    assert replay.run().strategy == "queued"
