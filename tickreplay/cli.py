#!filepath: tickreplay/cli.py
from __future__ import annotations

from typing import List, Optional

import pandas as pd
import typer
from rich import print

from tickreplay import AppConfig, __version__, init_logging, logs
from tickreplay.events import Book, RemoteEvent, Trade, kind_of, EVENT_KINDS
from tickreplay.observability.instrumentation import Instrumentation
from tickreplay.replay import Replay, ReplayResult
from tickreplay.store import open_store
from tickreplay.utils.datetime_utils import DateTimeUtils
from tickreplay.utils.errors import UserInputError

app = typer.Typer(help="TickReplay CLI")
replay_app = typer.Typer(help="Replay stored trades / books in time order")
app.add_typer(replay_app, name="replay")


def _load_config(window_days: Optional[float], strategy: Optional[str]) -> AppConfig:
    cfg = AppConfig.load()
    init_logging(cfg.log)
    if window_days is not None:
        cfg.replay.window_days = window_days
    if strategy is not None:
        if strategy not in ("auto", "inline", "queued"):
            raise UserInputError(f"unknown strategy: {strategy}")
        cfg.replay.strategy = strategy
    return cfg


def _levels(value) -> tuple:
    """'10.1;10.0;9.9' → (10.1, 10.0, 9.9)"""
    if value is None or (isinstance(value, float) and pd.isna(value)) or value == "":
        return ()
    return tuple(float(x) for x in str(value).split(";"))


def _ts(value) -> int:
    """CSV 单元格 / CLI 参数 → epoch us；纯数字按 us 处理"""
    if isinstance(value, str):
        return DateTimeUtils.to_us(value)
    return int(value)


def rows_to_events(kind: str, df: pd.DataFrame) -> List[RemoteEvent]:
    cls = kind_of(kind)
    events: List[RemoteEvent] = []
    for row in df.to_dict("records"):
        common = dict(
            time=_ts(row["time"]),
            time_received=_ts(row.get("time_received", row["time"])),
            exchange=str(row["exchange"]),
            symbol=str(row["symbol"]),
        )
        if cls is Trade:
            key = row.get("remote_key")
            events.append(Trade(
                **common,
                price=float(row["price"]),
                volume=float(row["volume"]),
                remote_key=None if key is None or pd.isna(key) else str(key),
            ))
        else:
            events.append(Book(
                **common,
                bid_prices=_levels(row.get("bid_prices")),
                bid_volumes=_levels(row.get("bid_volumes")),
                ask_prices=_levels(row.get("ask_prices")),
                ask_volumes=_levels(row.get("ask_volumes")),
            ))
    return events


def _summary(result: ReplayResult) -> None:
    if result.empty:
        print("[yellow]Nothing to replay: stores are empty[/yellow]")
        return
    print(
        f"[green]Replayed {result.n_events} events in {result.n_windows} windows "
        f"({result.strategy})[/green] {result.range}"
    )


def _run(replay: Replay) -> None:
    replay.context.subscribe(
        lambda ev: logs.debug(f"[cli] {type(ev).__name__} {ev.symbol} @ {DateTimeUtils.fmt(ev.time)}")
    )
    _summary(replay.run())


# --------------------------------------------------
@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def ingest(kind: str, csv: str):
    """
    从 CSV 导入 trade / book 到事件仓库
    """
    if kind not in EVENT_KINDS:
        raise typer.BadParameter(f"kind must be one of {list(EVENT_KINDS)}")
    cfg = _load_config(None, None)

    df = pd.read_csv(csv)
    events = rows_to_events(kind, df)

    store = open_store(cfg.store)
    try:
        n = store.insert_many(events)
    finally:
        store.close()
    print(f"[green]Ingested {n} {kind} rows from {csv}[/green]")


@app.command()
def stats(receipt_time: bool = typer.Option(False, "--receipt-time")):
    """
    每个 kind 的行数与时间范围
    """
    cfg = _load_config(None, None)
    field = "time_received" if receipt_time else "time"
    store = open_store(cfg.store)
    try:
        for name, cls in EVENT_KINDS.items():
            lo = store.query_scalar("min", cls, field)
            hi = store.query_scalar("max", cls, field)
            print(f"{name:<6} rows={store.count(cls):<10} {field}: {DateTimeUtils.fmt(lo)} → {DateTimeUtils.fmt(hi)}")
    finally:
        store.close()


# --------------------------------------------------
# replay 子命令
# --------------------------------------------------
ReceiptOpt = typer.Option(False, "--receipt-time", help="order by time received instead of event time")
WindowOpt = typer.Option(None, "--window-days")
StrategyOpt = typer.Option(None, "--strategy", help="auto / inline / queued")


def _replay(factory, *args, receipt_time: bool, window_days, strategy) -> None:
    cfg = _load_config(window_days, strategy)
    store = open_store(cfg.store)
    try:
        replay = factory(
            *args,
            order_by_time_received=receipt_time or cfg.replay.order_by_time_received,
            store=store,
            cfg=cfg.replay,
            inst=Instrumentation(enabled=True),
        )
        _run(replay)
    finally:
        store.close()


@replay_app.command("all")
def replay_all(receipt_time: bool = ReceiptOpt, window_days: Optional[float] = WindowOpt,
               strategy: Optional[str] = StrategyOpt):
    _replay(Replay.all, receipt_time=receipt_time, window_days=window_days, strategy=strategy)


@replay_app.command("since")
def replay_since(start: str, receipt_time: bool = ReceiptOpt, window_days: Optional[float] = WindowOpt,
                 strategy: Optional[str] = StrategyOpt):
    _replay(Replay.since, _ts(start), receipt_time=receipt_time, window_days=window_days, strategy=strategy)


@replay_app.command("until")
def replay_until(end: str, receipt_time: bool = ReceiptOpt, window_days: Optional[float] = WindowOpt,
                 strategy: Optional[str] = StrategyOpt):
    _replay(Replay.until, _ts(end), receipt_time=receipt_time, window_days=window_days, strategy=strategy)


@replay_app.command("between")
def replay_between(start: str, end: str, receipt_time: bool = ReceiptOpt,
                   window_days: Optional[float] = WindowOpt, strategy: Optional[str] = StrategyOpt):
    _replay(Replay.between, _ts(start), _ts(end), receipt_time=receipt_time, window_days=window_days, strategy=strategy)


if __name__ == "__main__":
    app()

# python -m tickreplay.cli replay between 2024-01-01 2024-03-01 --receipt-time
