# tickreplay/replay/scheduler.py
from __future__ import annotations

from typing import List, Literal, Optional, Sequence, Type

from tickreplay import logs
from tickreplay.events import Book, RemoteEvent, Trade
from tickreplay.observability.instrumentation import Instrumentation, NoOpInstrumentation
from tickreplay.replay import window_planner
from tickreplay.replay.dispatcher import Dispatcher
from tickreplay.replay.fetcher import Boundary, EventFetcher
from tickreplay.replay.merger import merge
from tickreplay.replay.types import ReplayRange, ReplayResult, WindowReport, WindowState
from tickreplay.replay.worker import SerialWindowWorker
from tickreplay.runtime.base import Runtime
from tickreplay.store.base import EventStore
from tickreplay.utils.datetime_utils import DateTimeUtils
from tickreplay.utils.errors import ReplayError

Strategy = Literal["auto", "inline", "queued"]

DEFAULT_WINDOW_US = DateTimeUtils.days(28)


class ReplayHandle:
    """
    submit() 的返回值；result() 阻塞到 run 结束，失败时抛出第一个异常
    """

    def __init__(self, result: ReplayResult, worker: Optional[SerialWindowWorker] = None,
                 error: Optional[Exception] = None):
        self._result = result
        self._worker = worker
        self._error = error

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.alive

    def result(self, timeout: Optional[float] = None) -> ReplayResult:
        if self._worker is not None:
            self._worker.join(timeout)
        if self._error is not None:
            raise self._error
        return self._result


class Scheduler:
    """
    Scheduler（FINAL）

    职责：
      - WindowPlanner 切分区间
      - 每个 window：fetch → merge → dispatch
      - 严格按规划顺序执行：window N 的事件与时钟推进全部完成后 window N+1 才开始

    执行策略（行为等价）：
      - inline : 调用方线程里直接循环
      - queued : 提交给 SerialWindowWorker（单线程 + 显式 barrier），只解耦提交，不并行
      - auto   : 区间不超过一个 window 时 inline，否则 queued

    状态机（每个 window）：
      PLANNED → FETCHING → MERGING → DISPATCHING → DONE
      任何一步异常 → FAILED，整个 run 终止（不重试、不跳过）
    """

    def __init__(
        self,
        store: EventStore,
        runtime: Runtime,
        *,
        window_us: int = DEFAULT_WINDOW_US,
        strategy: Strategy = "auto",
        boundary: Boundary = "closed",
        kinds: Sequence[Type[RemoteEvent]] = (Trade, Book),
        inst: Instrumentation | None = None,
    ):
        self.store = store
        self.runtime = runtime
        self.window_us = window_us
        self.strategy = strategy
        self.boundary = boundary
        self.kinds = tuple(kinds)
        self.inst: Instrumentation = inst if inst is not None else NoOpInstrumentation()
        self.dispatcher = Dispatcher(runtime)
        # 同一 runtime 上同时最多一个 queued run
        self._active: Optional[ReplayHandle] = None

    # --------------------------------------------------
    def resolve_strategy(self, replay_range: ReplayRange) -> str:
        if self.strategy != "auto":
            return self.strategy
        return "inline" if replay_range.duration <= self.window_us else "queued"

    def plan(self, replay_range: ReplayRange) -> List[WindowReport]:
        return [
            WindowReport(seq=i, window=w)
            for i, w in enumerate(window_planner.iter_windows(replay_range, self.window_us))
        ]

    # --------------------------------------------------
    def run(self, replay_range: Optional[ReplayRange], wait: bool = True) -> ReplayResult | ReplayHandle:
        """wait=False 时返回 ReplayHandle，由调用方 result() 等待"""
        handle = self.submit(replay_range)
        return handle.result() if wait else handle

    def submit(self, replay_range: Optional[ReplayRange]) -> ReplayHandle:
        if self._active is not None and self._active.running:
            raise ReplayError("[Scheduler] previous run still in progress on this runtime")

        if replay_range is None:
            logs.warning("[Scheduler] no replay range, nothing to do")
            return ReplayHandle(ReplayResult(range=None, strategy="none"))

        strategy = self.resolve_strategy(replay_range)
        reports = self.plan(replay_range)
        result = ReplayResult(range=replay_range, strategy=strategy, windows=reports)
        fetcher = EventFetcher(self.store, replay_range.mode, self.kinds, self.boundary)

        logs.info(
            f"[Scheduler] ====== START {replay_range} windows={len(reports)} strategy={strategy} ======"
        )
        self.inst.progress.start("replay", len(reports), "windows")

        if strategy == "inline":
            error = None
            try:
                for report in reports:
                    self._process(fetcher, report, len(reports))
                self._finish(result)
            except Exception as e:
                error = e
            return ReplayHandle(result, error=error)

        worker = SerialWindowWorker(name="replay-worker").start()
        for report in reports:
            worker.submit(lambda report=report: self._process(fetcher, report, len(reports)))
        worker.submit(lambda: self._finish(result))
        worker.close()
        self._active = ReplayHandle(result, worker=worker)
        return self._active

    # --------------------------------------------------
    def _process(self, fetcher: EventFetcher, report: WindowReport, total: int) -> None:
        window = report.window
        last = report.seq == total - 1

        try:
            report.state = WindowState.FETCHING
            with self.inst.timer("fetch"):
                per_kind = fetcher.fetch(window, last=last)

            report.state = WindowState.MERGING
            with self.inst.timer("merge"):
                events = merge(per_kind, fetcher.mode)

            report.state = WindowState.DISPATCHING
            with self.inst.timer("dispatch"):
                report.n_events = self.dispatcher.dispatch(window, events)

        except Exception as e:
            report.state = WindowState.FAILED
            report.error = repr(e)
            logs.error(f"[Scheduler] window #{report.seq} {window} failed: {e}")
            raise

        report.state = WindowState.DONE
        self.inst.metrics.incr("events_dispatched", report.n_events)
        self.inst.progress.update("replay", report.seq + 1, total, "windows")

    def _finish(self, result: ReplayResult) -> None:
        self.inst.metrics.record("windows", result.n_windows)
        self.inst.metrics.record("events", result.n_events)
        self.inst.progress.done("replay")
        self.inst.generate_timeline_report(str(result.range))
        logs.info(
            f"[Scheduler] ====== DONE windows={result.n_windows} events={result.n_events} ======"
        )
