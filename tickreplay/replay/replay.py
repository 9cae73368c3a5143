# tickreplay/replay/replay.py
from __future__ import annotations

from typing import Optional

from tickreplay import logs
from tickreplay.config.replay_config import ReplayConfig
from tickreplay.events import kind_of
from tickreplay.observability.instrumentation import Instrumentation
from tickreplay.replay.range_resolver import RangeResolver
from tickreplay.replay.scheduler import ReplayHandle, Scheduler
from tickreplay.replay.time_provider import EventTimeManager
from tickreplay.replay.types import OrderMode, ReplayRange, ReplayResult
from tickreplay.runtime.context import Context
from tickreplay.store.base import EventStore
from tickreplay.utils.datetime_utils import DateTimeUtils, Instant


def _default_store() -> EventStore:
    from tickreplay.config.app_config import AppConfig
    from tickreplay.store import open_store

    return open_store(AppConfig.load().store)


def _default_cfg() -> ReplayConfig:
    """未显式传 cfg 时使用 base.yml 的 replay 段"""
    from tickreplay.config.app_config import AppConfig

    return AppConfig.load().replay


class Replay:
    """
    把 store 里的 Trade / Book 按时间顺序 replay 进一个 Context；
    Context 的时钟也由 Replay 随 window 推进。

    用法：
        replay = Replay.between("2024-01-01", "2024-03-01", store=store)
        replay.context.subscribe(on_event)
        result = replay.run()
    """

    def __init__(
        self,
        replay_range: Optional[ReplayRange],
        mode: OrderMode,
        *,
        store: EventStore,
        cfg: Optional[ReplayConfig] = None,
        inst: Optional[Instrumentation] = None,
    ):
        self.cfg = cfg if cfg is not None else _default_cfg()
        self.replay_range = replay_range
        self.mode = mode
        self.store = store
        # replay_range 先于 Context 确定：初始时钟 = 区间起点
        self.context = Context.create(EventTimeManager(replay_range, mode))
        self.scheduler = Scheduler(
            store,
            self.context,
            window_us=self.cfg.window_us,
            strategy=self.cfg.strategy,
            boundary=self.cfg.boundary,
            kinds=[kind_of(k) for k in self.cfg.kinds],
            inst=inst,
        )

    # --------------------------------------------------
    # 请求入口
    # --------------------------------------------------
    @classmethod
    def all(cls, order_by_time_received: bool = False, **kwargs) -> "Replay":
        return cls._resolve(None, None, order_by_time_received, **kwargs)

    @classmethod
    def since(cls, start: Instant, order_by_time_received: bool = False, **kwargs) -> "Replay":
        return cls._resolve(start, None, order_by_time_received, **kwargs)

    @classmethod
    def until(cls, end: Instant, order_by_time_received: bool = False, **kwargs) -> "Replay":
        return cls._resolve(None, end, order_by_time_received, **kwargs)

    @classmethod
    def between(cls, start: Instant, end: Instant, order_by_time_received: bool = False, **kwargs) -> "Replay":
        return cls._resolve(start, end, order_by_time_received, **kwargs)

    @classmethod
    def during(cls, replay_range: ReplayRange, **kwargs) -> "Replay":
        store = kwargs.pop("store", None) or _default_store()
        return cls(replay_range, replay_range.mode, store=store, **kwargs)

    @classmethod
    def _resolve(
        cls,
        start: Optional[Instant],
        end: Optional[Instant],
        order_by_time_received: bool,
        *,
        store: Optional[EventStore] = None,
        cfg: Optional[ReplayConfig] = None,
        inst: Optional[Instrumentation] = None,
    ) -> "Replay":
        store = store or _default_store()
        cfg = cfg if cfg is not None else _default_cfg()
        mode = OrderMode.from_flag(order_by_time_received)

        resolver = RangeResolver(store, [kind_of(k) for k in cfg.kinds])
        replay_range = resolver.resolve(
            None if start is None else DateTimeUtils.to_us(start),
            None if end is None else DateTimeUtils.to_us(end),
            mode,
        )
        return cls(replay_range, mode, store=store, cfg=cfg, inst=inst)

    # --------------------------------------------------
    @property
    def empty(self) -> bool:
        return self.replay_range is None

    @logs.catch("replay run failed", log_time=True)
    def run(self) -> ReplayResult:
        """
        按时间顺序把 [start, end] 内所有 Trade / Book publish 到 context
        """
        if self.replay_range is None:
            logs.warning("[Replay] stores are empty, nothing to replay")
        return self.scheduler.run(self.replay_range)

    def submit(self) -> ReplayHandle:
        """不阻塞调用方；handle.result() 等待结束"""
        return self.scheduler.submit(self.replay_range)
