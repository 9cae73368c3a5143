#!filepath: tickreplay/observability/instrumentation.py
from __future__ import annotations

from dataclasses import dataclass
from contextlib import contextmanager
from collections import OrderedDict
from typing import Dict

from tickreplay.observability.progress import ProgressReporter
from tickreplay.observability.timer import Timer
from tickreplay.observability.metrics import MetricRecorder
from tickreplay.observability.timeline_reporter import TimelineReporter


@dataclass
class Instrumentation:
    """
    Replay Instrumentation（Leaf-only accounting + Parent scope）。

    - Timeline 只记录叶子节点（record=True），同名叶子累计耗时
      （每个 window 的 fetch / merge / dispatch 汇总成三个 phase）
    - 父级 timer（record=False）只定义 wall-time，不产生副作用
    - 本身不在热路径打日志
    """

    enabled: bool = True

    def __post_init__(self):
        self.progress = ProgressReporter(enabled=self.enabled)
        self._timer = Timer(enabled=self.enabled)
        self.metrics = MetricRecorder(enabled=self.enabled)

        # timeline: OrderedDict[leaf_name, elapsed_seconds]
        self.timeline: Dict[str, float] = OrderedDict()

    def timer(self, name: str, *, record: bool = True):
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(name)
            try:
                yield
            finally:
                elapsed = inst._timer.end(name)
                if record:
                    inst.timeline[name] = inst.timeline.get(name, 0.0) + elapsed

        return _ctx()

    def generate_timeline_report(self, label: str):
        if not self.enabled:
            return
        TimelineReporter(self.timeline, label).print()


# -------------------------------------------------------------
# No-op Instrumentation（禁用 observability）
# -------------------------------------------------------------
class NoOpInstrumentation(Instrumentation):
    """Instrumentation disabled 时使用。"""

    def __init__(self):
        super().__init__(enabled=False)
