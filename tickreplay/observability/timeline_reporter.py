#!filepath: tickreplay/observability/timeline_reporter.py
from typing import Dict
from tickreplay import logs


class TimelineReporter:
    """
    Replay Timeline 报告：
    - phase → 累计耗时秒数
    """

    def __init__(self, timeline: Dict[str, float], label: str):
        self.timeline = timeline
        self.label = label

    def print(self):
        logs.info(f"[Timeline] ===== Replay timeline for {self.label} =====")

        total = 0.0
        for name, sec in self.timeline.items():
            logs.info(f"[Timeline] {str(name):<30} {sec:>8.3f}s")
            total += sec

        logs.info(f"[Timeline] Total{'':<27} {total:>8.3f}s")
        logs.info("[Timeline] ===========================================")
