#!filepath: tickreplay/observability/progress.py
from tickreplay import logs


class ProgressReporter:
    """
    最轻量进度系统（按 window 汇报，不依赖 Rich/TQDM）
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def start(self, task: str, total: int, unit: str = ""):
        if not self.enabled:
            return
        logs.info(f"[Progress] {task} started total={total} {unit}")

    def update(self, task: str, current: int, total: int, unit: str = ""):
        if not self.enabled:
            return
        pct = 100.0 * current / total if total else 100.0
        logs.info(f"[Progress] {task}: {current}/{total} {unit} ({pct:.1f}%)")

    def done(self, task: str):
        if not self.enabled:
            return
        logs.info(f"[Progress] {task} done")
