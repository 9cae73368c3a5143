#!filepath: tests/observability/test_progress.py
from loguru import logger

from tickreplay.observability.progress import ProgressReporter


def test_progress_reports_percentage():
    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))

    p = ProgressReporter(enabled=True)
    p.start("replay", 4, "windows")
    p.update("replay", 1, 4, "windows")
    p.done("replay")

    logger.remove(sink_id)
    output = "\n".join(captured)

    assert "1/4 windows (25.0%)" in output
    assert "replay done" in output


def test_progress_disabled():
    p = ProgressReporter(enabled=False)
    p.start("Task", 0)
    p.update("Task", 0, 0)
    p.done("Task")
