#!filepath: tests/observability/test_timeline.py
from loguru import logger

from tickreplay.observability.timeline_reporter import TimelineReporter


def test_timeline_log_output():
    tl = {
        "fetch": 1.23,
        "dispatch": 2.34,
    }
    reporter = TimelineReporter(tl, "[0, 100) event_time")

    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))

    reporter.print()

    logger.remove(sink_id)
    output = "\n".join(captured)

    assert "Replay timeline for [0, 100) event_time" in output
    assert "fetch" in output
    assert "1.23" in output
    assert "3.570s" in output
