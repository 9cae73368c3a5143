#!filepath: tests/replay/test_worker.py
import threading
import time

import pytest

from tickreplay.replay.worker import SerialWindowWorker


def test_tasks_run_in_submission_order_on_one_thread():
    worker = SerialWindowWorker().start()
    seen = []
    threads = set()

    def make(i):
        def _task():
            time.sleep(0.001 * (5 - i % 5))
            threads.add(threading.get_ident())
            seen.append(i)
        return _task

    for i in range(20):
        worker.submit(make(i))
    worker.join(timeout=5)

    assert seen == list(range(20))
    assert len(threads) == 1
    assert threading.get_ident() not in threads
    assert worker.completed == 20


def test_no_overlap_between_tasks():
    worker = SerialWindowWorker().start()
    active = {"n": 0, "max": 0}

    def _task():
        active["n"] += 1
        active["max"] = max(active["max"], active["n"])
        time.sleep(0.002)
        active["n"] -= 1

    for _ in range(10):
        worker.submit(_task)
    worker.join(timeout=5)

    assert active["max"] == 1


def test_failure_skips_remaining_and_reraises():
    worker = SerialWindowWorker().start()
    ran = []

    def ok(i):
        return lambda: ran.append(i)

    def boom():
        raise ValueError("fail")

    worker.submit(ok(0))
    worker.submit(boom)
    worker.submit(ok(2))
    worker.submit(ok(3))

    with pytest.raises(ValueError):
        worker.join(timeout=5)

    assert ran == [0]
    assert worker.skipped == [2, 3]
    assert worker.completed == 1


def test_submit_before_start_rejected():
    with pytest.raises(RuntimeError):
        SerialWindowWorker().submit(lambda: None)


def test_wait_for():
    worker = SerialWindowWorker().start()
    gate = threading.Event()
    worker.submit(gate.wait)

    assert worker.wait_for(0, timeout=0.01) is False
    gate.set()
    assert worker.wait_for(0, timeout=5) is True
    worker.join(timeout=5)
