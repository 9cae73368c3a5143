# tickreplay/replay/worker.py
from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from tickreplay import logs


@dataclass
class _Task:
    seq: int
    fn: Callable[[], None]


_STOP = object()


class SerialWindowWorker:
    """
    单写者 window 执行器（FINAL）

    契约：
      - 只有一个工作线程；FIFO 消费 submit 的任务
      - 任务 seq 必须连续；seq=N 在 seq=N-1 完成（DONE）之前不得开始
        （显式 barrier，不依赖 "线程池大小 = 1" 这种偶然性质）
      - 第一个失败之后剩余任务全部跳过，不再执行
      - join() 等待全部任务结束，并把第一个异常抛给调用方

    并发只用于把 "提交" 与调用方线程解耦，绝不并行执行 window。
    """

    def __init__(self, name: str = "replay-worker"):
        self.name = name
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._next_submit = 0
        self._done_seq = -1
        self._done = threading.Condition()
        self.error: Optional[Exception] = None
        self.skipped: List[int] = []

    # --------------------------------------------------
    def start(self) -> "SerialWindowWorker":
        if self._thread is not None:
            return self
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        return self

    def submit(self, fn: Callable[[], None]) -> int:
        if self._thread is None:
            raise RuntimeError(f"[{self.name}] worker not started")
        seq = self._next_submit
        self._next_submit += 1
        self._queue.put(_Task(seq=seq, fn=fn))
        return seq

    def close(self) -> None:
        """不再接受任务；worker 处理完队列后退出"""
        if self._thread is not None:
            self._queue.put(_STOP)

    def join(self, timeout: Optional[float] = None) -> None:
        self.close()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                raise TimeoutError(f"[{self.name}] worker still running after {timeout}s")
        if self.error is not None:
            raise self.error

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def completed(self) -> int:
        return self._done_seq + 1

    # --------------------------------------------------
    def _barrier(self, seq: int) -> None:
        with self._done:
            if self._done_seq != seq - 1:
                raise RuntimeError(
                    f"[{self.name}] ordering violated: task {seq} started "
                    f"before task {seq - 1} completed (last done={self._done_seq})"
                )

    def _mark_done(self, seq: int) -> None:
        with self._done:
            self._done_seq = seq
            self._done.notify_all()

    def wait_for(self, seq: int, timeout: Optional[float] = None) -> bool:
        """阻塞直到 seq 完成；失败后不会再完成，返回 False"""
        with self._done:
            return self._done.wait_for(
                lambda: self._done_seq >= seq or self.error is not None,
                timeout,
            ) and self._done_seq >= seq

    def _loop(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return

            task: _Task = item  # type: ignore[assignment]
            if self.error is not None:
                self.skipped.append(task.seq)
                continue

            try:
                self._barrier(task.seq)
                task.fn()
            except Exception as e:
                logs.error(f"[{self.name}] task {task.seq} failed: {e!r}, aborting remaining tasks")
                with self._done:
                    self.error = e
                    self._done.notify_all()
                continue

            self._mark_done(task.seq)
