#!filepath: tickreplay/store/parquet_store.py
from __future__ import annotations

import os
import shutil
import uuid
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Type

import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.dataset as ds
import pyarrow.parquet as pq

from tickreplay import logs
from tickreplay.events import EVENT_KINDS, RemoteEvent
from tickreplay.store.base import DEFAULT_PAGE_SIZE, Aggregate, EventStore, T, check_time_field
from tickreplay.store.schema import from_table, schema_for, to_table
from tickreplay.utils.errors import StoreError, UserInputError


class ParquetEventStore(EventStore):
    """
    Parquet 事件仓库

    目录结构：
        <root>/
          trade/part-000001-<uuid>.parquet
          book/part-000001-<uuid>.parquet

    - 每次 insert 按 kind 各提交一个 part 文件
    - 先写隐藏的 .tmp，全部写完再 rename（只扫描 part-*.parquet）
    - 查询通过 pyarrow.dataset filter 下推
    """

    def __init__(self, root: Path | str, page_size: int = DEFAULT_PAGE_SIZE):
        self.root = Path(root)
        self.page_size = page_size
        self._open = False

    @classmethod
    def from_config(cls, cfg) -> "ParquetEventStore":
        return cls(cfg.root, page_size=cfg.page_size)

    # --------------------------------------------------
    # lifecycle
    # --------------------------------------------------
    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> "ParquetEventStore":
        if self._open:
            return self
        logs.info(f"[ParquetEventStore] initializing store at {self.root}")
        for name in EVENT_KINDS:
            (self.root / name).mkdir(parents=True, exist_ok=True)
        self._open = True
        return self

    def reset_for_tests(self) -> "ParquetEventStore":
        logs.info(f"[ParquetEventStore] resetting store at {self.root}")
        for name in EVENT_KINDS:
            kind_dir = self.root / name
            if kind_dir.exists():
                shutil.rmtree(kind_dir)
        self._open = False
        return self.open()

    def close(self) -> None:
        if self._open:
            logs.info(f"[ParquetEventStore] closed {self.root}")
        self._open = False

    # --------------------------------------------------
    # internal
    # --------------------------------------------------
    def _kind_dir(self, kind: Type[RemoteEvent]) -> Path:
        return self.root / kind.kind

    def _dataset(self, kind: Type[RemoteEvent]) -> ds.Dataset:
        # part 文件名带递增序号：按文件名排序 = 插入顺序
        files = sorted(str(p) for p in self._kind_dir(kind).glob("part-*.parquet"))
        if not files:
            return ds.dataset(pa.Table.from_pylist([], schema=schema_for(kind)))
        return ds.dataset(files, schema=schema_for(kind), format="parquet")

    @staticmethod
    def _filter(time_field: Optional[str], start: Optional[int], end: Optional[int]):
        if time_field is None:
            return None
        expr = None
        if start is not None:
            expr = ds.field(time_field) >= start
        if end is not None:
            upper = ds.field(time_field) <= end
            expr = upper if expr is None else (expr & upper)
        return expr

    def _next_part_name(self, kind_dir: Path) -> str:
        n = sum(1 for p in kind_dir.glob("part-*.parquet")) + 1
        return f"part-{n:06d}-{uuid.uuid4().hex[:8]}.parquet"

    # --------------------------------------------------
    # write
    # --------------------------------------------------
    def insert(self, *events: RemoteEvent) -> int:
        self._check_open()
        if not events:
            return 0

        grouped: Dict[Type[RemoteEvent], List[RemoteEvent]] = defaultdict(list)
        for ev in events:
            grouped[type(ev)].append(ev)

        staged: List[tuple[Path, Path]] = []
        committed: List[Path] = []
        try:
            # ① 写临时文件
            for kind, batch in grouped.items():
                kind_dir = self._kind_dir(kind)
                final = kind_dir / self._next_part_name(kind_dir)
                tmp = kind_dir / f".{final.name}.tmp"
                pq.write_table(to_table(kind, batch), tmp)
                staged.append((tmp, final))

            # ② 提交
            for tmp, final in staged:
                os.replace(tmp, final)
                committed.append(final)

        except Exception as e:
            for tmp, _ in staged:
                tmp.unlink(missing_ok=True)
            for final in committed:
                final.unlink(missing_ok=True)
            for ev in events:
                logs.error(f"[ParquetEventStore] {type(ev).__name__}@{ev.time} {ev.symbol} not saved to store")
            raise StoreError(f"[ParquetEventStore] insert failed: {e}") from e

        for ev in events:
            logs.debug(f"[ParquetEventStore] {type(ev).__name__}@{ev.time} {ev.symbol} saved to store")
        return len(events)

    # --------------------------------------------------
    # read
    # --------------------------------------------------
    def query_list(self, kind: Type[T], time_field: str, start: int, end: int) -> List[T]:
        self._check_open()
        check_time_field(time_field)
        table = self._dataset(kind).to_table(filter=self._filter(time_field, start, end))
        return from_table(kind, table)

    def query_scalar(self, aggregate: Aggregate, kind: Type[T], time_field: str) -> Optional[int]:
        self._check_open()
        check_time_field(time_field)
        if aggregate not in ("min", "max"):
            raise UserInputError(f"unsupported aggregate: {aggregate!r}")

        column = self._dataset(kind).to_table(columns=[time_field]).column(time_field)
        if len(column) == 0:
            return None
        return pc.min_max(column).as_py()[aggregate]

    def count(self, kind: Type[T]) -> int:
        self._check_open()
        return self._dataset(kind).count_rows()

    def _page(
        self,
        kind: Type[T],
        time_field: Optional[str],
        start: Optional[int],
        end: Optional[int],
        first_result: int,
        max_results: int,
    ) -> List[T]:
        self._check_open()
        scanner = self._dataset(kind).scanner(filter=self._filter(time_field, start, end), use_threads=False)

        skipped = 0
        batches: List[pa.RecordBatch] = []
        taken = 0
        for batch in scanner.to_batches():
            if batch.num_rows == 0:
                continue
            if skipped + batch.num_rows <= first_result:
                skipped += batch.num_rows
                continue
            offset = max(0, first_result - skipped)
            skipped += batch.num_rows
            part = batch.slice(offset, max_results - taken)
            batches.append(part)
            taken += part.num_rows
            if taken >= max_results:
                break

        if not batches:
            return []
        return from_table(kind, pa.Table.from_batches(batches, schema=schema_for(kind)))

    # --------------------------------------------------
    def insert_many(self, events: Sequence[RemoteEvent], batch_size: int = 10_000) -> int:
        """大批量导入：按 batch_size 分多次提交"""
        total = 0
        for i in range(0, len(events), batch_size):
            total += self.insert(*events[i:i + batch_size])
        return total
