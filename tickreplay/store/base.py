# tickreplay/store/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterator, List, Literal, Optional, Type, TypeVar

from tickreplay import logs
from tickreplay.events import RemoteEvent
from tickreplay.utils.errors import StoreClosedError, UserInputError

T = TypeVar("T", bound=RemoteEvent)

Aggregate = Literal["min", "max"]

TIME_FIELDS = ("time", "time_received")
DEFAULT_PAGE_SIZE = 20


def check_time_field(time_field: str) -> str:
    if time_field not in TIME_FIELDS:
        raise UserInputError(f"time_field must be one of {TIME_FIELDS}, got {time_field!r}")
    return time_field


class Pager(Generic[T]):
    """
    惰性、可重复迭代的分页序列。

    每次 iter() 都从 first_result=0 重新开始：
        page = fetch(first_result, page_size)
        first_result += page_size
    直到返回空页为止。
    """

    def __init__(self, fetch: Callable[[int, int], List[T]], page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise UserInputError(f"page_size must be >= 1, got {page_size}")
        self._fetch = fetch
        self.page_size = page_size

    def __iter__(self) -> Iterator[List[T]]:
        first_result = 0
        while True:
            page = self._fetch(first_result, self.page_size)
            if not page:
                return
            yield page
            first_result += self.page_size

    def rows(self) -> Iterator[T]:
        for page in self:
            yield from page


class EventStore(ABC):
    """
    EventStore（typed store handle）

    职责：
      - 按事件种类存取 RemoteEvent
      - 时间过滤永远是闭区间 [start, end]
      - 显式生命周期：open / reset_for_tests / close
      - 关闭后任何操作都报 StoreClosedError（不会隐式重新初始化）
    """

    page_size: int = DEFAULT_PAGE_SIZE

    # --------------------------------------------------
    # lifecycle
    # --------------------------------------------------
    @abstractmethod
    def open(self) -> "EventStore":
        ...

    @abstractmethod
    def reset_for_tests(self) -> "EventStore":
        """清空全部数据并保持 open"""
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    def __enter__(self) -> "EventStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _check_open(self) -> None:
        if not self.is_open:
            raise StoreClosedError(f"[{type(self).__name__}] store is not open")

    # --------------------------------------------------
    # write
    # --------------------------------------------------
    @abstractmethod
    def insert(self, *events: RemoteEvent) -> int:
        """全部写入或全部不写入；返回写入条数"""
        ...

    # --------------------------------------------------
    # read
    # --------------------------------------------------
    @abstractmethod
    def query_list(self, kind: Type[T], time_field: str, start: int, end: int) -> List[T]:
        ...

    @abstractmethod
    def query_scalar(self, aggregate: Aggregate, kind: Type[T], time_field: str) -> Optional[int]:
        ...

    @abstractmethod
    def count(self, kind: Type[T]) -> int:
        ...

    @abstractmethod
    def _page(
        self,
        kind: Type[T],
        time_field: Optional[str],
        start: Optional[int],
        end: Optional[int],
        first_result: int,
        max_results: int,
    ) -> List[T]:
        ...

    def pages(
        self,
        kind: Type[T],
        *,
        time_field: Optional[str] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Pager[T]:
        self._check_open()
        if time_field is not None:
            check_time_field(time_field)

        def fetch(first_result: int, max_results: int) -> List[T]:
            return self._page(kind, time_field, start, end, first_result, max_results)

        return Pager(fetch, page_size or self.page_size)

    def query_each(
        self,
        kind: Type[T],
        visitor: Callable[[T], bool],
        *,
        time_field: Optional[str] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> int:
        """
        按页把每一行交给 visitor；visitor 返回 False 时立即停止。
        返回访问过的行数。
        """
        visited = 0
        for row in self.pages(kind, time_field=time_field, start=start, end=end, page_size=page_size).rows():
            visited += 1
            if not visitor(row):
                logs.debug(f"[{type(self).__name__}] query_each stopped by visitor after {visited} rows")
                break
        return visited
