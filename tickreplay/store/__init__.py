from .base import EventStore, Pager
from .memory_store import InMemoryEventStore
from .parquet_store import ParquetEventStore


def open_store(cfg) -> ParquetEventStore:
    """StoreConfig → 已 open 的 ParquetEventStore"""
    return ParquetEventStore.from_config(cfg).open()


__all__ = ["EventStore", "Pager", "InMemoryEventStore", "ParquetEventStore", "open_store"]
