#!filepath: tickreplay/config/store_config.py
from pydantic import BaseModel, Field


class StoreConfig(BaseModel):
    """
    事件存储位置：
        <root>/trade/part-*.parquet
        <root>/book/part-*.parquet
    """
    root: str = "data/events"
    page_size: int = Field(20, ge=1)
