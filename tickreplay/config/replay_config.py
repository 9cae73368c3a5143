from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from typing import List, Literal

from tickreplay.utils.datetime_utils import DateTimeUtils


class ReplayConfig(BaseModel):
    """
    ReplayConfig

    语义：
      - 一次 replay run 的引擎参数
      - 不定义 replay 区间（区间由 Replay.all / since / until / between 决定）
    """

    # 每个 window 的长度（天）；决定单次查询的结果规模
    window_days: float = Field(28, gt=0)

    # auto: range <= 一个 window 时 inline，否则 queued
    strategy: Literal["auto", "inline", "queued"] = "auto"

    # closed: window 两端都包含（边界事件可能被相邻 window 各取一次）
    boundary: Literal["closed", "half_open"] = "closed"

    # 参与 replay 的事件种类（按此顺序拼接后再排序）
    kinds: List[str] = Field(default_factory=lambda: ["trade", "book"], min_length=1)

    order_by_time_received: bool = False

    @field_validator("kinds")
    @classmethod
    def _known_kinds(cls, v: List[str]) -> List[str]:
        from tickreplay.events import EVENT_KINDS

        unknown = [k for k in v if k not in EVENT_KINDS]
        if unknown:
            raise ValueError(f"unknown event kinds: {unknown}")
        return v

    @property
    def window_us(self) -> int:
        return DateTimeUtils.days(self.window_days)
