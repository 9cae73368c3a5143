#!filepath: tickreplay/utils/datetime_utils.py
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Union

US_PER_SECOND = 1_000_000
US_PER_DAY = 86_400 * US_PER_SECOND

Instant = Union[int, str, datetime]


class DateTimeUtils:
    """
    Replay 内部统一时间：epoch 微秒（int）。

    外部输入（CLI / config / 调用方）可能为：
        "2024-03-01"
        "2024-03-01 09:15:00.040"
        "2024-03-01T09:15:00+00:00"
        datetime(...)
        1709284500000000      # us timestamp
    """

    TZ = timezone.utc

    # 纯数字字符串里 8 / 14 位是紧凑日期（%Y%m%d / %Y%m%d%H%M%S），其余视为 epoch us
    _COMPACT_DATE_LENGTHS = (8, 14)

    @classmethod
    def _is_epoch_digits(cls, s: str) -> bool:
        digits = s[1:] if s.startswith("-") else s
        return digits.isdigit() and len(digits) not in cls._COMPACT_DATE_LENGTHS

    # ================================================================
    # 任意输入 → datetime（tz-aware）
    # ================================================================
    @classmethod
    def parse(cls, ts: Instant) -> datetime:
        if isinstance(ts, datetime):
            return ts.astimezone(cls.TZ) if ts.tzinfo else ts.replace(tzinfo=cls.TZ)

        # int timestamp：按位数判断精度
        if isinstance(ts, int):
            s = str(abs(ts))
            if len(s) <= 10:
                return datetime.fromtimestamp(ts, cls.TZ)
            if len(s) == 13:
                return datetime.fromtimestamp(ts / 1000, cls.TZ)
            if len(s) == 16:
                return cls.from_us(ts)
            if len(s) == 19:
                return cls.from_us(ts // 1000)
            raise ValueError(f"无法识别的整数时间戳: {ts}")

        if isinstance(ts, str):
            ts = ts.strip()
            if cls._is_epoch_digits(ts):
                return cls.from_us(int(ts))

            try:
                dtime = datetime.fromisoformat(ts)
            except ValueError:
                dtime = None
            if dtime is not None:
                return dtime.astimezone(cls.TZ) if dtime.tzinfo else dtime.replace(tzinfo=cls.TZ)

            fmts = [
                "%Y/%m/%d %H:%M:%S.%f",
                "%Y/%m/%d %H:%M:%S",
                "%Y/%m/%d",
                "%Y%m%d%H%M%S",
                "%Y%m%d",
            ]
            for fmt in fmts:
                try:
                    return datetime.strptime(ts, fmt).replace(tzinfo=cls.TZ)
                except ValueError:
                    pass

            raise ValueError(f"无法解析时间字符串: {ts}")

        raise TypeError(f"不支持的时间类型: {type(ts)}")

    # ================================================================
    # datetime / str ↔ epoch us
    # ================================================================
    @classmethod
    def to_us(cls, ts: Instant) -> int:
        """
        int 与纯数字字符串视为已经是 epoch us；其余先 parse。
        """
        if isinstance(ts, int):
            return ts
        if isinstance(ts, str) and cls._is_epoch_digits(ts.strip()):
            return int(ts.strip())
        dt_ = cls.parse(ts)
        delta = dt_ - datetime(1970, 1, 1, tzinfo=timezone.utc)
        return (delta.days * US_PER_DAY) + (delta.seconds * US_PER_SECOND) + delta.microseconds

    @classmethod
    def from_us(cls, ts_us: int) -> datetime:
        return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(microseconds=ts_us)

    @classmethod
    def fmt(cls, ts_us: int | None) -> str:
        if ts_us is None:
            return "-"
        return cls.from_us(ts_us).astimezone(cls.TZ).isoformat()

    @staticmethod
    def days(n: float) -> int:
        return int(n * US_PER_DAY)
