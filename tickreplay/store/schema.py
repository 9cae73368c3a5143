# tickreplay/store/schema.py
from __future__ import annotations

from dataclasses import fields
from typing import Dict, List, Sequence, Type

import pyarrow as pa

from tickreplay.events import Book, RemoteEvent, Trade

_REMOTE_FIELDS = [
    pa.field("time", pa.int64(), nullable=False),
    pa.field("time_received", pa.int64(), nullable=False),
    pa.field("exchange", pa.string()),
    pa.field("symbol", pa.string()),
]

TRADE_SCHEMA = pa.schema(
    _REMOTE_FIELDS
    + [
        pa.field("price", pa.float64()),
        pa.field("volume", pa.float64()),
        pa.field("remote_key", pa.string()),
    ]
)

BOOK_SCHEMA = pa.schema(
    _REMOTE_FIELDS
    + [
        pa.field("bid_prices", pa.list_(pa.float64())),
        pa.field("bid_volumes", pa.list_(pa.float64())),
        pa.field("ask_prices", pa.list_(pa.float64())),
        pa.field("ask_volumes", pa.list_(pa.float64())),
    ]
)

SCHEMAS: Dict[Type[RemoteEvent], pa.Schema] = {
    Trade: TRADE_SCHEMA,
    Book: BOOK_SCHEMA,
}


def schema_for(kind: Type[RemoteEvent]) -> pa.Schema:
    try:
        return SCHEMAS[kind]
    except KeyError:
        raise KeyError(f"no arrow schema for event kind: {kind.__name__}") from None


def to_table(kind: Type[RemoteEvent], events: Sequence[RemoteEvent]) -> pa.Table:
    schema = schema_for(kind)
    rows = []
    for ev in events:
        row = {f.name: getattr(ev, f.name) for f in fields(ev)}
        # tuple → list（arrow list 类型）
        rows.append({k: list(v) if isinstance(v, tuple) else v for k, v in row.items()})
    return pa.Table.from_pylist(rows, schema=schema)


def from_table(kind: Type[RemoteEvent], table: pa.Table) -> List[RemoteEvent]:
    if table.num_rows == 0:
        return []
    out = []
    for row in table.to_pylist():
        out.append(kind(**{k: tuple(v) if isinstance(v, list) else v for k, v in row.items()}))
    return out
