"""Parquet persistence helpers for buffered per-epoch row streams."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq


def new_columns(schema: pa.Schema) -> dict[str, list[object]]:
    """Empty column buffers, one per schema field."""
    return {name: [] for name in schema.names}


def flush_columns(
    columns: dict[str, list[object]],
    path: Path,
    writer: pq.ParquetWriter | None,
    schema: pa.Schema,
) -> pq.ParquetWriter | None:
    """Write accumulated rows to Parquet and clear in-memory buffers."""
    if not columns[schema.names[0]]:
        return writer
    table = pa.Table.from_pydict(columns, schema=schema)
    if writer is None:
        writer = pq.ParquetWriter(path, schema)
    writer.write_table(table)
    for values in columns.values():
        values.clear()
    return writer
