"""Parquet schema definitions for run artifacts.

Every Arrow schema written by the run orchestration is defined here so that
writers and readers share the same column contracts.
"""

from __future__ import annotations

import pyarrow as pa

RUN_MANIFEST_SCHEMA_VERSION = 1

CALL_STATS_SCHEMA = pa.schema(
    [
        ("epoch", pa.int64()),
        ("code", pa.string()),
        ("method", pa.int64()),
        ("calls", pa.int64()),
        ("reads", pa.int64()),
        ("writes", pa.int64()),
        ("read_bytes", pa.int64()),
        ("write_bytes", pa.int64()),
    ]
)

EPOCH_SUMMARY_SCHEMA = pa.schema(
    [
        ("epoch", pa.int64()),
        ("messages_applied", pa.int64()),
        ("miners", pa.int64()),
        ("eligible_miners", pa.int64()),
        ("total_qa_power", pa.int64()),
        ("block_reward", pa.int64()),
        ("total_wins", pa.int64()),
        ("miner_created", pa.string()),
    ]
)

WIN_COUNT_SCHEMA = pa.schema(
    [
        ("epoch", pa.int64()),
        ("miner", pa.string()),
        ("qa_power", pa.int64()),
        ("wins", pa.int64()),
    ]
)
