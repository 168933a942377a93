"""Path construction helpers for run output directories."""

from __future__ import annotations

from pathlib import Path


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def call_stats_path(out_dir: Path) -> Path:
    """Return path to the per-epoch call statistics Parquet file."""
    return logs_dir(out_dir) / "call_stats.parquet"


def epoch_summary_path(out_dir: Path) -> Path:
    """Return path to the epoch summary Parquet file."""
    return logs_dir(out_dir) / "epoch_summary.parquet"


def win_counts_path(out_dir: Path) -> Path:
    """Return path to the win counts Parquet file."""
    return logs_dir(out_dir) / "win_counts.parquet"


def run_manifest_path(out_dir: Path) -> Path:
    """Return path to the run manifest JSON file."""
    return out_dir / "run_manifest.json"
