"""Run orchestration: tick a simulation for N epochs and persist its artifacts."""

from __future__ import annotations

import json
import logging
import random
from dataclasses import asdict, dataclass, field
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from actor_sim.config.constants import FLUSH_THRESHOLD
from actor_sim.config.types import RunConfig
from actor_sim.domain.miner_agent import MinerAgent
from actor_sim.domain.transfer_agent import TransferAgent
from actor_sim.io.paths import (
    call_stats_path,
    epoch_summary_path,
    logs_dir,
    run_manifest_path,
    win_counts_path,
)
from actor_sim.io.schemas import (
    CALL_STATS_SCHEMA,
    EPOCH_SUMMARY_SCHEMA,
    RUN_MANIFEST_SCHEMA_VERSION,
    WIN_COUNT_SCHEMA,
)
from actor_sim.metrics.rewards import MinerWinSummary, expected_wins, summarize_win_counts
from actor_sim.simulation.engine import Sim, TickReport
from actor_sim.simulation.persistence import flush_columns, new_columns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    epochs: int
    messages_applied: int
    miners: int
    total_wins: int
    final_total_qa_power: int
    win_summaries: list[MinerWinSummary] = field(default_factory=list)


def add_transfer_agents(sim: Sim, config: RunConfig) -> list[TransferAgent]:
    """Fund dedicated accounts and register one transfer agent per group.

    Seeds come from a generator separate from the engine's, so adding transfer
    agents never shifts the engine's own random stream.
    """
    if config.n_transfer_agents == 0:
        return []
    seeds = random.Random(config.sim.seed)
    groups = [
        sim.fund_accounts(
            config.transfer_accounts_per_agent,
            config.sim.account_initial_balance,
            seeds.getrandbits(64),
        )
        for _ in range(config.n_transfer_agents)
    ]
    recipients = [addr for group in groups for addr in group]
    agents = []
    for group in groups:
        agent = TransferAgent(
            senders=group,
            recipients=recipients,
            rng=random.Random(seeds.getrandbits(64)),
            config=config.transfer_config,
        )
        sim.add_agent(agent)
        agents.append(agent)
    return agents


def _record_tick(
    report: TickReport,
    sim: Sim,
    summary_columns: dict[str, list[object]],
    win_columns: dict[str, list[object]],
    stats_columns: dict[str, list[object]],
) -> None:
    table = report.power_table
    summary_columns["epoch"].append(report.epoch)
    summary_columns["messages_applied"].append(report.messages_applied)
    summary_columns["miners"].append(sum(1 for a in sim.agents if isinstance(a, MinerAgent)))
    summary_columns["eligible_miners"].append(len(table.miner_power))
    summary_columns["total_qa_power"].append(table.total_qa_power)
    summary_columns["block_reward"].append(table.block_reward)
    summary_columns["total_wins"].append(sum(report.rewards.values()))
    summary_columns["miner_created"].append(report.miner_created)

    if table.total_qa_power > 0:
        for entry in table.miner_power:
            win_columns["epoch"].append(report.epoch)
            win_columns["miner"].append(entry.addr)
            win_columns["qa_power"].append(entry.qa_power)
            win_columns["wins"].append(report.rewards.get(entry.addr, 0))

    for key, stats in sorted(sim.get_call_stats().items()):
        stats_columns["epoch"].append(report.epoch)
        stats_columns["code"].append(key.code)
        stats_columns["method"].append(key.method)
        stats_columns["calls"].append(stats.calls)
        stats_columns["reads"].append(stats.reads)
        stats_columns["writes"].append(stats.writes)
        stats_columns["read_bytes"].append(stats.read_bytes)
        stats_columns["write_bytes"].append(stats.write_bytes)


def run_simulation(config: RunConfig) -> RunResult:
    """Tick a fresh simulation ``config.epochs`` times and write its artifacts.

    Outputs under ``config.out_dir``: ``logs/call_stats.parquet``,
    ``logs/epoch_summary.parquet``, ``logs/win_counts.parquet`` and
    ``run_manifest.json``.
    """
    out_dir = Path(config.out_dir)
    logs_dir(out_dir).mkdir(parents=True, exist_ok=True)

    sim = Sim(config.sim)
    add_transfer_agents(sim, config)

    summary_columns = new_columns(EPOCH_SUMMARY_SCHEMA)
    win_columns = new_columns(WIN_COUNT_SCHEMA)
    stats_columns = new_columns(CALL_STATS_SCHEMA)
    summary_writer: pq.ParquetWriter | None = None
    win_writer: pq.ParquetWriter | None = None
    stats_writer: pq.ParquetWriter | None = None

    all_miners: list[str] = []
    all_wins: list[int] = []
    all_power: list[int] = []
    all_total: list[int] = []
    messages_applied = 0
    final_total_qa_power = 0

    try:
        for _ in range(config.epochs):
            report = sim.tick()
            messages_applied += report.messages_applied
            final_total_qa_power = report.power_table.total_qa_power
            if report.power_table.total_qa_power > 0:
                for entry in report.power_table.miner_power:
                    all_miners.append(entry.addr)
                    all_wins.append(report.rewards.get(entry.addr, 0))
                    all_power.append(entry.qa_power)
                    all_total.append(report.power_table.total_qa_power)

            _record_tick(report, sim, summary_columns, win_columns, stats_columns)
            if len(stats_columns["epoch"]) >= FLUSH_THRESHOLD:
                stats_writer = flush_columns(
                    stats_columns, call_stats_path(out_dir), stats_writer, CALL_STATS_SCHEMA
                )
            if len(win_columns["epoch"]) >= FLUSH_THRESHOLD:
                win_writer = flush_columns(
                    win_columns, win_counts_path(out_dir), win_writer, WIN_COUNT_SCHEMA
                )

        # Empty streams still get a file so readers can rely on it existing.
        summary_writer = _flush_final(
            summary_columns, epoch_summary_path(out_dir), summary_writer, EPOCH_SUMMARY_SCHEMA
        )
        win_writer = _flush_final(
            win_columns, win_counts_path(out_dir), win_writer, WIN_COUNT_SCHEMA
        )
        stats_writer = _flush_final(
            stats_columns, call_stats_path(out_dir), stats_writer, CALL_STATS_SCHEMA
        )
    finally:
        for writer in (summary_writer, win_writer, stats_writer):
            if writer is not None:
                writer.close()

    summaries = summarize_win_counts(all_miners, all_wins, expected_wins(all_power, all_total))
    result = RunResult(
        epochs=config.epochs,
        messages_applied=messages_applied,
        miners=sum(1 for a in sim.agents if isinstance(a, MinerAgent)),
        total_wins=sum(all_wins),
        final_total_qa_power=final_total_qa_power,
        win_summaries=summaries,
    )

    manifest = {
        "schema_version": RUN_MANIFEST_SCHEMA_VERSION,
        "config": asdict(config),
        "result": asdict(result),
    }
    run_manifest_path(out_dir).write_text(
        json.dumps(manifest, ensure_ascii=False, indent=2, default=str)
    )
    logger.info(
        "run finished: %d epochs, %d messages, %d miners, %d wins",
        result.epochs,
        result.messages_applied,
        result.miners,
        result.total_wins,
    )
    return result


def _flush_final(
    columns: dict[str, list[object]],
    path: Path,
    writer: pq.ParquetWriter | None,
    schema: pa.Schema,
) -> pq.ParquetWriter:
    writer = flush_columns(columns, path, writer, schema)
    if writer is None:
        writer = pq.ParquetWriter(path, schema)
    return writer
