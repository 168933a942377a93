"""CLI entrypoint for simulation runs.

CLI arguments override values from ``--config path/to/config.json``; config
file values override built-in defaults. A JSON summary of the run is printed
to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from actor_sim.config.constants import DEFAULT_PRECOMMIT_RATE, DEFAULT_TRANSFER_RATE
from actor_sim.config.types import MinerAgentConfig, RunConfig, SimConfig, TransferAgentConfig
from actor_sim.errors import SimulationError
from actor_sim.experiments.run import run_simulation

_KIND_NAMES = {int: "an integer", float: "a number", str: "a string"}


def _setting(
    cli_val: object, key: str, file_cfg: dict[str, object], default: object, kind: type
) -> Any:
    """Resolve ``key`` as CLI > config file > default and convert it to ``kind``.

    Booleans are rejected even though they are ints, and floats only become
    ints when they have no fractional part.
    """
    raw = cli_val if cli_val is not None else file_cfg.get(key, default)
    if isinstance(raw, Path) and kind is str:
        return str(raw)
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"{key} must be {_KIND_NAMES[kind]} value")
    if kind is int and isinstance(raw, float) and not raw.is_integer():
        raise ValueError(f"{key} must be {_KIND_NAMES[kind]} value, got {raw!r}")
    try:
        return kind(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be {_KIND_NAMES[kind]} value, got {raw!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Run a deterministic actor-runtime simulation")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file; CLI arguments override its values",
    )
    parser.add_argument("--epochs", type=int, default=None)
    parser.add_argument("--accounts", type=int, default=None)
    parser.add_argument("--initial-balance", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--create-miner-probability", type=float, default=None)
    parser.add_argument("--precommit-rate", type=float, default=None)
    parser.add_argument("--transfer-agents", type=int, default=None)
    parser.add_argument("--transfer-rate", type=float, default=None)
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for simulation runs."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")
        if not isinstance(file_cfg, dict):
            parser.error(f"Config file must contain a JSON object: {args.config}")

    try:
        config = RunConfig(
            sim=SimConfig(
                account_count=_setting(args.accounts, "accounts", file_cfg, 10, int),
                account_initial_balance=_setting(
                    args.initial_balance, "initial_balance", file_cfg, 10_000, int
                ),
                seed=_setting(args.seed, "seed", file_cfg, 0, int),
                create_miner_probability=_setting(
                    args.create_miner_probability, "create_miner_probability", file_cfg, 0.1, float
                ),
                miner_config=MinerAgentConfig(
                    precommit_rate=_setting(
                        args.precommit_rate, "precommit_rate", file_cfg, DEFAULT_PRECOMMIT_RATE, float
                    ),
                ),
            ),
            epochs=_setting(args.epochs, "epochs", file_cfg, 100, int),
            out_dir=Path(_setting(args.out_dir, "out_dir", file_cfg, "data", str)),
            n_transfer_agents=_setting(args.transfer_agents, "transfer_agents", file_cfg, 0, int),
            transfer_config=TransferAgentConfig(
                transfer_rate=_setting(
                    args.transfer_rate, "transfer_rate", file_cfg, DEFAULT_TRANSFER_RATE, float
                ),
            ),
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        result = run_simulation(config)
    except SimulationError as exc:
        parser.exit(1, f"simulation failed: {exc}\n")

    summary = {
        "epochs": result.epochs,
        "messages_applied": result.messages_applied,
        "miners": result.miners,
        "total_wins": result.total_wins,
        "final_total_qa_power": result.final_total_qa_power,
        "out_dir": str(config.out_dir),
    }
    print(json.dumps(summary, ensure_ascii=False))


if __name__ == "__main__":
    main()
