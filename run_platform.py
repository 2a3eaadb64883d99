#!/usr/bin/env python3
"""CLI entrypoint for the stock trading platform.

Usage::

    python run_platform.py
    python run_platform.py --config config/default.yaml
    python run_platform.py --data-file alice.txt --seed 42 --log-level INFO

Starts an interactive session against the five-stock simulated market. The
portfolio is saved to (and restored from) a single text file.
"""

from __future__ import annotations

import argparse
import logging
import sys

from models.config import PlatformConfig
from simulation.session import TradingSession


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the interactive stock trading simulation.",
    )
    parser.add_argument(
        "--config",
        default=None,
        type=str,
        help="Path to a YAML configuration file (default: built-in defaults).",
    )
    parser.add_argument(
        "--data-file",
        default=None,
        type=str,
        help="Portfolio save file; overrides persistence.data_file from the config.",
    )
    parser.add_argument(
        "--seed",
        default=None,
        type=int,
        help="Random seed for market prices; overrides market.seed from the config.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return parser.parse_args(argv)


def _setup_logging(level: str) -> None:
    """Configure root logger; logs go to stderr so they stay out of the menu."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def load_config(args: argparse.Namespace) -> PlatformConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = PlatformConfig.from_yaml(args.config) if args.config else PlatformConfig()
    if args.data_file is not None:
        config = config.model_copy(
            update={
                "persistence": config.persistence.model_copy(
                    update={"data_file": args.data_file}
                )
            }
        )
    if args.seed is not None:
        config = config.model_copy(
            update={"market": config.market.model_copy(update={"seed": args.seed})}
        )
    return config


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    _setup_logging(args.log_level)

    logger = logging.getLogger(__name__)
    if args.config:
        logger.info("Loading config from '%s'...", args.config)

    config = load_config(args)
    logger.info("Save file: '%s'", config.persistence.data_file)

    TradingSession(config).run()


if __name__ == "__main__":
    main()
