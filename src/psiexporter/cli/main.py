"""
Command-line interface for the PSI exporter.

This module provides the main CLI entry point: it parses flags, assembles
the configuration, checks that the kernel exposes pressure stall
information, and serves the metrics endpoint until interrupted.
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from .. import __version__
from ..collectors.exceptions import WalkRootMissing
from ..config import get_config_info, load_config
from ..exporter import create_app, serve
from ..system import check_psi_available, describe_cgroup_root
from ..validation import (
    LOG_LEVELS,
    ValidationError,
    handle_cli_error,
    validate_path_exists,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure root logging on stdout.

    Args:
        level: Logging level for the root logger
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    logging.getLogger().setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; unset flags default to None so the config file wins."""
    parser = argparse.ArgumentParser(
        prog="psi-exporter",
        description="Expose Linux pressure stall information for every cgroup as Prometheus metrics.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to a TOML configuration file. Flags override its values.",
    )
    parser.add_argument(
        "--web.listen-address",
        dest="listen_address",
        type=str,
        help="Address on which to expose metrics and web interface (default: [::1]:12345).",
    )
    parser.add_argument(
        "--metrics.disable-avg",
        dest="disable_averages",
        action="store_const",
        const=True,
        help="Disable reporting of average values.",
    )
    parser.add_argument(
        "--metrics.silence-zeros",
        dest="silence_zeros",
        action="store_const",
        const=True,
        help="Do not report zero values.",
    )
    parser.add_argument(
        "--cgroup.root",
        dest="cgroup_root",
        type=str,
        help="Mount point of the cgroup2 filesystem (default: /sys/fs/cgroup).",
    )
    parser.add_argument(
        "--cgroup.exclude-suffix",
        dest="exclude_suffixes",
        action="append",
        metavar="SUFFIX",
        help="Skip cgroups whose name ends in SUFFIX, with their subtree. Repeatable.",
    )
    parser.add_argument(
        "--scrape.timeout",
        dest="scrape_timeout",
        type=float,
        help="Seconds a scrape may take before it fails (default: 10).",
    )
    parser.add_argument(
        "--scrape.workers",
        dest="read_workers",
        type=int,
        help="Threads reading pressure files concurrently (default: 4).",
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging verbosity (default: INFO).",
    )
    return parser


def build_overrides(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    """Map parsed flags onto configuration sections."""
    return {
        "exporter": {
            "listen_address": args.listen_address,
            "log_level": args.log_level,
        },
        "collection": {
            "cgroup_root": args.cgroup_root,
            "exclude_suffixes": args.exclude_suffixes,
            "scrape_timeout": args.scrape_timeout,
            "read_workers": args.read_workers,
        },
        "metrics": {
            "disable_averages": args.disable_averages,
            "silence_zeros": args.silence_zeros,
        },
    }


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for the PSI exporter.

    Raises:
        SystemExit: On configuration errors or when no PSI data is available.
    """
    args = build_parser().parse_args(argv)
    setup_logging()

    config_path = None
    try:
        if args.config:
            config_path = Path(validate_path_exists(args.config, field_name="--config"))
        config = load_config(config_path, build_overrides(args))
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )

    logging.getLogger().setLevel(config.log_level)
    logger.info(f"Starting psi-exporter {__version__}: {get_config_info(config, config_path)}")

    try:
        logger.info(f"Cgroup root filesystem: {describe_cgroup_root(config.cgroup_root)}")
        check_psi_available(config.cgroup_root, config.proc_pressure_dir)
    except WalkRootMissing as e:
        handle_cli_error(
            error=e,
            context="startup check",
            exit_code=1,
            logger=logger,
        )

    serve(create_app(config=config), config)


if __name__ == "__main__":
    main_cli()
