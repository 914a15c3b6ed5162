"""Entry point for the swaybar status generator."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .blocks import build_blocks
from .config import DEFAULT_CONFIG_PATH, default_bar_config, load_config
from .errors import ConfigError
from .scheduler import UpdateChannel
from .status_generator import StatusGenerator

DEFAULT_LOG_FILE = "/tmp/swaybar-blocks.log"

logger = logging.getLogger(__name__)


def setup_logging(log_file: str, level: str) -> None:
    """Log to a file: stdout carries the i3bar protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.FileHandler(log_file)]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="swaybar-blocks",
        description="i3bar protocol status generator with firewall and killswitch blocks"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to config.toml (default: {DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument(
        "--one-shot",
        action="store_true",
        help="Update every block once, print one status line and exit"
    )
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="Log file path")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Load configuration, build blocks and run the status generator."""
    args = parse_args(argv)
    setup_logging(args.log_file, args.log_level)

    try:
        if args.config is not None:
            bar_config = load_config(args.config)
        elif DEFAULT_CONFIG_PATH.exists():
            bar_config = load_config(DEFAULT_CONFIG_PATH)
        else:
            logger.info("No configuration file found, using default blocks")
            bar_config = default_bar_config()
    except ConfigError as e:
        logger.error(f"Configuration error: {e.message}")
        print(f"swaybar-blocks: {e.message}", file=sys.stderr)
        return 1

    channel = UpdateChannel()
    blocks = build_blocks(bar_config.blocks, bar_config.config, channel.handle())
    generator = StatusGenerator(blocks, bar_config.config, channel)

    if args.one_shot:
        generator.run_once()
        return 0

    generator.start_click_listener()
    generator.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
