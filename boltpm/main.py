"""Main CLI entry point for bolt-pm.

Fire runs the command, but the dispatcher receives the raw command-line
tokens so operands reach it exactly as typed. The process exits with the
dispatcher's status.
"""

import logging
import sys
from typing import Any

import fire

from boltpm.cli import PROG, BoltCLI
from boltpm.config import get_config

logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main() -> None:
    """Main entry point for the CLI."""
    config = get_config()
    setup_logging(config.log_level)
    logger.debug(f"Using config: {config.model_dump()}")
    cli = BoltCLI(config)
    argv = sys.argv[1:]

    def bolt_pm(*args: Any) -> None:
        # Fire parses operands as Python literals; dispatch the tokens as typed
        sys.exit(cli.dispatch(argv))

    fire.Fire(bolt_pm, command=argv, name=PROG)


if __name__ == "__main__":
    main()
