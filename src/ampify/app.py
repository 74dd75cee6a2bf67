from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from ampify.core.handlers.convert_handler import handle_convert
from ampify.core.managers.config_manager import config_manager
from ampify.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def _peek_log_level(argv: List[str]) -> Optional[str]:
    """Reads --log-level ahead of the real parse so logging is set up first."""
    peek = argparse.ArgumentParser(add_help=False)
    peek.add_argument("--log-level", default=None)
    known, _ = peek.parse_known_args(argv)
    return known.log_level


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for running the converter from the command line."""
    argv = sys.argv[1:] if argv is None else list(argv)

    level = _peek_log_level(argv) or config_manager.get_nested("debug.level", "WARNING")
    configure_logger(level)
    logger.debug("Logging configured at level %s", level)

    return handle_convert(argv)


if __name__ == "__main__":
    sys.exit(main())
