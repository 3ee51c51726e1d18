"""Terminal logging for leaflets2ndx.

Everything is logged to stderr; stdout may carry the index groups.
"""

from __future__ import annotations

import logging
import sys

_YELLOW = "\033[93m"
_RED = "\033[91m"
_RESET = "\033[0m"


class ColoredFormatter(logging.Formatter):
    """Highlight warnings and errors when stderr is a terminal."""

    COLORS = {
        logging.WARNING: _YELLOW,
        logging.ERROR: _RED,
        logging.CRITICAL: _RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.COLORS.get(record.levelno)
        if color is None or not sys.stderr.isatty():
            return message
        return f"{color}{message}{_RESET}"


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route leaflets2ndx logging to stderr.

    WARNING by default, INFO with ``verbose`` and DEBUG (with logger names)
    with ``debug``.
    """
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    fmt = "%(levelname)s %(name)s: %(message)s" if debug else "%(message)s"

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(fmt))

    logging.root.handlers = [handler]
    logging.root.setLevel(level)

    suppress_mdanalysis_info()


def suppress_mdanalysis_info() -> None:
    # topology guessing chatter from Universe creation
    logging.getLogger("MDAnalysis").setLevel(logging.WARNING)
