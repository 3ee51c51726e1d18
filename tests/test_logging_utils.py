"""Tests for terminal logging setup."""

import logging

import pytest

from leaflets2ndx.core.logging_utils import ColoredFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    handlers, level = logging.root.handlers[:], logging.root.level
    yield
    logging.root.handlers = handlers
    logging.root.setLevel(level)


class TestSetupLogging:
    @pytest.mark.parametrize(
        "verbose, debug, level",
        [
            (False, False, logging.WARNING),
            (True, False, logging.INFO),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, verbose, debug, level):
        setup_logging(verbose=verbose, debug=debug)
        assert logging.root.level == level

    def test_single_colored_handler(self):
        setup_logging()
        setup_logging(verbose=True)
        assert len(logging.root.handlers) == 1
        assert isinstance(logging.root.handlers[0].formatter, ColoredFormatter)

    def test_mdanalysis_kept_quiet(self):
        setup_logging(debug=True)
        assert logging.getLogger("MDAnalysis").level == logging.WARNING


def test_plain_text_when_not_a_terminal():
    record = logging.LogRecord("leaflets2ndx", logging.WARNING, __file__, 1, "careful", None, None)
    # pytest captures stderr, so it is never a TTY here
    assert ColoredFormatter("%(message)s").format(record) == "careful"
