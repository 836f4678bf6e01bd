import logging

import pytest

from estate_news.logging_setup import configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_level_names_are_accepted():
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    configure_logging("nonsense")
    assert logging.getLogger().level == logging.INFO


def test_repeated_calls_keep_a_single_handler():
    configure_logging(logging.WARNING)
    configure_logging(logging.WARNING)
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter._fmt == "[%(levelname)s] %(name)s: %(message)s"
