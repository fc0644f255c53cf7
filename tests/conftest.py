import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_bigclock_logger():
    """Undo what the CLI does to the package logger so caplog keeps working."""
    yield
    logger = logging.getLogger("bigclock")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
