import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging():
    """cli.setup_logging installs root handlers; drop them after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
