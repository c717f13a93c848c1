import logging

import pytest
import structlog


@pytest.fixture
def restore_logging():
    """configure_logging() replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
