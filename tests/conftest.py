"""Root test configuration: keep CLI logging handlers from leaking between tests"""

import logging

import pytest


_CLI_HANDLERS = (logging.StreamHandler, logging.FileHandler)


@pytest.fixture(autouse=True)
def reset_logging():
    """Close the stderr/file handlers the CLI's logging setup installs."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) in _CLI_HANDLERS:
            root.removeHandler(handler)
            handler.close()
