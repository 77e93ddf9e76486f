from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def awsauth_debug_logging(caplog):
    """Capture awsauth debug output so tests can assert nothing secret leaks."""
    caplog.set_level(logging.DEBUG, logger="awsauth")
    yield caplog
