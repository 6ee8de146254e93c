from __future__ import annotations

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Each test starts from structlog's default configuration."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
