from __future__ import annotations

from typing import Any, Dict

import pytest

from pushgate.tests.fixtures import FakeLogger, FakeQueue


@pytest.fixture(autouse=True)
def configure_structlog() -> None:
    """
    Configures cleanly structlog for each test method.
    https://github.com/hynek/structlog/issues/76#issuecomment-240373958
    """
    import structlog

    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def queue() -> FakeQueue:
    return FakeQueue()


@pytest.fixture
def failing_queue() -> FakeQueue:
    return FakeQueue(fail=True)


@pytest.fixture
def fake_logger() -> FakeLogger:
    return FakeLogger()


@pytest.fixture
def valid_event() -> Dict[str, Any]:
    return {
        "ref": "refs/heads/main",
        "head": "deadbeef",
        "repository": {
            "name": "repo",
            "url": "https://example.com/repo",
            "owner": {"name": "me"},
        },
    }
