import os

import pytest


@pytest.hookimpl(tryfirst=True)  # type: ignore[misc]
def pytest_load_initial_conftests(
    args: object, early_config: object, parser: object
) -> None:
    os.environ["HOOK_TOKEN"] = "abc123"
    os.environ["REDIS_URL"] = "redis://localhost:6379"
    os.environ["QUEUE_NAME"] = "build"
    os.environ["LOGGING_LEVEL"] = "DEBUG"
