from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest

from pushgate import app_config as conf
from pushgate.errors import QueueError
from pushgate.queue import EnqueueAcknowledgement


class FakeQueue:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    async def enqueue(
        self, job_type: str, payload: Dict[str, Any]
    ) -> EnqueueAcknowledgement:
        self.calls.append((job_type, payload))
        if self.fail:
            raise QueueError("build", "connection refused")
        return EnqueueAcknowledgement(
            id=f"job-{len(self.calls)}", queue="build", job_type=job_type
        )


class FakeLogger:
    def __init__(self) -> None:
        self.warnings: List[Tuple[str, Dict[str, Any]]] = []
        self.exceptions: List[Tuple[str, Dict[str, Any]]] = []

    def warning(self, event: str, **kw: Any) -> None:
        self.warnings.append((event, kw))

    def exception(self, event: str, **kw: Any) -> None:
        self.exceptions.append((event, kw))


def redis_running() -> bool:
    """
    Check if service is listening at the REDIS host and port.
    """
    import socket

    s = socket.socket()
    host = conf.REDIS_URL.hostname
    port = conf.REDIS_URL.port
    assert host and port
    try:
        s.connect((host, port))
        s.close()
        return True
    except OSError:
        return False


requires_redis = pytest.mark.skipif(not redis_running(), reason="redis is not running")
