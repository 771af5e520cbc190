"""
Hand accepted events to the build worker.

Jobs are stored the way Resque stores them so any Resque compatible worker
can consume them: the queue name is registered in `<prefix>:queues` and the
JSON encoded job is appended to `<prefix>:queue:<name>`.
"""
from __future__ import annotations

import json
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict

import structlog
from pydantic import BaseModel
from redis.exceptions import RedisError
from typing_extensions import Protocol

from pushgate.errors import QueueError

logger = structlog.get_logger()

BUILD_JOB = "build"


class EnqueueAcknowledgement(BaseModel):
    id: str
    queue: str
    job_type: str


class JobQueue(Protocol):
    async def enqueue(
        self, job_type: str, payload: Dict[str, Any]
    ) -> EnqueueAcknowledgement:
        ...


@dataclass(frozen=True)
class JobDescriptor:
    job_type: str
    payload: Dict[str, Any]

    @classmethod
    def build(cls, event: Dict[str, Any]) -> JobDescriptor:
        return cls(job_type=BUILD_JOB, payload={"push": event})


class RedisClient(Protocol):
    async def sadd(self, name: str, *values: str) -> Any:
        ...

    async def rpush(self, name: str, *values: str) -> Any:
        ...


def queue_key(prefix: str, queue_name: str) -> str:
    return f"{prefix}:queue:{queue_name}"


def queues_key(prefix: str) -> str:
    return f"{prefix}:queues"


class RedisJobQueue:
    def __init__(
        self, redis: RedisClient, queue_name: str, prefix: str = "resque"
    ) -> None:
        self.redis = redis
        self.queue_name = queue_name
        self.prefix = prefix

    async def enqueue(
        self, job_type: str, payload: Dict[str, Any]
    ) -> EnqueueAcknowledgement:
        job_id = uuid.uuid4().hex
        job = json.dumps(
            {
                "class": job_type,
                "args": [payload],
                "id": job_id,
                "queue_time": time.time(),
            }
        )
        log = logger.bind(queue=self.queue_name, job_type=job_type, job_id=job_id)
        try:
            await self.redis.sadd(queues_key(self.prefix), self.queue_name)
            await self.redis.rpush(queue_key(self.prefix, self.queue_name), job)
        except RedisError as e:
            raise QueueError(self.queue_name, str(e)) from e
        log.info("job_enqueued")
        return EnqueueAcknowledgement(
            id=job_id, queue=self.queue_name, job_type=job_type
        )
