"""
Decide what happens to a single push webhook delivery.

The pipeline is authenticate, validate, then enqueue. Each step either hands
off to the next or ends the request with one of the outcome values below. The
HTTP layer maps outcomes to responses, so nothing here knows about status
codes.
"""
from __future__ import annotations

import hmac
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Union

from typing_extensions import Protocol

from pushgate.errors import QueueError
from pushgate.queue import EnqueueAcknowledgement, JobDescriptor, JobQueue
from pushgate.validation import Diagnostic, parse_event


class Validator(Protocol):
    def validate(self, event: Dict[str, Any]) -> List[Diagnostic]:
        ...


class Logger(Protocol):
    def warning(self, event: str, **kw: Any) -> Any:
        ...

    def exception(self, event: str, **kw: Any) -> Any:
        ...


@dataclass(frozen=True)
class Accepted:
    ack: EnqueueAcknowledgement


@dataclass(frozen=True)
class Forbidden:
    pass


@dataclass(frozen=True)
class Invalid:
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass(frozen=True)
class QueueUnavailable:
    error: QueueError


Outcome = Union[Accepted, Forbidden, Invalid, QueueUnavailable]

BodyReader = Callable[[], Awaitable[bytes]]


class PushHook:
    def __init__(
        self, token: str, queue: JobQueue, validator: Validator, logger: Logger
    ) -> None:
        self._token = token.encode()
        self.queue = queue
        self.validator = validator
        self.logger = logger

    def authenticate(self, token: str) -> bool:
        return hmac.compare_digest(token.encode(), self._token)

    async def handle(self, token: str, read_body: BodyReader) -> Outcome:
        """
        Run one delivery through the pipeline.

        `read_body` is only awaited once the token matches, so a rejected
        caller never gets its payload read or parsed.
        """
        if not self.authenticate(token):
            return Forbidden()

        event = parse_event(await read_body())
        diagnostics = self.validator.validate(event)
        if diagnostics:
            for diagnostic in diagnostics:
                self.logger.warning(
                    f"{diagnostic.path} {diagnostic.message}",
                    path=diagnostic.path,
                    actual=diagnostic.value,
                )
            return Invalid(diagnostics)

        job = JobDescriptor.build(event)
        try:
            ack = await self.queue.enqueue(job.job_type, job.payload)
        except QueueError as e:
            self.logger.exception("enqueue_failed", queue=e.queue)
            return QueueUnavailable(e)
        return Accepted(ack)
