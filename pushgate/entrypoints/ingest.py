"""
Accept push webhooks over HTTP and add them to the build queue.
"""
from __future__ import annotations

import contextlib
from typing import AsyncIterator, Optional

import structlog
import uvicorn
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware
from starlette import status
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route
from starlette.types import Lifespan
from typing_extensions import assert_never

from pushgate import app_config as conf
from pushgate.gateway import (
    Accepted,
    Forbidden,
    Invalid,
    Outcome,
    PushHook,
    QueueUnavailable,
)
from pushgate.logging import configure_logging
from pushgate.queue import RedisJobQueue
from pushgate.redis_client import create_connection
from pushgate.validation import PushEventValidator

configure_logging()

logger = structlog.get_logger()


def to_response(outcome: Outcome) -> Response:
    if isinstance(outcome, Accepted):
        return JSONResponse(outcome.ack.model_dump())
    if isinstance(outcome, Forbidden):
        return JSONResponse(
            {"detail": "Access denied"}, status_code=status.HTTP_403_FORBIDDEN
        )
    if isinstance(outcome, Invalid):
        return JSONResponse(
            {
                "detail": "Invalid event payload",
                "errors": [diagnostic.as_dict() for diagnostic in outcome.diagnostics],
            },
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(outcome, QueueUnavailable):
        return JSONResponse(
            {"detail": "Queue unavailable"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    assert_never(outcome)


def create_app(
    hook: PushHook, lifespan: Optional[Lifespan[Starlette]] = None
) -> Starlette:
    async def root(_: Request) -> Response:
        return PlainTextResponse("OK")

    async def push_event(request: Request) -> Response:
        outcome = await hook.handle(request.path_params["token"], request.body)
        return to_response(outcome)

    return Starlette(
        routes=[
            Route("/", root, methods=["GET"]),
            Route("/hook/push/{token}", push_event, methods=["POST"]),
        ],
        middleware=[Middleware(SentryAsgiMiddleware)],
        lifespan=lifespan,
    )


redis_bot = create_connection()


@contextlib.asynccontextmanager
async def lifespan(_: Starlette) -> AsyncIterator[None]:
    yield
    await redis_bot.aclose()


hook = PushHook(
    token=conf.HOOK_TOKEN,
    queue=RedisJobQueue(redis_bot, conf.QUEUE_NAME, prefix=conf.QUEUE_PREFIX),
    validator=PushEventValidator(),
    logger=logger,
)
app = create_app(hook, lifespan=lifespan)


def main() -> None:
    uvicorn.run("pushgate.entrypoints.ingest:app", host="0.0.0.0", port=conf.PORT)


if __name__ == "__main__":
    main()
