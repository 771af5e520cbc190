import logging
import sys
from types import TracebackType
from typing import Any, Dict, Iterable, Optional, Tuple, Type

import sentry_sdk
import structlog
from sentry_sdk import capture_event
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import event_from_exception
from typing_extensions import Literal

EventDict = Dict[str, Any]
ExcInfo = Tuple[Type[BaseException], BaseException, Optional[TracebackType]]
SentryLevel = Literal["fatal", "error", "warning", "info", "debug"]

# invalid payload warnings carry the field `path`, queue faults the `queue`
SENTRY_TAG_KEYS = ("path", "queue")

_SENTRY_LEVEL_ALIASES: Dict[str, SentryLevel] = {
    "warn": "warning",
    "critical": "fatal",
}


def get_logging_level(name: str) -> int:
    return logging._nameToLevel[name.upper()]


def _resolve_exc_info(exc_info: Any) -> Optional[ExcInfo]:
    if isinstance(exc_info, BaseException):
        return (type(exc_info), exc_info, exc_info.__traceback__)
    if isinstance(exc_info, tuple):
        return exc_info if exc_info[0] is not None else None
    if exc_info:
        current = sys.exc_info()
        return current if current[0] is not None else None  # type: ignore [return-value]
    return None


class SentryProcessor:
    """
    Report structlog events at or above `level` to Sentry.

    Has to run before `format_exc_info`, which swaps `exc_info` for a rendered
    traceback. Keys named in `tag_keys` become Sentry tags so that rejected
    payloads group by field path and queue faults group by queue. The Sentry
    event id is stored on the event as `sentry_id`.

    Adapted from structlog-sentry, MIT License, Copyright (c) 2019 Kiwi.com.
    """

    def __init__(
        self, level: int = logging.WARNING, tag_keys: Iterable[str] = ()
    ) -> None:
        self.level = level
        self.tag_keys = tuple(tag_keys)

    def __call__(
        self, logger: Any, method_name: str, event_dict: EventDict
    ) -> EventDict:
        if get_logging_level(method_name) < self.level:
            return event_dict

        level = _SENTRY_LEVEL_ALIASES.get(method_name, method_name)
        event, hint = self.to_sentry_event(level, event_dict)
        event_dict["sentry_id"] = capture_event(event, hint=hint)
        return event_dict

    def to_sentry_event(
        self, level: str, event_dict: EventDict
    ) -> Tuple[EventDict, EventDict]:
        extra = {key: value for key, value in event_dict.items() if key != "exc_info"}

        exc_info = _resolve_exc_info(event_dict.get("exc_info"))
        if exc_info is not None:
            event, hint = event_from_exception(exc_info)
        else:
            event, hint = {}, {}

        event["level"] = level
        event["message"] = event_dict.get("event")
        event["extra"] = extra
        tags = {key: extra[key] for key in self.tag_keys if key in extra}
        if tags:
            event["tags"] = tags
        return event, hint


def configure_logging() -> None:
    from pushgate import app_config as conf

    # for info on logging formats see: https://docs.python.org/3/library/logging.html#logrecord-attributes
    logging.basicConfig(
        stream=sys.stdout,
        level=conf.LOGGING_LEVEL,
        format="%(levelname)s %(name)s:%(filename)s:%(lineno)d %(message)s",
    )

    # the structlog processor reports to Sentry with the event's fields as
    # extra data, so the logging integration would only send duplicates
    sentry_sdk.init(integrations=[LoggingIntegration(level=None, event_level=None)])

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            SentryProcessor(level=logging.WARNING, tag_keys=SENTRY_TAG_KEYS),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.KeyValueRenderer(key_order=["event"], sort_keys=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
