"""
Structural validation of incoming push events.

The schema is partial: only the fields the build pipeline relies on are
constrained and unknown keys are allowed at every level. Every violation is
reported, in declaration order, so a sender can fix all of them in one round
trip.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

import pydantic
from pydantic import AfterValidator, BeforeValidator, ConfigDict
from pydantic_core import PydanticCustomError
from typing_extensions import Annotated

MISSING_MESSAGE = "This field is missing."
NOT_OBJECT_MESSAGE = "This value should be of type object."


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_event(body: bytes) -> Dict[str, Any]:
    """
    Decode a request body.

    Anything that isn't a strict JSON object decodes to an empty mapping so
    that every required field is reported as missing. `NaN` and `Infinity` are
    refused because they can't be written back out as JSON.
    """
    try:
        event = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        # UnicodeDecodeError is a ValueError too
        return {}
    if not isinstance(event, dict):
        return {}
    return event


def _require_string(value: Any) -> Any:
    if not isinstance(value, str):
        raise PydanticCustomError("not_string", "This value should be of type string.")
    return value


def matches(pattern: str, flags: int = 0) -> Callable[[str], str]:
    regex = re.compile(pattern, flags)

    def validate(value: str) -> str:
        if regex.search(value) is None:
            raise PydanticCustomError("pattern_mismatch", "This value is not valid.")
        return value

    return validate


def not_blank(value: Any) -> Any:
    if value is None or value is False or value == "" or value == [] or value == {}:
        raise PydanticCustomError("not_blank", "This value should not be blank.")
    return value


NotBlank = Annotated[Any, AfterValidator(not_blank)]
GitRef = Annotated[
    Any, BeforeValidator(_require_string), AfterValidator(matches(r"^refs/heads/"))
]
CommitSha = Annotated[
    Any,
    BeforeValidator(_require_string),
    AfterValidator(matches(r"^[0-9a-f]", re.IGNORECASE)),
]
RepositoryUrl = Annotated[
    Any, BeforeValidator(_require_string), AfterValidator(matches(r"^https?://.+$"))
]


class Collection(pydantic.BaseModel):
    model_config = ConfigDict(extra="allow")


class Owner(Collection):
    name: NotBlank


class Repository(Collection):
    name: NotBlank
    url: RepositoryUrl
    owner: Owner


class PushEvent(Collection):
    ref: GitRef
    head: CommitSha
    repository: Repository


@dataclass(frozen=True)
class Diagnostic:
    path: str
    message: str
    value: Any

    def as_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "message": self.message, "value": self.value}

    def __str__(self) -> str:
        return f"{self.path}: {self.message} ({json.dumps(self.value)})"


def _diagnostic_from_error(error: Any) -> Diagnostic:
    path = ".".join(str(part) for part in error["loc"])
    if error["type"] == "missing":
        return Diagnostic(path=path, message=MISSING_MESSAGE, value=None)
    if error["type"] == "model_type":
        return Diagnostic(path=path, message=NOT_OBJECT_MESSAGE, value=error["input"])
    return Diagnostic(path=path, message=error["msg"], value=error["input"])


class PushEventValidator:
    def validate(self, event: Dict[str, Any]) -> List[Diagnostic]:
        try:
            PushEvent.model_validate(event)
        except pydantic.ValidationError as e:
            return [_diagnostic_from_error(error) for error in e.errors()]
        return []
