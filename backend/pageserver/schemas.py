"""Pydantic models for a single request/response exchange."""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


# ── Request ──────────────────────────────────────────────────────────────────

class RequestDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: str
    path: str


# ── Route outcomes ───────────────────────────────────────────────────────────

class Redirect(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["redirect"] = "redirect"
    location: str


class Stream(BaseModel):
    """A byte stream to pipe into the response body.

    ``content_type`` is only set when the file's extension is in the
    content-type table; fixed pages never carry one.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["stream"] = "stream"
    stream: Any
    content_type: Optional[str] = None


class NotFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["not_found"] = "not_found"


RouteOutcome = Union[Redirect, Stream, NotFound]


# ── Error taxonomy ───────────────────────────────────────────────────────────

class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"

    @property
    def status_code(self) -> int:
        return 404 if self is ErrorKind.NOT_FOUND else 500
