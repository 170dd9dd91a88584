"""
Network trace entry value objects.

An entry is built once by the caller and never mutated. Masking produces
a new entry with the same shape.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class RequestKind:
    """An outgoing request."""

    method: str
    url: str

    @property
    def raw_value(self) -> str:
        return "request"

    def with_url(self, url: str) -> "RequestKind":
        return replace(self, url=url)


@dataclass(frozen=True)
class ResponseKind:
    """A received response. ``status_code`` may be absent for GraphQL transports."""

    method: str
    url: str
    status_code: Optional[int] = None

    @property
    def raw_value(self) -> str:
        return "response"

    def with_url(self, url: str) -> "ResponseKind":
        return replace(self, url=url)


@dataclass(frozen=True)
class ErrorKind:
    """A failed request."""

    method: str
    url: str
    message: str

    @property
    def raw_value(self) -> str:
        return "error"

    def with_url(self, url: str) -> "ErrorKind":
        return replace(self, url=url)


EntryKind = Union[RequestKind, ResponseKind, ErrorKind]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_request_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class TraceEntry:
    """
    A single captured network event.

    GraphQL operations additionally carry ``operation_name``, ``query``
    and ``variables``; REST entries leave them unset.
    """

    kind: EntryKind
    headers: Optional[Mapping[str, str]] = None
    body: Optional[bytes] = None
    timestamp: datetime = field(default_factory=_utcnow)
    duration: Optional[float] = None
    request_id: str = field(default_factory=_new_request_id)
    operation_name: Optional[str] = None
    query: Optional[str] = None
    variables: Optional[Mapping[str, Any]] = None

    @property
    def method(self) -> str:
        return self.kind.method

    @property
    def url(self) -> str:
        return self.kind.url

    @property
    def status_code(self) -> Optional[int]:
        if isinstance(self.kind, ResponseKind):
            return self.kind.status_code
        return None

    @property
    def error(self) -> Optional[str]:
        if isinstance(self.kind, ErrorKind):
            return self.kind.message
        return None

    @property
    def is_graphql(self) -> bool:
        return (
            self.operation_name is not None
            or self.query is not None
            or self.variables is not None
        )

    @property
    def log_level(self) -> str:
        """Log level for this entry: errors and 4xx/5xx responses log at error."""
        if isinstance(self.kind, ErrorKind):
            return "error"
        status_code = self.status_code
        if status_code is not None and status_code >= 400:
            return "error"
        return "info"
