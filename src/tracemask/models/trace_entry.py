"""
Trace entry API models and validation.

- Entry kinds: request, response (with optional status code), error (with message)
- Bodies travel as base64 so binary payloads survive JSON transport
- Omitting the policy applies the configured default
"""

import base64
import binascii
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from ..core.entry import ErrorKind, RequestKind, ResponseKind, TraceEntry
from ..core.exceptions import ValidationError
from ..core.policy import MaskingPolicy


class EntryKindName(str, Enum):
    """Allowed entry kinds."""

    REQUEST = "request"
    RESPONSE = "response"
    ERROR = "error"


class TraceEntryPayload(BaseModel):
    """
    Wire representation of a trace entry.

    Fields that only belong to one kind are rejected on the others.
    """

    kind: EntryKindName = Field(description="Entry kind (request, response, error)")
    method: str = Field(
        min_length=1,
        max_length=16,
        description="HTTP method"
    )
    url: str = Field(min_length=1, description="Request URL")
    status_code: Optional[int] = Field(
        default=None,
        ge=100,
        le=599,
        description="HTTP status code (response only)"
    )
    error: Optional[str] = Field(
        default=None,
        description="Error message (error only)"
    )

    headers: Optional[Dict[str, str]] = Field(default=None, description="HTTP headers")
    body: Optional[str] = Field(default=None, description="Base64-encoded body")
    timestamp: Optional[datetime] = Field(
        default=None,
        description="RFC3339 capture time, defaults to now"
    )
    duration: Optional[float] = Field(
        default=None,
        ge=0,
        description="Duration in seconds"
    )
    request_id: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=128,
        description="Request identifier, generated when omitted"
    )

    # GraphQL
    operation_name: Optional[str] = Field(default=None, description="GraphQL operation name")
    query: Optional[str] = Field(default=None, description="GraphQL query document")
    variables: Optional[Dict[str, Any]] = Field(default=None, description="GraphQL variables")

    @model_validator(mode="after")
    def validate_kind_fields(self) -> "TraceEntryPayload":
        """Enforce which fields each entry kind may and must carry."""
        if self.status_code is not None and self.kind != EntryKindName.RESPONSE:
            raise ValueError("status_code is only allowed on response entries")
        if self.error is not None and self.kind != EntryKindName.ERROR:
            raise ValueError("error is only allowed on error entries")
        if self.error is None and self.kind == EntryKindName.ERROR:
            raise ValueError("error entries require an error message")
        return self

    def to_entry(self, body_bytes_max: Optional[int] = None) -> TraceEntry:
        """Convert to a core trace entry, decoding the body."""
        kind: Any
        if self.kind == EntryKindName.RESPONSE:
            kind = ResponseKind(method=self.method, url=self.url, status_code=self.status_code)
        elif self.kind == EntryKindName.ERROR:
            kind = ErrorKind(method=self.method, url=self.url, message=self.error)
        else:
            kind = RequestKind(method=self.method, url=self.url)

        optional: Dict[str, Any] = {}
        if self.timestamp is not None:
            optional["timestamp"] = self.timestamp
        if self.request_id is not None:
            optional["request_id"] = self.request_id

        return TraceEntry(
            kind=kind,
            headers=self.headers,
            body=self._decode_body(body_bytes_max),
            duration=self.duration,
            operation_name=self.operation_name,
            query=self.query,
            variables=self.variables,
            **optional,
        )

    def _decode_body(self, body_bytes_max: Optional[int]) -> Optional[bytes]:
        if self.body is None:
            return None

        try:
            body = base64.b64decode(self.body, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError(
                "Body must be valid base64",
                details={"request_id": self.request_id},
            )

        if body_bytes_max is not None and len(body) > body_bytes_max:
            raise ValidationError(
                f"Body exceeds {body_bytes_max} byte limit",
                details={"request_id": self.request_id, "body_bytes": len(body)},
            )
        return body

    @classmethod
    def from_entry(cls, entry: TraceEntry) -> "TraceEntryPayload":
        """Build the wire representation of a (masked) trace entry."""
        return cls(
            kind=EntryKindName(entry.kind.raw_value),
            method=entry.method,
            url=entry.url,
            status_code=entry.status_code,
            error=entry.error,
            headers=dict(entry.headers) if entry.headers is not None else None,
            body=base64.b64encode(entry.body).decode("ascii") if entry.body is not None else None,
            timestamp=entry.timestamp,
            duration=entry.duration,
            request_id=entry.request_id,
            operation_name=entry.operation_name,
            query=entry.query,
            variables=dict(entry.variables) if entry.variables is not None else None,
        )


class MaskRequest(BaseModel):
    """
    Batch masking request.

    Batch size limit is enforced by the handler from settings.
    """

    entries: List[TraceEntryPayload] = Field(
        min_length=1,
        description="Trace entries to mask"
    )
    policy: Optional[MaskingPolicy] = Field(
        default=None,
        description="Masking policy, defaults to the configured policy"
    )


class MaskResponse(BaseModel):
    """Masked entries, in request order."""

    entries: List[TraceEntryPayload] = Field(description="Masked trace entries")
    request_id: str = Field(description="Unique request identifier")
    timestamp: datetime = Field(description="Processing timestamp")


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error: str = Field(description="Error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional error details"
    )
