"""
Pydantic data models package.

Contains the validation models for API requests and responses.
"""

from .trace_entry import (
    EntryKindName,
    ErrorResponse,
    MaskRequest,
    MaskResponse,
    TraceEntryPayload,
)

__all__ = [
    "EntryKindName",
    "TraceEntryPayload",
    "MaskRequest",
    "MaskResponse",
    "ErrorResponse",
]
