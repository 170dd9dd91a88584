"""
tracemask - Privacy masking for captured network traces

Redacts headers, URL queries, JSON bodies, GraphQL variables and query
literals before trace entries reach logs or analytics sinks.
"""

__version__ = "0.1.0"

from .core.entry import EntryKind, ErrorKind, RequestKind, ResponseKind, TraceEntry
from .core.masking import (
    MASKED_VALUE,
    mask,
    mask_body,
    mask_entries,
    mask_headers,
    mask_query,
    mask_url,
    mask_variables,
)
from .core.policy import MaskingPolicy, PrivacyLevel
from .core.query_literals import mask_query_literals
from .core.tracer import AnalyticsSink, NetworkTracer

__all__ = [
    # Entries
    "EntryKind",
    "RequestKind",
    "ResponseKind",
    "ErrorKind",
    "TraceEntry",

    # Policy
    "MaskingPolicy",
    "PrivacyLevel",

    # Masking
    "MASKED_VALUE",
    "mask",
    "mask_entries",
    "mask_headers",
    "mask_url",
    "mask_body",
    "mask_variables",
    "mask_query",
    "mask_query_literals",

    # Tracing
    "AnalyticsSink",
    "NetworkTracer",
]
