"""
Trace masking API endpoints.

Main endpoint: POST /v1/traces:mask
"""

import time
import uuid
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Request

from ..config import get_settings
from ..core.exceptions import ValidationError
from ..core.masking import mask_entries
from ..models.trace_entry import ErrorResponse, MaskRequest, MaskResponse, TraceEntryPayload

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/traces:mask",
    response_model=MaskResponse,
    status_code=200,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Mask trace entries",
    description="""
    Mask a batch of captured network trace entries.

    **Masking rules:**
    - Headers: masked unless exempt (private) or always (sensitive)
    - URL query: values masked (private) or query removed (sensitive)
    - Body and variables: scalars masked (private) or dropped (sensitive)
    - GraphQL query: argument literals masked unless disabled; dropped (sensitive)

    **Request Requirements:**
    - Bodies are base64-encoded
    - Batch size limited by configuration (default 500 entries)
    - Omit `policy` to apply the configured default policy
    """,
)
async def mask_traces(payload: MaskRequest, request: Request) -> MaskResponse:
    """
    Mask trace entries with the given or configured policy.
    """
    settings = get_settings()
    request_id = str(uuid.uuid4())

    if len(payload.entries) > settings.validation.batch_entries_max:
        raise ValidationError(
            f"Batch exceeds {settings.validation.batch_entries_max} entries",
            details={"entries": len(payload.entries)},
        )

    policy = payload.policy or settings.masking.to_policy()
    entries = [
        entry.to_entry(body_bytes_max=settings.validation.body_bytes_max)
        for entry in payload.entries
    ]

    started = time.perf_counter()
    masked = mask_entries(entries, policy)
    elapsed = time.perf_counter() - started

    metrics = getattr(request.app.state, "metrics", None)
    if metrics:
        for entry in masked:
            metrics.record_masking(entry.kind.raw_value, policy.level.value)
        metrics.record_masking_duration(elapsed)

    logger.info(
        "Masked trace batch",
        request_id=request_id,
        entries=len(masked),
        level=policy.level.value,
        default_policy=payload.policy is None,
    )

    return MaskResponse(
        entries=[TraceEntryPayload.from_entry(entry) for entry in masked],
        request_id=request_id,
        timestamp=datetime.now(timezone.utc),
    )
