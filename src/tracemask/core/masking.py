"""
Privacy masking for network trace entries.

All functions are pure: they never mutate their inputs, hold no state and
never raise on malformed data. Inputs that cannot be parsed fall back to a
safe default instead (unparseable URLs pass through, unparseable bodies
become the sentinel).
"""

import json
import time
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional
from urllib.parse import unquote_plus, urlsplit, urlunsplit

import structlog

from .entry import TraceEntry
from .policy import MaskingPolicy, PrivacyLevel
from .query_literals import MASKED_VALUE, mask_query_literals

logger = structlog.get_logger(__name__)

MASKED_BODY = MASKED_VALUE.encode("utf-8")


def mask(entry: TraceEntry, policy: MaskingPolicy) -> TraceEntry:
    """
    Return a masked copy of ``entry``.

    Only the URL of the entry kind is masked; method, status code and error
    message pass through. Timestamp, duration, request id and operation
    name are never considered sensitive.
    """
    started = time.perf_counter()
    masked = TraceEntry(
        kind=entry.kind.with_url(mask_url(entry.kind.url, policy)),
        headers=mask_headers(entry.headers, policy),
        body=mask_body(entry.body, policy),
        timestamp=entry.timestamp,
        duration=entry.duration,
        request_id=entry.request_id,
        operation_name=entry.operation_name,
        query=mask_query(entry.query, policy),
        variables=mask_variables(entry.variables, policy),
    )

    logger.debug(
        "Masked trace entry",
        kind=entry.kind.raw_value,
        level=policy.level.value,
        request_id=entry.request_id[:8],
        graphql=entry.is_graphql,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 3),
    )
    return masked


def mask_entries(entries: Iterable[TraceEntry], policy: MaskingPolicy) -> List[TraceEntry]:
    """Convenience function to mask several entries with one policy."""
    return [mask(entry, policy) for entry in entries]


def mask_headers(
    headers: Optional[Mapping[str, str]],
    policy: MaskingPolicy,
) -> Optional[Mapping[str, str]]:
    """
    Mask header values.

    At the private level exempt keys keep their value. At the sensitive
    level exemptions are ignored and every value is masked.
    """
    if headers is None:
        return None

    if policy.level is PrivacyLevel.NONE:
        return headers

    if policy.level is PrivacyLevel.PRIVATE:
        return {
            key: value if key.lower() in policy.exempt_headers else MASKED_VALUE
            for key, value in headers.items()
        }

    return {key: MASKED_VALUE for key in headers}


def mask_url(url: str, policy: MaskingPolicy) -> str:
    """
    Mask the query component of a URL.

    Private masks each query value unless its key is exempt, keeping keys
    and order. Sensitive drops the query component entirely. Scheme, host,
    path and fragment are never touched.
    """
    if policy.level is PrivacyLevel.NONE:
        return url

    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    if policy.level is PrivacyLevel.SENSITIVE:
        # An empty query still leaves a "?" marker behind.
        if not parts.query and "?" not in url:
            return url
        return urlunsplit(parts._replace(query=""))

    if not parts.query:
        return url

    return urlunsplit(parts._replace(query=_mask_query_string(parts.query, policy.exempt_queries)))


def _mask_query_string(query: str, exempt_keys: FrozenSet[str]) -> str:
    """Mask ``key=value`` pairs, keeping each pair's original encoding when exempt."""
    pairs = []
    for pair in query.split("&"):
        if not pair:
            pairs.append(pair)
            continue
        raw_key = pair.split("=", 1)[0]
        if unquote_plus(raw_key).lower() in exempt_keys:
            pairs.append(pair)
        else:
            pairs.append(f"{raw_key}={MASKED_VALUE}")
    return "&".join(pairs)


def mask_body(body: Optional[bytes], policy: MaskingPolicy) -> Optional[bytes]:
    """
    Mask a request or response body.

    Private parses the body as JSON and masks it structurally. A body that
    is not JSON (plain text, binary, invalid UTF-8) becomes the sentinel
    itself rather than being dropped. Sensitive always drops the body.
    """
    if body is None:
        return None

    if policy.level is PrivacyLevel.NONE:
        return body

    if policy.level is PrivacyLevel.SENSITIVE:
        return None

    try:
        document = json.loads(body)
        masked = _recursively_mask(document, policy.exempt_body_fields)
        return json.dumps(masked, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (ValueError, RecursionError):
        # Also covers lone surrogates and nesting past the json module limits.
        return MASKED_BODY


def mask_variables(
    variables: Optional[Mapping[str, Any]],
    policy: MaskingPolicy,
) -> Optional[Mapping[str, Any]]:
    """Mask GraphQL variables with the same rules as a JSON body."""
    if variables is None:
        return None

    if policy.level is PrivacyLevel.NONE:
        return variables

    if policy.level is PrivacyLevel.SENSITIVE:
        return None

    masked: Mapping[str, Any] = _recursively_mask(variables, policy.exempt_body_fields)
    return masked


def mask_query(query: Optional[str], policy: MaskingPolicy) -> Optional[str]:
    """
    Mask a GraphQL query document.

    Literal masking is independent of the privacy level and stays active
    under ``none`` unless ``mask_query_literals`` is turned off. Sensitive
    drops the query.
    """
    if query is None:
        return None

    if policy.level is PrivacyLevel.SENSITIVE:
        return None

    if policy.mask_query_literals:
        return mask_query_literals(query)
    return query


def _recursively_mask(value: Any, exempt_fields: FrozenSet[str]) -> Any:
    """
    Replace every scalar in a JSON-like tree with the sentinel.

    An exempt mapping key keeps its whole subtree verbatim, nested
    fields included. Sequences are never exempt themselves. The walk uses
    an explicit stack, so nesting depth is bounded by memory rather than
    the interpreter's recursion limit.
    """
    root: List[Any] = [None]
    pending: List[Any] = [(value, root, 0)]

    while pending:
        node, parent, slot = pending.pop()

        if isinstance(node, Mapping):
            masked_mapping: Dict[Any, Any] = {}
            parent[slot] = masked_mapping
            for key, item in node.items():
                if str(key).lower() in exempt_fields:
                    masked_mapping[key] = item
                else:
                    # Placeholder keeps the original key order.
                    masked_mapping[key] = None
                    pending.append((item, masked_mapping, key))

        elif isinstance(node, (list, tuple)):
            masked_list: List[Any] = [None] * len(node)
            parent[slot] = masked_list
            pending.extend((item, masked_list, index) for index, item in enumerate(node))

        else:
            parent[slot] = MASKED_VALUE

    return root[0]
