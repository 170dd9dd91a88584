"""
Privacy policy for trace masking.

A policy bundles a coarse privacy level with three case-insensitive
exemption sets and the query literal toggle.
"""

from enum import Enum
from typing import Any, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PrivacyLevel(str, Enum):
    """Privacy levels, from least to most aggressive."""

    NONE = "none"
    PRIVATE = "private"
    SENSITIVE = "sensitive"


class MaskingPolicy(BaseModel):
    """
    Masking policy applied to trace entries.

    Exemptions only apply at the ``private`` level. Under ``sensitive``
    every header value is masked and body, variables and query are dropped.
    """

    level: PrivacyLevel = Field(
        default=PrivacyLevel.PRIVATE,
        description="Privacy level (none, private, sensitive)"
    )
    mask_query_literals: bool = Field(
        default=True,
        description="Replace string and numeric literals in query arguments"
    )
    exempt_headers: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Header keys whose values are kept at the private level"
    )
    exempt_queries: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="URL query keys whose values are kept at the private level"
    )
    exempt_body_fields: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Body and variable field names kept verbatim at the private level"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("exempt_headers", "exempt_queries", "exempt_body_fields", mode="before")
    def normalize_exemptions(cls, v: Any) -> FrozenSet[str]:
        """Lower-case exemption names once so lookups are case-insensitive."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(str(name).lower() for name in v)

    @classmethod
    def none(cls) -> "MaskingPolicy":
        """No masking. Development and debugging only."""
        return cls(level=PrivacyLevel.NONE)

    @classmethod
    def private(cls) -> "MaskingPolicy":
        """Mask values but keep structure, with no exemptions."""
        return cls(level=PrivacyLevel.PRIVATE)

    @classmethod
    def sensitive(cls) -> "MaskingPolicy":
        """Aggressive masking, recommended for production."""
        return cls(level=PrivacyLevel.SENSITIVE)
