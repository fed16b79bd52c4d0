"""Core module exports."""

from __future__ import annotations

from .enums import ClassificationPolicy, EndpointRole, RetryableError
from .exceptions import (
    AuroraReplicationError,
    ClusterNotFoundError,
    CredentialsNotConfiguredError,
    MembershipLookupError,
    NoWriterInstanceError,
    RegionQueryFailedError,
)

__all__ = [
    "AuroraReplicationError",
    "ClassificationPolicy",
    "ClusterNotFoundError",
    "CredentialsNotConfiguredError",
    "EndpointRole",
    "MembershipLookupError",
    "NoWriterInstanceError",
    "RegionQueryFailedError",
    "RetryableError",
]
