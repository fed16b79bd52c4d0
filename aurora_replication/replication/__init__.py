from __future__ import annotations

from .builder import build_config, partition_endpoints
from .config import (
    DatabaseCredentials,
    DialectOptions,
    HostConfig,
    PoolSettings,
    ReplicationConfig,
    ReplicationTopology,
    RetrySettings,
)
from .retry import build_retrying, build_sync_retrying, is_retryable, match_exception

__all__ = [
    "DatabaseCredentials",
    "DialectOptions",
    "HostConfig",
    "PoolSettings",
    "ReplicationConfig",
    "ReplicationTopology",
    "RetrySettings",
    "build_config",
    "build_retrying",
    "build_sync_retrying",
    "is_retryable",
    "match_exception",
    "partition_endpoints",
]
