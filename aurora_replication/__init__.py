"""Aurora PostgreSQL endpoint discovery and replication config building.

Usage
-----
>>> from aurora_replication import DatabaseCredentials, EndpointScanner, build_config
>>> endpoints = EndpointScanner().discover_cluster("orders-cluster", "us-east-1")
>>> config = build_config(endpoints, DatabaseCredentials.from_env())
>>> config.to_pool_params()["write"]["host"]
"""

from __future__ import annotations

from .core import (
    AuroraReplicationError,
    ClassificationPolicy,
    ClusterNotFoundError,
    CredentialsNotConfiguredError,
    EndpointRole,
    MembershipLookupError,
    NoWriterInstanceError,
    RegionQueryFailedError,
    RetryableError,
)
from .discovery import (
    ClusterDescriptor,
    ClusterMember,
    EndpointScanner,
    InstanceDescriptor,
    NormalizedEndpoint,
    RdsInventory,
    classify,
)
from .logger import configure_logging, get_logger
from .pipeline import resolve_from_settings, resolve_replication_config
from .replication import (
    DatabaseCredentials,
    PoolSettings,
    ReplicationConfig,
    RetrySettings,
    build_config,
    build_retrying,
)
from .settings import CredentialSettings, DiscoverySettings

__all__ = [
    "AuroraReplicationError",
    "ClassificationPolicy",
    "ClusterDescriptor",
    "ClusterMember",
    "ClusterNotFoundError",
    "CredentialSettings",
    "CredentialsNotConfiguredError",
    "DatabaseCredentials",
    "DiscoverySettings",
    "EndpointRole",
    "EndpointScanner",
    "InstanceDescriptor",
    "MembershipLookupError",
    "NoWriterInstanceError",
    "NormalizedEndpoint",
    "PoolSettings",
    "RdsInventory",
    "RegionQueryFailedError",
    "ReplicationConfig",
    "RetrySettings",
    "RetryableError",
    "build_config",
    "build_retrying",
    "classify",
    "configure_logging",
    "get_logger",
    "resolve_from_settings",
    "resolve_replication_config",
]
