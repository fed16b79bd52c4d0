from __future__ import annotations

from enum import StrEnum


class EndpointRole(StrEnum):
    WRITE = "write"
    READ = "read"
    GLOBAL = "global"


class ClassificationPolicy(StrEnum):
    """How a cluster member's write/read role is decided.

    ``CLUSTER_MEMBERSHIP`` trusts the ``IsClusterWriter`` flag reported by
    ``DescribeDBClusters``. ``REPLICA_SOURCE`` treats any instance that has no
    read-replica source identifier as the writer.
    """

    CLUSTER_MEMBERSHIP = "cluster_membership"
    REPLICA_SOURCE = "replica_source"


class RetryableError(StrEnum):
    """Connection-level error kinds the database client may retry."""

    CONNECTION_REFUSED = "connection_refused"
    HOST_NOT_FOUND = "host_not_found"
    HOST_UNREACHABLE = "host_unreachable"
    INVALID_CONNECTION = "invalid_connection"
    CONNECTION_TIMED_OUT = "connection_timed_out"
