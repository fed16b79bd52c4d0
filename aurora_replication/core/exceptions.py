from __future__ import annotations


class AuroraReplicationError(Exception):
    """Base class for all errors raised by this package."""


class ClusterNotFoundError(AuroraReplicationError):
    def __init__(self, cluster_id: str, region: str) -> None:
        self.cluster_id = cluster_id
        self.region = region
        super().__init__(f"Cluster '{cluster_id}' not found in region '{region}'")


class NoWriterInstanceError(AuroraReplicationError):
    def __init__(self, endpoint_count: int) -> None:
        self.endpoint_count = endpoint_count
        super().__init__(f"No writer instance among {endpoint_count} endpoint(s)")


class RegionQueryFailedError(AuroraReplicationError):
    def __init__(self, region: str, reason: str) -> None:
        self.region = region
        self.reason = reason
        super().__init__(f"Query failed in region '{region}': {reason}")


class MembershipLookupError(AuroraReplicationError):
    def __init__(self, instance_id: str, cluster_id: str) -> None:
        self.instance_id = instance_id
        self.cluster_id = cluster_id
        super().__init__(f"Instance '{instance_id}' has no membership entry in cluster '{cluster_id}'")


class CredentialsNotConfiguredError(AuroraReplicationError):
    """Raised when database credentials are missing from both arguments and environment."""
