"""Discovery followed by config building, for a single cluster."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .discovery.scanner import EndpointScanner
from .logger import get_logger
from .replication.builder import build_config

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from .replication.config import DatabaseCredentials, PoolSettings, ReplicationConfig, RetrySettings
    from .settings import DiscoverySettings

logger: BoundLogger = get_logger(__name__)


def resolve_replication_config(
    cluster_id: str,
    region: str,
    credentials: DatabaseCredentials | None = None,
    *,
    scanner: EndpointScanner | None = None,
    pool: PoolSettings | None = None,
    retry: RetrySettings | None = None,
    include_global_readers: bool = False,
) -> ReplicationConfig:
    """Discover ``cluster_id`` in ``region`` and build its replication config.

    Raises
    ------
    ClusterNotFoundError
        If the cluster does not exist in ``region``.
    RegionQueryFailedError
        If an RDS call fails.
    NoWriterInstanceError
        If the cluster has no classified writer.
    CredentialsNotConfiguredError
        If credentials are neither passed nor set in the environment.
    """
    scanner = scanner or EndpointScanner()
    endpoints = scanner.discover_cluster(cluster_id, region)
    logger.info("Discovered cluster endpoints", cluster_id=cluster_id, region=region, endpoint_count=len(endpoints))

    return build_config(
        endpoints,
        credentials,
        pool=pool,
        retry=retry,
        include_global_readers=include_global_readers,
    )


def resolve_from_settings(
    settings: DiscoverySettings,
    credentials: DatabaseCredentials | None = None,
    scanner: EndpointScanner | None = None,
) -> ReplicationConfig:
    """Resolve the config for ``settings.cluster_id`` in the first configured region."""
    if settings.cluster_id is None:
        raise ValueError("settings.cluster_id is required to build a replication config")

    return resolve_replication_config(
        settings.cluster_id,
        settings.regions[0],
        credentials,
        scanner=scanner or EndpointScanner.from_settings(settings),
        include_global_readers=settings.include_global_readers,
    )
