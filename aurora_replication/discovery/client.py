"""Read-only RDS API access for one region."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..core.exceptions import ClusterNotFoundError, RegionQueryFailedError
from ..logger import get_logger
from .models import ClusterDescriptor, InstanceDescriptor

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

logger: BoundLogger = get_logger(__name__)

USER_AGENT_EXTRA = "aurora-replication"
CLUSTER_NOT_FOUND_CODES = frozenset({"DBClusterNotFoundFault", "DBClusterNotFound"})


def create_rds_client(region: str, profile_name: str | None = None) -> Any:
    """Create a boto3 RDS client bound to ``region``."""
    session = boto3.Session(profile_name=profile_name)
    return session.client("rds", region_name=region, config=Config(user_agent_extra=USER_AGENT_EXTRA))


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class RdsInventory:
    """Describes Aurora clusters and instances in a single region.

    Only ``Describe*`` calls are issued. A missing cluster raises
    `ClusterNotFoundError`; every other API or transport failure raises
    `RegionQueryFailedError` chained to the botocore error.

    Examples
    --------
    >>> inventory = RdsInventory("us-east-1")
    >>> cluster = inventory.describe_cluster("orders-cluster")
    >>> instances = inventory.list_instances()
    """

    __slots__ = ("_client", "_region")

    def __init__(self, region: str, client: Any | None = None) -> None:
        self._region = region
        self._client = client if client is not None else create_rds_client(region)

    @property
    def region(self) -> str:
        return self._region

    def describe_cluster(self, cluster_id: str) -> ClusterDescriptor:
        """Describe one cluster by identifier.

        Raises
        ------
        ClusterNotFoundError
            If no cluster with ``cluster_id`` exists in this region.
        RegionQueryFailedError
            If the API call fails for any other reason.
        """
        logger.info("Describing cluster", cluster_id=cluster_id, region=self._region)
        try:
            response = self._client.describe_db_clusters(DBClusterIdentifier=cluster_id)
        except ClientError as e:
            if _error_code(e) in CLUSTER_NOT_FOUND_CODES:
                raise ClusterNotFoundError(cluster_id, self._region) from e
            raise RegionQueryFailedError(self._region, f"{_error_code(e)}: {e}") from e
        except BotoCoreError as e:
            raise RegionQueryFailedError(self._region, str(e)) from e

        clusters = [c for c in response.get("DBClusters", []) if c.get("DBClusterIdentifier") == cluster_id]
        if not clusters:
            raise ClusterNotFoundError(cluster_id, self._region)

        return ClusterDescriptor.from_api(clusters[0])

    def list_clusters(self, engine: str | None = None) -> list[ClusterDescriptor]:
        """Describe every cluster in the region, optionally filtered by engine name."""
        raw = self._paginate("describe_db_clusters", "DBClusters")
        clusters = [ClusterDescriptor.from_api(c) for c in raw]
        if engine is not None:
            clusters = [c for c in clusters if c.engine == engine]

        logger.info("Listed clusters", region=self._region, engine=engine, cluster_count=len(clusters))
        return clusters

    def list_instances(self) -> list[InstanceDescriptor]:
        """Describe every DB instance in the region."""
        raw = self._paginate("describe_db_instances", "DBInstances")
        instances = [InstanceDescriptor.from_api(i) for i in raw]

        logger.info("Listed instances", region=self._region, instance_count=len(instances))
        return instances

    def _paginate(self, operation: str, result_key: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        try:
            paginator = self._client.get_paginator(operation)
            for page in paginator.paginate():
                items.extend(page.get(result_key, []))
        except ClientError as e:
            raise RegionQueryFailedError(self._region, f"{_error_code(e)}: {e}") from e
        except BotoCoreError as e:
            raise RegionQueryFailedError(self._region, str(e)) from e
        return items
