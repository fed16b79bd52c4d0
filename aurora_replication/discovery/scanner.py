"""Endpoint discovery in single-cluster and multi-region scan modes.

Single-cluster mode (`EndpointScanner.discover_cluster`) surfaces every
failure to the caller. Scan mode (`EndpointScanner.scan_regions` and
`EndpointScanner.ascan_regions`) isolates regions from each other: a region
whose query fails is logged and contributes no endpoints.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, TypeAlias

from ..core.enums import ClassificationPolicy
from ..core.exceptions import AuroraReplicationError, RegionQueryFailedError
from ..logger import get_logger
from .classifier import classify
from .client import RdsInventory

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from ..settings import DiscoverySettings
    from .models import NormalizedEndpoint

logger: BoundLogger = get_logger(__name__)

InventoryFactory: TypeAlias = Callable[[str], RdsInventory]

AURORA_POSTGRES_ENGINE = "aurora-postgresql"


class EndpointScanner:
    """Discovers and classifies Aurora endpoints across regions.

    Parameters
    ----------
    inventory_factory
        Builds the `RdsInventory` for a region. Defaults to one backed by a
        fresh boto3 client per region.
    policy
        Role classification policy applied to every cluster.
    engine
        Engine name clusters must have to be included in unfiltered scans.

    Examples
    --------
    >>> scanner = EndpointScanner()
    >>> endpoints = scanner.discover_cluster("orders-cluster", "us-east-1")
    >>> everything = scanner.scan_regions(["us-east-1", "eu-west-1"])
    """

    __slots__ = ("_engine", "_inventory_factory", "_policy")

    def __init__(
        self,
        inventory_factory: InventoryFactory | None = None,
        policy: ClassificationPolicy = ClassificationPolicy.CLUSTER_MEMBERSHIP,
        engine: str = AURORA_POSTGRES_ENGINE,
    ) -> None:
        self._inventory_factory: InventoryFactory = inventory_factory or RdsInventory
        self._policy = policy
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: DiscoverySettings, inventory_factory: InventoryFactory | None = None) -> EndpointScanner:
        return cls(inventory_factory=inventory_factory, policy=settings.policy, engine=settings.engine)

    def discover_cluster(self, cluster_id: str, region: str) -> list[NormalizedEndpoint]:
        """Classify the members of one cluster.

        Raises
        ------
        ClusterNotFoundError
            If ``cluster_id`` does not exist in ``region``.
        RegionQueryFailedError
            If any RDS call for the region fails.
        """
        inventory = self._inventory_factory(region)
        cluster = inventory.describe_cluster(cluster_id)
        instances = inventory.list_instances()
        return classify(instances, cluster, region, self._policy)

    def scan_region(self, region: str, cluster_id: str | None = None) -> list[NormalizedEndpoint]:
        """Classify one cluster, or every matching cluster, in ``region``.

        Errors propagate; use `scan_regions` for failure isolation.
        """
        if cluster_id is not None:
            return self.discover_cluster(cluster_id, region)

        inventory = self._inventory_factory(region)
        clusters = inventory.list_clusters(engine=self._engine)
        if not clusters:
            return []

        instances = inventory.list_instances()
        endpoints: list[NormalizedEndpoint] = []
        for cluster in clusters:
            endpoints.extend(classify(instances, cluster, region, self._policy))
        return endpoints

    def scan_regions(self, regions: Sequence[str], cluster_id: str | None = None) -> list[NormalizedEndpoint]:
        """Scan regions one after another, skipping regions that fail.

        Returns
        -------
        list[NormalizedEndpoint]
            Endpoints of all regions that succeeded, grouped by region in the
            order of ``regions``.
        """
        endpoints: list[NormalizedEndpoint] = []
        for region in regions:
            endpoints.extend(self._scan_region_isolated(region, cluster_id))

        logger.info("Region scan complete", region_count=len(regions), endpoint_count=len(endpoints))
        return endpoints

    async def ascan_regions(self, regions: Sequence[str], cluster_id: str | None = None) -> list[NormalizedEndpoint]:
        """Scan regions concurrently in worker threads, skipping regions that fail."""
        results = await asyncio.gather(
            *(asyncio.to_thread(self.scan_region, region, cluster_id) for region in regions),
            return_exceptions=True,
        )

        endpoints: list[NormalizedEndpoint] = []
        for region, result in zip(regions, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self._log_region_failure(region, result)
            else:
                endpoints.extend(result)

        logger.info("Region scan complete", region_count=len(regions), endpoint_count=len(endpoints))
        return endpoints

    def _scan_region_isolated(self, region: str, cluster_id: str | None) -> list[NormalizedEndpoint]:
        try:
            return self.scan_region(region, cluster_id)
        except Exception as e:
            self._log_region_failure(region, e)
            return []

    @staticmethod
    def _log_region_failure(region: str, error: Exception) -> None:
        failure = error if isinstance(error, AuroraReplicationError) else RegionQueryFailedError(region, str(error))
        logger.warning(
            "Region query failed, skipping region",
            region=region,
            error_type=type(failure).__name__,
            error=str(failure),
        )
