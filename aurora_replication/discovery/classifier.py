"""Role classification of Aurora cluster instances.

An instance is classified against the cluster it belongs to. Two policies
are available and they can disagree, so the caller picks one explicitly:

``ClassificationPolicy.CLUSTER_MEMBERSHIP`` (default)
    The writer is the member flagged ``IsClusterWriter`` by
    ``DescribeDBClusters``.

``ClassificationPolicy.REPLICA_SOURCE``
    The writer is any member with no ``ReadReplicaSourceDBInstanceIdentifier``.
    Only instance-level replication metadata is consulted. Aurora members
    share one storage volume and never carry a replica source, so under this
    policy every member of a healthy Aurora cluster reads as a writer.

Under both policies a non-writer whose engine name indicates a global
database engine is classified ``global`` instead of ``read``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.enums import ClassificationPolicy, EndpointRole
from ..core.exceptions import MembershipLookupError
from ..logger import get_logger
from .models import NormalizedEndpoint

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structlog.stdlib import BoundLogger

    from .models import ClusterDescriptor, InstanceDescriptor

logger: BoundLogger = get_logger(__name__)

GLOBAL_ENGINE_MARKER = "global"
DEFAULT_PORT = 5432


def is_global_engine(engine: str) -> bool:
    """Return True when the engine name denotes a global database engine."""
    return GLOBAL_ENGINE_MARKER in engine.lower()


def _is_writer(instance: InstanceDescriptor, cluster: ClusterDescriptor, policy: ClassificationPolicy) -> bool:
    if policy is ClassificationPolicy.REPLICA_SOURCE:
        return instance.replica_source_id is None

    member = cluster.member(instance.instance_id)
    if member is None:
        raise MembershipLookupError(instance.instance_id, cluster.cluster_id)
    return member.is_writer


def assign_role(
    instance: InstanceDescriptor,
    cluster: ClusterDescriptor,
    policy: ClassificationPolicy = ClassificationPolicy.CLUSTER_MEMBERSHIP,
) -> EndpointRole:
    if _is_writer(instance, cluster, policy):
        return EndpointRole.WRITE
    if is_global_engine(instance.engine):
        return EndpointRole.GLOBAL
    return EndpointRole.READ


def classify(
    instances: Iterable[InstanceDescriptor],
    cluster: ClusterDescriptor,
    region: str,
    policy: ClassificationPolicy = ClassificationPolicy.CLUSTER_MEMBERSHIP,
) -> list[NormalizedEndpoint]:
    """Classify the members of ``cluster`` found among ``instances``.

    Parameters
    ----------
    instances
        Instance descriptors for the region, in API order. Instances that
        are not members of ``cluster`` are ignored.
    cluster
        The cluster whose members are being classified.
    region
        Region the instances were described in; copied onto each endpoint.
    policy
        Which role policy to apply.

    Returns
    -------
    list[NormalizedEndpoint]
        One endpoint per member instance, in the order of ``instances``.
        Members without an endpoint address (still being created) are
        skipped.

    Raises
    ------
    MembershipLookupError
        If a member instance has no membership entry. Cannot happen for
        descriptors built through `ClusterDescriptor`, whose member index is
        the same key used for filtering.
    """
    endpoints: list[NormalizedEndpoint] = []

    for instance in instances:
        if not cluster.has_member(instance.instance_id):
            continue

        if not instance.endpoint:
            logger.warning(
                "Skipping cluster member without endpoint",
                instance_id=instance.instance_id,
                cluster_id=cluster.cluster_id,
                status=instance.status,
            )
            continue

        endpoints.append(
            NormalizedEndpoint(
                id=instance.instance_id,
                endpoint=instance.endpoint,
                port=instance.port or cluster.port or DEFAULT_PORT,
                instance_class=instance.instance_class,
                region=region,
                role=assign_role(instance, cluster, policy),
            )
        )

    logger.debug(
        "Classified cluster members",
        cluster_id=cluster.cluster_id,
        region=region,
        policy=str(policy),
        endpoint_count=len(endpoints),
    )
    return endpoints
