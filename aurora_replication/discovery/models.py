"""Typed views over RDS API responses and the endpoints derived from them.

- `InstanceDescriptor`: one entry of ``DescribeDBInstances``
- `ClusterDescriptor`: one entry of ``DescribeDBClusters`` with its members
- `NormalizedEndpoint`: a classified instance, ready for config building
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from ..core.enums import EndpointRole


class InstanceDescriptor(BaseModel):
    """A DB instance as reported by ``DescribeDBInstances``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    instance_id: str = Field(min_length=1, description="DBInstanceIdentifier")
    engine: str = Field(description="Engine name, e.g. aurora-postgresql")
    endpoint: str | None = Field(default=None, description="Endpoint.Address (absent while creating)")
    port: int | None = Field(default=None, ge=1, le=65535, description="Endpoint.Port")
    instance_class: str = Field(default="", description="DBInstanceClass")
    status: str = Field(default="unknown", description="DBInstanceStatus")
    cluster_id: str | None = Field(default=None, description="DBClusterIdentifier")
    replica_source_id: str | None = Field(default=None, description="ReadReplicaSourceDBInstanceIdentifier")

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> Self:
        """Build a descriptor from a raw ``DBInstances`` entry.

        Parameters
        ----------
        raw
            One element of ``describe_db_instances()["DBInstances"]``.

        Returns
        -------
        Self
            The parsed descriptor.
        """
        endpoint = raw.get("Endpoint") or {}
        return cls(
            instance_id=raw["DBInstanceIdentifier"],
            engine=raw.get("Engine", ""),
            endpoint=endpoint.get("Address"),
            port=endpoint.get("Port"),
            instance_class=raw.get("DBInstanceClass", ""),
            status=raw.get("DBInstanceStatus", "unknown"),
            cluster_id=raw.get("DBClusterIdentifier"),
            replica_source_id=raw.get("ReadReplicaSourceDBInstanceIdentifier"),
        )


class ClusterMember(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    instance_id: str = Field(min_length=1)
    is_writer: bool = Field(default=False)


class ClusterDescriptor(BaseModel):
    """A DB cluster as reported by ``DescribeDBClusters``.

    Members are kept in API order and also indexed by instance identifier.
    Duplicate member identifiers are rejected at construction, so every
    lookup through `member` is unambiguous.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    cluster_id: str = Field(min_length=1, description="DBClusterIdentifier")
    engine: str = Field(default="", description="Engine name")
    status: str = Field(default="unknown")
    endpoint: str | None = Field(default=None, description="Cluster (writer) endpoint")
    port: int | None = Field(default=None, ge=1, le=65535)
    global_cluster_id: str | None = Field(default=None, description="GlobalClusterIdentifier")
    members: tuple[ClusterMember, ...] = Field(default_factory=tuple)

    _membership: dict[str, ClusterMember] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _reject_duplicate_members(self) -> Self:
        seen: set[str] = set()
        for m in self.members:
            if m.instance_id in seen:
                raise ValueError(f"duplicate cluster member '{m.instance_id}' in cluster '{self.cluster_id}'")
            seen.add(m.instance_id)
        return self

    def model_post_init(self, context: Any, /) -> None:
        self._membership = {m.instance_id: m for m in self.members}

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> Self:
        """Build a descriptor from a raw ``DBClusters`` entry."""
        return cls(
            cluster_id=raw["DBClusterIdentifier"],
            engine=raw.get("Engine", ""),
            status=raw.get("Status", "unknown"),
            endpoint=raw.get("Endpoint"),
            port=raw.get("Port"),
            global_cluster_id=raw.get("GlobalClusterIdentifier"),
            members=tuple(
                ClusterMember(
                    instance_id=m["DBInstanceIdentifier"],
                    is_writer=m.get("IsClusterWriter", False),
                )
                for m in raw.get("DBClusterMembers", ())
            ),
        )

    def has_member(self, instance_id: str) -> bool:
        return instance_id in self._membership

    def member(self, instance_id: str) -> ClusterMember | None:
        return self._membership.get(instance_id)


class NormalizedEndpoint(BaseModel):
    """A classified cluster instance.

    Examples
    --------
    >>> NormalizedEndpoint(
    ...     id="w1",
    ...     endpoint="w1.example.com",
    ...     port=5432,
    ...     instance_class="db.r6g.large",
    ...     region="us-east-1",
    ...     role=EndpointRole.WRITE,
    ... )
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1, description="Instance identifier")
    endpoint: str = Field(min_length=1, description="Instance endpoint address")
    port: int = Field(default=5432, ge=1, le=65535)
    instance_class: str = Field(default="")
    region: str = Field(default="")
    role: EndpointRole
