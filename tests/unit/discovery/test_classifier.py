"""Role classification tests for cluster members."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from aurora_replication import (
    ClassificationPolicy,
    ClusterDescriptor,
    ClusterMember,
    EndpointRole,
    InstanceDescriptor,
    MembershipLookupError,
    classify,
)
from aurora_replication.discovery import assign_role, is_global_engine

if TYPE_CHECKING:
    from ..conftest import RawClusterFactory, RawInstanceFactory

console = Console()


@pytest.fixture
def orders_cluster(raw_cluster: RawClusterFactory) -> ClusterDescriptor:
    return ClusterDescriptor.from_api(raw_cluster("orders", [("w1", True), ("r1", False), ("r2", False)]))


@pytest.fixture
def region_instances(raw_instance: RawInstanceFactory) -> list[InstanceDescriptor]:
    raws = [
        raw_instance("r2"),
        raw_instance("unrelated", cluster_id="billing"),
        raw_instance("w1"),
        raw_instance("r1", port=5433),
    ]
    return [InstanceDescriptor.from_api(r) for r in raws]


class TestClusterMembershipPolicy:
    """Test classification driven by IsClusterWriter."""

    def test_one_writer_rest_readers(
        self, orders_cluster: ClusterDescriptor, region_instances: list[InstanceDescriptor]
    ) -> None:
        console.print("[bold blue]Testing membership classification[/bold blue]")

        endpoints = classify(region_instances, orders_cluster, "us-east-1")

        roles = {e.id: e.role for e in endpoints}
        assert roles == {"w1": EndpointRole.WRITE, "r1": EndpointRole.READ, "r2": EndpointRole.READ}
        assert sum(e.role is EndpointRole.WRITE for e in endpoints) == 1

        console.print("[green]✓ Exactly one writer[/green]")

    def test_output_follows_instance_order(
        self, orders_cluster: ClusterDescriptor, region_instances: list[InstanceDescriptor]
    ) -> None:
        endpoints = classify(region_instances, orders_cluster, "us-east-1")

        assert [e.id for e in endpoints] == ["r2", "w1", "r1"]

    def test_non_members_filtered_out(
        self, orders_cluster: ClusterDescriptor, region_instances: list[InstanceDescriptor]
    ) -> None:
        endpoints = classify(region_instances, orders_cluster, "us-east-1")

        assert "unrelated" not in {e.id for e in endpoints}

    def test_endpoint_fields_copied(
        self, orders_cluster: ClusterDescriptor, region_instances: list[InstanceDescriptor]
    ) -> None:
        endpoints = classify(region_instances, orders_cluster, "eu-west-1")
        r1 = next(e for e in endpoints if e.id == "r1")

        assert r1.endpoint == "r1.example.com"
        assert r1.port == 5433
        assert r1.instance_class == "db.r6g.large"
        assert r1.region == "eu-west-1"

    @pytest.mark.parametrize("reader_count", [0, 1, 5])
    def test_writer_count_independent_of_readers(
        self, reader_count: int, raw_instance: RawInstanceFactory, raw_cluster: RawClusterFactory
    ) -> None:
        members = [("w1", True)] + [(f"r{i}", False) for i in range(reader_count)]
        cluster = ClusterDescriptor.from_api(raw_cluster("orders", members))
        instances = [InstanceDescriptor.from_api(raw_instance(name)) for name, _ in members]

        endpoints = classify(instances, cluster, "us-east-1")

        assert [e.role for e in endpoints].count(EndpointRole.WRITE) == 1
        assert [e.role for e in endpoints].count(EndpointRole.READ) == reader_count

    def test_global_engine_non_writer_is_global(
        self, raw_instance: RawInstanceFactory, raw_cluster: RawClusterFactory
    ) -> None:
        cluster = ClusterDescriptor.from_api(raw_cluster("orders", [("w1", True), ("g1", False)]))
        instances = [
            InstanceDescriptor.from_api(raw_instance("w1", engine="aurora-postgresql-global")),
            InstanceDescriptor.from_api(raw_instance("g1", engine="aurora-postgresql-global")),
        ]

        endpoints = classify(instances, cluster, "us-east-1")

        assert [e.role for e in endpoints] == [EndpointRole.WRITE, EndpointRole.GLOBAL]

    def test_members_without_endpoint_skipped(
        self, raw_instance: RawInstanceFactory, raw_cluster: RawClusterFactory
    ) -> None:
        cluster = ClusterDescriptor.from_api(raw_cluster("orders", [("w1", True), ("r-new", False)]))
        creating = raw_instance("r-new", status="creating")
        del creating["Endpoint"]
        instances = [InstanceDescriptor.from_api(raw_instance("w1")), InstanceDescriptor.from_api(creating)]

        endpoints = classify(instances, cluster, "us-east-1")

        assert [e.id for e in endpoints] == ["w1"]

    def test_cluster_port_used_when_instance_has_none(self, raw_cluster: RawClusterFactory) -> None:
        cluster = ClusterDescriptor.from_api(raw_cluster("orders", [("w1", True)], port=6543))
        instance = InstanceDescriptor(instance_id="w1", engine="aurora-postgresql", endpoint="w1.example.com")

        endpoints = classify([instance], cluster, "us-east-1")

        assert endpoints[0].port == 6543

    def test_no_writer_member_yields_no_write_role(
        self, raw_instance: RawInstanceFactory, raw_cluster: RawClusterFactory
    ) -> None:
        cluster = ClusterDescriptor.from_api(raw_cluster("orders", [("r1", False)]))

        endpoints = classify([InstanceDescriptor.from_api(raw_instance("r1"))], cluster, "us-east-1")

        assert [e.role for e in endpoints] == [EndpointRole.READ]


class TestReplicaSourcePolicy:
    """Test classification driven by ReadReplicaSourceDBInstanceIdentifier."""

    def test_replica_with_source_is_reader(
        self, raw_instance: RawInstanceFactory, raw_cluster: RawClusterFactory
    ) -> None:
        # membership flags deliberately disagree with replica metadata
        cluster = ClusterDescriptor.from_api(raw_cluster("orders", [("w1", False), ("r1", True)]))
        instances = [
            InstanceDescriptor.from_api(raw_instance("w1")),
            InstanceDescriptor.from_api(raw_instance("r1", replica_source_id="w1")),
        ]

        endpoints = classify(instances, cluster, "us-east-1", ClassificationPolicy.REPLICA_SOURCE)

        assert [(e.id, e.role) for e in endpoints] == [("w1", EndpointRole.WRITE), ("r1", EndpointRole.READ)]

    def test_policies_disagree_on_same_input(
        self, raw_instance: RawInstanceFactory, raw_cluster: RawClusterFactory
    ) -> None:
        cluster = ClusterDescriptor.from_api(raw_cluster("orders", [("w1", True), ("r1", False)]))
        instances = [InstanceDescriptor.from_api(raw_instance(name)) for name in ("w1", "r1")]

        by_membership = classify(instances, cluster, "us-east-1", ClassificationPolicy.CLUSTER_MEMBERSHIP)
        by_source = classify(instances, cluster, "us-east-1", ClassificationPolicy.REPLICA_SOURCE)

        assert [e.role for e in by_membership] == [EndpointRole.WRITE, EndpointRole.READ]
        assert [e.role for e in by_source] == [EndpointRole.WRITE, EndpointRole.WRITE]


class TestAssignRole:
    def test_missing_membership_raises(self) -> None:
        cluster = ClusterDescriptor(cluster_id="orders", members=(ClusterMember(instance_id="w1", is_writer=True),))
        instance = InstanceDescriptor(instance_id="ghost", engine="aurora-postgresql", endpoint="ghost.example.com")

        with pytest.raises(MembershipLookupError) as exc_info:
            assign_role(instance, cluster)

        assert exc_info.value.instance_id == "ghost"
        assert exc_info.value.cluster_id == "orders"

    @pytest.mark.parametrize(
        ("engine", "expected"),
        [
            ("aurora-postgresql", False),
            ("aurora-postgresql-global", True),
            ("Aurora-Global", True),
            ("postgres", False),
        ],
    )
    def test_is_global_engine(self, engine: str, expected: bool) -> None:
        assert is_global_engine(engine) is expected
