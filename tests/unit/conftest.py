"""Shared fixtures for unit tests.

Provides:
- raw_instance / raw_cluster: builders for RDS API response entries
- credentials: explicit database credentials
- writer_and_readers: a classified one-writer, two-reader endpoint list
- rds_client: a boto3 RDS client with dummy credentials, for Stubber
- clean_env: removes AURORA_* variables for the duration of a test
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, TypeAlias

import boto3
import pytest
from pydantic import SecretStr

from aurora_replication import DatabaseCredentials, EndpointRole, NormalizedEndpoint

RawInstanceFactory: TypeAlias = Callable[..., dict[str, Any]]
RawClusterFactory: TypeAlias = Callable[..., dict[str, Any]]


@pytest.fixture
def raw_instance() -> RawInstanceFactory:
    def _build(
        instance_id: str,
        *,
        cluster_id: str | None = "orders",
        engine: str = "aurora-postgresql",
        address: str | None = None,
        port: int = 5432,
        instance_class: str = "db.r6g.large",
        status: str = "available",
        replica_source_id: str | None = None,
    ) -> dict[str, Any]:
        raw: dict[str, Any] = {
            "DBInstanceIdentifier": instance_id,
            "Engine": engine,
            "DBInstanceClass": instance_class,
            "DBInstanceStatus": status,
            "ReadReplicaDBInstanceIdentifiers": [],
            "Endpoint": {"Address": address or f"{instance_id}.example.com", "Port": port},
        }
        if cluster_id is not None:
            raw["DBClusterIdentifier"] = cluster_id
        if replica_source_id is not None:
            raw["ReadReplicaSourceDBInstanceIdentifier"] = replica_source_id
        return raw

    return _build


@pytest.fixture
def raw_cluster() -> RawClusterFactory:
    def _build(
        cluster_id: str = "orders",
        members: list[tuple[str, bool]] | None = None,
        *,
        engine: str = "aurora-postgresql",
        port: int = 5432,
        global_cluster_id: str | None = None,
    ) -> dict[str, Any]:
        raw: dict[str, Any] = {
            "DBClusterIdentifier": cluster_id,
            "Engine": engine,
            "Status": "available",
            "Endpoint": f"{cluster_id}.cluster-abc.example.com",
            "ReaderEndpoint": f"{cluster_id}.cluster-ro-abc.example.com",
            "Port": port,
            "DBClusterMembers": [
                {"DBInstanceIdentifier": instance_id, "IsClusterWriter": is_writer}
                for instance_id, is_writer in (members or [])
            ],
        }
        if global_cluster_id is not None:
            raw["GlobalClusterIdentifier"] = global_cluster_id
        return raw

    return _build


@pytest.fixture
def credentials() -> DatabaseCredentials:
    return DatabaseCredentials(database="db", username="u", password=SecretStr("p"))


@pytest.fixture
def writer_and_readers() -> list[NormalizedEndpoint]:
    return [
        NormalizedEndpoint(id="r1", endpoint="r1.example.com", port=5432, region="us-east-1", role=EndpointRole.READ),
        NormalizedEndpoint(id="w1", endpoint="w1.example.com", port=5432, region="us-east-1", role=EndpointRole.WRITE),
        NormalizedEndpoint(id="r2", endpoint="r2.example.com", port=5433, region="us-east-1", role=EndpointRole.READ),
    ]


@pytest.fixture
def rds_client() -> Any:
    return boto3.client(
        "rds",
        region_name="us-east-1",
        aws_access_key_id="testing",  # pragma: allowlist secret
        aws_secret_access_key="testing",  # pragma: allowlist secret
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[pytest.MonkeyPatch]:
    # tmp_path as cwd keeps a developer's .env file out of settings tests
    monkeypatch.chdir(tmp_path)
    for name in (
        "AURORA_DB_DATABASE",
        "AURORA_DB_USERNAME",
        "AURORA_DB_PASSWORD",
        "AURORA_REGIONS",
        "AURORA_CLUSTER_ID",
        "AURORA_ENGINE",
        "AURORA_POLICY",
        "AURORA_INCLUDE_GLOBAL_READERS",
    ):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
