"""Aurora endpoint discovery.

- `RdsInventory`: read-only RDS calls for one region
- `classify`: role classification of cluster members
- `EndpointScanner`: single-cluster discovery and multi-region scans

Usage
-----
Single cluster::

    endpoints = EndpointScanner().discover_cluster("orders-cluster", "us-east-1")

Every Aurora PostgreSQL cluster in several regions::

    endpoints = EndpointScanner().scan_regions(["us-east-1", "eu-west-1"])
"""

from __future__ import annotations

from .classifier import assign_role, classify, is_global_engine
from .client import RdsInventory, create_rds_client
from .models import ClusterDescriptor, ClusterMember, InstanceDescriptor, NormalizedEndpoint
from .scanner import EndpointScanner

__all__ = [
    "ClusterDescriptor",
    "ClusterMember",
    "EndpointScanner",
    "InstanceDescriptor",
    "NormalizedEndpoint",
    "RdsInventory",
    "assign_role",
    "classify",
    "create_rds_client",
    "is_global_engine",
]
