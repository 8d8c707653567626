"""Cluster discovery and convergence."""

from __future__ import annotations

from .join import ClusterClient, discover_membership, join
from .models import ClusterNode, ClusterStatus, normalize_endpoint

__all__ = [
    "ClusterClient",
    "ClusterNode",
    "ClusterStatus",
    "discover_membership",
    "join",
    "normalize_endpoint",
]
