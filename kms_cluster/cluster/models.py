"""Data models for cluster status reports and endpoint normalization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

SCHEME = "https://"


def normalize_endpoint(endpoint: str) -> str:
    """Strip the HTTPS scheme prefix, e.g. 'https://kms-1:7373' -> 'kms-1:7373'."""
    if endpoint.startswith(SCHEME):
        endpoint = endpoint[len(SCHEME):]
    return endpoint.rstrip("/")


@dataclass(frozen=True)
class ClusterNode:
    """A reachable cluster member as reported by a status query."""

    id: int
    host: str


@dataclass(frozen=True)
class ClusterStatus:
    """Up and down members of the cluster a server belongs to."""

    nodes_up: list[ClusterNode] = field(default_factory=list)
    nodes_down: list[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.nodes_up) + len(self.nodes_down)

    @property
    def is_standalone(self) -> bool:
        """True when the server is not part of a multi-node cluster."""
        return self.size == 1

    def hosts(self) -> Iterator[str]:
        """Normalized hosts of all members, up ones first."""
        for node in self.nodes_up:
            yield normalize_endpoint(node.host)
        for host in self.nodes_down:
            yield normalize_endpoint(host)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClusterStatus:
        """Build from the JSON body of a cluster status response."""
        nodes_up = [
            ClusterNode(id=int(node.get("id", 0)), host=node["host"])
            for node in data.get("nodes_up") or []
        ]
        nodes_down = list(data.get("nodes_down") or [])
        return cls(nodes_up=nodes_up, nodes_down=nodes_down)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes_up": [{"id": node.id, "host": node.host} for node in self.nodes_up],
            "nodes_down": list(self.nodes_down),
        }
