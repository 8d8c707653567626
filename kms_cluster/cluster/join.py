"""Merge a list of KMS servers into a single cluster."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ..context import Context
from .models import ClusterStatus, normalize_endpoint

logger = logging.getLogger(__name__)


class ClusterClient(Protocol):
    """The two control-plane calls cluster convergence relies on."""

    def cluster_status(self, hosts: Sequence[str], ctx: Context | None = None) -> ClusterStatus:
        ...

    def add_node(self, host: str, hosts: Sequence[str], ctx: Context | None = None) -> None:
        ...


def join(endpoints: Sequence[str], client: ClusterClient, ctx: Context | None = None) -> None:
    """Join the servers at `endpoints` into a single cluster.

    If one of the endpoints already belongs to a multi-node cluster, all
    other endpoints are added to that cluster. Otherwise the first endpoint
    is the one everybody joins. Existing multi-node clusters are never
    split: if the endpoints span more than one of them, the add calls for
    the members of the other clusters fail and the error is raised.

    Any client error aborts the join and propagates unchanged. Nodes added
    before the failure stay in the cluster.
    """
    if len(endpoints) <= 1:
        return

    members = discover_membership(endpoints, client, ctx)
    hosts = sorted(members)

    for endpoint in endpoints:
        endpoint = normalize_endpoint(endpoint)
        if endpoint in members:
            continue
        logger.info("Adding %s to cluster", endpoint, extra={"endpoint": endpoint, "hosts": hosts})
        client.add_node(endpoint, hosts=hosts, ctx=ctx)


def discover_membership(
    endpoints: Sequence[str],
    client: ClusterClient,
    ctx: Context | None = None,
) -> frozenset[str]:
    """Return the hosts of the cluster the remaining endpoints should join.

    Endpoints are probed in order. The first one that does not report
    itself as standalone ends the search and later endpoints are not
    queried. Its members become the membership; if it reports none at all,
    or every endpoint is standalone, the first endpoint is elected.
    """
    for endpoint in endpoints:
        endpoint = normalize_endpoint(endpoint)
        logger.debug("Querying cluster status", extra={"endpoint": endpoint})

        status = client.cluster_status(hosts=[endpoint], ctx=ctx)
        if status.is_standalone:
            continue

        members = frozenset(status.hosts())
        if members:
            logger.info(
                "Found %d-node cluster via %s", status.size, endpoint,
                extra={"endpoint": endpoint, "members": sorted(members), "cluster_size": status.size},
            )
            return members
        logger.warning("%s reported no cluster members", endpoint, extra={"endpoint": endpoint})
        break

    seed = normalize_endpoint(endpoints[0])
    logger.info("No multi-node cluster found, electing %s", seed, extra={"endpoint": seed})
    return frozenset([seed])
