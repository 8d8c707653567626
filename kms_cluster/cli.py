"""Argument parsing, configuration loading, and cluster join bootstrap."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time

from .cluster.join import join
from .cluster.models import normalize_endpoint
from .config import load_config
from .context import Context
from .exceptions import ConfigError, KMSClusterError
from .kms.client import KMSClient
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kms-cluster",
        description="Join KMS servers into a single cluster",
    )
    parser.add_argument(
        "-c", "--config",
        required=True,
        help="Path to the YAML configuration file",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--status",
        action="store_true",
        help="Print the cluster status reported by each endpoint and exit",
    )
    action.add_argument(
        "--validate",
        action="store_true",
        help="Validate the configuration file and exit",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall deadline in seconds",
    )
    return parser


def print_status(client: KMSClient, endpoints: list[str], ctx: Context) -> None:
    """Write one JSON line per endpoint with the cluster it reports."""
    for endpoint in endpoints:
        host = normalize_endpoint(endpoint)
        status = client.cluster_status(hosts=[host], ctx=ctx)
        print(json.dumps({"endpoint": host, **status.to_dict()}))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load config (minimal logging until config is loaded)
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.logging)

    if args.validate:
        logger.info("Configuration is valid")
        return 0

    ctx = Context(timeout=args.timeout)
    start = time.monotonic()
    try:
        with KMSClient(config.server) as client:
            if args.status:
                print_status(client, config.server.endpoints, ctx)
                return 0
            join(config.server.endpoints, client, ctx)
    except KMSClusterError as exc:
        logger.error("Fatal error: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    logger.info(
        "All %d servers are part of one cluster", len(config.server.endpoints),
        extra={"elapsed_seconds": round(time.monotonic() - start, 2)},
    )
    return 0
