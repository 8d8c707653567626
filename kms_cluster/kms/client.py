"""REST client for the KMS cluster control-plane API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

import requests

from ..cluster.models import ClusterStatus, normalize_endpoint
from ..config import ServerConfig
from ..context import Context
from ..exceptions import ConfigError, KMSAPIError

logger = logging.getLogger(__name__)


class KMSClient:
    """Thin wrapper around the KMS cluster API.

    The client keeps no notion of "current" servers: every call names the
    hosts it may be sent to. Hosts are tried in order and a host that
    cannot be reached is skipped in favour of the next one. Any response
    with an error status is final.
    """

    def __init__(self, config: ServerConfig):
        self._session = requests.Session()
        self._session.headers["Content-Type"] = "application/json"
        if config.api_key:
            self._session.headers["Authorization"] = f"Bearer {config.api_key}"
        self._session.verify = self._verify_setting(config)
        if config.tls.client_cert:
            self._session.cert = self._client_cert(config)
        self._timeout = config.timeout

    @staticmethod
    def _verify_setting(config: ServerConfig) -> bool | str:
        if not config.tls.verify:
            return False
        if config.tls.ca_file:
            if not Path(config.tls.ca_file).is_file():
                raise ConfigError(f"CA file not found: {config.tls.ca_file}")
            return config.tls.ca_file
        return True

    @staticmethod
    def _client_cert(config: ServerConfig) -> tuple[str, str]:
        if not config.tls.client_key:
            raise ConfigError("A client certificate requires a client key")
        for path in (config.tls.client_cert, config.tls.client_key):
            if not Path(path).is_file():
                raise ConfigError(f"TLS file not found: {path}")
        return (config.tls.client_cert, config.tls.client_key)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> KMSClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    # ── Cluster ─────────────────────────────────────────────────────

    def cluster_status(self, hosts: Sequence[str], ctx: Context | None = None) -> ClusterStatus:
        """Return the members of the cluster the first reachable host belongs to."""
        resp = self._request("GET", "/v1/cluster/status", hosts, ctx)
        try:
            return ClusterStatus.from_dict(resp.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise KMSAPIError(
                f"Malformed cluster status response: {exc}",
                status_code=resp.status_code,
                response_body=resp.text,
            ) from exc

    def add_node(self, host: str, hosts: Sequence[str], ctx: Context | None = None) -> None:
        """Ask the cluster reachable via `hosts` to add `host` as a member."""
        self._request("POST", "/v1/cluster/add", hosts, ctx, json={"host": normalize_endpoint(host)})

    # ── Internal HTTP helpers ───────────────────────────────────────

    def _request(
        self,
        method: str,
        path: str,
        hosts: Sequence[str],
        ctx: Context | None,
        **kwargs: Any,
    ) -> requests.Response:
        if not hosts:
            raise ValueError("At least one host is required")

        last_host, last_exc = "", None
        for host in hosts:
            host = normalize_endpoint(host)
            if ctx is not None:
                ctx.check()
                kwargs["timeout"] = ctx.timeout(self._timeout)
            else:
                kwargs["timeout"] = self._timeout

            url = f"https://{host}{path}"
            logger.debug("%s %s", method, url)
            try:
                resp = self._session.request(method, url, **kwargs)
            except requests.ConnectionError as exc:
                if ctx is not None:
                    ctx.check()
                logger.debug("Host %s unreachable: %s", host, exc)
                last_host, last_exc = host, exc
                continue
            except requests.RequestException as exc:
                # A read timeout capped by the deadline is reported as such
                if ctx is not None:
                    ctx.check()
                raise KMSAPIError(f"Request to {host} failed: {exc}", host=host) from exc

            if resp.status_code >= 400:
                raise KMSAPIError(
                    f"HTTP {resp.status_code} on {method} {path} at {host}: {resp.text}",
                    status_code=resp.status_code,
                    response_body=resp.text,
                    host=host,
                )
            return resp

        raise KMSAPIError(f"Request to {last_host} failed: {last_exc}", host=last_host) from last_exc
