"""Custom exception hierarchy for the KMS cluster tooling."""


class KMSClusterError(Exception):
    """Base exception for all cluster tooling errors."""


class ConfigError(KMSClusterError):
    """Invalid or missing configuration."""


class KMSAPIError(KMSClusterError):
    """Error communicating with a KMS server."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        host: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.host = host


class JoinCancelled(KMSClusterError):
    """The operation was cancelled before it completed."""


class DeadlineExceeded(JoinCancelled):
    """The operation's deadline passed before it completed."""
