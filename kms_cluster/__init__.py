"""Bootstrap a single KMS cluster from a list of server endpoints."""
