"""KMS server control-plane client."""
