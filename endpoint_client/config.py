"""
Centralized configuration for the endpoint client.

All defaults, header names and constants in one place.
Supports environment variable overrides for deployment flexibility.
"""

from __future__ import annotations

import os


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# -----------------------------------------------------------------------------
# Package Metadata
# -----------------------------------------------------------------------------

PACKAGE_NAME = "endpoint-client"
VERSION_NAME = "1.0.1"

# -----------------------------------------------------------------------------
# Environment Defaults
# -----------------------------------------------------------------------------

DEFAULT_SCHEME = "https"
DEFAULT_HOST = "api.example.com"
SUPPORTED_SCHEMES = ("http", "https")

DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
}

DEFAULT_API_KEY_NAME = "X-API-Key"

# -----------------------------------------------------------------------------
# HTTP Configuration
# -----------------------------------------------------------------------------

HTTP_TIMEOUT_SECONDS = float(os.environ.get("ENDPOINT_CLIENT_TIMEOUT", "30.0"))

# Disabling certificate verification must be a deliberate choice.
VERIFY_TLS = _env_flag("ENDPOINT_CLIENT_VERIFY_TLS", True)

JSON_CONTENT_TYPE = "application/json"

CONNECT_ERROR_TEMPLATE = "Unable to connect to host {host}:{port}"

# -----------------------------------------------------------------------------
# Endpoint Policy
# -----------------------------------------------------------------------------

# When enabled, a DELETE endpoint may skip bearer authentication as long as it
# requires an API key. DELETE endpoints without URI parameters are always refused.
ALLOW_UNAUTHENTICATED_DELETE = _env_flag("ENDPOINT_CLIENT_ALLOW_UNAUTHENTICATED_DELETE", False)
