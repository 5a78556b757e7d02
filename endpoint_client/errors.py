"""
Client Failure Types

Canonical failure taxonomy for the endpoint client.
Configuration problems fail fast at setup time; transport problems surface
at call time. Connection refusal is the one failure that is NOT raised: the
executor turns it into an error payload instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class ClientFailure(Exception):
    """Base class for all endpoint client failures."""

    failure_category: str = "unknown"

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigurationError(ClientFailure):
    """
    Environments or endpoints were registered in a structurally invalid way.

    - Fatality: Fatal to the configuration call. The previous registry state
      stays in effect.
    - Raised by: set_environments, set_endpoints, get_environment.
    """

    failure_category = "configuration_error"


class EnvironmentLookupError(ConfigurationError):
    """An environment lookup was ambiguous or named an unknown environment."""

    failure_category = "environment_lookup"


class OperationArgumentError(ClientFailure, TypeError):
    """A compiled operation was called with arguments that do not fit its signature."""

    failure_category = "operation_argument"


class UpstreamFailure(ClientFailure):
    """
    The server answered with a 4xx or 5xx status.

    - Fatality: Fatal to the call. Not retried, not recovered.
    - The raw response stays available for callers that branch on it.
    """

    failure_category = "upstream_failure"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.response = response


class TransportFailure(ClientFailure):
    """
    Communication failed after a connection was established
    (read timeout, protocol error, ...).
    """

    failure_category = "transport_failure"


class DecodingError(ClientFailure):
    """A response body declared as JSON could not be parsed."""

    failure_category = "decoding_error"

    def __init__(self, message: str, *, body: str = "", cause: Exception | None = None) -> None:
        super().__init__(message, cause=cause)
        self.body = body
