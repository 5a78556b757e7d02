"""
Shared test fixtures for endpoint client tests.

Provides recording mock transports, registries, and test data.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from endpoint_client.models import EndpointDict, EnvironmentDict
from endpoint_client.registry import Configuration


# -----------------------------------------------------------------------------
# Mock HTTP Transports
# -----------------------------------------------------------------------------


class MockTransport(httpx.BaseTransport):
    """
    Mock transport that returns predefined responses.

    Useful for testing HTTP interactions without hitting real APIs.
    """

    def __init__(self, responses: dict[str, tuple[int, Any]] | None = None):
        """
        Initialize mock transport with predefined responses.

        Args:
            responses: Dict mapping URL paths to (status_code, response_data)
                tuples. str data is sent verbatim, anything else as JSON.
        """
        self.responses = responses or {}
        self.requests: list[httpx.Request] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Handle a request by returning a predefined response."""
        self.requests.append(request)

        # Match by path
        path = request.url.path
        if path in self.responses:
            status, data = self.responses[path]
            if isinstance(data, str):
                return httpx.Response(status, text=data)
            return httpx.Response(status, json=data)

        return httpx.Response(404, json={"error": "Not found"})

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


class FailingTransport(httpx.BaseTransport):
    """Transport that raises the given httpx exception for every request."""

    def __init__(self, error: type[httpx.TransportError] = httpx.ConnectError):
        self.error = error
        self.requests: list[httpx.Request] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        raise self.error("connection refused", request=request)


# -----------------------------------------------------------------------------
# Test Data
# -----------------------------------------------------------------------------


MOCK_STUDENT_DATA = {
    "id": 7,
    "name": "Ada",
    "address": {"city": "London", "geo": {"lat": "51.5", "lng": "-0.12"}},
    "courses": [{"code": "CS101"}, {"code": "MA201"}],
}

LOCAL_ENVIRONMENT: EnvironmentDict = {
    "scheme": "http",
    "host": "127.0.0.1",
    "port": 1234,
    "api_key": "local-key",
    "environment_name": "local",
}

PRODUCTION_ENVIRONMENT: EnvironmentDict = {
    "scheme": "https",
    "host": "api.school.example",
    "api_key": "prod-key",
    "api_key_name": "X-School-Key",
    "environment_name": "production",
}

SAMPLE_ENDPOINTS: list[EndpointDict] = [
    {"method": "GET", "location": "version"},
    {
        "method": "POST",
        "location": "login",
        "api_key_required": True,
        "encode_authorization": ["username", "password"],
        "return_type": "body_as_object",
    },
    {
        "method": "GET",
        "location": "student/{id}",
        "name": "get_student",
        "authenticated": True,
        "return_type": "body_as_object",
    },
    {
        "method": "PUT",
        "location": "student/{id}",
        "name": "update_student",
        "authenticated": True,
        "headers": {"X-Client": "tests"},
    },
    {
        "method": "DELETE",
        "location": "student/{id}",
        "name": "delete_student",
        "authenticated": True,
        "return_type": "full_response",
    },
    {"method": "HEAD", "location": "health", "return_type": "body_as_object"},
]


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def mock_transport() -> MockTransport:
    """Create a mock transport with common responses."""
    return MockTransport({
        "/version": (200, "1.0.1"),
        "/login": (200, {"auth_token": "tok-123", "user": {"id": 7}}),
        "/student/7": (200, MOCK_STUDENT_DATA),
        "/student/404": (404, {"error": "Not found"}),
        "/student/500": (500, {"error": "Internal error"}),
        "/health": (200, ""),
    })


@pytest.fixture
def configuration() -> Configuration:
    """A single-environment configuration with the sample endpoints."""
    return Configuration(environments=[LOCAL_ENVIRONMENT], endpoints=SAMPLE_ENDPOINTS)


@pytest.fixture
def multi_configuration() -> Configuration:
    """A configuration with a local and a production environment."""
    return Configuration(
        environments=[LOCAL_ENVIRONMENT, PRODUCTION_ENVIRONMENT],
        endpoints=SAMPLE_ENDPOINTS,
    )


@pytest.fixture
def client(configuration: Configuration, mock_transport: MockTransport):
    """A built client routed to the mock transport."""
    with configuration.build(transport=mock_transport) as built:
        yield built
