"""
JSONPlaceholder API Domain

Environment and endpoint definitions for the JSONPlaceholder fake REST API.
https://jsonplaceholder.typicode.com

This domain provides:
- Posts CRUD operations
- Comments retrieval
- Users retrieval

JSONPlaceholder ignores credentials, so the write operations declare an API
key or bearer token purely to satisfy this client's endpoint policy.
"""

from __future__ import annotations

import os

import httpx

from ..client import Client
from ..models import EndpointDict, EnvironmentDict
from ..registry import Configuration


JSONPLACEHOLDER_ENVIRONMENT: EnvironmentDict = {
    "scheme": "https",
    "host": os.environ.get("JSONPLACEHOLDER_HOST", "jsonplaceholder.typicode.com"),
    "api_key": "demo-key",
}


JSONPLACEHOLDER_ENDPOINTS: list[EndpointDict] = [
    {
        "method": "GET",
        "location": "posts",
        "name": "get_posts",
        "return_type": "body_as_object",
    },
    {
        "method": "GET",
        "location": "posts/{id}",
        "name": "get_post",
        "return_type": "body_as_object",
    },
    {
        "method": "POST",
        "location": "posts",
        "name": "create_post",
        "api_key_required": True,
        "return_type": "body_as_object",
    },
    {
        "method": "PUT",
        "location": "posts/{id}",
        "name": "update_post",
        "authenticated": True,
        "return_type": "body_as_object",
    },
    {
        "method": "DELETE",
        "location": "posts/{id}",
        "name": "delete_post",
        "authenticated": True,
        "return_type": "full_response",
    },
    {
        "method": "GET",
        "location": "posts/{postId}/comments",
        "name": "get_comments",
        "return_type": "body_as_object",
    },
    {
        "method": "GET",
        "location": "users",
        "return_type": "body_as_object",
    },
    {
        "method": "GET",
        "location": "users/{id}",
        "name": "get_user",
        "return_type": "body_as_object",
    },
]


def create_jsonplaceholder_configuration() -> Configuration:
    return Configuration(
        environments=[JSONPLACEHOLDER_ENVIRONMENT],
        endpoints=JSONPLACEHOLDER_ENDPOINTS,
    )


def create_jsonplaceholder_client(transport: httpx.BaseTransport | None = None) -> Client:
    """Create a client pre-configured for the JSONPlaceholder API."""
    return create_jsonplaceholder_configuration().build(transport=transport)
