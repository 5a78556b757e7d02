"""
Endpoint definitions for the endpoint client.

This module contains:
- Core types: HttpMethod, ReturnType, Endpoint
- URI template scanning and expansion

An Endpoint is environment-independent: it only becomes a URL once it is
expanded against an Environment.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from .errors import ConfigurationError, OperationArgumentError

if TYPE_CHECKING:
    from .environment import Environment

URI_PARAM_PATTERN = re.compile(r"\{([^{}]+)\}")


class HttpMethod(str, Enum):
    """HTTP methods supported by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, value: Any) -> HttpMethod:
        """Accept an enum member or any casing of its name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            supported = ", ".join(m.value for m in cls)
            raise ConfigurationError(
                f"Unsupported HTTP method {value!r}; expected one of: {supported}"
            ) from None


BODY_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH})


class ReturnType(str, Enum):
    """How a successful response is handed back to the caller."""

    FULL_RESPONSE = "full_response"
    BODY_AS_STRING = "body_as_string"
    BODY_AS_OBJECT = "body_as_object"

    @classmethod
    def coerce(cls, value: Any) -> ReturnType:
        """Unknown or missing values fall back to BODY_AS_STRING."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.BODY_AS_STRING
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.BODY_AS_STRING


@dataclass(frozen=True)
class Endpoint:
    """
    Definition of one REST operation, independent of any server.

    - method: HTTP method
    - location: path relative to the web root (may contain {param} placeholders)
    - authenticated: caller must supply a bearer token (or Basic credentials)
    - api_key_required: the environment's API key is attached as a header
    - name: operation name override (defaults to the location with / -> _)
    - return_type: response decoding policy
    - encode_authorization: credential fields Base64-encoded into a Basic header
    - additional_headers: static headers sent with every request
    """

    method: HttpMethod
    location: str
    authenticated: bool = False
    api_key_required: bool = False
    name: str | None = None
    return_type: ReturnType = ReturnType.BODY_AS_STRING
    encode_authorization: tuple[str, ...] = ()
    additional_headers: Mapping[str, str] = field(default_factory=dict)
    uri_params: tuple[str, ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        location = str(self.location)
        if location.startswith("/"):
            location = location[1:]

        # Scan left to right; a repeated placeholder is listed once
        uri_params: list[str] = []
        for match in URI_PARAM_PATTERN.finditer(location):
            if match.group(1) not in uri_params:
                uri_params.append(match.group(1))

        headers = {str(k): str(v) for k, v in (self.additional_headers or {}).items()}

        object.__setattr__(self, "method", HttpMethod.parse(self.method))
        object.__setattr__(self, "location", location)
        object.__setattr__(self, "authenticated", bool(self.authenticated))
        object.__setattr__(self, "api_key_required", bool(self.api_key_required))
        object.__setattr__(self, "name", str(self.name) if self.name else None)
        object.__setattr__(self, "return_type", ReturnType.coerce(self.return_type))
        object.__setattr__(
            self,
            "encode_authorization",
            tuple(str(f) for f in (self.encode_authorization or ())),
        )
        object.__setattr__(self, "additional_headers", MappingProxyType(headers))
        object.__setattr__(self, "uri_params", tuple(uri_params))

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def identity_key(self) -> str:
        """
        Key that identifies this endpoint within a registry.

        Combines method, location, authentication state and API key state,
        e.g. ``post-login-unauthenticated-with-api-key``.
        """
        auth = "authenticated" if self.authenticated else "unauthenticated"
        key = f"{self.method.value.lower()}-{self.location}-{auth}"
        if self.api_key_required:
            key += "-with-api-key"
        return key

    def location_string(self) -> str:
        """The location with every '/' replaced by '_'."""
        if not self.is_path_compound():
            return self.location
        return self.location.replace("/", "_")

    def operation_name(self) -> str:
        """Name under which the compiled operation is exposed."""
        return self.name or self.location_string()

    def has_explicit_name(self) -> bool:
        return self.name is not None

    # -------------------------------------------------------------------------
    # Capabilities
    # -------------------------------------------------------------------------

    def is_path_compound(self) -> bool:
        return "/" in self.location

    def requires_basic_auth_encoding(self) -> bool:
        return len(self.encode_authorization) > 0

    def has_uri_params(self) -> bool:
        return len(self.uri_params) > 0

    def has_additional_headers(self) -> bool:
        return len(self.additional_headers) > 0

    def has_body(self) -> bool:
        """POST, PUT and PATCH carry a JSON body."""
        return self.method in BODY_METHODS

    # -------------------------------------------------------------------------
    # URL Expansion
    # -------------------------------------------------------------------------

    def expand_path(self, uri_params: Mapping[str, Any] | None = None) -> str:
        """
        Substitute URI parameter values into the location.

        Values are stringified and percent-encoded so that a value can never
        introduce a new path segment. Pass raw values: one that is already
        percent-encoded is encoded again ("%2F" becomes "%252F"). Every
        occurrence of a repeated placeholder receives the same value.
        """
        values = {str(k): v for k, v in (uri_params or {}).items()}
        missing = [param for param in self.uri_params if param not in values]
        if missing:
            raise OperationArgumentError(
                f"Missing URI parameter(s) for '{self.operation_name()}': {', '.join(missing)}"
            )

        path = self.location
        for param, value in values.items():
            path = path.replace(f"{{{param}}}", quote(str(value), safe=""))
        return path

    def expand_url(
        self, environment: Environment, uri_params: Mapping[str, Any] | None = None
    ) -> str:
        """Full URL for this endpoint on the given environment."""
        return f"{environment.base_url}/{self.expand_path(uri_params)}"
