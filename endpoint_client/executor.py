"""
Request Executor

Turns an Endpoint, an Environment and call-site arguments into one HTTP
request, and the response back into the value the endpoint's return-type
policy asks for.

The executor:
1. Derives the positional signature of a compiled operation (pure)
2. Expands the URL and composes headers (content type, static headers,
   API key, Authorization, accept)
3. Performs the request through httpx - the only I/O in the package
4. Decodes the response, or converts a refused connection into an error payload
"""

from __future__ import annotations

import base64
import inspect
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .config import (
    CONNECT_ERROR_TEMPLATE,
    HTTP_TIMEOUT_SECONDS,
    JSON_CONTENT_TYPE,
    VERIFY_TLS,
)
from .endpoints import Endpoint, HttpMethod, ReturnType
from .environment import Environment
from .errors import (
    ConfigurationError,
    OperationArgumentError,
    TransportFailure,
    UpstreamFailure,
)
from .models import ResponseObject

logger = logging.getLogger(__name__)

AUTH_TOKEN_PARAM = "auth_token"
URI_PARAMS_PARAM = "uri_params"
BODY_PARAM = "data"

RESERVED_PARAMS = frozenset({AUTH_TOKEN_PARAM, URI_PARAMS_PARAM, BODY_PARAM})


# -----------------------------------------------------------------------------
# Signature Derivation
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class CallArguments:
    """Arguments of one operation call, sorted by role."""

    credentials: tuple[Any, ...] = ()
    auth_token: str | None = None
    uri_params: Mapping[str, Any] | None = None
    data: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class OperationSignature:
    """
    Positional parameters of a compiled operation, in call order:

    1. credentials - the encode_authorization fields, or a single auth_token
    2. uri_params - mapping of URI parameter name to value
    3. data - the request body (POST, PUT, PATCH)
    """

    credentials: tuple[str, ...]
    basic_auth: bool
    takes_uri_params: bool
    takes_body: bool

    @property
    def parameters(self) -> tuple[str, ...]:
        params = list(self.credentials)
        if self.takes_uri_params:
            params.append(URI_PARAMS_PARAM)
        if self.takes_body:
            params.append(BODY_PARAM)
        return tuple(params)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def to_inspect(self) -> inspect.Signature:
        return inspect.Signature(
            [
                inspect.Parameter(name, inspect.Parameter.POSITIONAL_OR_KEYWORD)
                for name in self.parameters
            ]
        )

    def bind(self, operation_name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> CallArguments:
        """Map call-site arguments onto roles, failing like a Python call would."""
        try:
            bound = self.to_inspect().bind(*args, **kwargs)
        except TypeError as e:
            raise OperationArgumentError(
                f"{operation_name}({', '.join(self.parameters)}): {e}", cause=e
            ) from e

        values = bound.arguments
        credentials = tuple(values[name] for name in self.credentials)
        auth_token = None
        if not self.basic_auth and self.credentials:
            auth_token = values[AUTH_TOKEN_PARAM]
            if auth_token is None:
                raise OperationArgumentError(
                    f"{operation_name} requires authentication; pass an auth_token"
                )

        uri_params = values.get(URI_PARAMS_PARAM)
        if uri_params is not None and not isinstance(uri_params, Mapping):
            raise OperationArgumentError(
                f"{operation_name}: uri_params must be a mapping, got {type(uri_params).__name__}"
            )

        data = values.get(BODY_PARAM)
        if data is not None and not isinstance(data, Mapping):
            raise OperationArgumentError(
                f"{operation_name}: data must be a mapping, got {type(data).__name__}"
            )

        return CallArguments(
            credentials=credentials,
            auth_token=auth_token,
            uri_params=uri_params,
            data=data,
        )


def derive_signature(endpoint: Endpoint) -> OperationSignature:
    """
    Signature of the operation compiled from `endpoint`.

    Arity depends only on the auth mode, the presence of URI parameters and
    whether the method carries a body.
    """
    if endpoint.requires_basic_auth_encoding():
        fields = endpoint.encode_authorization
        for field_name in fields:
            if not field_name.isidentifier() or field_name in RESERVED_PARAMS:
                raise ConfigurationError(
                    f"Invalid encode_authorization field {field_name!r} on '{endpoint.operation_name()}'"
                )
        if len(set(fields)) != len(fields):
            raise ConfigurationError(
                f"Duplicate encode_authorization fields on '{endpoint.operation_name()}'"
            )
        credentials = fields
    elif endpoint.authenticated:
        credentials = (AUTH_TOKEN_PARAM,)
    else:
        credentials = ()

    return OperationSignature(
        credentials=credentials,
        basic_auth=endpoint.requires_basic_auth_encoding(),
        takes_uri_params=endpoint.has_uri_params(),
        takes_body=endpoint.has_body(),
    )


# -----------------------------------------------------------------------------
# Request Assembly
# -----------------------------------------------------------------------------


def encode_basic_authorization(values: tuple[Any, ...]) -> str:
    """Colon-join the credential values and Base64-encode them."""
    joined = ":".join(str(value) for value in values)
    return base64.b64encode(joined.encode("utf-8")).decode("ascii")


def compose_headers(
    endpoint: Endpoint, environment: Environment, arguments: CallArguments
) -> httpx.Headers:
    """
    Request headers, later entries winning on (case-insensitive) collision:
    content type, static endpoint headers, API key, Authorization, accept.
    """
    headers = httpx.Headers({"Content-Type": JSON_CONTENT_TYPE})

    for key, value in endpoint.additional_headers.items():
        headers[key] = value

    api_key = environment.api_key_for(endpoint)
    if api_key:
        headers[environment.api_key_name] = api_key

    if endpoint.requires_basic_auth_encoding():
        headers["Authorization"] = f"Basic {encode_basic_authorization(arguments.credentials)}"
    elif endpoint.authenticated:
        headers["Authorization"] = f"Bearer {arguments.auth_token}"

    headers["Accept"] = JSON_CONTENT_TYPE
    return headers


def prepare_body(endpoint: Endpoint, data: Mapping[str, Any] | None) -> str | None:
    """
    JSON text for body-carrying methods, None otherwise.

    Credential fields are transport metadata and are dropped from a copy of
    the body; the caller's mapping is left untouched.
    """
    if not endpoint.has_body():
        return None

    body = dict(data or {})
    for field_name in endpoint.encode_authorization:
        body.pop(field_name, None)
    return json.dumps(body, default=str)


# -----------------------------------------------------------------------------
# Response Decoding
# -----------------------------------------------------------------------------


def decode_body(endpoint: Endpoint, text: str) -> Any:
    if endpoint.return_type is ReturnType.BODY_AS_OBJECT:
        if not text.strip():
            return None
        return ResponseObject.from_json(text)
    return text


def decode_response(endpoint: Endpoint, response: httpx.Response) -> Any:
    """Apply the return-type policy. HEAD responses have no body to decode."""
    if endpoint.method is HttpMethod.HEAD:
        return response
    if endpoint.return_type is ReturnType.FULL_RESPONSE:
        return response
    return decode_body(endpoint, response.text)


def connection_error_payload(environment: Environment) -> str:
    message = CONNECT_ERROR_TEMPLATE.format(host=environment.host, port=environment.port)
    return json.dumps({"error": message})


# -----------------------------------------------------------------------------
# Executor
# -----------------------------------------------------------------------------


class RequestExecutor:
    """
    Executes endpoints over HTTP.

    The httpx client is created lazily and reused across calls; pass a
    transport to route requests somewhere other than the network.
    """

    def __init__(
        self,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        verify_tls: bool = VERIFY_TLS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.verify_tls = verify_tls
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            if not self.verify_tls:
                logger.warning("TLS certificate verification is disabled")
            self._client = httpx.Client(
                timeout=self.timeout,
                verify=self.verify_tls,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Clean up HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def execute(
        self,
        endpoint: Endpoint,
        environment: Environment,
        arguments: CallArguments,
    ) -> Any:
        """
        Perform one request for `endpoint` on `environment`.

        Returns the decoded response. A connection that cannot be established
        is not raised: the error payload is decoded in place of a body.

        Raises:
            UpstreamFailure: the server answered 4xx/5xx
            TransportFailure: the exchange failed after connecting
            DecodingError: BODY_AS_OBJECT and the body is not JSON
        """
        url = endpoint.expand_url(environment, arguments.uri_params)
        headers = compose_headers(endpoint, environment, arguments)
        body = prepare_body(endpoint, arguments.data)

        logger.debug(f"{endpoint.method.value} {url}")

        try:
            response = self.client.request(
                method=endpoint.method.value,
                url=url,
                headers=headers,
                content=body,
            )
        except (httpx.ConnectError, httpx.ConnectTimeout):
            logger.warning(f"Unable to connect to {environment.host}:{environment.port}")
            payload = connection_error_payload(environment)
            if endpoint.method is HttpMethod.HEAD:
                return payload
            return decode_body(endpoint, payload)
        except httpx.TransportError as e:
            raise TransportFailure(
                f"{endpoint.method.value} {url} failed: {e!s}", cause=e
            ) from e

        logger.debug(f"{endpoint.method.value} {url} -> {response.status_code}")

        if response.is_error:
            raise UpstreamFailure(
                f"{endpoint.method.value} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                response=response,
            )

        return decode_response(endpoint, response)
