"""Endpoint client package: declarative REST endpoints compiled into callables."""

from .client import Client, EnvironmentClient, get_version_info, version_code_from_name
from .config import (
    ALLOW_UNAUTHENTICATED_DELETE,
    DEFAULT_API_KEY_NAME,
    HTTP_TIMEOUT_SECONDS,
    PACKAGE_NAME,
    VERIFY_TLS,
    VERSION_NAME,
)
from .domains import create_jsonplaceholder_client
from .endpoints import Endpoint, HttpMethod, ReturnType
from .environment import Environment
from .errors import (
    ClientFailure,
    ConfigurationError,
    DecodingError,
    EnvironmentLookupError,
    OperationArgumentError,
    TransportFailure,
    UpstreamFailure,
)
from .executor import RequestExecutor, derive_signature, encode_basic_authorization
from .models import (
    EndpointDict,
    EndpointFields,
    EnvironmentDict,
    EnvironmentFields,
    ResponseObject,
    VersionInfo,
)
from .operations import BoundOperation, Operation
from .registry import ApiRegistry, Configuration

__version__ = VERSION_NAME

__all__ = [
    # Registry
    "Configuration",
    "ApiRegistry",
    # Client
    "Client",
    "EnvironmentClient",
    "get_version_info",
    "version_code_from_name",
    # Descriptors
    "Endpoint",
    "Environment",
    "HttpMethod",
    "ReturnType",
    # Operations
    "Operation",
    "BoundOperation",
    "RequestExecutor",
    "derive_signature",
    "encode_basic_authorization",
    # Models - Pydantic
    "EndpointFields",
    "EnvironmentFields",
    "VersionInfo",
    "ResponseObject",
    # Models - TypedDict
    "EndpointDict",
    "EnvironmentDict",
    # Errors
    "ClientFailure",
    "ConfigurationError",
    "EnvironmentLookupError",
    "OperationArgumentError",
    "UpstreamFailure",
    "TransportFailure",
    "DecodingError",
    # Config
    "PACKAGE_NAME",
    "VERSION_NAME",
    "HTTP_TIMEOUT_SECONDS",
    "VERIFY_TLS",
    "ALLOW_UNAUTHENTICATED_DELETE",
    "DEFAULT_API_KEY_NAME",
    # Domains
    "create_jsonplaceholder_client",
]
