"""
Configuration Registry

Holds the registered environments and endpoints of one API and the
operations compiled from them.

Every update builds a complete new RegistryState and swaps it in under a
lock, so a rejected update leaves the previous configuration in effect and a
built Client keeps the state it was built from.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import httpx

from .client import RESERVED_OPERATION_NAMES, Client
from .config import ALLOW_UNAUTHENTICATED_DELETE, HTTP_TIMEOUT_SECONDS, VERIFY_TLS
from .endpoints import Endpoint, HttpMethod
from .environment import Environment
from .errors import ConfigurationError, EnvironmentLookupError
from .executor import RequestExecutor
from .models import EndpointFields, EnvironmentFields, validate_fields
from .operations import Operation

logger = logging.getLogger(__name__)

MISSING_ENVIRONMENT_NAME = (
    "More than one environment was specified and at least one of the environments "
    "does not have an environment_name field. Verify all environments have an environment_name."
)


def _frozen(mapping: dict[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class RegistryState:
    """Immutable snapshot of one API's configuration."""

    environments: Mapping[str | None, EnvironmentFields] = field(
        default_factory=lambda: _frozen({})
    )
    endpoints: Mapping[str, Endpoint] = field(default_factory=lambda: _frozen({}))
    operations: Mapping[str, Operation] = field(default_factory=lambda: _frozen({}))

    def get_environment(self, name: str | None = None) -> Environment:
        """
        Build a fresh Environment.

        Without a name the lookup only succeeds when exactly one environment
        is registered.
        """
        if name is None:
            if not self.environments:
                raise EnvironmentLookupError("No environments are configured")
            if len(self.environments) > 1:
                raise EnvironmentLookupError(
                    "More than one environment is configured; specify one of: "
                    + ", ".join(self.environment_names())
                )
            fields = next(iter(self.environments.values()))
        else:
            fields = self.environments.get(name)
            if fields is None:
                raise EnvironmentLookupError(f"Unknown environment: {name!r}")
        return fields.to_environment()

    def environment_names(self) -> list[str]:
        return [name for name in self.environments if name is not None]


class Configuration:
    """
    Environments and endpoints of one API.

    Configure once at startup, then call build() for a Client. Reconfiguring
    afterwards is safe but only affects clients built later.
    """

    def __init__(
        self,
        *,
        environments: Iterable[Any] | None = None,
        endpoints: Iterable[Any] | None = None,
        allow_unauthenticated_delete: bool = ALLOW_UNAUTHENTICATED_DELETE,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        verify_tls: bool = VERIFY_TLS,
    ) -> None:
        self.allow_unauthenticated_delete = allow_unauthenticated_delete
        self.timeout = timeout
        self.verify_tls = verify_tls
        self._lock = threading.RLock()
        self._state = RegistryState()

        if environments is not None:
            self.set_environments(environments)
        if endpoints is not None:
            self.set_endpoints(endpoints)

    @property
    def state(self) -> RegistryState:
        with self._lock:
            return self._state

    # -------------------------------------------------------------------------
    # Environments
    # -------------------------------------------------------------------------

    def set_environments(self, environments: Iterable[Any]) -> None:
        """
        Replace the registered environments.

        Raises:
            ConfigurationError: an entry is invalid, or several entries are
                given and not all of them carry an environment_name
        """
        entries = [validate_fields(EnvironmentFields, e, "environment") for e in environments]

        if len(entries) > 1 and any(not e.environment_name for e in entries):
            raise ConfigurationError(MISSING_ENVIRONMENT_NAME)

        registered: dict[str | None, EnvironmentFields] = {}
        for entry in entries:
            if entry.environment_name in registered:
                raise ConfigurationError(
                    f"Environment {entry.environment_name!r} is defined more than once"
                )
            # Fail now on bad schemes/ports rather than on first lookup
            entry.to_environment()
            registered[entry.environment_name] = entry

        with self._lock:
            self._state = RegistryState(
                environments=_frozen(registered),
                endpoints=self._state.endpoints,
                operations=self._state.operations,
            )

        logger.info(f"Registered {len(registered)} environment(s)")

    def get_environment(self, name: str | None = None) -> Environment:
        return self.state.get_environment(name)

    def environment_names(self) -> list[str]:
        return self.state.environment_names()

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def set_endpoints(self, endpoints: Iterable[Any]) -> None:
        """
        Replace the registered endpoints and recompile every operation.

        Operations from the previous assignment that are not redefined are
        dropped.

        Raises:
            ConfigurationError: an entry is invalid, violates endpoint policy,
                or compiles to a name the client facades already use
        """
        descriptors: dict[str, Endpoint] = {}
        operations: dict[str, Operation] = {}

        for entry in endpoints:
            endpoint = self._to_endpoint(entry)
            self.check_policy(endpoint)

            key = endpoint.identity_key()
            if key in descriptors:
                raise ConfigurationError(f"Endpoint {key} is defined more than once")

            operation = Operation.compile(endpoint)
            if operation.name in RESERVED_OPERATION_NAMES:
                raise ConfigurationError(
                    f"Operation name {operation.name!r} is reserved by the client; "
                    f"give endpoint {key} an explicit name"
                )
            if operation.name in operations:
                raise ConfigurationError(
                    f"Operation name {operation.name!r} is used by more than one endpoint"
                )

            descriptors[key] = endpoint
            operations[operation.name] = operation
            logger.debug(
                f"Compiled {operation.name}({', '.join(operation.signature.parameters)}) from {key}"
            )

        with self._lock:
            previous = set(self._state.operations)
            self._state = RegistryState(
                environments=self._state.environments,
                endpoints=_frozen(descriptors),
                operations=_frozen(operations),
            )

        removed = sorted(previous - set(operations))
        logger.info(f"Compiled {len(operations)} operation(s)")
        if removed:
            logger.info(f"Removed operation(s) no longer configured: {', '.join(removed)}")

    @staticmethod
    def _to_endpoint(entry: Any) -> Endpoint:
        if isinstance(entry, Endpoint):
            return entry
        return validate_fields(EndpointFields, entry, "endpoint").to_endpoint()

    def check_policy(self, endpoint: Endpoint) -> None:
        """Reject method/auth combinations this client does not support."""
        if (
            endpoint.method is HttpMethod.POST
            and not endpoint.authenticated
            and not endpoint.api_key_required
        ):
            raise ConfigurationError(
                "Unauthenticated POST requests without an API key are not allowed"
            )

        if endpoint.method is HttpMethod.DELETE:
            if not endpoint.authenticated and not (
                self.allow_unauthenticated_delete and endpoint.api_key_required
            ):
                raise ConfigurationError("Unauthenticated DELETE requests are not allowed")
            if not endpoint.has_uri_params():
                raise ConfigurationError("DELETE requests without URI parameters are not allowed")

    def endpoints(self) -> list[Endpoint]:
        return list(self.state.endpoints.values())

    def operations(self) -> Mapping[str, Operation]:
        return self.state.operations

    def operation(self, name: str) -> Operation:
        try:
            return self.state.operations[name]
        except KeyError:
            raise KeyError(f"Unknown operation: {name}") from None

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    def build(self, *, transport: httpx.BaseTransport | None = None) -> Client:
        """Freeze the current configuration into a ready-to-use Client."""
        executor = RequestExecutor(
            timeout=self.timeout,
            verify_tls=self.verify_tls,
            transport=transport,
        )
        return Client(self.state, executor)


class ApiRegistry:
    """
    Named APIs, each with its own Configuration.

    ``registry["Default"]`` creates an empty configuration on first access;
    ``registry[0]`` returns the first API added.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._apis: dict[str, Configuration] = {}

    def add_api(
        self,
        name: str,
        *,
        environments: Iterable[Any] = (),
        endpoints: Iterable[Any] = (),
        **options: Any,
    ) -> Configuration:
        """Register (or replace) an API. Nothing changes if the definition is invalid."""
        configuration = Configuration(
            environments=environments, endpoints=endpoints, **options
        )
        with self._lock:
            self._apis[name] = configuration
        logger.info(f"Registered API {name!r}")
        return configuration

    def __getitem__(self, key: str | int) -> Configuration:
        with self._lock:
            if isinstance(key, int):
                return list(self._apis.values())[key]
            if key not in self._apis:
                self._apis[key] = Configuration()
            return self._apis[key]

    def __contains__(self, name: object) -> bool:
        return name in self._apis

    def __len__(self) -> int:
        return len(self._apis)

    @property
    def num_apis(self) -> int:
        return len(self)

    def names(self) -> list[str]:
        return list(self._apis)
