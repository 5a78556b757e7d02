"""
Client Facade

Thin, caller-facing layer over a frozen registry state: environment lookup,
version metadata, and attribute access to compiled operations.

    client = configuration.build()
    local = client.environment("local")
    student = local.get_student(token, {"id": 7})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .config import PACKAGE_NAME, VERSION_NAME
from .environment import Environment
from .executor import RequestExecutor
from .models import VersionInfo
from .operations import BoundOperation, Operation

if TYPE_CHECKING:
    from .registry import RegistryState


def version_code_from_name(version_name: str) -> int:
    """4 * major + 2 * minor + patch."""
    major, minor, patch = (int(part) for part in version_name.split(".")[:3])
    return 4 * major + 2 * minor + patch


def get_version_info() -> VersionInfo:
    return VersionInfo(
        name=PACKAGE_NAME,
        version_name=VERSION_NAME,
        version_code=version_code_from_name(VERSION_NAME),
    )


class EnvironmentClient:
    """
    Operations bound to one environment.

    Every compiled operation is available as an attribute; environment
    fields (scheme, host, port, ...) are readable the same way.
    """

    def __init__(
        self,
        environment: Environment,
        operations: Mapping[str, Operation],
        executor: RequestExecutor,
    ) -> None:
        self.environment = environment
        self._operations = operations
        self._executor = executor

    def operation(self, name: str) -> BoundOperation:
        try:
            operation = self._operations[name]
        except KeyError:
            raise AttributeError(f"No operation named {name!r}") from None
        return operation.bind(self._executor, self.environment)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._operations:
            return self.operation(name)
        try:
            return getattr(self.environment, name)
        except AttributeError:
            raise AttributeError(
                f"{type(self).__name__} has no operation or attribute {name!r}"
            ) from None

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._operations))

    def __repr__(self) -> str:
        return f"<EnvironmentClient {self.environment.base_url} ({len(self._operations)} operations)>"


class Client:
    """
    Entry point returned by Configuration.build().

    Holds an immutable snapshot of the configuration; reconfiguring the
    registry afterwards does not change an existing client.
    """

    def __init__(self, state: RegistryState, executor: RequestExecutor) -> None:
        self._state = state
        self._executor = executor

    def environment(self, name: str | None = None) -> EnvironmentClient:
        """
        Operations bound to the named environment.

        Raises:
            EnvironmentLookupError: no name given while several environments
                exist, or the name is unknown
        """
        return EnvironmentClient(
            self._state.get_environment(name),
            self._state.operations,
            self._executor,
        )

    def environment_names(self) -> list[str]:
        return self._state.environment_names()

    def operation_names(self) -> list[str]:
        return list(self._state.operations)

    def operation(self, name: str, environment: str | None = None) -> BoundOperation:
        return self.environment(environment).operation(name)

    def version_info(self) -> VersionInfo:
        return get_version_info()

    def __getattr__(self, name: str) -> Any:
        # Shortcut for APIs with a single environment
        if name.startswith("_") or name not in self._state.operations:
            raise AttributeError(f"{type(self).__name__} has no operation or attribute {name!r}")
        return self.operation(name)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._state.operations))

    def close(self) -> None:
        self._executor.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


# Names an operation cannot take without being shadowed by the facades
RESERVED_OPERATION_NAMES = frozenset(
    name
    for cls in (Client, EnvironmentClient)
    for name in dir(cls)
    if not name.startswith("_")
) | {"environment"}
