"""
Compiled operations: one Endpoint plus its derived signature.

An Operation is environment-independent. Binding it to an executor and an
Environment yields a BoundOperation, a plain callable whose
``inspect.signature`` reflects the positional parameters the endpoint needs.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any

from .endpoints import Endpoint
from .environment import Environment
from .executor import OperationSignature, RequestExecutor, derive_signature


@dataclass(frozen=True)
class Operation:
    """A compiled endpoint, looked up by name in the registry's dispatch table."""

    endpoint: Endpoint
    signature: OperationSignature

    @classmethod
    def compile(cls, endpoint: Endpoint) -> Operation:
        return cls(endpoint=endpoint, signature=derive_signature(endpoint))

    @property
    def name(self) -> str:
        return self.endpoint.operation_name()

    @property
    def identity_key(self) -> str:
        return self.endpoint.identity_key()

    @property
    def arity(self) -> int:
        return self.signature.arity

    def bind(self, executor: RequestExecutor, environment: Environment) -> BoundOperation:
        return BoundOperation(self, executor, environment)


class BoundOperation:
    """Callable form of an Operation against one environment."""

    def __init__(
        self, operation: Operation, executor: RequestExecutor, environment: Environment
    ) -> None:
        self.operation = operation
        self.executor = executor
        self.environment = environment
        self.__name__ = operation.name
        self.__signature__: inspect.Signature = operation.signature.to_inspect()

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        arguments = self.operation.signature.bind(self.operation.name, args, kwargs)
        return self.executor.execute(self.operation.endpoint, self.environment, arguments)

    def __repr__(self) -> str:
        params = ", ".join(self.operation.signature.parameters)
        return f"<BoundOperation {self.operation.name}({params}) on {self.environment.base_url}>"
