"""
Configuration and Response Models

Pydantic schemas for the field maps callers register environments and
endpoints with, plus the structured value returned for JSON bodies.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, TypedDict, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .config import DEFAULT_API_KEY_NAME, DEFAULT_HOST, DEFAULT_SCHEME
from .endpoints import Endpoint, HttpMethod, ReturnType
from .environment import Environment
from .errors import ConfigurationError, DecodingError


# -----------------------------------------------------------------------------
# TypedDict Definitions for Field Maps
# -----------------------------------------------------------------------------


class EnvironmentDict(TypedDict, total=False):
    """Dictionary form of an environment registration."""

    scheme: str
    host: str
    port: int | str
    api_key: str
    api_key_name: str
    environment_name: str


class EndpointDict(TypedDict, total=False):
    """Dictionary form of an endpoint registration."""

    method: str
    location: str
    authenticated: bool
    api_key_required: bool
    name: str
    return_type: str
    expect_json: bool
    encode_authorization: list[str]
    headers: dict[str, str]


# -----------------------------------------------------------------------------
# Field Map Validation
# -----------------------------------------------------------------------------


class EnvironmentFields(BaseModel):
    """
    Validated environment registration.

    Stored by the registry as-is; a fresh Environment is built from it on
    every lookup.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scheme: str = DEFAULT_SCHEME
    host: str = DEFAULT_HOST
    port: int | None = None
    api_key: str | None = Field(default=None, repr=False)
    api_key_name: str = DEFAULT_API_KEY_NAME
    environment_name: str | None = None

    @field_validator("api_key_name", mode="before")
    @classmethod
    def _default_api_key_name(cls, value: Any) -> Any:
        return value or DEFAULT_API_KEY_NAME

    @field_validator("port", mode="before")
    @classmethod
    def _blank_port(cls, value: Any) -> Any:
        return None if value == "" else value

    def to_environment(self) -> Environment:
        return Environment(
            scheme=self.scheme,
            host=self.host,
            port=self.port,
            api_key=self.api_key,
            api_key_name=self.api_key_name,
            name=self.environment_name,
        )


class EndpointFields(BaseModel):
    """
    Validated endpoint registration.

    `expect_json` is the older spelling of `return_type: body_as_object` and
    only applies when no return_type is given.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: HttpMethod
    location: str
    authenticated: bool = False
    api_key_required: bool = False
    name: str | None = None
    return_type: ReturnType = ReturnType.BODY_AS_STRING
    expect_json: bool = False
    encode_authorization: list[str] = Field(default_factory=list)
    headers: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _apply_expect_json(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("return_type") is None and data.get("expect_json"):
            return {**data, "return_type": ReturnType.BODY_AS_OBJECT}
        return data

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("location", "name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("return_type", mode="before")
    @classmethod
    def _coerce_return_type(cls, value: Any) -> Any:
        return ReturnType.coerce(value)

    def to_endpoint(self) -> Endpoint:
        return Endpoint(
            method=self.method,
            location=self.location,
            authenticated=self.authenticated,
            api_key_required=self.api_key_required,
            name=self.name,
            return_type=self.return_type,
            encode_authorization=tuple(self.encode_authorization),
            additional_headers=self.headers,
        )


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_fields(model: type[ModelT], data: Any, kind: str) -> ModelT:
    """Validate one field map, reporting problems as ConfigurationError."""
    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Each {kind} must be a mapping, got {type(data).__name__}")
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {kind} definition: {e}", cause=e) from e


# -----------------------------------------------------------------------------
# Response Types
# -----------------------------------------------------------------------------


class ResponseObject(dict):
    """
    JSON object with attribute access.

    ``obj.auth_token`` and ``obj["auth_token"]`` are equivalent; nested objects
    are ResponseObjects too.
    """

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def path(self, dotted: str, default: Any = None) -> Any:
        """
        Extract a nested value using dot notation.

        Example: obj.path("address.geo.lat") -> "-68.6102"
        """
        current: Any = self
        for part in dotted.split("."):
            if isinstance(current, dict):
                current = current.get(part)
            elif isinstance(current, list) and part.isdigit():
                idx = int(part)
                current = current[idx] if idx < len(current) else None
            else:
                return default
            if current is None:
                return default
        return current

    @classmethod
    def from_json(cls, text: str) -> Any:
        """Parse JSON text; objects at every depth become ResponseObjects."""
        try:
            return json.loads(text, object_hook=cls)
        except json.JSONDecodeError as e:
            raise DecodingError(f"Response body is not valid JSON: {e}", body=text, cause=e) from e


class VersionInfo(BaseModel):
    """Package identification exposed by the client facade."""

    name: str
    version_name: str
    version_code: int
