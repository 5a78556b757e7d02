"""
Environment descriptor: one concrete server an Endpoint can be executed against.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import (
    DEFAULT_API_KEY_NAME,
    DEFAULT_HOST,
    DEFAULT_PORTS,
    DEFAULT_SCHEME,
    SUPPORTED_SCHEMES,
)
from .errors import ConfigurationError

if TYPE_CHECKING:
    from .endpoints import Endpoint


@dataclass(frozen=True)
class Environment:
    """
    Scheme, host, port and optional API key of a server.

    Ports cross-default from the scheme: http with no port (or the https
    default 443) becomes 80, https with no port becomes 443.
    """

    scheme: str = DEFAULT_SCHEME
    host: str = DEFAULT_HOST
    port: int | None = None
    api_key: str | None = field(default=None, repr=False)
    api_key_name: str = DEFAULT_API_KEY_NAME
    name: str | None = None

    def __post_init__(self) -> None:
        scheme = str(self.scheme).strip().lower()
        if scheme not in SUPPORTED_SCHEMES:
            raise ConfigurationError(
                f"Unsupported scheme {self.scheme!r}; expected one of: {', '.join(SUPPORTED_SCHEMES)}"
            )

        port = _coerce_port(self.port)
        if port is None or (scheme == "http" and port == DEFAULT_PORTS["https"]):
            port = DEFAULT_PORTS[scheme]

        object.__setattr__(self, "scheme", scheme)
        object.__setattr__(self, "host", str(self.host))
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "api_key_name", self.api_key_name or DEFAULT_API_KEY_NAME)

    def api_key_for(self, endpoint: Endpoint) -> str | None:
        """The API key, but only for endpoints that asked for it."""
        if not endpoint.api_key_required:
            return None
        return self.api_key or None

    @property
    def default_port(self) -> int:
        return DEFAULT_PORTS[self.scheme]

    def uses_default_port(self) -> bool:
        return self.port == self.default_port

    @property
    def authority(self) -> str:
        """host, or host:port when the port is not the scheme's default."""
        if self.uses_default_port():
            return self.host
        return f"{self.host}:{self.port}"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.authority}"


def _coerce_port(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid port {value!r}; expected an integer") from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"Invalid port {port}; expected 1-65535")
    return port
