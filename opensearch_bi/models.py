"""Shared dataclasses describing connection inputs and outputs."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidInputError

DEFAULT_DRIVER_NAME = "OpenSearch SQL ODBC Driver"
DEFAULT_PORT = 9200


class AuthenticationKind(str, Enum):
    """Authentication modes a host can store for the data source."""

    IMPLICIT = "Implicit"
    USERNAME_PASSWORD = "UsernamePassword"
    KEY = "Key"


@dataclass(frozen=True, slots=True)
class ConnectionParameters:
    """User-entered parameters for one connection attempt."""

    server: str
    port: int = DEFAULT_PORT
    use_ssl: bool = False
    hostname_verification: bool = True

    def to_data_source_path(self) -> str:
        """Serialize to the JSON identity the host stores for refreshes."""

        return json.dumps(
            {
                "HostnameVerification": self.hostname_verification,
                "Port": self.port,
                "Server": self.server,
                "UseSSL": self.use_ssl,
            },
            sort_keys=True,
            separators=(",", ":"),
        )

    @classmethod
    def from_data_source_path(cls, path: str) -> ConnectionParameters:
        """Rebuild parameters from a stored data source path."""

        try:
            data = json.loads(path)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Malformed data source path: {exc.msg}") from exc
        if not isinstance(data, dict):
            raise InvalidInputError("Data source path must be a JSON object.")
        server = data.get("Server")
        port = data.get("Port", DEFAULT_PORT)
        if not isinstance(server, str):
            raise InvalidInputError("Data source path is missing 'Server'.")
        if isinstance(port, bool) or not isinstance(port, int):
            raise InvalidInputError("Data source path 'Port' must be a number.")
        return cls(
            server=server,
            port=port,
            use_ssl=bool(data.get("UseSSL", False)),
            hostname_verification=bool(data.get("HostnameVerification", True)),
        )


@dataclass(frozen=True, slots=True)
class ImplicitCredential:
    """Anonymous access; no secrets are sent."""

    encrypt_connection: bool | None = None

    @property
    def kind(self) -> AuthenticationKind:
        return AuthenticationKind.IMPLICIT


@dataclass(frozen=True, slots=True)
class UsernamePasswordCredential:
    """HTTP basic authentication."""

    username: str
    password: str
    encrypt_connection: bool | None = None

    @property
    def kind(self) -> AuthenticationKind:
        return AuthenticationKind.USERNAME_PASSWORD

    def __repr__(self) -> str:
        return (
            f"UsernamePasswordCredential(username={self.username!r}, password='***', "
            f"encrypt_connection={self.encrypt_connection!r})"
        )


@dataclass(frozen=True, slots=True)
class KeyCredential:
    """AWS SigV4 signing; the key holds the AWS region."""

    key: str
    encrypt_connection: bool | None = None

    @property
    def kind(self) -> AuthenticationKind:
        return AuthenticationKind.KEY


Credential = ImplicitCredential | UsernamePasswordCredential | KeyCredential


@dataclass(frozen=True, slots=True)
class AuthFields:
    """Authentication keys merged into the connection string."""

    auth: str
    uid: str | None = None
    pwd: str | None = None
    region: str | None = None

    def as_dict(self) -> dict[str, str]:
        fields = {"Auth": self.auth}
        if self.uid is not None:
            fields["UID"] = self.uid
        if self.pwd is not None:
            fields["PWD"] = self.pwd
        if self.region is not None:
            fields["Region"] = self.region
        return fields


@dataclass(frozen=True, slots=True)
class ConnectionDescriptor:
    """Fully resolved inputs for one driver open call."""

    driver_name: str
    host: str
    port: int
    scheme: str
    hostname_verification: int
    auth: AuthFields
    use_ssl: int

    @property
    def address(self) -> str:
        return f"{self.scheme}://{self._bracketed_host}:{self.port}"

    @property
    def data_source_path(self) -> str:
        """Short `host:port` label used in diagnostics."""

        return f"{self._bracketed_host}:{self.port}"

    @property
    def _bracketed_host(self) -> str:
        # IPv6 literals need brackets before a port suffix
        return f"[{self.host}]" if ":" in self.host else self.host

    def to_connection_string(self) -> dict[str, object]:
        """Return the ordered key/value map handed to the driver."""

        values: dict[str, object] = {
            "Driver": self.driver_name,
            "Host": self.address,
            "HostnameVerification": self.hostname_verification,
        }
        values.update(self.auth.as_dict())
        values["UseSSL"] = self.use_ssl
        return values

    def render(self, *, mask_secrets: bool = False) -> str:
        """Render the `key=value;` ODBC connection string."""

        parts: list[str] = []
        for key, value in self.to_connection_string().items():
            text = str(value)
            if mask_secrets and key == "PWD":
                text = "***"
            if key == "Driver":
                text = "{" + text.replace("}", "}}") + "}"
            else:
                text = _quote_value(text)
            parts.append(f"{key}={text}")
        return ";".join(parts) + ";"


def _quote_value(value: str) -> str:
    if any(char in value for char in ";{}") or value != value.strip():
        return "{" + value.replace("}", "}}") + "}"
    return value


__all__ = [
    "AuthFields",
    "AuthenticationKind",
    "ConnectionDescriptor",
    "ConnectionParameters",
    "Credential",
    "DEFAULT_DRIVER_NAME",
    "DEFAULT_PORT",
    "ImplicitCredential",
    "KeyCredential",
    "UsernamePasswordCredential",
]
