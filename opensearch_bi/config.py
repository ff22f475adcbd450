"""Connector configuration loading helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import tomllib

from pydantic import BaseModel, Field, ValidationError

from .models import DEFAULT_DRIVER_NAME, DEFAULT_PORT, AuthenticationKind, ConnectionParameters

CONFIG_FILE = Path.home() / ".config" / "opensearch-bi" / "config.toml"
_AUTHENTICATION_KINDS = frozenset(kind.value for kind in AuthenticationKind)


class Brand(BaseModel):
    """Identity of one distributable flavour of the connector."""

    key: str
    display_name: str
    data_source_kind: str


BRANDS: dict[str, Brand] = {
    "opensearch-project": Brand(
        key="opensearch-project",
        display_name="OpenSearch Project",
        data_source_kind="OpenSearchProject",
    ),
    "amazon-opensearch-service": Brand(
        key="amazon-opensearch-service",
        display_name="Amazon OpenSearch Service",
        data_source_kind="AmazonOpenSearchService",
    ),
}


BrandKey = Literal["opensearch-project", "amazon-opensearch-service"]


class ConnectionProfileConfig(BaseModel):
    """Connection profile stored in config.toml."""

    name: str
    server: str
    port: int = DEFAULT_PORT
    use_ssl: bool = False
    hostname_verification: bool = True
    authentication_kind: AuthenticationKind = AuthenticationKind.IMPLICIT
    username: str | None = None
    password: str | None = None
    key: str | None = None
    encrypt_connection: bool | None = None

    def parameters(self) -> ConnectionParameters:
        return ConnectionParameters(
            server=self.server,
            port=self.port,
            use_ssl=self.use_ssl,
            hostname_verification=self.hostname_verification,
        )

    def credential_record(self) -> dict[str, object]:
        """Stored credential in the host's record shape."""

        record: dict[str, object] = {
            "AuthenticationKind": self.authentication_kind.value,
            "EncryptConnection": self.encrypt_connection,
        }
        if self.username is not None:
            record["Username"] = self.username
        if self.password is not None:
            record["Password"] = self.password
        if self.key is not None:
            record["Key"] = self.key
        return record


class ConnectorSettings(BaseModel):
    """Shape of the connector configuration file.

    Values are read once at start-up and treated as constant afterwards.
    """

    brand: BrandKey = "opensearch-project"
    driver_name: str = DEFAULT_DRIVER_NAME
    enable_trace_output: bool = False
    login_timeout: int = 0
    profiles: list[ConnectionProfileConfig] = Field(default_factory=list)
    active_profile: str | None = None

    @property
    def brand_info(self) -> Brand:
        return BRANDS[self.brand]

    def profile(self, name: str | None = None) -> ConnectionProfileConfig:
        """Return the named profile, or the active/first one when no name is given."""

        if not self.profiles:
            raise ValueError("No connection profiles configured.")
        target = name or self.active_profile
        if target is None:
            return self.profiles[0]
        for profile in self.profiles:
            if profile.name == target:
                return profile
        raise ValueError(f"Profile '{target}' not found.")

    def with_active_profile(self, name: str) -> ConnectorSettings:
        """Return a copy with the active profile updated."""

        return self.model_copy(update={"active_profile": name})


def load_config(path: Path | None = None) -> ConnectorSettings:
    """Load settings from disk; fall back to defaults if missing or unreadable."""

    try:
        data = _read_config_file(path or CONFIG_FILE)
    except FileNotFoundError:
        return ConnectorSettings()
    except (tomllib.TOMLDecodeError, OSError):
        return ConnectorSettings()

    try:
        profiles = [
            ConnectionProfileConfig(**profile)
            for profile in data.pop("profiles", [])  # type: ignore[union-attr]
        ]
        return ConnectorSettings(profiles=profiles, **data)
    except ValidationError:
        return ConnectorSettings()


def _read_config_file(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    brand = raw.get("brand")
    if isinstance(brand, str) and brand in BRANDS:
        data["brand"] = brand
    for key in ("driver_name", "active_profile"):
        value = raw.get(key)
        if isinstance(value, str):
            data[key] = value
    trace = raw.get("enable_trace_output")
    if isinstance(trace, bool):
        data["enable_trace_output"] = trace
    timeout = raw.get("login_timeout")
    if isinstance(timeout, int) and not isinstance(timeout, bool):
        data["login_timeout"] = timeout
    profiles = raw.get("profiles")
    if isinstance(profiles, list):
        parsed_profiles: list[dict[str, object]] = []
        for profile in profiles:
            if not isinstance(profile, dict):
                continue
            parsed: dict[str, object] = {}
            for key in ("name", "server", "authentication_kind", "username", "password", "key"):
                value = profile.get(key)
                if isinstance(value, str):
                    parsed[key] = value
            port = profile.get("port")
            if isinstance(port, int) and not isinstance(port, bool):
                parsed["port"] = port
            for key in ("use_ssl", "hostname_verification", "encrypt_connection"):
                value = profile.get(key)
                if isinstance(value, bool):
                    parsed[key] = value
            kind = parsed.get("authentication_kind")
            if kind is not None and kind not in _AUTHENTICATION_KINDS:
                continue
            if parsed.get("name") and parsed.get("server"):
                parsed_profiles.append(parsed)
        data["profiles"] = parsed_profiles
    return data


__all__ = [
    "BRANDS",
    "Brand",
    "CONFIG_FILE",
    "ConnectionProfileConfig",
    "ConnectorSettings",
    "load_config",
]
