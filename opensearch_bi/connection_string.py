"""Build ODBC connection descriptors from user parameters and credentials."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from .errors import InvalidInputError, UnsupportedAuthenticationError
from .models import (
    DEFAULT_DRIVER_NAME,
    AuthFields,
    ConnectionDescriptor,
    ConnectionParameters,
    Credential,
    ImplicitCredential,
    KeyCredential,
    UsernamePasswordCredential,
)

LOG = logging.getLogger(__name__)

MAX_PORT = 65535


def normalize_server(server: str) -> str:
    """Return only the host part of a user-entered server string.

    Users often paste full URLs such as ``https://srv.com:9999``; the scheme
    and port are dropped because ``port`` and ``use_ssl`` decide the address.
    """

    if not isinstance(server, str):
        raise InvalidInputError("Server must be text.")
    candidate = server.strip()
    if not candidate:
        raise InvalidInputError("Server must not be empty.")
    if any(char.isspace() for char in candidate):
        raise InvalidInputError(f"Server '{server}' must not contain whitespace.")
    if "://" not in candidate:
        candidate = f"//{candidate}"
    try:
        parts = urlsplit(candidate)
        parsed_host = parts.hostname
    except ValueError as exc:
        raise InvalidInputError(f"Server '{server}' is not a valid host: {exc}") from exc
    # hostname is lower-cased by urllib; keep the user's spelling
    netloc = parts.netloc.rpartition("@")[2]
    if netloc.startswith("["):
        host = netloc[1 : netloc.find("]")]
    else:
        host = netloc.partition(":")[0]
    if not parsed_host or not host:
        raise InvalidInputError(f"Server '{server}' does not contain a host name.")
    return host


def build_descriptor(
    parameters: ConnectionParameters,
    credential: Credential,
    *,
    driver_name: str = DEFAULT_DRIVER_NAME,
) -> ConnectionDescriptor:
    """Merge address, auth and TLS settings into one descriptor."""

    host = normalize_server(parameters.server)
    port = _validate_port(parameters.port)
    descriptor = ConnectionDescriptor(
        driver_name=driver_name,
        host=host,
        port=port,
        scheme="https" if parameters.use_ssl else "http",
        hostname_verification=1 if parameters.hostname_verification else 0,
        auth=auth_fields(credential),
        use_ssl=0 if credential.encrypt_connection is False else 1,
    )
    LOG.debug(
        "Built connection descriptor",
        extra={"address": descriptor.address, "auth": descriptor.auth.auth},
    )
    return descriptor


def auth_fields(credential: Credential) -> AuthFields:
    """Select the connection-string auth keys for the credential's mode."""

    if isinstance(credential, ImplicitCredential):
        return AuthFields(auth="NONE")
    if isinstance(credential, UsernamePasswordCredential):
        return AuthFields(auth="BASIC", uid=credential.username, pwd=credential.password)
    if isinstance(credential, KeyCredential):
        return AuthFields(auth="AWS_SIGV4", region=credential.key)
    raise UnsupportedAuthenticationError(
        f"Unsupported credential type: {type(credential).__name__}"
    )


def _validate_port(port: int) -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidInputError(f"Port must be an integer, got {port!r}.")
    if not 0 < port <= MAX_PORT:
        raise InvalidInputError(f"Port must be between 1 and {MAX_PORT}, got {port}.")
    return port


__all__ = ["MAX_PORT", "auth_fields", "build_descriptor", "normalize_server"]
