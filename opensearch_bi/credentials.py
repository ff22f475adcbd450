"""Credential providers handing the stored authentication record to the connector."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from .errors import InvalidInputError, UnsupportedAuthenticationError
from .models import (
    AuthenticationKind,
    Credential,
    ImplicitCredential,
    KeyCredential,
    UsernamePasswordCredential,
)


@runtime_checkable
class CredentialProvider(Protocol):
    """Source of the credential used for one connection attempt."""

    def get_credential(self) -> Credential:
        """Return the credential the host stored for the data source."""


class StaticCredentialProvider:
    """Provider returning a credential fixed at construction."""

    def __init__(self, credential: Credential) -> None:
        self._credential = credential

    def get_credential(self) -> Credential:
        return self._credential


class RecordCredentialProvider:
    """Provider reading a host credential record (`AuthenticationKind`, `Username`, ...)."""

    def __init__(self, record: Mapping[str, Any]) -> None:
        self._record = dict(record)

    def get_credential(self) -> Credential:
        return credential_from_record(self._record)


def credential_from_record(record: Mapping[str, Any]) -> Credential:
    """Translate a host credential record into a typed credential."""

    raw_kind = record.get("AuthenticationKind")
    try:
        kind = AuthenticationKind(raw_kind)
    except ValueError as exc:
        raise UnsupportedAuthenticationError(f"Unsupported authentication kind: {raw_kind!r}") from exc
    encrypt = record.get("EncryptConnection")
    if encrypt is not None and not isinstance(encrypt, bool):
        raise InvalidInputError("EncryptConnection must be true, false or null.")

    if kind is AuthenticationKind.IMPLICIT:
        return ImplicitCredential(encrypt_connection=encrypt)
    if kind is AuthenticationKind.USERNAME_PASSWORD:
        username = record.get("Username")
        password = record.get("Password")
        if not isinstance(username, str) or not isinstance(password, str):
            raise InvalidInputError("UsernamePassword credentials need 'Username' and 'Password'.")
        return UsernamePasswordCredential(username=username, password=password, encrypt_connection=encrypt)
    key = record.get("Key")
    if not isinstance(key, str) or not key:
        raise InvalidInputError("Key credentials need a non-empty 'Key' (the AWS region).")
    return KeyCredential(key=key, encrypt_connection=encrypt)


def resolve_credential(provider: CredentialProvider) -> Credential:
    """Ask the provider for its credential and check the result is usable."""

    credential = provider.get_credential()
    if not isinstance(credential, (ImplicitCredential, UsernamePasswordCredential, KeyCredential)):
        raise UnsupportedAuthenticationError(
            f"Credential provider returned unsupported value of type {type(credential).__name__}"
        )
    return credential


__all__ = [
    "CredentialProvider",
    "RecordCredentialProvider",
    "StaticCredentialProvider",
    "credential_from_record",
    "resolve_credential",
]
