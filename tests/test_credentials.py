"""Tests for credential providers."""

from __future__ import annotations

import pytest

from opensearch_bi.credentials import (
    CredentialProvider,
    RecordCredentialProvider,
    StaticCredentialProvider,
    credential_from_record,
    resolve_credential,
)
from opensearch_bi.errors import InvalidInputError, UnsupportedAuthenticationError
from opensearch_bi.models import (
    AuthenticationKind,
    ImplicitCredential,
    KeyCredential,
    UsernamePasswordCredential,
)


def test_record_with_implicit_auth() -> None:
    credential = credential_from_record({"AuthenticationKind": "Implicit"})

    assert credential == ImplicitCredential(encrypt_connection=None)
    assert credential.kind is AuthenticationKind.IMPLICIT


def test_record_with_username_password() -> None:
    credential = credential_from_record(
        {
            "AuthenticationKind": "UsernamePassword",
            "Username": "a",
            "Password": "b",
            "EncryptConnection": False,
        }
    )

    assert credential == UsernamePasswordCredential(username="a", password="b", encrypt_connection=False)


def test_record_with_key_uses_region() -> None:
    credential = credential_from_record({"AuthenticationKind": "Key", "Key": "eu-west-1", "EncryptConnection": True})

    assert credential == KeyCredential(key="eu-west-1", encrypt_connection=True)


@pytest.mark.parametrize("kind", ["Windows", None, "basic"])
def test_unknown_authentication_kind_fails_fast(kind: object) -> None:
    with pytest.raises(UnsupportedAuthenticationError):
        credential_from_record({"AuthenticationKind": kind})


@pytest.mark.parametrize(
    "record",
    [
        {"AuthenticationKind": "UsernamePassword", "Username": "a"},
        {"AuthenticationKind": "Key"},
        {"AuthenticationKind": "Implicit", "EncryptConnection": "yes"},
    ],
)
def test_incomplete_records_are_rejected(record: dict[str, object]) -> None:
    with pytest.raises(InvalidInputError):
        credential_from_record(record)


def test_password_is_hidden_from_repr() -> None:
    credential = UsernamePasswordCredential(username="admin", password="hunter2")

    assert "hunter2" not in repr(credential)


def test_providers_satisfy_protocol() -> None:
    static = StaticCredentialProvider(ImplicitCredential())
    record = RecordCredentialProvider({"AuthenticationKind": "Implicit"})

    assert isinstance(static, CredentialProvider)
    assert isinstance(record, CredentialProvider)
    assert resolve_credential(record) == ImplicitCredential()


def test_resolve_rejects_unknown_credential_values() -> None:
    class _Provider:
        def get_credential(self) -> object:
            return {"AuthenticationKind": "Implicit"}

    with pytest.raises(UnsupportedAuthenticationError):
        resolve_credential(_Provider())  # type: ignore[arg-type]
