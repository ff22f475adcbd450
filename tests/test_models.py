"""Tests for the shared connection dataclasses."""

from __future__ import annotations

import json

import pytest

from opensearch_bi.errors import InvalidInputError
from opensearch_bi.models import AuthFields, ConnectionDescriptor, ConnectionParameters


def test_data_source_path_uses_host_keys() -> None:
    params = ConnectionParameters(server="host1", port=9200, use_ssl=True, hostname_verification=False)

    path = params.to_data_source_path()

    assert json.loads(path) == {
        "HostnameVerification": False,
        "Port": 9200,
        "Server": "host1",
        "UseSSL": True,
    }
    assert ConnectionParameters.from_data_source_path(path) == params


def test_data_source_path_defaults_optional_flags() -> None:
    params = ConnectionParameters.from_data_source_path('{"Server": "host1"}')

    assert params == ConnectionParameters(server="host1", port=9200, use_ssl=False, hostname_verification=True)


@pytest.mark.parametrize(
    "path",
    ["not json", "[]", '{"Port": 9200}', '{"Server": "h", "Port": "9200"}', '{"Server": "h", "Port": true}'],
)
def test_malformed_data_source_path_is_invalid_input(path: str) -> None:
    with pytest.raises(InvalidInputError):
        ConnectionParameters.from_data_source_path(path)


def test_descriptor_data_source_path_is_host_and_port() -> None:
    descriptor = ConnectionDescriptor(
        driver_name="OpenSearch SQL ODBC Driver",
        host="host1",
        port=9200,
        scheme="http",
        hostname_verification=1,
        auth=AuthFields(auth="NONE"),
        use_ssl=1,
    )

    assert descriptor.data_source_path == "host1:9200"
    assert descriptor.render() == (
        "Driver={OpenSearch SQL ODBC Driver};Host=http://host1:9200;HostnameVerification=1;Auth=NONE;UseSSL=1;"
    )


def test_descriptor_brackets_ipv6_hosts() -> None:
    descriptor = ConnectionDescriptor(
        driver_name="OpenSearch SQL ODBC Driver",
        host="::1",
        port=9200,
        scheme="https",
        hostname_verification=1,
        auth=AuthFields(auth="NONE"),
        use_ssl=1,
    )

    assert descriptor.data_source_path == "[::1]:9200"
    assert descriptor.address == "https://[::1]:9200"
