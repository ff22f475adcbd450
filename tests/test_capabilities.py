"""Tests for the capability profile and its trace hooks."""

from __future__ import annotations

import logging

import pytest

from opensearch_bi.capabilities import (
    COLUMNS_SENTINEL,
    SQL_AF_ALL,
    SQL_SC_SQL92_FULL,
    LimitClauseKind,
    TraceHooks,
    build_capability_profile,
)


def test_profile_declares_driver_features() -> None:
    profile = build_capability_profile()
    caps = profile.sql_capabilities

    assert profile.get_info["SQL_AGGREGATE_FUNCTIONS"] == SQL_AF_ALL
    assert caps.sql92_conformance == SQL_SC_SQL92_FULL
    assert caps.supports_top is False
    assert caps.limit_clause_kind == LimitClauseKind.LIMIT_OFFSET
    assert caps.supports_numeric_literals and caps.supports_string_literals
    assert caps.supports_odbc_date_literals
    assert caps.supports_odbc_time_literals
    assert caps.supports_odbc_timestamp_literals
    assert profile.hide_native_query is True
    assert profile.hierarchical_navigation is False
    assert profile.soft_numbers is True
    assert profile.tolerate_concat_overflow is True
    assert profile.client_connection_pooling is True


def test_profile_is_shared_and_immutable() -> None:
    first = build_capability_profile(trace_enabled=False)
    second = build_capability_profile(trace_enabled=False)

    assert first is second
    with pytest.raises(AttributeError):
        first.soft_numbers = False  # type: ignore[misc]
    with pytest.raises(TypeError):
        first.get_info["SQL_AGGREGATE_FUNCTIONS"] = 0  # type: ignore[index]


def test_trace_setting_selects_hooks() -> None:
    assert build_capability_profile(trace_enabled=True).hooks.enabled is True
    assert build_capability_profile(trace_enabled=False).hooks.enabled is False


def test_as_options_exposes_host_record() -> None:
    options = build_capability_profile().as_options()

    assert options["SqlCapabilities"]["SupportsTop"] is False  # type: ignore[index]
    assert options["SQLGetInfo"] == {"SQL_AGGREGATE_FUNCTIONS": SQL_AF_ALL}
    assert options["ClientConnectionPooling"] is True
    assert callable(options["SQLColumns"])


def test_disabled_hooks_pass_rows_through(caplog: pytest.LogCaptureFixture) -> None:
    hooks = TraceHooks(enabled=False)
    rows = ({"type_name": "keyword"},)

    with caplog.at_level(logging.DEBUG, logger="opensearch_bi.capabilities"):
        assert hooks.type_info(rows) is rows
        assert hooks.columns("accounts", "id", rows) is rows

    assert caplog.records == []


def test_disabled_hooks_leave_iterators_unconsumed() -> None:
    hooks = TraceHooks(enabled=False)
    type_rows = iter([{"type_name": "keyword"}])
    column_rows = iter([{"column_name": "id"}])

    assert hooks.type_info(type_rows) is type_rows
    assert hooks.columns("accounts", "id", column_rows) is column_rows
    assert next(type_rows) == {"type_name": "keyword"}
    assert next(column_rows) == {"column_name": "id"}


def test_sentinel_lookup_leaves_rows_untouched() -> None:
    hooks = TraceHooks(enabled=True)
    rows = iter([{"column_name": "id"}])

    assert hooks.columns(COLUMNS_SENTINEL, None, rows) is rows
    assert next(rows) == {"column_name": "id"}


def test_type_info_hook_logs_each_row(caplog: pytest.LogCaptureFixture) -> None:
    hooks = TraceHooks(enabled=True)
    rows = [{"type_name": "keyword"}, {"type_name": "integer"}]

    with caplog.at_level(logging.INFO, logger="opensearch_bi.capabilities"):
        result = hooks.type_info(rows)

    assert result == rows
    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["SQLGetTypeInfo keyword", "SQLGetTypeInfo integer"]


def test_columns_hook_logs_rows(caplog: pytest.LogCaptureFixture) -> None:
    hooks = TraceHooks(enabled=True)
    rows = [{"column_name": "id"}, {"column_name": "email"}]

    with caplog.at_level(logging.INFO, logger="opensearch_bi.capabilities"):
        result = hooks.columns("accounts", None, rows)

    assert result == rows
    assert [record.getMessage() for record in caplog.records].count("SQLColumns") == 2


@pytest.mark.parametrize(("table", "column"), [(COLUMNS_SENTINEL, "id"), ("accounts", COLUMNS_SENTINEL)])
def test_columns_hook_skips_sentinel_lookups(
    caplog: pytest.LogCaptureFixture, table: str, column: str
) -> None:
    hooks = TraceHooks(enabled=True)
    rows = [{"column_name": "id"}]

    with caplog.at_level(logging.INFO, logger="opensearch_bi.capabilities"):
        assert hooks.columns(table, column, rows) == rows

    assert caplog.records == []


def test_enabled_hook_returns_logged_rows_from_iterator(caplog: pytest.LogCaptureFixture) -> None:
    hooks = TraceHooks(enabled=True)

    with caplog.at_level(logging.INFO, logger="opensearch_bi.capabilities"):
        result = hooks.type_info(row for row in [{"type_name": "keyword"}])

    assert result == [{"type_name": "keyword"}]
    assert [record.getMessage() for record in caplog.records] == ["SQLGetTypeInfo keyword"]
