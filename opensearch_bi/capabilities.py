"""ODBC capability profile advertised to the BI host."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Iterable, Mapping, TypeVar

LOG = logging.getLogger(__name__)

RowsT = TypeVar("RowsT", bound=Iterable[Any])

# ODBC constants (sql.h / sqlext.h)
SQL_AF_ALL = 0x00000040
SQL_SC_SQL92_FULL = 0x00000008
SQL_GB_NO_RELATION = 0x0003

# Column lookups for this name are catalog lookups, not real tables.
COLUMNS_SENTINEL = "***"


class LimitClauseKind:
    """Row-limiting syntax the driver understands."""

    TOP = "Top"
    LIMIT_OFFSET = "LimitOffset"


@dataclass(frozen=True, slots=True)
class SqlCapabilities:
    """SQL features the driver supports."""

    sql92_conformance: int = SQL_SC_SQL92_FULL
    group_by_capabilities: int = SQL_GB_NO_RELATION
    fractional_seconds_scale: int = 3
    supports_top: bool = False
    limit_clause_kind: str = LimitClauseKind.LIMIT_OFFSET
    supports_numeric_literals: bool = True
    supports_string_literals: bool = True
    supports_odbc_date_literals: bool = True
    supports_odbc_time_literals: bool = True
    supports_odbc_timestamp_literals: bool = True


@dataclass(frozen=True, slots=True)
class TraceHooks:
    """Diagnostic hooks for driver catalog metadata.

    With tracing disabled both hooks return their input untouched.
    """

    enabled: bool = False

    def type_info(self, rows: RowsT) -> RowsT:
        """Log each row of SQLGetTypeInfo output."""

        if not self.enabled:
            return rows
        rows = _materialize(rows)
        for row in rows:
            LOG.info("SQLGetTypeInfo %s", _field(row, "type_name"), extra={"row": _describe(row)})
        return rows

    def columns(self, table_name: str | None, column_name: str | None, rows: RowsT) -> RowsT:
        """Log each row of SQLColumns output unless the lookup uses the sentinel name."""

        if not self.enabled:
            return rows
        if table_name == COLUMNS_SENTINEL or column_name == COLUMNS_SENTINEL:
            return rows
        rows = _materialize(rows)
        LOG.info("SQLColumns.TableName %s", table_name)
        LOG.info("SQLColumns.ColumnName %s", column_name)
        for row in rows:
            LOG.info("SQLColumns", extra={"row": _describe(row)})
        return rows


@dataclass(frozen=True, slots=True)
class CapabilityProfile:
    """Static description of what the driver exposes to the host."""

    sql_capabilities: SqlCapabilities = field(default_factory=SqlCapabilities)
    get_info: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({"SQL_AGGREGATE_FUNCTIONS": SQL_AF_ALL})
    )
    hide_native_query: bool = True
    hierarchical_navigation: bool = False
    soft_numbers: bool = True
    tolerate_concat_overflow: bool = True
    client_connection_pooling: bool = True
    hooks: TraceHooks = field(default_factory=TraceHooks)

    def as_options(self) -> dict[str, object]:
        """Render the profile as the host's nested options record."""

        caps = self.sql_capabilities
        return {
            "SqlCapabilities": {
                "Sql92Conformance": caps.sql92_conformance,
                "GroupByCapabilities": caps.group_by_capabilities,
                "FractionalSecondsScale": caps.fractional_seconds_scale,
                "SupportsTop": caps.supports_top,
                "LimitClauseKind": caps.limit_clause_kind,
                "SupportsNumericLiterals": caps.supports_numeric_literals,
                "SupportsStringLiterals": caps.supports_string_literals,
                "SupportsOdbcDateLiterals": caps.supports_odbc_date_literals,
                "SupportsOdbcTimeLiterals": caps.supports_odbc_time_literals,
                "SupportsOdbcTimestampLiterals": caps.supports_odbc_timestamp_literals,
            },
            "SQLGetInfo": dict(self.get_info),
            "SQLGetTypeInfo": self.hooks.type_info,
            "SQLColumns": self.hooks.columns,
            "HideNativeQuery": self.hide_native_query,
            "HierarchicalNavigation": self.hierarchical_navigation,
            "SoftNumbers": self.soft_numbers,
            "TolerateConcatOverflow": self.tolerate_concat_overflow,
            "ClientConnectionPooling": self.client_connection_pooling,
        }


def build_capability_profile(*, trace_enabled: bool = False) -> CapabilityProfile:
    """Return the shared capability profile for the given trace setting."""

    return _cached_profile(bool(trace_enabled))


@lru_cache(maxsize=2)
def _cached_profile(trace_enabled: bool) -> CapabilityProfile:
    return CapabilityProfile(hooks=TraceHooks(enabled=trace_enabled))


def _materialize(rows: RowsT) -> RowsT:
    # one-shot iterators would be drained by logging
    if isinstance(rows, (list, tuple)):
        return rows
    return list(rows)  # type: ignore[return-value]


def _field(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name, row.get(name.upper()))
    return getattr(row, name, None)


def _describe(row: Any) -> object:
    if isinstance(row, Mapping):
        return dict(row)
    description = getattr(row, "cursor_description", None)
    if description:
        return {column[0]: value for column, value in zip(description, row)}
    return row


__all__ = [
    "COLUMNS_SENTINEL",
    "CapabilityProfile",
    "LimitClauseKind",
    "SQL_AF_ALL",
    "SQL_GB_NO_RELATION",
    "SQL_SC_SQL92_FULL",
    "SqlCapabilities",
    "TraceHooks",
    "build_capability_profile",
]
