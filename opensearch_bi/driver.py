"""ODBC driver boundary backed by pyodbc."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Protocol, runtime_checkable

try:
    import pyodbc

    HAS_ODBC = True
except ImportError:
    HAS_ODBC = False

from .capabilities import CapabilityProfile
from .classifier import DRIVER_NOT_INSTALLED_MARKER
from .errors import DriverError, DriverErrorRecord, DriverUnavailableError, ErrorDetail, OdbcErrorInfo
from .models import ConnectionDescriptor

LOG = logging.getLogger(__name__)

ErrorHook = Callable[[DriverError], None]

_NATIVE_ERROR = re.compile(r"\((-?\d+)\)\s*\(SQL\w+\)\s*$")

# Driver manager reports for a driver that is not registered or cannot be loaded
DRIVER_MISSING_SQL_STATE = "IM002"
_DRIVER_LIB_MISSING = "Can't open lib"


@dataclass(frozen=True, slots=True)
class DriverOptions:
    """Options passed alongside the connection string."""

    capabilities: CapabilityProfile
    on_error: ErrorHook
    login_timeout: int = 0


class OdbcDataSource:
    """Open data-source handle returned to the host."""

    def __init__(self, connection: Any, descriptor: ConnectionDescriptor, capabilities: CapabilityProfile) -> None:
        self._connection = connection
        self._descriptor = descriptor
        self._capabilities = capabilities
        self._closed = False

    @property
    def descriptor(self) -> ConnectionDescriptor:
        return self._descriptor

    @property
    def capabilities(self) -> CapabilityProfile:
        return self._capabilities

    @property
    def connection(self) -> Any:
        """Underlying DB-API connection."""

        return self._connection

    @property
    def closed(self) -> bool:
        return self._closed

    def cursor(self) -> Any:
        return self._connection.cursor()

    def type_info(self) -> list[Any]:
        """Return SQLGetTypeInfo rows, routed through the trace hook."""

        cursor = self._connection.cursor()
        try:
            rows = cursor.getTypeInfo().fetchall()
        finally:
            cursor.close()
        return self._capabilities.hooks.type_info(rows)

    def columns(self, table: str | None = None, column: str | None = None) -> list[Any]:
        """Return SQLColumns rows, routed through the trace hook."""

        cursor = self._connection.cursor()
        try:
            rows = cursor.columns(table=table, column=column).fetchall()
        finally:
            cursor.close()
        return self._capabilities.hooks.columns(table, column, rows)

    def close(self) -> None:
        if self._closed:
            return
        self._connection.close()
        self._closed = True

    def __enter__(self) -> OdbcDataSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@runtime_checkable
class OdbcDriver(Protocol):
    """Protocol implemented by driver adapters."""

    def open(self, descriptor: ConnectionDescriptor, options: DriverOptions) -> OdbcDataSource:
        """Open a connection or report the failure through `options.on_error`."""


class PyodbcDriver:
    """Driver adapter opening connections with pyodbc."""

    def __init__(self) -> None:
        if not HAS_ODBC:
            raise DriverUnavailableError("pyodbc is not installed; install the 'pyodbc' package.")

    def open(self, descriptor: ConnectionDescriptor, options: DriverOptions) -> OdbcDataSource:
        pyodbc.pooling = options.capabilities.client_connection_pooling
        LOG.debug("Opening ODBC connection", extra={"address": descriptor.address})
        try:
            connection = pyodbc.connect(
                descriptor.render(),
                autocommit=True,
                timeout=options.login_timeout,
            )
        except pyodbc.Error as exc:
            error = DriverError(error_record_from_exception(exc, descriptor.data_source_path))
            options.on_error(error)
            raise error from exc
        return OdbcDataSource(connection, descriptor, options.capabilities)


def error_record_from_exception(exc: BaseException, data_source_path: str) -> DriverErrorRecord:
    """Convert a pyodbc-style exception (`args == (sqlstate, message)`) to a record."""

    args = getattr(exc, "args", ())
    if len(args) >= 2:
        sql_state, message = str(args[0]), str(args[1])
    else:
        sql_state, message = None, str(exc)
    match = _NATIVE_ERROR.search(message)
    native_error = int(match.group(1)) if match else None
    record_message = message
    if sql_state == DRIVER_MISSING_SQL_STATE or _DRIVER_LIB_MISSING in message:
        record_message = f"{message} [The driver name {DRIVER_NOT_INSTALLED_MARKER}.]"
    return DriverErrorRecord(
        message=record_message,
        detail=ErrorDetail(
            data_source_path=data_source_path,
            odbc_errors=(OdbcErrorInfo(native_error=native_error, sql_state=sql_state, message=message),),
        ),
    )


__all__ = [
    "DRIVER_MISSING_SQL_STATE",
    "DriverOptions",
    "ErrorHook",
    "HAS_ODBC",
    "OdbcDataSource",
    "OdbcDriver",
    "PyodbcDriver",
    "error_record_from_exception",
]
