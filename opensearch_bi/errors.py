"""Error taxonomy and the driver error record shared across the connector."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ConnectorError(RuntimeError):
    """Base error for every failure raised by the connector."""


class InvalidInputError(ConnectorError, ValueError):
    """Raised when connection parameters or credentials cannot be used."""


class UnsupportedAuthenticationError(InvalidInputError):
    """Raised when a credential carries an authentication mode we do not know."""


class DriverUnavailableError(ConnectorError):
    """Raised when the Python ODBC bindings are not importable."""


class ErrorCategory(str, Enum):
    """User-facing categories for driver failures."""

    DRIVER_NOT_INSTALLED = "DriverNotInstalled"
    HOST_UNREACHABLE = "HostUnreachable"
    OTHER = "Other"


@dataclass(frozen=True, slots=True)
class OdbcErrorInfo:
    """One diagnostic record reported by the ODBC driver manager."""

    native_error: int | None = None
    sql_state: str | None = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class ErrorDetail:
    """Structured detail attached to a driver error."""

    data_source_path: str = ""
    odbc_errors: tuple[OdbcErrorInfo, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class DriverErrorRecord:
    """Error record raised by the driver boundary."""

    message: str
    detail: ErrorDetail = field(default_factory=ErrorDetail)

    @property
    def native_error(self) -> int | None:
        """Vendor code of the first ODBC diagnostic, if any."""

        if not self.detail.odbc_errors:
            return None
        return self.detail.odbc_errors[0].native_error

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DriverErrorRecord:
        """Build a record from the host's `{Message, Detail}` shape."""

        detail = data.get("Detail")
        if not isinstance(detail, Mapping):
            detail = {}
        odbc_errors: list[OdbcErrorInfo] = []
        entries = detail.get("OdbcErrors")
        if not isinstance(entries, (list, tuple)):
            entries = ()
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            odbc_errors.append(
                OdbcErrorInfo(
                    native_error=_native_code(entry.get("NativeError")),
                    sql_state=str(entry["SQLState"]) if entry.get("SQLState") is not None else None,
                    message=str(entry.get("Message", "")),
                )
            )
        return cls(
            message=str(data.get("Message", "")),
            detail=ErrorDetail(
                data_source_path=str(detail.get("DataSourcePath", "")),
                odbc_errors=tuple(odbc_errors),
            ),
        )


def _native_code(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


class DriverError(ConnectorError):
    """Raw failure reported by the ODBC driver, carrying its record."""

    def __init__(self, record: DriverErrorRecord) -> None:
        super().__init__(record.message)
        self.record = record


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    """Result of mapping a driver error record to a user-facing category."""

    category: ErrorCategory
    message: str
    raw_detail: DriverErrorRecord


class DataSourceError(ConnectorError):
    """Driver failure rewritten into a friendlier message."""

    def __init__(self, classified: ClassifiedError) -> None:
        super().__init__(classified.message)
        self.classified = classified

    @property
    def category(self) -> ErrorCategory:
        return self.classified.category


__all__ = [
    "ClassifiedError",
    "ConnectorError",
    "DataSourceError",
    "DriverError",
    "DriverErrorRecord",
    "DriverUnavailableError",
    "ErrorCategory",
    "ErrorDetail",
    "InvalidInputError",
    "OdbcErrorInfo",
    "UnsupportedAuthenticationError",
]
