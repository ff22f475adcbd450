"""Map driver errors to user-facing categories."""

from __future__ import annotations

import logging
from typing import NoReturn

from .errors import ClassifiedError, DataSourceError, DriverError, DriverErrorRecord, ErrorCategory

LOG = logging.getLogger(__name__)

DRIVER_NOT_INSTALLED_MARKER = "doesn't correspond to an installed ODBC driver"
HOST_UNREACHABLE_NATIVE_ERROR = 202

DRIVER_NOT_INSTALLED_MESSAGE = "The OpenSearch SQL ODBC driver is not installed. Please install the driver"
HOST_UNREACHABLE_MESSAGE = "Couldn't reach server. Please double-check the server and auth. [{path}]"


def classify(record: DriverErrorRecord) -> ClassifiedError:
    """Classify a driver error record; the first matching rule wins."""

    if DRIVER_NOT_INSTALLED_MARKER in record.message:
        return ClassifiedError(
            category=ErrorCategory.DRIVER_NOT_INSTALLED,
            message=DRIVER_NOT_INSTALLED_MESSAGE,
            raw_detail=record,
        )
    if record.native_error == HOST_UNREACHABLE_NATIVE_ERROR:
        return ClassifiedError(
            category=ErrorCategory.HOST_UNREACHABLE,
            message=HOST_UNREACHABLE_MESSAGE.format(path=record.detail.data_source_path),
            raw_detail=record,
        )
    return ClassifiedError(category=ErrorCategory.OTHER, message=record.message, raw_detail=record)


def on_odbc_error(error: DriverError) -> NoReturn:
    """Failure hook registered with the driver.

    Recognized failures are re-raised as `DataSourceError`; anything else is
    re-raised exactly as received.
    """

    classified = classify(error.record)
    if classified.category is ErrorCategory.OTHER:
        raise error
    LOG.warning(
        "Driver open failed",
        extra={"category": classified.category.value, "data_source_path": error.record.detail.data_source_path},
    )
    raise DataSourceError(classified) from error


__all__ = [
    "DRIVER_NOT_INSTALLED_MARKER",
    "DRIVER_NOT_INSTALLED_MESSAGE",
    "HOST_UNREACHABLE_MESSAGE",
    "HOST_UNREACHABLE_NATIVE_ERROR",
    "classify",
    "on_odbc_error",
]
