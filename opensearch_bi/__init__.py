"""OpenSearch connector for BI hosts speaking ODBC."""

from __future__ import annotations

__version__ = "1.0.0"

from .capabilities import CapabilityProfile, TraceHooks, build_capability_profile
from .classifier import classify, on_odbc_error
from .config import ConnectorSettings, load_config
from .connection_string import build_descriptor, normalize_server
from .connector import Connector
from .credentials import StaticCredentialProvider, credential_from_record
from .errors import (
    ClassifiedError,
    ConnectorError,
    DataSourceError,
    DriverError,
    DriverErrorRecord,
    ErrorCategory,
    InvalidInputError,
)
from .models import (
    AuthenticationKind,
    ConnectionDescriptor,
    ConnectionParameters,
    ImplicitCredential,
    KeyCredential,
    UsernamePasswordCredential,
)

__all__ = [
    "AuthenticationKind",
    "CapabilityProfile",
    "ClassifiedError",
    "ConnectionDescriptor",
    "ConnectionParameters",
    "Connector",
    "ConnectorError",
    "ConnectorSettings",
    "DataSourceError",
    "DriverError",
    "DriverErrorRecord",
    "ErrorCategory",
    "ImplicitCredential",
    "InvalidInputError",
    "KeyCredential",
    "StaticCredentialProvider",
    "TraceHooks",
    "UsernamePasswordCredential",
    "__version__",
    "build_capability_profile",
    "build_descriptor",
    "classify",
    "credential_from_record",
    "load_config",
    "normalize_server",
    "on_odbc_error",
]
