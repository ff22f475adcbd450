"""Connector facade the BI host calls to open a data source."""

from __future__ import annotations

import logging

from .capabilities import CapabilityProfile, build_capability_profile
from .classifier import on_odbc_error
from .config import ConnectorSettings
from .connection_string import build_descriptor
from .credentials import CredentialProvider, RecordCredentialProvider, resolve_credential
from .driver import DriverOptions, OdbcDataSource, OdbcDriver, PyodbcDriver
from .models import ConnectionParameters

LOG = logging.getLogger(__name__)


class Connector:
    """Orchestrates credential lookup, descriptor building and the driver call."""

    def __init__(self, settings: ConnectorSettings | None = None, *, driver: OdbcDriver | None = None) -> None:
        self._settings = settings or ConnectorSettings()
        self._capabilities = build_capability_profile(trace_enabled=self._settings.enable_trace_output)
        self._driver = driver

    @property
    def settings(self) -> ConnectorSettings:
        return self._settings

    @property
    def capabilities(self) -> CapabilityProfile:
        """Capability profile shared by every connection this connector opens."""

        return self._capabilities

    @property
    def data_source_kind(self) -> str:
        return self._settings.brand_info.data_source_kind

    def open(self, parameters: ConnectionParameters, credential_provider: CredentialProvider) -> OdbcDataSource:
        """Open a data source for the parameters using the provider's credential."""

        credential = resolve_credential(credential_provider)
        descriptor = build_descriptor(parameters, credential, driver_name=self._settings.driver_name)
        options = DriverOptions(
            capabilities=self._capabilities,
            on_error=on_odbc_error,
            login_timeout=self._settings.login_timeout,
        )
        LOG.info(
            "Opening data source",
            extra={"kind": self.data_source_kind, "address": descriptor.address},
        )
        return self._get_driver().open(descriptor, options)

    def open_path(self, data_source_path: str, credential_provider: CredentialProvider) -> OdbcDataSource:
        """Reopen a data source from the JSON path the host stored for it."""

        return self.open(ConnectionParameters.from_data_source_path(data_source_path), credential_provider)

    def open_profile(
        self,
        name: str | None = None,
        credential_provider: CredentialProvider | None = None,
    ) -> OdbcDataSource:
        """Open a configured profile, defaulting to the credential stored with it."""

        profile = self._settings.profile(name)
        provider = credential_provider or RecordCredentialProvider(profile.credential_record())
        return self.open(profile.parameters(), provider)

    def _get_driver(self) -> OdbcDriver:
        if self._driver is None:
            self._driver = PyodbcDriver()
        return self._driver


__all__ = ["Connector"]
