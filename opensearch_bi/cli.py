"""Command line helpers to inspect and test OpenSearch ODBC connections."""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

from .config import ConnectorSettings, load_config
from .connection_string import build_descriptor
from .connector import Connector
from .credentials import RecordCredentialProvider, credential_from_record
from .errors import ConnectorError, DataSourceError, DriverError, InvalidInputError
from .models import DEFAULT_PORT, AuthenticationKind, ConnectionParameters

AUTH_CHOICES = {
    "implicit": AuthenticationKind.IMPLICIT,
    "basic": AuthenticationKind.USERNAME_PASSWORD,
    "key": AuthenticationKind.KEY,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="opensearch-bi", description=__doc__)
    parser.add_argument("command", choices=("connection-string", "test"), help="Action to run")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")
    parser.add_argument("--profile", default=None, help="Use a profile from the config file")
    parser.add_argument("--server", default=None, help="Server host or URL")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Server port")
    parser.add_argument("--ssl", action="store_true", help="Connect over https")
    parser.add_argument(
        "--no-hostname-verification",
        dest="hostname_verification",
        action="store_false",
        help="Skip certificate hostname checks",
    )
    parser.add_argument("--auth", choices=sorted(AUTH_CHOICES), default="implicit", help="Authentication mode")
    parser.add_argument("--user", default=None, help="User name for basic auth")
    parser.add_argument("--password", default=None, help="Password for basic auth (prompted if omitted)")
    parser.add_argument("--region", default=None, help="AWS region for SigV4 auth")
    parser.add_argument("--no-encrypt", dest="encrypt", action="store_false", help="Disable the driver's UseSSL flag")
    parser.add_argument("--trace", action="store_true", help="Log driver catalog metadata")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    settings = load_config(args.config)
    if args.profile is not None:
        settings = settings.with_active_profile(args.profile)
    if args.trace:
        settings = settings.model_copy(update={"enable_trace_output": True})

    try:
        parameters, record = _resolve_target(args, settings)
        if args.command == "connection-string":
            descriptor = build_descriptor(
                parameters,
                credential_from_record(record),
                driver_name=settings.driver_name,
            )
            print(descriptor.render(mask_secrets=True))
            return 0
        connector = Connector(settings)
        with connector.open(parameters, RecordCredentialProvider(record)) as source:
            print(f"Connected to {source.descriptor.address} ({settings.brand_info.display_name}).")
        return 0
    except InvalidInputError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 2
    except DataSourceError as exc:
        print(f"{exc.category.value}: {exc}", file=sys.stderr)
        return 1
    except DriverError as exc:
        print(f"Driver error: {exc}", file=sys.stderr)
        return 1
    except ConnectorError as exc:
        print(str(exc), file=sys.stderr)
        return 1


def _resolve_target(
    args: argparse.Namespace,
    settings: ConnectorSettings,
) -> tuple[ConnectionParameters, dict[str, object]]:
    if args.profile is not None:
        try:
            profile = settings.profile()
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        return profile.parameters(), profile.credential_record()
    if args.server is None:
        raise InvalidInputError("Provide --server or --profile.")
    parameters = ConnectionParameters(
        server=args.server,
        port=args.port,
        use_ssl=args.ssl,
        hostname_verification=args.hostname_verification,
    )
    kind = AUTH_CHOICES[args.auth]
    record: dict[str, object] = {
        "AuthenticationKind": kind.value,
        "EncryptConnection": None if args.encrypt else False,
    }
    if kind is AuthenticationKind.USERNAME_PASSWORD:
        record["Username"] = args.user or ""
        record["Password"] = args.password if args.password is not None else getpass.getpass("Password: ")
    elif kind is AuthenticationKind.KEY:
        record["Key"] = args.region or ""
    return parameters, record


if __name__ == "__main__":
    raise SystemExit(main())
