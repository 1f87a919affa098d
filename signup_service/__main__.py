"""Command-line entry point: load the secret, then serve the API with uvicorn."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from signup_service.logging_config import configure_logging
from signup_service.secret_provider import LoadedSecret, SecretProviderUnavailable, load_secret
from signup_service.settings import Settings, get_settings

logger = logging.getLogger("signup_service.cli")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Signup/login service backed by an in-memory registry")
    parser.add_argument("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listen port (default: port from the secret payload, then PORT, then 3000)",
    )
    return parser.parse_args(list(argv) if argv is not None else sys.argv[1:])


def resolve_port(cli_port: int | None, loaded: LoadedSecret, settings: Settings) -> int:
    if cli_port is not None:
        return cli_port
    if loaded.port is not None:
        return loaded.port
    return settings.port


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    # The secret must be in hand before the socket is bound.
    try:
        loaded = load_secret(settings)
    except SecretProviderUnavailable:
        raise SystemExit(1)

    from signup_service.main import create_app
    import uvicorn

    host = args.host or settings.host
    port = resolve_port(args.port, loaded, settings)
    app = create_app(settings, secret=loaded.secret)

    logger.info("Starting server on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
