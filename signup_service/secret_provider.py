from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from signup_service.settings import Settings

logger = logging.getLogger("signup_service.secrets")

_SECRET_KEYS = ("SECRET_KEY", "secretKey", "secret_key", "secret")
_PORT_KEYS = ("PORT", "port")


class SecretProviderUnavailable(RuntimeError):
    """The startup secret could not be loaded. Fatal: the service must not start."""


@dataclass(frozen=True)
class LoadedSecret:
    secret: str
    port: Optional[int] = None
    source: str = "unknown"


class SecretProvider(Protocol):
    def fetch(self) -> LoadedSecret: ...


def _coerce_port(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        port = value
    elif isinstance(value, str) and value.strip().isdigit():
        port = int(value.strip())
    else:
        raise SecretProviderUnavailable(f"Secret payload has a non-numeric port: {value!r}")
    if not 1 <= port <= 65535:
        raise SecretProviderUnavailable(f"Secret payload port out of range: {port}")
    return port


def parse_secret_payload(raw: str, *, source: str = "unknown") -> LoadedSecret:
    """Turn a SecretString into a LoadedSecret.

    JSON objects are searched for a secret key and an optional port. Anything
    else is treated as a plain secret string and used verbatim.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return LoadedSecret(secret=raw, source=source)

    if not isinstance(data, dict):
        return LoadedSecret(secret=raw, source=source)

    secret = next((data[k] for k in _SECRET_KEYS if data.get(k) not in (None, "")), None)
    if secret is None:
        raise SecretProviderUnavailable(
            "Secret payload is a JSON object without any of: " + ", ".join(_SECRET_KEYS)
        )

    port = next((_coerce_port(data[k]) for k in _PORT_KEYS if data.get(k) is not None), None)
    return LoadedSecret(secret=str(secret), port=port, source=source)


class AwsSecretsManagerProvider:
    """Fetch the secret once from AWS Secrets Manager. No retries."""

    def __init__(self, *, secret_name: str, region: str, client: Any = None):
        self.secret_name = secret_name
        self.region = region
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            import boto3

            self._client = boto3.client("secretsmanager", region_name=self.region)
        return self._client

    def fetch(self) -> LoadedSecret:
        from botocore.exceptions import BotoCoreError, ClientError

        source = f"aws:{self.region}/{self.secret_name}"
        try:
            resp = self._get_client().get_secret_value(SecretId=self.secret_name)
        except (BotoCoreError, ClientError) as e:
            raise SecretProviderUnavailable(
                f"Failed to load secret {self.secret_name!r} from Secrets Manager: {type(e).__name__}: {e}"
            ) from e

        raw = resp.get("SecretString")
        if raw is None:
            # Binary secrets are not supported.
            raise SecretProviderUnavailable(f"Secret {self.secret_name!r} has no SecretString")
        return parse_secret_payload(raw, source=source)


class StaticSecretProvider:
    def __init__(self, *, secret: str, source: str = "env:SECRET_KEY"):
        self.secret = secret
        self.source = source

    def fetch(self) -> LoadedSecret:
        return LoadedSecret(secret=self.secret, source=self.source)


def build_secret_provider(settings: Settings) -> SecretProvider:
    provider = settings.secret_provider
    if provider == "aws":
        return AwsSecretsManagerProvider(secret_name=settings.secret_name, region=settings.aws_region)
    if provider == "env":
        if not settings.secret_key:
            raise SecretProviderUnavailable("SECRET_PROVIDER=env but SECRET_KEY is not set")
        return StaticSecretProvider(secret=settings.secret_key)
    if provider == "none":
        return StaticSecretProvider(secret="", source="none")
    raise SecretProviderUnavailable(f"Unknown SECRET_PROVIDER {provider!r} (expected aws, env or none)")


def load_secret(settings: Settings, provider: SecretProvider | None = None) -> LoadedSecret:
    """Run the startup secret fetch. Never logs the secret itself."""
    try:
        provider = provider or build_secret_provider(settings)
        loaded = provider.fetch()
    except SecretProviderUnavailable:
        logger.exception("Failed to load secret key")
        raise

    logger.info(
        "Secret key loaded (source=%s, port_override=%s)",
        loaded.source,
        loaded.port if loaded.port is not None else "none",
    )
    return loaded
