from __future__ import annotations

import json

import pytest
from botocore.exceptions import ClientError

from signup_service.secret_provider import (
    AwsSecretsManagerProvider,
    SecretProviderUnavailable,
    StaticSecretProvider,
    build_secret_provider,
    load_secret,
    parse_secret_payload,
)
from signup_service.settings import Settings


class _FakeSecretsManager:
    def __init__(self, response: dict | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[str] = []

    def get_secret_value(self, *, SecretId: str) -> dict:
        self.calls.append(SecretId)
        if self.error is not None:
            raise self.error
        return self.response or {}


def test_plain_string_payload_is_used_verbatim():
    loaded = parse_secret_payload("not-json {secret}")
    assert loaded.secret == "not-json {secret}"
    assert loaded.port is None


def test_json_payload_with_secret_and_port():
    loaded = parse_secret_payload(json.dumps({"SECRET_KEY": "abc", "PORT": "8080"}))
    assert loaded.secret == "abc"
    assert loaded.port == 8080


@pytest.mark.parametrize("key", ["SECRET_KEY", "secretKey", "secret_key", "secret"])
def test_json_payload_secret_key_variants(key):
    assert parse_secret_payload(json.dumps({key: "v", "port": 4000})).secret == "v"


def test_json_scalar_payload_is_plain_secret():
    assert parse_secret_payload('"quoted"').secret == '"quoted"'
    assert parse_secret_payload("12345").secret == "12345"


def test_json_object_without_secret_is_fatal():
    with pytest.raises(SecretProviderUnavailable):
        parse_secret_payload(json.dumps({"unrelated": "x"}))


def test_json_payload_bad_port_is_fatal():
    with pytest.raises(SecretProviderUnavailable):
        parse_secret_payload(json.dumps({"secret": "x", "port": "eighty"}))


def test_aws_provider_fetches_once_by_name():
    client = _FakeSecretsManager(response={"SecretString": json.dumps({"secret": "from-aws", "port": 9000})})
    provider = AwsSecretsManagerProvider(secret_name="myapp-secret", region="ap-south-1", client=client)

    loaded = provider.fetch()

    assert client.calls == ["myapp-secret"]
    assert loaded.secret == "from-aws"
    assert loaded.port == 9000
    assert loaded.source == "aws:ap-south-1/myapp-secret"


def test_aws_provider_client_error_is_unavailable():
    err = ClientError({"Error": {"Code": "ResourceNotFoundException", "Message": "missing"}}, "GetSecretValue")
    client = _FakeSecretsManager(error=err)
    provider = AwsSecretsManagerProvider(secret_name="myapp-secret", region="ap-south-1", client=client)

    with pytest.raises(SecretProviderUnavailable) as excinfo:
        provider.fetch()

    # No retries.
    assert client.calls == ["myapp-secret"]
    assert excinfo.value.__cause__ is err


def test_aws_provider_binary_secret_is_unavailable():
    client = _FakeSecretsManager(response={"SecretBinary": b"\x00"})
    provider = AwsSecretsManagerProvider(secret_name="s", region="r", client=client)
    with pytest.raises(SecretProviderUnavailable):
        provider.fetch()


def test_build_provider_modes():
    aws = build_secret_provider(Settings(SECRET_PROVIDER="aws", SECRET_NAME="n", AWS_REGION="eu-west-1"))
    assert isinstance(aws, AwsSecretsManagerProvider)
    assert aws.secret_name == "n"
    assert aws.region == "eu-west-1"

    env = build_secret_provider(Settings(SECRET_PROVIDER="env", SECRET_KEY="local"))
    assert isinstance(env, StaticSecretProvider)
    assert env.fetch().secret == "local"

    assert build_secret_provider(Settings(SECRET_PROVIDER="none")).fetch().secret == ""


def test_build_provider_env_without_key_is_unavailable():
    with pytest.raises(SecretProviderUnavailable):
        build_secret_provider(Settings(SECRET_PROVIDER="env", SECRET_KEY=""))


def test_build_provider_unknown_mode_is_unavailable():
    with pytest.raises(SecretProviderUnavailable):
        build_secret_provider(Settings(SECRET_PROVIDER="vault"))


def test_load_secret_logs_without_leaking(caplog):
    caplog.set_level("INFO", logger="signup_service.secrets")
    loaded = load_secret(Settings(SECRET_PROVIDER="env", SECRET_KEY="top-secret-value"))

    assert loaded.secret == "top-secret-value"
    assert "Secret key loaded" in caplog.text
    assert "top-secret-value" not in caplog.text


def test_load_secret_failure_is_logged_and_reraised(caplog):
    err = ClientError({"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "GetSecretValue")
    provider = AwsSecretsManagerProvider(secret_name="s", region="r", client=_FakeSecretsManager(error=err))

    with pytest.raises(SecretProviderUnavailable):
        load_secret(Settings(SECRET_PROVIDER="aws"), provider)

    assert "Failed to load secret key" in caplog.text


def test_null_port_key_falls_through_to_next():
    loaded = parse_secret_payload(json.dumps({"secret": "x", "PORT": None, "port": 4000}))
    assert loaded.port == 4000


@pytest.mark.parametrize("port", [0, 70000, "65536", -1])
def test_out_of_range_port_is_fatal(port):
    with pytest.raises(SecretProviderUnavailable):
        parse_secret_payload(json.dumps({"secret": "x", "port": port}))


def test_port_bounds_are_inclusive():
    assert parse_secret_payload(json.dumps({"secret": "x", "port": 1})).port == 1
    assert parse_secret_payload(json.dumps({"secret": "x", "port": "65535"})).port == 65535
