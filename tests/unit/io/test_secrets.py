"""Tests for ordered secret resolution."""

import pytest

from granule_discovery.config import Settings
from granule_discovery.exceptions import DiscoveryStage, SecretNotFoundError
from granule_discovery.io.auth import (
    EnvironmentSecretSource,
    FileSecretSource,
    SecretResolver,
    default_secret_resolver,
    env_var_for_secret,
)

pytestmark = pytest.mark.unit


class BrokenSource:
    name = "broken"

    def get(self, secret_name):
        raise PermissionError("denied")


def test_env_var_for_secret():
    assert env_var_for_secret("urs-password") == "GD_SECRET_URS_PASSWORD"
    assert env_var_for_secret("prod/launchpad.pass") == "GD_SECRET_PROD_LAUNCHPAD_PASS"


class TestSecretResolver:
    def test_first_source_with_value_wins(self, tmp_path):
        (tmp_path / "pw").write_text("from-file\n", encoding="utf-8")
        resolver = SecretResolver(
            [
                EnvironmentSecretSource({"GD_SECRET_PW": "from-env"}),
                FileSecretSource(tmp_path),
            ]
        )
        assert resolver.resolve("pw") == "from-env"

    def test_falls_through_to_next_source(self, tmp_path):
        (tmp_path / "pw").write_text("from-file\n", encoding="utf-8")
        resolver = SecretResolver(
            [EnvironmentSecretSource({}), FileSecretSource(tmp_path)]
        )
        assert resolver.resolve("pw") == "from-file"

    def test_erroring_source_counts_as_empty(self):
        resolver = SecretResolver(
            [BrokenSource(), EnvironmentSecretSource({"GD_SECRET_PW": "ok"})]
        )
        assert resolver.resolve("pw") == "ok"

    def test_fails_only_when_every_source_is_empty(self, tmp_path):
        resolver = SecretResolver(
            [BrokenSource(), EnvironmentSecretSource({}), FileSecretSource(tmp_path)]
        )

        with pytest.raises(SecretNotFoundError) as exc_info:
            resolver.resolve("pw")

        message = str(exc_info.value)
        assert "broken: denied" in message
        assert "environment: not found" in message
        assert "file: not found" in message
        assert exc_info.value.stage is DiscoveryStage.AUTHENTICATION

    def test_empty_values_are_not_found(self, tmp_path):
        (tmp_path / "pw").write_text("   \n", encoding="utf-8")
        resolver = SecretResolver(
            [EnvironmentSecretSource({"GD_SECRET_PW": ""}), FileSecretSource(tmp_path)]
        )
        with pytest.raises(SecretNotFoundError):
            resolver.resolve("pw")

    def test_undecodable_file_falls_through(self, tmp_path):
        (tmp_path / "pw").write_bytes(b"\xff\xfe\xfa")
        resolver = SecretResolver(
            [FileSecretSource(tmp_path), EnvironmentSecretSource({"GD_SECRET_PW": "ok"})]
        )
        assert resolver.resolve("pw") == "ok"


def test_default_resolver_order(tmp_path):
    settings = Settings(secrets_dir=str(tmp_path))

    resolver = default_secret_resolver(settings)

    assert [source.name for source in resolver.sources] == ["environment", "file"]


def test_default_resolver_without_secrets_dir():
    resolver = default_secret_resolver(Settings())
    assert [source.name for source in resolver.sources] == ["environment"]
