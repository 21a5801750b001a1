"""Tests for one-time SDK initialization."""

import pytest

from tests.conftest import FakeVaultClient
from tssresolver.errors import InitializationError
from tssresolver.sdk.initializer import SdkInitializer


def test_no_op_when_marker_exists(install_dir):
    client = FakeVaultClient()
    initializer = SdkInitializer(client, install_dir)

    assert initializer.ensure_initialized() is False
    assert client.calls == []


def test_runs_init_then_cache(fresh_install_dir):
    client = FakeVaultClient(marker_path=fresh_install_dir / "credentials.config")
    initializer = SdkInitializer(client, fresh_install_dir)

    assert initializer.ensure_initialized() is True
    assert client.calls == [
        "init --url https://ss.example.com/SecretServer -r mid-rule -k onboard-key-123",
        "cache --strategy CacheThenServer --age 10",
    ]


def test_second_call_is_no_op(fresh_install_dir):
    client = FakeVaultClient(marker_path=fresh_install_dir / "credentials.config")
    initializer = SdkInitializer(client, fresh_install_dir)

    initializer.ensure_initialized()
    initializer.ensure_initialized()

    assert len(client.calls) == 2


def test_qualifier_file_deleted_after_success(fresh_install_dir):
    client = FakeVaultClient(marker_path=fresh_install_dir / "credentials.config")
    SdkInitializer(client, fresh_install_dir).ensure_initialized()

    assert not (fresh_install_dir / "qualifier.properties").exists()


def test_key_is_optional(fresh_install_dir):
    (fresh_install_dir / "qualifier.properties").write_text(
        "datasource.secretServerUrl=https://ss.example.com/SecretServer\n"
        "datasource.secretServerRule=mid-rule\n"
        "datasource.secretServerKey=\n"
    )
    client = FakeVaultClient(marker_path=fresh_install_dir / "credentials.config")
    initializer = SdkInitializer(
        client, fresh_install_dir, default_cache_strategy="Server", default_cache_age=5
    )

    initializer.ensure_initialized()

    assert client.calls == [
        "init --url https://ss.example.com/SecretServer -r mid-rule",
        "cache --strategy Server --age 5",
    ]


def test_init_failure_propagates_and_keeps_qualifier(fresh_install_dir):
    client = FakeVaultClient(
        failures={"init --url https://ss.example.com/SecretServer -r mid-rule -k onboard-key-123"}
    )
    initializer = SdkInitializer(client, fresh_install_dir)

    with pytest.raises(InitializationError):
        initializer.ensure_initialized()

    assert len(client.calls) == 1
    assert (fresh_install_dir / "qualifier.properties").exists()


def test_cache_failure_propagates(fresh_install_dir):
    client = FakeVaultClient(failures={"cache --strategy CacheThenServer --age 10"})
    initializer = SdkInitializer(client, fresh_install_dir)

    with pytest.raises(InitializationError):
        initializer.ensure_initialized()

    assert (fresh_install_dir / "qualifier.properties").exists()


def test_missing_qualifier_file_raises(tmp_path, caplog):
    client = FakeVaultClient()
    initializer = SdkInitializer(client, tmp_path)

    with caplog.at_level("WARNING"), pytest.raises(InitializationError, match="secretServerUrl"):
        initializer.ensure_initialized()

    assert client.calls == []
    assert "Can't find qualifier.properties" in caplog.text


def test_force_ignores_marker(install_dir):
    (install_dir / "qualifier.properties").write_text(
        "datasource.secretServerUrl=https://ss\n"
        "datasource.secretServerRule=rule\n"
    )
    client = FakeVaultClient()
    initializer = SdkInitializer(client, install_dir)

    assert initializer.ensure_initialized(force=True) is True
    assert client.calls[0] == "init --url https://ss -r rule"


def test_warns_when_marker_not_created(fresh_install_dir, caplog):
    client = FakeVaultClient()
    initializer = SdkInitializer(client, fresh_install_dir)

    with caplog.at_level("WARNING"):
        initializer.ensure_initialized()

    assert "credentials.config was not created" in caplog.text


def test_settings_repr_hides_key(fresh_install_dir):
    initializer = SdkInitializer(FakeVaultClient(), fresh_install_dir)
    settings = initializer.load_settings()

    assert settings.key == "onboard-key-123"
    assert "onboard-key-123" not in repr(settings)
