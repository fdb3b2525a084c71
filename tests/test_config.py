import pytest

from core.config import Config
from core.errors import ConfigurationError


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DEST_TENANT_URL", "dest1234.live.example.com/")
    monkeypatch.setenv("DEST_API_TOKEN", "dest-token")
    monkeypatch.setenv("SOURCE_DASHBOARD_ID", "abc")
    monkeypatch.setenv("SKIP_TLS_VERIFY", "true")
    monkeypatch.setenv("SKIP_COMPATIBILITY_CHECKS", "1")

    config = Config()

    assert config.validate_config()
    assert config.dest_tenant.url == "https://dest1234.live.example.com"
    assert config.verify_tls is False
    assert config.skip_compatibility_checks is True


def test_keyword_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("DEST_TENANT_URL", "https://env.live.example.com")
    monkeypatch.setenv("DEST_DASHBOARD_NAME", "From env")

    config = Config(dest_url="https://cli.live.example.com", dest_dashboard_name=None)

    assert config.dest_url == "https://cli.live.example.com"
    # None means "not given on the command line"
    assert config.dest_dashboard_name == "From env"


def test_source_falls_back_to_destination():
    config = Config(dest_url="https://dest1234.live.example.com", dest_token="t")

    source = config.source_tenant

    assert source.url == "https://dest1234.live.example.com"
    assert source.token == "t"
    assert source.role == "source"


def test_source_url_and_token_fall_back_independently():
    config = Config(
        dest_url="https://dest1234.live.example.com",
        dest_token="dest-token",
        source_url="src5678.live.example.com",
    )

    assert config.source_tenant.url == "https://src5678.live.example.com"
    assert config.source_tenant.token == "dest-token"


@pytest.mark.parametrize(
    "values,missing",
    [
        ({"dest_token": "t", "dashboard_id": "1"}, "DEST_TENANT_URL"),
        ({"dest_url": "https://a.live.example.com", "dashboard_id": "1"}, "DEST_API_TOKEN"),
        ({"dest_url": "https://a.live.example.com", "dest_token": "t"}, "SOURCE_DASHBOARD_ID"),
    ],
)
def test_validate_config_names_the_missing_setting(values, missing):
    with pytest.raises(ConfigurationError, match=missing):
        Config(**values).validate_config()


def test_defaults():
    config = Config()

    assert config.verify_tls is True
    assert config.skip_compatibility_checks is False
    assert config.dry_run is False
    assert config.outputs_storage_path is None
