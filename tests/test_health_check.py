import pytest

from core.compatibility import DESTINATION_REQUIRED_SCOPES
from core.tenant import TenantRef
from scripts import health_check

from fakes import FakeTenant, fake_client


@pytest.fixture
def patch_client(monkeypatch):
    fakes = {}

    def client(tenant, verify_tls=True):
        return fake_client(tenant, fakes[tenant.url])

    monkeypatch.setattr(health_check, "TenantClient", client)
    return fakes


def test_check_tenant_passes_compatible_tenant(patch_client, capsys):
    tenant = TenantRef.create("https://dest1234.live.example.com", "t")
    patch_client[tenant.url] = FakeTenant()

    assert health_check.check_tenant("Destination", tenant, DESTINATION_REQUIRED_SCOPES, True)
    assert "token scopes" in capsys.readouterr().out


def test_check_tenant_reports_failure(patch_client, capsys):
    tenant = TenantRef.create("https://dest1234.live.example.com", "t")
    patch_client[tenant.url] = FakeTenant(version="1.150.0")

    assert not health_check.check_tenant("Destination", tenant, DESTINATION_REQUIRED_SCOPES, True)
    assert "too old" in capsys.readouterr().out


def test_main_fails_without_configuration(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    assert health_check.main() == 1


def test_main_checks_both_tenants(patch_client, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DEST_TENANT_URL", "https://dest1234.live.example.com")
    monkeypatch.setenv("DEST_API_TOKEN", "dest-token")
    monkeypatch.setenv("SOURCE_TENANT_URL", "https://cluster.example.com/e/src")
    monkeypatch.setenv("SOURCE_API_TOKEN", "source-token")
    patch_client["https://dest1234.live.example.com"] = FakeTenant()
    source = FakeTenant()
    patch_client["https://cluster.example.com/e/src"] = source

    assert health_check.main() == 0
    assert source.requests[1][2] == {"token": "source-token"}
