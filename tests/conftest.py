import pytest

from core.tenant import TenantRef

from fakes import FakeTenant


ENV_VARS = (
    "DEST_TENANT_URL",
    "DEST_API_TOKEN",
    "SOURCE_TENANT_URL",
    "SOURCE_API_TOKEN",
    "SOURCE_DASHBOARD_ID",
    "DEST_DASHBOARD_NAME",
    "SKIP_COMPATIBILITY_CHECKS",
    "SKIP_TLS_VERIFY",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOGS_STORAGE_PATH",
    "OUTPUTS_STORAGE_PATH",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def tenant_ref() -> TenantRef:
    return TenantRef.create("https://abc12345.live.example.com", "dt0c01.TOKEN")


@pytest.fixture
def fake_tenant() -> FakeTenant:
    return FakeTenant()
