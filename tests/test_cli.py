import logging

import pytest
import structlog

from core.api_client import TenantClient
from scripts import copy_cli
from services.dashboard_copy import DashboardCopyService

from fakes import FakeTenant, fake_client


DEST_URL = "https://dest1234.live.example.com"


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


@pytest.fixture
def tenant(monkeypatch, tmp_path):
    fake = FakeTenant(dashboards={"42": {"id": "42", "dashboardMetadata": {"name": "Prod", "owner": "me"}}})
    monkeypatch.setenv("LOGS_STORAGE_PATH", str(tmp_path / "logs"))

    original_init = DashboardCopyService.__init__

    def init(self, config, logger=None, client_factory=None, summary=None):
        original_init(self, config, logger,
                      client_factory=lambda tenant_ref, verify_tls: fake_client(tenant_ref, fake),
                      summary=summary)

    monkeypatch.setattr(DashboardCopyService, "__init__", init)
    return fake


def test_copies_and_exits_zero(tenant, capsys):
    code = copy_cli.main([
        "--dest-url", DEST_URL,
        "--dest-token", "token",
        "--dashboard-id", "42",
        "--dest-name", "Prod copy",
    ])

    assert code == 0
    assert tenant.created_bodies() == [{"dashboardMetadata": {"name": "Prod copy"}}]
    out = capsys.readouterr().out
    assert "new-dashboard-id" in out


def test_dry_run_exits_zero_without_creating(tenant):
    code = copy_cli.main(["--dest-url", DEST_URL, "--dest-token", "token", "--dashboard-id", "42", "--dry-run"])

    assert code == 0
    assert tenant.created_bodies() == []


def test_failure_exits_one_and_prints_error(tenant, capsys):
    tenant.scopes = ["DataExport"]

    code = copy_cli.main(["--dest-url", DEST_URL, "--dest-token", "token", "--dashboard-id", "42"])

    assert code == 1
    assert "WriteConfig" in capsys.readouterr().err


def test_missing_configuration_exits_one(tenant, capsys):
    code = copy_cli.main(["--dest-url", DEST_URL, "--dashboard-id", "42"])

    assert code == 1
    assert "DEST_API_TOKEN" in capsys.readouterr().err
    assert tenant.requests == []


def test_flags_map_onto_config(monkeypatch):
    args = copy_cli.build_parser().parse_args(["--insecure", "--skip-checks", "--output-dir", "out"])

    assert args.verify_tls is False
    assert args.skip_compatibility_checks is True
    assert args.outputs_storage_path == "out"
    assert args.dry_run is None


def test_insecure_flag_reaches_http_client(monkeypatch):
    seen = {}

    def fake_client_init(self, tenant, verify_tls=True, transport=None):
        seen[tenant.role] = verify_tls
        raise RuntimeError("stop")

    monkeypatch.setattr(TenantClient, "__init__", fake_client_init)
    service = DashboardCopyService(
        copy_cli.Config(dest_url=DEST_URL, dest_token="t", dashboard_id="1", verify_tls=False)
    )

    with pytest.raises(RuntimeError):
        service.run()

    assert seen == {"destination": False}
