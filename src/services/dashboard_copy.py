"""
Dashboard copy service.

Copies one dashboard from a source tenant to a destination tenant:
- preflight checks against both tenants (shape, version, token scopes)
- export of the source dashboard
- removal of identity and ownership fields, optional rename
- server-side validation on the destination
- creation on the destination

The run is linear. Each stage raises a DashboardCopyError on failure and the
runner stops at the first one.
"""

import time
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import structlog
from pydantic import BaseModel

from core.api_client import TenantClient
from core.compatibility import (
    CompatibilityGuard,
    DESTINATION_REQUIRED_SCOPES,
    PIPELINE_MINIMUM_VERSION,
    SOURCE_REQUIRED_SCOPES,
)
from core.config import Config
from core.document import DashboardDocument
from core.errors import APIError, DashboardCopyError, DocumentError
from core.logger import LoggerMixin
from core.tenant import TenantRef
from utils.copy_summary import CopySummaryCollector


DASHBOARDS_ENDPOINT = "/api/config/v1/dashboards"
VALIDATOR_ENDPOINT = f"{DASHBOARDS_ENDPOINT}/validator"

ClientFactory = Callable[[TenantRef, bool], TenantClient]


class PipelineState(str, Enum):
    START = "Start"
    INPUT_RESOLVED = "InputResolved"
    DESTINATION_CHECKED = "DestinationChecked"
    SOURCE_CHECKED = "SourceChecked"
    EXPORTED = "Exported"
    TRANSFORMED = "Transformed"
    VALIDATED = "Validated"
    IMPORTED = "Imported"
    FAILED = "Failed"


class CopyResult(BaseModel):
    """Outcome of one dashboard copy."""

    state: PipelineState = PipelineState.START
    dashboard_id: Optional[str] = None
    new_dashboard_id: Optional[str] = None
    new_dashboard_name: Optional[str] = None
    viewer_url: Optional[str] = None
    validation_status: Optional[int] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        if self.dry_run:
            return self.state == PipelineState.VALIDATED
        return self.state == PipelineState.IMPORTED


def viewer_url(base_url: str, dashboard_id: str) -> str:
    """Browser URL of a dashboard on a tenant."""
    return f"{base_url}/#dashboard;id={dashboard_id}"


def transform_dashboard(document: DashboardDocument, new_name: Optional[str] = None) -> DashboardDocument:
    """
    Prepare an exported dashboard for creation on another tenant.

    Removes the dashboard ID and the owner, and renames the dashboard when a
    new name is given. The input document is left untouched.
    """
    transformed = document.copy()
    transformed.remove("id")
    transformed.remove(f"{DashboardDocument.METADATA_KEY}.owner")
    if new_name:
        try:
            transformed.set(f"{DashboardDocument.METADATA_KEY}.name", new_name)
        except ValueError as e:
            raise DocumentError(f"Cannot rename dashboard to '{new_name}': {e}") from e
    return transformed


class DashboardCopyService(LoggerMixin):
    """Service for copying a single dashboard between tenants."""

    def __init__(self, config: Config, logger: Optional[structlog.stdlib.BoundLogger] = None,
                 client_factory: Optional[ClientFactory] = None,
                 summary: Optional[CopySummaryCollector] = None):
        self.config = config
        self.logger = logger or structlog.get_logger("dashboard-copy")
        self.client_factory = client_factory or (
            lambda tenant, verify_tls: TenantClient(tenant, verify_tls=verify_tls)
        )
        self.summary = summary or CopySummaryCollector()

        self.outputs_dir = Path(config.outputs_storage_path) if config.outputs_storage_path else None

    # Stages

    def preflight(self, client: TenantClient, required_scopes) -> None:
        """Run the compatibility checks against one tenant."""
        guard = CompatibilityGuard(client)
        guard.run_all(required_scopes, minimum_version=PIPELINE_MINIMUM_VERSION)

    def export_dashboard(self, client: TenantClient, dashboard_id: str) -> DashboardDocument:
        """Fetch a dashboard from the source tenant."""
        self.logger.info(f"Exporting dashboard {dashboard_id} from {client.base_url}")
        response = client.get(f"{DASHBOARDS_ENDPOINT}/{dashboard_id}")
        if not isinstance(response, dict):
            raise APIError(f"Dashboard {dashboard_id} is not a JSON object", response_data=response)
        document = DashboardDocument(response)
        self.log_resource_action("export", client.tenant.role, document.name or dashboard_id, True)
        return document

    def validate_dashboard(self, client: TenantClient, document: DashboardDocument) -> int:
        """
        Submit a dashboard to the destination's validator.

        Returns the HTTP status of a successful validation. A non-2xx answer
        raises APIError with the platform's error code and message.
        """
        self.logger.info(f"Validating dashboard '{document.name}' on {client.base_url}")
        response = client.request("POST", VALIDATOR_ENDPOINT, json=document.to_dict())
        self.log_resource_action("validate", client.tenant.role, document.name or "", True)
        return response.status_code

    def import_dashboard(self, client: TenantClient, document: DashboardDocument) -> Dict[str, Any]:
        """Create a dashboard on the destination tenant."""
        self.logger.info(f"Creating dashboard '{document.name}' on {client.base_url}")
        created = client.post(DASHBOARDS_ENDPOINT, json_data=document.to_dict())
        if not created.get('id'):
            raise APIError("Dashboard was created but the response carries no ID", response_data=created)
        self.log_resource_action("create", client.tenant.role, created.get('name', document.name or ""), True)
        return created

    def save_artifact(self, document: DashboardDocument, dashboard_id: str, kind: str) -> Optional[Path]:
        """Write a dashboard document to the outputs directory, if one is configured."""
        if not self.outputs_dir:
            return None

        self.outputs_dir.mkdir(parents=True, exist_ok=True)
        artifact_file = self.outputs_dir / f"dashboard-{dashboard_id}-{kind}.json"
        with open(artifact_file, 'w') as f:
            f.write(document.to_json(indent=2))

        self.logger.info(f"Artifact saved to {artifact_file}")
        return artifact_file

    # Runner

    def _advance(self, result: CopyResult, state: PipelineState, started: float,
                 detail: str = "", status: str = "OK"):
        result.state = state
        self.summary.add_stage(state.value, status, detail, time.time() - started)

    def run(self) -> CopyResult:
        """Run the whole copy and return its outcome."""
        config = self.config
        result = CopyResult(dashboard_id=config.dashboard_id, dry_run=config.dry_run)
        self.summary.start_collection(mode="DRY RUN" if config.dry_run else "COPY")
        self.log_copy_start(config.dashboard_id or "", dry_run=config.dry_run)

        started = time.time()
        try:
            config.validate_config()
            dest = config.dest_tenant
            source = config.source_tenant
            self._advance(result, PipelineState.INPUT_RESOLVED, started,
                          f"{source.url} -> {dest.url}")

            with self.client_factory(dest, config.verify_tls) as dest_client, \
                    self.client_factory(source, config.verify_tls) as source_client:

                checks_status = "SKIPPED" if config.skip_compatibility_checks else "OK"

                started = time.time()
                if not config.skip_compatibility_checks:
                    self.preflight(dest_client, DESTINATION_REQUIRED_SCOPES)
                self._advance(result, PipelineState.DESTINATION_CHECKED, started, dest.url, checks_status)

                started = time.time()
                if not config.skip_compatibility_checks:
                    self.preflight(source_client, SOURCE_REQUIRED_SCOPES)
                self._advance(result, PipelineState.SOURCE_CHECKED, started, source.url, checks_status)

                started = time.time()
                exported = self.export_dashboard(source_client, config.dashboard_id)
                self.save_artifact(exported, config.dashboard_id, "source")
                self._advance(result, PipelineState.EXPORTED, started, f"'{exported.name}'")

                started = time.time()
                transformed = transform_dashboard(exported, config.dest_dashboard_name)
                self.save_artifact(transformed, config.dashboard_id, "transformed")
                self._advance(result, PipelineState.TRANSFORMED, started, f"'{transformed.name}'")

                # The status is reported but not acted on; errors raise APIError instead
                started = time.time()
                result.validation_status = self.validate_dashboard(dest_client, transformed)
                self._advance(result, PipelineState.VALIDATED, started, f"HTTP {result.validation_status}")

                if config.dry_run:
                    self.logger.info("Dry run: skipping dashboard creation")
                else:
                    started = time.time()
                    created = self.import_dashboard(dest_client, transformed)
                    result.new_dashboard_id = created.get('id')
                    result.new_dashboard_name = created.get('name', transformed.name)
                    if result.new_dashboard_id:
                        result.viewer_url = viewer_url(dest.url, result.new_dashboard_id)
                    self._advance(result, PipelineState.IMPORTED, started,
                                  f"{result.new_dashboard_id}")

        except DashboardCopyError as e:
            failed_at = result.state
            result.state = PipelineState.FAILED
            result.error = str(e)
            result.error_type = type(e).__name__
            self.summary.add_stage(PipelineState.FAILED.value, "FAILED",
                                   f"{type(e).__name__} after {failed_at.value}: {e}",
                                   time.time() - started)
            self.logger.error(f"❌ Dashboard copy failed after {failed_at.value}: {e}")

        self.summary.end_collection(
            state=result.state.value,
            dashboard_id=result.dashboard_id,
            new_dashboard_id=result.new_dashboard_id,
            viewer_url=result.viewer_url,
            error=result.error,
        )
        self.log_copy_complete(result.dashboard_id or "", result.success, result.state.value,
                               result.new_dashboard_id)
        return result
