"""
Preflight compatibility checks run against a tenant before any dashboard is touched.

Three guards are provided:
- tenant shape: only single-tenant ("env") endpoints are accepted
- server version: 1.x servers must be at least a given minor version
- token scopes: the token must carry every scope the operation needs

Each guard returns a CheckResult; ``CompatibilityGuard.ensure`` turns a failed
result into a CompatibilityError.
"""

import re
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple
import structlog

from .api_client import TenantClient
from .errors import CompatibilityError
from .tenant import TenantRef, classify_tenant


DEFAULT_MINIMUM_VERSION = 176
PIPELINE_MINIMUM_VERSION = 182

SOURCE_REQUIRED_SCOPES = frozenset({"DataExport", "ReadConfig"})
DESTINATION_REQUIRED_SCOPES = frozenset({"DataExport", "WriteConfig"})

VERSION_ENDPOINT = "/api/v1/config/clusterversion"
TOKEN_LOOKUP_ENDPOINT = "/api/v1/tokens/lookup"

VERSION_COMPONENT_PATTERN = re.compile(r"\d+")


class CheckResult:
    """Result of a compatibility check."""

    def __init__(self, passed: bool, reason: str, details: Optional[Dict[str, Any]] = None):
        self.passed = passed
        self.reason = reason
        self.details = details or {}
        self.timestamp = datetime.now().isoformat()

    def __bool__(self) -> bool:
        return self.passed

    def __repr__(self) -> str:
        return f"CheckResult(passed={self.passed}, reason={self.reason!r})"


def parse_version(version: str) -> Tuple[int, ...]:
    """
    Parse a dotted version string such as '1.176.0' into integers.

    Parsing stops at the first component that doesn't start with a digit, so
    build suffixes like '1.182.105.20191120-143206' keep their numeric prefix.
    """
    parts = []
    for component in str(version).strip().split("."):
        match = VERSION_COMPONENT_PATTERN.match(component)
        if not match:
            break
        parts.append(int(match.group()))
        if match.end() != len(component):
            break

    if len(parts) < 2:
        raise CompatibilityError(f"Unrecognized server version: {version!r}", details={'version': version})
    return tuple(parts)


def check_tenant_kind(url: str) -> CheckResult:
    kind = classify_tenant(url)
    if kind == "cluster":
        return CheckResult(
            passed=False,
            reason=f"{url} looks like a cluster endpoint; use the tenant URL (https://<host>/e/<tenant-id>) instead",
            details={'url': url, 'kind': kind}
        )
    return CheckResult(passed=True, reason=f"{url} is a single-tenant endpoint", details={'url': url, 'kind': kind})


def check_version(version: str, minimum_version: int = DEFAULT_MINIMUM_VERSION) -> CheckResult:
    """
    Check a server version against a minimum 1.x minor version.

    Any major version other than 1 passes; the SaaS offering is always current.
    """
    parts = parse_version(version)
    major, minor = parts[0], parts[1]
    details = {'version': version, 'minimum_version': f"1.{minimum_version}"}

    if major == 1 and minor < minimum_version:
        return CheckResult(
            passed=False,
            reason=f"Server version {version} is too old, 1.{minimum_version} or newer is required",
            details=details
        )
    return CheckResult(passed=True, reason=f"Server version {version} is supported", details=details)


def check_scopes(scopes: Iterable[str], required_scopes: Iterable[str]) -> CheckResult:
    actual = set(scopes)
    required = set(required_scopes)
    missing = required - actual
    details = {
        'required_scopes': sorted(required),
        'token_scopes': sorted(actual),
        'missing_scopes': sorted(missing),
    }

    if missing:
        return CheckResult(
            passed=False,
            reason=(f"Token is missing required scopes {sorted(missing)}: "
                    f"required {sorted(required)}, token has {sorted(actual)}"),
            details=details
        )
    return CheckResult(passed=True, reason="Token carries all required scopes", details=details)


class CompatibilityGuard:
    """Runs the compatibility checks against one tenant."""

    def __init__(self, client: TenantClient):
        self.client = client
        self.tenant: TenantRef = client.tenant
        self.logger = structlog.get_logger(f"compatibility_{self.tenant.role}")

    def ensure(self, result: CheckResult) -> CheckResult:
        """Raise CompatibilityError when the check failed."""
        if not result.passed:
            self.logger.error(
                "Compatibility check failed",
                tenant=self.tenant.role,
                reason=result.reason,
                details=result.details
            )
            raise CompatibilityError(result.reason, details=result.details)

        self.logger.info("Compatibility check passed", tenant=self.tenant.role, reason=result.reason)
        return result

    def fetch_version(self) -> str:
        response = self.client.get(VERSION_ENDPOINT)
        version = response.get('version')
        if not version:
            raise CompatibilityError("Server did not report a version", details={'response': response})
        return version

    def fetch_scopes(self) -> set:
        response = self.client.post(TOKEN_LOOKUP_ENDPOINT, json_data={'token': self.tenant.token})
        return set(response.get('scopes') or [])

    def check_tenant_kind(self) -> CheckResult:
        return self.ensure(check_tenant_kind(self.tenant.url))

    def check_version(self, minimum_version: int = DEFAULT_MINIMUM_VERSION) -> CheckResult:
        return self.ensure(check_version(self.fetch_version(), minimum_version))

    def check_scopes(self, required_scopes: Iterable[str]) -> CheckResult:
        return self.ensure(check_scopes(self.fetch_scopes(), required_scopes))

    def run_all(self, required_scopes: Iterable[str],
                minimum_version: int = PIPELINE_MINIMUM_VERSION) -> None:
        """Tenant shape first so a cluster URL is rejected before any request is sent."""
        self.check_tenant_kind()
        self.check_version(minimum_version)
        self.check_scopes(required_scopes)
