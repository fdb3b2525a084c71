"""
Tenant references and URL classification.

A tenant is addressed by a base URL and an API token. Only single-tenant
("env") endpoints are supported; multi-tenant ("cluster") endpoints are
rejected before any request that needs a single-tenant scope.
"""

import re
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, Field


TenantKind = Literal["env", "cluster"]

# <tenant-id>.live.<domain>, <tenant-id>.apps.<domain>, <tenant-id>.sprint.<domain>
SINGLE_TENANT_HOST_PATTERN = re.compile(r"^[a-z0-9-]+\.(live|apps|sprint)\.[a-z0-9.-]+$", re.IGNORECASE)
# https://<cluster-host>/e/<tenant-id>
SINGLE_TENANT_PATH_PATTERN = re.compile(r"^/e/[A-Za-z0-9-]+/?$")


def normalize_url(url: str) -> str:
    """Prepend https:// when the URL has no scheme and drop one trailing slash."""
    url = url.strip()
    if "://" not in url:
        url = f"https://{url}"
    if url.endswith("/"):
        url = url[:-1]
    return url


def classify_tenant(url: str) -> TenantKind:
    """Return 'env' for a single-tenant endpoint, 'cluster' otherwise."""
    parsed = urlparse(normalize_url(url))
    host = parsed.hostname or ""

    if SINGLE_TENANT_HOST_PATTERN.match(host):
        return "env"
    if SINGLE_TENANT_PATH_PATTERN.match(parsed.path):
        return "env"
    return "cluster"


class TenantRef(BaseModel):
    """Base URL and API token of one tenant."""

    url: str = Field(..., description="Normalized base URL of the tenant")
    token: str = Field(..., description="API token for the tenant")
    role: str = Field(default="destination", description="'source' or 'destination'")

    @classmethod
    def create(cls, url: str, token: str, role: str = "destination") -> "TenantRef":
        return cls(url=normalize_url(url), token=token, role=role)

    @property
    def kind(self) -> TenantKind:
        return classify_tenant(self.url)

    @property
    def headers(self) -> dict:
        """Get headers for API calls against this tenant."""
        return {
            'Authorization': f'Api-Token {self.token}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
