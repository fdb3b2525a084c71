from __future__ import annotations

import json
from typing import Any

import httpx

from core.api_client import TenantClient
from core.tenant import TenantRef


ALL_SCOPES = ("DataExport", "ReadConfig", "WriteConfig")


class FakeTenant:
    """In-memory stand-in for a tenant's configuration API."""

    def __init__(
        self,
        *,
        version: str = "1.190.0",
        scopes: tuple[str, ...] = ALL_SCOPES,
        dashboards: dict[str, dict[str, Any]] | None = None,
    ):
        self.version = version
        self.scopes = list(scopes)
        self.dashboards = dict(dashboards or {})
        self.requests: list[tuple[str, str, Any]] = []
        self.validator_response: tuple[int, Any] = (204, None)
        self.create_response: tuple[int, Any] | None = None
        self.unreachable = False

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.requests]

    def created_bodies(self) -> list[Any]:
        return [
            body
            for method, path, body in self.requests
            if method == "POST" and path.endswith("/api/config/v1/dashboards")
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.requests.append((request.method, path, body))

        if request.method == "GET" and path.endswith("/api/v1/config/clusterversion"):
            return httpx.Response(200, json={"version": self.version})

        if request.method == "POST" and path.endswith("/api/v1/tokens/lookup"):
            return httpx.Response(200, json={"scopes": self.scopes})

        if request.method == "POST" and path.endswith("/api/config/v1/dashboards/validator"):
            status, payload = self.validator_response
            if payload is None:
                return httpx.Response(status)
            return httpx.Response(status, json=payload)

        if request.method == "POST" and path.endswith("/api/config/v1/dashboards"):
            if self.create_response is not None:
                status, payload = self.create_response
                return httpx.Response(status, json=payload)
            name = (body or {}).get("dashboardMetadata", {}).get("name")
            return httpx.Response(201, json={"id": "new-dashboard-id", "name": name})

        if request.method == "GET" and "/api/config/v1/dashboards/" in path:
            dashboard_id = path.rsplit("/", 1)[-1]
            if dashboard_id in self.dashboards:
                return httpx.Response(200, json=self.dashboards[dashboard_id])
            return httpx.Response(
                404,
                json={"error": {"code": 404, "message": f"Dashboard {dashboard_id} not found"}},
            )

        return httpx.Response(404, json={"error": {"code": 404, "message": "Unknown endpoint"}})


def fake_client(tenant: TenantRef, fake: FakeTenant) -> TenantClient:
    return TenantClient(tenant, transport=httpx.MockTransport(fake.handler))


