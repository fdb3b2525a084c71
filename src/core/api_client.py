"""
HTTP API client for a tenant's configuration API.
"""

import time
from typing import Dict, Any, Optional
import httpx
import structlog

from .errors import APIError, TransportError
from .tenant import TenantRef


def parse_error_body(response: httpx.Response) -> Dict[str, Any]:
    """
    Extract code and message from a platform error body.

    The platform answers failures with ``{"error": {"code": ..., "message": ...}}``,
    optionally with a ``constraintViolations`` list. Bodies that don't follow
    that shape fall back to the raw response text.
    """
    try:
        error_data = response.json()
    except ValueError:
        return {
            'code': response.status_code,
            'message': response.text or response.reason_phrase,
            'violations': [],
            'data': {"message": response.text},
        }

    error = error_data.get('error') if isinstance(error_data, dict) else None
    if not isinstance(error, dict):
        return {
            'code': response.status_code,
            'message': str(error_data),
            'violations': [],
            'data': error_data,
        }

    violations = []
    for violation in error.get('constraintViolations') or []:
        if not isinstance(violation, dict):
            violations.append(str(violation))
            continue
        path = violation.get('path')
        message = violation.get('message', '')
        violations.append(f"{path}: {message}" if path else message)

    return {
        'code': error.get('code', response.status_code),
        'message': error.get('message', ''),
        'violations': violations,
        'data': error_data,
    }


class TenantClient:
    """HTTP client bound to one tenant."""

    def __init__(self, tenant: TenantRef, verify_tls: bool = True,
                 transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize API client.

        Args:
            tenant: Tenant to connect to
            verify_tls: Verify the server's TLS certificate
            transport: Optional httpx transport (used by tests)
        """
        self.tenant = tenant
        self.base_url = tenant.url
        self.logger = structlog.get_logger(f"api_client_{tenant.role}")

        self.client = httpx.Client(
            base_url=self.base_url,
            headers=tenant.headers,
            timeout=30.0,
            verify=verify_tls,
            transport=transport,
        )

    def request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request.

        Args:
            method: HTTP method
            endpoint: API endpoint relative to the tenant base URL
            **kwargs: Additional arguments for httpx request

        Returns:
            HTTP response (2xx only)

        Raises:
            TransportError: The endpoint could not be reached
            APIError: The platform answered with a non-2xx status
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        start_time = time.time()

        try:
            response = self.client.request(method, endpoint, **kwargs)
        except httpx.RequestError as e:
            self.logger.error(
                "API request error",
                method=method,
                url=url,
                response_time_ms=round((time.time() - start_time) * 1000, 2),
                error=str(e)
            )
            raise TransportError(f"Request error: {e}", url=url) from e

        response_time = time.time() - start_time

        if response.is_success:
            self.logger.info(
                "API request completed",
                method=method,
                url=url,
                status_code=response.status_code,
                response_time_ms=round(response_time * 1000, 2)
            )
            return response

        error = parse_error_body(response)
        error_message = f"API request failed: {method} {url} returned {response.status_code}"
        if error['message']:
            error_message += f" - {error['code']}: {error['message']}"
        if error['violations']:
            error_message += f" - Violations: {'; '.join(error['violations'])}"

        self.logger.error(
            "API request failed",
            method=method,
            url=url,
            status_code=response.status_code,
            response_time_ms=round(response_time * 1000, 2),
            error_code=error['code'],
            error_message=error['message'],
            response_text=response.text[:500]
        )

        raise APIError(
            error_message,
            status_code=response.status_code,
            error_code=error['code'],
            error_message=error['message'],
            response_data=error['data']
        )

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError:
            raise APIError(
                f"Invalid JSON in response from {response.request.method} {response.request.url}",
                status_code=response.status_code,
                response_data={"message": response.text[:500]}
            )

    def get(self, endpoint: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """Make GET request."""
        response = self.request("GET", endpoint, params=params)
        return self._json(response)

    def post(self, endpoint: str, json_data: Optional[Any] = None) -> Dict[str, Any]:
        """Make POST request."""
        response = self.request("POST", endpoint, json=json_data)
        if not response.content:
            return {}
        return self._json(response)

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
