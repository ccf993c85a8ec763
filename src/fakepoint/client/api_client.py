"""
Fakepoint Management Client

HTTP client for the management API of a running Fakepoint server.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..common import get_api_url_from_env


logger = logging.getLogger("fakepoint.client")


class FakepointAPIError(Exception):
    """Non-success response from the management API."""

    def __init__(self, status_code: int, error: str):
        super().__init__(f"{status_code}: {error}")
        self.status_code = status_code
        self.error = error


class EndpointClient:
    """
    Client for creating, listing, editing, toggling and deleting endpoints.

    Example:
        client = EndpointClient('http://localhost:3001/api/management')
        endpoint = client.create_endpoint({
            'name': 'Get Users',
            'method': 'GET',
            'path': '/users',
            'response': {'status': 200, 'body': []}
        })
        client.toggle_endpoint(endpoint['id'])
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 10,
        max_retries: int = 3
    ):
        """
        Initialize the client.

        Args:
            base_url: Management API base URL (defaults to FAKEPOINT_API_URL,
                then http://localhost:3001/api/management)
            timeout: Request timeout in seconds
            max_retries: Retries for connection errors and 5xx responses
        """
        self.base_url = (base_url or get_api_url_from_env()).rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create HTTP session with retry configuration."""
        session = requests.Session()
        session.headers.update({'Content-Type': 'application/json'})

        # POST and PATCH are not idempotent and are never retried
        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=0.5,
            status_forcelist=[502, 503, 504],
            allowed_methods=["GET", "PUT", "DELETE"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        response = self.session.request(
            method=method,
            url=url,
            json=payload,
            timeout=self.timeout
        )

        if response.status_code >= 400:
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and data.get('error'):
                error = data['error']
            else:
                error = response.text or response.reason
            raise FakepointAPIError(response.status_code, error)

        if response.status_code == 204 or not response.content:
            return None

        return response.json()

    def list_endpoints(self) -> List[Dict[str, Any]]:
        """Get all endpoints."""
        return self._request('GET', '/endpoints')

    def get_endpoint(self, endpoint_id: str) -> Dict[str, Any]:
        """Get a single endpoint."""
        return self._request('GET', f'/endpoints/{endpoint_id}')

    def create_endpoint(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new endpoint."""
        return self._request('POST', '/endpoints', data)

    def update_endpoint(self, endpoint_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Partially update an endpoint."""
        return self._request('PUT', f'/endpoints/{endpoint_id}', data)

    def delete_endpoint(self, endpoint_id: str):
        """Delete an endpoint."""
        self._request('DELETE', f'/endpoints/{endpoint_id}')

    def toggle_endpoint(self, endpoint_id: str) -> Dict[str, Any]:
        """Enable or disable an endpoint."""
        return self._request('PATCH', f'/endpoints/{endpoint_id}/toggle')
