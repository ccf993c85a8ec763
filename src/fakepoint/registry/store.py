"""
Fakepoint Endpoint Registry

In-memory keyed collection of fake endpoint definitions.

The registry performs no validation; the management layer checks input and
uniqueness before calling it. It holds no locks and assumes requests are
handled one at a time on a single event loop.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from .models import Endpoint, EndpointPatch, utc_now


logger = logging.getLogger("fakepoint.registry")


class EndpointRegistry:
    """
    Owner of all endpoint state for the lifetime of the process.

    Endpoints are kept in insertion order. When more than one enabled
    endpoint shares a (path, method) key, the first one inserted wins.

    Example:
        registry = EndpointRegistry()
        registry.create(endpoint)

        match = registry.find_active_match('/users', 'GET')
        if match:
            print(match.response.status)
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize an empty registry.

        Args:
            clock: Callable returning the current time, used to stamp
                ``updated_at`` on every update (defaults to UTC now)
        """
        self.clock = clock or utc_now
        self._endpoints: Dict[str, Endpoint] = {}

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, endpoint_id: object) -> bool:
        return endpoint_id in self._endpoints

    def list_all(self) -> List[Endpoint]:
        """Return every endpoint, enabled or not."""
        return list(self._endpoints.values())

    def get_by_id(self, endpoint_id: str) -> Optional[Endpoint]:
        return self._endpoints.get(endpoint_id)

    def find_active_match(self, path: str, method: str) -> Optional[Endpoint]:
        """
        Find the enabled endpoint serving a request.

        Path and method are compared exactly: no case folding, no
        trailing-slash handling, no query string.

        Args:
            path: Request path
            method: Request method

        Returns:
            First enabled endpoint with this key, or None
        """
        for endpoint in self._endpoints.values():
            if endpoint.enabled and endpoint.matches(path, method):
                return endpoint
        return None

    def find_by_key(
        self,
        path: str,
        method: str,
        exclude_id: Optional[str] = None,
        enabled_only: bool = False
    ) -> Optional[Endpoint]:
        """
        Find any endpoint with this (path, method) key.

        Args:
            path: Endpoint path
            method: Endpoint method
            exclude_id: Skip the endpoint with this id
            enabled_only: Only consider enabled endpoints

        Returns:
            First endpoint with this key, or None
        """
        for endpoint in self._endpoints.values():
            if endpoint.id == exclude_id:
                continue
            if enabled_only and not endpoint.enabled:
                continue
            if endpoint.matches(path, method):
                return endpoint
        return None

    def create(self, endpoint: Endpoint) -> Endpoint:
        """Store a fully-formed endpoint under its id and return it."""
        self._endpoints[endpoint.id] = endpoint
        logger.debug(f"Stored endpoint {endpoint.id}: {endpoint.method} {endpoint.path}")
        return endpoint

    def update(self, endpoint_id: str, patch: EndpointPatch) -> Optional[Endpoint]:
        """
        Merge a partial update into an existing endpoint.

        Top-level fields present in the patch replace the stored ones. A
        response patch only replaces the response sub-fields it carries.

        Args:
            endpoint_id: Id of the endpoint to update
            patch: Fields to change

        Returns:
            The merged endpoint, or None if the id is unknown
        """
        existing = self._endpoints.get(endpoint_id)
        if existing is None:
            return None

        updated = patch.apply(existing, updated_at=self.clock())
        self._endpoints[endpoint_id] = updated
        return updated

    def delete(self, endpoint_id: str) -> bool:
        """Remove an endpoint. Returns whether it existed."""
        return self._endpoints.pop(endpoint_id, None) is not None

    def clear(self):
        """Remove every endpoint."""
        self._endpoints.clear()
