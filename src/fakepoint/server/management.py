"""
Fakepoint Management API

CRUD surface for fake endpoints. Every request body is validated and checked
for (path, method) conflicts here, before the registry is touched.
"""

import json
import logging
import uuid
from typing import Any, Dict, List

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from ..registry import (
    HTTP_METHODS,
    MIN_STATUS,
    MAX_STATUS,
    Endpoint,
    EndpointPatch,
    EndpointRegistry,
    EndpointResponse,
    ResponsePatch
)
from .errors import ConflictError, NotFoundError, ValidationError


logger = logging.getLogger("fakepoint.server")

MISSING_FIELDS_MESSAGE = 'Missing required fields: name, method, path'
CONFLICT_MESSAGE = 'Endpoint with this path and method already exists'
NOT_FOUND_MESSAGE = 'Endpoint not found'


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _parse_method(value: Any) -> str:
    if not isinstance(value, str) or value.upper() not in HTTP_METHODS:
        raise ValidationError(f"Invalid method: {value}. Must be one of {', '.join(HTTP_METHODS)}")
    return value.upper()


def _parse_path(value: Any) -> str:
    if _is_blank(value):
        raise ValidationError('Path is required')
    if not value.startswith('/'):
        raise ValidationError('Path must start with /')
    return value


def _parse_status(value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError('Status code must be an integer')
    if not MIN_STATUS <= value <= MAX_STATUS:
        raise ValidationError(f'Status code must be between {MIN_STATUS} and {MAX_STATUS}')
    return value


def _parse_headers(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        raise ValidationError('Response headers must be an object')
    for key, header_value in value.items():
        if not isinstance(header_value, str):
            raise ValidationError(f'Response header {key} must be a string')
    return dict(value)


def _require_object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(f'{what} must be a JSON object')
    return value


class EndpointManager:
    """
    Validation and conflict rules in front of an EndpointRegistry.

    Used by the management routes and by seed file loading, so both paths
    enforce the same rules.

    Example:
        manager = EndpointManager(EndpointRegistry())
        endpoint = manager.create({
            'name': 'Get Users',
            'method': 'GET',
            'path': '/users',
            'response': {'status': 200, 'body': [{'id': 1}]}
        })
        manager.toggle(endpoint.id)
    """

    def __init__(self, registry: EndpointRegistry):
        self.registry = registry

    def list_endpoints(self) -> List[Endpoint]:
        return self.registry.list_all()

    def get(self, endpoint_id: str) -> Endpoint:
        endpoint = self.registry.get_by_id(endpoint_id)
        if endpoint is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return endpoint

    def create(self, payload: Any, allow_enabled: bool = False) -> Endpoint:
        """
        Validate a create request and store the new endpoint.

        Args:
            payload: Decoded JSON body with name, method, path and an
                optional response object
            allow_enabled: Honor an `enabled` key in the payload (seed
                files); otherwise new endpoints are always enabled

        Returns:
            The stored endpoint, enabled, with a fresh id and timestamps

        Raises:
            ValidationError: Missing or invalid fields
            ConflictError: Any endpoint, enabled or not, already has this
                (path, method)
        """
        payload = _require_object(payload, 'Request body')

        if payload.get('name') is not None and not isinstance(payload['name'], str):
            raise ValidationError('Name must be a string')

        if _is_blank(payload.get('name')) or not payload.get('method') or _is_blank(payload.get('path')):
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        method = _parse_method(payload['method'])
        path = _parse_path(payload['path'])

        response_data = payload.get('response')
        if response_data is None:
            response_data = {}
        response_data = _require_object(response_data, 'Response')

        response = EndpointResponse(
            status=_parse_status(response_data.get('status', 200)),
            headers=_parse_headers(response_data.get('headers') or {}),
            body=response_data.get('body', {})
        )

        enabled = payload.get('enabled', True) if allow_enabled else True
        if not isinstance(enabled, bool):
            raise ValidationError('enabled must be a boolean')

        if self.registry.find_by_key(path, method) is not None:
            raise ConflictError(CONFLICT_MESSAGE)

        now = self.registry.clock()
        endpoint = Endpoint(
            id=str(uuid.uuid4()),
            name=payload['name'],
            method=method,
            path=path,
            response=response,
            enabled=enabled,
            created_at=now,
            updated_at=now
        )

        created = self.registry.create(endpoint)
        logger.info(f"Created endpoint {created.id}: {created.method} {created.path}")
        return created

    def parse_patch(self, payload: Any) -> EndpointPatch:
        """
        Build an EndpointPatch from an update body.

        Unknown keys (including ``id`` and timestamps) are ignored.

        Raises:
            ValidationError: A provided field is invalid
        """
        payload = _require_object(payload, 'Request body')
        patch = EndpointPatch()

        if 'name' in payload:
            if _is_blank(payload['name']):
                raise ValidationError('Name must be a non-empty string')
            patch.name = payload['name']

        if 'method' in payload:
            patch.method = _parse_method(payload['method'])

        if 'path' in payload:
            patch.path = _parse_path(payload['path'])

        if 'enabled' in payload:
            if not isinstance(payload['enabled'], bool):
                raise ValidationError('enabled must be a boolean')
            patch.enabled = payload['enabled']

        if payload.get('response') is not None:
            response_data = _require_object(payload['response'], 'Response')
            response_patch = ResponsePatch()
            if 'status' in response_data:
                response_patch.status = _parse_status(response_data['status'])
            if 'headers' in response_data:
                response_patch.headers = _parse_headers(response_data['headers'] or {})
            if 'body' in response_data:
                response_patch.body = response_data['body']
            patch.response = response_patch

        return patch

    def update(self, endpoint_id: str, payload: Any) -> Endpoint:
        """
        Apply a partial update.

        Raises:
            NotFoundError: Unknown id
            ValidationError: A provided field is invalid
            ConflictError: The new key belongs to another endpoint, or the
                endpoint would be enabled while another enabled endpoint
                serves the same key
        """
        existing = self.get(endpoint_id)
        patch = self.parse_patch(payload)
        return self._apply(existing, patch)

    def toggle(self, endpoint_id: str) -> Endpoint:
        """Flip ``enabled`` through the partial update path."""
        existing = self.get(endpoint_id)
        return self._apply(existing, EndpointPatch(enabled=not existing.enabled))

    def delete(self, endpoint_id: str):
        if not self.registry.delete(endpoint_id):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info(f"Deleted endpoint {endpoint_id}")

    def _apply(self, existing: Endpoint, patch: EndpointPatch) -> Endpoint:
        path = existing.path if patch.path is None else patch.path
        method = existing.method if patch.method is None else patch.method
        enabled = existing.enabled if patch.enabled is None else patch.enabled

        key_changed = (path, method) != (existing.path, existing.method)
        if key_changed and self.registry.find_by_key(path, method, exclude_id=existing.id):
            raise ConflictError(CONFLICT_MESSAGE)

        if enabled and self.registry.find_by_key(path, method, exclude_id=existing.id, enabled_only=True):
            raise ConflictError('Another enabled endpoint already serves this path and method')

        updated = self.registry.update(existing.id, patch)
        if updated is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        logger.info(
            f"Updated endpoint {updated.id}: {updated.method} {updated.path} "
            f"({'enabled' if updated.enabled else 'disabled'})"
        )
        return updated


def _reject_constant(name: str):
    raise ValidationError(f'Request body must be valid JSON ({name} is not allowed)')


async def _read_json(request: Request) -> Any:
    """
    Decode a JSON request body, mapping bad input to a 400.

    NaN and Infinity literals are rejected.
    """
    body = await request.body()
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except ValueError:
        raise ValidationError('Request body must be valid JSON')


def create_management_router(manager: EndpointManager) -> APIRouter:
    """
    Create the management API router.

    Args:
        manager: EndpointManager shared with the rest of the server

    Returns:
        APIRouter to mount under the management prefix
    """
    router = APIRouter()

    @router.get("/endpoints")
    async def list_endpoints():
        """List every endpoint, enabled or not."""
        return JSONResponse(content=[e.to_dict() for e in manager.list_endpoints()])

    @router.get("/endpoints/{endpoint_id}")
    async def get_endpoint(endpoint_id: str):
        """Get a single endpoint."""
        return JSONResponse(content=manager.get(endpoint_id).to_dict())

    @router.post("/endpoints")
    async def create_endpoint(request: Request):
        """Create a new endpoint."""
        payload = await _read_json(request)
        endpoint = manager.create(payload)
        return JSONResponse(content=endpoint.to_dict(), status_code=201)

    @router.put("/endpoints/{endpoint_id}")
    async def update_endpoint(endpoint_id: str, request: Request):
        """Partially update an endpoint."""
        manager.get(endpoint_id)
        payload = await _read_json(request)
        return JSONResponse(content=manager.update(endpoint_id, payload).to_dict())

    @router.delete("/endpoints/{endpoint_id}")
    async def delete_endpoint(endpoint_id: str):
        """Delete an endpoint."""
        manager.delete(endpoint_id)
        return Response(status_code=204)

    @router.patch("/endpoints/{endpoint_id}/toggle")
    async def toggle_endpoint(endpoint_id: str):
        """Enable or disable an endpoint."""
        return JSONResponse(content=manager.toggle(endpoint_id).to_dict())

    return router
