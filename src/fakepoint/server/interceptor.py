"""
Fakepoint Request Interceptor

Middleware that answers requests with the canned response of a matching
enabled endpoint before any route handler runs.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..registry import Endpoint, EndpointRegistry


logger = logging.getLogger("fakepoint.server")

# Framing headers are computed by the server, never copied from a definition
HEADERS_TO_SKIP = {'content-length', 'transfer-encoding', 'connection'}


@dataclass
class MatchResult:
    """Outcome of looking up a request in the registry."""

    matched: bool
    endpoint: Optional[Endpoint] = None
    reason: str = ""

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary."""
        return {
            'matched': self.matched,
            'reason': self.reason,
            'endpoint_id': self.endpoint.id if self.endpoint else None
        }


def request_path(request: Request) -> str:
    """
    The request path exactly as sent, percent-encoding included.

    Falls back to the decoded path when the server does not provide
    ``raw_path``.
    """
    raw_path = request.scope.get('raw_path')
    if not raw_path:
        return request.url.path
    return raw_path.split(b'?', 1)[0].decode('latin-1')


def is_management_path(path: str, management_prefix: str) -> bool:
    """True for the management prefix itself and anything below it."""
    prefix = management_prefix.rstrip('/')
    return path == prefix or path.startswith(prefix + '/')


def find_match(
    registry: EndpointRegistry,
    method: str,
    path: str,
    management_prefix: str
) -> MatchResult:
    """
    Decide whether a fake endpoint applies to a request.

    Args:
        registry: Registry to search
        method: Request method
        path: Request path, without query string
        management_prefix: Paths under this prefix are never matched

    Returns:
        MatchResult with the endpoint when one is enabled for (path, method)
    """
    if is_management_path(path, management_prefix):
        return MatchResult(matched=False, reason='management path')

    endpoint = registry.find_active_match(path, method)
    if endpoint is None:
        return MatchResult(matched=False, reason='no enabled endpoint')

    return MatchResult(matched=True, endpoint=endpoint, reason='exact path and method')


def build_response(endpoint: Endpoint) -> Response:
    """
    Render an endpoint's canned response.

    Headers are applied in mapping order. The body is JSON-serialized,
    except for statuses that must not carry one (1xx, 204, 304).
    """
    canned = endpoint.response
    headers = {
        key: value for key, value in canned.headers.items()
        if key.lower() not in HEADERS_TO_SKIP
    }

    if canned.status < 200 or canned.status in (204, 304):
        return Response(status_code=canned.status, headers=headers)

    return JSONResponse(content=canned.body, status_code=canned.status, headers=headers)


class EndpointInterceptor(BaseHTTPMiddleware):
    """
    Serve configured fake endpoints ahead of normal routing.

    Requests under the management prefix always pass through. Other requests
    are looked up by exact path and method; a match commits the canned
    response and no route handler runs.
    """

    def __init__(self, app, registry: EndpointRegistry, management_prefix: str = "/api/management"):
        super().__init__(app)
        self.registry = registry
        self.management_prefix = management_prefix

    async def dispatch(self, request: Request, call_next):
        method = request.method
        path = request_path(request)

        result = find_match(self.registry, method, path, self.management_prefix)

        if result.matched:
            endpoint = result.endpoint
            logger.debug(f"Matched {method} {path} -> {endpoint.id} ({endpoint.name})")
            return build_response(endpoint)

        logger.debug(f"No match for {method} {path}: {result.reason}")
        return await call_next(request)
