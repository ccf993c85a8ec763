"""
Fakepoint Endpoint Models

Data types for fake endpoint definitions and the partial updates applied to them.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


HTTP_METHODS = ('GET', 'POST', 'PUT', 'DELETE', 'PATCH')

MIN_STATUS = 100
MAX_STATUS = 599


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision.

    Example:
        format_timestamp(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        # '2024-01-02T03:04:05.000Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class EndpointResponse:
    """Canned response served for a matched endpoint."""

    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'status': self.status,
            'headers': dict(self.headers),
            'body': copy.deepcopy(self.body),
        }


@dataclass
class Endpoint:
    """
    A stored fake endpoint definition.

    The (path, method) pair is the matching key. Disabled endpoints stay
    listed and editable but are never served.
    """

    id: str
    name: str
    method: str
    path: str
    response: EndpointResponse
    enabled: bool = True
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def matches(self, path: str, method: str) -> bool:
        """Exact, case-sensitive key comparison. Ignores ``enabled``."""
        return self.path == path and self.method == method

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape served by the management API."""
        return {
            'id': self.id,
            'name': self.name,
            'method': self.method,
            'path': self.path,
            'response': self.response.to_dict(),
            'enabled': self.enabled,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }


_UNSET = object()


@dataclass
class ResponsePatch:
    """Sub-fields of a response to merge over an existing one."""

    status: Optional[int] = None
    headers: Optional[Dict[str, str]] = None
    body: Any = _UNSET

    @property
    def has_body(self) -> bool:
        return self.body is not _UNSET

    def apply(self, response: EndpointResponse) -> EndpointResponse:
        """Return a new response with the provided sub-fields merged in."""
        return EndpointResponse(
            status=response.status if self.status is None else self.status,
            headers=dict(response.headers if self.headers is None else self.headers),
            body=copy.deepcopy(response.body if not self.has_body else self.body),
        )


@dataclass
class EndpointPatch:
    """
    Partial update for an endpoint.

    Only the fields declared here can be changed through an update; ``id``
    and ``created_at`` are never touched. ``None`` means "not provided".
    A ``body`` of JSON null is still a provided value, which is why
    ``ResponsePatch`` uses a sentinel for it.
    """

    name: Optional[str] = None
    method: Optional[str] = None
    path: Optional[str] = None
    enabled: Optional[bool] = None
    response: Optional[ResponsePatch] = None

    def apply(self, endpoint: Endpoint, updated_at: datetime) -> Endpoint:
        """Return a merged copy of ``endpoint`` stamped with ``updated_at``."""
        return Endpoint(
            id=endpoint.id,
            name=endpoint.name if self.name is None else self.name,
            method=endpoint.method if self.method is None else self.method,
            path=endpoint.path if self.path is None else self.path,
            response=endpoint.response if self.response is None else self.response.apply(endpoint.response),
            enabled=endpoint.enabled if self.enabled is None else self.enabled,
            created_at=endpoint.created_at,
            updated_at=updated_at,
        )
