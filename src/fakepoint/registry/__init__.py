"""
Fakepoint Registry Module

In-memory storage of fake endpoint definitions.

This module provides:
- Endpoint, EndpointResponse data types
- EndpointPatch, ResponsePatch partial update types
- EndpointRegistry keyed store with active-match lookup
"""

from .models import (
    HTTP_METHODS,
    MIN_STATUS,
    MAX_STATUS,
    Endpoint,
    EndpointResponse,
    EndpointPatch,
    ResponsePatch,
    format_timestamp,
    utc_now
)
from .store import EndpointRegistry

__all__ = [
    # Models
    'HTTP_METHODS',
    'MIN_STATUS',
    'MAX_STATUS',
    'Endpoint',
    'EndpointResponse',
    'EndpointPatch',
    'ResponsePatch',
    'format_timestamp',
    'utc_now',

    # Store
    'EndpointRegistry',
]
