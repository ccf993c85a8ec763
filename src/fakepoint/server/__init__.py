"""
Fakepoint Server Module

HTTP server functionality for serving fake endpoints.

This module provides:
- FastAPI-based server and composition root
- Request interceptor with exact (path, method) matching
- Management API with validation and conflict rules
- JSON error taxonomy
"""

from .app import FakepointServer, ServerConfig, create_server
from .interceptor import EndpointInterceptor, MatchResult, find_match, build_response
from .management import EndpointManager, create_management_router
from .errors import FakepointError, ValidationError, NotFoundError, ConflictError

__all__ = [
    # Server
    'FakepointServer',
    'ServerConfig',
    'create_server',

    # Interceptor
    'EndpointInterceptor',
    'MatchResult',
    'find_match',
    'build_response',

    # Management
    'EndpointManager',
    'create_management_router',

    # Errors
    'FakepointError',
    'ValidationError',
    'NotFoundError',
    'ConflictError',
]
