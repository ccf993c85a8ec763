"""
Fakepoint Common Utilities

Shared utilities and helpers used across Fakepoint modules.
"""

from .utils import DEFAULT_API_URL, EndpointLoader, get_api_url_from_env

__all__ = [
    'DEFAULT_API_URL',
    'EndpointLoader',
    'get_api_url_from_env',
]
