"""
Fakepoint Client Module

Python access to a running Fakepoint server's management API.
"""

from .api_client import EndpointClient, FakepointAPIError
from .forms import EndpointForm

__all__ = [
    'EndpointClient',
    'FakepointAPIError',
    'EndpointForm',
]
