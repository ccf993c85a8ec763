"""
Fakepoint Endpoint Form

Client-side draft of an endpoint as typed by a user: headers and body are
raw JSON text until the form validates.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..registry import HTTP_METHODS, MIN_STATUS, MAX_STATUS


@dataclass
class EndpointForm:
    """
    Raw form fields for creating or editing an endpoint.

    Example:
        form = EndpointForm(name='Get Users', path='/users', body='[{"id": 1}]')
        errors = form.validate()
        if not errors:
            client.create_endpoint(form.to_request())
    """

    name: str = ""
    method: str = "GET"
    path: str = ""
    status: int = 200
    headers: str = "{}"
    body: str = "{}"

    @classmethod
    def from_endpoint(cls, endpoint: Dict[str, Any]) -> 'EndpointForm':
        """Prefill a form from an endpoint as returned by the management API."""
        response = endpoint.get('response', {})
        return cls(
            name=endpoint.get('name', ''),
            method=endpoint.get('method', 'GET'),
            path=endpoint.get('path', ''),
            status=response.get('status', 200),
            headers=json.dumps(response.get('headers') or {}, indent=2),
            body=json.dumps(response.get('body'), indent=2)
        )

    def validate(self) -> Dict[str, str]:
        """
        Check every field.

        Returns:
            Mapping of field name to error message; empty when valid
        """
        errors = {}

        if not self.name.strip():
            errors['name'] = 'Name is required'

        if self.method.upper() not in HTTP_METHODS:
            errors['method'] = f"Method must be one of {', '.join(HTTP_METHODS)}"

        if not self.path.strip():
            errors['path'] = 'Path is required'
        elif not self.path.strip().startswith('/'):
            errors['path'] = 'Path must start with /'

        if not isinstance(self.status, int) or not MIN_STATUS <= self.status <= MAX_STATUS:
            errors['status'] = f'Status code must be between {MIN_STATUS} and {MAX_STATUS}'

        headers = self._parse_json(self.headers)
        if headers is _INVALID:
            errors['headers'] = 'Headers must be valid JSON'
        elif not isinstance(headers, dict):
            errors['headers'] = 'Headers must be a JSON object'

        if self._parse_json(self.body) is _INVALID:
            errors['body'] = 'Response body must be valid JSON'

        return errors

    def to_request(self) -> Dict[str, Any]:
        """
        Build a create/update request body.

        Raises:
            ValueError: If the form does not validate
        """
        errors = self.validate()
        if errors:
            raise ValueError('; '.join(f"{k}: {v}" for k, v in errors.items()))

        return {
            'name': self.name.strip(),
            'method': self.method.upper(),
            'path': self.path.strip(),
            'response': {
                'status': self.status,
                'headers': json.loads(self.headers),
                'body': json.loads(self.body)
            }
        }

    @staticmethod
    def _parse_json(text: Optional[str]) -> Any:
        try:
            return json.loads(text)
        except (TypeError, ValueError):
            return _INVALID


_INVALID = object()
