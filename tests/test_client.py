"""
Tests for Fakepoint Management Client

Tests the requests-based client including:
- Base URL resolution from arguments and environment
- Request construction for each operation
- Error mapping to FakepointAPIError
- Round trip against the real app through TestClient
"""

import pytest
from unittest.mock import Mock, patch

from fastapi.testclient import TestClient

from fakepoint.client import EndpointClient, FakepointAPIError
from fakepoint.common import DEFAULT_API_URL


def make_response(status_code=200, data=None, content=b'x', text='', reason='OK'):
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.content = content
    response.text = text
    response.reason = reason
    if isinstance(data, Exception):
        response.json.side_effect = data
    else:
        response.json.return_value = data
    return response


class TestClientConfiguration:
    """Test base URL and session setup."""

    def test_default_base_url(self, monkeypatch):
        """Test the default management URL."""
        monkeypatch.delenv('FAKEPOINT_API_URL', raising=False)

        client = EndpointClient()

        assert client.base_url == DEFAULT_API_URL

    def test_env_override(self, monkeypatch):
        """Test FAKEPOINT_API_URL overrides the default."""
        monkeypatch.setenv('FAKEPOINT_API_URL', 'http://mock:9000/api/management/')

        client = EndpointClient()

        assert client.base_url == 'http://mock:9000/api/management'

    def test_explicit_base_url(self, monkeypatch):
        """Test an explicit argument wins over the environment."""
        monkeypatch.setenv('FAKEPOINT_API_URL', 'http://ignored')

        client = EndpointClient('http://localhost:4000/_admin')

        assert client.base_url == 'http://localhost:4000/_admin'

    def test_retry_adapter_mounted(self):
        """Test the retry adapter covers http and https."""
        client = EndpointClient('http://localhost:3001/api/management', max_retries=5)

        adapter = client.session.get_adapter('http://localhost:3001')

        assert adapter.max_retries.total == 5
        assert 'POST' not in adapter.max_retries.allowed_methods


class TestClientRequests:
    """Test each operation against a mocked session."""

    @patch('fakepoint.client.api_client.requests.Session')
    def test_list_endpoints(self, mock_session_class):
        """Test listing issues GET /endpoints."""
        mock_session = Mock()
        mock_session.request.return_value = make_response(data=[{'id': '1'}])
        mock_session_class.return_value = mock_session

        client = EndpointClient('http://localhost:3001/api/management')
        result = client.list_endpoints()

        assert result == [{'id': '1'}]
        kwargs = mock_session.request.call_args.kwargs
        assert kwargs['method'] == 'GET'
        assert kwargs['url'] == 'http://localhost:3001/api/management/endpoints'

    @patch('fakepoint.client.api_client.requests.Session')
    def test_create_sends_json(self, mock_session_class):
        """Test create posts the payload as JSON."""
        mock_session = Mock()
        mock_session.request.return_value = make_response(201, data={'id': 'new'})
        mock_session_class.return_value = mock_session

        client = EndpointClient('http://api')
        result = client.create_endpoint({'name': 'x'})

        assert result == {'id': 'new'}
        kwargs = mock_session.request.call_args.kwargs
        assert kwargs['method'] == 'POST'
        assert kwargs['json'] == {'name': 'x'}

    @patch('fakepoint.client.api_client.requests.Session')
    def test_update_toggle_and_get_urls(self, mock_session_class):
        """Test id-based operations build the right URLs."""
        mock_session = Mock()
        mock_session.request.return_value = make_response(data={'id': 'abc'})
        mock_session_class.return_value = mock_session

        client = EndpointClient('http://api')
        client.get_endpoint('abc')
        client.update_endpoint('abc', {'name': 'y'})
        client.toggle_endpoint('abc')

        calls = [(c.kwargs['method'], c.kwargs['url']) for c in mock_session.request.call_args_list]
        assert calls == [
            ('GET', 'http://api/endpoints/abc'),
            ('PUT', 'http://api/endpoints/abc'),
            ('PATCH', 'http://api/endpoints/abc/toggle')
        ]

    @patch('fakepoint.client.api_client.requests.Session')
    def test_delete_returns_none(self, mock_session_class):
        """Test delete handles the empty 204 response."""
        mock_session = Mock()
        mock_session.request.return_value = make_response(204, content=b'')
        mock_session_class.return_value = mock_session

        client = EndpointClient('http://api')

        assert client.delete_endpoint('abc') is None
        mock_session.request.return_value.json.assert_not_called()

    @patch('fakepoint.client.api_client.requests.Session')
    def test_error_uses_server_message(self, mock_session_class):
        """Test JSON error bodies become FakepointAPIError."""
        mock_session = Mock()
        mock_session.request.return_value = make_response(
            409, data={'error': 'Endpoint with this path and method already exists'}
        )
        mock_session_class.return_value = mock_session

        client = EndpointClient('http://api')

        with pytest.raises(FakepointAPIError) as exc_info:
            client.create_endpoint({'name': 'x'})

        assert exc_info.value.status_code == 409
        assert exc_info.value.error == 'Endpoint with this path and method already exists'

    @patch('fakepoint.client.api_client.requests.Session')
    def test_error_without_json(self, mock_session_class):
        """Test non-JSON error bodies fall back to the text."""
        mock_session = Mock()
        mock_session.request.return_value = make_response(
            502, data=ValueError('no json'), text='Bad Gateway'
        )
        mock_session_class.return_value = mock_session

        client = EndpointClient('http://api')

        with pytest.raises(FakepointAPIError) as exc_info:
            client.list_endpoints()

        assert exc_info.value.status_code == 502
        assert exc_info.value.error == 'Bad Gateway'


class TestClientAgainstServer:
    """Test the client against the real app."""

    def test_round_trip(self, client, users_request):
        """Test the client drives the management API end to end."""
        api = EndpointClient('http://testserver/api/management')
        api.session = client

        created = api.create_endpoint(users_request)
        toggled = api.toggle_endpoint(created['id'])
        listed = api.list_endpoints()

        assert toggled['enabled'] is False
        assert [e['id'] for e in listed] == [created['id']]

        api.delete_endpoint(created['id'])

        with pytest.raises(FakepointAPIError) as exc_info:
            api.get_endpoint(created['id'])
        assert exc_info.value.status_code == 404
