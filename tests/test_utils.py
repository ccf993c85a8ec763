"""
Tests for common utilities module.

Tests EndpointLoader seed file parsing and get_api_url_from_env().
"""

import json
import pytest

from fakepoint.common import DEFAULT_API_URL, EndpointLoader, get_api_url_from_env


class TestEndpointLoader:
    """Test suite for EndpointLoader."""

    def test_yaml_wrapped_format(self, tmp_path):
        """Test YAML mapping with an endpoints key."""
        seed = tmp_path / 'seed.yaml'
        seed.write_text(
            "endpoints:\n"
            "  - name: Get Users\n"
            "    method: GET\n"
            "    path: /users\n"
        )

        entries = EndpointLoader(str(seed)).load()

        assert entries == [{'name': 'Get Users', 'method': 'GET', 'path': '/users'}]

    def test_yml_list_format(self, tmp_path):
        """Test .yml suffix with a top-level list."""
        seed = tmp_path / 'seed.yml'
        seed.write_text("- name: A\n  method: POST\n  path: /a\n")

        entries = EndpointLoader(str(seed)).load()

        assert entries[0]['method'] == 'POST'

    def test_json_formats(self, tmp_path):
        """Test JSON list and wrapped formats."""
        entry = {'name': 'A', 'method': 'GET', 'path': '/a'}
        listed = tmp_path / 'list.json'
        wrapped = tmp_path / 'wrapped.json'
        listed.write_text(json.dumps([entry]))
        wrapped.write_text(json.dumps({'endpoints': [entry]}))

        assert EndpointLoader(str(listed)).load() == [entry]
        assert EndpointLoader(str(wrapped)).load() == [entry]

    def test_empty_file(self, tmp_path):
        """Test an empty YAML file yields no endpoints."""
        seed = tmp_path / 'empty.yaml'
        seed.write_text("")

        assert EndpointLoader(str(seed)).load() == []

    def test_file_not_found(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            EndpointLoader(str(tmp_path / 'missing.json')).load()

    def test_unknown_mapping(self, tmp_path):
        """Test a mapping without an endpoints key is rejected."""
        seed = tmp_path / 'seed.json'
        seed.write_text(json.dumps({'routes': []}))

        with pytest.raises(ValueError, match='routes'):
            EndpointLoader(str(seed)).load()

    def test_non_mapping_entry(self, tmp_path):
        """Test list entries must be mappings."""
        seed = tmp_path / 'seed.json'
        seed.write_text(json.dumps(['/users']))

        with pytest.raises(ValueError, match='Entry 0'):
            EndpointLoader(str(seed)).load()

    @pytest.mark.parametrize('raw_name', ['Yes', 'Off', '123'])
    def test_non_string_yaml_name(self, tmp_path, raw_name):
        """Test bare YAML scalars read as non-strings are reported per entry."""
        seed = tmp_path / 'seed.yaml'
        seed.write_text(f"- name: {raw_name}\n  method: GET\n  path: /a\n")

        with pytest.raises(ValueError, match='Entry 0 .* non-string name'):
            EndpointLoader(str(seed)).load()

    def test_quoted_yaml_name(self, tmp_path):
        """Test quoting keeps a boolean-looking name as a string."""
        seed = tmp_path / 'seed.yaml'
        seed.write_text("- name: \"Off\"\n  method: GET\n  path: /a\n")

        assert EndpointLoader(str(seed)).load()[0]['name'] == 'Off'

    def test_invalid_syntax(self, tmp_path):
        """Test unparseable content raises ValueError."""
        seed = tmp_path / 'seed.json'
        seed.write_text('{"endpoints": [')

        with pytest.raises(ValueError, match='Could not parse'):
            EndpointLoader(str(seed)).load()

    def test_scalar_content(self, tmp_path):
        """Test scalar documents are rejected."""
        seed = tmp_path / 'seed.yaml'
        seed.write_text("just a string\n")

        with pytest.raises(ValueError, match='str'):
            EndpointLoader(str(seed)).load()


class TestGetApiUrl:
    """Test suite for get_api_url_from_env()."""

    def test_default(self, monkeypatch):
        """Test default when the variable is unset."""
        monkeypatch.delenv('FAKEPOINT_API_URL', raising=False)

        assert get_api_url_from_env() == DEFAULT_API_URL

    def test_env_value(self, monkeypatch):
        """Test the environment variable is used when set."""
        monkeypatch.setenv('FAKEPOINT_API_URL', 'http://elsewhere/api/management')

        assert get_api_url_from_env() == 'http://elsewhere/api/management'

    def test_empty_env_value(self, monkeypatch):
        """Test an empty variable falls back to the default."""
        monkeypatch.setenv('FAKEPOINT_API_URL', '')

        assert get_api_url_from_env('http://fallback') == 'http://fallback'
