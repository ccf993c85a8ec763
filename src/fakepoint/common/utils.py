"""
Fakepoint Common Utilities

Shared helpers for loading endpoint seed files and reading client settings.
"""

import json
import os
from pathlib import Path
from typing import List, Dict, Any, Optional

import yaml


DEFAULT_API_URL = 'http://localhost:3001/api/management'


def get_api_url_from_env(default: str = DEFAULT_API_URL) -> str:
    """
    Resolve the management API base URL for clients.

    Returns:
        FAKEPOINT_API_URL if set, otherwise ``default``
    """
    return os.environ.get('FAKEPOINT_API_URL') or default


class EndpointLoader:
    """
    Loader for endpoint seed files.

    Handles YAML (.yaml/.yml) and JSON files in two shapes:
    - Format 1: {"endpoints": [...]}  (wrapped format)
    - Format 2: [...]                 (direct list format)

    Each entry is a create request, as accepted by POST /endpoints.

    Example:
        loader = EndpointLoader("endpoints.yaml")
        for entry in loader.load():
            print(entry['method'], entry['path'])
    """

    YAML_SUFFIXES = ('.yaml', '.yml')

    def __init__(self, file_path: str):
        """
        Initialize endpoint loader.

        Args:
            file_path: Path to seed file
        """
        self.file_path = Path(file_path)

    def load(self) -> List[Dict[str, Any]]:
        """
        Load endpoint entries from the seed file.

        Returns:
            List of create request dictionaries

        Raises:
            FileNotFoundError: If the seed file doesn't exist
            ValueError: If the content can't be parsed or has the wrong shape
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"Seed file not found: {self.file_path}")

        with open(self.file_path, 'r', encoding='utf-8') as f:
            try:
                if self.file_path.suffix.lower() in self.YAML_SUFFIXES:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise ValueError(f"Could not parse {self.file_path}: {e}")

        if isinstance(data, dict):
            if 'endpoints' not in data:
                raise ValueError(
                    f"Unexpected format in {self.file_path}. "
                    f"Expected a list or a mapping with an 'endpoints' key. "
                    f"Found keys: {list(data.keys())}"
                )
            data = data['endpoints']

        if data is None:
            return []

        if not isinstance(data, list):
            raise ValueError(
                f"Unexpected format in {self.file_path}. "
                f"Expected a list of endpoints, got {type(data).__name__}"
            )

        for i, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise ValueError(f"Entry {i} in {self.file_path} is not a mapping")
            # YAML reads bare Yes/No/On/Off as booleans
            name = entry.get('name')
            if name is not None and not isinstance(name, str):
                raise ValueError(
                    f"Entry {i} in {self.file_path} has a non-string name {name!r}; "
                    f"quote it in the file"
                )

        return data
