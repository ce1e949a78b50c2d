"""Pytest configuration and fixtures."""

import pytest
import tempfile
import json
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_users_json():
    """Array-of-objects JSON used by most transform tests."""
    return {
        "users": [
            {"id": 1, "name": "Alice", "age": 30, "active": True},
            {"id": 2, "name": "Bob", "age": 25, "active": False},
            {"id": 3, "name": "Carol", "age": 35, "active": True},
        ],
        "meta": {"total": 3}
    }


@pytest.fixture
def sample_users_text(sample_users_json):
    """The users JSON as indented text."""
    return json.dumps(sample_users_json, indent=2)


@pytest.fixture
def sample_nested_json():
    """Nested JSON with arrays at several depths."""
    return {
        "orders": [
            {"id": "o1", "items": [{"sku": "a", "qty": 2}, {"sku": "b", "qty": 1}]},
            {"id": "o2", "items": []},
        ],
        "tags": ["x", "y"],
        "owner": {"name": "Dana", "emails": ["d@example.com"]}
    }


@pytest.fixture
def input_file(temp_dir, sample_users_json):
    """JSON input written to disk for CLI tests."""
    path = temp_dir / "input.json"
    path.write_text(json.dumps(sample_users_json), encoding='utf-8')
    return path


@pytest.fixture
def script_file(temp_dir):
    """Transform script written to disk for CLI tests."""
    path = temp_dir / "transform.py"
    path.write_text('console.log("users", len(data["users"]))\n'
                    'return [u["name"] for u in data["users"] if u["active"]]\n', encoding='utf-8')
    return path
