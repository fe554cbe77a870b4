"""Tests for JSON utility functions."""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from circlr.core.utils.json import dumps_json, read_json, write_json


@pytest.fixture
def temp_json_file(tmp_path):
    """Create a temporary JSON file path."""
    return tmp_path / "test.json"


def test_write_and_read_json(temp_json_file):
    """Test writing and reading JSON files."""
    data = {
        "string": "value",
        "number": 42,
        "float": 3.14,
        "bool": True,
        "list": [1, 2, 3],
        "nested": {"key": "value"},
    }

    write_json(temp_json_file, data)

    assert read_json(temp_json_file) == data


def test_write_json_creates_parent_dirs(tmp_path):
    """Test that write_json creates parent directories."""
    nested_path = tmp_path / "subdir" / "nested" / "test.json"

    write_json(nested_path, {"test": "value"})

    assert nested_path.exists()
    assert read_json(nested_path) == {"test": "value"}


def test_read_json_rejects_non_object(temp_json_file):
    """Top-level arrays are not accepted."""
    temp_json_file.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(ValueError, match="Expected JSON object"):
        read_json(temp_json_file)


def test_dumps_json_handles_numpy_sets_and_paths():
    """Non-JSON types are converted instead of failing."""
    payload = {
        "matrix": np.eye(2),
        "count": np.int64(3),
        "scale": np.float64(0.5),
        "skipped": frozenset({4, 2}),
        "path": Path("out") / "placements.json",
    }

    data = json.loads(dumps_json(payload))

    assert data["matrix"] == [[1.0, 0.0], [0.0, 1.0]]
    assert data["count"] == 3
    assert data["scale"] == 0.5
    assert data["skipped"] == [2, 4]
    assert data["path"] == str(Path("out") / "placements.json")
