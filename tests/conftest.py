"""Shared test fixtures."""

import json
from pathlib import Path

import pytest


@pytest.fixture
def sample_pairs_json() -> list[dict]:
    """Two components: a triangle (q1-q3) and a pair (q4-q5), plus noise."""
    return [
        {"aId": "q1", "bId": "q2", "score": 0.9},
        {"aId": "q2", "bId": "q3", "score": 0.95},
        {"aId": "q1", "bId": "q3", "score": 0.85},
        {"aId": "q4", "bId": "q5", "score": 0.92},
        {"aId": "q5", "bId": "q6", "score": 0.4},
        {"aId": "q7", "bId": "q7", "score": 1.0},
    ]


@pytest.fixture
def sample_pairs_file(tmp_path: Path, sample_pairs_json: list[dict]) -> Path:
    """Write the sample pairs to a JSON file and return its path."""
    path = tmp_path / "pairs.json"
    path.write_text(json.dumps(sample_pairs_json), encoding="utf-8")
    return path
