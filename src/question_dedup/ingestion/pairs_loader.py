"""JSON loaders for similarity pairs and stored clusters.

This is the boundary where externally produced data is validated into
``SimilarityPair`` / ``QuestionCluster`` values.
"""

import json
from pathlib import Path

from pydantic import BaseModel, TypeAdapter, ValidationError

from question_dedup.models.cluster import QuestionCluster
from question_dedup.models.similarity import SimilarityPair

_pairs_adapter = TypeAdapter(list[SimilarityPair])
_clusters_adapter = TypeAdapter(list[QuestionCluster])


def _read_json(file_path: Path) -> object:
    try:
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}") from e


def _unwrap(raw: object, key: str) -> object:
    """Accept either a bare list or an object wrapping it under ``key``."""
    if isinstance(raw, dict) and key in raw:
        return raw[key]
    return raw


def load_similarity_pairs(file_path: Path) -> list[SimilarityPair]:
    """Read and validate a JSON file of ``{aId, bId, score}`` records.

    The file may hold a bare list or ``{"pairs": [...]}``.

    Raises:
        ValueError: If the file contains invalid JSON or fails validation.
    """
    raw = _unwrap(_read_json(file_path), "pairs")
    try:
        return _pairs_adapter.validate_python(raw)
    except ValidationError as e:
        raise ValueError(f"Validation error for {file_path}: {e}") from e


def load_clusters(file_path: Path) -> list[QuestionCluster]:
    """Read and validate a JSON file of stored clusters.

    The file may hold a bare list or ``{"clusters": [...]}``.

    Raises:
        ValueError: If the file contains invalid JSON or fails validation.
    """
    raw = _unwrap(_read_json(file_path), "clusters")
    try:
        return _clusters_adapter.validate_python(raw)
    except ValidationError as e:
        raise ValueError(f"Validation error for {file_path}: {e}") from e


def dump_models(models: list[BaseModel] | BaseModel) -> str:
    """Serialise models to indented JSON using their camelCase aliases."""
    if isinstance(models, BaseModel):
        payload = models.model_dump(mode="json", by_alias=True)
    else:
        payload = [m.model_dump(mode="json", by_alias=True) for m in models]
    return json.dumps(payload, indent=2, ensure_ascii=False)
