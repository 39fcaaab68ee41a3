"""Content-derived cluster identifiers."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable

CLUSTER_ID_PREFIX = "cluster_"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def generate_cluster_id(member_ids: Iterable[str]) -> str:
    """Derive a stable id from a membership set.

    Members are deduplicated and sorted before hashing, so the id
    depends only on *which* questions are in the cluster.  The first
    64 bits of a SHA-256 digest are rendered in base36.
    """
    canonical = json.dumps(sorted(set(member_ids)), separators=(",", ":"))
    digest = hashlib.sha256(canonical.encode("utf-8")).digest()
    return CLUSTER_ID_PREFIX + _to_base36(int.from_bytes(digest[:8], "big"))


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    chars: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        chars.append(_BASE36[rem])
    return "".join(reversed(chars))
