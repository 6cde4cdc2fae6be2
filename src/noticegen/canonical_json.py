"""Stable hashing of the dependency list in a notices document.

``entries_hash`` lets consumers tell whether two notice documents cover the
same dependencies without comparing ``generated_at`` or formatting.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """Compact JSON with sorted keys and raw UTF-8, identical for equal payloads."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def entries_hash(dependencies: list[dict[str, Any]]) -> str:
    """SHA-256 hex digest of the canonical form of the ``dependencies`` list."""
    return hashlib.sha256(canonical_dumps(dependencies).encode("utf-8")).hexdigest()
