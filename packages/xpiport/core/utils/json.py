"""JSON read/write helpers with Path support."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def _json_default(obj: Any) -> str:
    """Fallback serializer: Path and anything else unknown become strings."""
    return str(obj)


def write_json(path: str | Path, obj: Any) -> None:
    """Write object to JSON file with pretty formatting.

    Args:
        path: Output file path (parent directories are created)
        obj: Object to serialize; Paths are written as strings
    """
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    path_obj.write_text(
        json.dumps(obj, indent=2, ensure_ascii=False, default=_json_default),
        encoding="utf-8",
    )


def read_json(path: str | Path) -> dict[str, Any]:
    """Read and parse a JSON file."""
    with Path(path).open("r", encoding="utf-8") as f:
        return json.load(f)
