"""Small disk persistence helpers shared by the ledger and report writer."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict


def _temp_path(path: Path) -> Path:
    """Return the sibling temp file used while writing ``path``."""
    return path.with_name(path.name + ".tmp")


def atomic_write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` without ever exposing a torn file.

    The content goes to a temp file next to the destination first and is then
    renamed over it. ``os.replace`` is atomic on the same filesystem, so a
    reader sees either the old file or the new one.

    Args:
        path: Destination file
        text: Full file contents

    Raises:
        OSError: If the temp file cannot be written or renamed
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = _temp_path(path)
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)


def atomic_write_json(path: Path, payload: Dict[str, Any]) -> None:
    """Serialize ``payload`` with pretty formatting and write it atomically.

    Args:
        path: Destination file
        payload: JSON-serializable dictionary
    """
    serialized = json.dumps(payload, indent=2)
    atomic_write_text(path, serialized + "\n")


def read_json(path: Path) -> Dict[str, Any]:
    """Load a JSON object from disk.

    Returns:
        dict: Parsed contents (empty dict if the file is blank)

    Raises:
        OSError: If the file cannot be read
        ValueError: If the contents are not a JSON object
    """
    raw = Path(path).read_text(encoding="utf-8")
    if not raw.strip():
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return data
