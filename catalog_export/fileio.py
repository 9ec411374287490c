"""File helpers.

Provides:
- JSON reading that tolerates missing/invalid files
- atomic writes for export artifacts (bytes or text)
"""

import json
import os
import tempfile
from typing import Any, Dict, Optional


def ensure_dir(path: str) -> None:
    """Create a directory (and parents) if missing."""
    if path:
        os.makedirs(path, exist_ok=True)


def read_json(path: str) -> Optional[Dict[str, Any]]:
    """Read JSON from disk; return None if missing or invalid."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None


def atomic_write_bytes(path: str, payload: bytes) -> None:
    """Atomically write ``payload`` by writing a temp file then renaming."""
    directory = os.path.dirname(path) or "."
    ensure_dir(directory)
    fd, tmp_path = tempfile.mkstemp(
        prefix=os.path.basename(path) + ".",
        suffix=".tmp",
        dir=directory,
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(tmp_path, path)
    finally:
        try:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        except OSError:
            pass


def atomic_write_text(path: str, text: str) -> None:
    atomic_write_bytes(path, text.encode("utf-8"))
