"""JSON file helpers shared by the catalog and the progress store."""
from __future__ import annotations

import json
import os
from pathlib import Path

from .errors import DataLoadError


def load_json(path: Path) -> object:
    """Decode ``path``; any missing, unreadable or malformed file is a DataLoadError."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"JSON file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path} at line {exc.lineno}: {exc.msg}") from exc


def write_json(path: Path, payload: object) -> None:
    """Atomically replace ``path`` with the JSON encoding of ``payload``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    os.replace(tmp_path, path)
