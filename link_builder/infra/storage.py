"""JSON file primitives used by both pipelines."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def read_json_file(path: Path) -> Any:
    """Load JSON from ``path``; ``OSError``/``JSONDecodeError`` propagate."""

    with path.open("r", encoding="utf-8") as stream:
        return json.load(stream)


def _dump_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_json_file(path: Path, payload: Any) -> None:
    """Serialize ``payload`` and atomically replace ``path`` with it.

    Readers see either the previous file or the complete new one.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    data = _dump_json(payload)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=str(path.parent), prefix=f".{path.name}.", delete=False
    ) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
        tmp_name = tmp.name
    try:
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def ensure_file(path: Path) -> None:
    """Create an empty placeholder file (and parents) if ``path`` is missing."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)


__all__ = ["ensure_file", "read_json_file", "write_json_file"]
