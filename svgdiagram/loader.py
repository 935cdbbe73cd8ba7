"""Reading diagram documents from disk."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .errors import SourceReadError
from .models import DiagramDocument, parse_document


def read_source(path: Path) -> dict[str, Any]:
    """Parse the YAML (or JSON, which is valid YAML) document at ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceReadError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise SourceReadError(path, f"not valid UTF-8: {exc.reason}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SourceReadError(path, f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise SourceReadError(path, "top-level value must be a mapping")
    return data


def load_document(path: Path) -> tuple[dict[str, Any], DiagramDocument]:
    """Raw mapping plus the validated document.

    Raises SourceReadError for unreadable input and MalformedRequestError
    when the mapping does not describe a valid diagram.
    """
    data = read_source(Path(path))
    return data, parse_document(data)
