# Copyright 2025 Loopper-AI
# Header file loading

from __future__ import annotations

import json
import logging

logger = logging.getLogger(__name__)


class HeaderFileError(ValueError):
    """Header file exists but is not a JSON object of strings."""


def load_headers(path: str) -> dict[str, str]:
    """
    Read request headers from a JSON file.

    The file is read on every call so edits take effect on the next request.

    Args:
        path: Path to a JSON object mapping header names to values

    Returns:
        Header mapping; empty when the file is missing, empty or ``null``

    Raises:
        HeaderFileError: invalid JSON, non-object root or non-string entries
    """
    try:
        with open(path, encoding="utf-8") as fh:
            raw = fh.read()
    except FileNotFoundError:
        logger.debug("Header file not found: path=%s", path)
        return {}

    if not raw.strip():
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HeaderFileError(f"Invalid JSON in header file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise HeaderFileError(f"Header file {path} must contain a JSON object")

    headers: dict[str, str] = {}
    for name, value in data.items():
        if not isinstance(value, str):
            raise HeaderFileError(f"Header {name!r} in {path} must be a string")
        headers[name] = value
    return headers
