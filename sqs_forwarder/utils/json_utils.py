# Copyright 2025 Loopper-AI
# JSON serialization utilities

from __future__ import annotations

import json
import math
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number {text} is out of range")
    return value


def to_compact_json(value: Any) -> str:
    """
    Serialize without insignificant whitespace.

    Non-ASCII characters are written as ``\\uXXXX`` escapes.

    Args:
        value: JSON-serializable value

    Returns:
        Compact JSON text, e.g. ``{"a":1}``

    Raises:
        ValueError: value contains NaN or an infinite float
    """
    return json.dumps(value, separators=(",", ":"), allow_nan=False, default=str)


def reserialize(raw: str) -> str | None:
    """
    Parse JSON text and serialize it again in compact form.

    A JSON ``null`` document yields None (no request body).

    Raises:
        ValueError: raw is not valid JSON, including ``NaN``/``Infinity``
            tokens and numbers too large for a float
    """
    parsed = json.loads(raw, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    if parsed is None:
        return None
    return to_compact_json(parsed)
