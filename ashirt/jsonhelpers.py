"""Lenient JSON decoding helpers that never raise on malformed input."""

from __future__ import annotations

import json
from typing import Any, Callable, TypeVar

T = TypeVar("T")

JsonObject = dict[str, Any]


def _load(data: bytes | str) -> tuple[bool, Any]:
    try:
        return True, json.loads(data)
    except ValueError:
        return False, None


def parse_json_list(data: bytes | str, to_item: Callable[[JsonObject], T]) -> list[T]:
    """Decode a JSON array, converting each element with ``to_item``.

    Malformed input yields an empty list. A document that is not an array is
    treated as empty, and elements that are not objects are passed as ``{}``.
    """
    ok, doc = _load(data)
    if not ok or not isinstance(doc, list):
        return []
    return [to_item(value if isinstance(value, dict) else {}) for value in doc]


def parse_json_item(data: bytes | str, to_item: Callable[[JsonObject], T], default: T) -> T:
    """Decode a single JSON object with ``to_item``.

    Malformed input yields ``default``. A document that is not an object is
    passed to ``to_item`` as ``{}``.
    """
    ok, doc = _load(data)
    if not ok:
        return default
    return to_item(doc if isinstance(doc, dict) else {})