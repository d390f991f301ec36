"""Data transfer objects exchanged with the ASHIRT API server."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .jsonhelpers import parse_json_item, parse_json_list
from .models import Tag


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _to_int64(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return round(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def _dump(obj: dict[str, Any]) -> bytes:
    return (json.dumps(obj, indent=4, sort_keys=True, ensure_ascii=False) + "\n").encode("utf-8")


@dataclass
class AShirtError:
    """An error reported by the server."""

    error: str = ""

    @classmethod
    def parse(cls, data: bytes | str) -> AShirtError:
        """Parse an error response; malformed data yields an empty error."""
        return parse_json_item(data, lambda obj: cls(error=_str(obj.get("error"))), cls())


@dataclass
class CheckConnection:
    """The result of a connection check."""

    ok: bool = False
    parsed_correctly: bool = False

    @classmethod
    def _from_json(cls, obj: dict[str, Any]) -> CheckConnection:
        if "ok" not in obj:
            return cls()
        return cls(ok=obj["ok"] is True, parsed_correctly=True)

    @classmethod
    def parse(cls, data: bytes | str) -> CheckConnection:
        """Parse a connection check response."""
        return parse_json_item(data, cls._from_json, cls())


class OperationStatus(IntEnum):
    """The lifecycle stage of an operation."""

    PLANNING = 0
    ACTIVE = 1
    COMPLETE = 2


def _status(value: Any) -> OperationStatus | int:
    raw = _to_int(value)
    try:
        return OperationStatus(raw)
    except ValueError:
        return raw


@dataclass
class Operation:
    """An operation visible to the user."""

    name: str = ""
    slug: str = ""
    num_users: int = 0
    status: OperationStatus | int = OperationStatus.PLANNING

    @classmethod
    def _from_json(cls, obj: dict[str, Any]) -> Operation:
        return cls(
            name=_str(obj.get("name")),
            slug=_str(obj.get("slug")),
            num_users=_to_int(obj.get("numUsers")),
            status=_status(obj.get("status")),
        )

    @classmethod
    def parse(cls, data: bytes | str) -> Operation:
        """Parse a single operation; malformed data yields an empty operation."""
        return parse_json_item(data, cls._from_json, cls())

    @classmethod
    def parse_list(cls, data: bytes | str) -> list[Operation]:
        """Parse a list of operations; malformed data yields an empty list."""
        return parse_json_list(data, cls._from_json)

    def to_json(self) -> bytes:
        """Return the JSON body used to create this operation."""
        return _dump({"slug": self.slug, "name": self.name})


def create_operation_json(name: str, slug: str) -> bytes:
    """Return the JSON body that creates an operation with ``name`` and ``slug``."""
    return Operation(name=name, slug=slug).to_json()


@dataclass
class ServerTag:
    """A tag as known to the server."""

    name: str = ""
    color_name: str = ""
    id: int = 0

    @classmethod
    def _from_json(cls, obj: dict[str, Any]) -> ServerTag:
        return cls(
            name=_str(obj.get("name")),
            color_name=_str(obj.get("colorName")),
            id=_to_int64(obj.get("id")),
        )

    @classmethod
    def parse(cls, data: bytes | str) -> ServerTag:
        """Parse a single tag; malformed data yields an empty tag."""
        return parse_json_item(data, cls._from_json, cls())

    @classmethod
    def parse_list(cls, data: bytes | str) -> list[ServerTag]:
        """Parse a list of tags; malformed data yields an empty list."""
        return parse_json_list(data, cls._from_json)

    def to_json(self) -> bytes:
        """Return the JSON body used to create this tag."""
        return _dump({"colorName": self.color_name, "name": self.name})

    @classmethod
    def from_model_tag(cls, tag: Tag, color_name: str) -> ServerTag:
        """Build a server tag from a local tag and a colour name."""
        return cls(name=tag.tag_name, color_name=color_name)