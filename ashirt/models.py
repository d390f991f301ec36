"""Local evidence and tag records."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from datetime import datetime

_NULL_STRING = 0xFFFFFFFF
_LENGTH = struct.Struct(">I")
_IDS = struct.Struct(">qq")


@dataclass
class Tag:
    """A tag attached to a piece of evidence."""

    id: int = 0
    server_tag_id: int = 0
    tag_name: str = ""
    evidence_id: int = 0

    def pack(self) -> bytes:
        """Serialise the name, id and server tag id in big-endian stream form."""
        name = self.tag_name.encode("utf-16-be")
        return _LENGTH.pack(len(name)) + name + _IDS.pack(self.id, self.server_tag_id)

    @classmethod
    def unpack(cls, data: bytes) -> Tag:
        """Read a tag written by :meth:`pack`. Raises ValueError on malformed data."""
        try:
            (length,) = _LENGTH.unpack_from(data, 0)
            offset = _LENGTH.size
            if length == _NULL_STRING:
                name = ""
            else:
                if length % 2 or offset + length > len(data):
                    raise ValueError("truncated or malformed tag name")
                name = data[offset:offset + length].decode("utf-16-be")
                offset += length
            tag_id, server_tag_id = _IDS.unpack_from(data, offset)
        except struct.error as exc:
            raise ValueError(f"truncated tag data: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ValueError(f"malformed tag name: {exc}") from exc
        return cls(id=tag_id, server_tag_id=server_tag_id, tag_name=name)


@dataclass
class Evidence:
    """A captured piece of evidence as stored locally."""

    id: int = 0
    path: str = ""
    operation_slug: str = ""
    description: str = ""
    error_text: str = ""
    content_type: str = ""
    recorded_date: datetime | None = None
    upload_date: datetime | None = None
    tags: list[Tag] = field(default_factory=list)