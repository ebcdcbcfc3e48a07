from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union


@dataclass(slots=True, frozen=True)
class MimeLeaf:
    """A content part without children."""

    mime_type: str
    data: Optional[str] = None


@dataclass(slots=True, frozen=True)
class MimeContainer:
    """A multipart node. Gmail leaves ``data`` empty for these."""

    mime_type: str
    children: List["MimePart"] = field(default_factory=list)
    data: Optional[str] = None


MimePart = Union[MimeLeaf, MimeContainer]


def parse_mime_part(payload: Any) -> MimePart:
    """Build a MIME tree from a Gmail ``payload`` dict.

    Anything that is not a mapping becomes an empty leaf so callers never
    have to guard against malformed provider output.
    """

    if not isinstance(payload, Mapping):
        return MimeLeaf(mime_type="")
    mime_type = payload.get("mimeType") or ""
    body = payload.get("body")
    data = body.get("data") if isinstance(body, Mapping) else None
    if not isinstance(data, str) or not data:
        data = None
    parts = payload.get("parts")
    if isinstance(parts, list) and parts:
        return MimeContainer(
            mime_type=mime_type,
            children=[parse_mime_part(part) for part in parts],
            data=data,
        )
    return MimeLeaf(mime_type=mime_type, data=data)
