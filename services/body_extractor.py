from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional

from models.mime_part import MimeContainer, MimePart

LOGGER = logging.getLogger(__name__)
MAX_BODY_CHARS = 2000
PLAIN_TEXT = "text/plain"


def decode_base64url(data: str) -> Optional[str]:
    """Decode base64url (or standard base64) text, with or without padding.

    Returns None when the payload is not valid base64 or not valid UTF-8.
    """

    normalized = data.strip().replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True).decode("utf-8")
    except (binascii.Error, ValueError, UnicodeDecodeError) as exc:
        LOGGER.debug("Discarding undecodable body data: %s", exc)
        return None


def truncate_body(text: str, limit: int = MAX_BODY_CHARS) -> str:
    return text[:limit]


def extract_body(part: MimePart, snippet: Optional[str], max_depth: int = 1) -> str:
    """Return the best plain-text body for a message, truncated.

    Preference order: the top-level inline data, then the first ``text/plain``
    child with inline data, then ``snippet``. Only direct children are scanned
    unless ``max_depth`` is raised, in which case nested containers are
    searched depth-first.
    """

    text = decode_base64url(part.data) if part.data else None
    if text is None:
        text = _first_plain_text(part, max_depth)
    if text is None:
        text = snippet or ""
    return truncate_body(text)


def _first_plain_text(part: MimePart, depth: int) -> Optional[str]:
    if depth < 1 or not isinstance(part, MimeContainer):
        return None
    for child in part.children:
        if child.mime_type == PLAIN_TEXT and child.data:
            return decode_base64url(child.data)
        if depth > 1 and isinstance(child, MimeContainer):
            nested = _first_plain_text(child, depth - 1)
            if nested is not None:
                return nested
    return None
