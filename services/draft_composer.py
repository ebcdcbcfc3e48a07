from __future__ import annotations

import base64
import re

from models.draft import DraftRequest, RawDraft

CRLF = "\r\n"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _header_value(value: str | None) -> str:
    # A raw line break in a value would start a new header.
    return _LINE_BREAK.sub(" ", value or "")


def build_message(request: DraftRequest) -> str:
    """Render the reply as RFC 822 text with CRLF line endings."""

    reference = _header_value(request.message_id)
    lines = [
        f"To: {_header_value(request.to)}",
        f"Subject: {_header_value(request.subject)}",
        f"In-Reply-To: {reference}",
        f"References: {reference}",
        "",
        _LINE_BREAK.sub(CRLF, request.body or ""),
    ]
    return CRLF.join(lines)


def encode_raw(message: str) -> str:
    """URL-safe base64 of the UTF-8 message with trailing padding removed."""

    encoded = base64.urlsafe_b64encode(message.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def compose_draft(request: DraftRequest) -> RawDraft:
    message = build_message(request)
    return RawDraft(thread_id=request.thread_id, message=message, raw=encode_raw(message))
